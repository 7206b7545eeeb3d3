"""
Recursive file injector

Flattens a document by replacing every directive with the (recursively
flattened) contents of the file it references, and records where every
piece of output text came from.

The document is walked line by line:

    text before the directive   -> emitted, mapped to the current file
    the directive               -> replaced by the referenced file's expansion
                                   (or by the ifAbsent substitute)
    text after the last match   -> emitted, mapped to the current file

A newline is emitted between lines (not after the last one); process()
adds a single trailing newline to the whole output. Trailing blank lines
of each document are dropped.

Example:
    >>> reader = MemoryReader({"/s/a.txt": "x $file(b.txt) z", "/s/b.txt": "y"})
    >>> injector = FileInjector(cwd="/s", reader=reader)
    >>> injector.process(reader.document_get("/s/a.txt")).text
    'x y z\\n'
"""

import os
import re
from typing import Callable, Iterable, List, Mapping, Optional, Union

from ..config import appsettings
from ..models.delimiters import DelimiterDefinition
from ..models.document import SourceDocument, ProcessResult
from ..models.matcher import DirectiveMatch
from ..models.options import IfAbsent, ParsedOptions
from .delimiters import delimiters_merge
from .errors import CyclicReferenceError, UnresolvedReferenceError, UnsupportedInputError
from .log import LOG
from .matcher import DelimiterMatcher
from .reader import FileSystemReader, Reader
from .sourcemap import PositionMapBuilder
from .transforms import TransformRegistry


class FileInjector:
    """
    Flattens file-injection directives and builds the position mapping

    An injector holds only configuration (delimiters, transforms, reader);
    each process() call owns its own PositionMapBuilder, so one injector can
    serve any number of documents.
    """

    def __init__(
        self,
        cwd: Optional[str] = None,
        delimiters: Optional[Iterable[DelimiterDefinition]] = None,
        transforms: Union[TransformRegistry, Mapping[str, Callable[[str], str]], None] = None,
        reader: Optional[Reader] = None,
        encoding: Optional[str] = None,
    ) -> None:
        """
        Args:
            cwd: Directory source paths in the mapping are made relative to
                 (defaults to the process working directory)
            delimiters: Extra definitions, appended after the built-in set
            transforms: A TransformRegistry, or a name -> function mapping
                        registered on top of the built-ins
            reader: Read capability (defaults to FileSystemReader)
            encoding: Document codec (defaults to appsettings.encoding)
        """
        self.cwd = os.path.realpath(cwd or os.getcwd())
        self.delimiters: List[DelimiterDefinition] = delimiters_merge(list(delimiters or []))
        if isinstance(transforms, TransformRegistry):
            self.transforms = transforms
        else:
            self.transforms = TransformRegistry(transforms)
        self.reader: Reader = reader or FileSystemReader()
        self.encoding = encoding or appsettings.encoding
        self.matcher = DelimiterMatcher(self.delimiters)

    def path_relative(self, path: str) -> str:
        """Path as recorded in the mapping: relative to cwd"""
        return os.path.relpath(os.path.realpath(path), self.cwd)

    @staticmethod
    def lines_split(text: str) -> List[str]:
        """
        Split text into lines, dropping trailing blank lines

        At least one line is always returned.

        Example:
            "a\\r\\nb\\n\\n  \\n" -> ["a", "b"]
        """
        lines = re.split(r"\r?\n", text)
        while len(lines) > 1 and not lines[-1].strip():
            lines.pop()
        return lines

    def process(
        self,
        document: SourceDocument,
        file: Optional[str] = None,
        encoding: Optional[str] = None,
    ) -> ProcessResult:
        """
        Flatten a document

        Args:
            document: The top-level document
            file: Output file name recorded in the map (defaults to the
                  document's path relative to cwd)
            encoding: Codec override for this call

        Returns:
            ProcessResult with the flattened text (ending in one newline)
            and its SourceMap

        Raises:
            UnsupportedInputError: A document has no bytes/text contents, or
                                   its bytes don't decode with the encoding
            UnresolvedReferenceError: A reference is missing and ifAbsent=fail
            CyclicReferenceError: A document ends up including itself
            TransformError: A named transform raised
        """
        if not document.isBuffer():
            raise UnsupportedInputError(
                f"Only bytes or text contents are supported ({document.path})"
            )

        LOG(f"Unfolding {self.path_relative(document.path)}", level=1)
        sink = PositionMapBuilder()
        self.unfold(document, encoding or self.encoding, sink)
        sink.newline_add()
        return sink.finalize(file or self.path_relative(document.path))

    def unfold(
        self,
        document: SourceDocument,
        encoding: str,
        sink: PositionMapBuilder,
        inheritedOptions: Optional[ParsedOptions] = None,
        chain: Optional[List[str]] = None,
    ) -> PositionMapBuilder:
        """
        Emit the expansion of one document into sink

        Args:
            document: Document to expand
            encoding: Codec for its bytes
            sink: Builder receiving fragments
            inheritedOptions: Options of the directive that referenced this
                              document (None for the top-level document)
            chain: Identities of the documents currently being expanded,
                   outermost first

        Returns:
            sink
        """
        chain = chain or []
        identity = os.path.realpath(document.path)
        relative = self.path_relative(document.path)
        if identity in chain:
            raise CyclicReferenceError(
                relative, [self.path_relative(path) for path in chain]
            )
        chain = chain + [identity]

        try:
            text = document.text_decode(encoding)
        except UnicodeDecodeError as e:
            raise UnsupportedInputError(f"{relative} is not valid {encoding} text: {e}") from e

        source = relative
        if inheritedOptions is not None and inheritedOptions.transform:
            text = self.transforms.apply(inheritedOptions.transform, text, relative)
            # A transformed expansion is recorded as a source of its own
            source = f"{relative}?transform={inheritedOptions.transform}"

        # The scanned text is what the mapping points into
        sink.source_set(source, text)

        lines = self.lines_split(text)
        LOG(f"Scanning {source} ({len(lines)} lines)", level=3)
        for i, line in enumerate(lines):
            self.line_unfold(line, i + 1, document, source, encoding, sink, chain)
            if i < len(lines) - 1:
                sink.newline_add()

        return sink

    def line_unfold(
        self,
        line: str,
        line_number: int,
        document: SourceDocument,
        source: str,
        encoding: str,
        sink: PositionMapBuilder,
        chain: List[str],
    ) -> None:
        """Emit one line, expanding every directive on it in order"""
        column = 0
        while column < len(line):
            found = self.matcher.match_findNext(line, column)
            j = found.startIndex if found else len(line)
            if column < j:
                sink.fragment_add(line[column:j], source, line_number, column)
            if found:
                self.directive_inject(found, line_number, document, source, encoding, sink, chain)
                j = found.endIndex
            column = j

    def directive_inject(
        self,
        found: DirectiveMatch,
        line_number: int,
        document: SourceDocument,
        source: str,
        encoding: str,
        sink: PositionMapBuilder,
        chain: List[str],
    ) -> None:
        """
        Replace one directive by its referenced document, or apply ifAbsent

        Raises:
            UnresolvedReferenceError: Reference unreadable and ifAbsent=fail
        """
        options = found.parsedOptions
        LOG(f"Match {found.rawString!r} at {source}:{line_number}:{found.startIndex}", level=3)

        subdocument = self.reader.read(options.path, document.dirname)
        if subdocument is not None:
            LOG(f"Injecting {options.path} into {source}:{line_number}", level=2)
            self.unfold(subdocument, encoding, sink, options, chain)
            return

        if options.ifAbsent is IfAbsent.FAIL:
            raise UnresolvedReferenceError(
                document.path, line_number, found.startIndex, options.path
            )
        if options.ifAbsent is IfAbsent.KEEP:
            LOG(f"Keeping unresolved {found.rawString!r} in {source}:{line_number}", level=2)
            sink.fragment_add(found.rawString, source, line_number, found.startIndex)
        else:
            LOG(f"Dropping unresolved {found.rawString!r} in {source}:{line_number}", level=2)
