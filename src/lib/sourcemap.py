"""
Position mapping for flattened documents

PositionMapBuilder accumulates output fragments in emission order and, on
finalize(), concatenates them into the output text while recording where
each mapped fragment starts. The result is a SourceMap (revision 3 source
map) with the full original text of every file embedded, so the mapping can
be replayed without re-reading the files.

Conventions (same as the source map format):
    - generated and original lines are 1-based
    - generated and original columns are 0-based
    - untagged fragments (the newlines between lines) advance the output
      cursor but produce no mapping entry
"""

import json
from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from ..models.document import OutputFragment, ProcessResult
from .log import LOG

BASE64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
VLQ_SHIFT = 5
VLQ_CONTINUATION = 1 << VLQ_SHIFT
VLQ_MASK = VLQ_CONTINUATION - 1


def vlq_encode(value: int) -> str:
    """
    Encode a signed integer as a Base64 VLQ string

    Example:
        >>> vlq_encode(0), vlq_encode(1), vlq_encode(-1), vlq_encode(16)
        ('A', 'C', 'D', 'gB')
    """
    vlq = ((-value) << 1) | 1 if value < 0 else value << 1
    encoded = []
    while True:
        digit = vlq & VLQ_MASK
        vlq >>= VLQ_SHIFT
        if vlq:
            digit |= VLQ_CONTINUATION
        encoded.append(BASE64_ALPHABET[digit])
        if not vlq:
            return ''.join(encoded)


@dataclass(frozen=True)
class Mapping:
    """
    One mapping entry: a run of output text and where it came from

    Attributes:
        generatedLine: Output line where the run starts (1-based)
        generatedColumn: Output column where the run starts (0-based)
        length: Number of characters in the run (not serialized)
        source: Origin file, relative path
        originalLine: Origin line (1-based)
        originalColumn: Origin column (0-based)
    """
    generatedLine: int
    generatedColumn: int
    length: int
    source: str
    originalLine: int
    originalColumn: int


@dataclass(frozen=True)
class OriginalPosition:
    source: str
    line: int
    column: int


class SourceMap:
    """
    Output position -> original position mapping

    Answers originalPosition_for() lookups and serializes to the revision 3
    JSON format with sourcesContent embedded.
    """

    def __init__(
        self,
        file: str,
        mappings: List[Mapping],
        sourcesContent: Dict[str, str],
    ) -> None:
        self.file = file
        self.mappings: List[Mapping] = sorted(
            mappings, key=lambda m: (m.generatedLine, m.generatedColumn)
        )
        self.sourcesContent: Dict[str, str] = dict(sourcesContent)

    @property
    def sources(self) -> List[str]:
        """Sources in registration order, plus any mapped but unregistered ones"""
        sources = list(self.sourcesContent)
        for mapping in self.mappings:
            if mapping.source not in sources:
                sources.append(mapping.source)
        return sources

    def mappings_encode(self) -> str:
        """
        Encode the entries as the VLQ "mappings" string

        Each generated line is separated by ';' and each segment on a line by
        ','. Segments carry 4 fields: generated column (relative to the
        previous segment on the same line), source index, original line and
        original column (all relative to the previous segment).
        """
        source_index = {source: i for i, source in enumerate(self.sources)}
        lines: List[str] = []
        segments: List[str] = []
        current_line = 1
        previous_column = 0
        previous_source = 0
        previous_line = 0
        previous_original_column = 0

        for mapping in self.mappings:
            while current_line < mapping.generatedLine:
                lines.append(','.join(segments))
                segments = []
                current_line += 1
                previous_column = 0

            index = source_index[mapping.source]
            segments.append(''.join((
                vlq_encode(mapping.generatedColumn - previous_column),
                vlq_encode(index - previous_source),
                vlq_encode(mapping.originalLine - 1 - previous_line),
                vlq_encode(mapping.originalColumn - previous_original_column),
            )))
            previous_column = mapping.generatedColumn
            previous_source = index
            previous_line = mapping.originalLine - 1
            previous_original_column = mapping.originalColumn

        lines.append(','.join(segments))
        return ';'.join(lines)

    def json_get(self) -> Dict[str, Any]:
        """Source map as a JSON-compatible dict"""
        sources = self.sources
        return {
            "version": 3,
            "file": self.file,
            "sources": sources,
            "sourcesContent": [self.sourcesContent.get(source) for source in sources],
            "names": [],
            "mappings": self.mappings_encode(),
        }

    def json_dump(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.json_get(), indent=indent, ensure_ascii=False)

    def originalPosition_for(self, line: int, column: int) -> Optional[OriginalPosition]:
        """
        Trace an output position back to its origin

        Args:
            line: Output line (1-based)
            column: Output column (0-based)

        Returns:
            OriginalPosition, or None when the position is not covered by a
            mapped fragment (e.g., a newline between lines)

        Example:
            If "abc" from a.txt line 2 column 4 was emitted at output 1:10,
            originalPosition_for(1, 11) is OriginalPosition("a.txt", 2, 5).
        """
        keys = [(m.generatedLine, m.generatedColumn) for m in self.mappings]
        i = bisect_right(keys, (line, column)) - 1
        if i < 0:
            return None
        mapping = self.mappings[i]
        offset = column - mapping.generatedColumn
        if mapping.generatedLine != line or offset >= mapping.length:
            return None
        return OriginalPosition(
            source=mapping.source,
            line=mapping.originalLine,
            column=mapping.originalColumn + offset,
        )

    def __repr__(self) -> str:
        return f"SourceMap(file='{self.file}', sources={self.sources}, mappings={len(self.mappings)})"


class PositionMapBuilder:
    """
    Append-only accumulator threaded through the recursive unfold

    One instance is owned by a single process() call for its whole call tree.
    """

    def __init__(self) -> None:
        self.fragments: List[OutputFragment] = []
        self.sourcesContent: Dict[str, str] = {}

    def add(self, fragment: Union[OutputFragment, str]) -> "PositionMapBuilder":
        """
        Append a fragment; a bare string is an untagged literal

        Returns:
            self, so calls can be chained
        """
        if isinstance(fragment, str):
            fragment = OutputFragment(text=fragment)
        self.fragments.append(fragment)
        return self

    def fragment_add(self, text: str, originFile: str, originLine: int, originColumn: int) -> "PositionMapBuilder":
        """Append a mapped fragment"""
        return self.add(OutputFragment(text, originFile, originLine, originColumn))

    def newline_add(self) -> "PositionMapBuilder":
        """Append an untagged newline"""
        return self.add("\n")

    def source_set(self, source: str, content: str) -> None:
        """Record the full original text of a source file"""
        self.sourcesContent[source] = content

    def finalize(self, file: str) -> ProcessResult:
        """
        Concatenate fragments and build the position mapping

        Args:
            file: Name of the output file, recorded in the map

        Returns:
            ProcessResult with the output text and its SourceMap
        """
        parts: List[str] = []
        mappings: List[Mapping] = []
        line, column = 1, 0

        for fragment in self.fragments:
            if not fragment.text:
                continue
            parts.append(fragment.text)

            # A mapped fragment spanning newlines gets one entry per line
            for k, chunk in enumerate(fragment.text.split("\n")):
                if k > 0:
                    line += 1
                    column = 0
                if fragment.isMapped and chunk:
                    mappings.append(Mapping(
                        generatedLine=line,
                        generatedColumn=column,
                        length=len(chunk),
                        source=fragment.originFile,
                        originalLine=fragment.originLine + k,
                        originalColumn=fragment.originColumn if k == 0 else 0,
                    ))
                column += len(chunk)

        LOG(f"Finalized {len(self.fragments)} fragments into {len(mappings)} mappings", level=3)
        return ProcessResult(
            text=''.join(parts),
            positionMap=SourceMap(file, mappings, self.sourcesContent),
        )
