"""
Document and output models

SourceDocument is what the read capability hands to the injector,
OutputFragment is the unit the PositionMapBuilder accumulates, and
ProcessResult is what a process() call returns.
"""

import os
from dataclasses import dataclass
from typing import Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from ..lib.sourcemap import SourceMap


@dataclass(frozen=True)
class SourceDocument:
    """
    A document read from disk (or memory), never mutated

    Attributes:
        path: Absolute, normalised path of the document
        contents: Raw bytes (str is accepted and used as-is). Anything else,
                  None included, is not byte-addressable content.
    """
    path: str
    contents: Union[bytes, str, None]

    @property
    def dirname(self) -> str:
        """Directory against which the document's relative references resolve"""
        return os.path.dirname(os.path.abspath(self.path))

    def isBuffer(self) -> bool:
        return isinstance(self.contents, (bytes, bytearray, str))

    def text_decode(self, encoding: str = "utf-8") -> str:
        """Decode contents to text with the given codec"""
        if not self.contents:
            return ""
        if isinstance(self.contents, str):
            return self.contents
        return bytes(self.contents).decode(encoding)


@dataclass(frozen=True)
class OutputFragment:
    """
    A piece of output text tagged with where it came from

    A fragment without originFile is an untagged literal (the newlines
    between lines); it advances the output cursor but is not mapped.

    Attributes:
        text: Emitted text
        originFile: Source path relative to the injector's cwd, or None
        originLine: 1-based line in the origin file
        originColumn: 0-based column in the origin file
    """
    text: str
    originFile: Optional[str] = None
    originLine: int = 0
    originColumn: int = 0

    @property
    def isMapped(self) -> bool:
        return self.originFile is not None


@dataclass
class ProcessResult:
    """
    Flattened text plus the mapping back to the original files

    Attributes:
        text: Concatenated output document
        positionMap: Source map answering output position -> origin
    """
    text: str
    positionMap: "SourceMap"
