"""
Matcher-specific data models

Type-safe structures returned by DelimiterMatcher.match_findNext().
All indices are offsets within the line being scanned.
"""

from dataclasses import dataclass

from .delimiters import DelimiterDefinition
from .options import ParsedOptions


@dataclass(frozen=True)
class MatchSpan:
    """
    A located substring of the scanned line

    Attributes:
        startIndex: Offset where the substring starts
        endIndex: Offset just past the substring
        rawString: The substring itself
    """
    startIndex: int
    endIndex: int
    rawString: str


@dataclass
class DirectiveMatch:
    """
    Result of finding a directive in a line

    Attributes:
        startIndex: Offset where the whole directive starts
        endIndex: Offset just past the whole directive
        rawString: Full directive text, delimiters included
        start: Span matched by the delimiter's start pattern
        content: Span between the start and end patterns
        end: Span matched by the delimiter's end pattern
        parsedOptions: Options parsed from content.rawString
        delimiter: The definition that produced this match

    Example:
        For line "a $file(b.txt) c":
        startIndex=2, endIndex=14, rawString="$file(b.txt)",
        content=MatchSpan(8, 13, "b.txt")
    """
    startIndex: int
    endIndex: int
    rawString: str
    start: MatchSpan
    content: MatchSpan
    end: MatchSpan
    parsedOptions: ParsedOptions
    delimiter: DelimiterDefinition

    @property
    def contentStart(self) -> int:
        return self.content.startIndex

    @property
    def contentEnd(self) -> int:
        return self.content.endIndex

    @property
    def contentRaw(self) -> str:
        return self.content.rawString
