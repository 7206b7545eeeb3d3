"""
Delimiter matcher

Locates the next directive in a line of text across all configured
delimiter definitions.

For each definition the first occurrence of its start pattern is located,
then its end pattern is searched strictly after the start match. A
definition yields at most one candidate. Among candidates the earliest
start wins; on equal starts the definition listed first wins.

Example:
    >>> matcher = DelimiterMatcher()
    >>> found = matcher.match_findNext("var a = /*! $file(a.js) */;", 0)
    >>> found.startIndex, found.rawString
    (8, '/*! $file(a.js) */')
"""

from typing import Iterable, List, Optional

from ..models.delimiters import DelimiterDefinition, BUILTIN_DELIMITERS
from ..models.matcher import DirectiveMatch, MatchSpan
from .options import OptionParser


class DelimiterMatcher:
    """
    Finds directives in a line using an ordered set of delimiter definitions
    """

    def __init__(
        self,
        delimiters: Optional[Iterable[DelimiterDefinition]] = None,
        option_parser: Optional[OptionParser] = None,
    ) -> None:
        """
        Args:
            delimiters: Ordered definitions (defaults to BUILTIN_DELIMITERS)
            option_parser: Parser for directive content
        """
        self.delimiters: List[DelimiterDefinition] = (
            list(delimiters) if delimiters is not None else list(BUILTIN_DELIMITERS)
        )
        self.option_parser = option_parser or OptionParser()

    def candidate_find(
        self, delimiter: DelimiterDefinition, line: str, offset: int
    ) -> Optional[DirectiveMatch]:
        """
        Match a single delimiter definition against line[offset:]

        Args:
            delimiter: Definition to try
            line: Full line being scanned
            offset: Offset where scanning starts

        Returns:
            DirectiveMatch with indices relative to the full line, or None if
            the start pattern or the end pattern after it is missing
        """
        contents = line[offset:]

        start_found = delimiter.start.search(contents)
        if not start_found:
            return None
        i0, i1 = start_found.start(), start_found.end()

        # End pattern is searched on the remainder, like the start pattern
        end_found = delimiter.end.search(contents[i1:])
        if not end_found:
            return None
        j0, j1 = i1 + end_found.start(), i1 + end_found.end()
        if j1 <= i0:
            # Zero-length directives can't be injected
            return None

        content = contents[i1:j0]
        return DirectiveMatch(
            startIndex=i0 + offset,
            endIndex=j1 + offset,
            rawString=contents[i0:j1],
            start=MatchSpan(i0 + offset, i1 + offset, start_found.group(0)),
            content=MatchSpan(i1 + offset, j0 + offset, content),
            end=MatchSpan(j0 + offset, j1 + offset, end_found.group(0)),
            parsedOptions=self.option_parser.parse(content, attributes=delimiter.type == "tag"),
            delimiter=delimiter,
        )

    def match_findNext(self, line: str, offset: int = 0) -> Optional[DirectiveMatch]:
        """
        Find the next directive in line starting at offset

        Args:
            line: Line of text (no newline characters)
            offset: Scan start offset within line

        Returns:
            Earliest DirectiveMatch, or None if nothing matches or offset
            is outside the line
        """
        if not line or offset < 0 or offset >= len(line):
            return None

        candidates: List[DirectiveMatch] = []
        for delimiter in self.delimiters:
            candidate = self.candidate_find(delimiter, line, offset)
            if candidate is not None:
                candidates.append(candidate)

        if not candidates:
            return None

        # min() keeps the first of equal keys, so definition order breaks ties
        return min(candidates, key=lambda match: match.startIndex)
