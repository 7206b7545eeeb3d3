"""
Delimiter definitions

A delimiter pairs a start pattern with an end pattern; the text between the
two is the directive content handed to the OptionParser. The built-in set
covers the bare $file(...) form, a tag form, and comment-wrapped variants
of both so directives can be hidden from whatever consumes the assembled
document.
"""

import re
from dataclasses import dataclass
from typing import List, Pattern


@dataclass(frozen=True)
class DelimiterDefinition:
    """
    Paired start/end patterns identifying a directive

    Attributes:
        type: Free-form kind of directive (e.g., "file", "tag")
        start: Pattern matching the opening token
        end: Pattern matching the closing token, searched after start

    Example:
        DelimiterDefinition(type="file", start=re.compile(r"\\$file\\("),
                            end=re.compile(r"\\)"))
        matches "$file(header.txt)" with content "header.txt"
    """
    type: str
    start: Pattern[str]
    end: Pattern[str]

    def __repr__(self) -> str:
        return (
            f"DelimiterDefinition(type='{self.type}', "
            f"start='{self.start.pattern}', end='{self.end.pattern}')"
        )


# Order matters: on equal start offsets the first listed definition wins
BUILTIN_DELIMITERS: List[DelimiterDefinition] = [
    # $file(...)
    DelimiterDefinition('file', re.compile(r'\$file\('), re.compile(r'\)')),
    # /*! $file(...) */
    DelimiterDefinition('file', re.compile(r'/\*!\s*\$file\('), re.compile(r'\)\s*\*/')),
    # //! $file(...)
    DelimiterDefinition('file', re.compile(r'//!\s*\$file\('), re.compile(r'\)')),
    # <!-- $file(...) -->
    DelimiterDefinition('file', re.compile(r'<!--\s*\$file\('), re.compile(r'\)\s*-->')),
    # <file path="..."> or <file path="..."/>
    DelimiterDefinition('tag', re.compile(r'<file\s+'), re.compile(r'\s*/?>')),
    # <!-- <file path="..."/> -->
    DelimiterDefinition('tag', re.compile(r'<!--\s*<file\s+'), re.compile(r'\s*/?>\s*-->')),
    # /*! <file path="..."/> */
    DelimiterDefinition('tag', re.compile(r'/\*!\s*<file\s+'), re.compile(r'\s*/?>\s*\*/')),
]
