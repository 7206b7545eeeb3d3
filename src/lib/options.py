r"""
Option parser for directive content

Turns the text between a directive's delimiters into ParsedOptions.

Grammar:
    content  := segment ("," segment)*
    segment  := key "=" value | value
    value    := text | "'" text "'" | '"' text '"'

- The first unkeyed segment is the path; later unkeyed segments are flags
  stored with an empty value.
- A literal separator inside a value is written escaped: \,
- Whitespace around segments, keys and values is ignored; empty segments
  are dropped. Parsing never fails.
- Tag content (<file path="a.txt" ifAbsent="keep"/>) may also separate
  attributes with whitespace.

Example:
    >>> OptionParser().parse("header.html, ifAbsent=keep").ifAbsent
    <IfAbsent.KEEP: 'keep'>
"""

import re
from typing import Dict, List, Optional

from ..config import appsettings
from ..models.options import OptionSpec, OPTION_SCHEMA, ParsedOptions


class OptionParser:
    """
    Best-effort parser for the key=value option language of directives
    """

    def __init__(
        self,
        schema: Optional[Dict[str, OptionSpec]] = None,
        separator: Optional[str] = None,
        placeholder: Optional[str] = None,
    ) -> None:
        """
        Args:
            schema: Recognized options and their allowed values
            separator: Segment separator (defaults to appsettings.separator)
            placeholder: Stand-in for escaped separators while splitting
        """
        self.schema = schema if schema is not None else OPTION_SCHEMA
        self.separator = separator or appsettings.separator
        self.placeholder = placeholder or appsettings.escaped_separator_placeholder
        self.separator_regex = re.compile(rf"\s*{re.escape(self.separator)}\s*")
        # Quoted values, or whitespace followed by a key=
        self.attributeGap_regex = re.compile(
            rf"""("[^"]*"|'[^']*')|\s+(?=[^\s='"{re.escape(self.separator)}]+\s*=)"""
        )

    def attributes_separate(self, content: str) -> str:
        """
        Turn whitespace between tag attributes into separators

        Quoted values are left untouched.

        Example:
            'path="a b.txt" ifAbsent=keep' -> 'path="a b.txt",ifAbsent=keep'
        """
        return self.attributeGap_regex.sub(
            lambda found: found.group(1) or self.separator, content
        )

    def segments_split(self, content: str) -> List[str]:
        r"""
        Split content on unescaped separators

        Escaped separators are swapped for the placeholder before splitting
        and restored (unescaped) afterwards.

        Example:
            "a.txt, transform=x\,y" -> ["a.txt", "transform=x,y"]
        """
        escaped = f"\\{self.separator}"
        protected = content.replace(escaped, self.placeholder)
        segments = [
            segment.replace(self.placeholder, self.separator).strip()
            for segment in self.separator_regex.split(protected)
        ]
        return [segment for segment in segments if segment]

    @staticmethod
    def quotes_strip(text: str) -> str:
        """Trim text and remove one matching pair of surrounding quotes"""
        text = text.strip()
        if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
            return text[1:-1]
        return text

    def parse(self, content: str, attributes: bool = False) -> ParsedOptions:
        """
        Parse directive content into options

        Args:
            content: Raw text between the start and end delimiters
            attributes: Content comes from a tag, so whitespace may also
                        separate attributes

        Returns:
            ParsedOptions; unknown keys land in extras, invalid enum values
            fall back to the first allowed value
        """
        raw: Dict[str, str] = {}
        content = content or ""
        if attributes:
            content = self.attributes_separate(content)

        for index, segment in enumerate(self.segments_split(content)):
            eq = segment.find('=')
            if eq > 0:
                key = self.quotes_strip(segment[:eq])
                value = self.quotes_strip(segment[eq + 1:])
            elif index == 0:
                key = 'path'
                value = self.quotes_strip(segment)
            else:
                key = self.quotes_strip(segment)
                value = ''

            if key in self.schema:
                value = self.schema[key].value_coerce(value)
            raw[key] = value

        return ParsedOptions.options_fromDict(raw)
