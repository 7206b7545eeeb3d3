"""
Directive option models

Typed structures for the options written inside a directive, e.g.
$file(partials/header.html, ifAbsent=keep, transform=trim).
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


class IfAbsent(str, Enum):
    """
    Policy applied when a directive references a file that cannot be read
    """
    FAIL = "fail"      # abort the whole process call
    EMPTY = "empty"    # drop the directive, emit nothing
    KEEP = "keep"      # emit the directive text verbatim


@dataclass(frozen=True)
class OptionSpec:
    """
    Schema entry for a recognized directive option

    Attributes:
        name: Option key as written in the directive
        values: Allowed values; the first one is the fallback for anything
                outside the list. Empty means any string is accepted.
        description: Human-readable description
    """
    name: str
    values: Tuple[str, ...] = ()
    description: str = ""

    def value_coerce(self, value: str) -> str:
        """Map an out-of-range value onto the first allowed value"""
        if self.values and value not in self.values:
            return self.values[0]
        return value


OPTION_SCHEMA: Dict[str, OptionSpec] = {
    'ifAbsent': OptionSpec(
        name='ifAbsent',
        values=tuple(policy.value for policy in IfAbsent),
        description='What to do when the referenced file cannot be read',
    ),
    'transform': OptionSpec(
        name='transform',
        description='Name of a registered transform applied to the file text',
    ),
}


@dataclass
class ParsedOptions:
    """
    Result of parsing a directive's inner content

    Attributes:
        path: Referenced file (first unkeyed value, or an explicit path=)
        ifAbsent: Policy for unreadable references
        transform: Optional transform name looked up in the TransformRegistry
        extras: Unrecognized keys, kept as plain strings (flags have "")

    Example:
        Content "a.txt, ifAbsent=keep, lang=en" gives
        ParsedOptions(path="a.txt", ifAbsent=IfAbsent.KEEP,
                      transform=None, extras={"lang": "en"})
    """
    path: str = ""
    ifAbsent: IfAbsent = IfAbsent.FAIL
    transform: Optional[str] = None
    extras: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def options_fromDict(cls, raw: Dict[str, str]) -> "ParsedOptions":
        """
        Build ParsedOptions from already schema-coerced key/value pairs.

        Args:
            raw: Mapping of option keys to string values

        Returns:
            ParsedOptions with recognized keys typed and the rest in extras
        """
        extras = {
            key: value for key, value in raw.items()
            if key != 'path' and key not in OPTION_SCHEMA
        }
        return cls(
            path=raw.get('path', ''),
            ifAbsent=IfAbsent(
                OPTION_SCHEMA['ifAbsent'].value_coerce(raw.get('ifAbsent', IfAbsent.FAIL.value))
            ),
            transform=raw.get('transform') or None,
            extras=extras,
        )

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Look up any option by its directive key"""
        if key == 'path':
            return self.path
        if key == 'ifAbsent':
            return self.ifAbsent.value
        if key == 'transform':
            return self.transform if self.transform is not None else default
        return self.extras.get(key, default)
