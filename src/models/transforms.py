"""
Transform specification and metadata models

Defines the structure and categories of named transforms a directive can
apply to an injected file's text (transform=<name>).
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List


class TransformCategory(Enum):
    """
    Categories of transforms

    Used for organization and listing.
    """
    TEXT = "text"              # trim
    ESCAPE = "escape"          # html-escape, json-string
    ASCII_ART = "ascii_art"    # figlet-*, cowsay-*
    HIGHLIGHT = "highlight"    # highlight-*
    USER = "user"              # supplied by the caller


# handler(text, variant) -> text; variant is the wildcard suffix or ""
TransformHandler = Callable[[str, str], str]


@dataclass
class TransformSpec:
    """
    Specification for a named transform

    Attributes:
        name: Transform name as written after transform=
        category: Category for organization
        description: Human-readable description
        handler: Function (text, variant) -> text
        is_wildcard: Whether the name is a prefix pattern (e.g., figlet-*)
        examples: Example directive strings
    """
    name: str
    category: TransformCategory
    description: str
    handler: TransformHandler
    is_wildcard: bool = False
    examples: List[str] = field(default_factory=list)

    def matches(self, transform_name: str) -> bool:
        """
        Check if this spec handles a transform name

        Handles wildcards (e.g., 'figlet-*' matches 'figlet-doom')
        """
        if self.name == transform_name:
            return True

        if self.is_wildcard:
            prefix = self.name.rstrip('*')
            if transform_name.startswith(prefix) and len(transform_name) > len(prefix):
                return True

        return False

    def variant_get(self, transform_name: str) -> str:
        """Suffix of a wildcard name (e.g., 'doom' for 'figlet-doom')"""
        if self.is_wildcard:
            return transform_name[len(self.name.rstrip('*')):]
        return ""
