"""
Delimiter configuration loader

Extra delimiter definitions can be declared in a YAML file and are appended
after the built-in set:

    delimiters:
      - type: file
        start: "{{include "
        end: "}}"
      - type: file
        start: '@@\\s*include\\('
        end: '\\)'
        regex: true

Patterns are literal text unless regex: true is given.
"""

import re
from pathlib import Path
from typing import Any, List, Union

import yaml

from ..models.delimiters import DelimiterDefinition, BUILTIN_DELIMITERS
from .errors import DelimiterConfigError


def pattern_compile(pattern: str, regex: bool = False) -> "re.Pattern[str]":
    """Compile a delimiter pattern, escaping it unless it is a regex"""
    try:
        return re.compile(pattern if regex else re.escape(pattern))
    except re.error as e:
        raise DelimiterConfigError(f"Invalid delimiter pattern '{pattern}': {e}")


def delimiter_make(type: str, start: str, end: str, regex: bool = False) -> DelimiterDefinition:
    """
    Build a DelimiterDefinition from pattern strings

    Args:
        type: Directive kind
        start: Start pattern
        end: End pattern
        regex: Treat start/end as regular expressions instead of literal text

    Example:
        >>> delimiter_make("file", "{{include ", "}}").start.pattern
        '\\\\{\\\\{include\\\\ '
    """
    if not start or not end:
        raise DelimiterConfigError("Delimiter needs both a start and an end pattern")
    return DelimiterDefinition(
        type=type,
        start=pattern_compile(start, regex),
        end=pattern_compile(end, regex),
    )


def delimiters_fromConfig(config: Any) -> List[DelimiterDefinition]:
    """
    Build delimiter definitions from a parsed configuration

    Args:
        config: Parsed YAML (mapping with a 'delimiters' list, or None)

    Returns:
        Definitions in file order

    Raises:
        DelimiterConfigError: If the structure is not as documented
    """
    if config is None:
        return []
    if not isinstance(config, dict):
        raise DelimiterConfigError("Delimiter configuration must be a mapping")

    entries = config.get('delimiters') or []
    if not isinstance(entries, list):
        raise DelimiterConfigError("'delimiters' must be a list")

    definitions: List[DelimiterDefinition] = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise DelimiterConfigError(f"Delimiter #{i + 1} must be a mapping")
        definitions.append(delimiter_make(
            type=str(entry.get('type', 'file')),
            start=str(entry.get('start') or ''),
            end=str(entry.get('end') or ''),
            regex=bool(entry.get('regex', False)),
        ))
    return definitions


def delimiters_load(path: Union[str, Path]) -> List[DelimiterDefinition]:
    """
    Load extra delimiter definitions from a YAML file

    Raises:
        DelimiterConfigError: If the file can't be read or parsed
    """
    config_path = Path(path)
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DelimiterConfigError(f"Failed to parse {config_path.name}: {e}")
    except OSError as e:
        raise DelimiterConfigError(f"Failed to load {config_path}: {e}")

    return delimiters_fromConfig(config)


def delimiters_merge(extra: List[DelimiterDefinition]) -> List[DelimiterDefinition]:
    """Built-in definitions followed by the extra ones"""
    return list(BUILTIN_DELIMITERS) + list(extra)
