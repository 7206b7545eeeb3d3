"""
Models package for fileinjector

Contains data structures and type definitions for the injection pipeline.
"""

from .state import ProgramState, pipeline
from .options import IfAbsent, OptionSpec, OPTION_SCHEMA, ParsedOptions
from .delimiters import DelimiterDefinition, BUILTIN_DELIMITERS
from .matcher import DirectiveMatch, MatchSpan
from .document import SourceDocument, OutputFragment, ProcessResult

__all__ = [
    "ProgramState",
    "pipeline",
    "IfAbsent",
    "OptionSpec",
    "OPTION_SCHEMA",
    "ParsedOptions",
    "DelimiterDefinition",
    "BUILTIN_DELIMITERS",
    "DirectiveMatch",
    "MatchSpan",
    "SourceDocument",
    "OutputFragment",
    "ProcessResult",
]
