"""
fileinjector - Recursive file injection with source maps

Flattens documents containing $file(...) directives into a single output
and maps every output position back to its originating file.
"""

__version__ = "1.0.0"

from .options import OptionParser
from .matcher import DelimiterMatcher
from .unfolder import FileInjector
from .sourcemap import PositionMapBuilder, SourceMap, OriginalPosition
from .reader import FileSystemReader, MemoryReader, path_resolve
from .transforms import TransformRegistry
from .delimiters import delimiters_load, delimiter_make
from .errors import (
    InjectionError,
    UnresolvedReferenceError,
    UnsupportedInputError,
    TransformError,
    CyclicReferenceError,
    DelimiterConfigError,
)
from .log import LOG, state_connectToLogger

__all__ = [
    "OptionParser",
    "DelimiterMatcher",
    "FileInjector",
    "PositionMapBuilder",
    "SourceMap",
    "OriginalPosition",
    "FileSystemReader",
    "MemoryReader",
    "path_resolve",
    "TransformRegistry",
    "delimiters_load",
    "delimiter_make",
    "InjectionError",
    "UnresolvedReferenceError",
    "UnsupportedInputError",
    "TransformError",
    "CyclicReferenceError",
    "DelimiterConfigError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
