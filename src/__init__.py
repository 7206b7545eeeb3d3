"""
fileinjector - Recursive file injection with source maps

Assembles one document from fragments referenced by $file(...) directives
while keeping every output position traceable to its original file.
"""

__version__ = "1.0.0"

from .lib import (
    FileInjector,
    OptionParser,
    DelimiterMatcher,
    PositionMapBuilder,
    SourceMap,
    FileSystemReader,
    MemoryReader,
    TransformRegistry,
    InjectionError,
    UnresolvedReferenceError,
    UnsupportedInputError,
    TransformError,
    CyclicReferenceError,
    LOG,
    state_connectToLogger,
)
from .models import SourceDocument, ProcessResult, ParsedOptions, IfAbsent

__all__ = [
    "FileInjector",
    "OptionParser",
    "DelimiterMatcher",
    "PositionMapBuilder",
    "SourceMap",
    "FileSystemReader",
    "MemoryReader",
    "TransformRegistry",
    "InjectionError",
    "UnresolvedReferenceError",
    "UnsupportedInputError",
    "TransformError",
    "CyclicReferenceError",
    "SourceDocument",
    "ProcessResult",
    "ParsedOptions",
    "IfAbsent",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
