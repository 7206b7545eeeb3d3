"""
Error types raised while injecting files

Every error here is fatal to the process() call that raised it: no partial
output is produced. The only non-fatal handling of a missing file is the
ifAbsent=keep / ifAbsent=empty directive option.
"""

from typing import List, Optional


class InjectionError(Exception):
    """Base class for all fileinjector errors"""
    pass


class UnresolvedReferenceError(InjectionError):
    """
    Raised when a directive's file cannot be read and ifAbsent=fail

    Attributes:
        path: Path of the document containing the directive
        line: 1-based line of the directive
        column: 0-based column where the directive starts
        target: The path written in the directive
    """

    def __init__(self, path: str, line: int, column: int, target: str) -> None:
        self.path = path
        self.line = line
        self.column = column
        self.target = target
        super().__init__(
            f'File "{target}" not found '
            f'(injection point: {path}:{line}:{column + 1})'
        )


class UnsupportedInputError(InjectionError):
    """Raised when the input document is not bytes or text"""
    pass


class TransformError(InjectionError):
    """
    Raised when a named transform fails on a document's text

    The exception raised by the transform is chained as __cause__.
    """

    def __init__(self, name: str, path: str, reason: Optional[BaseException] = None) -> None:
        self.name = name
        self.path = path
        detail = f": {reason}" if reason is not None else ""
        super().__init__(f'Transform "{name}" failed on {path}{detail}')


class CyclicReferenceError(InjectionError):
    """
    Raised when a document includes itself, directly or through others

    Attributes:
        path: The document reached a second time
        chain: Documents on the active inclusion path, outermost first
    """

    def __init__(self, path: str, chain: List[str]) -> None:
        self.path = path
        self.chain = list(chain)
        cycle = " -> ".join(self.chain + [path])
        super().__init__(f"Circular injection detected: {cycle}")


class DelimiterConfigError(InjectionError):
    """Raised when a delimiter configuration file can't be loaded"""
    pass
