"""
Read capabilities

The injector never touches the filesystem itself; it calls
reader.read(path, base_dir) and gets back a SourceDocument, or None when
the reference can't be read. Relative paths resolve against base_dir (the
directory of the referencing document), absolute paths are used as given.
"""

import os
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from ..models.document import SourceDocument
from .log import LOG


def path_resolve(path: str, base_dir: str) -> str:
    """
    Resolve a directive path against a base directory

    Args:
        path: Path written in the directive
        base_dir: Directory of the referencing document

    Returns:
        Normalised absolute (if base_dir is absolute) path

    Example:
        >>> path_resolve("../b.txt", "/docs/parts")
        '/docs/b.txt'
        >>> path_resolve("/etc/motd", "/docs")
        '/etc/motd'
    """
    return os.path.normpath(os.path.join(base_dir, path))


class Reader(Protocol):
    """Anything able to fetch a referenced document"""

    def read(self, path: str, base_dir: str) -> Optional[SourceDocument]:
        ...


class FileSystemReader:
    """
    Reads referenced documents from disk
    """

    def read(self, path: str, base_dir: str) -> Optional[SourceDocument]:
        """
        Args:
            path: Path written in the directive
            base_dir: Directory of the referencing document

        Returns:
            SourceDocument, or None for an empty path, a missing file, a
            directory or an unreadable file
        """
        if not path:
            return None
        resolved = Path(path_resolve(path, base_dir))
        if not resolved.is_file():
            LOG(f"Not a readable file: {resolved}", level=3)
            return None
        try:
            contents = resolved.read_bytes()
        except OSError as e:
            LOG(f"Failed to read {resolved}: {e}", level=2)
            return None
        return SourceDocument(path=str(resolved.resolve()), contents=contents)


class MemoryReader:
    """
    Serves documents from an in-memory {path: contents} mapping

    Keys are normalised on construction, so {"/site/a.txt": ...} is found
    from a directive "a.txt" in a document living in /site.

    Example:
        reader = MemoryReader({"/site/index.html": "$file(nav.html)",
                               "/site/nav.html": "<nav/>"})
    """

    def __init__(self, files: Dict[str, Union[bytes, str]]) -> None:
        self.files: Dict[str, Union[bytes, str]] = {
            os.path.normpath(name): contents for name, contents in files.items()
        }

    def document_get(self, path: str) -> SourceDocument:
        """Fetch a document by its exact (normalised) path"""
        key = os.path.normpath(path)
        return SourceDocument(path=key, contents=self.files[key])

    def read(self, path: str, base_dir: str) -> Optional[SourceDocument]:
        if not path:
            return None
        resolved = path_resolve(path, base_dir)
        if resolved not in self.files:
            return None
        return SourceDocument(path=resolved, contents=self.files[resolved])
