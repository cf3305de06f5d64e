"""
=============================================================================
FILE STORE
=============================================================================

Whole-file reads and writes under one base directory, for /files/.

=============================================================================
NAME RESOLUTION
=============================================================================

A request path like /files/notes.txt becomes the file name "notes.txt",
which is joined onto the base directory:

    base = /srv/data

    "notes.txt"        → /srv/data/notes.txt
    "/notes.txt"       → /srv/data/notes.txt    (leading "/" can't escape)
    "a/../notes.txt"   → /srv/data/notes.txt    (normalized)
    "../etc/passwd"    → /srv/etc/passwd        (OUTSIDE base!)

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  GET /files/../../etc/passwd HTTP/1.1                               │
    │                                                                      │
    │  allow_path_traversal=False (default):                              │
    │      resolved path is outside base → PathTraversalError → 403       │
    │                                                                      │
    │  allow_path_traversal=True:                                         │
    │      the file is read, wherever it is                               │
    └─────────────────────────────────────────────────────────────────────┘

    full_path = (base / name).resolve()
    full_path.relative_to(base)   # Raises ValueError if outside base

=============================================================================
"""

import logging
import os
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)


class PathTraversalError(PermissionError):
    """A file name resolved to a path outside the base directory."""


class FileStore:
    """
    Reads and writes files relative to a base directory.

    No streaming and no locking: each read returns the whole file, each
    write replaces the whole file. Concurrent writers to the same name
    race, and the last one to finish wins.

    Usage:
        store = FileStore("/tmp/data")
        store.write("hello.txt", b"hi")
        store.read("hello.txt")        # b"hi"
        store.read("missing.txt")      # raises FileNotFoundError
    """

    def __init__(self, base_directory: Union[str, Path], allow_path_traversal: bool = False):
        """
        Args:
            base_directory: Directory file names are resolved against.
            allow_path_traversal: Permit names that resolve outside
                base_directory.
        """
        self.base_directory = Path(base_directory).resolve()
        self.allow_path_traversal = allow_path_traversal

    def resolve(self, filename: str) -> Path:
        """
        Map a file name onto a filesystem path.

        Leading slashes are dropped so the name is always relative to the
        base directory, then "." and ".." segments are normalized.

        Raises:
            PathTraversalError: If the result is outside the base directory
                and traversal is not allowed.
        """
        full_path = (self.base_directory / filename.lstrip("/")).resolve()

        if not self.allow_path_traversal:
            try:
                full_path.relative_to(self.base_directory)
            except ValueError:
                logger.warning(f"Path traversal attempt: {filename!r}")
                raise PathTraversalError(f"{filename!r} is outside {self.base_directory}")

        return full_path

    def exists(self, filename: str) -> bool:
        """True if the name resolves to an existing regular file."""
        return self.resolve(filename).is_file()

    def read(self, filename: str) -> bytes:
        """
        Return the full contents of a file.

        Raises:
            FileNotFoundError: If there is no such file. A directory counts
                as "no such file".
            PathTraversalError: See resolve().
            OSError: Any other filesystem failure.
        """
        path = self.resolve(filename)
        if path.is_dir():
            raise FileNotFoundError(f"{filename!r} is a directory")
        return path.read_bytes()

    def write(self, filename: str, data: bytes) -> int:
        """
        Create or truncate a file and write `data` to it.

        The file gets the process's default permissions (0666 & ~umask).

        Returns:
            Number of bytes written.
        """
        path = self.resolve(filename)
        with open(path, "wb") as f:
            written = f.write(data)
        logger.debug(f"Wrote {written} bytes to {path}")
        return written

    def __repr__(self) -> str:
        return f"FileStore({os.fspath(self.base_directory)!r})"
