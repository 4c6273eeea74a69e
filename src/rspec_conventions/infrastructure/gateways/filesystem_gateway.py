"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

import os
from pathlib import Path

from rspec_conventions.domain.protocols import FileSystemProtocol


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def exists(self, path: str) -> bool:
        """True if path exists."""
        return Path(path).exists()

    def is_directory(self, path: str) -> bool:
        """Check if path is a directory."""
        return Path(path).is_dir()

    def is_readable_directory(self, path: str) -> bool:
        """Directory with read and search permission for this process."""
        return Path(path).is_dir() and os.access(path, os.R_OK | os.X_OK)

    def find_files(self, root: str, suffixes: tuple[str, ...]) -> list[str]:
        """Files under root whose names end with a suffix, in lexical POSIX order.

        Paths keep the root as given (not resolved) so reports stay relative.
        Hidden directories are skipped.
        """
        root_path = Path(root)
        if root_path.is_file():
            return [root] if root_path.name.endswith(suffixes) else []
        found = [
            p
            for p in root_path.rglob("*")
            if p.is_file()
            and p.name.endswith(suffixes)
            and not any(part.startswith(".") for part in p.relative_to(root_path).parts[:-1])
        ]
        return sorted((str(p) for p in found), key=lambda s: s.replace("\\", "/"))

    def relative_posix(self, path: str, root: str) -> str:
        """path relative to root as a POSIX string."""
        return Path(path).relative_to(Path(root)).as_posix()

    def read_text(self, path: str) -> str:
        """Read a text file as UTF-8, replacing undecodable bytes."""
        return Path(path).read_text(encoding="utf-8", errors="replace")
