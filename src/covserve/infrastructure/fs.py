# src/covserve/infrastructure/fs.py
from pathlib import Path
from typing import Protocol


class IFileSystem(Protocol):
    """Filesystem operations."""

    def ensure_dir(self, folder: Path) -> bool:
        """Create folder (and parents). Return True if it had to be created."""
        ...

    def write_if_absent(self, path: Path, content: str) -> bool:
        """Write content unless path already exists. Return True if written."""
        ...


class FileSystem:
    """Concrete FS helper."""

    def ensure_dir(self, folder: Path) -> bool:
        if folder.exists():
            return False
        folder.mkdir(parents=True, exist_ok=True)
        return True

    def write_if_absent(self, path: Path, content: str) -> bool:
        # "x" mode fails on an existing file, so a document that appears
        # between check and write is never clobbered.
        try:
            with open(path, "x", encoding="utf-8") as f:
                f.write(content)
        except FileExistsError:
            return False
        return True
