"""File-system access used by the index builder, synchronizer and preprocessor.

All reads and writes of loc trees go through a ``FileSystem`` so the
reconciliation logic can run against ``MemoryFileSystem`` in tests and
against ``LocalFileSystem`` on disk.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Set


@dataclass(frozen=True)
class DirectoryEntry:
    """One child of a listed directory.

    Attributes:
        name: Base name of the child.
        path: Full path of the child.
        is_dir: True for directories, False for regular files.
    """

    name: str
    path: str
    is_dir: bool


class FileSystem(ABC):
    """Narrow capability interface over the file system."""

    @abstractmethod
    def list_directory(self, path: str) -> List[DirectoryEntry]:
        """List the directories and regular files directly under ``path``.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
        """

    @abstractmethod
    def is_directory(self, path: str) -> bool:
        """Return True if ``path`` exists and is a directory."""

    @abstractmethod
    def read_text(self, path: str) -> str:
        """Read a UTF-8 file without newline translation.

        Bytes that are not valid UTF-8 are replaced with U+FFFD.
        """

    @abstractmethod
    def write_text(self, path: str, content: str) -> None:
        """Write a UTF-8 file exactly as given; the parent must exist."""

    @abstractmethod
    def remove_file(self, path: str) -> None:
        """Delete a file."""

    @abstractmethod
    def make_directories(self, path: str) -> None:
        """Create ``path`` and any missing parents."""

    @abstractmethod
    def same_file(self, first: str, second: str) -> bool:
        """Return True if both paths name the same existing file."""


class LocalFileSystem(FileSystem):
    """FileSystem backed by the operating system."""

    def list_directory(self, path: str) -> List[DirectoryEntry]:
        entries: List[DirectoryEntry] = []
        with os.scandir(path) as iterator:
            for item in iterator:
                if item.is_dir():
                    entries.append(DirectoryEntry(item.name, item.path, True))
                elif item.is_file():
                    entries.append(DirectoryEntry(item.name, item.path, False))
        return entries

    def is_directory(self, path: str) -> bool:
        return os.path.isdir(path)

    def read_text(self, path: str) -> str:
        with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
            return f.read()

    def write_text(self, path: str, content: str) -> None:
        """Write through a temporary sibling file and rename it into place.

        A reader never sees a half-written loc file; a failed write leaves
        the previous content untouched.
        """
        temp_path = f"{path}.tmp"
        try:
            with open(temp_path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
                f.flush()
            os.replace(temp_path, path)
        except BaseException:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    def remove_file(self, path: str) -> None:
        os.remove(path)

    def make_directories(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def same_file(self, first: str, second: str) -> bool:
        try:
            return os.path.samefile(first, second)
        except OSError:
            return False


class MemoryFileSystem(FileSystem):
    """In-memory FileSystem for tests and dry runs.

    Paths are normalised with ``os.path.normpath``; listing order is the
    order in which children were created. With ``case_sensitive=False`` a
    path resolves to an existing child whose name differs only in case,
    the way the default macOS and Windows file systems behave.
    """

    def __init__(
        self, files: Dict[str, str] | None = None, case_sensitive: bool = True
    ) -> None:
        self.case_sensitive = case_sensitive
        self.files: Dict[str, str] = {}
        self.directories: Set[str] = set()
        self._order: List[str] = []
        for path, content in (files or {}).items():
            parent = os.path.dirname(self._norm(path))
            if parent:
                self.make_directories(parent)
            self.write_text(path, content)

    def _norm(self, path: str) -> str:
        path = os.path.normpath(path)
        if self.case_sensitive:
            return path
        folded = path.lower()
        for existing in self._order:
            if existing.lower() == folded:
                return existing
        parent, name = os.path.split(path)
        if parent and parent != path:
            return os.path.join(self._norm(parent), name)
        return path

    def _track(self, path: str) -> None:
        if path not in self._order:
            self._order.append(path)

    def list_directory(self, path: str) -> List[DirectoryEntry]:
        path = self._norm(path)
        if path not in self.directories:
            raise FileNotFoundError(f"No such directory: '{path}'")
        entries: List[DirectoryEntry] = []
        for child in self._order:
            if os.path.dirname(child) != path or child == path:
                continue
            if child in self.directories:
                entries.append(DirectoryEntry(os.path.basename(child), child, True))
            elif child in self.files:
                entries.append(DirectoryEntry(os.path.basename(child), child, False))
        return entries

    def is_directory(self, path: str) -> bool:
        return self._norm(path) in self.directories

    def read_text(self, path: str) -> str:
        path = self._norm(path)
        if path not in self.files:
            raise FileNotFoundError(f"No such file: '{path}'")
        return self.files[path]

    def write_text(self, path: str, content: str) -> None:
        path = self._norm(path)
        parent = os.path.dirname(path)
        if parent and parent not in self.directories:
            raise FileNotFoundError(f"No such directory: '{parent}'")
        if path in self.directories:
            raise IsADirectoryError(f"Is a directory: '{path}'")
        self.files[path] = content
        self._track(path)

    def remove_file(self, path: str) -> None:
        path = self._norm(path)
        if path not in self.files:
            raise FileNotFoundError(f"No such file: '{path}'")
        del self.files[path]
        self._order.remove(path)

    def make_directories(self, path: str) -> None:
        path = self._norm(path)
        missing = []
        while path and path not in self.directories:
            missing.append(path)
            parent = os.path.dirname(path)
            if parent == path:
                break
            path = parent
        for directory in reversed(missing):
            if directory in self.files:
                raise FileExistsError(f"File exists: '{directory}'")
            self.directories.add(directory)
            self._track(directory)

    def same_file(self, first: str, second: str) -> bool:
        path = self._norm(first)
        return path == self._norm(second) and path in self.files


__all__ = [
    "DirectoryEntry",
    "FileSystem",
    "LocalFileSystem",
    "MemoryFileSystem",
]
