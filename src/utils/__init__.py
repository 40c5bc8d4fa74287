"""Utility modules for file access and run configuration.

Provides the FileSystem capability used by every loc component (disk and
in-memory implementations) and the layered config loader used by the CLI.
Console helpers live in ``utils.console``.
"""

from .config import DEFAULT_CONFIG, load_config, save_config, split_languages
from .filesystem import DirectoryEntry, FileSystem, LocalFileSystem, MemoryFileSystem

__all__ = [
    "DEFAULT_CONFIG",
    "DirectoryEntry",
    "FileSystem",
    "LocalFileSystem",
    "MemoryFileSystem",
    "load_config",
    "save_config",
    "split_languages",
]
