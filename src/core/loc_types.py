#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Data types shared by the loc-file parser, index builder and synchronizer.

Defines the in-memory model of a localisation tree (entries, files and
per-language indices), the naming conventions tying files to languages,
and the error/warning types raised or reported while processing them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

# Entries with this marker are copies of the source language, not translations
FALLBACK_MARKER = "99"
DEFAULT_MARKER = "0"

LOC_EXTENSION = ".yml"
ORPHAN_PREFIX = "ORPHANED"
PREPROCESSED_PREFIX = "preprocessed"

LINE_SEPARATOR = "\r\n"
INDENT = "  "


def header_for(language: str) -> str:
    """Return the mandatory first line of a loc file for ``language``."""
    return f"l_{language}:"


def suffix_for(language: str) -> str:
    """Return the filename suffix every loc file of ``language`` ends with."""
    return f"_l_{language}{LOC_EXTENSION}"


def orphan_filename(language: str) -> str:
    return f"{ORPHAN_PREFIX}{suffix_for(language)}"


def preprocessed_filename(language: str) -> str:
    return f"{PREPROCESSED_PREFIX}{suffix_for(language)}"


class LocErrorCode(Enum):
    """Error and warning codes for loc processing."""

    ROOT_NOT_FOUND = "root_not_found"
    MISSING_SOURCE_LANGUAGE = "missing_source_language"
    INVALID_LANGUAGE = "invalid_language"
    DUPLICATE_KEY = "duplicate_key"
    UNRECOGNIZED_LINE = "unrecognized_line"
    UNKNOWN_GRAMMAR = "unknown_grammar"
    INVALID_CONFIG = "invalid_config"


class LocError(Exception):
    """Base exception for loc processing failures.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable description.
        details: Optional extra context (paths, keys, languages).
    """

    def __init__(
        self,
        code: LocErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}


class ConfigurationError(LocError):
    """Raised when the run is misconfigured (missing root, source language, ...)."""


class DuplicateKeyError(LocError):
    """Raised in strict mode when a key is defined by more than one file."""


@dataclass
class LocWarning:
    """A non-fatal finding reported back to the caller.

    Attributes:
        code: Warning category.
        message: Human-readable description.
        path: File the warning refers to, if any.
        line_number: 1-based line number inside ``path``, if any.
    """

    code: LocErrorCode
    message: str
    path: Optional[str] = None
    line_number: Optional[int] = None

    def __str__(self) -> str:
        if self.path and self.line_number is not None:
            return f"{self.path} line {self.line_number}: {self.message}"
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


@dataclass
class LocEntry:
    """One translatable key/text pair.

    Attributes:
        key: Identifier, unique within a language.
        marker: Provenance tag; ``FALLBACK_MARKER`` means untranslated copy.
        text: Quoted payload without the surrounding quotes, kept verbatim.
        comment: Trailing ``#`` comment, verbatim, or empty.
    """

    key: str
    marker: str
    text: str
    comment: str = ""

    @property
    def is_fallback(self) -> bool:
        return self.marker == FALLBACK_MARKER


LocLine = Union[str, LocEntry]


@dataclass
class LocFile:
    """A parsed loc file.

    ``entries`` is derived from ``lines`` when the file is parsed and is
    not kept in sync afterwards; parsed files are treated as immutable.
    """

    path: str
    language: str
    lines: List[LocLine] = field(default_factory=list)
    entries: Dict[str, LocEntry] = field(default_factory=dict)
    warnings: List[LocWarning] = field(default_factory=list)

    def add_line(self, line: LocLine) -> None:
        self.lines.append(line)
        if isinstance(line, LocEntry):
            self.entries[line.key] = line


@dataclass
class LocLanguage:
    """All loc files found for one language.

    Attributes:
        language: Language identifier (directory name).
        directory: The language's directory, or None if it does not exist.
        files: Parsed files keyed by path relative to ``directory``.
        entries: Flattened key map across ``files``; the last file wins.
        duplicates: Keys defined in more than one file.
    """

    language: str
    directory: Optional[str] = None
    files: Dict[str, LocFile] = field(default_factory=dict)
    entries: Dict[str, LocEntry] = field(default_factory=dict)
    duplicates: List[str] = field(default_factory=list)

    @property
    def exists(self) -> bool:
        return self.directory is not None

    def add_file(self, relative_path: str, loc_file: LocFile) -> List[str]:
        """Register a file and fold its entries into the flattened map.

        Returns:
            Keys that were already defined by a previously added file.
        """
        self.files[relative_path] = loc_file
        collisions = []
        for key, entry in loc_file.entries.items():
            if key in self.entries:
                collisions.append(key)
                if key not in self.duplicates:
                    self.duplicates.append(key)
            self.entries[key] = entry
        return collisions


__all__ = [
    "FALLBACK_MARKER",
    "DEFAULT_MARKER",
    "LOC_EXTENSION",
    "ORPHAN_PREFIX",
    "PREPROCESSED_PREFIX",
    "LINE_SEPARATOR",
    "INDENT",
    "header_for",
    "suffix_for",
    "orphan_filename",
    "preprocessed_filename",
    "LocErrorCode",
    "LocError",
    "ConfigurationError",
    "DuplicateKeyError",
    "LocWarning",
    "LocEntry",
    "LocLine",
    "LocFile",
    "LocLanguage",
]
