"""Core data model for localisation trees.

Exports:
    LocEntry: A single key/marker/text entry.
    LocFile: A parsed loc file with its ordered lines.
    LocLanguage: All files and flattened entries of one language.
    LocError: Base exception carrying a LocErrorCode.
    FALLBACK_MARKER: Marker flagging untranslated copies of the source text.
"""

from .loc_types import (
    DEFAULT_MARKER,
    FALLBACK_MARKER,
    ConfigurationError,
    DuplicateKeyError,
    LocEntry,
    LocError,
    LocErrorCode,
    LocFile,
    LocLanguage,
    LocLine,
    LocWarning,
    header_for,
    orphan_filename,
    preprocessed_filename,
    suffix_for,
)

__all__ = [
    "DEFAULT_MARKER",
    "FALLBACK_MARKER",
    "ConfigurationError",
    "DuplicateKeyError",
    "LocEntry",
    "LocError",
    "LocErrorCode",
    "LocFile",
    "LocLanguage",
    "LocLine",
    "LocWarning",
    "header_for",
    "orphan_filename",
    "preprocessed_filename",
    "suffix_for",
]
