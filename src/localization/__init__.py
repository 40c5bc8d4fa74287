"""Loc tree workflows: indexing, synchronisation and preprocessing.

Provides the language index builder, the synchronizer that mirrors the
source language into output languages, the preprocessor for raw
translator drops, and the operations facade used by the CLI.
"""

from __future__ import annotations

from .index_builder import LanguageIndexBuilder, find_loc_files
from .operations import LocalizationOperations, OperationResult, normalize_languages
from .preprocessor import LocPreprocessor, PreprocessResult, needs_attention
from .synchronizer import LocSynchronizer, PlannedFile, SyncPlan, SyncResult, reconcile

__all__ = [
    "LanguageIndexBuilder",
    "LocalizationOperations",
    "LocPreprocessor",
    "LocSynchronizer",
    "OperationResult",
    "PlannedFile",
    "PreprocessResult",
    "SyncPlan",
    "SyncResult",
    "find_loc_files",
    "needs_attention",
    "normalize_languages",
    "reconcile",
]
