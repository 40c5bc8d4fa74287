"""Extract translator drops that need attention from a raw loc tree.

Translators put free-form loc files under a raw tree that mirrors the
processed one (``<input_root>/<language>/...``). The preprocessor compares
each output language's entries with the source language of the same raw
tree and keeps those that are new, or that differ from a reviewed
(non-fallback) source entry. The selection is written as one flat
``preprocessed_l_<language>.yml`` per language under ``output_root``, where
the next ``process`` run folds it into the structured files.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from core.loc_types import (
    LocEntry,
    LocErrorCode,
    LocLanguage,
    LocWarning,
    preprocessed_filename,
)
from localization.index_builder import LanguageIndexBuilder
from parsers.loc_parser import serialize
from utils.filesystem import FileSystem, LocalFileSystem


@dataclass
class PreprocessResult:
    """Selection made for one output language.

    Attributes:
        language: Output language.
        entries: Selected entries, in flattened index order.
        path: Extraction file path, or None when nothing was selected.
        written: True once the file was written to disk.
    """

    language: str
    entries: List[LocEntry] = field(default_factory=list)
    path: Optional[str] = None
    written: bool = False


def needs_attention(entry: LocEntry, source: LocLanguage) -> bool:
    """Return True if ``entry`` is new or diverges from a reviewed source entry."""
    source_entry = source.entries.get(entry.key)
    if source_entry is None:
        return True
    return not source_entry.is_fallback and source_entry.text != entry.text


class LocPreprocessor:
    """Select and write entries that need translator or reviewer attention."""

    def __init__(
        self,
        filesystem: Optional[FileSystem] = None,
        builder: Optional[LanguageIndexBuilder] = None,
    ) -> None:
        self.filesystem = filesystem or LocalFileSystem()
        self.builder = builder or LanguageIndexBuilder(self.filesystem)
        self.warnings: List[LocWarning] = []

    def select(self, source: LocLanguage, output: LocLanguage) -> List[LocEntry]:
        return [
            entry for entry in output.entries.values() if needs_attention(entry, source)
        ]

    def extract(
        self,
        source_language: str,
        output_languages: Sequence[str],
        input_root: str,
        output_root: str,
        dry_run: bool = False,
    ) -> List[PreprocessResult]:
        """Write one extraction file per output language with a selection.

        Args:
            source_language: Language the drops are compared against.
            output_languages: Languages to extract.
            input_root: Raw tree holding the translator drops.
            output_root: Processed tree receiving the extraction files.
            dry_run: Compute the selection without writing.

        Returns:
            One PreprocessResult per output language, in order.
        """
        languages: Dict[str, LocLanguage] = self.builder.build(
            input_root, [source_language, *output_languages]
        )
        self.warnings = list(self.builder.warnings)

        source = languages[source_language]
        if not source.exists:
            self.warnings.append(
                LocWarning(
                    LocErrorCode.MISSING_SOURCE_LANGUAGE,
                    f"Source language [{source_language}] not found in {input_root}; "
                    "every entry is treated as new",
                )
            )

        results: List[PreprocessResult] = []
        for language in output_languages:
            result = PreprocessResult(
                language=language,
                entries=self.select(source, languages[language]),
            )
            results.append(result)

            # nothing to review, so no file either
            if not result.entries:
                continue

            language_dir = os.path.join(output_root, language)
            result.path = os.path.join(language_dir, preprocessed_filename(language))
            if dry_run:
                continue

            self.filesystem.make_directories(language_dir)
            self.filesystem.write_text(result.path, serialize(language, result.entries))
            result.written = True

        return results


__all__ = ["PreprocessResult", "LocPreprocessor", "needs_attention"]
