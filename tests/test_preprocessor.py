#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Tests for extracting translator drops from a raw loc tree.

Usage:
    python -m pytest tests/test_preprocessor.py -v
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.loc_types import LocEntry, LocErrorCode, LocLanguage
from localization.index_builder import LanguageIndexBuilder
from localization.preprocessor import LocPreprocessor, needs_attention
from localization.synchronizer import reconcile
from utils.filesystem import MemoryFileSystem


def raw_tree():
    return MemoryFileSystem(
        {
            "raw/src/a_l_src.yml": (
                'l_src:\r\n  same:0 "Same"\r\n  changed:0 "Old"\r\n  pending:99 "P"'
            ),
            "raw/fr/a_l_fr.yml": (
                'l_fr:\r\n  same:0 "Same"\r\n  changed:1 "Nouveau"\r\n'
                '  pending:1 "Traduit"\r\n  brand_new:1 "Neuf"'
            ),
        }
    )


class TestSelection:
    """Which entries are worth extracting."""

    def test_needs_attention(self):
        source = LocLanguage("src", directory="raw/src")
        source.entries = {
            "same": LocEntry("same", "0", "Same"),
            "pending": LocEntry("pending", "99", "P"),
        }

        assert not needs_attention(LocEntry("same", "1", "Same"), source)
        assert needs_attention(LocEntry("same", "1", "Different"), source)
        assert not needs_attention(LocEntry("pending", "1", "Other"), source)
        assert needs_attention(LocEntry("unknown", "1", "x"), source)

    def test_extract_keeps_new_and_changed_entries(self):
        fs = raw_tree()
        results = LocPreprocessor(fs).extract("src", ["fr"], "raw", "loc")

        (result,) = results
        assert [entry.key for entry in result.entries] == ["changed", "brand_new"]
        assert result.path == "loc/fr/preprocessed_l_fr.yml"
        assert result.written
        assert fs.files["loc/fr/preprocessed_l_fr.yml"] == (
            'l_fr:\r\n  changed:1 "Nouveau"\r\n  brand_new:1 "Neuf"'
        )

    def test_nothing_selected_writes_nothing(self):
        fs = MemoryFileSystem(
            {
                "raw/src/a_l_src.yml": 'l_src:\r\n  a:0 "A"',
                "raw/fr/a_l_fr.yml": 'l_fr:\r\n  a:0 "A"',
            }
        )
        (result,) = LocPreprocessor(fs).extract("src", ["fr"], "raw", "loc")

        assert result.entries == []
        assert result.path is None
        assert not result.written
        assert not fs.is_directory("loc")

    def test_missing_output_language_is_skipped(self):
        fs = raw_tree()
        results = LocPreprocessor(fs).extract("src", ["fr", "de"], "raw", "loc")

        assert [r.language for r in results] == ["fr", "de"]
        assert results[1].path is None

    def test_missing_source_treats_everything_as_new(self):
        fs = MemoryFileSystem({"raw/fr/a_l_fr.yml": 'l_fr:\r\n  a:1 "Ah"\r\n  b:1 "Be"'})
        preprocessor = LocPreprocessor(fs)

        (result,) = preprocessor.extract("src", ["fr"], "raw", "loc")

        assert [entry.key for entry in result.entries] == ["a", "b"]
        assert [w.code for w in preprocessor.warnings] == [
            LocErrorCode.MISSING_SOURCE_LANGUAGE
        ]

    def test_dry_run_reports_path_without_writing(self):
        fs = raw_tree()
        (result,) = LocPreprocessor(fs).extract("src", ["fr"], "raw", "loc", dry_run=True)

        assert result.path == "loc/fr/preprocessed_l_fr.yml"
        assert not result.written
        assert "loc/fr/preprocessed_l_fr.yml" not in fs.files


def test_preprocessed_entries_are_folded_in_by_reconcile():
    """A preprocess run followed by reconcile moves drops into place."""
    fs = raw_tree()
    fs.make_directories("loc/src")
    fs.write_text(
        "loc/src/a_l_src.yml",
        'l_src:\r\n  same:0 "Same"\r\n  changed:0 "Old"\r\n  brand_new:0 "New"',
    )

    LocPreprocessor(fs).extract("src", ["fr"], "raw", "loc")
    languages = LanguageIndexBuilder(fs).build("loc", ["src", "fr"])
    result = reconcile(languages["src"], "fr", languages["fr"], "loc", fs)

    assert fs.files["loc/fr/a_l_fr.yml"] == (
        'l_fr:\r\n  same:99 "Same"\r\n  changed:1 "Nouveau"\r\n  brand_new:1 "Neuf"'
    )
    assert "loc/fr/preprocessed_l_fr.yml" not in fs.files
    assert result.removed_paths == ["loc/fr/preprocessed_l_fr.yml"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
