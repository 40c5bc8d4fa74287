#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tests for layered run configuration (defaults, locsync.json, environment).

Usage:
    python -m pytest tests/test_config.py -v
    python tests/test_config.py  # Run directly
"""

from __future__ import annotations

import json
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

# Add src to path for imports
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from utils.config import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG,
    get_config_path,
    load_config,
    save_config,
    split_languages,
)


class TestSplitLanguages(unittest.TestCase):
    """Tests for split_languages."""

    def test_comma_separated_string(self):
        self.assertEqual(split_languages(" french,german , "), ["french", "german"])

    def test_list_is_trimmed(self):
        self.assertEqual(split_languages(["french ", "", "german"]), ["french", "german"])

    def test_none(self):
        self.assertEqual(split_languages(None), [])


class TestLoadConfig(unittest.TestCase):
    """Tests for load_config layering."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.config_path = self.temp_dir / CONFIG_FILENAME

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_defaults_without_file_or_environment(self):
        config = load_config(self.config_path, environ={})
        self.assertEqual(config, DEFAULT_CONFIG)
        self.assertIsNot(config["output_languages"], DEFAULT_CONFIG["output_languages"])

    def test_file_values_are_coerced(self):
        self.config_path.write_text(
            json.dumps(
                {
                    "root": "loc",
                    "source_language": "english",
                    "output_languages": "french, german",
                    "strict_duplicates": "yes",
                    "extra": 1,
                }
            ),
            encoding="utf-8",
        )
        config = load_config(self.config_path, environ={})

        self.assertEqual(config["root"], "loc")
        self.assertEqual(config["output_languages"], ["french", "german"])
        self.assertTrue(config["strict_duplicates"])
        self.assertEqual(config["extra"], 1)
        self.assertEqual(config["grammar"], "v2")

    def test_environment_overrides_file(self):
        self.config_path.write_text(
            json.dumps({"root": "loc", "output_languages": ["french"]}), encoding="utf-8"
        )
        environ = {
            "LOCSYNC_ROOT": "other",
            "LOCSYNC_OUTPUT_LANGUAGES": "german,polish",
            "LOCSYNC_STRICT_DUPLICATES": "0",
            "LOCSYNC_GRAMMAR": "",
        }
        config = load_config(self.config_path, environ=environ)

        self.assertEqual(config["root"], "other")
        self.assertEqual(config["output_languages"], ["german", "polish"])
        self.assertFalse(config["strict_duplicates"])
        self.assertEqual(config["grammar"], "v2")

    def test_malformed_file_is_ignored(self):
        self.config_path.write_text("{not json", encoding="utf-8")
        config = load_config(self.config_path, environ={"LOCSYNC_ROOT": "loc"})
        self.assertEqual(config["root"], "loc")

    def test_non_object_file_is_ignored(self):
        self.config_path.write_text("[1, 2]", encoding="utf-8")
        self.assertEqual(load_config(self.config_path, environ={}), DEFAULT_CONFIG)

    def test_save_then_load(self):
        path = save_config(
            {"root": "loc", "source_language": "english"}, self.temp_dir / "sub" / "c.json"
        )
        self.assertTrue(path.exists())
        config = load_config(path, environ={})
        self.assertEqual(config["source_language"], "english")

    def test_default_path_is_in_working_directory(self):
        self.assertEqual(get_config_path(), Path.cwd() / CONFIG_FILENAME)
        self.assertEqual(get_config_path("x.json"), Path("x.json"))


if __name__ == "__main__":
    unittest.main()
