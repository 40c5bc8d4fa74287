#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""End-to-end tests for the locsync command line on a real directory tree.

Usage:
    python -m pytest tests/test_cli.py -v
"""

import json
import sys
from pathlib import Path

import pytest

# Add src to path for imports
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from cli import build_parser, main
from utils.config import ENV_VARIABLES


@pytest.fixture
def loc_root(tmp_path, monkeypatch):
    """A loc tree with an English source and a partial French translation."""
    for variable in ENV_VARIABLES.values():
        monkeypatch.delenv(variable, raising=False)
    monkeypatch.chdir(tmp_path)

    root = tmp_path / "loc"
    (root / "english" / "menus").mkdir(parents=True)
    (root / "french").mkdir()
    (root / "english" / "a_l_english.yml").write_bytes(
        b'l_english:\r\n  # Greetings\r\n  hello:0 "Hello"\r\n  bye:0 "Bye"'
    )
    (root / "english" / "menus" / "m_l_english.yml").write_bytes(
        b'l_english:\r\n  start:0 "Start"'
    )
    (root / "french" / "a_l_french.yml").write_bytes(
        b'l_french:\r\n  hello:1 "Bonjour"\r\n  old:1 "Vieux"'
    )
    return root


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage: locsync" in capsys.readouterr().out


def test_help_for_command_exits_cleanly():
    with pytest.raises(SystemExit) as excinfo:
        main(["help", "process"])
    assert excinfo.value.code == 0


def test_global_options_parse():
    args = build_parser().parse_args(
        ["--root", "loc", "--source", "english", "--strict", "process", "a,b", "c"]
    )
    assert args.strict is True
    assert args.languages == ["a,b", "c"]
    assert args.dry_run is False


def test_process_writes_tree(loc_root, capsys):
    code = main(["--root", str(loc_root), "--source", "english", "process", "french"])

    assert code == 0
    assert (loc_root / "french" / "a_l_french.yml").read_bytes() == (
        b'l_french:\r\n  # Greetings\r\n  hello:1 "Bonjour"\r\n  bye:99 "Bye"'
    )
    assert (loc_root / "french" / "menus" / "m_l_french.yml").read_bytes() == (
        b'l_french:\r\n  start:99 "Start"'
    )
    orphan = (loc_root / "french" / "ORPHANED_l_french.yml").read_bytes()
    assert orphan.endswith(b'\r\n  old:1 "Vieux"')
    assert "[PROCESS] SUCCESS" in capsys.readouterr().out


def test_process_dry_run_writes_nothing(loc_root, capsys):
    before = (loc_root / "french" / "a_l_french.yml").read_bytes()

    code = main(
        ["--root", str(loc_root), "--source", "english", "process", "--dry-run", "french"]
    )

    assert code == 0
    assert (loc_root / "french" / "a_l_french.yml").read_bytes() == before
    assert not (loc_root / "french" / "menus").exists()
    assert "Dry run" in capsys.readouterr().out


def test_settings_from_environment(loc_root, monkeypatch):
    monkeypatch.setenv("LOCSYNC_ROOT", str(loc_root))
    monkeypatch.setenv("LOCSYNC_SOURCE_LANGUAGE", "english")
    monkeypatch.setenv("LOCSYNC_OUTPUT_LANGUAGES", "french, german")

    assert main(["-q", "process"]) == 0
    assert (loc_root / "german" / "a_l_german.yml").exists()


def test_settings_from_config_file(loc_root, tmp_path):
    config = tmp_path / "custom.json"
    config.write_text(
        json.dumps(
            {"root": str(loc_root), "source_language": "english", "output_languages": ["german"]}
        ),
        encoding="utf-8",
    )

    assert main(["--config", str(config), "-q", "process"]) == 0
    assert (loc_root / "german" / "menus" / "m_l_german.yml").exists()


def test_missing_root_fails(loc_root, capsys):
    code = main(["--source", "english", "process", "french"])

    assert code == 1
    assert "No loc root specified" in capsys.readouterr().err


def test_unknown_grammar_fails(loc_root, capsys):
    code = main(
        ["--root", str(loc_root), "--source", "english", "--grammar", "v9", "process", "french"]
    )

    assert code == 1
    assert "Unknown grammar" in capsys.readouterr().err


def test_source_as_output_fails(loc_root, capsys):
    code = main(["--root", str(loc_root), "--source", "english", "process", "english"])

    assert code == 1
    assert "[PROCESS] FAILED" in capsys.readouterr().out
    assert not (loc_root / "english" / "ORPHANED_l_english.yml").exists()


def test_strict_duplicates_fail(loc_root):
    (loc_root / "english" / "b_l_english.yml").write_bytes(b'l_english:\r\n  bye:0 "Ciao"')
    before = (loc_root / "french" / "a_l_french.yml").read_bytes()

    code = main(
        ["--root", str(loc_root), "--source", "english", "--strict", "-q", "process", "french"]
    )

    assert code == 1
    assert (loc_root / "french" / "a_l_french.yml").read_bytes() == before


def test_preprocess_then_process(loc_root, tmp_path):
    raw = tmp_path / "raw"
    (raw / "english").mkdir(parents=True)
    (raw / "french").mkdir()
    (raw / "english" / "a_l_english.yml").write_bytes(b'l_english:\r\n  bye:0 "Bye"')
    (raw / "french" / "drop_l_french.yml").write_bytes(b'l_french:\r\n  bye:1 "Au revoir"')

    assert (
        main(
            [
                "--root", str(raw), "--source", "english", "-q",
                "preprocess", "french", "--output-root", str(loc_root),
            ]
        )
        == 0
    )
    assert (loc_root / "french" / "preprocessed_l_french.yml").exists()

    assert main(["--root", str(loc_root), "--source", "english", "-q", "process", "french"]) == 0
    assert b'bye:1 "Au revoir"' in (loc_root / "french" / "a_l_french.yml").read_bytes()
    assert not (loc_root / "french" / "preprocessed_l_french.yml").exists()


def test_invalid_utf8_in_translation_is_replaced(loc_root):
    (loc_root / "french" / "a_l_french.yml").write_bytes(
        b'l_french:\r\n  hello:1 "Caf\xe9"'
    )

    code = main(["--root", str(loc_root), "--source", "english", "-q", "process", "french"])

    assert code == 0
    assert (loc_root / "french" / "a_l_french.yml").read_bytes() == (
        b'l_french:\r\n  # Greetings\r\n  hello:1 "Caf\xef\xbf\xbd"\r\n  bye:99 "Bye"'
    )


def test_init_saves_resolved_settings(loc_root, tmp_path, monkeypatch):
    monkeypatch.setenv("LOCSYNC_OUTPUT_LANGUAGES", "german")

    code = main(["--root", str(loc_root), "--source", "english", "--strict", "init", "french"])

    assert code == 0
    saved = json.loads((tmp_path / "locsync.json").read_text(encoding="utf-8"))
    assert saved["root"] == str(loc_root)
    assert saved["output_languages"] == ["french"]
    assert saved["strict_duplicates"] is True

    monkeypatch.delenv("LOCSYNC_OUTPUT_LANGUAGES")
    assert main(["-q", "process"]) == 0
    assert (loc_root / "french" / "menus" / "m_l_french.yml").exists()


def test_status_report(loc_root, capsys):
    code = main(["--root", str(loc_root), "--source", "english", "status", "french"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Translation Status Report" in out
    assert "FRENCH [needs update]" in out
    assert "1/3" in out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
