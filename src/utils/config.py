"""Run configuration for the loc-sync CLI.

Settings (loc root, source language, output languages, grammar, ...) are
resolved in layers: built-in defaults, then an optional ``locsync.json``
file, then ``LOCSYNC_*`` environment variables. The CLI applies explicit
arguments on top of the result.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

CONFIG_FILENAME = "locsync.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "root": "",
    "source_language": "",
    "output_languages": [],
    "grammar": "v2",
    "strict_duplicates": False,
    "preprocess_output": "",
}

# Environment variable for each config key
ENV_VARIABLES: Dict[str, str] = {
    "root": "LOCSYNC_ROOT",
    "source_language": "LOCSYNC_SOURCE_LANGUAGE",
    "output_languages": "LOCSYNC_OUTPUT_LANGUAGES",
    "grammar": "LOCSYNC_GRAMMAR",
    "strict_duplicates": "LOCSYNC_STRICT_DUPLICATES",
    "preprocess_output": "LOCSYNC_PREPROCESS_OUTPUT",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


def split_languages(value: Any) -> List[str]:
    """Turn a comma-separated string or a list into language identifiers.

    Args:
        value: ``"french, german"``, ``["french", "german"]`` or None.

    Returns:
        Trimmed, non-empty identifiers in their original order.
    """
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else list(value)
    return [str(item).strip() for item in items if str(item).strip()]


def _coerce(key: str, value: Any) -> Any:
    if key == "output_languages":
        return split_languages(value)
    if key == "strict_duplicates":
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_VALUES
        return bool(value)
    return "" if value is None else str(value)


def get_config_path(path: Optional[Path | str] = None) -> Path:
    """Return the config file to read: ``path`` or ``./locsync.json``."""
    if path:
        return Path(path).expanduser()
    return Path.cwd() / CONFIG_FILENAME


def load_config(
    path: Optional[Path | str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Return the run configuration merged from defaults, file and environment.

    A missing, unreadable or malformed config file is ignored. Unknown keys
    in the file are kept as-is.

    Args:
        path: Config file; ``./locsync.json`` if omitted.
        environ: Environment mapping; ``os.environ`` if omitted.

    Returns:
        A dictionary containing every DEFAULT_CONFIG key.
    """
    result = DEFAULT_CONFIG.copy()
    result["output_languages"] = []

    config_path = get_config_path(path)
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            data = None
        if isinstance(data, dict):
            for key, value in data.items():
                result[key] = _coerce(key, value) if key in DEFAULT_CONFIG else value

    env = os.environ if environ is None else environ
    for key, variable in ENV_VARIABLES.items():
        value = env.get(variable)
        if value:
            result[key] = _coerce(key, value)

    return result


def save_config(config: Dict[str, Any], path: Optional[Path | str] = None) -> Path:
    """Persist a configuration as JSON.

    Args:
        config: The configuration dictionary to save.
        path: Destination; ``./locsync.json`` if omitted.

    Returns:
        The path written.
    """
    config_path = get_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    serialized = json.dumps(config, indent=2, sort_keys=True, ensure_ascii=False)
    config_path.write_text(serialized, encoding="utf-8")
    return config_path


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "ENV_VARIABLES",
    "get_config_path",
    "load_config",
    "save_config",
    "split_languages",
]
