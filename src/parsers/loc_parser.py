#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Parser and serializer for Paradox-style ``l_<language>:`` loc files.

A loc file starts with the header line ``l_<language>:`` followed by one
entry or raw line per line::

    l_english:
      # comments and blank lines are kept as raw lines
      greeting:0 "Hello"
      farewell: "Goodbye" # marker omitted, defaults to 0

The entry grammar is configured by a ``GrammarRules`` instance. Two rule
sets are registered: ``v1`` (word-character keys, mandatory marker, no
comments) and ``v2`` (any non-whitespace key, optional marker, trailing
comments), which is the default.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from core.loc_types import (
    DEFAULT_MARKER,
    INDENT,
    LINE_SEPARATOR,
    ConfigurationError,
    LocEntry,
    LocErrorCode,
    LocFile,
    LocLine,
    LocWarning,
    header_for,
    suffix_for,
)

BOM = "\ufeff"


@dataclass(frozen=True)
class GrammarRules:
    """Configuration of the entry-line grammar.

    Attributes:
        name: Version identifier used on the command line and in config.
        key_pattern: Regular expression fragment a key must match.
        marker_optional: Whether ``key: "text"`` without digits is accepted.
        allow_comment: Whether a trailing ``# comment`` may follow the text.
    """

    name: str
    key_pattern: str
    marker_optional: bool
    allow_comment: bool

    def compile(self) -> "re.Pattern[str]":
        marker = r"\d*" if self.marker_optional else r"\d+"
        comment = r"\s*(?P<comment>#.*)?" if self.allow_comment else ""
        return re.compile(
            rf'^(?P<key>{self.key_pattern}):(?P<marker>{marker})\s+"(?P<text>.*)"{comment}$'
        )


GRAMMAR_V1 = GrammarRules("v1", r"[\w.]+", marker_optional=False, allow_comment=False)
GRAMMAR_V2 = GrammarRules("v2", r"\S+", marker_optional=True, allow_comment=True)

GRAMMARS: Dict[str, GrammarRules] = {
    GRAMMAR_V1.name: GRAMMAR_V1,
    GRAMMAR_V2.name: GRAMMAR_V2,
}
DEFAULT_GRAMMAR = GRAMMAR_V2


def get_grammar(name: Optional[str]) -> GrammarRules:
    """Look up a registered grammar by version name.

    Args:
        name: Grammar version (``"v1"`` or ``"v2"``); None or empty for the
            default.

    Returns:
        The matching GrammarRules.

    Raises:
        ConfigurationError: If the name is not registered.
    """
    if not name:
        return DEFAULT_GRAMMAR
    rules = GRAMMARS.get(name.strip().lower())
    if rules is None:
        raise ConfigurationError(
            LocErrorCode.UNKNOWN_GRAMMAR,
            f"Unknown grammar '{name}'. Expected one of: {', '.join(sorted(GRAMMARS))}",
            details={"grammar": name},
        )
    return rules


class LocParser:
    """Turn raw loc-file text into ``LocFile`` objects."""

    def __init__(self, grammar: Optional[GrammarRules] = None) -> None:
        self.grammar = grammar or DEFAULT_GRAMMAR
        self._pattern = self.grammar.compile()

    @staticmethod
    def is_loc_filename(filename: str, language: str) -> bool:
        return filename.endswith(suffix_for(language))

    def match_entry(self, line: str) -> Optional[LocEntry]:
        """Parse a single trimmed body line.

        Returns:
            A LocEntry, or None if the line is not an entry under this grammar.
        """
        match = self._pattern.match(line)
        if match is None:
            return None
        # if we're missing the number, assume 0
        marker = match.group("marker") or DEFAULT_MARKER
        comment = match.groupdict().get("comment") or ""
        return LocEntry(match.group("key"), marker, match.group("text"), comment)

    def parse(
        self,
        lines: Sequence[str],
        directory: str,
        filename: str,
        language: str,
        path: Optional[str] = None,
    ) -> Optional[LocFile]:
        """Parse the lines of a candidate loc file.

        Args:
            lines: Lines of the file, without line terminators.
            directory: Directory the file lives in.
            filename: Base name of the file.
            language: Language the file is expected to belong to.
            path: Full path to record on the file; defaults to
                ``os.path.join(directory, filename)``.

        Returns:
            The parsed LocFile, or None when the input is not a loc file
            for ``language`` (empty, wrong suffix, or wrong header).
        """
        trimmed = [line.strip() for line in lines]
        if trimmed:
            trimmed[0] = trimmed[0].lstrip(BOM)

        if (
            not trimmed
            or not self.is_loc_filename(filename, language)
            or trimmed[0] != header_for(language)
        ):
            return None

        if path is None:
            path = os.path.join(directory, filename)
        loc_file = LocFile(path=path, language=language)

        # Line 1 is the header
        for index, line in enumerate(trimmed[1:], start=2):
            entry = self.match_entry(line)
            if entry is not None:
                loc_file.add_line(entry)
                continue

            if line and not line.startswith("#"):
                loc_file.warnings.append(
                    LocWarning(
                        LocErrorCode.UNRECOGNIZED_LINE,
                        f"Non-comment line: {line}",
                        path=path,
                        line_number=index,
                    )
                )
            loc_file.add_line(line)

        return loc_file

    def parse_text(
        self,
        content: str,
        directory: str,
        filename: str,
        language: str,
        path: Optional[str] = None,
    ) -> Optional[LocFile]:
        """Split file content on ``\\n`` and parse it (see ``parse``)."""
        if not content:
            return None
        return self.parse(content.split("\n"), directory, filename, language, path)


def serialize_entry(entry: LocEntry) -> str:
    """Render an entry without indentation."""
    line = f'{entry.key}:{entry.marker} "{entry.text}"'
    if entry.comment:
        line = f"{line} {entry.comment}"
    return line


def serialize_lines(language: str, lines: Iterable[LocLine]) -> List[str]:
    """Render the header plus indented body lines, unjoined."""
    rendered = [header_for(language)]
    for line in lines:
        if isinstance(line, LocEntry):
            rendered.append(f"{INDENT}{serialize_entry(line)}")
        else:
            rendered.append(f"{INDENT}{line}")
    return rendered


def serialize(language: str, lines: Iterable[LocLine]) -> str:
    """Render a loc file: CRLF separated, no trailing newline."""
    return LINE_SEPARATOR.join(serialize_lines(language, lines))


__all__ = [
    "GrammarRules",
    "GRAMMAR_V1",
    "GRAMMAR_V2",
    "GRAMMARS",
    "DEFAULT_GRAMMAR",
    "get_grammar",
    "LocParser",
    "serialize_entry",
    "serialize_lines",
    "serialize",
]
