#!/usr/bin/env python3
"""Discover and index the loc files of each requested language.

A loc tree is laid out as ``<root>/<language>/.../<base>_l_<language>.yml``.
``LanguageIndexBuilder.build`` walks the immediate language directories of
``root``, parses every ``.yml`` file that turns out to be a loc file for
its language and returns one ``LocLanguage`` per requested language.

Usage::

    from localization.index_builder import LanguageIndexBuilder

    languages = LanguageIndexBuilder().build("loc", {"english", "french"})
    french = languages["french"]
    print(len(french.files), len(french.entries))
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, List, Optional

from core.loc_types import (
    LOC_EXTENSION,
    ConfigurationError,
    DuplicateKeyError,
    LocErrorCode,
    LocLanguage,
    LocWarning,
)
from parsers.loc_parser import LocParser
from utils.filesystem import FileSystem, LocalFileSystem


class LanguageIndexBuilder:
    """Build ``LocLanguage`` indices from a loc tree.

    Attributes:
        filesystem: File access used for listing and reading.
        parser: Loc-file parser (selects the grammar).
        strict_duplicates: Raise instead of warn when a key is defined in
            more than one file of the same language.
        warnings: Findings collected by the last ``build`` call.
    """

    def __init__(
        self,
        filesystem: Optional[FileSystem] = None,
        parser: Optional[LocParser] = None,
        strict_duplicates: bool = False,
    ):
        self.filesystem = filesystem or LocalFileSystem()
        self.parser = parser or LocParser()
        self.strict_duplicates = strict_duplicates
        self.warnings: List[LocWarning] = []

    def build(self, root: str, languages: Iterable[str]) -> Dict[str, LocLanguage]:
        """Index every requested language found under ``root``.

        Languages without a directory get an empty LocLanguage whose
        ``directory`` is None.

        Args:
            root: Directory holding one subdirectory per language.
            languages: Language identifiers to index.

        Returns:
            Mapping of language to its LocLanguage, in ``languages`` order.

        Raises:
            ConfigurationError: If ``root`` is not a directory.
            DuplicateKeyError: In strict mode, on a key defined twice.
        """
        self.warnings = []
        requested = list(dict.fromkeys(languages))

        if not self.filesystem.is_directory(root):
            raise ConfigurationError(
                LocErrorCode.ROOT_NOT_FOUND,
                f"Loc directory does not exist: {root}",
                details={"root": root},
            )

        found: Dict[str, LocLanguage] = {}
        for entry in self._sorted_listing(root):
            if entry.is_dir and entry.name in requested:
                found[entry.name] = self._index_language(entry.name, entry.path)

        # add empty languages if the folder is missing (no translations yet)
        return {
            language: found.get(language) or LocLanguage(language)
            for language in requested
        }

    def _index_language(self, language: str, directory: str) -> LocLanguage:
        loc_language = LocLanguage(language, directory=directory)

        for file_path in self._collect_files(directory):
            name = os.path.basename(file_path)
            if os.path.splitext(name)[1] != LOC_EXTENSION:
                continue
            if not self.parser.is_loc_filename(name, language):
                continue

            content = self.filesystem.read_text(file_path)
            loc_file = self.parser.parse_text(
                content, os.path.dirname(file_path), name, language, path=file_path
            )
            if loc_file is None:
                continue

            self.warnings.extend(loc_file.warnings)
            relative = os.path.relpath(file_path, directory).replace(os.sep, "/")
            for key in loc_language.add_file(relative, loc_file):
                self._report_duplicate(language, key, file_path)

        return loc_language

    def _report_duplicate(self, language: str, key: str, file_path: str) -> None:
        message = f"Key '{key}' of [{language}] is redefined; the later file wins"
        if self.strict_duplicates:
            raise DuplicateKeyError(
                LocErrorCode.DUPLICATE_KEY,
                message,
                details={"language": language, "key": key, "path": file_path},
            )
        self.warnings.append(
            LocWarning(LocErrorCode.DUPLICATE_KEY, message, path=file_path)
        )

    def _collect_files(self, directory: str) -> List[str]:
        """Recursively list regular files under ``directory``, sorted per level."""
        files: List[str] = []
        for entry in self._sorted_listing(directory):
            if entry.is_dir:
                files.extend(self._collect_files(entry.path))
            else:
                files.append(entry.path)
        return files

    def _sorted_listing(self, directory: str):
        return sorted(self.filesystem.list_directory(directory), key=lambda e: e.name)


def find_loc_files(
    root: str,
    languages: Iterable[str],
    filesystem: Optional[FileSystem] = None,
    parser: Optional[LocParser] = None,
) -> Dict[str, LocLanguage]:
    """Shortcut for ``LanguageIndexBuilder(filesystem, parser).build(...)``."""
    return LanguageIndexBuilder(filesystem, parser).build(root, languages)


__all__ = ["LanguageIndexBuilder", "find_loc_files"]
