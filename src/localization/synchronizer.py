#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Regenerate an output language's loc files in the source language's image.

For every source file the synchronizer writes a mirrored output file with
the same relative directory, the same line order and the same raw lines.
Each entry takes the existing output translation when there is one that
is not a fallback, and otherwise the source text marked with
``FALLBACK_MARKER``. Output translations whose keys no longer exist in
the source are moved to ``ORPHANED_l_<language>.yml`` at the language
root so nothing translated is lost.

The rewrite is computed as a ``SyncPlan`` before anything touches disk.
Applying the plan writes every new file first and only then removes the
previously indexed output files that were not overwritten, which leaves
the same tree as deleting everything and rewriting it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional, Set

from core.loc_types import (
    FALLBACK_MARKER,
    ConfigurationError,
    LocEntry,
    LocErrorCode,
    LocLanguage,
    LocLine,
    orphan_filename,
    suffix_for,
)
from parsers.loc_parser import serialize
from utils.filesystem import FileSystem, LocalFileSystem

ORPHAN_NOTICE = (
    "# These entries were in the previous [{language}] loc files "
    "but are not present in the current [{source}] files."
)


@dataclass
class PlannedFile:
    """One output file to write.

    Attributes:
        path: Destination path.
        content: Serialized file content.
        source_path: Source file it mirrors; None for the orphan file.
    """

    path: str
    content: str
    source_path: Optional[str] = None


@dataclass
class SyncPlan:
    """Everything a reconcile run will write and remove for one language.

    Attributes:
        language: Output language.
        source_language: Language whose structure is mirrored.
        files: Mirrored files in source index order.
        orphan_file: The orphan file, if any translation was orphaned.
        stale_paths: Previously indexed output files that are not rewritten.
        translated_keys: Source keys that kept an existing translation.
        fallback_keys: Source keys filled with the source text.
        orphaned_keys: Output keys moved to the orphan file.
    """

    language: str
    source_language: str
    files: List[PlannedFile] = field(default_factory=list)
    orphan_file: Optional[PlannedFile] = None
    stale_paths: List[str] = field(default_factory=list)
    translated_keys: List[str] = field(default_factory=list)
    fallback_keys: List[str] = field(default_factory=list)
    orphaned_keys: List[str] = field(default_factory=list)

    @property
    def written_files(self) -> List[PlannedFile]:
        if self.orphan_file is None:
            return list(self.files)
        return [*self.files, self.orphan_file]


@dataclass
class SyncResult:
    """Outcome of reconciling one output language."""

    plan: SyncPlan
    applied: bool
    removed: Optional[List[str]] = None

    @property
    def language(self) -> str:
        return self.plan.language

    @property
    def written_paths(self) -> List[str]:
        return [planned.path for planned in self.plan.written_files]

    @property
    def removed_paths(self) -> List[str]:
        if self.removed is not None:
            return list(self.removed)
        return list(self.plan.stale_paths)

    @property
    def orphan_path(self) -> Optional[str]:
        return self.plan.orphan_file.path if self.plan.orphan_file else None


class LocSynchronizer:
    """Mirror a source language's loc files into output languages."""

    def __init__(self, filesystem: Optional[FileSystem] = None) -> None:
        self.filesystem = filesystem or LocalFileSystem()

    def plan(
        self,
        source: LocLanguage,
        language: str,
        output: LocLanguage,
        root: str,
    ) -> SyncPlan:
        """Compute the rewrite of ``language`` without touching disk.

        Args:
            source: Index of the source language.
            language: Output language to regenerate.
            output: Existing index of ``language`` (may be empty).
            root: Directory holding the language directories.

        Returns:
            The SyncPlan for ``language``.

        Raises:
            ConfigurationError: If the source language has no directory or
                no loc files, or ``language`` is the source language.
        """
        self._check_source(source, language)

        plan = SyncPlan(language=language, source_language=source.language)
        language_dir = os.path.join(root, language)
        source_suffix = suffix_for(source.language)
        used: Set[str] = set()

        for source_file in source.files.values():
            relative = os.path.relpath(source_file.path, source.directory)
            file_name = os.path.basename(relative)
            target_dir = os.path.normpath(
                os.path.join(language_dir, os.path.dirname(relative))
            )
            target_name = file_name[: -len(source_suffix)] + suffix_for(language)

            lines: List[LocLine] = []
            for line in source_file.lines:
                if isinstance(line, LocEntry):
                    lines.append(self._merge_entry(line, output, plan))
                    used.add(line.key)
                else:
                    lines.append(line)

            plan.files.append(
                PlannedFile(
                    path=os.path.join(target_dir, target_name),
                    content=serialize(language, lines),
                    source_path=source_file.path,
                )
            )

        orphans = [
            entry
            for key, entry in output.entries.items()
            if key not in used and not entry.is_fallback
        ]
        if orphans:
            plan.orphaned_keys = [entry.key for entry in orphans]
            notice = ORPHAN_NOTICE.format(language=language, source=source.language)
            plan.orphan_file = PlannedFile(
                path=os.path.join(language_dir, orphan_filename(language)),
                content=serialize(language, [notice, *orphans]),
            )

        written = {os.path.normpath(planned.path) for planned in plan.written_files}
        plan.stale_paths = [
            loc_file.path
            for loc_file in output.files.values()
            if os.path.normpath(loc_file.path) not in written
        ]
        return plan

    def apply(self, plan: SyncPlan) -> List[str]:
        """Write the planned files, then remove stale output files.

        A stale path that now resolves to a freshly written file (a
        case-only rename on a case-insensitive file system) is kept.
        I/O errors propagate unchanged; files already written or removed
        are not rolled back.

        Returns:
            The stale paths that were actually removed.
        """
        written = [planned.path for planned in plan.written_files]
        for planned in plan.written_files:
            self.filesystem.make_directories(os.path.dirname(planned.path))
            self.filesystem.write_text(planned.path, planned.content)

        removed: List[str] = []
        for path in plan.stale_paths:
            if any(self.filesystem.same_file(path, target) for target in written):
                continue
            self.filesystem.remove_file(path)
            removed.append(path)
        return removed

    def reconcile(
        self,
        source: LocLanguage,
        language: str,
        output: LocLanguage,
        root: str,
        dry_run: bool = False,
    ) -> SyncResult:
        """Plan and (unless ``dry_run``) apply the rewrite of one language."""
        plan = self.plan(source, language, output, root)
        if dry_run:
            return SyncResult(plan=plan, applied=False)
        return SyncResult(plan=plan, applied=True, removed=self.apply(plan))

    @staticmethod
    def _merge_entry(
        source_entry: LocEntry, output: LocLanguage, plan: SyncPlan
    ) -> LocEntry:
        existing = output.entries.get(source_entry.key)
        # a matching entry that is not itself a fallback keeps its translation
        if existing is not None and not existing.is_fallback:
            plan.translated_keys.append(source_entry.key)
            return LocEntry(
                source_entry.key, existing.marker, existing.text, existing.comment
            )

        plan.fallback_keys.append(source_entry.key)
        return LocEntry(
            source_entry.key, FALLBACK_MARKER, source_entry.text, source_entry.comment
        )

    @staticmethod
    def _check_source(source: LocLanguage, language: str) -> None:
        if language == source.language:
            raise ConfigurationError(
                LocErrorCode.INVALID_LANGUAGE,
                f"Output language [{language}] is the source language",
                details={"language": language},
            )
        if source.directory is None:
            raise ConfigurationError(
                LocErrorCode.MISSING_SOURCE_LANGUAGE,
                f"Source language [{source.language}] has no directory",
                details={"language": source.language},
            )
        if not source.files:
            raise ConfigurationError(
                LocErrorCode.MISSING_SOURCE_LANGUAGE,
                f"Source language [{source.language}] has no loc files in "
                f"{source.directory}",
                details={"language": source.language, "directory": source.directory},
            )


def reconcile(
    source: LocLanguage,
    language: str,
    output: LocLanguage,
    root: str,
    filesystem: Optional[FileSystem] = None,
    dry_run: bool = False,
) -> SyncResult:
    """Module-level shortcut for ``LocSynchronizer(filesystem).reconcile``."""
    return LocSynchronizer(filesystem).reconcile(
        source, language, output, root, dry_run=dry_run
    )


__all__ = [
    "ORPHAN_NOTICE",
    "PlannedFile",
    "SyncPlan",
    "SyncResult",
    "LocSynchronizer",
    "reconcile",
]
