#!/usr/bin/env python3
"""High-level loc workflows shared by the CLI: process, preprocess, status.

Provides LocalizationOperations, which builds the language indices for a
loc tree and drives the synchronizer and preprocessor. Every operation
returns an OperationResult with log lines and errors instead of printing,
and converts loc and I/O errors into result errors at a single point.

Usage::

    from localization.operations import LocalizationOperations

    ops = LocalizationOperations("loc", "english")
    result = ops.process(["french", "german"])
    if not result.success:
        print("\\n".join(result.errors))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from core.loc_types import (
    ConfigurationError,
    LocError,
    LocErrorCode,
    LocWarning,
)
from localization.index_builder import LanguageIndexBuilder
from localization.preprocessor import LocPreprocessor
from localization.synchronizer import LocSynchronizer
from parsers.loc_parser import GrammarRules, LocParser
from utils.filesystem import FileSystem, LocalFileSystem


def normalize_languages(languages: Optional[Iterable[str]]) -> List[str]:
    """Split, trim and de-duplicate language identifiers.

    Each item may itself be a comma-separated list, as passed through an
    environment variable or a single CLI argument.

    Args:
        languages: Language identifiers or comma-separated lists.

    Returns:
        Identifiers in first-seen order, blanks removed.
    """
    if not languages:
        return []
    if isinstance(languages, str):
        languages = [languages]

    resolved: List[str] = []
    for item in languages:
        for code in str(item).split(","):
            code = code.strip()
            if code and code not in resolved:
                resolved.append(code)
    return resolved


@dataclass
class OperationResult:
    """Standard response for loc workflow actions.

    Attributes:
        name: Short identifier for the operation (e.g., 'process', 'status').
        success: True if the operation completed without errors.
        logs: Informational log messages produced during the operation.
        warnings: Non-fatal findings (unrecognised lines, duplicate keys).
        errors: Error messages encountered during the operation.
        details: Arbitrary metadata (per-language results, file counts, etc.).
    """

    name: str
    success: bool
    logs: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    details: Dict[str, object] = field(default_factory=dict)

    def add_log(self, message: str) -> None:
        """Append an informational message to the logs.

        Args:
            message: Log message to record.
        """
        self.logs.append(message)

    def add_warning(self, warning: LocWarning | str) -> None:
        self.warnings.append(str(warning))

    def add_error(self, message: str) -> None:
        """Record an error and mark the operation as failed.

        Args:
            message: Error message to record.
        """
        self.errors.append(message)
        self.success = False


class LocalizationOperations:
    """Run loc workflows against one loc tree.

    Attributes:
        root: Directory holding one subdirectory per language.
        source_language: Language whose structure output languages mirror.
        filesystem: File access shared by all components.
        strict_duplicates: Fail on keys defined in more than one file.
    """

    def __init__(
        self,
        root: str,
        source_language: str,
        filesystem: Optional[FileSystem] = None,
        grammar: Optional[GrammarRules] = None,
        strict_duplicates: bool = False,
    ):
        """Initialize the operations helper.

        Args:
            root: Loc tree root directory.
            source_language: Canonical language identifier.
            filesystem: File access; the local disk if omitted.
            grammar: Entry grammar; the default grammar if omitted.
            strict_duplicates: Raise on keys defined in more than one file.
        """
        self.root = str(root)
        self.source_language = (source_language or "").strip()
        self.filesystem = filesystem or LocalFileSystem()
        self.parser = LocParser(grammar)
        self.strict_duplicates = strict_duplicates

    def _builder(self) -> LanguageIndexBuilder:
        return LanguageIndexBuilder(
            self.filesystem, self.parser, strict_duplicates=self.strict_duplicates
        )

    def _resolve_outputs(self, languages: Optional[Sequence[str]]) -> List[str]:
        """Validate the source language and normalise the output languages.

        Raises:
            ConfigurationError: If the source is unset, no output language is
                given, or the source is listed as an output.
        """
        if not self.source_language:
            raise ConfigurationError(
                LocErrorCode.MISSING_SOURCE_LANGUAGE, "No source language specified."
            )
        outputs = normalize_languages(languages)
        if not outputs:
            raise ConfigurationError(
                LocErrorCode.INVALID_LANGUAGE, "No output languages specified."
            )
        if self.source_language in outputs:
            raise ConfigurationError(
                LocErrorCode.INVALID_LANGUAGE,
                f"Source language [{self.source_language}] cannot also be an output language.",
            )
        return outputs

    def _run(self, name: str, action: Callable[[OperationResult], None]) -> OperationResult:
        result = OperationResult(name, True)
        try:
            action(result)
        except LocError as exc:
            result.add_error(exc.message)
        except OSError as exc:
            result.add_error(f"{type(exc).__name__}: {exc}")
        return result

    def process(
        self, languages: Optional[Sequence[str]] = None, dry_run: bool = False
    ) -> OperationResult:
        """Regenerate the output languages in the source language's image.

        Args:
            languages: Output languages, or comma-separated lists of them.
            dry_run: Report what would be written without touching disk.

        Returns:
            An OperationResult with per-language details.
        """

        def action(result: OperationResult) -> None:
            outputs = self._resolve_outputs(languages)
            builder = self._builder()
            indices = builder.build(self.root, [self.source_language, *outputs])
            for warning in builder.warnings:
                result.add_warning(warning)

            source = indices[self.source_language]
            synchronizer = LocSynchronizer(self.filesystem)
            result.add_log(f"Path: {self.root}")
            result.add_log(f"Source language: {self.source_language}")
            result.add_log(f"Output languages: {', '.join(outputs)}")

            per_language = []
            for language in outputs:
                sync = synchronizer.reconcile(
                    source, language, indices[language], self.root, dry_run=dry_run
                )
                plan = sync.plan
                for planned in plan.files:
                    result.add_log(f"[OK] {planned.source_path} -> {planned.path}")
                for path in sync.removed_paths:
                    result.add_log(f"[DEL] {path}")
                if plan.orphan_file is not None:
                    result.add_log(
                        f"[WARN] {language}: {len(plan.orphaned_keys)} orphaned "
                        f"entries -> {plan.orphan_file.path}"
                    )
                per_language.append(
                    {
                        "language": language,
                        "written": sync.written_paths,
                        "removed": sync.removed_paths,
                        "orphan_file": sync.orphan_path,
                        "translated": len(plan.translated_keys),
                        "fallback": len(plan.fallback_keys),
                        "orphaned": len(plan.orphaned_keys),
                    }
                )
            result.details["per_language"] = per_language
            result.details["dry_run"] = dry_run

        return self._run("process", action)

    def preprocess(
        self,
        languages: Optional[Sequence[str]],
        output_root: str,
        dry_run: bool = False,
    ) -> OperationResult:
        """Extract new or diverging translator entries into ``output_root``.

        ``self.root`` is the raw input tree.

        Args:
            languages: Output languages, or comma-separated lists of them.
            output_root: Processed tree receiving ``preprocessed_l_*.yml``.
            dry_run: Compute the selection without writing.

        Returns:
            An OperationResult with the selection size per language.
        """

        def action(result: OperationResult) -> None:
            outputs = self._resolve_outputs(languages)
            if not output_root:
                raise ConfigurationError(
                    LocErrorCode.INVALID_CONFIG, "No preprocess output directory specified."
                )
            result.add_log(f"Paths: {self.root} -> {output_root}")
            result.add_log(f"Source language: {self.source_language}")
            result.add_log(f"Output languages: {', '.join(outputs)}")

            preprocessor = LocPreprocessor(self.filesystem, self._builder())
            extracted = preprocessor.extract(
                self.source_language, outputs, self.root, str(output_root), dry_run=dry_run
            )
            for warning in preprocessor.warnings:
                result.add_warning(warning)

            per_language = []
            for item in extracted:
                if item.path is None:
                    result.add_log(f"[SKIP] {item.language}: nothing to extract")
                else:
                    result.add_log(
                        f"[OK] {item.language}: {len(item.entries)} entries -> {item.path}"
                    )
                per_language.append(
                    {
                        "language": item.language,
                        "entries": len(item.entries),
                        "path": item.path,
                        "written": item.written,
                    }
                )
            result.details["per_language"] = per_language
            result.details["dry_run"] = dry_run

        return self._run("preprocess", action)

    def status_report(self, languages: Optional[Sequence[str]] = None) -> OperationResult:
        """Report translation coverage of each output language.

        Read-only; nothing is written.

        Args:
            languages: Output languages, or comma-separated lists of them.

        Returns:
            An OperationResult with one dict per language in
            result.details["entries"].
        """

        def action(result: OperationResult) -> None:
            outputs = self._resolve_outputs(languages)
            builder = self._builder()
            indices = builder.build(self.root, [self.source_language, *outputs])
            for warning in builder.warnings:
                result.add_warning(warning)

            source = indices[self.source_language]
            synchronizer = LocSynchronizer(self.filesystem)
            entries = []
            for language in outputs:
                plan = synchronizer.plan(source, language, indices[language], self.root)
                total = len(plan.translated_keys) + len(plan.fallback_keys)
                translated = len(plan.translated_keys)
                output = indices[language]
                missing = sum(
                    1 for key in plan.fallback_keys if key not in output.entries
                )
                out_of_date = bool(plan.stale_paths) or any(
                    self._differs(planned.path, planned.content)
                    for planned in plan.written_files
                )
                entry = {
                    "language": language,
                    "directory_exists": output.exists,
                    "files": len(output.files),
                    "total_entries": total,
                    "translated_entries": translated,
                    "fallback_entries": total - translated,
                    "missing_entries": missing,
                    "orphaned_entries": len(plan.orphaned_keys),
                    "percentage": round(translated / total * 100, 1) if total else 0.0,
                    "needs_update": out_of_date,
                }
                entries.append(entry)
                progress = f"{translated}/{total}" if total else "0/0"
                result.add_log(
                    f"{language.upper()} | dir {'[Y]' if output.exists else '[N]'} | "
                    f"{progress} | orphaned {entry['orphaned_entries']}"
                )
            result.details["entries"] = entries

        return self._run("status", action)

    def _differs(self, path: str, content: str) -> bool:
        try:
            return self.filesystem.read_text(path) != content
        except FileNotFoundError:
            return True


__all__ = [
    "LocalizationOperations",
    "OperationResult",
    "normalize_languages",
]
