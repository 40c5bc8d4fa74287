#!/usr/bin/env python3
"""Command-line interface for loc tree synchronisation.

Provides CLI access to the process, preprocess and status operations, and
an init command that saves the resolved settings.
Settings not given on the command line are read from ``locsync.json`` and
``LOCSYNC_*`` environment variables, which makes the tool usable from CI
pipelines without arguments.

Usage:
    python cli.py --root loc --source english process french german
    python cli.py --root loc --source english process french --dry-run
    python cli.py --root raw --source english preprocess french --output-root loc
    python cli.py --root loc --source english status french german
    python cli.py --root loc --source english init french german
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, List, Optional, Sequence

from core.loc_types import ConfigurationError, LocError, LocErrorCode
from localization import LocalizationOperations, OperationResult, normalize_languages
from parsers.loc_parser import get_grammar
from utils.config import load_config, save_config
from utils.console import console, print_error, print_line, print_warning


def print_result(result: OperationResult, quiet: bool = False) -> None:
    """Print an operation result.

    Args:
        result: The operation result to display.
        quiet: Only print warnings and errors.
    """
    if not quiet:
        status = "SUCCESS" if result.success else "FAILED"
        console.print(f"\n[{result.name.upper()}] {status}", markup=False)
        for log in result.logs:
            print_line(log)

    for warning in result.warnings:
        print_warning(warning)

    for error in result.errors:
        print_error(error)

    if not quiet and result.details.get("dry_run"):
        console.print("\nDry run: no files were changed.")


def cmd_process(
    ops: LocalizationOperations, languages: List[str], dry_run: bool, quiet: bool
) -> int:
    """Regenerate output languages from the source language.

    Args:
        ops: LocalizationOperations instance.
        languages: Output languages to process.
        dry_run: Report without writing.
        quiet: Suppress log output.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    result = ops.process(languages, dry_run=dry_run)
    print_result(result, quiet)
    return 0 if result.success else 1


def cmd_preprocess(
    ops: LocalizationOperations,
    languages: List[str],
    output_root: str,
    dry_run: bool,
    quiet: bool,
) -> int:
    """Extract new or changed translator entries into the processed tree.

    Args:
        ops: LocalizationOperations instance rooted at the raw tree.
        languages: Output languages to extract.
        output_root: Processed tree receiving the extraction files.
        dry_run: Report without writing.
        quiet: Suppress log output.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    result = ops.preprocess(languages, output_root, dry_run=dry_run)
    print_result(result, quiet)
    return 0 if result.success else 1


def cmd_status(ops: LocalizationOperations, languages: List[str]) -> int:
    """Print a translation coverage report.

    Args:
        ops: LocalizationOperations instance.
        languages: Output languages to report on.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    result = ops.status_report(languages)
    if not result.success:
        print_result(result)
        return 1

    console.print("\nTranslation Status Report")
    console.print("=" * 60)

    for entry in result.details.get("entries", []):
        lang = str(entry.get("language", "?")).upper()
        total = entry.get("total_entries", 0)
        translated = entry.get("translated_entries", 0)
        dir_exists = "[Y]" if entry.get("directory_exists") else "[N]"
        state = "needs update" if entry.get("needs_update") else "up to date"

        pct = entry.get("percentage", 0.0)
        bar_len = 20
        filled = int(pct / 100 * bar_len)
        bar = "█" * filled + "░" * (bar_len - filled)

        console.print(f"\n{lang} [{state}]", markup=False)
        console.print(
            f"  dir: {dir_exists}  files: {entry.get('files', 0)}  "
            f"fallback: {entry.get('fallback_entries', 0)}  "
            f"missing: {entry.get('missing_entries', 0)}  "
            f"orphaned: {entry.get('orphaned_entries', 0)}",
            markup=False,
        )
        console.print(
            f"  Progress: [{bar}] {translated}/{total} ({pct:.1f}%)", markup=False
        )

    console.print("\n" + "=" * 60)
    for warning in result.warnings:
        print_warning(warning)
    return 0


def cmd_init(settings: Dict[str, Any], config_path: Optional[str], quiet: bool) -> int:
    """Write the resolved settings to a config file.

    Args:
        settings: Settings merged from arguments, environment and config.
        config_path: Destination; ./locsync.json if None.
        quiet: Suppress log output.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    try:
        path = save_config(settings, config_path)
    except OSError as e:
        print_error(f"Could not save settings: {e}")
        return 1
    if not quiet:
        print_line(f"[OK] Saved settings -> {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="locsync",
        description="Keep per-language loc files in sync with a source language",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --root loc --source english process french german
  %(prog)s --root loc --source english process french --dry-run
  %(prog)s --root raw --source english preprocess french --output-root loc
  %(prog)s --root loc --source english status
  %(prog)s --root loc --source english init french german
        """,
    )

    parser.add_argument("--config", help="Path to a locsync.json config file")
    parser.add_argument("--root", help="Directory holding one folder per language")
    parser.add_argument("--source", help="Source language to mirror")
    parser.add_argument(
        "--grammar",
        help="Entry grammar version (v1: strict keys, v2: comments and optional marker)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail when a key is defined in more than one file of a language",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Only print warnings and errors"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Process command
    process_parser = subparsers.add_parser(
        "process",
        help="Rewrite output languages in the source language's image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Usage examples:
  locsync process french german       Regenerate French and German
  locsync process french,german       Same, comma separated
  locsync process --dry-run french    Show what would be written
        """,
    )
    process_parser.add_argument(
        "languages",
        nargs="*",
        help="Output languages (default: output_languages from config)",
    )
    process_parser.add_argument(
        "--dry-run", action="store_true", help="Do not write or delete any file"
    )

    # Preprocess command
    preprocess_parser = subparsers.add_parser(
        "preprocess",
        help="Extract new or changed entries from a raw tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Usage examples:
  locsync --root raw preprocess french --output-root loc
        """,
    )
    preprocess_parser.add_argument(
        "languages",
        nargs="*",
        help="Output languages (default: output_languages from config)",
    )
    preprocess_parser.add_argument(
        "--output-root",
        help="Processed tree receiving preprocessed_l_<language>.yml files",
    )
    preprocess_parser.add_argument(
        "--dry-run", action="store_true", help="Do not write any file"
    )

    # Status command
    status_parser = subparsers.add_parser(
        "status",
        help="Show translation coverage per language",
    )
    status_parser.add_argument(
        "languages",
        nargs="*",
        help="Output languages (default: output_languages from config)",
    )

    # Init command
    init_parser = subparsers.add_parser(
        "init",
        help="Save the resolved settings to locsync.json (or --config)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Usage examples:
  locsync --root loc --source english init french german
        """,
    )
    init_parser.add_argument(
        "languages",
        nargs="*",
        help="Output languages to store (default: output_languages from config)",
    )
    init_parser.add_argument(
        "--output-root",
        help="Processed tree to store as preprocess_output",
    )

    # Help command
    help_parser = subparsers.add_parser(
        "help",
        help="Show help for a command",
    )
    help_parser.add_argument(
        "help_command",
        nargs="?",
        choices=["process", "preprocess", "status", "init"],
        help="Command to get help for",
    )

    return parser


def resolve_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """Merge CLI arguments over the file/environment configuration.

    Raises:
        ConfigurationError: If no loc root is configured.
    """
    config = load_config(args.config)
    settings = {
        "root": args.root or config["root"],
        "source_language": args.source or config["source_language"],
        "grammar": args.grammar or config["grammar"],
        "strict_duplicates": (
            args.strict if args.strict is not None else config["strict_duplicates"]
        ),
        "output_languages": normalize_languages(
            getattr(args, "languages", None) or config["output_languages"]
        ),
        "preprocess_output": getattr(args, "output_root", None)
        or config["preprocess_output"],
    }
    if not settings["root"]:
        raise ConfigurationError(
            LocErrorCode.INVALID_CONFIG,
            "No loc root specified. Use --root, LOCSYNC_ROOT or locsync.json.",
        )
    return settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point.

    Args:
        argv: Command-line arguments; uses sys.argv if None.

    Returns:
        Exit code for the process.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "help":
        if args.help_command:
            # Show help for specific command
            help_parser = build_parser()
            help_parser.parse_args([args.help_command, "--help"])
        else:
            parser.print_help()
        return 0

    try:
        settings = resolve_settings(args)
        ops = LocalizationOperations(
            settings["root"],
            settings["source_language"],
            grammar=get_grammar(settings["grammar"]),
            strict_duplicates=settings["strict_duplicates"],
        )
    except LocError as e:
        print_error(e.message)
        return 1

    languages = settings["output_languages"]

    if args.command == "process":
        return cmd_process(ops, languages, args.dry_run, args.quiet)
    elif args.command == "preprocess":
        return cmd_preprocess(
            ops, languages, settings["preprocess_output"], args.dry_run, args.quiet
        )
    elif args.command == "status":
        return cmd_status(ops, languages)
    elif args.command == "init":
        return cmd_init(settings, args.config, args.quiet)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
