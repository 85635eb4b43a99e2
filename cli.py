"""Command-line parsing helpers."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path


@dataclass
class RunOptions:
    """Parsed CLI options used by the run pipeline."""

    manifest: Path | None
    config_path: Path | None
    rerun_failed: Path | None
    verbose: bool = False
    workers: int | None = None
    mode: str | None = None
    no_tag: bool = False
    no_rename: bool = False
    windows_safe: bool = False


def _parse_run_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Write tags into media files and rename them from a pattern.")
    parser.add_argument("--manifest", help="JSON or JSON lines file of {path, metadata} entries")
    parser.add_argument("--config", help="Path to a config.json file")
    parser.add_argument("--rerun-failed", help="Rerun files that failed in a prior run (run dir or manifest.jsonl)")
    parser.add_argument("--verbose", action="store_true", help="Report detailed errors")
    parser.add_argument("--workers", type=int, help="Number of files processed in parallel")
    parser.add_argument("--mode", choices=["tv", "movie"], help="Which rename pattern to use")
    parser.add_argument("--no-tag", action="store_true", help="Skip writing tags")
    parser.add_argument("--no-rename", action="store_true", help="Skip renaming files")
    parser.add_argument(
        "--windows-safe",
        action="store_true",
        help="Also strip characters NTFS rejects from new file names",
    )
    return parser.parse_args(argv)


def resolve_config_path(args: argparse.Namespace) -> Path | None:
    """Resolve the config path from CLI arguments.

    Args:
        args: Parsed argparse namespace.

    Returns:
        Resolved config path, ./config.json when present, otherwise None.
    """
    if args.config:
        return Path(args.config).expanduser().resolve()
    default_file = Path.cwd() / "config.json"
    if default_file.exists():
        return default_file.resolve()
    return None


def get_run_options(argv: list[str] | None = None) -> RunOptions:
    """Build a RunOptions instance from CLI arguments."""
    args = _parse_run_args(argv)
    manifest = Path(args.manifest).expanduser().resolve() if args.manifest else None
    rerun_failed = Path(args.rerun_failed).expanduser().resolve() if args.rerun_failed else None
    return RunOptions(
        manifest=manifest,
        config_path=resolve_config_path(args),
        rerun_failed=rerun_failed,
        verbose=bool(args.verbose),
        workers=args.workers,
        mode=args.mode,
        no_tag=bool(args.no_tag),
        no_rename=bool(args.no_rename),
        windows_safe=bool(args.windows_safe),
    )


def parse_cli(argv: list[str] | None = None) -> tuple[str, RunOptions]:
    """Parse command-line arguments and return the command name and options."""
    if argv is None:
        import sys

        args = sys.argv[1:]
    else:
        args = argv
    if args and args[0] == "run":
        return "run", get_run_options(args[1:])
    return "run", get_run_options(args)
