"""Batch execution of the write pipeline over a metadata manifest."""

from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass, field
from pathlib import Path

import requests

from cli import RunOptions
from config import Config, RenameMode
from core.cover_art import CoverArtCache
from core.file_writer import write_file
from core.files.records import ManifestEntry, ManifestError, load_manifest
from core.rename.sanitizer import invalid_filename_chars
from core.services.run_artifacts import (
    RunDirs,
    append_run_log,
    load_failed_from_manifest,
    manifest_path_for_rerun,
    setup_run_dirs,
    write_log_summary,
    write_manifest_record,
)
from core.status import MessageType, StatusCallback
from logger import get_logger

log = get_logger()


@dataclass
class ProcessResult:
    """Per-file processing result."""

    path: Path
    new_path: Path | None
    status: str
    messages: list[str] = field(default_factory=list)


@dataclass
class RunSummary:
    """Aggregate results for a run."""

    ok_count: int
    fail_count: int


def apply_cli_overrides(cfg: Config, options: RunOptions) -> Config:
    """Apply command-line switches on top of the loaded config."""
    if options.verbose:
        cfg.run.verbose = True
    if options.workers:
        cfg.run.workers = max(1, options.workers)
    if options.mode:
        cfg.rename.mode = RenameMode(options.mode)
    if options.no_tag:
        cfg.tag.enabled = False
    if options.no_rename:
        cfg.rename.enabled = False
    if options.windows_safe:
        cfg.rename.windows_safe = True
        cfg.invalid_filename_chars = invalid_filename_chars(True)
    return cfg


def make_status_reporter(prefix: str, log_path: Path | None, messages: list[str]) -> StatusCallback:
    """Build a status callback that logs and keeps the file's messages."""

    def set_status(message: str, message_type: MessageType) -> None:
        messages.append(message)
        line = f"{prefix} {message}"
        if message_type == MessageType.ERROR:
            log.error(line)
        elif message_type == MessageType.WARNING:
            log.warn(line)
        else:
            log.info(line)
        append_run_log(log_path, line)

    return set_status


def process_one_file(
    entry: ManifestEntry,
    idx: int,
    total: int,
    cfg: Config,
    cover_cache: CoverArtCache,
    run_dirs: RunDirs,
) -> ProcessResult:
    """Tag and/or rename a single manifest entry."""
    prefix = f"[{idx}/{total}] {entry.path.name}:"
    messages: list[str] = []
    set_status = make_status_reporter(prefix, run_dirs.run_log_path, messages)
    current = {"path": entry.path}

    def set_path(new_path: str) -> None:
        current["path"] = Path(new_path)

    if not entry.path.is_file():
        set_status("Error: File missing (skipping)", MessageType.ERROR)
        ok = False
    else:
        log.debug(f"{prefix} writing {entry.metadata}")
        ok = write_file(entry.path, entry.metadata, set_path, set_status, cfg, cover_cache)

    new_path = current["path"] if current["path"] != entry.path else None
    result = ProcessResult(
        path=entry.path,
        new_path=new_path,
        status="ok" if ok else "failed",
        messages=messages,
    )
    if run_dirs.run_manifest_path:
        write_manifest_record(
            run_dirs.run_manifest_path,
            {
                "path": str(entry.path),
                "new_path": str(new_path) if new_path else None,
                "status": result.status,
                "tagged": cfg.tag.enabled,
                "renamed": new_path is not None,
                "messages": messages,
                "metadata": entry.metadata.to_dict(),
            },
        )
    return result


def run_files(
    entries: list[ManifestEntry],
    cfg: Config,
    cover_cache: CoverArtCache,
    run_dirs: RunDirs,
) -> RunSummary:
    """Process entries on a bounded worker pool."""
    ok_count = 0
    fail_count = 0
    total = len(entries)
    with concurrent.futures.ThreadPoolExecutor(max_workers=cfg.run.workers) as executor:
        future_to_entry = {
            executor.submit(process_one_file, entry, idx, total, cfg, cover_cache, run_dirs): entry
            for idx, entry in enumerate(entries, 1)
        }
        for future in concurrent.futures.as_completed(future_to_entry):
            entry = future_to_entry[future]
            try:
                result = future.result()
            except Exception as exc:
                log.error(f"  ❌ Unexpected error for {entry.path}: {exc}")
                append_run_log(run_dirs.run_log_path, f"[error] {entry.path}\nerror: {exc}\n")
                fail_count += 1
                continue
            if result.status == "ok":
                ok_count += 1
            else:
                fail_count += 1
    return RunSummary(ok_count=ok_count, fail_count=fail_count)


def select_entries(options: RunOptions) -> list[ManifestEntry] | None:
    """Resolve the manifest entries to process."""
    if options.rerun_failed:
        entries = load_failed_from_manifest(manifest_path_for_rerun(options.rerun_failed))
        if not entries:
            log.info("No failed files found in manifest.")
        return entries
    if not options.manifest:
        log.error("No metadata manifest given. Use --manifest.")
        return None
    try:
        return load_manifest(options.manifest)
    except ManifestError as exc:
        log.error(str(exc))
        return None


def finalize_run(summary: RunSummary, run_dirs: RunDirs) -> int:
    """Log final summary and return exit code."""
    log.info("\nDone.")
    log.info(f"  Updated/Processed: {summary.ok_count}")
    log.info(f"  Failed:            {summary.fail_count}")
    if run_dirs.run_dir:
        log.info(f"  Run log: {run_dirs.run_log_path}")
    write_log_summary(run_dirs.run_log_path, summary.ok_count, summary.fail_count)
    return 0 if summary.fail_count == 0 else 1


def run(options: RunOptions, cfg: Config) -> int:
    """Execute the write run based on options and config.

    Args:
        options: Parsed run options.
        cfg: Loaded configuration.

    Returns:
        Process exit code.
    """
    cfg = apply_cli_overrides(cfg, options)
    if cfg.run.verbose:
        log.set_level("DEBUG")

    entries = select_entries(options)
    if entries is None:
        return 2
    if not entries:
        return 0

    log.info(f"Found {len(entries)} file(s).")
    if not cfg.tag.enabled and not cfg.rename.enabled:
        log.info("NOTE: tagging and renaming are both disabled; nothing will change.\n")

    run_dirs = setup_run_dirs(Path(cfg.run.log_dir).expanduser(), cfg.run.write_manifest, cfg.run.max_logs)
    with requests.Session() as session:
        cover_cache = CoverArtCache(
            session=session,
            timeout=cfg.cover_art.timeout_seconds,
            user_agent=cfg.cover_art.user_agent,
        )
        summary = run_files(entries, cfg, cover_cache, run_dirs)
    return finalize_run(summary, run_dirs)
