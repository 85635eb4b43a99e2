"""Run artifact helpers (logs, result manifests, run directories)."""

from __future__ import annotations

import json
import shutil
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict

from core.files.records import ManifestEntry, entry_from_dict
from logger import get_logger

log = get_logger()

_WRITE_LOCK = threading.Lock()


def create_run_dir(base_dir: Path, now: datetime | None = None) -> Path:
    """Create a timestamped run directory.

    Args:
        base_dir: Base directory for run artifacts.
        now: Optional datetime override for deterministic tests.

    Returns:
        Path to the created run directory.
    """
    timestamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    run_dir = base_dir / timestamp
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def cleanup_run_dirs(base_dir: Path, max_logs: int) -> None:
    """Delete old run directories beyond the retention limit."""
    if max_logs <= 0 or not base_dir.exists():
        return
    dirs = [entry for entry in base_dir.iterdir() if entry.is_dir()]
    dirs.sort(key=lambda entry: entry.name)
    excess = len(dirs) - max_logs
    if excess <= 0:
        return
    for entry in dirs[:excess]:
        shutil.rmtree(entry, ignore_errors=True)


@dataclass
class RunDirs:
    """Paths for run artifacts."""

    run_dir: Path | None
    run_manifest_path: Path | None
    run_log_path: Path | None


def manifest_path_for_rerun(rerun_failed: Path) -> Path:
    """Resolve the manifest path for a rerun option."""
    if rerun_failed.is_dir():
        return rerun_failed / "manifest.jsonl"
    return rerun_failed


def load_failed_from_manifest(path: Path) -> list[ManifestEntry]:
    """Load the entries that failed in a previous run.

    Renamed-but-failed files are picked up at their new path.
    """
    if not path.exists():
        log.error(f"Run manifest not found: {path}")
        return []
    failed: list[ManifestEntry] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            continue
        if record.get("status") != "failed":
            continue
        current = record.get("new_path") or record.get("path")
        metadata = record.get("metadata")
        if not current or not isinstance(metadata, dict):
            continue
        try:
            failed.append(entry_from_dict({"path": current, "metadata": metadata}, path.parent))
        except ValueError as exc:
            log.warn(f"Skipping failed record for {current}: {exc}")
    return failed


def write_manifest_record(path: Path, record: Dict[str, object]) -> None:
    """Append a record to the run manifest."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with _WRITE_LOCK:
        with path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record) + "\n")


def append_run_log(log_path: Path | None, message: str) -> None:
    """Append a line to the run log."""
    if not log_path:
        return
    lines = [line for line in message.splitlines() if line.strip()]
    if not lines:
        return
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with _WRITE_LOCK:
        with log_path.open("a", encoding="utf-8") as f:
            for line in lines:
                f.write(f"- {line}\n")


def write_log_header(log_path: Path, run_dir: Path) -> None:
    """Write a header for a new log file."""
    started = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("w", encoding="utf-8") as f:
        f.write("Media File Writer Log\n")
        f.write(f"Started: {started}\n")
        f.write(f"Run Directory: {run_dir}\n")
        f.write("\nMessages\n")


def write_log_summary(log_path: Path | None, ok: int, failed: int) -> None:
    """Append a summary section to the log."""
    if not log_path:
        return
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as f:
        f.write("\nSummary\n")
        f.write(f"Updated/Processed: {ok}\n")
        f.write(f"Failed:            {failed}\n")


def setup_run_dirs(log_dir: Path, enabled: bool, max_logs: int) -> RunDirs:
    """Initialize the run directory, log and manifest paths."""
    if not enabled:
        return RunDirs(None, None, None)
    run_dir = create_run_dir(log_dir)
    log_path = run_dir / f"{run_dir.name}.log"
    write_log_header(log_path, run_dir)
    cleanup_run_dirs(log_dir, max_logs)
    return RunDirs(run_dir, run_dir / "manifest.jsonl", log_path)
