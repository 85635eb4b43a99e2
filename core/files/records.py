"""Loading pre-resolved metadata manifests."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List

from core.metadata import MetadataRecord
from logger import get_logger

log = get_logger()


@dataclass(frozen=True)
class ManifestEntry:
    """A media file paired with the metadata to write into it."""

    path: Path
    metadata: MetadataRecord


class ManifestError(ValueError):
    """Raised when a manifest file cannot be parsed at all."""


def _iter_raw_entries(path: Path) -> Iterable[Dict[str, Any]]:
    text = path.read_text(encoding="utf-8")
    stripped = text.lstrip()
    if stripped.startswith("["):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ManifestError(f"Unreadable manifest {path}: {exc}") from exc
        for item in data:
            if isinstance(item, dict):
                yield item
        return
    for line_no, line in enumerate(text.splitlines(), 1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            log.warn(f"Skipping manifest line {line_no}: {exc}")
            continue
        if isinstance(record, dict):
            yield record


def entry_from_dict(raw: Dict[str, Any], base_dir: Path) -> ManifestEntry:
    """Build a ManifestEntry from one manifest item.

    The metadata may be nested under ``metadata`` or given inline next to
    ``path``. Relative paths resolve against the manifest's directory.

    Raises:
        ValueError: If the item has no path or invalid metadata.
    """
    raw_path = raw.get("path")
    if not raw_path:
        raise ValueError("manifest entry is missing 'path'")
    file_path = Path(str(raw_path)).expanduser()
    if not file_path.is_absolute():
        file_path = base_dir / file_path
    meta_raw = raw.get("metadata")
    if not isinstance(meta_raw, dict):
        meta_raw = {k: v for k, v in raw.items() if k != "path"}
    return ManifestEntry(path=file_path, metadata=MetadataRecord.from_dict(meta_raw))


def load_manifest(path: Path) -> List[ManifestEntry]:
    """Load every valid entry from a JSON array or JSON lines manifest.

    Args:
        path: Manifest file.

    Returns:
        Entries in manifest order; invalid items are logged and skipped.

    Raises:
        ManifestError: If a JSON array manifest is not valid JSON.
    """
    entries: List[ManifestEntry] = []
    base_dir = path.resolve().parent
    for idx, raw in enumerate(_iter_raw_entries(path), 1):
        try:
            entries.append(entry_from_dict(raw, base_dir))
        except ValueError as exc:
            log.warn(f"Skipping manifest entry {idx}: {exc}")
    return entries
