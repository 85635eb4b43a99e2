"""Configuration loading and normalization."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from config.models import (
    Config,
    CoverArtConfig,
    RenameConfig,
    RenameMode,
    RunConfig,
    TagConfig,
    ToolsConfig,
)
from core.rename.sanitizer import invalid_filename_chars


DEFAULTS_PATH = Path(__file__).resolve().parent / "defaults.json"


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    return default


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_str(value: Any, default: str) -> str:
    if value is None:
        return default
    return str(value)


def _as_mode(value: Any, default: RenameMode) -> RenameMode:
    if isinstance(value, RenameMode):
        return value
    text = str(value or "").strip().lower()
    if text in ("0", "tv", "series", "episode"):
        return RenameMode.TV
    if text in ("1", "movie", "movies", "film"):
        return RenameMode.MOVIE
    return default


def _load_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def overlay_sections(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay a user config onto the defaults, one section at a time.

    Keys inside a section replace the default key; sections the defaults do
    not know are carried through untouched.
    """
    merged = {section: dict(values) if isinstance(values, dict) else values for section, values in base.items()}
    for section, values in overrides.items():
        current = merged.get(section)
        if isinstance(values, dict) and isinstance(current, dict):
            current.update(values)
        else:
            merged[section] = values
    return merged


def config_from_dict(raw: Dict[str, Any]) -> Config:
    """Build a Config instance from a raw dictionary.

    Args:
        raw: Raw config dictionary, usually defaults merged with a user file.

    Returns:
        Normalized Config instance with the invalid filename characters resolved.
    """
    tag_raw = raw.get("tag", {}) or {}
    rename_raw = raw.get("rename", {}) or {}
    cover_raw = raw.get("cover_art", {}) or {}
    tools_raw = raw.get("tools", {}) or {}
    run_raw = raw.get("run", {}) or {}

    defaults = RenameConfig()
    tag = TagConfig(
        enabled=_as_bool(tag_raw.get("enabled"), True),
        extended=_as_bool(tag_raw.get("extended"), False),
        cover_art=_as_bool(tag_raw.get("cover_art"), True),
    )
    rename = RenameConfig(
        enabled=_as_bool(rename_raw.get("enabled"), True),
        mode=_as_mode(rename_raw.get("mode"), RenameMode.TV),
        tv_pattern=_as_str(rename_raw.get("tv_pattern"), defaults.tv_pattern),
        movie_pattern=_as_str(rename_raw.get("movie_pattern"), defaults.movie_pattern),
        windows_safe=_as_bool(rename_raw.get("windows_safe"), False),
    )
    cover_art = CoverArtConfig(
        timeout_seconds=_as_float(cover_raw.get("timeout_seconds", 20.0), 20.0),
        user_agent=_as_str(cover_raw.get("user_agent"), "media-file-writer"),
    )
    tools = ToolsConfig(
        mkvmerge_path=_as_str(tools_raw.get("mkvmerge_path"), "mkvmerge"),
        mkvextract_path=_as_str(tools_raw.get("mkvextract_path"), "mkvextract"),
        mkvpropedit_path=_as_str(tools_raw.get("mkvpropedit_path"), "mkvpropedit"),
    )
    run = RunConfig(
        verbose=_as_bool(run_raw.get("verbose"), False),
        workers=max(1, _as_int(run_raw.get("workers", 4), 4)),
        log_dir=_as_str(run_raw.get("log_dir"), "runs"),
        write_manifest=_as_bool(run_raw.get("write_manifest"), True),
        max_logs=_as_int(run_raw.get("max_logs", 10), 10),
    )
    return Config(
        tag=tag,
        rename=rename,
        cover_art=cover_art,
        tools=tools,
        run=run,
        invalid_filename_chars=invalid_filename_chars(rename.windows_safe),
    )


def load_config(path: Path | None) -> Config:
    """Load the bundled defaults, apply an optional JSON override file.

    Args:
        path: Optional path to a JSON config file containing overrides.

    Returns:
        Parsed Config instance.
    """
    raw: Dict[str, Any] = _load_json(DEFAULTS_PATH) if DEFAULTS_PATH.exists() else {}
    if path is not None:
        raw = overlay_sections(raw, _load_json(path))
    return config_from_dict(raw)
