"""Per-file write pipeline: tag, then rename."""

from __future__ import annotations

from pathlib import Path

from config.models import Config, RenameMode
from core.cover_art import CoverArtCache
from core.mapping.tags import ContainerOpener, map_tags
from core.metadata import MetadataRecord
from core.rename.apply import rename_file
from core.rename.pattern import file_name_for
from core.rename.sanitizer import sanitize_filename
from core.status import PathCallback, StatusCallback
from core.writers.container import open_container


def build_file_name(
    file_path: Path,
    metadata: MetadataRecord,
    config: Config,
    set_status: StatusCallback,
) -> str:
    """Compute the sanitized base name (no extension) for a file."""
    candidate = file_name_for(
        metadata,
        tv_mode=config.rename.mode == RenameMode.TV,
        tv_pattern=config.rename.tv_pattern,
        movie_pattern=config.rename.movie_pattern,
    )
    return sanitize_filename(candidate, file_path.stem, config.invalid_filename_chars, set_status)


def write_file(
    file_path: Path | str,
    metadata: MetadataRecord,
    set_path: PathCallback,
    set_status: StatusCallback,
    config: Config,
    cover_cache: CoverArtCache,
    opener: ContainerOpener = open_container,
) -> bool:
    """Tag and/or rename a single media file.

    Tagging and renaming run independently; a tagging failure does not stop
    the rename. Every failure is reported through ``set_status``.

    Args:
        file_path: Media file to process.
        metadata: Resolved metadata for the file.
        set_path: Receives the file's new path after a rename.
        set_status: Receives status messages.
        config: Run configuration.
        cover_cache: Shared cover art cache for the run.
        opener: Tag container factory.

    Returns:
        True when every enabled stage succeeded.
    """
    path = Path(file_path)
    success = True

    if config.tag.enabled:
        success = map_tags(path, metadata, config, cover_cache, set_status, opener=opener) and success

    if config.rename.enabled:
        new_name = build_file_name(path, metadata, config, set_status)
        success = rename_file(path, new_name, set_path, set_status, config.verbose) and success

    return success
