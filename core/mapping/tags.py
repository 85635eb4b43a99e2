"""Maps a MetadataRecord onto a file's tag container."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from config.models import Config, ToolsConfig
from core.cover_art import CoverArtCache
from core.metadata import FileType, MetadataRecord
from core.status import MessageType, StatusCallback
from core.writers.container import Picture, TagContainer, open_container

ContainerOpener = Callable[[Path, ToolsConfig], TagContainer]


def apply_fields(container: TagContainer, metadata: MetadataRecord, extended_tagging: bool) -> None:
    """Set every non-artwork tag field for the record."""
    tags = container.tags
    tags.title = metadata.title or ""
    tags.description = metadata.overview or ""

    if metadata.genres:
        tags.genres = list(metadata.genres)

    if extended_tagging and container.extended:
        if metadata.file_type == FileType.TV and metadata.catalog_id is not None:
            container.set_external_reference("TMDB", f"tv/{metadata.catalog_id}")
        tags.conductor = metadata.director or ""
        tags.performers = list(metadata.actors)
        tags.performer_roles = list(metadata.characters)

    if metadata.file_type == FileType.TV:
        tags.album = metadata.series_name
        tags.disc = metadata.season
        tags.track = metadata.episode
        tags.track_count = metadata.season_episodes
    elif metadata.year is not None:
        tags.year = metadata.year


def map_tags(
    file_path: Path,
    metadata: MetadataRecord,
    config: Config,
    cover_cache: CoverArtCache,
    set_status: StatusCallback,
    opener: ContainerOpener = open_container,
) -> bool:
    """Write the record's tags into a file.

    A cover art failure marks the file as failed but the remaining fields are
    still saved. Nothing raised while opening, mutating or saving escapes.

    Args:
        file_path: Media file to tag.
        metadata: Resolved metadata for the file.
        config: Run configuration.
        cover_cache: Shared cover art cache for the run.
        set_status: Status callback.
        opener: Tag container factory.

    Returns:
        True if every requested field, including cover art, was written.
    """
    verbose = config.verbose
    success = True
    container: TagContainer | None = None
    try:
        container = opener(file_path, config.tools)
        apply_fields(container, metadata, config.tag.extended)

        if config.tag.cover_art:
            if metadata.cover_filename:
                image = cover_cache.fetch(metadata.cover_filename, metadata.cover_url, set_status, verbose)
                if image is None:
                    success = False
                else:
                    container.tags.pictures = [Picture(data=image, filename="cover.jpg")]
            else:
                # No artwork was resolved for this file.
                success = False

        container.save()

        if success:
            set_status(f"Successfully tagged file as {metadata}", MessageType.INFORMATION)
    except Exception as exc:
        if verbose:
            reasons = list(getattr(exc, "corruption_reasons", None) or [])
            if not reasons and container is not None:
                reasons = list(container.corruption_reasons)
            if reasons:
                set_status(
                    f"Error: Failed to write tags to file ({type(exc).__name__}: {exc}; "
                    f"CorruptionReasons: {', '.join(reasons)})",
                    MessageType.ERROR,
                )
            else:
                set_status(
                    f"Error: Failed to write tags to file ({type(exc).__name__}: {exc})",
                    MessageType.ERROR,
                )
        else:
            set_status("Error: Failed to write tags to file", MessageType.ERROR)
        success = False
    return success
