"""Pre-resolved metadata consumed by the write pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class FileType(str, Enum):
    """Content type of a media file."""

    TV = "tv"
    MOVIE = "movie"


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_texts(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        value = [value]
    return tuple(str(item).strip() for item in value if str(item).strip())


def _as_count(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _as_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, int):
        return date(value, 1, 1)
    text = str(value).strip()
    if len(text) == 4 and text.isdigit():
        return date(int(text), 1, 1)
    return date.fromisoformat(text[:10])


def _as_file_type(value: Any) -> FileType:
    text = str(value or "").strip().lower()
    if text in ("tv", "series", "episode", "show"):
        return FileType.TV
    return FileType.MOVIE


@dataclass(frozen=True)
class MetadataRecord:
    """Metadata resolved for a single media file."""

    file_type: FileType
    title: Optional[str] = None
    overview: Optional[str] = None
    series_name: Optional[str] = None
    director: Optional[str] = None
    genres: Tuple[str, ...] = ()
    actors: Tuple[str, ...] = ()
    characters: Tuple[str, ...] = ()
    season: int = 0
    episode: int = 0
    season_episodes: int = 0
    date: Optional[date] = None
    catalog_id: Optional[int] = None
    cover_filename: Optional[str] = None
    cover_url: Optional[str] = None

    @property
    def year(self) -> Optional[int]:
        return self.date.year if self.date else None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "MetadataRecord":
        """Create a MetadataRecord from a manifest mapping.

        Both snake_case and camelCase keys are accepted so manifests exported
        by other tools load unchanged.

        Args:
            raw: Mapping of metadata fields.

        Returns:
            Normalized MetadataRecord instance.

        Raises:
            ValueError: If the date cannot be parsed.
        """
        catalog_id = _first(raw, "catalog_id", "catalogId", "tmdb_id")
        return cls(
            file_type=_as_file_type(_first(raw, "file_type", "fileType", "type")),
            title=_as_text(_first(raw, "title")),
            overview=_as_text(_first(raw, "overview", "description")),
            series_name=_as_text(_first(raw, "series_name", "seriesName", "series")),
            director=_as_text(_first(raw, "director")),
            genres=_as_texts(_first(raw, "genres")),
            actors=_as_texts(_first(raw, "actors")),
            characters=_as_texts(_first(raw, "characters")),
            season=_as_count(_first(raw, "season")),
            episode=_as_count(_first(raw, "episode")),
            season_episodes=_as_count(_first(raw, "season_episodes", "seasonEpisodes", "seasonEpisodeCount")),
            date=_as_date(_first(raw, "date", "release_date", "year")),
            catalog_id=int(catalog_id) if catalog_id not in (None, "") else None,
            cover_filename=_as_text(_first(raw, "cover_filename", "coverFilename")),
            cover_url=_as_text(_first(raw, "cover_url", "coverURL", "coverUrl")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a manifest mapping accepted by ``from_dict``."""
        return {
            "file_type": self.file_type.value,
            "title": self.title,
            "overview": self.overview,
            "series_name": self.series_name,
            "director": self.director,
            "genres": list(self.genres),
            "actors": list(self.actors),
            "characters": list(self.characters),
            "season": self.season,
            "episode": self.episode,
            "season_episodes": self.season_episodes,
            "date": self.date.isoformat() if self.date else None,
            "catalog_id": self.catalog_id,
            "cover_filename": self.cover_filename,
            "cover_url": self.cover_url,
        }

    def __str__(self) -> str:
        if self.file_type == FileType.TV:
            return f"{self.series_name or ''} S{self.season:02d}E{self.episode:02d}: {self.title or ''}"
        year = f" ({self.year})" if self.year else ""
        return f"{self.title or ''}{year}"
