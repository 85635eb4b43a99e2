"""Tag container abstraction shared by the format-specific writers."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from config.models import ToolsConfig
from core.errors import UnsupportedContainerError


@dataclass(frozen=True)
class Picture:
    """An embedded image."""

    data: bytes
    filename: str = "cover.jpg"

    @property
    def mime_type(self) -> str:
        if self.data.startswith(b"\x89PNG\r\n\x1a\n"):
            return "image/png"
        return "image/jpeg"


@dataclass
class TagFields:
    """Pending tag values.

    None means "leave whatever the file has"; an empty string clears the text
    fields.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    genres: Optional[List[str]] = None
    album: Optional[str] = None
    disc: Optional[int] = None
    track: Optional[int] = None
    track_count: Optional[int] = None
    year: Optional[int] = None
    conductor: Optional[str] = None
    performers: Optional[List[str]] = None
    performer_roles: Optional[List[str]] = None
    pictures: Optional[List[Picture]] = None
    external_refs: Dict[str, str] = field(default_factory=dict)


class TagContainer:
    """Base class for an opened, taggable media file.

    Subclasses load the file in ``__init__`` and persist ``tags`` in
    ``save``. ``extended`` tells callers whether the format can hold people,
    roles and custom reference fields.
    """

    extended = False
    suffixes: tuple[str, ...] = ()

    def __init__(self, path: Path) -> None:
        self.path = path
        self.tags = TagFields()
        self.corruption_reasons: List[str] = []

    def set_external_reference(self, name: str, value: str) -> None:
        self.tags.external_refs[name] = value

    def save(self) -> None:
        raise NotImplementedError


def open_container(path: Path, tools: ToolsConfig | None = None) -> TagContainer:
    """Open a media file for tagging based on its extension.

    Args:
        path: Media file to open.
        tools: External tool paths for formats written through mkvtoolnix.

    Returns:
        A TagContainer for the file.

    Raises:
        UnsupportedContainerError: If no container handles the extension.
        TagContainerError: If the file cannot be read.
    """
    from core.writers.matroska_container import MatroskaTagContainer
    from core.writers.mp4_container import Mp4TagContainer

    suffix = path.suffix.lower()
    if suffix in Mp4TagContainer.suffixes:
        return Mp4TagContainer(path)
    if suffix in MatroskaTagContainer.suffixes:
        return MatroskaTagContainer(path, tools or ToolsConfig())
    raise UnsupportedContainerError(f"Unsupported media format: {suffix or path.name}")
