"""Mutagen-backed tag container for MP4/M4V files."""

from __future__ import annotations

from pathlib import Path

from mutagen import MutagenError
from mutagen.mp4 import MP4, MP4Cover, MP4FreeForm

from core.errors import TagContainerError
from core.writers.container import TagContainer

_SHORT_DESCRIPTION_LIMIT = 255


def _set_text(atoms, key: str, value: str) -> None:
    if value:
        atoms[key] = [value]
    elif key in atoms:
        del atoms[key]


class Mp4TagContainer(TagContainer):
    """iTunes-style atoms written in place with mutagen."""

    extended = False
    suffixes = (".mp4", ".m4v", ".m4a", ".mov")

    def __init__(self, path: Path) -> None:
        super().__init__(path)
        try:
            self._mp4 = MP4(str(path))
        except MutagenError as exc:
            raise TagContainerError(f"Could not read MP4 file: {path}", [str(exc)]) from exc
        if self._mp4.tags is None:
            self._mp4.add_tags()

    def save(self) -> None:
        atoms = self._mp4.tags
        fields = self.tags
        if fields.title is not None:
            _set_text(atoms, "\xa9nam", fields.title)
        if fields.description is not None:
            _set_text(atoms, "desc", fields.description[:_SHORT_DESCRIPTION_LIMIT])
            long_description = fields.description if len(fields.description) > _SHORT_DESCRIPTION_LIMIT else ""
            _set_text(atoms, "ldes", long_description)
        if fields.genres is not None:
            atoms["\xa9gen"] = list(fields.genres)
        if fields.album is not None:
            atoms["\xa9alb"] = [fields.album]
        if fields.disc is not None:
            atoms["disk"] = [(fields.disc, 0)]
        if fields.track is not None or fields.track_count is not None:
            atoms["trkn"] = [(fields.track or 0, fields.track_count or 0)]
        if fields.year is not None:
            atoms["\xa9day"] = [str(fields.year)]
        for name, value in fields.external_refs.items():
            atoms[f"----:com.apple.iTunes:{name}"] = [MP4FreeForm(value.encode("utf-8"))]
        if fields.pictures is not None:
            atoms["covr"] = [
                MP4Cover(
                    pic.data,
                    MP4Cover.FORMAT_PNG if pic.mime_type == "image/png" else MP4Cover.FORMAT_JPEG,
                )
                for pic in fields.pictures
            ]
        try:
            self._mp4.save()
        except MutagenError as exc:
            raise TagContainerError(f"Could not save MP4 file: {self.path}", [str(exc)]) from exc
