"""mkvtoolnix wrapper for tagging Matroska files.

Global tags are read with ``mkvextract``, merged so fields we do not touch
survive, and written back with ``mkvpropedit --tags global:``. Cover art is
stored as a ``cover.jpg`` attachment.
"""

from __future__ import annotations

import json
import os
import subprocess
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable, List, Sequence

from config.models import ToolsConfig
from core.errors import TagContainerError
from core.writers.container import Picture, TagContainer
from logger import get_logger

log = get_logger()

# Matroska target levels: 70 collection (series), 60 season, 50 episode/movie.
_TARGET_COLLECTION = 70
_TARGET_SEASON = 60
_TARGET_ITEM = 50


def _decode(value: bytes | str | None) -> str:
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return str(value or "")


def _present(value: str) -> List[str]:
    """One-value list, or no values so the tag is removed."""
    return [value] if value else []


def _error_lines(*outputs: str) -> List[str]:
    lines: List[str] = []
    for text in outputs:
        for line in text.splitlines():
            if line.strip().lower().startswith(("error", "warning")):
                lines.append(line.strip())
    return lines


def _tag_target(tag: ET.Element) -> int | None:
    targets = tag.find("Targets")
    if targets is None:
        return _TARGET_ITEM
    if any(child.tag.endswith("UID") for child in targets):
        return None
    value = targets.findtext("TargetTypeValue")
    try:
        return int(value) if value else _TARGET_ITEM
    except ValueError:
        return None


def _find_or_add_tag(root: ET.Element, target: int) -> ET.Element:
    for tag in root.findall("Tag"):
        if _tag_target(tag) == target:
            return tag
    tag = ET.SubElement(root, "Tag")
    targets = ET.SubElement(tag, "Targets")
    ET.SubElement(targets, "TargetTypeValue").text = str(target)
    return tag


def _simple(parent: ET.Element, name: str, value: str) -> ET.Element:
    simple = ET.SubElement(parent, "Simple")
    ET.SubElement(simple, "Name").text = name
    ET.SubElement(simple, "String").text = value
    return simple


def set_simple_tags(root: ET.Element, target: int, name: str, values: Iterable[str]) -> ET.Element:
    """Replace every ``Simple`` named ``name`` at ``target`` with ``values``."""
    tag = _find_or_add_tag(root, target)
    for simple in tag.findall("Simple"):
        if (simple.findtext("Name") or "").upper() == name:
            tag.remove(simple)
    for value in values:
        _simple(tag, name, value)
    return tag


def set_actor_tags(root: ET.Element, actors: Sequence[str] | None, roles: Sequence[str] | None) -> None:
    """Write ACTOR tags with each role nested as a CHARACTER tag."""
    tag = _find_or_add_tag(root, _TARGET_ITEM)
    if actors is None:
        # Roles alone are attached to the actors already in the file.
        existing = [s for s in tag.findall("Simple") if (s.findtext("Name") or "").upper() == "ACTOR"]
        for simple, role in zip(existing, roles or []):
            for child in simple.findall("Simple"):
                if (child.findtext("Name") or "").upper() == "CHARACTER":
                    simple.remove(child)
            _simple(simple, "CHARACTER", role)
        return
    set_simple_tags(root, _TARGET_ITEM, "ACTOR", [])
    role_list = list(roles or [])
    for idx, actor in enumerate(actors):
        simple = _simple(tag, "ACTOR", actor)
        if idx < len(role_list) and role_list[idx]:
            _simple(simple, "CHARACTER", role_list[idx])


class MatroskaTagContainer(TagContainer):
    """Matroska/WebM container written through mkvtoolnix."""

    extended = True
    suffixes = (".mkv", ".mka", ".mk3d", ".webm")

    def __init__(self, path: Path, tools: ToolsConfig) -> None:
        super().__init__(path)
        self._tools = tools
        info = self._identify()
        self.corruption_reasons = [str(item) for item in (info.get("errors") or []) + (info.get("warnings") or [])]
        container = info.get("container") or {}
        kind = str(container.get("type") or "").lower()
        if not container.get("recognized", False) or ("matroska" not in kind and "webm" not in kind):
            raise TagContainerError(f"Not a readable Matroska file: {path}", self.corruption_reasons)
        self._attachment_names = {
            str(item.get("file_name") or "") for item in (info.get("attachments") or [])
        }
        has_global_tags = any(int(entry.get("num_entries") or 0) for entry in (info.get("global_tags") or []))
        self._root = self._extract_tags() if has_global_tags else ET.Element("Tags")

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(cmd, capture_output=True)
        except FileNotFoundError as exc:
            raise TagContainerError(f"Could not find {cmd[0]}") from exc

    def _identify(self) -> dict:
        proc = self._run([self._tools.mkvmerge_path, "-J", str(self.path)])
        stdout = _decode(proc.stdout)
        try:
            info = json.loads(stdout) if stdout.strip() else {}
        except json.JSONDecodeError as exc:
            raise TagContainerError(
                f"mkvmerge returned unreadable output for {self.path}",
                _error_lines(stdout, _decode(proc.stderr)),
            ) from exc
        if proc.returncode > 1 and not info:
            raise TagContainerError(
                f"mkvmerge failed for {self.path}",
                _error_lines(stdout, _decode(proc.stderr)),
            )
        return info

    def _extract_tags(self) -> ET.Element:
        fd, tmp_name = tempfile.mkstemp(prefix=self.path.stem + ".tags.", suffix=".xml")
        os.close(fd)
        tmp_path = Path(tmp_name)
        try:
            proc = self._run([self._tools.mkvextract_path, str(self.path), "tags", str(tmp_path)])
            if proc.returncode > 1:
                raise TagContainerError(
                    f"mkvextract failed for {self.path}",
                    _error_lines(_decode(proc.stdout), _decode(proc.stderr)),
                )
            text = tmp_path.read_text(encoding="utf-8") if tmp_path.exists() else ""
            if not text.strip():
                return ET.Element("Tags")
            try:
                return ET.fromstring(text)
            except ET.ParseError as exc:
                raise TagContainerError(f"Unreadable tags in {self.path}", [str(exc)]) from exc
        finally:
            tmp_path.unlink(missing_ok=True)

    def build_tags_xml(self) -> bytes:
        """Merge pending fields into the file's global tags."""
        root = self._root
        fields = self.tags
        if fields.title is not None:
            set_simple_tags(root, _TARGET_ITEM, "TITLE", _present(fields.title))
        if fields.description is not None:
            set_simple_tags(root, _TARGET_ITEM, "DESCRIPTION", _present(fields.description))
        if fields.genres is not None:
            set_simple_tags(root, _TARGET_ITEM, "GENRE", fields.genres)
        if fields.year is not None:
            set_simple_tags(root, _TARGET_ITEM, "DATE_RELEASED", [str(fields.year)])
        if fields.track is not None:
            set_simple_tags(root, _TARGET_ITEM, "PART_NUMBER", [str(fields.track)])
        if fields.conductor is not None:
            set_simple_tags(root, _TARGET_ITEM, "CONDUCTOR", _present(fields.conductor))
        if fields.performers is not None or fields.performer_roles is not None:
            set_actor_tags(root, fields.performers, fields.performer_roles)
        for name, value in fields.external_refs.items():
            set_simple_tags(root, _TARGET_ITEM, name.upper(), [value])
        if fields.album is not None:
            set_simple_tags(root, _TARGET_COLLECTION, "TITLE", [fields.album])
        if fields.disc is not None:
            set_simple_tags(root, _TARGET_SEASON, "PART_NUMBER", [str(fields.disc)])
        if fields.track_count is not None:
            set_simple_tags(root, _TARGET_SEASON, "TOTAL_PARTS", [str(fields.track_count)])
        for tag in root.findall("Tag"):
            if tag.find("Simple") is None:
                root.remove(tag)
        return ET.tostring(root, encoding="utf-8", xml_declaration=True)

    def _attachment_args(self, picture: Picture, image_path: Path) -> list[str]:
        if picture.filename in self._attachment_names:
            return ["--replace-attachment", f"name:{picture.filename}:{image_path}"]
        return [
            "--attachment-name",
            picture.filename,
            "--attachment-mime-type",
            picture.mime_type,
            "--add-attachment",
            str(image_path),
        ]

    def _write_temp(self, data: bytes, suffix: str) -> Path:
        fd, tmp_name = tempfile.mkstemp(prefix=self.path.stem + ".tagtmp.", suffix=suffix)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        return Path(tmp_name)

    def save(self) -> None:
        temp_files: list[Path] = []
        try:
            xml_path = self._write_temp(self.build_tags_xml(), ".xml")
            temp_files.append(xml_path)
            cmd = [self._tools.mkvpropedit_path, str(self.path), "--tags", f"global:{xml_path}"]
            for picture in self.tags.pictures or []:
                image_path = self._write_temp(picture.data, Path(picture.filename).suffix or ".jpg")
                temp_files.append(image_path)
                cmd += self._attachment_args(picture, image_path)
            log.debug(f"  mkvpropedit cmd: {' '.join(cmd)}")
            proc = self._run(cmd)
            if proc.returncode > 1:
                stdout = _decode(proc.stdout)
                stderr = _decode(proc.stderr)
                self.corruption_reasons.extend(_error_lines(stdout, stderr))
                raise TagContainerError(f"mkvpropedit failed for {self.path}", self.corruption_reasons)
        finally:
            for tmp_path in temp_files:
                tmp_path.unlink(missing_ok=True)
