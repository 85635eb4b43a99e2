from datetime import date
from pathlib import Path

from config import Config, RenameConfig, RenameMode, TagConfig
from core.cover_art import CoverArtCache
from core.errors import TagContainerError
from core.file_writer import build_file_name, write_file
from core.metadata import FileType, MetadataRecord
from core.writers.container import TagContainer


class _Container(TagContainer):
    def __init__(self, path: Path, fail: bool = False) -> None:
        super().__init__(path)
        self.fail = fail
        self.saved = False

    def save(self) -> None:
        if self.fail:
            raise TagContainerError("cannot write")
        self.saved = True


class _Cache(CoverArtCache):
    def __init__(self) -> None:
        super().__init__(session=None)

    def fetch(self, cover_filename, cover_url, set_status, verbose=False):
        return b"\xff\xd8img"


def _episode() -> MetadataRecord:
    return MetadataRecord(
        file_type=FileType.TV,
        title="Pilot",
        series_name="Show",
        season=1,
        episode=5,
        date=date(2001, 1, 1),
        cover_filename="/p.jpg",
        cover_url="https://img/p.jpg",
    )


def _config(**rename) -> Config:
    return Config(
        tag=TagConfig(enabled=True),
        rename=RenameConfig(tv_pattern="%1 S%2:00E%3:00 - %4", **rename),
    )


def test_tags_then_renames(tmp_path: Path) -> None:
    media = tmp_path / "raw.mkv"
    media.write_bytes(b"x")
    container = _Container(media)
    paths = []
    messages = []

    ok = write_file(
        media,
        _episode(),
        paths.append,
        lambda m, t: messages.append(m),
        _config(),
        _Cache(),
        opener=lambda path, tools: container,
    )

    assert ok is True
    assert container.saved is True
    assert (tmp_path / "Show S01E05 - Pilot.mkv").exists()
    assert paths == [str(tmp_path / "Show S01E05 - Pilot.mkv")]
    assert messages == [
        "Successfully tagged file as Show S01E05: Pilot",
        "Successfully renamed file to 'Show S01E05 - Pilot.mkv'",
    ]


def test_tag_failure_still_renames(tmp_path: Path) -> None:
    media = tmp_path / "raw.mkv"
    media.write_bytes(b"x")
    messages = []

    ok = write_file(
        str(media),
        _episode(),
        lambda p: None,
        lambda m, t: messages.append(m),
        _config(),
        _Cache(),
        opener=lambda path, tools: _Container(path, fail=True),
    )

    assert ok is False
    assert (tmp_path / "Show S01E05 - Pilot.mkv").exists()
    assert messages[0] == "Error: Failed to write tags to file"
    assert messages[-1] == "Successfully renamed file to 'Show S01E05 - Pilot.mkv'"


def test_disabled_stages_do_nothing(tmp_path: Path) -> None:
    media = tmp_path / "raw.mkv"
    media.write_bytes(b"x")
    cfg = _config(enabled=False)
    cfg.tag.enabled = False
    opened = []

    ok = write_file(
        media,
        _episode(),
        lambda p: None,
        lambda m, t: None,
        cfg,
        _Cache(),
        opener=lambda path, tools: opened.append(path),
    )

    assert ok is True
    assert opened == []
    assert media.exists()


def test_movie_mode_uses_movie_pattern(tmp_path: Path) -> None:
    media = tmp_path / "raw.mp4"
    cfg = _config(mode=RenameMode.MOVIE, movie_pattern="%1 [%2]")

    assert build_file_name(media, _episode(), cfg, lambda m, t: None) == "Pilot [2001]"


def test_build_file_name_strips_invalid_chars(tmp_path: Path) -> None:
    media = tmp_path / "raw.mp4"
    cfg = _config()
    cfg.invalid_filename_chars = frozenset({"/", ":"})
    record = MetadataRecord(file_type=FileType.TV, title="Part 1/2: Start", series_name="Show", season=1, episode=1)
    messages = []

    name = build_file_name(media, record, cfg, lambda m, t: messages.append(m))

    assert name == "Show S01E01 - Part 12 Start"
    assert messages == ["Warning: Invalid characters in file name, automatically removing"]
