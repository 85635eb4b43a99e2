from pathlib import Path

import pytest
from mutagen import MutagenError
from mutagen.mp4 import MP4Cover

from core.errors import TagContainerError
from core.writers import mp4_container
from core.writers.container import Picture, open_container


class _FakeMP4:
    instances = []

    def __init__(self, filename: str) -> None:
        self.filename = filename
        self.tags = None
        self.saved = False
        _FakeMP4.instances.append(self)

    def add_tags(self) -> None:
        self.tags = {}

    def save(self) -> None:
        self.saved = True


@pytest.fixture
def fake_mp4(monkeypatch):
    _FakeMP4.instances = []
    monkeypatch.setattr(mp4_container, "MP4", _FakeMP4)
    return _FakeMP4


def test_open_container_picks_mp4_by_extension(tmp_path: Path, fake_mp4) -> None:
    container = open_container(tmp_path / "a.M4V")

    assert isinstance(container, mp4_container.Mp4TagContainer)
    assert container.extended is False
    assert fake_mp4.instances[0].tags == {}


def test_save_writes_episode_atoms(tmp_path: Path, fake_mp4) -> None:
    container = mp4_container.Mp4TagContainer(tmp_path / "a.mp4")
    tags = container.tags
    tags.title = "Pilot"
    tags.description = "Short."
    tags.genres = ["Drama", "Comedy"]
    tags.album = "Show"
    tags.disc = 2
    tags.track = 5
    tags.track_count = 10
    tags.pictures = [Picture(b"\x89PNG\r\n\x1a\nrest")]

    container.save()

    mp4 = fake_mp4.instances[0]
    atoms = mp4.tags
    assert mp4.saved is True
    assert atoms["\xa9nam"] == ["Pilot"]
    assert atoms["desc"] == ["Short."]
    assert "ldes" not in atoms
    assert atoms["\xa9gen"] == ["Drama", "Comedy"]
    assert atoms["\xa9alb"] == ["Show"]
    assert atoms["disk"] == [(2, 0)]
    assert atoms["trkn"] == [(5, 10)]
    assert "\xa9day" not in atoms
    assert atoms["covr"][0].imageformat == MP4Cover.FORMAT_PNG


def test_long_description_goes_to_ldes(tmp_path: Path, fake_mp4) -> None:
    container = mp4_container.Mp4TagContainer(tmp_path / "a.mp4")
    container.tags.description = "x" * 300
    container.tags.year = 1999

    container.save()

    atoms = fake_mp4.instances[0].tags
    assert atoms["desc"] == ["x" * 255]
    assert atoms["ldes"] == ["x" * 300]
    assert atoms["\xa9day"] == ["1999"]


def test_untouched_fields_are_left_alone(tmp_path: Path, fake_mp4) -> None:
    container = mp4_container.Mp4TagContainer(tmp_path / "a.mp4")
    fake_mp4.instances[0].tags["\xa9gen"] = ["Existing"]

    container.save()

    assert fake_mp4.instances[0].tags == {"\xa9gen": ["Existing"]}


def test_read_failure_becomes_container_error(tmp_path: Path, monkeypatch) -> None:
    def broken(filename):
        raise MutagenError("not an mp4")

    monkeypatch.setattr(mp4_container, "MP4", broken)

    with pytest.raises(TagContainerError) as excinfo:
        mp4_container.Mp4TagContainer(tmp_path / "a.mp4")
    assert excinfo.value.corruption_reasons == ["not an mp4"]


def test_empty_text_fields_remove_atoms(tmp_path: Path, fake_mp4) -> None:
    container = mp4_container.Mp4TagContainer(tmp_path / "a.mp4")
    atoms = fake_mp4.instances[0].tags
    atoms["\xa9nam"] = ["Old"]
    atoms["desc"] = ["Old short"]
    atoms["ldes"] = ["Old long"]
    atoms["\xa9gen"] = ["Existing"]
    container.tags.title = ""
    container.tags.description = ""

    container.save()

    assert atoms == {"\xa9gen": ["Existing"]}


def test_short_description_drops_stale_long_description(tmp_path: Path, fake_mp4) -> None:
    container = mp4_container.Mp4TagContainer(tmp_path / "a.mp4")
    atoms = fake_mp4.instances[0].tags
    atoms["ldes"] = ["y" * 400]
    container.tags.description = "Short."

    container.save()

    assert atoms["desc"] == ["Short."]
    assert "ldes" not in atoms
