import json
from datetime import date
from pathlib import Path

import pytest

from core.files.records import ManifestError, entry_from_dict, load_manifest
from core.metadata import FileType, MetadataRecord


def test_json_array_with_nested_metadata(tmp_path: Path) -> None:
    manifest = tmp_path / "manifest.json"
    manifest.write_text(
        json.dumps(
            [
                {
                    "path": "a.mkv",
                    "metadata": {
                        "fileType": "tv",
                        "title": "Pilot",
                        "seriesName": "Show",
                        "season": 1,
                        "episode": 2,
                        "seasonEpisodes": 10,
                        "coverURL": "https://img/p.jpg",
                        "catalogId": 99,
                    },
                }
            ]
        ),
        encoding="utf-8",
    )

    entries = load_manifest(manifest)

    assert len(entries) == 1
    entry = entries[0]
    assert entry.path == tmp_path.resolve() / "a.mkv"
    assert entry.metadata.file_type == FileType.TV
    assert entry.metadata.series_name == "Show"
    assert entry.metadata.season_episodes == 10
    assert entry.metadata.catalog_id == 99
    assert entry.metadata.cover_url == "https://img/p.jpg"


def test_json_lines_with_inline_metadata_skips_bad_lines(tmp_path: Path) -> None:
    manifest = tmp_path / "manifest.jsonl"
    lines = [
        json.dumps({"path": "/abs/film.mp4", "file_type": "movie", "title": "Film", "date": "1999-06-01"}),
        "not json",
        json.dumps({"title": "no path"}),
        json.dumps({"path": "b.mp4", "title": "Bad", "date": "not-a-date"}),
        "",
    ]
    manifest.write_text("\n".join(lines), encoding="utf-8")

    entries = load_manifest(manifest)

    assert [entry.path for entry in entries] == [Path("/abs/film.mp4")]
    assert entries[0].metadata.date == date(1999, 6, 1)


def test_entry_from_dict_accepts_year_only_dates(tmp_path: Path) -> None:
    entry = entry_from_dict({"path": "x.mp4", "metadata": {"title": "Film", "year": 1986}}, tmp_path)

    assert entry.metadata.year == 1986
    assert entry.metadata.file_type == FileType.MOVIE


def test_metadata_dict_round_trip() -> None:
    record = MetadataRecord(
        file_type=FileType.TV,
        title="Pilot",
        series_name="Show",
        genres=("Drama",),
        season=1,
        episode=1,
        date=date(2001, 2, 3),
    )

    assert MetadataRecord.from_dict(record.to_dict()) == record


def test_metadata_str() -> None:
    tv = MetadataRecord(file_type=FileType.TV, title="Pilot", series_name="Show", season=1, episode=5)
    movie = MetadataRecord(file_type=FileType.MOVIE, title="Film", date=date(1999, 1, 1))

    assert str(tv) == "Show S01E05: Pilot"
    assert str(movie) == "Film (1999)"
    assert str(MetadataRecord(file_type=FileType.MOVIE, title="Film")) == "Film"


def test_truncated_json_array_is_a_manifest_error(tmp_path: Path) -> None:
    manifest = tmp_path / "manifest.json"
    manifest.write_text('[{"path": "a.mkv", "metadata": {}}, ', encoding="utf-8")

    with pytest.raises(ManifestError, match="Unreadable manifest"):
        load_manifest(manifest)
