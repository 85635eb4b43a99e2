import json
import sys
from pathlib import Path

import main


def test_rerun_failed_filters_manifest(capsys, tmp_path: Path, monkeypatch) -> None:
    movie_ok = tmp_path / "ok.mp4"
    movie_ok.write_text("data", encoding="utf-8")
    movie_fail = tmp_path / "fail.mp4"
    movie_fail.write_text("data", encoding="utf-8")

    cfg_path = tmp_path / "config.json"
    cfg_path.write_text(
        json.dumps({"rename": {"mode": "movie"}, "run": {"log_dir": str(tmp_path / "runs")}}),
        encoding="utf-8",
    )

    previous = tmp_path / "previous"
    previous.mkdir()
    (previous / "manifest.jsonl").write_text(
        "\n".join(
            [
                json.dumps({"path": str(movie_ok), "status": "ok", "metadata": {"title": "Ok"}}),
                json.dumps({"path": str(movie_fail), "status": "failed", "metadata": {"title": "Fixed", "year": 2001}}),
            ]
        ),
        encoding="utf-8",
    )

    monkeypatch.setattr(
        sys,
        "argv",
        ["main.py", "--config", str(cfg_path), "--rerun-failed", str(previous), "--no-tag"],
    )

    exit_code = main.main()

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Found 1 file(s)." in out
    assert movie_ok.exists()
    assert (tmp_path / "Fixed (2001).mp4").exists()


def test_rerun_failed_with_nothing_to_do(capsys, tmp_path: Path, monkeypatch) -> None:
    manifest = tmp_path / "manifest.jsonl"
    manifest.write_text(json.dumps({"path": "a.mp4", "status": "ok", "metadata": {}}), encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["main.py", "--rerun-failed", str(manifest)])

    exit_code = main.main()

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "No failed files found in manifest." in out
