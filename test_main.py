"""End-to-end tests for the command-line scanner."""
import json
import logging

import pytest

from main import default_output_path, discover_json_files, main, scan_folder
from models import FieldSet


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    for name in (
        "PLAYLIST_SCAN_DIR",
        "PLAYLIST_RESULTS_PATH",
        "PLAYLIST_INCLUDE_AUTHOR",
        "PLAYLIST_INCLUDE_DESCRIPTION",
    ):
        monkeypatch.delenv(name, raising=False)


def _write(folder, name, payload):
    path = folder / name
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


def test_scan_writes_report_and_statistics(tmp_path, capsys):
    folder = tmp_path / "exports"
    folder.mkdir()
    _write(folder, "1.json", {"playlistName": "Alpha", "shareCode": "ABC123"})
    _write(folder, "2.json", {"playlistName": "Alpha", "shareCode": "XYZ789"})
    _write(folder, "3.json", "")
    _write(folder, "notes.txt", '{"playlistName": "Ignored", "shareCode": "NOPE"}')

    assert main([str(folder), "-q", "--no-progress"]) == 0

    report = (tmp_path / "results.txt").read_text(encoding="utf-8")
    assert report == (
        "Playlist Name: Alpha\nShare Code: ABC123\n\n"
        "Playlist Name: Alpha\nShare Code: XYZ789\n"
    )
    out = capsys.readouterr().out
    assert "Processed 3 JSON file(s)." in out
    assert "Failed to parse: 1" in out
    assert "Duplicate playlist names: 1" in out


def test_author_line_omitted_when_steam_id_missing(tmp_path):
    folder = tmp_path / "exports"
    folder.mkdir()
    _write(folder, "a.json", {"playlistName": "P", "shareCode": "C", "authorName": "Ann"})
    output = tmp_path / "out.txt"

    assert main([str(folder), "--author", "-o", str(output), "-q", "--no-progress"]) == 0
    assert output.read_text(encoding="utf-8") == "Playlist Name: P\nShare Code: C\n"


def test_env_enables_optional_fields(tmp_path, monkeypatch):
    folder = tmp_path / "exports"
    folder.mkdir()
    _write(folder, "a.json", {"playlistName": "P", "shareCode": "C", "description": "Chill"})
    output = tmp_path / "out.txt"
    monkeypatch.setenv("PLAYLIST_INCLUDE_DESCRIPTION", "yes")
    monkeypatch.setenv("PLAYLIST_RESULTS_PATH", str(output))

    assert main([str(folder), "-q", "--no-progress"]) == 0
    assert "Description: Chill" in output.read_text(encoding="utf-8")


def test_csv_export(tmp_path):
    folder = tmp_path / "exports"
    folder.mkdir()
    _write(folder, "a.json", {"playlistName": "P", "shareCode": "C"})
    csv_path = tmp_path / "records.csv"

    assert main([str(folder), "--csv", str(csv_path), "-q", "--no-progress"]) == 0
    assert csv_path.read_text(encoding="utf-8").splitlines()[0] == "Playlist Name,Share Code"


def test_missing_folder_returns_error(tmp_path, capsys):
    assert main([str(tmp_path / "nope"), "-q", "--no-progress"]) == 1
    assert "Path does not exist" in capsys.readouterr().out


def test_no_json_files_writes_nothing(tmp_path, capsys):
    folder = tmp_path / "exports"
    folder.mkdir()
    _write(folder, "readme.txt", "hello")

    assert main([str(folder), "-q", "--no-progress"]) == 0
    assert "No .json files found" in capsys.readouterr().out
    assert not (tmp_path / "results.txt").exists()


def test_unwritable_output_returns_error(tmp_path):
    folder = tmp_path / "exports"
    folder.mkdir()
    _write(folder, "a.json", {"playlistName": "P", "shareCode": "C"})
    output = tmp_path / "missing-dir" / "out.txt"

    assert main([str(folder), "-o", str(output), "-q", "--no-progress"]) == 1


def test_discovery_is_sorted_and_non_recursive(tmp_path):
    (tmp_path / "nested").mkdir()
    _write(tmp_path / "nested", "inner.json", "{}")
    _write(tmp_path, "b.json", "{}")
    _write(tmp_path, "a.json", "{}")
    (tmp_path / "dir.json").mkdir()

    assert [p.name for p in discover_json_files(tmp_path)] == ["a.json", "b.json"]


def test_default_output_sits_next_to_folder(tmp_path):
    assert default_output_path(tmp_path / "exports") == tmp_path / "results.txt"


def test_quiet_hides_trace_but_keeps_duplicate_warnings(tmp_path, caplog):
    folder = tmp_path / "exports"
    folder.mkdir()
    _write(folder, "a.json", {"playlistName": "A", "shareCode": "SAME"})
    _write(folder, "b.json", {"playlistName": "B", "shareCode": "SAME"})

    assert main([str(folder), "-q", "--no-progress"]) == 0

    messages = [r.getMessage() for r in caplog.records]
    assert not any(m.startswith("File: ") for m in messages)
    assert any("Duplicate share code 'SAME' in b.json" in m for m in messages)
    assert all(r.levelno >= logging.WARNING for r in caplog.records)


def test_default_verbosity_emits_per_file_trace(tmp_path, caplog):
    folder = tmp_path / "exports"
    folder.mkdir()
    _write(folder, "a.json", {"playlistName": "A", "shareCode": "C"})

    assert main([str(folder), "--no-progress"]) == 0

    messages = [r.getMessage() for r in caplog.records]
    assert "File: a.json" in messages
    assert "  playlistName: A" in messages


def test_progress_bar_disabled_without_terminal(tmp_path, capsys):
    _write(tmp_path, "a.json", {"playlistName": "A", "shareCode": "C"})

    state = scan_folder(tmp_path, FieldSet(), progress=True)

    assert state.counters.succeeded == 1
    assert "Scanning:" not in capsys.readouterr().err
