"""
Tests for the command flow in core.py
"""
import dataclasses
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from nsort.core import check_conditions, is_home_directory, main
from nsort.models import AppConfig


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A fake home directory so tests never touch the real one."""
    path = tmp_path / "home"
    path.mkdir()
    with patch.object(Path, "home", return_value=path):
        yield path


@pytest.fixture
def target(home: Path) -> Path:
    path = home / "Downloads"
    path.mkdir()
    return path


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "store" / "mappings.json"


def run_main(*args: str) -> None:
    with patch("sys.argv", ["nsort", *args]):
        main()


def read_store(path: Path) -> dict[str, str]:
    return json.loads(path.read_text(encoding="utf-8"))


def test_is_home_directory(home, target):
    assert is_home_directory(home)
    assert is_home_directory(home / "Downloads" / "..")
    assert not is_home_directory(target)


def test_main_sorts_by_mapping(target, store_path, capsys):
    (target / "song.mp3").write_text("x", encoding="utf-8")
    (target / "archive.xyz").write_text("x", encoding="utf-8")

    run_main("-t", str(target), "--store", str(store_path))

    assert (target / "Music" / "song.mp3").is_file()
    assert (target / "Other" / "archive.xyz").is_file()
    assert "Moved files: 2" in capsys.readouterr().out


def test_main_sorts_by_kind(target, store_path):
    (target / "notes.xyz").write_text("x", encoding="utf-8")

    run_main("-t", str(target), "--store", str(store_path), "-by-kind")

    assert (target / "xyz" / "notes.xyz").is_file()


def test_main_refuses_home_directory(home, store_path):
    (home / "song.mp3").write_text("x", encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        run_main("-t", str(home), "--store", str(store_path))

    assert exc_info.value.code == 1
    assert (home / "song.mp3").is_file()
    assert not (home / "Music").exists()
    assert not store_path.exists()


def test_main_refuses_home_directory_as_cwd(home, store_path, monkeypatch):
    monkeypatch.chdir(home)
    (home / "song.mp3").write_text("x", encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        run_main("--store", str(store_path))

    assert exc_info.value.code == 1
    assert (home / "song.mp3").is_file()


def test_main_missing_target(home, tmp_path, store_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        run_main("-t", str(tmp_path / "missing"), "--store", str(store_path))

    assert exc_info.value.code == 1
    assert "does not exist" in capsys.readouterr().out


def test_main_add_mapping(target, store_path, capsys):
    run_main("-t", str(target), "--store", str(store_path), "-map", "go:Source")

    assert read_store(store_path)["go"] == "Source"
    assert "Successfully added mapping" in capsys.readouterr().out


def test_main_add_mapping_twice(target, store_path, capsys):
    run_main("-t", str(target), "--store", str(store_path), "-map", "go:Source")

    with pytest.raises(SystemExit) as exc_info:
        run_main("-t", str(target), "--store", str(store_path), "-map", "go:Source")

    assert exc_info.value.code == 1
    assert "already mapped to [ Source ]" in capsys.readouterr().out


def test_main_delete_mapping(target, store_path, capsys):
    run_main("-t", str(target), "--store", str(store_path), "-map", "go:Source")
    run_main("-t", str(target), "--store", str(store_path), "-del", "go:Source")

    assert "go" not in read_store(store_path)
    assert "Deleted mapping" in capsys.readouterr().out


def test_main_delete_missing_mapping(target, store_path, capsys):
    run_main("-t", str(target), "--store", str(store_path), "-del", "go:Source")

    assert "No mapping" in capsys.readouterr().out


def test_main_update_mapping(target, store_path, capsys):
    run_main("-t", str(target), "--store", str(store_path), "-map", "go:Source")
    run_main("-t", str(target), "--store", str(store_path), "-upd", "go:Code")

    assert read_store(store_path)["go"] == "Code"
    assert "Successfully updated mapping" in capsys.readouterr().out


def test_main_update_same_mapping(target, store_path):
    """Updating to the current folder deletes then re-adds it."""
    run_main("-t", str(target), "--store", str(store_path), "-map", "go:Source")
    run_main("-t", str(target), "--store", str(store_path), "-upd", "go:Source")

    assert read_store(store_path)["go"] == "Source"


def test_main_add_builtin_mapping_notes_default(target, store_path, capsys):
    """Changing a built-in extension warns that the default comes back."""
    run_main("-t", str(target), "--store", str(store_path), "-map", "mp3:Podcasts")

    out = capsys.readouterr().out
    assert "built-in mapping" in out
    assert "Music" in out
    assert "restored" in out
    assert read_store(store_path)["mp3"] == "Podcasts"


def test_main_delete_builtin_mapping_notes_default(target, store_path, capsys):
    run_main("-t", str(target), "--store", str(store_path), "-del", "mp3:Music")

    out = capsys.readouterr().out
    assert "built-in" in out
    assert "Deleted mapping" in out


def test_main_update_builtin_to_default_notes(target, store_path, capsys):
    """The default comes back between delete and add, so the add is a duplicate."""
    with pytest.raises(SystemExit) as exc_info:
        run_main("-t", str(target), "--store", str(store_path), "-upd", "mp3:Music")

    out = capsys.readouterr().out
    assert exc_info.value.code == 1
    assert "built-in" in out
    assert "already mapped to [ Music ]" in out


def test_main_user_mapping_has_no_note(target, store_path, capsys):
    run_main("-t", str(target), "--store", str(store_path), "-map", "go:Source")

    assert "built-in" not in capsys.readouterr().out


def test_main_builtin_note_quiet(target, store_path, capsys):
    run_main("-t", str(target), "--store", str(store_path), "-q", "-map", "mp3:Podcasts")

    assert capsys.readouterr().out == ""


def test_main_mapping_refused_in_home(home, store_path, monkeypatch):
    monkeypatch.chdir(home)

    with pytest.raises(SystemExit) as exc_info:
        run_main("--store", str(store_path), "-map", "go:Source")

    assert exc_info.value.code == 1
    assert not store_path.exists()


def test_main_list_mappings(target, store_path, capsys):
    run_main("-t", str(target), "--store", str(store_path), "-map", "go:Source")
    run_main("--store", str(store_path), "-l")

    out = capsys.readouterr().out
    assert "Mappings:" in out
    assert "Source" in out
    assert "Music" in out


def test_main_corrupt_store(target, store_path, capsys):
    store_path.parent.mkdir(parents=True)
    store_path.write_text("{broken", encoding="utf-8")
    (target / "song.mp3").write_text("x", encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        run_main("-t", str(target), "--store", str(store_path))

    assert exc_info.value.code == 1
    assert "Could not read store" in capsys.readouterr().out
    assert (target / "song.mp3").is_file()


def test_main_store_folder_outside_target(home, target, store_path, capsys):
    """A store folder escaping the target aborts before any file moves."""
    store_path.parent.mkdir(parents=True)
    store_path.write_text(json.dumps({"go": ".."}), encoding="utf-8")
    (target / "main.go").write_text("x", encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        run_main("-t", str(target), "--store", str(store_path))

    assert exc_info.value.code == 1
    assert "Invalid folder name" in capsys.readouterr().out
    assert (target / "main.go").is_file()
    assert not (home / "main.go").exists()


def test_main_destination_failure(target, store_path):
    (target / "Music").write_text("not a folder", encoding="utf-8")
    (target / "song.mp3").write_text("x", encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        run_main("-t", str(target), "--store", str(store_path))

    assert exc_info.value.code == 1


def test_main_move_failure_keeps_exit_status(target, store_path):
    (target / "Music").mkdir()
    (target / "Music" / "song.mp3").write_text("old", encoding="utf-8")
    (target / "song.mp3").write_text("new", encoding="utf-8")
    (target / "doc.pdf").write_text("x", encoding="utf-8")

    run_main("-t", str(target), "--store", str(store_path))

    assert (target / "Documents" / "doc.pdf").is_file()
    assert (target / "song.mp3").is_file()


def test_main_dry_run(target, store_path, capsys):
    (target / "song.mp3").write_text("x", encoding="utf-8")

    run_main("-t", str(target), "--store", str(store_path), "-n")

    assert (target / "song.mp3").is_file()
    out = capsys.readouterr().out
    assert "Dry run" in out
    assert "song.mp3" in out


def test_check_conditions_version(tmp_path, capsys):
    cfg = AppConfig(target_dir=tmp_path, show_version=True)

    with pytest.raises(SystemExit) as exc_info:
        check_conditions(cfg)

    assert exc_info.value.code == 0
    assert "version" in capsys.readouterr().out


def test_check_conditions_passes(target):
    cfg = AppConfig(target_dir=target)
    check_conditions(cfg)


def test_check_conditions_list_skips_guard(home):
    cfg = dataclasses.replace(AppConfig(target_dir=home), list_mappings=True)
    check_conditions(cfg)
