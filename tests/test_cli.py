from __future__ import annotations

import json
from pathlib import Path

import pytest

from tasklist.cli import main


def _run(tmp_path: Path, *argv: str) -> int:
    return main(['--project-dir', str(tmp_path), *argv])


def _export(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> list[dict]:
    capsys.readouterr()
    assert _run(tmp_path, 'export') == 0
    return json.loads(capsys.readouterr().out)["todos"]


def test_add_list_and_export(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(tmp_path, 'add', 'Buy milk') == 0
    assert _run(tmp_path, 'add', 'Write report') == 0
    out = capsys.readouterr().out
    assert "Write report" in out
    assert "2 items left" in out

    todos = _export(tmp_path, capsys)
    assert [t["title"] for t in todos] == ["Buy milk", "Write report"]
    assert all(t["completed"] is False for t in todos)


def test_blank_add_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(tmp_path, 'add', '   ') == 1
    assert "blank" in capsys.readouterr().err
    assert _export(tmp_path, capsys) == []


def test_toggle_done_undo(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(tmp_path, 'add', 'task')
    (todo,) = _export(tmp_path, capsys)
    todo_id = str(todo["id"])

    assert _run(tmp_path, 'toggle', todo_id) == 0
    assert _export(tmp_path, capsys)[0]["completed"] is True
    assert _run(tmp_path, 'undo', todo_id) == 0
    assert _export(tmp_path, capsys)[0]["completed"] is False
    assert _run(tmp_path, 'done', todo_id) == 0
    assert _export(tmp_path, capsys)[0]["completed"] is True


def test_list_filters(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(tmp_path, 'add', 'open item')
    _run(tmp_path, 'add', 'closed item')
    closed = _export(tmp_path, capsys)[1]["id"]
    _run(tmp_path, 'done', str(closed))
    capsys.readouterr()

    assert _run(tmp_path, 'list', 'active') == 0
    out = capsys.readouterr().out
    assert "open item" in out
    assert "closed item" not in out

    assert _run(tmp_path, '--filter', 'completed', 'list') == 0
    out = capsys.readouterr().out
    assert "closed item" in out
    assert "open item" not in out


def test_edit_and_empty_edit_deletes(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(tmp_path, 'add', 'draft')
    todo_id = str(_export(tmp_path, capsys)[0]["id"])

    assert _run(tmp_path, 'edit', todo_id, 'final') == 0
    assert _export(tmp_path, capsys)[0]["title"] == "final"

    assert _run(tmp_path, 'edit', todo_id, '') == 0
    assert _export(tmp_path, capsys) == []


def test_toggle_all_and_clear_completed(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(tmp_path, 'add', 'a')
    _run(tmp_path, 'add', 'b')
    assert _run(tmp_path, 'toggle-all') == 0
    assert all(t["completed"] for t in _export(tmp_path, capsys))
    assert _run(tmp_path, 'toggle-all', '--undo') == 0
    assert not any(t["completed"] for t in _export(tmp_path, capsys))

    first = _export(tmp_path, capsys)[0]["id"]
    _run(tmp_path, 'done', str(first))
    assert _run(tmp_path, 'clear-completed') == 0
    assert [t["title"] for t in _export(tmp_path, capsys)] == ["b"]


def test_rm_and_drop(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(tmp_path, 'add', 'a')
    _run(tmp_path, 'add', 'b')
    first = _export(tmp_path, capsys)[0]["id"]
    assert _run(tmp_path, 'rm', str(first)) == 0
    assert [t["title"] for t in _export(tmp_path, capsys)] == ["b"]
    assert _run(tmp_path, 'drop') == 0
    assert _export(tmp_path, capsys) == []


@pytest.mark.parametrize("command", ['toggle', 'done', 'undo', 'rm'])
def test_unknown_id(tmp_path: Path, capsys: pytest.CaptureFixture[str], command: str) -> None:
    assert _run(tmp_path, command, '12345') == 1
    assert "No todo with id 12345" in capsys.readouterr().err


def test_corrupt_store_exits_nonzero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    store_dir = tmp_path / ".tasklist" / "store"
    store_dir.mkdir(parents=True)
    (store_dir / "todos-python.json").write_text("{broken", encoding="utf-8")

    assert _run(tmp_path, 'list') == 1
    assert "Storage error" in capsys.readouterr().err
    assert (store_dir / "todos-python.json").read_text(encoding="utf-8") == "{broken"


def test_corrupt_store_reset_policy(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    state = tmp_path / ".tasklist"
    (state / "store").mkdir(parents=True)
    (state / "store" / "todos-python.json").write_text("{broken", encoding="utf-8")
    (state / "config.yaml").write_text("storage:\n  on_corrupt: reset\n", encoding="utf-8")

    assert _run(tmp_path, 'list') == 0
    assert _export(tmp_path, capsys) == []
    assert list((state / "store").glob("todos-python.corrupt-*.json"))


def test_bad_config_exits_nonzero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    state = tmp_path / ".tasklist"
    state.mkdir()
    (state / "config.yaml").write_text("storage: [oops\n", encoding="utf-8")
    assert _run(tmp_path, 'list') == 1
    assert "Invalid config" in capsys.readouterr().err


def test_yaml_storage_format(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    state = tmp_path / ".tasklist"
    state.mkdir()
    (state / "config.yaml").write_text("store_name: work\nstorage:\n  format: yaml\n", encoding="utf-8")
    assert _run(tmp_path, 'add', 'yaml backed') == 0
    assert (state / "store" / "work.yaml").exists()
    assert [t["title"] for t in _export(tmp_path, capsys)] == ["yaml backed"]


def test_undecodable_store_exits_nonzero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    store_dir = tmp_path / ".tasklist" / "store"
    store_dir.mkdir(parents=True)
    (store_dir / "todos-python.json").write_bytes(b"\xff\xfe{not utf8")

    assert _run(tmp_path, 'list') == 1
    assert "not valid UTF-8" in capsys.readouterr().err
    assert (store_dir / "todos-python.json").read_bytes() == b"\xff\xfe{not utf8"


def test_undecodable_store_reset_policy(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    state = tmp_path / ".tasklist"
    (state / "store").mkdir(parents=True)
    (state / "store" / "todos-python.json").write_bytes(b"\xff\xfe{not utf8")
    (state / "config.yaml").write_text("storage:\n  on_corrupt: reset\n", encoding="utf-8")

    assert _run(tmp_path, 'list') == 0
    assert _export(tmp_path, capsys) == []
    archived = list((state / "store").glob("todos-python.corrupt-*.json"))
    assert [p.read_bytes() for p in archived] == [b"\xff\xfe{not utf8"]


def test_invalid_store_name_falls_back_to_default(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    state = tmp_path / ".tasklist"
    state.mkdir()
    (state / "config.yaml").write_text("store_name: my todos\n", encoding="utf-8")
    assert _run(tmp_path, 'add', 'still works') == 0
    assert (state / "store" / "todos-python.json").exists()
    assert [t["title"] for t in _export(tmp_path, capsys)] == ["still works"]
