"""タスク管理CLI の動作テスト"""

import io
import json
import logging
import subprocess
import sys
from pathlib import Path

import pytest

from src.priority_tasks.board import BoardState
from src.priority_tasks.cli import TaskSession, format_stats_text, format_task_text
from src.priority_tasks.stats import PriorityStats


@pytest.fixture
def streams():
    return io.StringIO(), io.StringIO()


def make_session(streams, output_format="text"):
    out, err = streams
    return TaskSession(BoardState(), output_format=output_format, out=out, err=err)


def task_id_for(session, text):
    return next(task.id for task in session.state.store if task.text == text)


def test_session_add_and_list(streams):
    """追加した順と無関係に優先度順で表示される"""
    session = make_session(streams)
    session.run(
        [
            "select low",
            "add Buy milk",
            "select high",
            "add File taxes",
            "select medium",
            "add Call mom",
        ]
    )
    out, _ = streams
    out.truncate(0)
    out.seek(0)

    session.execute("list")

    lines = out.getvalue().splitlines()
    assert [line.split("| ", 1)[1] for line in lines] == ["File taxes", "Call mom", "Buy milk"]


def test_session_add_keeps_spacing_inside_text(streams):
    session = make_session(streams)
    session.execute('add Read "Dune"  again')
    assert session.state.store.list()[0].text == 'Read "Dune"  again'


def test_session_toggle_and_stats(streams):
    session = make_session(streams)
    session.run(["select low", "add Buy milk", "select high", "add File taxes"])
    milk_id = task_id_for(session, "Buy milk")
    out, _ = streams
    out.truncate(0)
    out.seek(0)

    session.run([f"toggle {milk_id}", "stats"])

    output = out.getvalue()
    assert f"Completed: [{milk_id}] [x] Low" in output
    assert "High: 1 | Medium: 0 | Low: 0" in output
    assert "1 active tasks" in output
    assert "1 high priority • 1 completed" in output


def test_session_filter_sort_and_empty_message(streams):
    session = make_session(streams)
    out, _ = streams
    session.run(["list"])
    assert "Add a task to get started!" in out.getvalue()

    session.run(["add Water plants", "filter high", "list"])
    assert "No high priority tasks." in out.getvalue()
    assert session.state.filter_priority == "high"

    session.execute("sort created")
    assert session.state.sort_mode.value == "created"


def test_session_priority_and_delete(streams):
    session = make_session(streams)
    session.execute("add Buy milk")
    milk_id = task_id_for(session, "Buy milk")

    session.execute(f"priority {milk_id} high")
    assert session.state.store.get(milk_id).priority.value == "high"

    session.execute(f"delete {milk_id}")
    assert len(session.state.store) == 0


def test_session_reports_no_ops_as_notices(streams):
    session = make_session(streams)
    out, err = streams

    session.run(["add    ", "toggle 99", "delete 99", "priority 99 low"])

    assert out.getvalue() == ""
    assert err.getvalue().count("Notice:") == 4
    assert "Error:" not in err.getvalue()


@pytest.mark.parametrize(
    "line",
    ["frobnicate", "toggle", "toggle abc", "priority 1", "priority 1 urgent", "select", "filter urgent", "sort random", 'add "x', 'toggle "1'],
)
def test_session_reports_malformed_commands(streams, line):
    session = make_session(streams)
    before = session.state

    assert session.execute(line) is True

    _, err = streams
    if line.startswith("add"):
        # add は本文をそのまま扱うため解析エラーにならない
        assert session.state is not before
    else:
        assert err.getvalue().startswith("Error:")
        assert session.state is before


def test_session_survives_unexpected_handler_error(streams, monkeypatch, caplog):
    """想定外の例外はログに記録し、セッションは継続する"""
    session = make_session(streams)

    def broken_list(rest):
        raise RuntimeError("renderer exploded")

    monkeypatch.setitem(session._commands, "list", broken_list)

    with caplog.at_level(logging.ERROR, logger="src.priority_tasks.cli"):
        session.run(["add Before", "list", "add After"])

    _, err = streams
    assert "Error:" in err.getvalue()
    assert "renderer exploded" in err.getvalue()
    assert [task.text for task in session.state.store] == ["Before", "After"]
    assert any(record.exc_info for record in caplog.records)


def test_session_stops_on_quit(streams):
    session = make_session(streams)
    session.run(["add First", "quit", "add Second"])
    assert [task.text for task in session.state.store] == ["First"]


def test_session_json_output(streams):
    session = make_session(streams, output_format="json")
    out, _ = streams

    session.run(["select high", "add Ship release", "list"])

    lines = out.getvalue().splitlines()
    assert json.loads(lines[0]) == {"selected_priority": "high"}
    added = json.loads(lines[1])
    assert added["text"] == "Ship release"
    assert added["priority"] == "high"
    view = json.loads(lines[2])
    assert [task["id"] for task in view["tasks"]] == [added["id"]]
    assert view["stats"]["total"] == 1


def test_format_helpers():
    stats = PriorityStats(high=0, medium=2, low=1, total=3)
    assert format_stats_text(stats, completed=0, has_tasks=False) == "High: 0 | Medium: 2 | Low: 1"
    assert format_stats_text(stats, completed=4, has_tasks=True).splitlines()[1:] == [
        "3 active tasks",
        "2 medium priority • 1 low priority • 4 completed",
    ]

    state = BoardState().add_task("Call mom")
    task = state.store.list()[0]
    assert format_task_text(task) == f"[{task.id}] [ ] Medium | Call mom"


def run_cli(args, stdin_text, tmp_path):
    """CLI実行ヘルパー"""
    config_path = tmp_path / "app_config.yaml"
    config_path.write_text(
        f"log:\n  file: {tmp_path / 'logs' / 'cli.log'}\n", encoding="utf-8"
    )
    cmd = [sys.executable, "-m", "src.priority_tasks", "--config", str(config_path)] + args
    return subprocess.run(
        cmd,
        input=stdin_text,
        capture_output=True,
        text=True,
        cwd=Path(__file__).parent.parent,
    )


def test_cli_text_session(tmp_path):
    result = run_cli([], "select high\nadd File taxes\nadd Pay rent\nlist\n", tmp_path)

    assert result.returncode == 0
    assert "Added:" in result.stdout
    assert "File taxes" in result.stdout
    assert (tmp_path / "logs" / "cli.log").exists()


def test_cli_json_session(tmp_path):
    result = run_cli(["--format", "json"], "add Buy milk\nstats\n", tmp_path)

    assert result.returncode == 0
    lines = result.stdout.splitlines()
    assert json.loads(lines[0])["priority"] == "medium"
    assert json.loads(lines[1]) == {"high": 0, "medium": 1, "low": 0, "total": 1}


@pytest.mark.parametrize(
    "content",
    ["output:\n  format: xml\n", "log:\n  level: verbose\n", "- a\n- b\n"],
)
def test_cli_invalid_config(tmp_path, content):
    config_path = tmp_path / "bad.yaml"
    config_path.write_text(content, encoding="utf-8")
    result = subprocess.run(
        [sys.executable, "-m", "src.priority_tasks", "--config", str(config_path)],
        input="",
        capture_output=True,
        text=True,
        cwd=Path(__file__).parent.parent,
    )

    assert result.returncode == 1
    assert "Error:" in result.stderr
    assert "Traceback" not in result.stderr
