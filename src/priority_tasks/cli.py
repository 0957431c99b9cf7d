#!/usr/bin/env python3
"""
優先度付きタスク管理CLI - 標準入力から1行1コマンドで操作する対話セッション

Usage:
    python -m src.priority_tasks [--config PATH] [--format json|text] [--log-level LEVEL]

Commands:
    add <text>                              選択中の優先度でタスクを追加
    select high|medium|low                  追加時の優先度を選択
    toggle <id>                             完了/未完了を切り替え
    delete <id>                             タスクを削除
    priority <id> high|medium|low           優先度を変更
    filter all|high|medium|low              表示する優先度を絞り込み
    sort priority|created|alphabetical      並び順を変更
    list                                    絞り込み・並び替え後の一覧を表示
    stats                                   未完了タスクの集計を表示
    help                                    コマンド一覧を表示
    quit | exit                             終了
"""

from __future__ import annotations

import argparse
import json
import logging
import shlex
import sys
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, TextIO

from .board import BoardState
from .config import OUTPUT_FORMATS, Config
from .exceptions import CommandError, ConfigError
from .logger import setup_logger
from .models import FILTER_ALL, Priority, SortMode, Task, parse_filter, parse_priority, parse_sort_mode
from .schemas import serialize_stats, serialize_task, serialize_view
from .stats import PriorityStats, count_completed

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  add <text>                          add a task with the selected priority
  select high|medium|low              choose the priority for new tasks
  toggle <id>                         mark a task complete / incomplete
  delete <id>                         delete a task
  priority <id> high|medium|low       change a task's priority
  filter all|high|medium|low          show one priority level or all
  sort priority|created|alphabetical  change the sort order
  list                                show the tasks
  stats                               show open task counts
  quit                                leave the session"""

EXIT_COMMANDS = {"quit", "exit", "q"}


def format_task_text(task: Task) -> str:
    """タスクをテキスト形式で整形"""
    mark = "x" if task.completed else " "
    return f"[{task.id}] [{mark}] {task.priority.label:<6} | {task.text}"


def format_stats_text(stats: PriorityStats, completed: int, has_tasks: bool) -> str:
    """集計をテキスト形式で整形（タスクが1件以上ある場合はサマリー行を付与）"""
    lines = [" | ".join(f"{level.label}: {getattr(stats, level.value)}" for level in Priority)]
    if has_tasks:
        lines.append(f"{stats.total} active tasks")
        parts = [
            f"{getattr(stats, level.value)} {level.value} priority"
            for level in Priority
            if getattr(stats, level.value) > 0
        ]
        parts.append(f"{completed} completed")
        lines.append(" • ".join(parts))
    return "\n".join(lines)


def format_empty_text(state: BoardState) -> str:
    """一覧が空の場合のメッセージ"""
    if state.filter_priority != FILTER_ALL:
        return f"No tasks found. No {state.filter_priority.value} priority tasks."
    return "No tasks found. Add a task to get started!"


def _parse_task_id(args: List[str]) -> int:
    if not args:
        raise CommandError("タスクIDを指定してください。")
    try:
        return int(args[0])
    except ValueError as exc:
        raise CommandError(f"不正なタスクID: {args[0]}") from exc


def _choices(values: Iterable[str]) -> str:
    return "|".join(values)


class TaskSession:
    """BoardStateを保持し、1行ずつコマンドを実行するセッション"""

    def __init__(
        self,
        state: Optional[BoardState] = None,
        output_format: str = "text",
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported output format: {output_format}")
        self.state = state if state is not None else BoardState()
        self.output_format = output_format
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self._commands: Dict[str, Callable[[str], None]] = {
            "add": self.cmd_add,
            "select": self.cmd_select,
            "toggle": self.cmd_toggle,
            "delete": self.cmd_delete,
            "priority": self.cmd_priority,
            "filter": self.cmd_filter,
            "sort": self.cmd_sort,
            "list": self.cmd_list,
            "stats": self.cmd_stats,
            "help": self.cmd_help,
        }

    # 出力ヘルパー
    def _print(self, text: str) -> None:
        print(text, file=self.out)

    def _print_json(self, payload: object) -> None:
        print(json.dumps(payload, ensure_ascii=False), file=self.out)

    def _notice(self, text: str) -> None:
        print(f"Notice: {text}", file=self.err)

    def _report_task(self, verb: str, task: Task) -> None:
        if self.output_format == "json":
            self._print(serialize_task(task).model_dump_json())
        else:
            self._print(f"{verb}: {format_task_text(task)}")

    def _report_selection(self, key: str, value: str) -> None:
        if self.output_format == "json":
            self._print_json({key: value})
        else:
            self._print(f"{key.replace('_', ' ').capitalize()}: {value}")

    # コマンド
    def cmd_add(self, rest: str) -> None:
        """新しいタスクを追加"""
        before = self.state.store
        self.state = self.state.add_task(rest)
        if self.state.store is before:
            self._notice("タスク本文が空のため追加しませんでした。")
            return
        self._report_task("Added", self.state.store.get(self.state.store.last_id))

    def cmd_select(self, rest: str) -> None:
        args = shlex.split(rest)
        level = parse_priority(args[0]) if args else None
        if level is None:
            raise CommandError(f"優先度を指定してください: {_choices(p.value for p in Priority)}")
        self.state = self.state.select_priority(level)
        self._report_selection("selected_priority", level.value)

    def cmd_toggle(self, rest: str) -> None:
        """完了状態を切り替え"""
        task_id = _parse_task_id(shlex.split(rest))
        before = self.state.store
        self.state = self.state.toggle_task(task_id)
        if self.state.store is before:
            self._notice(f"ID {task_id} のタスクが見つかりません。")
            return
        task = self.state.store.get(task_id)
        self._report_task("Completed" if task.completed else "Reopened", task)

    def cmd_delete(self, rest: str) -> None:
        """タスクを削除"""
        task_id = _parse_task_id(shlex.split(rest))
        before = self.state.store
        self.state = self.state.delete_task(task_id)
        if self.state.store is before:
            self._notice(f"ID {task_id} のタスクが見つかりません。")
            return
        if self.output_format == "json":
            self._print_json({"deleted": True, "id": task_id})
        else:
            self._print(f"Deleted: ID {task_id}")

    def cmd_priority(self, rest: str) -> None:
        """タスクの優先度を変更"""
        args = shlex.split(rest)
        task_id = _parse_task_id(args)
        level = parse_priority(args[1]) if len(args) > 1 else None
        if level is None:
            raise CommandError(f"優先度を指定してください: {_choices(p.value for p in Priority)}")
        before = self.state.store
        self.state = self.state.change_priority(task_id, level)
        if self.state.store is before:
            self._notice(f"ID {task_id} のタスクが見つかりません。")
            return
        self._report_task("Updated", self.state.store.get(task_id))

    def cmd_filter(self, rest: str) -> None:
        args = shlex.split(rest)
        value = parse_filter(args[0]) if args else None
        if value is None:
            choices = _choices([FILTER_ALL, *(p.value for p in Priority)])
            raise CommandError(f"フィルタを指定してください: {choices}")
        self.state = self.state.set_filter(value)
        self._report_selection("filter", value.value if isinstance(value, Priority) else value)

    def cmd_sort(self, rest: str) -> None:
        args = shlex.split(rest)
        mode = parse_sort_mode(args[0]) if args else None
        if mode is None:
            raise CommandError(f"並び順を指定してください: {_choices(m.value for m in SortMode)}")
        self.state = self.state.set_sort(mode)
        self._report_selection("sort", mode.value)

    def cmd_list(self, rest: str) -> None:
        """絞り込み・並び替え後の一覧を表示"""
        if self.output_format == "json":
            self._print(serialize_view(self.state).model_dump_json())
            return
        tasks = self.state.visible_tasks()
        if not tasks:
            self._print(format_empty_text(self.state))
            return
        for task in tasks:
            self._print(format_task_text(task))

    def cmd_stats(self, rest: str) -> None:
        """未完了タスクの集計を表示"""
        stats = self.state.stats()
        if self.output_format == "json":
            self._print(serialize_stats(stats).model_dump_json())
            return
        completed = count_completed(self.state.store)
        self._print(format_stats_text(stats, completed, has_tasks=len(self.state.store) > 0))

    def cmd_help(self, rest: str) -> None:
        self._print(HELP_TEXT)

    def execute(self, line: str) -> bool:
        """1行分のコマンドを実行する。セッション終了ならFalseを返す。"""
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            return True

        parts = stripped.split(None, 1)
        command = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""

        if command in EXIT_COMMANDS:
            return False

        handler = self._commands.get(command)
        try:
            if handler is None:
                raise CommandError(f"不明なコマンド: {command}（helpで一覧を表示）")
            handler(rest)
        except CommandError as exc:
            print(f"Error: {exc}", file=self.err)
        except ValueError as exc:
            # shlexの引用符エラーなど
            logger.warning("Failed to parse command %r: %s", stripped, exc)
            print(f"Error: コマンドを解析できません: {exc}", file=self.err)
        except Exception as exc:
            logger.exception("Command failed: %r", stripped)
            print(f"Error: コマンドの実行に失敗しました: {exc}", file=self.err)
        return True

    def run(self, lines: Iterable[str]) -> int:
        for line in lines:
            if not self.execute(line):
                break
        return 0


def _prompt_lines(prompt: str) -> Iterator[str]:
    while True:
        try:
            yield input(prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            return


def print_banner() -> None:
    """起動バナーを表示"""
    print("=" * 60)
    print("Priority Task Manager")
    print("=" * 60)
    print("終了するには 'quit' または Ctrl+D を入力してください。")
    print("コマンド一覧は 'help' で表示できます。")
    print("=" * 60)
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="優先度付きタスク管理CLI - 標準入力から1行1コマンドで操作",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=str,
        help="YAML設定ファイルのパス（デフォルト: config/app_config.yaml）",
    )
    parser.add_argument(
        "--format",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="出力フォーマット（デフォルト: 設定ファイルの値）",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="ログレベル（デフォルト: 設定ファイルの値）",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLIエントリポイント"""
    args = build_parser().parse_args(argv)

    try:
        config = Config.from_yaml(Path(args.config) if args.config else None)
    except ConfigError as exc:
        print(f"Error: 設定ファイルが不正です: {exc}", file=sys.stderr)
        return 1

    setup_logger(log_level=args.log_level or config.log_level, log_file=config.log_file)

    session = TaskSession(
        BoardState.from_config(config),
        output_format=args.format or config.output_format,
    )
    logger.info("Session started (format=%s)", session.output_format)

    if sys.stdin.isatty():
        print_banner()
        lines: Iterable[str] = _prompt_lines("> ")
    else:
        lines = sys.stdin

    try:
        return session.run(lines)
    finally:
        logger.info("Session finished with %d task(s)", len(session.state.store))


if __name__ == "__main__":
    sys.exit(main())
