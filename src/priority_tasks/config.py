"""
設定管理モジュール

関連クラス:
  - board.BoardState: 初期の選択優先度・フィルタ・並び順に使用
  - cli: ログ設定と出力フォーマットに使用
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigError
from .models import parse_filter, parse_priority, parse_sort_mode

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "app_config.yaml"
OUTPUT_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _section(yaml_data: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = yaml_data.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{key}セクションはマッピングである必要があります")
    return section


@dataclass
class BoardConfig:
    """ボード初期状態の設定"""

    default_priority: str = "medium"
    default_filter: str = "all"
    default_sort: str = "priority"


@dataclass
class Config:
    """アプリケーション設定クラス"""

    # ボード設定
    board: BoardConfig = None  # type: ignore

    # ログ設定
    log_level: str = "INFO"
    log_file: str = "logs/priority_tasks.log"

    # 出力設定
    output_format: str = "text"

    def __post_init__(self):
        """デフォルト値の初期化と検証"""
        if self.board is None:
            self.board = BoardConfig()
        self.validate()

    def validate(self) -> None:
        if parse_priority(self.board.default_priority) is None:
            raise ConfigError(f"不正なdefault_priority: {self.board.default_priority}")
        if parse_filter(self.board.default_filter) is None:
            raise ConfigError(f"不正なdefault_filter: {self.board.default_filter}")
        if parse_sort_mode(self.board.default_sort) is None:
            raise ConfigError(f"不正なdefault_sort: {self.board.default_sort}")
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(f"不正なoutput format: {self.output_format}")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"不正なlog level: {self.log_level}")

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """YAMLファイルから設定を読み込む

        Args:
            config_path: 設定ファイルパス（省略時はPRIORITY_TASKS_CONFIG、
                それもなければconfig/app_config.yamlを使用）

        Returns:
            Config: 設定インスタンス（ファイルが存在しない場合はデフォルト値）
        """
        if config_path is None:
            env_path = os.getenv("PRIORITY_TASKS_CONFIG")
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
        config_path = Path(config_path)

        if not config_path.exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        if not isinstance(yaml_data, dict):
            raise ConfigError(f"設定ファイルのトップレベルはマッピングである必要があります: {config_path}")

        # YAML構造から設定を抽出
        board_data = _section(yaml_data, "board")
        log_data = _section(yaml_data, "log")
        output_data = _section(yaml_data, "output")

        return cls(
            board=BoardConfig(
                default_priority=board_data.get("default_priority", "medium"),
                default_filter=board_data.get("default_filter", "all"),
                default_sort=board_data.get("default_sort", "priority"),
            ),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file", "logs/priority_tasks.log"),
            output_format=output_data.get("format", "text"),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """環境変数から設定を読み込む"""
        return cls(
            board=BoardConfig(
                default_priority=os.getenv("DEFAULT_PRIORITY", "medium"),
                default_filter=os.getenv("DEFAULT_FILTER", "all"),
                default_sort=os.getenv("DEFAULT_SORT", "priority"),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/priority_tasks.log"),
            output_format=os.getenv("OUTPUT_FORMAT", "text"),
        )
