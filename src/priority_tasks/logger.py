"""
ロギング設定モジュール
"""

import logging
from pathlib import Path


def setup_logger(log_level: str = "INFO", log_file: str = "logs/priority_tasks.log") -> None:
    """
    ロガーのセットアップ

    ファイルには全レベルを、コンソールにはWARNING以上のみを出力する。
    対話セッションの出力にログ行が割り込まないようにするため。

    Args:
        log_level: ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: ログファイルのパス
    """
    # ログディレクトリの作成
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # コンソールはWARNING以上のみ
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
            console_handler,
        ],
    )
