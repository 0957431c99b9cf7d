"""Priority Tasksのカスタム例外定義

コアの操作は不正入力を例外にせず無視する。
ここで定義する例外はCLI・設定読み込み層でのみ使用する。
"""


class PriorityTasksError(Exception):
    """Priority Tasks基底例外"""

    pass


class CommandError(PriorityTasksError):
    """セッションコマンドの解析エラー"""

    pass


class ConfigError(PriorityTasksError):
    """設定値の不正"""

    pass
