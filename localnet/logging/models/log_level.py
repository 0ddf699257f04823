from __future__ import annotations
from enum import Enum
from typing import Literal

LogLevelName = Literal[
    'trace',
    'debug',
    'info',
    'warn',
    'error',
    'critical',
    'fatal'
]


class LogLevel(Enum):
    """
    Severity of a log entry. Members are declared from least to most
    severe; `rank` follows that order.
    """
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    FATAL = "FATAL"

    @property
    def rank(self) -> int:
        return list(LogLevel).index(self)

    @classmethod
    def names(cls) -> list[str]:
        return [level.value.lower() for level in cls]

    @classmethod
    def to_level(cls, level_name: LogLevelName | str) -> LogLevel:
        try:
            return cls(level_name.upper())

        except ValueError as err:
            raise ValueError(
                f"Err. - unknown log level {level_name}"
            ) from err
