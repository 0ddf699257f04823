import contextvars
from typing import List, Literal

from localnet.logging.models import LogLevel, LogLevelName
from .stream_type import StreamType


LogOutput = Literal['stdout', 'stderr']

_global_log_level = contextvars.ContextVar("_global_log_level", default=LogLevel.INFO)
_global_disabled_loggers = contextvars.ContextVar("_global_disabled_loggers", default=[])
_global_log_output_type = contextvars.ContextVar("_global_log_output_type", default=StreamType.STDERR)


class LoggingConfig:
    """
    Process-wide logging settings for localnet's own logs.

    Node processes log to their own output files; these settings only
    govern the bootstrap's structured entries. Entries go to stderr by
    default so stdout stays free for the command summary.
    """

    def __init__(self) -> None:
        self._log_level: contextvars.ContextVar[LogLevel] = _global_log_level
        self._log_output_type: contextvars.ContextVar[StreamType] = _global_log_output_type
        self._disabled_loggers: contextvars.ContextVar[List[str]] = (
            _global_disabled_loggers
        )

    def update(
        self,
        log_level: LogLevelName | None = None,
        log_output: LogOutput | None = None,
    ):
        if log_level:
            self._log_level.set(
                LogLevel.to_level(log_level)
            )

        if log_output:
            self._log_output_type.set(
                StreamType.STDOUT if log_output == 'stdout' else StreamType.STDERR
            )

    def disable(self, *logger_names: str):
        self._disabled_loggers.set([
            *self._disabled_loggers.get(),
            *logger_names,
        ])

    def enabled(self, logger_name: str, log_level: LogLevel) -> bool:
        return logger_name not in self._disabled_loggers.get() and (
            log_level.rank >= self._log_level.get().rank
        )

    @property
    def level(self):
        return self._log_level.get()

    @property
    def output(self):
        return self._log_output_type.get()
