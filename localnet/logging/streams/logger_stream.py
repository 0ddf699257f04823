import asyncio
import datetime
import functools
import io
import os
import pathlib
import sys
import threading
from collections import defaultdict
from typing import (
    Callable,
    Dict,
    TypeVar,
)

import msgspec

from localnet.logging.config import LoggingConfig, StreamType
from localnet.logging.models import Entry, Log

T = TypeVar('T', bound=Entry)


class LoggerStream:
    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
    ) -> None:
        if name is None:
            name = "default"

        self._name = name
        self._default_template = template
        self._default_logfile = filename
        self._default_log_directory = directory

        self._init_lock = asyncio.Lock()

        self._files: Dict[str, io.BufferedRandom] = {}
        self._file_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._cwd: str | None = None
        self._default_logfile_path: str | None = None

        self._config = LoggingConfig()
        self._initialized: bool = False
        self._streams: Dict[StreamType, io.TextIOBase] = {}
        self._duplicated: list[io.TextIOBase] = []

    @property
    def name(self):
        return self._name

    async def initialize(self):

        async with self._init_lock:

            if self._initialized:
                return

            if self._cwd is None:
                self._cwd = await asyncio.get_running_loop().run_in_executor(
                    None,
                    os.getcwd,
                )

            self._streams[StreamType.STDOUT] = await self._dup_stream(sys.stdout)
            self._streams[StreamType.STDERR] = await self._dup_stream(sys.stderr)

            self._initialized = True

    async def open_file(
        self,
        filename: str,
        directory: str | None = None,
        is_default: bool = False,
    ):
        if self._initialized is False:
            await self.initialize()

        logfile_path = self._to_logfile_path(filename, directory=directory)

        async with self._file_locks[logfile_path]:
            await asyncio.get_running_loop().run_in_executor(
                None,
                self._open_file,
                logfile_path,
            )

        if is_default:
            self._default_logfile_path = logfile_path

    def _open_file(
        self,
        logfile_path: str,
    ):
        resolved_path = pathlib.Path(logfile_path).absolute().resolve()
        logfile_directory = str(resolved_path.parent)
        path = str(resolved_path)

        if not os.path.exists(logfile_directory):
            os.makedirs(logfile_directory)

        if not os.path.exists(path):
            resolved_path.touch()

        self._files[logfile_path] = open(path, "ab+")

    async def close(self):
        for logfile_path in list(self._files):
            await self._close_file(logfile_path)

        for stream in self._streams.values():
            if stream.closed is False:
                await asyncio.get_running_loop().run_in_executor(None, stream.flush)

        for stream in self._duplicated:
            if stream.closed is False:
                await asyncio.get_running_loop().run_in_executor(None, stream.close)

        self._streams.clear()
        self._duplicated.clear()
        self._initialized = False

    async def _close_file(self, logfile_path: str):
        async with self._file_locks[logfile_path]:
            await asyncio.get_running_loop().run_in_executor(
                None,
                self._close_file_at_path,
                logfile_path,
            )

    def _close_file_at_path(self, logfile_path: str):
        if (
            logfile := self._files.pop(logfile_path, None)
        ) and logfile.closed is False:
            logfile.close()

    def _to_logfile_path(
        self,
        filename: str,
        directory: str | None = None,
    ):
        filename_path = pathlib.Path(filename)

        assert (
            filename_path.suffix == ".json"
        ), "Err. - file must be JSON file for logs."

        if directory is None:
            directory: str = os.path.join(self._cwd)

        logfile_path: str = os.path.join(directory, filename_path)

        return logfile_path

    async def _dup_stream(self, stream: io.TextIOBase):
        try:
            fileno = stream.fileno()

        except (OSError, ValueError):
            # Replaced streams (test runners, click's CliRunner) have no
            # descriptor to duplicate.
            return stream

        duplicate = await asyncio.get_running_loop().run_in_executor(
            None,
            os.dup,
            fileno,
        )

        duplicated_stream = await asyncio.get_running_loop().run_in_executor(
            None,
            functools.partial(
                os.fdopen,
                duplicate,
                mode="w",
            )
        )

        self._duplicated.append(duplicated_stream)

        return duplicated_stream

    async def log(
        self,
        entry: T,
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        filename: str | None = None
        directory: str | None = None

        if path:
            logfile_path = pathlib.Path(path)
            is_logfile = len(logfile_path.suffix) > 0

            filename = logfile_path.name if is_logfile else None
            directory = str(logfile_path.parent.absolute()) if is_logfile else str(logfile_path.absolute())

        if template is None:
            template = self._default_template

        if filename is None:
            filename = self._default_logfile

        if directory is None:
            directory = self._default_log_directory

        if self._config.enabled(self._name, entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        if self._initialized is False:
            await self.initialize()

        log_file, line_number, function_name = self._find_caller()

        log = Log(
            entry=entry,
            filename=log_file,
            function_name=function_name,
            line_number=line_number,
        )

        logfile_path: str | None = None
        if filename:
            logfile_path = self._to_logfile_path(filename, directory=directory)

        elif self._default_logfile_path:
            logfile_path = self._default_logfile_path

        if logfile_path:
            await self._log_to_file(
                log,
                logfile_path,
            )

        else:
            await self._log(
                log,
                template=template,
            )

    async def _log(
        self,
        log: Log,
        template: str | None = None,
    ):
        stream = self._streams.get(self._config.output)

        if stream is None or stream.closed:
            return

        if template is None:
            template = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"

        line = log.entry.to_template(
            template,
            context={
                "filename": log.filename,
                "function_name": log.function_name,
                "line_number": log.line_number,
                "thread_id": log.thread_id,
                "timestamp": log.timestamp,
            },
        )

        await asyncio.get_running_loop().run_in_executor(
            None,
            self._write_to_stream,
            stream,
            line,
        )

    def _write_to_stream(
        self,
        stream: io.TextIOBase,
        line: str,
    ):
        stream.write(line + "\n")
        stream.flush()

    async def _log_to_file(
        self,
        log: Log,
        logfile_path: str,
    ):
        if self._files.get(logfile_path) is None:
            async with self._file_locks[logfile_path]:
                await asyncio.get_running_loop().run_in_executor(
                    None,
                    self._open_file,
                    logfile_path,
                )

        async with self._file_locks[logfile_path]:
            await asyncio.get_running_loop().run_in_executor(
                None,
                self._write_to_file,
                log,
                logfile_path,
            )

    def _write_to_file(
        self,
        log: Log,
        logfile_path: str,
    ):
        if (
            logfile := self._files.get(logfile_path)
        ) and (
            logfile.closed is False
        ):
            logfile.write(msgspec.json.encode(log) + b"\n")
            logfile.flush()

    def _find_caller(self):
        """
        Find the stack frame of the caller so that we can note the source
        file name, line number and function name.
        """
        frame = sys._getframe(2)
        code = frame.f_code

        return (
            code.co_filename,
            frame.f_lineno,
            code.co_name,
        )
