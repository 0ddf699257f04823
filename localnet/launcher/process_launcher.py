import asyncio
import functools
import os
import pathlib
import subprocess
from typing import Dict, Sequence

from localnet.environment import NodeEnvironment
from localnet.errors import LaunchError
from localnet.logging import Logger, NodeDebug, NodeInfo
from localnet.models import NodeSpec
from localnet.ports import PortReservation

from .process_record import ProcessRecord


class ProcessLauncher:
    """
    Spawns node processes.

    Each process starts in its own session with the parent's environment
    overlaid by the node's composed configuration, so the network keeps
    running after the bootstrap exits. Output goes to per-node files in
    the logs directory unless `debug` leaves it attached to the terminal.

    The launcher never stops what it started. Tearing a network down is
    left to the operator (`localnet stop`).
    """

    def __init__(
        self,
        logs_directory: str,
        debug: bool = False,
        logger: Logger | None = None,
    ) -> None:
        self.logs_directory = logs_directory
        self.debug = debug

        if logger is None:
            logger = Logger()

        self._logger = logger
        self._handles: Dict[str, subprocess.Popen] = {}

    @property
    def handles(self) -> Dict[str, subprocess.Popen]:
        return dict(self._handles)

    def log_paths(self, node_id: str) -> tuple[str, str]:
        return (
            os.path.join(self.logs_directory, f"{node_id}.stdout"),
            os.path.join(self.logs_directory, f"{node_id}.stderr"),
        )

    async def launch(
        self,
        node: NodeSpec,
        command: Sequence[str],
        environment: NodeEnvironment,
        reservation: PortReservation | None = None,
    ) -> ProcessRecord:
        if len(command) < 1:
            raise LaunchError(
                "no command to launch",
                node_id=node.node_id,
                stage="launch",
            )

        if reservation:
            reservation.release()

        async with self._logger.context(
            name="launcher",
        ) as ctx:
            await ctx.log(
                NodeDebug(
                    message=f"Launching {' '.join(command)}",
                    node_id=node.node_id,
                    stage="launch",
                )
            )

            stdout_path: str | None = None
            stderr_path: str | None = None

            if self.debug is False:
                stdout_path, stderr_path = self.log_paths(node.node_id)

            try:
                process = await asyncio.get_running_loop().run_in_executor(
                    None,
                    functools.partial(
                        self._spawn,
                        list(command),
                        {
                            **os.environ,
                            **environment.to_dict(),
                        },
                        stdout_path,
                        stderr_path,
                    ),
                )

            except (OSError, ValueError, subprocess.SubprocessError) as err:
                raise LaunchError(
                    f"could not start {command[0]} - {err}",
                    node_id=node.node_id,
                    stage="launch",
                ) from err

            self._handles[node.node_id] = process

            record = ProcessRecord(
                node_id=node.node_id,
                pid=process.pid,
                command=tuple(command),
                stdout_path=stdout_path,
                stderr_path=stderr_path,
            )

            await ctx.log(
                NodeInfo(
                    message=f"Started with pid {process.pid}",
                    node_id=node.node_id,
                    stage="launch",
                )
            )

        return record

    def _spawn(
        self,
        command: list[str],
        env: Dict[str, str],
        stdout_path: str | None,
        stderr_path: str | None,
    ) -> subprocess.Popen:
        if stdout_path is None or stderr_path is None:
            return subprocess.Popen(
                command,
                env=env,
                stdin=subprocess.DEVNULL,
                start_new_session=True,
            )

        pathlib.Path(self.logs_directory).mkdir(parents=True, exist_ok=True)

        with (
            open(stdout_path, "ab") as stdout,
            open(stderr_path, "ab") as stderr,
        ):
            return subprocess.Popen(
                command,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=stdout,
                stderr=stderr,
                start_new_session=True,
            )

    def terminate_all(self, timeout: float = 5.0):
        for process in self._handles.values():
            if process.poll() is None:
                process.terminate()

        for process in self._handles.values():
            try:
                process.wait(timeout=timeout)

            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()

        self._handles.clear()
