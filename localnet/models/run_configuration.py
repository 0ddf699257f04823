from __future__ import annotations

import os
import shlex
import tempfile
from typing import Any, Literal

import pydantic
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    model_validator,
)

from localnet.env import Env, TimeParser
from localnet.errors import ValidationError

from .consensus_mode import ConsensusMode
from .constants import MEMBERSRVC_SERVICE_PORT


class RunConfiguration(BaseModel):
    """
    Immutable input to a bootstrap run.

    Build with `create()` or `from_env()`, which report bad values as
    `localnet.errors.ValidationError` instead of pydantic's error type.
    """

    model_config = ConfigDict(frozen=True)

    peer_count: int = Field(default=1, ge=1)
    security: StrictBool = False
    consensus: ConsensusMode = ConsensusMode.NOOPS
    startup_timeout: float = Field(default=15.0, gt=0)
    poll_interval: float = Field(default=0.1, gt=0, le=1.0)
    host: StrictStr = "127.0.0.1"
    peer_command: tuple[StrictStr, ...] = ("peer", "node", "start")
    membersrvc_command: tuple[StrictStr, ...] = ("membersrvc",)
    logs_directory: StrictStr = Field(default_factory=os.getcwd)
    debug: StrictBool = False
    peer_logging_level: StrictStr = "info"
    profiling: StrictBool = False
    storage_root: StrictStr = os.path.join(tempfile.gettempdir(), "localnet")
    vm_endpoint: StrictStr = "unix:///var/run/docker.sock"
    chaincode_mode: Literal["vm", "dev"] = "vm"
    network_mode: Literal["process"] = "process"
    descriptor_path: StrictStr = "network.json"
    membersrvc_port: int = Field(default=MEMBERSRVC_SERVICE_PORT, ge=1, le=65535)
    parallel_readiness: StrictBool = False
    credentials_file: StrictStr | None = None

    @model_validator(mode="after")
    def check_commands(self) -> RunConfiguration:
        if len(self.peer_command) < 1:
            raise ValueError("peer command must not be empty")

        if self.security and len(self.membersrvc_command) < 1:
            raise ValueError("membersrvc command must not be empty when security is enabled")

        return self

    @classmethod
    def create(cls, **values: Any) -> RunConfiguration:
        try:
            return cls(**values)

        except pydantic.ValidationError as err:
            details = [
                f"{'.'.join(str(loc) for loc in error['loc']) or 'configuration'} - {error['msg']}"
                for error in err.errors()
            ]

            raise ValidationError(
                f"invalid run configuration: {'; '.join(details)}",
                stage="configure",
            ) from err

    @classmethod
    def from_env(cls, env: Env, **overrides: Any) -> RunConfiguration:
        parser = TimeParser()

        try:
            values: dict[str, Any] = {
                "host": env.LOCALNET_HOST,
                "peer_command": tuple(shlex.split(env.LOCALNET_PEER_COMMAND)),
                "membersrvc_command": tuple(shlex.split(env.LOCALNET_MEMBERSRVC_COMMAND)),
                "startup_timeout": parser.parse(env.LOCALNET_STARTUP_TIMEOUT),
                "poll_interval": parser.parse(env.LOCALNET_READINESS_POLL_INTERVAL),
                "logs_directory": env.LOCALNET_LOGS_DIRECTORY,
                "peer_logging_level": env.LOCALNET_PEER_LOGGING_LEVEL,
                "storage_root": env.LOCALNET_STORAGE_ROOT,
                "vm_endpoint": env.LOCALNET_VM_ENDPOINT,
                "credentials_file": env.LOCALNET_CREDENTIALS_FILE,
                "descriptor_path": env.LOCALNET_DESCRIPTOR_PATH,
                "chaincode_mode": env.LOCALNET_CHAINCODE_MODE,
                "debug": env.LOCALNET_DEBUG,
            }

        except ValueError as err:
            raise ValidationError(
                str(err),
                stage="configure",
            ) from err

        values.update({
            name: value for name, value in overrides.items() if value is not None
        })

        return cls.create(**values)
