from __future__ import annotations
import os
import tempfile
from pydantic import BaseModel, StrictBool, StrictStr
from typing import Callable, Dict, Literal, Union

PrimaryType = Union[str, int, float, bytes, bool]


class Env(BaseModel):
    LOCALNET_HOST: StrictStr = "127.0.0.1"
    LOCALNET_PEER_COMMAND: StrictStr = "peer node start"
    LOCALNET_MEMBERSRVC_COMMAND: StrictStr = "membersrvc"
    LOCALNET_STARTUP_TIMEOUT: StrictStr = "15s"
    LOCALNET_READINESS_POLL_INTERVAL: StrictStr = "0.1s"
    LOCALNET_LOGS_DIRECTORY: StrictStr = os.getcwd()
    LOCALNET_LOG_LEVEL: StrictStr = "info"
    LOCALNET_LOG_OUTPUT: StrictStr = "stderr"
    LOCALNET_PEER_LOGGING_LEVEL: StrictStr = "info"
    LOCALNET_STORAGE_ROOT: StrictStr = os.path.join(tempfile.gettempdir(), "localnet")
    LOCALNET_VM_ENDPOINT: StrictStr = "unix:///var/run/docker.sock"
    LOCALNET_CREDENTIALS_FILE: StrictStr | None = None
    LOCALNET_DESCRIPTOR_PATH: StrictStr = "network.json"
    LOCALNET_CHAINCODE_MODE: Literal["vm", "dev"] = "vm"
    LOCALNET_DEBUG: StrictBool = False

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "LOCALNET_HOST": str,
            "LOCALNET_PEER_COMMAND": str,
            "LOCALNET_MEMBERSRVC_COMMAND": str,
            "LOCALNET_STARTUP_TIMEOUT": str,
            "LOCALNET_READINESS_POLL_INTERVAL": str,
            "LOCALNET_LOGS_DIRECTORY": str,
            "LOCALNET_LOG_LEVEL": str,
            "LOCALNET_LOG_OUTPUT": str,
            "LOCALNET_PEER_LOGGING_LEVEL": str,
            "LOCALNET_STORAGE_ROOT": str,
            "LOCALNET_VM_ENDPOINT": str,
            "LOCALNET_CREDENTIALS_FILE": str,
            "LOCALNET_DESCRIPTOR_PATH": str,
            "LOCALNET_CHAINCODE_MODE": str,
            "LOCALNET_DEBUG": lambda value: value.lower() in ("1", "true", "yes"),
        }
