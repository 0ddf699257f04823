import os
import pathlib
import socket
import sys
import tempfile
from typing import Generator

import pytest

from localnet.models import RunConfiguration


FAKE_NODE = str(pathlib.Path(__file__).parent / "fixtures" / "fake_node.py")

CREDENTIALS_TEMPLATE = """
eca:
    affiliations:
        banks_and_institutions:
            banks:
                - bank_a
    users:
        admin: 0 Xurw3yU9zI0l
{peer_users}
"""


def get_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


@pytest.fixture
def temp_directory() -> Generator[str, None, None]:
    with tempfile.TemporaryDirectory() as temp_directory:
        yield temp_directory


@pytest.fixture
def free_port() -> int:
    return get_free_port()


@pytest.fixture
def fake_node_command() -> tuple[str, ...]:
    return (sys.executable, FAKE_NODE)


@pytest.fixture
def credentials_file_factory(temp_directory: str):
    def create(peer_users: int = 10) -> str:
        users = "\n".join(
            f"        test_vp{index}: 4 secret{index:04d}" for index in range(peer_users)
        )

        path = os.path.join(temp_directory, "membersrvc.yaml")
        with open(path, "w") as credentials_file:
            credentials_file.write(
                CREDENTIALS_TEMPLATE.format(peer_users=users)
            )

        return path

    return create


@pytest.fixture
def run_configuration_factory(
    temp_directory: str,
    fake_node_command: tuple[str, ...],
    free_port: int,
):
    def create(**overrides) -> RunConfiguration:
        values = {
            "peer_command": fake_node_command,
            "membersrvc_command": fake_node_command,
            "logs_directory": os.path.join(temp_directory, "logs"),
            "storage_root": os.path.join(temp_directory, "storage"),
            "descriptor_path": os.path.join(temp_directory, "network.json"),
            "startup_timeout": 10.0,
            "poll_interval": 0.05,
            "membersrvc_port": free_port,
        }
        values.update(overrides)

        return RunConfiguration.create(**values)

    return create
