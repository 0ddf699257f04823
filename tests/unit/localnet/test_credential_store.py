"""
Test: CredentialStore

Run with: pytest tests/unit/localnet/test_credential_store.py
"""

import os

import pytest

from localnet.environment import Credential, CredentialStore
from localnet.errors import ResourceError


def test_reads_peer_users_from_membersrvc_yaml(credentials_file_factory):
    store = CredentialStore.from_file(credentials_file_factory(peer_users=3))

    assert store.peer_users() == ["test_vp0", "test_vp1", "test_vp2"]
    assert store.for_peer(2) == Credential(enroll_id="test_vp2", secret="secret0002")
    assert "admin" in store.users


def test_require_rejects_too_few_credentials(credentials_file_factory):
    store = CredentialStore.from_file(credentials_file_factory(peer_users=2))

    store.require(2)

    with pytest.raises(ResourceError) as error:
        store.require(3)

    assert "only has credentials for 2" in error.value.message


def test_missing_peer_credential_is_a_resource_error():
    store = CredentialStore(users={"test_vp0": "secret"})

    with pytest.raises(ResourceError) as error:
        store.for_peer(1)

    assert error.value.node_id == "vp1"


def test_peer_users_stop_at_first_gap():
    store = CredentialStore(
        users={
            "test_vp0": "a",
            "test_vp1": "b",
            "test_vp3": "d",
        }
    )

    assert store.peer_users() == ["test_vp0", "test_vp1"]


def test_missing_file_is_a_resource_error(temp_directory: str):
    with pytest.raises(ResourceError):
        CredentialStore.from_file(os.path.join(temp_directory, "missing.yaml"))


@pytest.mark.parametrize(
    "contents",
    [
        b"eca: [unterminated\n",
        b"- test_vp0\n- test_vp1\n",
        b"eca:\n    - test_vp0\n",
        b"eca:\n    users:\n        - test_vp0: 4 secret\n",
        b"eca:\n    users:\n        test_vp0: 4 \xff\xfe\n",
    ],
)
def test_malformed_file_is_a_resource_error(temp_directory: str, contents: bytes):
    path = os.path.join(temp_directory, "broken.yaml")
    with open(path, "wb") as credentials_file:
        credentials_file.write(contents)

    with pytest.raises(ResourceError) as error:
        CredentialStore.from_file(path)

    assert error.value.stage == "credentials"


def test_directory_is_a_resource_error(temp_directory: str):
    with pytest.raises(ResourceError):
        CredentialStore.from_file(temp_directory)
