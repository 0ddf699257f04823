"""
Enrollment credentials for peers running with security enabled.

Credentials come from the membership service's YAML configuration, whose
`eca.users` section maps a user name to `"<role> <secret> [affiliation]"`:

    eca:
        users:
            test_vp0: 4 MwYpmSRjupbT
            test_vp1: 4 5wgHK9qqYaPy

Peer `i` enrolls as `test_vp{i}`.
"""

from __future__ import annotations

import os
from typing import Any, Dict

import msgspec
import yaml

from localnet.errors import ResourceError


PEER_ENROLL_ID_TEMPLATE = "test_vp{index}"


class Credential(msgspec.Struct, frozen=True):
    enroll_id: str
    secret: str


class CredentialStore:
    def __init__(
        self,
        users: Dict[str, str] | None = None,
        source: str | None = None,
    ) -> None:
        self._users: Dict[str, str] = dict(users or {})
        self.source = source

    @classmethod
    def from_file(cls, path: str) -> CredentialStore:
        if not os.path.exists(path):
            raise ResourceError(
                f"credentials file {path} does not exist",
                stage="credentials",
            )

        try:
            with open(path, encoding="utf-8") as credentials_file:
                document: Any = yaml.safe_load(credentials_file) or {}

        except (OSError, UnicodeDecodeError, yaml.YAMLError) as err:
            raise ResourceError(
                f"could not parse credentials file {path} - {err}",
                stage="credentials",
            ) from err

        if not isinstance(document, dict):
            raise ResourceError(
                f"credentials file {path} is not a mapping",
                stage="credentials",
            )

        eca = document.get("eca") or {}
        users = (eca.get("users") or {}) if isinstance(eca, dict) else None

        if not isinstance(users, dict):
            raise ResourceError(
                f"credentials file {path} - eca.users must be a mapping of user to \"role secret\"",
                stage="credentials",
            )

        secrets: Dict[str, str] = {}
        for user, entry in users.items():
            fields = str(entry).split()

            # role, then secret; entries without a secret cannot enroll
            if len(fields) >= 2:
                secrets[str(user)] = fields[1]

        return cls(
            users=secrets,
            source=path,
        )

    @property
    def users(self) -> Dict[str, str]:
        return dict(self._users)

    def peer_users(self) -> list[str]:
        users: list[str] = []
        index = 0

        while PEER_ENROLL_ID_TEMPLATE.format(index=index) in self._users:
            users.append(PEER_ENROLL_ID_TEMPLATE.format(index=index))
            index += 1

        return users

    def require(self, count: int):
        available = len(self.peer_users())

        if available < count:
            source = self.source or "credential store"
            raise ResourceError(
                f"{count} peers requested but {source} only has credentials for {available}",
                stage="credentials",
            )

    def for_peer(self, index: int) -> Credential:
        enroll_id = PEER_ENROLL_ID_TEMPLATE.format(index=index)
        secret = self._users.get(enroll_id)

        if secret is None:
            raise ResourceError(
                f"no enrollment credentials for {enroll_id}",
                node_id=f"vp{index}",
                stage="credentials",
            )

        return Credential(
            enroll_id=enroll_id,
            secret=secret,
        )
