from __future__ import annotations

import datetime
import os
import pathlib
import tempfile
from typing import Dict

import msgspec

from localnet.errors import ResourceError, ValidationError
from localnet.launcher import ProcessRecord
from localnet.models import NodeRole, NodeSpec, RunConfiguration
from localnet.ports import PortRole, PortSet

from .models import MembersrvcRecord, NetworkDescriptor, PeerRecord


class NetworkDescriptorWriter:
    """
    Accumulates the network's topology as nodes start and writes the
    descriptor exactly once.

    Records are held in memory until `finalize()`, which serializes the
    whole document to a temporary file beside the target and renames it
    into place. A reader of the descriptor path therefore sees either no
    file or a complete document, never a partial one.
    """

    CREATED_BY = "localnet"

    def __init__(
        self,
        path: str,
        config: RunConfiguration,
    ) -> None:
        self.path = path
        self._config = config
        self._created = datetime.datetime.now(datetime.UTC).isoformat()
        self._membersrvc: MembersrvcRecord | None = None
        self._peers: Dict[int, PeerRecord] = {}
        self._finalized = False

    @property
    def finalized(self) -> bool:
        return self._finalized

    def begin(self):
        """Remove a descriptor left behind by an earlier network."""
        descriptor_path = pathlib.Path(self.path)

        try:
            if descriptor_path.exists():
                descriptor_path.unlink()

        except OSError as err:
            raise ResourceError(
                f"could not remove stale descriptor {self.path} - {err}",
                stage="describe",
            ) from err

    def record_membersrvc(
        self,
        address: str,
        record: ProcessRecord,
    ):
        self._membersrvc = MembersrvcRecord(
            service=address,
            pid=str(record.pid),
        )

    def record_peer(
        self,
        node: NodeSpec,
        ports: PortSet,
        record: ProcessRecord,
    ):
        if node.role != NodeRole.PEER or node.index is None:
            raise ValidationError(
                "only peers can be recorded as peers",
                node_id=node.node_id,
                stage="describe",
            )

        if node.index in self._peers:
            raise ValidationError(
                "peer recorded twice",
                node_id=node.node_id,
                stage="describe",
            )

        self._peers[node.index] = PeerRecord(
            id=node.node_id,
            grpc=ports.address(PortRole.GRPC),
            rest=ports.address(PortRole.REST),
            events=ports.address(PortRole.EVENTS),
            cli=ports.address(PortRole.CLI),
            profile=ports.address(PortRole.PROFILE),
            pid=str(record.pid),
        )

    def build(self) -> NetworkDescriptor:
        indexes = sorted(self._peers)

        if indexes != list(range(len(indexes))):
            raise ValidationError(
                f"peer indexes are not contiguous - {indexes}",
                stage="describe",
            )

        return NetworkDescriptor(
            network_mode=self._config.network_mode,
            chaincode_mode=self._config.chaincode_mode,
            host=self._config.host,
            date=self._created,
            created_by=self.CREATED_BY,
            security=_to_flag(self._config.security),
            consensus=self._config.consensus.value,
            peer_profile_server=_to_flag(self._config.profiling),
            membersrvc=self._membersrvc,
            peers=[self._peers[index] for index in indexes],
        )

    def finalize(self) -> NetworkDescriptor:
        descriptor = self.build()

        encoded = msgspec.json.format(
            msgspec.json.encode(descriptor),
            indent=2,
        )

        try:
            self._write(encoded)

        except OSError as err:
            raise ResourceError(
                f"could not write descriptor {self.path} - {err}",
                stage="describe",
            ) from err

        self._finalized = True

        return descriptor

    def _write(self, encoded: bytes):
        descriptor_path = pathlib.Path(self.path).absolute()
        descriptor_path.parent.mkdir(parents=True, exist_ok=True)

        file_descriptor, temporary_path = tempfile.mkstemp(
            prefix=f".{descriptor_path.name}.",
            suffix=".tmp",
            dir=str(descriptor_path.parent),
        )

        try:
            with os.fdopen(file_descriptor, "wb") as descriptor_file:
                descriptor_file.write(encoded + b"\n")
                descriptor_file.flush()
                os.fsync(descriptor_file.fileno())

            os.replace(temporary_path, descriptor_path)

        except BaseException:
            if os.path.exists(temporary_path):
                os.unlink(temporary_path)

            raise

    @classmethod
    def load(cls, path: str) -> NetworkDescriptor:
        with open(path, "rb") as descriptor_file:
            return msgspec.json.decode(
                descriptor_file.read(),
                type=NetworkDescriptor,
            )


def _to_flag(value: bool) -> str:
    return "true" if value else "false"
