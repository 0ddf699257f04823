import os
from typing import Dict

from localnet.errors import ValidationError
from localnet.models import (
    CONSENSUS_MODES,
    CONSENSUS_PLUGINS,
    NodeRole,
    NodeSpec,
    RunConfiguration,
)
from localnet.ports import PortRole, PortSet

from .credential_store import CredentialStore
from .node_environment import NodeEnvironment


class EnvironmentComposer:
    """
    Builds the configuration each node process is started with.

    Every node gets the global keys (logging, consensus, VM endpoint,
    profiling). Peers additionally get their service addresses, identity,
    storage path, discovery root (every peer but the root) and security
    settings. The membership service only gets its service port.
    """

    def __init__(
        self,
        config: RunConfiguration,
        credentials: CredentialStore | None = None,
    ) -> None:
        self._config = config
        self._credentials = credentials

    def global_variables(self) -> Dict[str, str]:
        return {
            "CORE_LOGGING_LEVEL": self._config.peer_logging_level,
            "CORE_PEER_VALIDATOR_CONSENSUS_PLUGIN": CONSENSUS_PLUGINS[self._config.consensus],
            "CORE_PBFT_GENERAL_MODE": CONSENSUS_MODES[self._config.consensus],
            "CORE_PBFT_GENERAL_N": str(self._config.peer_count),
            "CORE_VM_ENDPOINT": self._config.vm_endpoint,
            "CORE_PROFILE_ENABLED": _to_flag(self._config.profiling),
        }

    def compose_membersrvc(
        self,
        node: NodeSpec,
        ports: PortSet,
    ) -> NodeEnvironment:
        if node.role != NodeRole.CA:
            raise ValidationError(
                "membersrvc configuration requested for a peer",
                node_id=node.node_id,
                stage="compose",
            )

        variables = self.global_variables()

        # Reserved ports are ignored; the service always binds the fixed port.
        variables["MEMBERSRVC_CA_SERVER_PORT"] = str(self._config.membersrvc_port)

        return NodeEnvironment.from_pairs(node.node_id, variables)

    def compose_peer(
        self,
        node: NodeSpec,
        ports: PortSet,
        root_address: str | None = None,
        membersrvc_address: str | None = None,
    ) -> NodeEnvironment:
        if node.role != NodeRole.PEER or node.index is None:
            raise ValidationError(
                "peer configuration requested for a non-peer node",
                node_id=node.node_id,
                stage="compose",
            )

        variables = self.global_variables()
        variables.update({
            "CORE_PEER_ID": node.node_id,
            "CORE_PEER_ADDRESS": ports.address(PortRole.GRPC),
            "CORE_PEER_LISTENADDRESS": ports.address(PortRole.GRPC),
            "CORE_REST_ADDRESS": ports.address(PortRole.REST),
            "CORE_PEER_VALIDATOR_EVENTS_ADDRESS": ports.address(PortRole.EVENTS),
            "CORE_CLI_ADDRESS": ports.address(PortRole.CLI),
            "CORE_PROFILE_LISTENADDRESS": ports.address(PortRole.PROFILE),
            "CORE_PEER_FILESYSTEMPATH": os.path.join(
                self._config.storage_root,
                node.node_id,
            ),
        })

        if node.index > 0:
            if not root_address:
                raise ValidationError(
                    "discovery root address is required for every peer after vp0",
                    node_id=node.node_id,
                    stage="compose",
                )

            variables["CORE_PEER_DISCOVERY_ROOTNODE"] = root_address

        if self._config.security:
            variables.update(
                self._security_variables(node, membersrvc_address)
            )

        else:
            variables["CORE_SECURITY_ENABLED"] = _to_flag(False)

        return NodeEnvironment.from_pairs(node.node_id, variables)

    def _security_variables(
        self,
        node: NodeSpec,
        membersrvc_address: str | None,
    ) -> Dict[str, str]:
        if not membersrvc_address:
            raise ValidationError(
                "membersrvc address is required before peers can be configured with security",
                node_id=node.node_id,
                stage="compose",
            )

        if self._credentials is None:
            raise ValidationError(
                "security is enabled but no credentials were provided",
                node_id=node.node_id,
                stage="compose",
            )

        credential = self._credentials.for_peer(node.index)

        return {
            "CORE_SECURITY_ENABLED": _to_flag(True),
            "CORE_SECURITY_ENROLLID": credential.enroll_id,
            "CORE_SECURITY_ENROLLSECRET": credential.secret,
            "CORE_PEER_PKI_ECA_PADDR": membersrvc_address,
            "CORE_PEER_PKI_TCA_PADDR": membersrvc_address,
            "CORE_PEER_PKI_TLSCA_PADDR": membersrvc_address,
        }


def _to_flag(value: bool) -> str:
    return "true" if value else "false"
