import asyncio
from typing import Dict

from localnet.descriptor import NetworkDescriptor, NetworkDescriptorWriter
from localnet.environment import (
    CredentialStore,
    EnvironmentComposer,
    NodeEnvironment,
)
from localnet.errors import (
    LaunchError,
    LocalnetError,
    ReadinessTimeoutError,
    ResourceError,
    ValidationError,
)
from localnet.launcher import ProcessLauncher, ProcessRecord
from localnet.logging import (
    Logger,
    LoggerStream,
    NetworkError,
    NetworkInfo,
    NodeDebug,
    NodeError,
    NodeInfo,
)
from localnet.models import (
    NodeSpec,
    NodeState,
    RunConfiguration,
)
from localnet.ports import PortAllocator, PortReservation, PortRole
from localnet.readiness import ReadinessWaiter

from .node_state_tracker import NodeStateTracker


class Orchestrator:
    """
    Bootstraps a local network from a `RunConfiguration`.

    Stages run strictly in order:

    1. Validate the configuration and credentials (nothing is reserved yet).
    2. Reserve ports for every node, membersrvc first when security is on.
    3. Launch membersrvc and wait for its service port.
    4. Launch peers in ascending index order. Every peer after vp0 is
       pointed at vp0's RPC address as its discovery root.
    5. Wait for every peer's REST port.
    6. Write the network descriptor.

    Any failure is fatal. Held ports are released, the failing node and
    stage are logged and the error propagates. Processes that already
    started are left running and no descriptor is written.
    """

    def __init__(
        self,
        config: RunConfiguration,
        credentials: CredentialStore | None = None,
        logger: Logger | None = None,
        allocator: PortAllocator | None = None,
        launcher: ProcessLauncher | None = None,
        waiter: ReadinessWaiter | None = None,
        writer: NetworkDescriptorWriter | None = None,
    ) -> None:
        if logger is None:
            logger = Logger()

        if allocator is None:
            allocator = PortAllocator(config.host)

        if launcher is None:
            launcher = ProcessLauncher(
                config.logs_directory,
                debug=config.debug,
                logger=logger,
            )

        if waiter is None:
            waiter = ReadinessWaiter(poll_interval=config.poll_interval)

        if writer is None:
            writer = NetworkDescriptorWriter(
                config.descriptor_path,
                config,
            )

        self._config = config
        self._credentials = credentials
        self._logger = logger
        self._allocator = allocator
        self._launcher = launcher
        self._waiter = waiter
        self._writer = writer
        self._composer: EnvironmentComposer | None = None
        self._tracker = NodeStateTracker()
        self._records: Dict[str, ProcessRecord] = {}
        self._membersrvc_address: str | None = None

    @property
    def states(self) -> Dict[str, NodeState]:
        return self._tracker.states

    @property
    def records(self) -> Dict[str, ProcessRecord]:
        return dict(self._records)

    @property
    def membersrvc_address(self) -> str | None:
        return self._membersrvc_address

    def plan(self) -> list[NodeSpec]:
        nodes: list[NodeSpec] = []

        if self._config.security:
            nodes.append(NodeSpec.membersrvc())

        nodes.extend(
            NodeSpec.peer(index) for index in range(self._config.peer_count)
        )

        return nodes

    def validate(self):
        if self._config.peer_count < 1:
            raise ValidationError(
                f"at least one peer is required, got {self._config.peer_count}",
                stage="validate",
            )

        if self._config.security is False:
            return

        if self._credentials is None:
            if self._config.credentials_file is None:
                raise ResourceError(
                    "security is enabled but no credentials file was given",
                    stage="credentials",
                )

            self._credentials = CredentialStore.from_file(
                self._config.credentials_file
            )

        self._credentials.require(self._config.peer_count)

    async def run(self) -> NetworkDescriptor:
        self.validate()

        self._composer = EnvironmentComposer(
            self._config,
            credentials=self._credentials,
        )

        nodes = self.plan()
        for node in nodes:
            self._tracker.plan(node)

        loop = asyncio.get_running_loop()

        async with self._logger.context(
            name="orchestrator",
        ) as ctx:
            await ctx.log(
                NetworkInfo(
                    message="Bootstrapping network",
                    peers=self._config.peer_count,
                    security=self._config.security,
                    consensus=self._config.consensus.value,
                )
            )

            try:
                await loop.run_in_executor(None, self._writer.begin)

                reservations = self._reserve(nodes)

                peers = [node for node in nodes if node.index is not None]
                membersrvc = [node for node in nodes if node.index is None]

                for node in membersrvc:
                    await self._start_membersrvc(ctx, node, reservations[node.node_id])

                root_address = reservations[peers[0].node_id].ports.address(PortRole.GRPC)

                for node in peers:
                    await self._launch_peer(
                        ctx,
                        node,
                        reservations[node.node_id],
                        root_address,
                    )

                await self._await_peers(ctx, peers, reservations)

                descriptor = await loop.run_in_executor(None, self._writer.finalize)

            except LocalnetError as err:
                await ctx.log(
                    NetworkError(
                        message=err.diagnostic(),
                        peers=self._config.peer_count,
                        security=self._config.security,
                        consensus=self._config.consensus.value,
                    )
                )

                raise

            finally:
                self._allocator.release_all()

            await ctx.log(
                NetworkInfo(
                    message=f"Network ready - descriptor written to {self._writer.path}",
                    peers=self._config.peer_count,
                    security=self._config.security,
                    consensus=self._config.consensus.value,
                )
            )

        return descriptor

    def _reserve(self, nodes: list[NodeSpec]) -> Dict[str, PortReservation]:
        reservations: Dict[str, PortReservation] = {}

        for node in nodes:
            try:
                reservations[node.node_id] = self._allocator.reserve(node)

            except ResourceError:
                self._tracker.transition(node.node_id, NodeState.FAILED)
                raise

            self._tracker.transition(node.node_id, NodeState.PORTS_RESERVED)

        return reservations

    async def _start_membersrvc(
        self,
        ctx: LoggerStream,
        node: NodeSpec,
        reservation: PortReservation,
    ):
        environment = self._composer.compose_membersrvc(node, reservation.ports)

        record = await self._launch(
            ctx,
            node,
            self._config.membersrvc_command,
            environment,
            reservation,
        )

        await self._await_ready(
            ctx,
            node,
            self._config.host,
            self._config.membersrvc_port,
            stage="membersrvc-ready",
        )

        self._membersrvc_address = f"{self._config.host}:{self._config.membersrvc_port}"
        self._writer.record_membersrvc(self._membersrvc_address, record)

    async def _launch_peer(
        self,
        ctx: LoggerStream,
        node: NodeSpec,
        reservation: PortReservation,
        root_address: str,
    ):
        environment = self._composer.compose_peer(
            node,
            reservation.ports,
            root_address=None if node.is_root else root_address,
            membersrvc_address=self._membersrvc_address,
        )

        record = await self._launch(
            ctx,
            node,
            self._config.peer_command,
            environment,
            reservation,
        )

        self._writer.record_peer(node, reservation.ports, record)

    async def _launch(
        self,
        ctx: LoggerStream,
        node: NodeSpec,
        command: tuple[str, ...],
        environment: NodeEnvironment,
        reservation: PortReservation,
    ) -> ProcessRecord:
        try:
            record = await self._launcher.launch(
                node,
                command,
                environment,
                reservation=reservation,
            )

        except LaunchError as err:
            self._tracker.transition(node.node_id, NodeState.FAILED)

            await ctx.log(
                NodeError(
                    message=err.message,
                    node_id=node.node_id,
                    stage="launch",
                )
            )

            raise

        self._tracker.transition(node.node_id, NodeState.LAUNCHED)
        self._records[node.node_id] = record

        return record

    async def _await_peers(
        self,
        ctx: LoggerStream,
        peers: list[NodeSpec],
        reservations: Dict[str, PortReservation],
    ):
        if self._config.parallel_readiness:
            results = await asyncio.gather(*[
                self._await_ready(
                    ctx,
                    node,
                    self._config.host,
                    reservations[node.node_id].ports.port(PortRole.REST),
                    stage="peer-ready",
                ) for node in peers
            ], return_exceptions=True)

            for result in results:
                if isinstance(result, BaseException):
                    raise result

            return

        for node in peers:
            await self._await_ready(
                ctx,
                node,
                self._config.host,
                reservations[node.node_id].ports.port(PortRole.REST),
                stage="peer-ready",
            )

    async def _await_ready(
        self,
        ctx: LoggerStream,
        node: NodeSpec,
        host: str,
        port: int,
        stage: str,
    ):
        self._tracker.transition(node.node_id, NodeState.AWAITING_READY)

        await ctx.log(
            NodeDebug(
                message=f"Waiting up to {self._config.startup_timeout}s for {host}:{port}",
                node_id=node.node_id,
                stage=stage,
            )
        )

        ready = await self._waiter.wait(
            host,
            port,
            self._config.startup_timeout,
        )

        if ready is False:
            self._tracker.transition(node.node_id, NodeState.TIMED_OUT)

            error = ReadinessTimeoutError(
                f"{host}:{port} did not accept connections within {self._config.startup_timeout}s",
                node_id=node.node_id,
                stage=stage,
                address=f"{host}:{port}",
                timeout=self._config.startup_timeout,
            )

            await ctx.log(
                NodeError(
                    message=error.message,
                    node_id=node.node_id,
                    stage=stage,
                )
            )

            raise error

        self._tracker.transition(node.node_id, NodeState.READY)

        await ctx.log(
            NodeInfo(
                message=f"Accepting connections on {host}:{port}",
                node_id=node.node_id,
                stage=stage,
            )
        )
