import socket
from typing import Dict, Iterable

from localnet.errors import ResourceError
from localnet.models import NodeSpec, PORTS_PER_NODE

from .port_reservation import PortReservation
from .port_role import PORT_ROLES
from .port_set import PortSet


class PortAllocator:
    """
    Reserves OS-assigned TCP ports for every node in a run.

    Each port is reserved by binding a listening socket to port zero on
    the configured interface and holding it open. Ports are therefore
    unique across the run until the reservation is released.
    """

    PORTS_PER_NODE = PORTS_PER_NODE

    def __init__(self, host: str = "127.0.0.1") -> None:
        self.host = host
        self._reservations: Dict[str, PortReservation] = {}

    @property
    def reservations(self) -> Dict[str, PortReservation]:
        return dict(self._reservations)

    def reservation(self, node_id: str) -> PortReservation | None:
        return self._reservations.get(node_id)

    def reserve(self, node: NodeSpec) -> PortReservation:
        if node.node_id in self._reservations:
            raise ResourceError(
                "ports already reserved",
                node_id=node.node_id,
                stage="reserve",
            )

        sockets: list[socket.socket] = []

        try:
            for _ in range(self.PORTS_PER_NODE):
                sockets.append(
                    self._bind_tcp_socket(self.host)
                )

        except OSError as err:
            for sock in sockets:
                sock.close()

            raise ResourceError(
                f"could not bind a port on {self.host} - {err}",
                node_id=node.node_id,
                stage="reserve",
            ) from err

        ports = [sock.getsockname()[1] for sock in sockets]

        reservation = PortReservation(
            node.node_id,
            PortSet(
                self.host,
                **{
                    role.value: port for role, port in zip(PORT_ROLES, ports)
                },
            ),
            sockets,
        )

        self._reservations[node.node_id] = reservation

        return reservation

    def reserve_all(self, nodes: Iterable[NodeSpec]) -> Dict[str, PortReservation]:
        return {
            node.node_id: self.reserve(node) for node in nodes
        }

    def release(self, node_id: str):
        if reservation := self._reservations.get(node_id):
            reservation.release()

    def release_all(self):
        for reservation in self._reservations.values():
            reservation.release()

    def _bind_tcp_socket(self, host: str) -> socket.socket:
        family = socket.AF_INET

        if host and ":" in host:
            family = socket.AF_INET6

        sock = socket.socket(family, socket.SOCK_STREAM)

        try:
            sock.bind((host, 0))
            sock.listen(1)

        except OSError:
            sock.close()
            raise

        return sock
