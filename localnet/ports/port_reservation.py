import socket

from .port_set import PortSet


class PortReservation:
    """
    A node's reserved ports and the sockets holding them.

    The sockets stay bound until `release()` so the OS cannot hand the
    same port to a later reservation. Release happens right before the
    node's process is spawned, leaving a short window in which another
    process could take the port before the node binds it.
    """

    __slots__ = (
        "node_id",
        "ports",
        "_sockets",
    )

    def __init__(
        self,
        node_id: str,
        ports: PortSet,
        sockets: list[socket.socket],
    ) -> None:
        self.node_id = node_id
        self.ports = ports
        self._sockets = sockets

    @property
    def held(self) -> bool:
        return any(sock.fileno() != -1 for sock in self._sockets)

    def release(self):
        for sock in self._sockets:
            if sock.fileno() != -1:
                sock.close()
