import msgspec

from .port_role import PortRole, PORT_ROLES


class PortSet(msgspec.Struct, frozen=True):
    host: str
    grpc: int
    rest: int
    events: int
    cli: int
    profile: int

    def port(self, role: PortRole) -> int:
        return getattr(self, role.value)

    def address(self, role: PortRole) -> str:
        return f"{self.host}:{self.port(role)}"

    def ports(self) -> tuple[int, ...]:
        return tuple(self.port(role) for role in PORT_ROLES)

    def pairs(self) -> tuple[tuple[str, int], ...]:
        return tuple((self.host, port) for port in self.ports())
