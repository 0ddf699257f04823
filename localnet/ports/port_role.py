from enum import Enum


class PortRole(str, Enum):
    GRPC = "grpc"
    REST = "rest"
    EVENTS = "events"
    CLI = "cli"
    PROFILE = "profile"


PORT_ROLES: tuple[PortRole, ...] = (
    PortRole.GRPC,
    PortRole.REST,
    PortRole.EVENTS,
    PortRole.CLI,
    PortRole.PROFILE,
)
