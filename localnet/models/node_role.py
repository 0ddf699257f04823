from enum import Enum


class NodeRole(str, Enum):
    """Role of a process in the local network."""
    CA = "ca"
    PEER = "peer"
