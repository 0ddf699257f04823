from enum import Enum


class NodeState(str, Enum):
    """
    Lifecycle of a node within one bootstrap run.

    PLANNED -> PORTS_RESERVED -> LAUNCHED -> AWAITING_READY -> READY

    TIMED_OUT and FAILED are terminal and abort the whole run.
    """
    PLANNED = "planned"
    PORTS_RESERVED = "ports_reserved"
    LAUNCHED = "launched"
    AWAITING_READY = "awaiting_ready"
    READY = "ready"
    TIMED_OUT = "timed_out"
    FAILED = "failed"
