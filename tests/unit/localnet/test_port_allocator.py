"""
Test: PortAllocator

1. Every node gets five distinct ports
2. No port is shared between nodes in a run
3. Reserved ports stay held until released
4. Bind failures are fatal ResourceErrors

Run with: pytest tests/unit/localnet/test_port_allocator.py
"""

import socket

import pytest

from localnet.errors import ResourceError
from localnet.models import NodeSpec
from localnet.ports import PortAllocator, PortRole


def test_reserves_five_distinct_ports_per_node():
    allocator = PortAllocator("127.0.0.1")

    try:
        reservation = allocator.reserve(NodeSpec.peer(0))

        assert len(reservation.ports.ports()) == PortAllocator.PORTS_PER_NODE
        assert len(set(reservation.ports.ports())) == PortAllocator.PORTS_PER_NODE
        assert reservation.ports.address(PortRole.REST) == f"127.0.0.1:{reservation.ports.rest}"

    finally:
        allocator.release_all()


def test_ports_are_unique_across_nodes():
    allocator = PortAllocator("127.0.0.1")
    nodes = [NodeSpec.membersrvc(), *[NodeSpec.peer(index) for index in range(6)]]

    try:
        reservations = allocator.reserve_all(nodes)

        pairs = [
            pair
            for reservation in reservations.values()
            for pair in reservation.ports.pairs()
        ]

        assert len(pairs) == len(nodes) * PortAllocator.PORTS_PER_NODE
        assert len(set(pairs)) == len(pairs), "Ports were handed out twice"

    finally:
        allocator.release_all()


def test_reserved_ports_are_held_until_released():
    allocator = PortAllocator("127.0.0.1")
    reservation = allocator.reserve(NodeSpec.peer(0))

    assert reservation.held

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        with pytest.raises(OSError):
            listener.bind(("127.0.0.1", reservation.ports.grpc))

    allocator.release(reservation.node_id)
    assert reservation.held is False

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        listener.bind(("127.0.0.1", reservation.ports.grpc))


def test_release_is_idempotent():
    allocator = PortAllocator("127.0.0.1")
    reservation = allocator.reserve(NodeSpec.peer(0))

    reservation.release()
    reservation.release()
    allocator.release_all()

    assert reservation.held is False


def test_unbindable_interface_is_fatal():
    allocator = PortAllocator("256.256.256.256")

    with pytest.raises(ResourceError) as error:
        allocator.reserve(NodeSpec.peer(0))

    assert error.value.node_id == "vp0"
    assert error.value.stage == "reserve"
    assert allocator.reservations == {}


def test_node_cannot_be_reserved_twice():
    allocator = PortAllocator("127.0.0.1")

    try:
        allocator.reserve(NodeSpec.peer(0))

        with pytest.raises(ResourceError):
            allocator.reserve(NodeSpec.peer(0))

    finally:
        allocator.release_all()
