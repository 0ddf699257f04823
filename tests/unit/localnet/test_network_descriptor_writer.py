"""
Test: NetworkDescriptorWriter

1. Peers are listed once each, in ascending index order
2. Keys appear in the documented order
3. membersrvc appears only when security is enabled
4. The document is written atomically, leaving no temporary files

Run with: pytest tests/unit/localnet/test_network_descriptor_writer.py
"""

import json
import os

import pytest

from localnet.descriptor import NetworkDescriptorWriter
from localnet.errors import ResourceError, ValidationError
from localnet.launcher import ProcessRecord
from localnet.models import ConsensusMode, NodeSpec
from localnet.ports import PortSet


DESCRIPTOR_KEYS = [
    "networkMode",
    "chaincodeMode",
    "host",
    "date",
    "createdBy",
    "security",
    "consensus",
    "peerProfileServer",
    "membersrvc",
    "peers",
]

PEER_KEYS = ["id", "grpc", "rest", "events", "cli", "profile", "pid"]


def _port_set(index: int) -> PortSet:
    base = 30000 + index * 10
    return PortSet(
        "127.0.0.1",
        grpc=base,
        rest=base + 1,
        events=base + 2,
        cli=base + 3,
        profile=base + 4,
    )


def _record(node_id: str, pid: int) -> ProcessRecord:
    return ProcessRecord(
        node_id=node_id,
        pid=pid,
        command=("peer", "node", "start"),
    )


def _record_peers(writer: NetworkDescriptorWriter, indexes: list[int]):
    for index in indexes:
        node = NodeSpec.peer(index)
        writer.record_peer(node, _port_set(index), _record(node.node_id, 4000 + index))


def _read(path: str):
    with open(path) as descriptor_file:
        return json.load(descriptor_file)


def test_single_peer_descriptor(run_configuration_factory):
    config = run_configuration_factory(peer_count=1)
    writer = NetworkDescriptorWriter(config.descriptor_path, config)

    _record_peers(writer, [0])
    writer.finalize()

    document = _read(config.descriptor_path)

    assert writer.finalized is True
    assert len(document["peers"]) == 1
    assert document["peers"][0]["id"] == "vp0"
    assert document["peers"][0]["rest"] == "127.0.0.1:30001"
    assert document["peers"][0]["pid"] == "4000"
    assert "membersrvc" not in document
    assert document["security"] == "false"
    assert document["createdBy"] == "localnet"


def test_peers_sorted_by_index_regardless_of_record_order(run_configuration_factory):
    config = run_configuration_factory(peer_count=4)
    writer = NetworkDescriptorWriter(config.descriptor_path, config)

    _record_peers(writer, [2, 0, 3, 1])
    writer.finalize()

    document = _read(config.descriptor_path)

    assert [peer["id"] for peer in document["peers"]] == ["vp0", "vp1", "vp2", "vp3"]


def test_key_order_with_security(run_configuration_factory):
    config = run_configuration_factory(
        peer_count=2,
        security=True,
        consensus=ConsensusMode.BATCH,
        profiling=True,
    )
    writer = NetworkDescriptorWriter(config.descriptor_path, config)

    writer.record_membersrvc("127.0.0.1:7054", _record("membersrvc", 3999))
    _record_peers(writer, [0, 1])
    writer.finalize()

    document = _read(config.descriptor_path)

    assert list(document) == DESCRIPTOR_KEYS
    assert list(document["peers"][0]) == PEER_KEYS
    assert document["membersrvc"] == {"service": "127.0.0.1:7054", "pid": "3999"}
    assert document["security"] == "true"
    assert document["consensus"] == "batch"
    assert document["peerProfileServer"] == "true"


def test_no_temporary_files_remain(run_configuration_factory):
    config = run_configuration_factory(peer_count=2)
    writer = NetworkDescriptorWriter(config.descriptor_path, config)

    _record_peers(writer, [0, 1])
    writer.finalize()

    directory = os.path.dirname(config.descriptor_path)
    leftovers = [
        name for name in os.listdir(directory) if name.endswith(".tmp")
    ]

    assert leftovers == []


def test_begin_removes_stale_descriptor(run_configuration_factory):
    config = run_configuration_factory()

    with open(config.descriptor_path, "w") as stale:
        stale.write("{}")

    NetworkDescriptorWriter(config.descriptor_path, config).begin()

    assert os.path.exists(config.descriptor_path) is False


def test_gap_in_peer_indexes_is_rejected(run_configuration_factory):
    config = run_configuration_factory(peer_count=3)
    writer = NetworkDescriptorWriter(config.descriptor_path, config)

    _record_peers(writer, [0, 2])

    with pytest.raises(ValidationError):
        writer.finalize()

    assert os.path.exists(config.descriptor_path) is False


def test_peer_cannot_be_recorded_twice(run_configuration_factory):
    config = run_configuration_factory(peer_count=2)
    writer = NetworkDescriptorWriter(config.descriptor_path, config)

    _record_peers(writer, [0])

    with pytest.raises(ValidationError) as error:
        _record_peers(writer, [0])

    assert error.value.node_id == "vp0"


def test_membersrvc_cannot_be_recorded_as_peer(run_configuration_factory):
    config = run_configuration_factory()
    writer = NetworkDescriptorWriter(config.descriptor_path, config)

    with pytest.raises(ValidationError):
        writer.record_peer(
            NodeSpec.membersrvc(),
            _port_set(0),
            _record("membersrvc", 1),
        )


def test_load_reads_back_written_descriptor(run_configuration_factory):
    config = run_configuration_factory(peer_count=2, security=True)
    writer = NetworkDescriptorWriter(config.descriptor_path, config)

    writer.record_membersrvc("127.0.0.1:7054", _record("membersrvc", 3999))
    _record_peers(writer, [0, 1])
    written = writer.finalize()

    loaded = NetworkDescriptorWriter.load(config.descriptor_path)

    assert loaded == written
    assert loaded.security_enabled is True
    assert loaded.pids() == [3999, 4000, 4001]


def test_unwritable_descriptor_is_a_resource_error(
    run_configuration_factory,
    temp_directory: str,
):
    blocker = os.path.join(temp_directory, "not-a-directory")
    with open(blocker, "w") as blocking_file:
        blocking_file.write("")

    config = run_configuration_factory(
        descriptor_path=os.path.join(blocker, "network.json"),
    )
    writer = NetworkDescriptorWriter(config.descriptor_path, config)
    _record_peers(writer, [0])

    with pytest.raises(ResourceError) as error:
        writer.finalize()

    assert error.value.stage == "describe"
    assert writer.finalized is False


def test_begin_on_directory_is_a_resource_error(
    run_configuration_factory,
    temp_directory: str,
):
    descriptor_path = os.path.join(temp_directory, "network.json")
    os.makedirs(descriptor_path)

    config = run_configuration_factory(descriptor_path=descriptor_path)

    with pytest.raises(ResourceError) as error:
        NetworkDescriptorWriter(config.descriptor_path, config).begin()

    assert error.value.stage == "describe"
