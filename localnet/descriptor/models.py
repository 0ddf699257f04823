"""
Network descriptor document.

Field declaration order is the serialized key order, which downstream
tooling depends on:

    {
        "networkMode": "process",
        "chaincodeMode": "vm",
        "host": "127.0.0.1",
        "date": "2026-10-19T12:00:00+00:00",
        "createdBy": "localnet",
        "security": "true",
        "consensus": "batch",
        "peerProfileServer": "false",
        "membersrvc": {"service": "127.0.0.1:7054", "pid": "4242"},
        "peers": [
            {"id": "vp0", "grpc": "...", "rest": "...", "events": "...",
             "cli": "...", "profile": "...", "pid": "4243"}
        ]
    }

`membersrvc` is omitted entirely when security is disabled.
"""

import msgspec


class MembersrvcRecord(msgspec.Struct, frozen=True):
    service: str
    pid: str


class PeerRecord(msgspec.Struct, frozen=True):
    id: str
    grpc: str
    rest: str
    events: str
    cli: str
    profile: str
    pid: str


class NetworkDescriptor(
    msgspec.Struct,
    kw_only=True,
    rename="camel",
    omit_defaults=True,
):
    network_mode: str
    chaincode_mode: str
    host: str
    date: str
    created_by: str
    security: str
    consensus: str
    peer_profile_server: str
    membersrvc: MembersrvcRecord | None = None
    peers: list[PeerRecord]

    @property
    def security_enabled(self) -> bool:
        return self.security == "true"

    def pids(self) -> list[int]:
        pids = [int(peer.pid) for peer in self.peers]

        if self.membersrvc:
            pids.insert(0, int(self.membersrvc.pid))

        return pids
