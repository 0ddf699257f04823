from __future__ import annotations

import msgspec

from .constants import MEMBERSRVC_NODE_ID
from .node_role import NodeRole


class NodeSpec(msgspec.Struct, frozen=True):
    role: NodeRole
    index: int | None
    node_id: str

    @classmethod
    def membersrvc(cls) -> NodeSpec:
        return cls(
            role=NodeRole.CA,
            index=None,
            node_id=MEMBERSRVC_NODE_ID,
        )

    @classmethod
    def peer(cls, index: int) -> NodeSpec:
        return cls(
            role=NodeRole.PEER,
            index=index,
            node_id=f"vp{index}",
        )

    @property
    def is_root(self) -> bool:
        return self.role == NodeRole.PEER and self.index == 0
