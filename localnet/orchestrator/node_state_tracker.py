from typing import Dict, Iterable

from localnet.models import NodeSpec, NodeState


_TRANSITIONS: Dict[NodeState, tuple[NodeState, ...]] = {
    NodeState.PLANNED: (NodeState.PORTS_RESERVED, NodeState.FAILED),
    NodeState.PORTS_RESERVED: (NodeState.LAUNCHED, NodeState.FAILED),
    NodeState.LAUNCHED: (NodeState.AWAITING_READY, NodeState.FAILED),
    NodeState.AWAITING_READY: (NodeState.READY, NodeState.TIMED_OUT),
    NodeState.READY: (),
    NodeState.TIMED_OUT: (),
    NodeState.FAILED: (),
}


class NodeStateTracker:
    def __init__(self, nodes: Iterable[NodeSpec] | None = None) -> None:
        self._states: Dict[str, NodeState] = {}

        for node in nodes or ():
            self.plan(node)

    @property
    def states(self) -> Dict[str, NodeState]:
        return dict(self._states)

    def plan(self, node: NodeSpec):
        self._states[node.node_id] = NodeState.PLANNED

    def get(self, node_id: str) -> NodeState | None:
        return self._states.get(node_id)

    def transition(self, node_id: str, state: NodeState):
        current = self._states.get(node_id)
        assert current is not None, f"Err. - node {node_id} was never planned."

        if state not in _TRANSITIONS[current]:
            raise RuntimeError(
                f"Err. - node {node_id} cannot move from {current.value} to {state.value}."
            )

        self._states[node_id] = state

    def terminal(self, node_id: str) -> bool:
        state = self._states.get(node_id)
        return state is not None and len(_TRANSITIONS[state]) < 1
