from .node_state_tracker import NodeStateTracker as NodeStateTracker
from .orchestrator import Orchestrator as Orchestrator
