from .constants import MEMBERSRVC_NODE_ID as MEMBERSRVC_NODE_ID
from .constants import MEMBERSRVC_SERVICE_PORT as MEMBERSRVC_SERVICE_PORT
from .constants import PORTS_PER_NODE as PORTS_PER_NODE
from .consensus_mode import (
    ConsensusMode as ConsensusMode,
    CONSENSUS_PLUGINS as CONSENSUS_PLUGINS,
    CONSENSUS_MODES as CONSENSUS_MODES,
)
from .node_role import NodeRole as NodeRole
from .node_spec import NodeSpec as NodeSpec
from .node_state import NodeState as NodeState
from .run_configuration import RunConfiguration as RunConfiguration
