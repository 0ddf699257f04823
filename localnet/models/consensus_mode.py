from enum import Enum
from typing import Dict


class ConsensusMode(str, Enum):
    NOOPS = "noops"
    BATCH = "batch"
    CLASSIC = "classic"
    SIEVE = "sieve"


CONSENSUS_PLUGINS: Dict[ConsensusMode, str] = {
    ConsensusMode.NOOPS: "noops",
    ConsensusMode.BATCH: "pbft",
    ConsensusMode.CLASSIC: "pbft",
    ConsensusMode.SIEVE: "pbft",
}

# noops has no PBFT mode; peers ignore an empty value.
CONSENSUS_MODES: Dict[ConsensusMode, str] = {
    ConsensusMode.NOOPS: "",
    ConsensusMode.BATCH: "batch",
    ConsensusMode.CLASSIC: "classic",
    ConsensusMode.SIEVE: "sieve",
}
