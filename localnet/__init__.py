"""
localnet - local multi-process ledger test networks.

Reserves ports, launches peer processes (and, with security enabled, the
membership service), waits for every node to accept connections and
writes a network descriptor for client tooling.

Usage:
    from localnet.models import RunConfiguration
    from localnet.orchestrator import Orchestrator

    descriptor = asyncio.run(
        Orchestrator(RunConfiguration.create(peer_count=4)).run()
    )
"""

__version__ = "0.1.0"
