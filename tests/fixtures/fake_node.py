"""
Stand-in for the peer and membersrvc binaries.

Listens where its environment tells it to: membersrvc on
MEMBERSRVC_CA_SERVER_PORT, a peer on CORE_REST_ADDRESS. When
FAKE_NODE_OUTPUT is set, the node's CORE_* and MEMBERSRVC_* settings
are written to <FAKE_NODE_OUTPUT>/<node id>.json before listening.
"""

import json
import os
import signal
import socket
import sys
import time


def main():
    if port := os.getenv("MEMBERSRVC_CA_SERVER_PORT"):
        node_id = "membersrvc"
        host = os.getenv("FAKE_NODE_HOST", "127.0.0.1")

    else:
        node_id = os.environ["CORE_PEER_ID"]
        host, port = os.environ["CORE_REST_ADDRESS"].rsplit(":", 1)

    if output := os.getenv("FAKE_NODE_OUTPUT"):
        settings = {
            name: value
            for name, value in os.environ.items()
            if name.startswith(("CORE_", "MEMBERSRVC_"))
        }

        with open(os.path.join(output, f"{node_id}.json"), "w") as settings_file:
            json.dump(settings, settings_file)

    time.sleep(float(os.getenv("FAKE_NODE_DELAY", "0")))

    signal.signal(signal.SIGTERM, lambda *_: sys.exit(0))

    server = socket.create_server((host, int(port)))
    print(f"{node_id} listening on {host}:{port}", flush=True)

    while True:
        connection, _ = server.accept()
        connection.close()


if __name__ == "__main__":
    main()
