PORTS_PER_NODE = 5

MEMBERSRVC_NODE_ID = "membersrvc"

# The membership service binds this port regardless of the ports reserved
# for it. The reserved primary port is discarded.
MEMBERSRVC_SERVICE_PORT = 7054
