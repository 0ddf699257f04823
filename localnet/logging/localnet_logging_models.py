from .models import Entry, LogLevel


class NodeDebug(Entry, kw_only=True):
    node_id: str
    stage: str
    level: LogLevel = LogLevel.DEBUG

class NodeInfo(Entry, kw_only=True):
    node_id: str
    stage: str
    level: LogLevel = LogLevel.INFO

class NodeError(Entry, kw_only=True):
    node_id: str
    stage: str
    level: LogLevel = LogLevel.ERROR

class NetworkInfo(Entry, kw_only=True):
    peers: int
    security: bool
    consensus: str
    level: LogLevel = LogLevel.INFO

class NetworkError(Entry, kw_only=True):
    peers: int
    security: bool
    consensus: str
    level: LogLevel = LogLevel.ERROR
