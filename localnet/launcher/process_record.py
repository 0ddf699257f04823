import datetime

import msgspec


class ProcessRecord(msgspec.Struct, frozen=True, kw_only=True):
    node_id: str
    pid: int
    command: tuple[str, ...]
    stdout_path: str | None = None
    stderr_path: str | None = None
    started: str = msgspec.field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC).isoformat()
    )

    @property
    def attached(self) -> bool:
        return self.stdout_path is None and self.stderr_path is None
