"""
Bootstrap exceptions.

Every error raised while bootstrapping a network is fatal for the run.
Nothing in localnet retries or downgrades these; they propagate to the
command line layer, which prints the diagnostic and exits non-zero.
"""


class LocalnetError(Exception):
    """
    Base class for bootstrap failures.

    Carries the node and stage that failed (when known) so the command
    line can name them in its single diagnostic line.
    """

    def __init__(
        self,
        message: str,
        node_id: str | None = None,
        stage: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.node_id = node_id
        self.stage = stage

    def diagnostic(self) -> str:
        location = [
            part for part in (self.node_id, self.stage) if part
        ]

        if location:
            return f"Err. - {'/'.join(location)} - {self.message}"

        return f"Err. - {self.message}"


class ValidationError(LocalnetError):
    """
    Raised when the run configuration is malformed or out of range.

    Always raised before any port is reserved.
    """
    pass


class ResourceError(LocalnetError):
    """
    Raised when the host cannot supply what the run needs: a port could
    not be bound, or there are fewer enrollment credentials than peers.
    """
    pass


class LaunchError(LocalnetError):
    """Raised when a node process cannot be spawned."""
    pass


class ReadinessTimeoutError(LocalnetError):
    """
    Raised when a node's service address did not accept a connection
    within the startup timeout.
    """

    def __init__(
        self,
        message: str,
        node_id: str | None = None,
        stage: str | None = None,
        address: str | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            message,
            node_id=node_id,
            stage=stage,
        )
        self.address = address
        self.timeout = timeout
