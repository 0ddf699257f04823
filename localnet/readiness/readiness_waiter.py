import asyncio

from .poll import poll_with_deadline


class ReadinessWaiter:
    """
    Waits for a TCP service to accept connections.

    A refused or timed out connection attempt is expected while the
    service starts and is retried on the next poll. `wait()` only ever
    reports True or False; turning False into an error is the caller's
    decision.
    """

    def __init__(
        self,
        poll_interval: float = 0.1,
    ) -> None:
        self.poll_interval = poll_interval

    async def wait(
        self,
        host: str,
        port: int,
        timeout: float,
    ) -> bool:
        return await poll_with_deadline(
            lambda remaining: self._try_connect(
                host,
                port,
                remaining,
            ),
            timeout,
            self.poll_interval,
        )

    async def _try_connect(
        self,
        host: str,
        port: int,
        remaining: float,
    ) -> bool:
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                timeout=remaining,
            )

        except (OSError, asyncio.TimeoutError):
            return False

        writer.close()

        try:
            await writer.wait_closed()

        except OSError:
            pass

        return True
