import asyncio
from typing import Awaitable, Callable


async def poll_with_deadline(
    check: Callable[[float], Awaitable[bool]],
    timeout: float,
    interval: float,
) -> bool:
    """
    Await `check` every `interval` seconds until it returns True or
    `timeout` seconds have passed.

    The check receives the time left before the deadline so it can bound
    its own work. Sleeps never extend past the deadline and there is no
    backoff.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout

    while True:
        remaining = deadline - loop.time()
        if remaining <= 0:
            return False

        if await check(remaining):
            return True

        remaining = deadline - loop.time()
        if remaining <= 0:
            return False

        await asyncio.sleep(
            min(interval, remaining)
        )
