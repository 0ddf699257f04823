"""
Test: ReadinessWaiter

1. A closed port fails no later than timeout + one poll interval
2. A listener that appears mid-wait is detected promptly
3. The deadline combinator exits early on success

Run with: pytest tests/unit/localnet/test_readiness_waiter.py
"""

import asyncio
import time

import pytest

from localnet.readiness import ReadinessWaiter, poll_with_deadline


@pytest.mark.asyncio
async def test_closed_port_fails_within_deadline(free_port: int):
    waiter = ReadinessWaiter(poll_interval=0.1)
    timeout = 0.5

    start = time.monotonic()
    ready = await waiter.wait("127.0.0.1", free_port, timeout)
    elapsed = time.monotonic() - start

    assert ready is False
    assert elapsed >= timeout * 0.9
    # Scheduling slack on loaded CI hosts.
    assert elapsed <= timeout + waiter.poll_interval + 0.25


@pytest.mark.asyncio
async def test_listener_appearing_mid_wait_is_detected(free_port: int):
    waiter = ReadinessWaiter(poll_interval=0.05)

    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        writer.close()

    wait_task = asyncio.create_task(
        waiter.wait("127.0.0.1", free_port, 5.0)
    )

    await asyncio.sleep(0.3)
    assert wait_task.done() is False

    server = await asyncio.start_server(handle, "127.0.0.1", free_port)
    opened = time.monotonic()

    try:
        ready = await wait_task
        detected = time.monotonic() - opened

    finally:
        server.close()
        await server.wait_closed()

    assert ready is True
    assert detected < 1.0


@pytest.mark.asyncio
async def test_already_listening_returns_immediately(free_port: int):
    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", free_port)

    try:
        start = time.monotonic()
        ready = await ReadinessWaiter().wait("127.0.0.1", free_port, 5.0)

        assert ready is True
        assert time.monotonic() - start < 1.0

    finally:
        server.close()
        await server.wait_closed()


@pytest.mark.asyncio
async def test_poll_with_deadline_stops_on_first_success():
    calls: list[float] = []

    async def check(remaining: float) -> bool:
        calls.append(remaining)
        return len(calls) == 3

    assert await poll_with_deadline(check, timeout=5.0, interval=0.01) is True
    assert len(calls) == 3
    assert all(remaining <= 5.0 for remaining in calls)


@pytest.mark.asyncio
async def test_poll_with_deadline_never_checks_after_deadline():
    calls: list[float] = []

    async def check(remaining: float) -> bool:
        calls.append(remaining)
        return False

    assert await poll_with_deadline(check, timeout=0.2, interval=0.05) is False
    assert all(remaining > 0 for remaining in calls)
    assert 1 <= len(calls) <= 6
