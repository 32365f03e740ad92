import asyncio

import pytest

from collab_metrics.utils.concurrency import ConcurrencyCoordinator


def test_guard_serialises_same_key_and_drops_lock_afterwards():
    events = []

    async def work(coordinator: ConcurrencyCoordinator, name: str):
        async with coordinator.guard("t-1"):
            events.append(f"{name}:start")
            await asyncio.sleep(0)
            events.append(f"{name}:end")

    async def run():
        coordinator = ConcurrencyCoordinator()
        await asyncio.gather(work(coordinator, "a"), work(coordinator, "b"))
        return coordinator

    coordinator = asyncio.run(run())

    assert events == ["a:start", "a:end", "b:start", "b:end"]
    assert coordinator._locks == {}
    assert coordinator._lock_users == {}


def test_guard_drops_lock_for_each_distinct_key():
    async def run():
        coordinator = ConcurrencyCoordinator()
        for index in range(50):
            async with coordinator.guard(f"task-{index}"):
                assert f"task-{index}" in coordinator._locks
        return coordinator

    coordinator = asyncio.run(run())

    assert coordinator._locks == {}


def test_guard_drops_lock_when_work_fails():
    async def run():
        coordinator = ConcurrencyCoordinator()
        with pytest.raises(RuntimeError):
            async with coordinator.guard("t-1"):
                raise RuntimeError("store failed")
        return coordinator

    coordinator = asyncio.run(run())

    assert coordinator._locks == {}
    assert coordinator._lock_users == {}


def test_guard_without_key_takes_no_lock():
    async def run():
        coordinator = ConcurrencyCoordinator()
        async with coordinator.guard():
            assert coordinator._locks == {}

    asyncio.run(run())


def test_max_concurrency_must_be_positive():
    with pytest.raises(ValueError):
        ConcurrencyCoordinator(max_concurrency=0)
