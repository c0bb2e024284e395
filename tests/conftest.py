"""Shared fixtures for the BookSmart AI client tests."""
import asyncio
import sys
from pathlib import Path

import pytest

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


class VirtualClock:
    """Drop-in replacement for asyncio.sleep that only advances when told to."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []  # every delay requested, in order
        self._waiters = []

    async def sleep(self, delay):
        self.sleeps.append(delay)
        future = asyncio.get_running_loop().create_future()
        self._waiters.append((self.now + delay, future))
        await future

    async def settle(self):
        """Let every runnable task run until it blocks again."""
        for _ in range(20):
            await asyncio.sleep(0)

    async def advance(self, seconds):
        await self.settle()
        self.now += seconds
        remaining = []
        for deadline, future in self._waiters:
            if future.done():
                continue
            if deadline <= self.now:
                future.set_result(None)
            else:
                remaining.append((deadline, future))
        self._waiters = remaining
        await self.settle()


@pytest.fixture
def clock():
    """A fresh virtual clock."""
    return VirtualClock()
