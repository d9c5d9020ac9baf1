"""Retry pacing for connecting to external backends.

    async for attempt in backoff_attempts(policy):
        if await try_connect():
            break

The first attempt runs immediately; each later one sleeps for the next delay first.
"""
import asyncio
from dataclasses import dataclass
from typing import AsyncIterator, Iterator


@dataclass(frozen=True)
class BackoffPolicy:
    initial_seconds: float
    max_seconds: float
    multiplier: float
    max_attempts: int

    def delays(self) -> Iterator[float]:
        """Delay preceding each attempt: 0, initial, initial*multiplier, ... capped at max."""
        delay = 0.0
        for attempt in range(self.max_attempts):
            if attempt == 1:
                delay = self.initial_seconds
            elif attempt > 1:
                delay *= self.multiplier
            delay = min(delay, self.max_seconds)
            yield delay


async def backoff_attempts(policy: BackoffPolicy) -> AsyncIterator[int]:
    for attempt, delay in enumerate(policy.delays(), start=1):
        if delay > 0:
            await asyncio.sleep(delay)
        yield attempt
