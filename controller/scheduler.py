"""Timing primitive used to pace simulated transfer progress."""

import asyncio
from abc import ABC, abstractmethod
from typing import List


class Ticker(ABC):
    """
    Waits between progress steps.

    The upload controller only ever awaits ``sleep``; swapping the ticker
    changes pacing without touching the lifecycle rules.
    """

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        """Return once ``seconds`` have passed."""


class AsyncioTicker(Ticker):
    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class ImmediateTicker(Ticker):
    """Ticker that yields control without waiting and remembers requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def sleep(self, seconds: float) -> None:
        self.delays.append(seconds)
        await asyncio.sleep(0)
