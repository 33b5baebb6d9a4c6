# src/pipeline/throttle.py - v1
"""Fixed inter-document delay protecting the remote services' rate limits."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class Throttle:
    """Sleep a fixed delay each time wait() is called."""

    def __init__(
        self,
        delay_s: float = 1.5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if delay_s < 0:
            raise ValueError("delay_s must be >= 0")
        self._delay_s = delay_s
        self._sleep = sleep

    @property
    def delay_s(self) -> float:
        return self._delay_s

    async def wait(self) -> None:
        if self._delay_s <= 0:
            return
        logger.debug("Sleeping %.2fs", self._delay_s)
        await self._sleep(self._delay_s)
