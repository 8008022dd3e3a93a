from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Protocol

from .report import StatusReportBuilder
from .steam import ServerQueryResult

LOOKUP_DELAY_SECONDS = 0.05

LOGGER = logging.getLogger(__name__)


class ServerLookup(Protocol):
    async def lookup(self, api_key: str, target: str) -> ServerQueryResult: ...


class StatusCommandHandler:
    def __init__(
        self,
        client: ServerLookup,
        delay: float = LOOKUP_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.client = client
        self.delay = delay
        self._sleep = sleep

    async def run(self, credential: str, targets: Iterable[str]) -> str:
        """Query every target in order and return the finished report.

        Lookups run one at a time with a short pause between them. Failures
        become lines in the report instead of aborting the command.
        """
        targets = list(targets)
        report = StatusReportBuilder.begin()
        for index, target in enumerate(targets):
            result = await self.client.lookup(credential, target)
            report.append(target, result)
            if index < len(targets) - 1 and self.delay > 0:
                await self._sleep(self.delay)
        LOGGER.info("Built status report for %d servers", len(targets))
        return report.finish()
