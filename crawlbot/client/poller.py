"""Polling loop that drives an asynchronous crawl job to a terminal state."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

from crawlbot.errors import CrawlbotError
from crawlbot.models import CrawlJob

StatusCheck = Callable[[str], Awaitable[CrawlJob]]


class CrawlJobPoller:
    """Repeatedly read a job's status until it is no longer ``running``.

    The first status check happens immediately; the poller sleeps only
    between a non-terminal read and the next check. Errors raised by
    ``check_status`` abort the loop unchanged. Cancelling the awaiting task
    interrupts the sleep without leaving a request half-sent.
    """

    def __init__(self, check_status: StatusCheck, *, interval: float = 2.0):
        if interval <= 0:
            raise CrawlbotError.validation("poll_interval must be a positive number", "poll_interval")
        self.check_status = check_status
        self.interval = interval

    async def wait(self, job_id: str, *, timeout: float | None = None) -> CrawlJob:
        """Poll ``job_id`` until terminal.

        Args:
            job_id: Identifier returned when the crawl started.
            timeout: Optional overall deadline in seconds. Unbounded when ``None``.

        Raises:
            CrawlbotError: kind ``timeout`` when the deadline passes, or any
                error propagated from the status check.
        """
        if timeout is None:
            return await self._poll(job_id)
        try:
            return await asyncio.wait_for(self._poll(job_id), timeout=timeout)
        except asyncio.TimeoutError:
            raise CrawlbotError(
                "timeout",
                f"crawl {job_id} did not finish within {timeout} seconds",
            ) from None

    async def _sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def _poll(self, job_id: str) -> CrawlJob:
        checks = 0
        while True:
            job = await self.check_status(job_id)
            checks += 1
            logger.debug("Crawl {} status check #{}: {}", job_id, checks, job.status)
            if job.is_terminal:
                logger.info("Crawl {} finished with status {}", job_id, job.status)
                return job
            await self._sleep(self.interval)
