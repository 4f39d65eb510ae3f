import asyncio

import pytest

from crawlbot.client.poller import CrawlJobPoller
from crawlbot.errors import CrawlbotError
from crawlbot.models import CrawlJob

pytestmark = pytest.mark.asyncio


def _scripted(statuses: list[str | None]):
    calls: list[str] = []

    async def check_status(job_id: str) -> CrawlJob:
        calls.append(job_id)
        return CrawlJob(id=job_id, status=statuses[len(calls) - 1])

    return check_status, calls


def _poller(check_status, monkeypatch, interval: float = 2.0) -> tuple[CrawlJobPoller, list[float]]:
    poller = CrawlJobPoller(check_status, interval=interval)
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    monkeypatch.setattr(poller, "_sleep", fake_sleep)
    return poller, sleeps


async def test_polls_until_completed(monkeypatch) -> None:
    check_status, calls = _scripted(["running", "running", "completed"])
    poller, sleeps = _poller(check_status, monkeypatch, interval=5)

    job = await poller.wait("job-1")

    assert job.status == "completed"
    assert calls == ["job-1", "job-1", "job-1"]
    assert sleeps == [5, 5]


async def test_terminal_on_first_check_returns_without_sleeping(monkeypatch) -> None:
    check_status, calls = _scripted(["failed"])
    poller, sleeps = _poller(check_status, monkeypatch)

    job = await poller.wait("job-2")

    assert job.status == "failed"
    assert job.is_failed
    assert len(calls) == 1
    assert sleeps == []


@pytest.mark.parametrize("status", ["cancelled", "pending", "scraping", "", None, " running "])
async def test_any_status_other_than_running_is_terminal(monkeypatch, status) -> None:
    check_status, calls = _scripted([status])
    poller, _ = _poller(check_status, monkeypatch)

    job = await poller.wait("job-3")

    assert job.status == status
    assert len(calls) == 1


async def test_running_is_case_insensitive(monkeypatch) -> None:
    check_status, calls = _scripted(["RUNNING", "Running", "completed"])
    poller, sleeps = _poller(check_status, monkeypatch)

    await poller.wait("job-4")

    assert len(calls) == 3
    assert len(sleeps) == 2


async def test_check_errors_abort_polling(monkeypatch) -> None:
    calls: list[str] = []

    async def check_status(job_id: str) -> CrawlJob:
        calls.append(job_id)
        if len(calls) == 2:
            raise CrawlbotError.http("HTTP 500 - Internal Server Error", 500, "{}")
        return CrawlJob(id=job_id, status="running")

    poller, sleeps = _poller(check_status, monkeypatch)

    with pytest.raises(CrawlbotError) as excinfo:
        await poller.wait("job-5")

    assert excinfo.value.status_code == 500
    assert len(calls) == 2
    assert sleeps == [2.0]


async def test_deadline_raises_timeout_error() -> None:
    async def check_status(job_id: str) -> CrawlJob:
        return CrawlJob(id=job_id, status="running")

    poller = CrawlJobPoller(check_status, interval=0.05)

    with pytest.raises(CrawlbotError) as excinfo:
        await poller.wait("job-6", timeout=0.01)

    assert excinfo.value.kind == "timeout"
    assert "job-6" in str(excinfo.value)


async def test_task_cancellation_interrupts_sleep() -> None:
    checks: list[str] = []

    async def check_status(job_id: str) -> CrawlJob:
        checks.append(job_id)
        return CrawlJob(id=job_id, status="running")

    poller = CrawlJobPoller(check_status, interval=60)
    task = asyncio.create_task(poller.wait("job-7"))
    while not checks:
        await asyncio.sleep(0)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert checks == ["job-7"]


@pytest.mark.parametrize("interval", [0, -1])
async def test_interval_must_be_positive(interval) -> None:
    async def check_status(job_id: str) -> CrawlJob:
        return CrawlJob(id=job_id, status="completed")

    with pytest.raises(CrawlbotError) as excinfo:
        CrawlJobPoller(check_status, interval=interval)

    assert excinfo.value.kind == "validation"
    assert excinfo.value.field == "poll_interval"
