"""Public client for the search, scrape, map and crawl endpoints."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from loguru import logger

from crawlbot.client.executor import RequestExecutor
from crawlbot.client.poller import CrawlJobPoller
from crawlbot.config.schema import API_KEY_ENV, ClientConfig
from crawlbot.errors import CrawlbotError
from crawlbot.models import (
    CancelResult,
    CrawlJob,
    CrawlStart,
    Document,
    Envelope,
    MapResult,
    SearchResultRecord,
)
from crawlbot.normalize import derive_fields, normalize_links, normalize_search_data
from crawlbot.normalize.fields import scalar_text
from crawlbot.params import (
    ApiVersion,
    CrawlParams,
    MapParams,
    ScrapeParams,
    SearchParams,
    build_crawl_body,
    build_map_body,
    build_scrape_body,
    build_search_body,
    validate_crawl_params,
    validate_job_id,
    validate_map_params,
    validate_scrape_params,
    validate_search_params,
    validate_url,
)

T = TypeVar("T")

API_VERSIONS: tuple[ApiVersion, ...] = ("v1", "v2")


def _expect_object(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    return payload


def _warning(payload: dict[str, Any]) -> str | None:
    return scalar_text(payload.get("warning"))


def _succeeded(payload: dict[str, Any]) -> bool:
    return payload.get("success") is not False


class CrawlbotClient:
    """Async client for a remote content-extraction service.

    Every operation validates its input before touching the network, sends
    one request through :class:`RequestExecutor`, and converts the response
    into canonical models. Instances hold only immutable settings and the
    pooled transport, so concurrent operations do not interfere.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str | None = None,
        *,
        config: ClientConfig | None = None,
        api_version: ApiVersion | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config or ClientConfig()

        key = self.config.resolve_api_key(api_key)
        if not key:
            raise CrawlbotError.validation(
                f"API key must be provided (set apiKey or {API_KEY_ENV})",
                "api_key",
            )

        self.api_version: ApiVersion = api_version or self.config.api_version
        if self.api_version not in API_VERSIONS:
            raise CrawlbotError.validation(
                f"api_version must be one of {list(API_VERSIONS)}",
                "api_version",
            )

        self.api_url = self.config.resolve_api_url(api_url)
        self.timeout = timeout if timeout is not None else self.config.timeout
        self.executor = RequestExecutor(
            api_key=key,
            base_url=self.api_url,
            timeout=self.timeout,
            http_client=http_client,
        )

    async def __aenter__(self) -> "CrawlbotClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.executor.aclose()

    def _path(self, suffix: str) -> str:
        return f"/{self.api_version}{suffix}"

    async def _call(
        self,
        operation: str,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        *,
        idempotency_key: str | None = None,
    ) -> dict[str, Any]:
        try:
            return await self.executor.execute(
                method,
                path,
                body,
                idempotency_key=idempotency_key,
                decode=_expect_object,
            )
        except CrawlbotError as e:
            raise e.with_context(f"{operation} request failed") from e

    @staticmethod
    def _check(operation: str, error: CrawlbotError | None) -> None:
        if error is not None:
            raise error.with_context(f"Invalid {operation.lower()} parameters")

    @staticmethod
    def _convert(operation: str, convert: Callable[[Any], T], value: Any) -> T:
        try:
            return convert(value)
        except (KeyError, TypeError, ValueError) as e:
            raise CrawlbotError.decode(f"{operation} response has unexpected shape: {e}") from e

    async def search(self, params: SearchParams) -> Envelope[list[SearchResultRecord]]:
        """Run a keyword search and return canonical result records."""
        self._check("Search", validate_search_params(params))

        payload = await self._call("Search", "POST", self._path("/search"), build_search_body(params, self.api_version))
        if not _succeeded(payload):
            raise CrawlbotError.domain("Search", _warning(payload))

        records = [derive_fields(record) for record in normalize_search_data(payload.get("data"))]
        logger.debug("Search {!r} returned {} results", params.query, len(records))
        return Envelope(payload=records, success=True, warning=_warning(payload))

    async def scrape(self, url: str, params: ScrapeParams | None = None) -> Envelope[Document]:
        """Scrape a single page; a server warning travels on the envelope."""
        self._check("Scrape", validate_url(url))
        if params is not None:
            self._check("Scrape", validate_scrape_params(params))

        payload = await self._call("Scrape", "POST", self._path("/scrape"), build_scrape_body(url, params, self.api_version))
        if not _succeeded(payload):
            raise CrawlbotError.domain("Scrape", _warning(payload))
        document = self._convert("Scrape", Document.from_dict, payload.get("data"))
        return Envelope(payload=document, success=True, warning=_warning(payload))

    async def map(self, url: str, params: MapParams | None = None) -> MapResult:
        """Discover the links of a site."""
        self._check("Map", validate_url(url))
        if params is not None:
            self._check("Map", validate_map_params(params))

        payload = await self._call("Map", "POST", self._path("/map"), build_map_body(url, params))
        if not _succeeded(payload):
            raise CrawlbotError.domain("Map", _warning(payload))
        return MapResult(links=normalize_links(payload.get("links")), success=True, warning=_warning(payload))

    async def start_crawl(
        self,
        url: str,
        params: CrawlParams | None = None,
        *,
        idempotency_key: str | None = None,
    ) -> CrawlStart:
        """Start an asynchronous crawl job without waiting for it."""
        self._check("Crawl", validate_url(url))
        if params is not None:
            self._check("Crawl", validate_crawl_params(params))

        payload = await self._call(
            "Crawl",
            "POST",
            self._path("/crawl"),
            build_crawl_body(url, params, self.api_version),
            idempotency_key=idempotency_key,
        )
        if not _succeeded(payload):
            raise CrawlbotError.domain("Crawl", _warning(payload))

        start = self._convert("Crawl", _parse_crawl_start, payload)
        logger.info("Crawl {} started for {}", start.id, url)
        return start

    async def get_crawl_status(self, job_id: str) -> CrawlJob:
        """Read the current state of a crawl job."""
        self._check("Crawl status", validate_job_id(job_id))

        payload = await self._call("Crawl status", "GET", self._path(f"/crawl/{quote(job_id, safe='')}"))
        return self._convert("Crawl status", lambda p: _parse_crawl_job(job_id, p), payload)

    async def cancel_crawl(self, job_id: str) -> CancelResult:
        """Ask the server to cancel a crawl job."""
        self._check("Cancel crawl", validate_job_id(job_id))

        payload = await self._call("Cancel crawl", "DELETE", self._path(f"/crawl/{quote(job_id, safe='')}"))
        return CancelResult(
            status=scalar_text(payload.get("status")),
            success=_succeeded(payload),
            warning=_warning(payload),
        )

    async def crawl(
        self,
        url: str,
        params: CrawlParams | None = None,
        *,
        idempotency_key: str | None = None,
        poll_interval: float | None = None,
        timeout: float | None = None,
    ) -> CrawlJob:
        """Start a crawl and poll it until it leaves the ``running`` state.

        Args:
            poll_interval: Seconds between status checks; defaults to the config.
            timeout: Optional overall polling deadline in seconds.
        """
        interval = poll_interval if poll_interval is not None else self.config.poll_interval
        if timeout is not None and timeout <= 0:
            self._check("Crawl", CrawlbotError.validation("timeout must be a positive number", "timeout"))
        try:
            poller = CrawlJobPoller(self.get_crawl_status, interval=interval)
        except CrawlbotError as e:
            raise e.with_context("Invalid crawl parameters") from e

        start = await self.start_crawl(url, params, idempotency_key=idempotency_key)
        return await poller.wait(start.id, timeout=timeout)

    async def crawl_params_preview(self, url: str, prompt: str) -> dict[str, Any]:
        """Preview the crawl options the server derives from a natural-language prompt."""
        self._check("Crawl preview", validate_url(url))
        if not isinstance(prompt, str) or not prompt.strip():
            self._check("Crawl preview", CrawlbotError.validation("Prompt must not be empty", "prompt"))

        return await self._call(
            "Crawl preview",
            "POST",
            "/v2/crawl/params-preview",
            {"url": url, "prompt": prompt},
        )


def _parse_crawl_start(payload: dict[str, Any]) -> CrawlStart:
    job_id = scalar_text(payload.get("id"))
    if not job_id:
        raise ValueError("missing crawl job id")
    return CrawlStart(
        id=job_id,
        url=scalar_text(payload.get("url")),
        status=scalar_text(payload.get("status")),
        success=True,
        warning=_warning(payload),
    )


def _parse_crawl_job(job_id: str, payload: dict[str, Any]) -> CrawlJob:
    job = CrawlJob(
        id=scalar_text(payload.get("id")) or job_id,
        status=scalar_text(payload.get("status")),
        success=_succeeded(payload),
        warning=_warning(payload),
    )
    if job.is_completed:
        data = payload.get("data") or []
        if not isinstance(data, list):
            raise ValueError("crawl data must be a list")
        job.documents = [Document.from_dict(item) for item in data]
    return job
