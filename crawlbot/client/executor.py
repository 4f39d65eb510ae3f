"""Authenticated JSON request execution with bounded retry."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from loguru import logger

from crawlbot.errors import CrawlbotError

T = TypeVar("T")

_ERROR_MESSAGE_KEYS = ("message", "error", "detail", "warning")


class RequestExecutor:
    """Issue one API call and decode its JSON response.

    Only ``GET`` requests answered with 502/503/504 are retried, up to
    ``MAX_RETRIES`` extra attempts with exponential backoff. Mutating methods
    fail on the first non-success status. ``timeout`` bounds each attempt as a
    whole, including a response body that trickles in.
    """

    RETRYABLE_STATUSES = frozenset({502, 503, 504})
    MAX_RETRIES = 2
    INITIAL_BACKOFF = 0.25

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        timeout: float = 120.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = http_client
        self._owns_http = http_client is None

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self.timeout)
        return self._http

    async def aclose(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    async def execute(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        *,
        idempotency_key: str | None = None,
        decode: Callable[[Any], T] | None = None,
    ) -> T | Any:
        """Send ``method path`` and return the decoded JSON payload.

        Args:
            method: HTTP method; ``GET`` never carries a body.
            path: Path appended to the base URL, e.g. ``/v2/crawl/abc``.
            body: JSON body for ``POST``/``PUT``/``DELETE``.
            idempotency_key: Sent as ``Idempotency-Key`` when non-empty.
            decode: Converts the parsed JSON into the expected shape.

        Raises:
            CrawlbotError: kind ``network`` when no response was obtained in
                time, ``validation`` when the base URL is malformed,
                ``http`` for a non-2xx status once retries are exhausted,
                ``decode`` when the body does not fit the expected shape.
        """
        method = method.upper()
        url = f"{self.base_url}{path}"
        headers = self._build_headers(method, body, idempotency_key)
        content = self._encode_body(method, body)

        backoff = self.INITIAL_BACKOFF
        attempt = 0
        while True:
            attempt += 1
            logger.debug("{} {} (attempt {})", method, path, attempt)
            try:
                response = await asyncio.wait_for(
                    self._client().request(method, url, headers=headers, content=content),
                    self.timeout,
                )
            except asyncio.TimeoutError as e:
                raise CrawlbotError.network(f"{method} {path} timed out after {self.timeout}s") from e
            except httpx.InvalidURL as e:
                raise CrawlbotError.validation(f"Invalid request URL {url!r}: {e}", "api_url") from e
            except httpx.RequestError as e:
                raise CrawlbotError.network(f"{method} {path} failed: {e}") from e

            if response.is_success:
                return self._decode(response, decode)

            retryable = method == "GET" and response.status_code in self.RETRYABLE_STATUSES
            if retryable and attempt <= self.MAX_RETRIES:
                logger.warning(
                    "{} {} returned {}, retrying in {}s",
                    method,
                    path,
                    response.status_code,
                    backoff,
                )
                await self._sleep(backoff)
                backoff *= 2
                continue

            raise self._http_error(response)

    async def _sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    def _build_headers(
        self,
        method: str,
        body: dict[str, Any] | None,
        idempotency_key: str | None,
    ) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key
        if method == "GET":
            return headers
        if method != "DELETE" or body is not None:
            headers["Content-Type"] = "application/json"
        return headers

    @staticmethod
    def _encode_body(method: str, body: dict[str, Any] | None) -> bytes | None:
        if method == "GET":
            return None
        if body is None:
            return b""
        return json.dumps(body).encode("utf-8")

    @staticmethod
    def _decode(response: httpx.Response, decode: Callable[[Any], T] | None) -> T | Any:
        try:
            payload = response.json()
        except ValueError as e:
            raise CrawlbotError.decode(f"Response is not valid JSON: {e}") from e
        if decode is None:
            return payload
        try:
            return decode(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise CrawlbotError.decode(f"Unexpected response shape: {e}") from e

    @staticmethod
    def _http_error(response: httpx.Response) -> CrawlbotError:
        status = response.status_code
        raw_body = response.text
        message = response.reason_phrase or ""

        detail = error_detail(raw_body)
        if detail:
            message = f"{message}: {detail}" if message else detail

        final = f"HTTP {status} - {message}" if message else f"HTTP {status}"
        return CrawlbotError.http(final, status, raw_body)


def error_detail(raw_body: str) -> str | None:
    """Diagnostic text from an error body, or ``None`` when unparseable.

    The first non-null of ``message``, ``error``, ``detail``, ``warning``
    is used; a non-scalar value there yields nothing.
    """
    try:
        parsed = json.loads(raw_body)
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None
    for key in _ERROR_MESSAGE_KEYS:
        value = parsed.get(key)
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            return None
        text = str(value)
        return text or None
    return None
