"""Immutable operation options, their validation, and request-body builders."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from crawlbot.errors import CrawlbotError

ApiVersion = Literal["v1", "v2"]

VALID_SOURCES: tuple[str, ...] = ("web", "news", "images")
VALID_SITEMAP_MODES: tuple[str, ...] = ("only", "skip", "include")


@dataclass(frozen=True, slots=True)
class ScrapeParams:
    """Options for a single-page scrape; also used as crawl/search scrape options."""

    formats: Sequence[str | Mapping[str, Any]] | None = None
    headers: Mapping[str, str] | None = None
    include_tags: Sequence[str] | None = None
    exclude_tags: Sequence[str] | None = None
    only_main_content: bool | None = None
    wait_for: int | None = None
    parse_pdf: bool | None = None
    timeout: int | None = None
    # v2 only
    parsers: Sequence[str | Mapping[str, Any]] | None = None
    max_age: int | None = None
    mobile: bool | None = None
    skip_tls_verification: bool | None = None
    actions: Sequence[Mapping[str, Any]] | None = None
    location: Mapping[str, Any] | None = None
    remove_base64_images: bool | None = None
    block_ads: bool | None = None
    proxy: str | None = None
    store_in_cache: bool | None = None
    zero_data_retention: bool | None = None


@dataclass(frozen=True, slots=True)
class SearchParams:
    query: str
    limit: int | None = None
    tbs: str | None = None
    lang: str | None = None
    country: str | None = None
    location: str | None = None
    timeout: int | None = None
    ignore_invalid_urls: bool | None = None
    scrape_options: ScrapeParams | None = None
    sources: Sequence[str] | None = None


@dataclass(frozen=True, slots=True)
class MapParams:
    include_subdomains: bool | None = None
    search: str | None = None
    ignore_sitemap: bool | None = None
    limit: int | None = None


@dataclass(frozen=True, slots=True)
class CrawlParams:
    scrape_options: ScrapeParams | None = None
    # v2 only
    prompt: str | None = None
    crawl_entire_domain: bool | None = None
    max_discovery_depth: int | None = None
    sitemap: str | None = None


def _require_text(value: Any, field: str, label: str) -> CrawlbotError | None:
    if not isinstance(value, str) or not value.strip():
        return CrawlbotError.validation(f"{label} must not be empty", field)
    return None


def _require_positive(value: int | float | None, field: str) -> CrawlbotError | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return CrawlbotError.validation(f"{field} must be a positive number", field)
    return None


def validate_url(url: Any) -> CrawlbotError | None:
    return _require_text(url, "url", "URL")


def validate_job_id(job_id: Any) -> CrawlbotError | None:
    return _require_text(job_id, "id", "Crawl job ID")


def validate_scrape_params(params: ScrapeParams) -> CrawlbotError | None:
    for name in ("wait_for", "timeout", "max_age"):
        value = getattr(params, name)
        if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
            return CrawlbotError.validation(f"{name} must be a non-negative integer", name)
    return None


def validate_search_params(params: SearchParams) -> CrawlbotError | None:
    """Return the first problem found in ``params``, or ``None`` when valid."""
    error = _require_text(params.query, "query", "Query")
    if error:
        return error

    for name in ("limit", "timeout"):
        error = _require_positive(getattr(params, name), name)
        if error:
            return error

    if params.sources is not None:
        unknown = [s for s in params.sources if s not in VALID_SOURCES]
        if unknown:
            return CrawlbotError.validation(
                f"sources must be a subset of {list(VALID_SOURCES)}, got {unknown}",
                "sources",
            )

    if params.scrape_options is not None:
        return validate_scrape_params(params.scrape_options)
    return None


def validate_map_params(params: MapParams) -> CrawlbotError | None:
    return _require_positive(params.limit, "limit")


def validate_crawl_params(params: CrawlParams) -> CrawlbotError | None:
    if params.sitemap is not None and params.sitemap not in VALID_SITEMAP_MODES:
        return CrawlbotError.validation(
            f"sitemap must be one of {list(VALID_SITEMAP_MODES)}",
            "sitemap",
        )
    if params.max_discovery_depth is not None and (
        isinstance(params.max_discovery_depth, bool)
        or not isinstance(params.max_discovery_depth, int)
        or params.max_discovery_depth < 0
    ):
        return CrawlbotError.validation(
            "max_discovery_depth must be a non-negative integer",
            "max_discovery_depth",
        )
    if params.scrape_options is not None:
        return validate_scrape_params(params.scrape_options)
    return None


def _put(body: dict[str, Any], key: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        body[key] = dict(value)
    elif isinstance(value, (list, tuple)):
        body[key] = [dict(v) if isinstance(v, Mapping) else v for v in value]
    else:
        body[key] = value


def build_scrape_options(params: ScrapeParams, version: ApiVersion) -> dict[str, Any]:
    """Serialize scrape options; version-specific fields follow ``version``."""
    body: dict[str, Any] = {}
    _put(body, "formats", params.formats)
    _put(body, "headers", params.headers)
    _put(body, "includeTags", params.include_tags)
    _put(body, "excludeTags", params.exclude_tags)
    _put(body, "onlyMainContent", params.only_main_content)
    _put(body, "waitFor", params.wait_for)

    if version == "v1":
        _put(body, "parsePDF", params.parse_pdf)
        _put(body, "timeout", params.timeout)
        return body

    if params.parsers is not None:
        _put(body, "parsers", params.parsers)
    elif params.parse_pdf is not None:
        body["parsers"] = ["pdf"] if params.parse_pdf else []
    _put(body, "timeout", params.timeout)
    _put(body, "maxAge", params.max_age)
    _put(body, "mobile", params.mobile)
    _put(body, "skipTlsVerification", params.skip_tls_verification)
    _put(body, "actions", params.actions)
    _put(body, "location", params.location)
    _put(body, "removeBase64Images", params.remove_base64_images)
    _put(body, "blockAds", params.block_ads)
    _put(body, "proxy", params.proxy)
    _put(body, "storeInCache", params.store_in_cache)
    _put(body, "zeroDataRetention", params.zero_data_retention)
    return body


def build_scrape_body(url: str, params: ScrapeParams | None, version: ApiVersion) -> dict[str, Any]:
    body: dict[str, Any] = {"url": url}
    if params is not None:
        body.update(build_scrape_options(params, version))
    return body


def build_search_body(params: SearchParams, version: ApiVersion) -> dict[str, Any]:
    body: dict[str, Any] = {"query": params.query}
    _put(body, "limit", params.limit)
    _put(body, "tbs", params.tbs)
    _put(body, "lang", params.lang)
    _put(body, "country", params.country)
    _put(body, "location", params.location)
    _put(body, "timeout", params.timeout)
    _put(body, "ignoreInvalidURLs", params.ignore_invalid_urls)
    if params.scrape_options is not None:
        body["scrapeOptions"] = build_scrape_options(params.scrape_options, version)
    if version == "v2":
        _put(body, "sources", params.sources)
    return body


def build_map_body(url: str, params: MapParams | None) -> dict[str, Any]:
    body: dict[str, Any] = {"url": url}
    if params is not None:
        _put(body, "includeSubdomains", params.include_subdomains)
        _put(body, "search", params.search)
        _put(body, "ignoreSitemap", params.ignore_sitemap)
        _put(body, "limit", params.limit)
    return body


def build_crawl_body(url: str, params: CrawlParams | None, version: ApiVersion) -> dict[str, Any]:
    body: dict[str, Any] = {"url": url}
    if params is None:
        return body
    if params.scrape_options is not None:
        body["scrapeOptions"] = build_scrape_options(params.scrape_options, version)
    if version == "v2":
        _put(body, "prompt", params.prompt)
        _put(body, "crawlEntireDomain", params.crawl_entire_domain)
        _put(body, "maxDiscoveryDepth", params.max_discovery_depth)
        _put(body, "sitemap", params.sitemap)
    return body
