import pytest

from crawlbot.errors import CrawlbotError
from crawlbot.params import (
    CrawlParams,
    MapParams,
    ScrapeParams,
    SearchParams,
    build_scrape_options,
    build_search_body,
    validate_crawl_params,
    validate_job_id,
    validate_map_params,
    validate_search_params,
)


def test_validation_returns_none_for_valid_params() -> None:
    assert validate_search_params(SearchParams(query="q", limit=5, sources=["news"])) is None
    assert validate_map_params(MapParams(limit=10)) is None
    assert validate_crawl_params(CrawlParams(sitemap="include", max_discovery_depth=0)) is None
    assert validate_job_id("abc") is None


@pytest.mark.parametrize(
    ("error", "field"),
    [
        (validate_search_params(SearchParams(query="")), "query"),
        (validate_search_params(SearchParams(query="q", timeout=-5)), "timeout"),
        (validate_search_params(SearchParams(query="q", scrape_options=ScrapeParams(wait_for=-1))), "wait_for"),
        (validate_map_params(MapParams(limit=-1)), "limit"),
        (validate_crawl_params(CrawlParams(max_discovery_depth=-1)), "max_discovery_depth"),
        (validate_crawl_params(CrawlParams(scrape_options=ScrapeParams(max_age=-1))), "max_age"),
        (validate_job_id(""), "id"),
    ],
)
def test_validation_returns_typed_error(error, field) -> None:
    assert isinstance(error, CrawlbotError)
    assert error.kind == "validation"
    assert error.field == field


def test_explicit_parsers_win_over_parse_pdf() -> None:
    options = build_scrape_options(ScrapeParams(parse_pdf=True, parsers=[{"type": "pdf", "maxPages": 3}]), "v2")
    assert options == {"parsers": [{"type": "pdf", "maxPages": 3}]}


def test_parse_pdf_false_becomes_empty_parsers_on_v2() -> None:
    assert build_scrape_options(ScrapeParams(parse_pdf=False), "v2") == {"parsers": []}


def test_search_body_keeps_tuples_as_lists() -> None:
    body = build_search_body(SearchParams(query="q", sources=("web", "images"), tbs="qdr:d", lang="en"), "v2")
    assert body == {"query": "q", "sources": ["web", "images"], "tbs": "qdr:d", "lang": "en"}


def test_error_context_keeps_kind_and_payload() -> None:
    base_error = CrawlbotError.http("HTTP 502 - Bad Gateway", 502, "upstream")
    wrapped = base_error.with_context("Map request failed")

    assert wrapped.kind == "http"
    assert wrapped.status_code == 502
    assert wrapped.body == "upstream"
    assert str(wrapped) == "Map request failed: HTTP 502 - Bad Gateway"
