"""
crawlbot - async client for search, scrape, map and crawl APIs
"""

__version__ = "0.1.0"

from crawlbot.client import CrawlbotClient, CrawlJobPoller, RequestExecutor
from crawlbot.config import ClientConfig, load_config
from crawlbot.errors import CrawlbotError
from crawlbot.models import (
    CancelResult,
    CrawlJob,
    CrawlStart,
    Document,
    Envelope,
    MapResult,
    ResultContent,
    SearchResultRecord,
)
from crawlbot.params import CrawlParams, MapParams, ScrapeParams, SearchParams

__all__ = [
    "CancelResult",
    "ClientConfig",
    "CrawlJob",
    "CrawlJobPoller",
    "CrawlParams",
    "CrawlStart",
    "CrawlbotClient",
    "CrawlbotError",
    "Document",
    "Envelope",
    "MapParams",
    "MapResult",
    "RequestExecutor",
    "ResultContent",
    "ScrapeParams",
    "SearchParams",
    "SearchResultRecord",
    "load_config",
]
