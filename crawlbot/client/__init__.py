"""HTTP client package."""

from crawlbot.client.executor import RequestExecutor
from crawlbot.client.poller import CrawlJobPoller
from crawlbot.client.service import CrawlbotClient

__all__ = ["CrawlbotClient", "CrawlJobPoller", "RequestExecutor"]
