"""Canonical records returned by crawlbot operations."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

CrawlStatus = Literal["pending", "running", "completed", "failed", "cancelled"]

RUNNING_STATUS = "running"
COMPLETED_STATUS = "completed"
FAILED_STATUS = "failed"


def is_terminal_status(status: str | None) -> bool:
    """Every status other than ``running`` (any case) ends polling."""
    return (status or "").lower() != RUNNING_STATUS


@dataclass(slots=True)
class ResultContent:
    """Page content attached to a search result."""

    markdown: str | None = None
    html: str | None = None
    raw_html: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "markdown": self.markdown,
            "html": self.html,
            "rawHtml": self.raw_html,
        }


@dataclass(slots=True)
class SearchResultRecord:
    """Normalized search result item."""

    title: str | None = None
    description: str | None = None
    url: str | None = None
    content: ResultContent = field(default_factory=ResultContent)
    links: list[str] = field(default_factory=list)
    screenshot: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def markdown(self) -> str | None:
        return self.content.markdown

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "content": self.content.to_dict(),
            "links": list(self.links),
            "screenshot": self.screenshot,
            "metadata": dict(self.metadata),
        }


@dataclass(slots=True)
class Document:
    """A scraped page, as returned by scrape and by completed crawls."""

    markdown: str | None = None
    html: str | None = None
    raw_html: str | None = None
    screenshot: str | None = None
    links: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str | None:
        return self.markdown

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Document":
        if not isinstance(data, dict):
            raise ValueError("Document must be an object")
        links = data.get("links") or []
        if not isinstance(links, list):
            raise ValueError("Document links must be a list")
        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise ValueError("Document metadata must be an object")
        screenshot = data.get("screenshot")
        return cls(
            markdown=_optional_str(data.get("markdown")),
            html=_optional_str(data.get("html")),
            raw_html=_optional_str(data.get("rawHtml")),
            screenshot=screenshot if isinstance(screenshot, str) else None,
            links=[_link_text(link) for link in links if link is not None],
            metadata=dict(metadata),
        )


@dataclass(slots=True)
class Envelope(Generic[T]):
    """Shared ``{success, warning}`` response wrapper around an operation payload."""

    payload: T
    success: bool = True
    warning: str | None = None


@dataclass(slots=True)
class CrawlStart:
    """Acknowledgement of a newly started crawl job."""

    id: str
    url: str | None = None
    status: str | None = None
    success: bool = True
    warning: str | None = None


@dataclass(slots=True)
class CrawlJob:
    """Crawl job state as last reported by the server."""

    id: str
    status: str | None
    documents: list[Document] = field(default_factory=list)
    success: bool = True
    warning: str | None = None

    @property
    def is_terminal(self) -> bool:
        return is_terminal_status(self.status)

    @property
    def is_completed(self) -> bool:
        return (self.status or "").lower() == COMPLETED_STATUS

    @property
    def is_failed(self) -> bool:
        return (self.status or "").lower() == FAILED_STATUS


@dataclass(slots=True)
class CancelResult:
    """Outcome of a crawl cancellation request."""

    status: str | None
    success: bool = True
    warning: str | None = None


@dataclass(slots=True)
class MapResult:
    """Links discovered for a site."""

    links: list[str] = field(default_factory=list)
    success: bool = True
    warning: str | None = None


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _link_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
