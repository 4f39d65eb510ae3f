"""Error type raised by every crawlbot operation."""

from __future__ import annotations

from typing import Literal

ErrorKind = Literal["validation", "network", "http", "decode", "domain", "timeout"]


class CrawlbotError(Exception):
    """Single error type tagged with a kind discriminant.

    Kind-specific payload:
        http: ``status_code`` and raw response ``body``.
        validation: ``field`` naming the offending parameter.
        domain: ``warning`` carried by the response envelope.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
        field: str | None = None,
        warning: str | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.body = body
        self.field = field
        self.warning = warning

    @classmethod
    def validation(cls, message: str, field: str) -> "CrawlbotError":
        return cls("validation", message, field=field)

    @classmethod
    def network(cls, message: str) -> "CrawlbotError":
        return cls("network", message)

    @classmethod
    def http(cls, message: str, status_code: int, body: str) -> "CrawlbotError":
        return cls("http", message, status_code=status_code, body=body)

    @classmethod
    def decode(cls, message: str) -> "CrawlbotError":
        return cls("decode", message)

    @classmethod
    def domain(cls, operation: str, warning: str | None) -> "CrawlbotError":
        return cls("domain", f"{operation} failed: {warning}", warning=warning)

    def with_context(self, prefix: str) -> "CrawlbotError":
        """Copy of this error with ``prefix`` prepended to the message."""
        return CrawlbotError(
            self.kind,
            f"{prefix}: {self.message}",
            status_code=self.status_code,
            body=self.body,
            field=self.field,
            warning=self.warning,
        )

    def __repr__(self) -> str:
        extra = f", status_code={self.status_code}" if self.status_code is not None else ""
        return f"CrawlbotError(kind={self.kind!r}, message={self.message!r}{extra})"
