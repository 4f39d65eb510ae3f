"""Configuration schema."""

import os
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_API_URL = "https://api.firecrawl.dev"
API_KEY_ENV = "FIRECRAWL_API_KEY"
API_URL_ENV = "FIRECRAWL_API_URL"


class Base(BaseModel):
    """Accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClientConfig(Base):
    """Connection settings shared by every operation of one client."""

    api_key: str = ""
    api_url: str = ""
    api_version: Literal["v1", "v2"] = "v2"
    timeout: float = Field(default=120.0, gt=0)
    poll_interval: float = Field(default=2.0, gt=0)

    def resolve_api_key(self, explicit: str | None = None) -> str:
        return (explicit or self.api_key or os.environ.get(API_KEY_ENV, "")).strip()

    def resolve_api_url(self, explicit: str | None = None) -> str:
        url = explicit or self.api_url or os.environ.get(API_URL_ENV, "") or DEFAULT_API_URL
        return url.strip().rstrip("/")
