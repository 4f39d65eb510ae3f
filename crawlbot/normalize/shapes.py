"""Canonicalize heterogeneous search payloads into ``SearchResultRecord`` lists.

Search responses differ between API versions and upstream providers: the
result array may sit directly under ``data``, under ``data.results``, inside a
nested ``data.data`` object, under provider-specific keys (``organic_results``,
``items``, ``webPages.value``, ``value``), or split per source (``web``,
``news``, ``images``). Items themselves rename fields (``name``/``headline``
for ``title``, ``snippet``/``summary`` for ``description``, ``link``/``href``
for ``url``) and may nest page content in a container object.

Normalization runs in three stages over the already decoded JSON tree:

1. ``locate_items`` applies the ordered shape rules and returns the item array.
2. ``normalize_item`` maps one raw item onto the canonical key layout.
3. ``materialize`` builds the typed record from the canonical layout.

Only stage 3 can reject an item; a rejected item is dropped on its own.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from crawlbot.models import ResultContent, SearchResultRecord
from crawlbot.normalize.fields import (
    first_array,
    first_int,
    first_object,
    first_string,
    scalar_text,
)

TITLE_KEYS = ("title", "name", "headline")
DESCRIPTION_KEYS = ("description", "snippet", "summary")
URL_KEYS = ("url", "link", "href", "sourceURL", "permalink")

META_TITLE_KEYS = ("title", "pageTitle", "ogTitle", "twitterTitle", "name", "headline")
META_DESCRIPTION_KEYS = (
    "description",
    "metaDescription",
    "ogDescription",
    "twitterDescription",
    "snippet",
    "summary",
)
META_URL_KEYS = (
    "sourceURL",
    "sourceUrl",
    "url",
    "link",
    "href",
    "permalink",
    "resolvedUrl",
    "canonical",
)
META_STATUS_KEYS = ("statusCode", "status_code", "status")
META_ERROR_KEYS = ("error", "err", "message", "warning", "detail")

CONTENT_CONTAINER_KEYS = ("content", "page", "document", "doc")
MARKDOWN_KEYS = ("markdown", "md", "text", "content")
RAW_HTML_KEYS = ("rawHtml", "raw_html")

SOURCE_KEYS = ("web", "news", "images")
SOURCE_ITEM_KEYS = ("results", "organic_results", "items", "value")


# Stage 1: shape detection


def _web_pages_value(obj: dict[str, Any]) -> list[Any] | None:
    web_pages = obj.get("webPages")
    if isinstance(web_pages, dict) and isinstance(web_pages.get("value"), list):
        return web_pages["value"]
    return None


def _source_items(obj: dict[str, Any]) -> list[Any] | None:
    """Per-source arrays (``web``/``news``/``images``), bare or wrapped."""
    for key in SOURCE_KEYS:
        value = obj.get(key)
        if isinstance(value, list):
            return value
        if isinstance(value, dict):
            items = first_array(value, *SOURCE_ITEM_KEYS)
            if items is not None:
                return items
    return None


def _nested_data_items(inner: dict[str, Any]) -> list[Any] | None:
    items = first_array(inner, "results", "items", "organic_results")
    if items is not None:
        return items
    items = _web_pages_value(inner)
    if items is not None:
        return items
    items = first_array(inner, "value")
    if items is not None:
        return items
    return _source_items(inner)


def _provider_items(obj: dict[str, Any]) -> list[Any] | None:
    items = first_array(obj, "organic_results", "items")
    if items is not None:
        return items
    items = _web_pages_value(obj)
    if items is not None:
        return items
    items = first_array(obj, "value")
    if items is not None:
        return items
    return _source_items(obj)


def locate_items(data: Any) -> list[Any] | None:
    """Return the result array inside ``data``, or ``None`` when no rule matches.

    Rules are tried in order and the first match wins.
    """
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        return None

    items = first_array(data, "results", "data")
    if items is not None:
        return items

    inner = data.get("data")
    if isinstance(inner, dict):
        items = _nested_data_items(inner)
        if items is not None:
            return items

    return _provider_items(data)


# Stage 2: per-item canonical layout


def _normalize_metadata(raw: dict[str, Any]) -> dict[str, Any]:
    meta: dict[str, Any] = {}
    title = first_string(raw, *META_TITLE_KEYS)
    description = first_string(raw, *META_DESCRIPTION_KEYS)
    url = first_string(raw, *META_URL_KEYS)
    status_code = first_int(raw, *META_STATUS_KEYS)
    error = first_string(raw, *META_ERROR_KEYS)
    if title is not None:
        meta["title"] = title
    if description is not None:
        meta["description"] = description
    if url is not None:
        meta["sourceURL"] = url
    if status_code is not None:
        meta["statusCode"] = status_code
    if error is not None:
        meta["error"] = error
    return meta


def _copy_content(dst: dict[str, Any], src: dict[str, Any], markdown_keys: tuple[str, ...]) -> None:
    markdown = first_string(src, *markdown_keys)
    html = first_string(src, "html")
    raw_html = first_string(src, *RAW_HTML_KEYS)
    if markdown is not None:
        dst["markdown"] = markdown
    if html is not None:
        dst["html"] = html
    if raw_html is not None:
        dst["rawHtml"] = raw_html
    if isinstance(src.get("links"), list):
        dst["links"] = src["links"]
    screenshot = scalar_text(src.get("screenshot"))
    if screenshot is not None:
        dst["screenshot"] = screenshot


def normalize_item(src: dict[str, Any]) -> dict[str, Any]:
    """Map one raw result object onto the canonical key layout.

    Top-level values override metadata values. When the item wraps its
    payload in a nested ``data`` object, that object fills the gaps.
    """
    dst: dict[str, Any] = {}
    title = description = url = None

    raw_meta = src.get("metadata")
    if isinstance(raw_meta, dict):
        meta = _normalize_metadata(raw_meta)
        dst["metadata"] = meta
        title = meta.get("title")
        description = meta.get("description")
        url = meta.get("sourceURL")

    title = first_string(src, *TITLE_KEYS) or title
    description = first_string(src, *DESCRIPTION_KEYS) or description
    url = first_string(src, *URL_KEYS) or url

    container = first_object(src, *CONTENT_CONTAINER_KEYS)
    inner = src.get("data")
    if container is None and isinstance(inner, dict):
        container = first_object(inner, *CONTENT_CONTAINER_KEYS)
        title = title or first_string(inner, *TITLE_KEYS)
        description = description or first_string(inner, *DESCRIPTION_KEYS)
        url = url or first_string(inner, *URL_KEYS)
        if "metadata" not in dst and isinstance(inner.get("metadata"), dict):
            dst["metadata"] = dict(inner["metadata"])

    if container is not None:
        _copy_content(dst, container, MARKDOWN_KEYS)
    else:
        _copy_content(dst, src, MARKDOWN_KEYS)

    if title is not None:
        dst["title"] = title
    if description is not None:
        dst["description"] = description
    if url is not None:
        dst["url"] = url

    if "metadata" not in dst:
        meta = {}
        if title is not None:
            meta["title"] = title
        if description is not None:
            meta["description"] = description
        if url is not None:
            meta["sourceURL"] = url
        dst["metadata"] = meta

    return dst


# Stage 3: typed record


def materialize(tree: dict[str, Any]) -> SearchResultRecord:
    """Build a record from the canonical layout.

    Raises:
        ValueError: ``links`` holds an entry that is not a scalar.
    """
    links: list[str] = []
    for entry in tree.get("links") or []:
        if entry is None:
            continue
        text = scalar_text(entry)
        if text is None:
            raise ValueError(f"link entries must be strings, got {type(entry).__name__}")
        links.append(text)

    return SearchResultRecord(
        title=tree.get("title"),
        description=tree.get("description"),
        url=tree.get("url"),
        content=ResultContent(
            markdown=tree.get("markdown"),
            html=tree.get("html"),
            raw_html=tree.get("rawHtml"),
        ),
        links=links,
        screenshot=tree.get("screenshot"),
        metadata=dict(tree.get("metadata") or {}),
    )


def _normalize_array(items: list[Any]) -> list[SearchResultRecord]:
    records: list[SearchResultRecord] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        try:
            records.append(materialize(normalize_item(item)))
        except (TypeError, ValueError) as e:
            logger.debug("Dropping search result #{}: {}", index, e)
    return records


def normalize_search_data(data: Any) -> list[SearchResultRecord]:
    """Normalize a search response ``data`` value into ordered records.

    Never returns ``None``: absent or unrecognized data yields an empty list.
    An object matching no container rule is treated as a single result.
    """
    if data is None:
        return []

    items = locate_items(data)
    if items is not None:
        return _normalize_array(items)

    if not isinstance(data, dict):
        return []

    try:
        return [materialize(normalize_item(data))]
    except (TypeError, ValueError) as e:
        logger.debug("Search data is not a single result: {}", e)
        return []
