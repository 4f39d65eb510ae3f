"""Response payload normalization."""

from crawlbot.normalize.derivation import derive_fields
from crawlbot.normalize.links import normalize_links
from crawlbot.normalize.shapes import locate_items, normalize_search_data

__all__ = ["derive_fields", "locate_items", "normalize_links", "normalize_search_data"]
