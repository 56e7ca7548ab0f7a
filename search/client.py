"""Contract between the site and the external search service.

The search service owns ranking, indexing and facet aggregation. The site
only asks it for results, the facets computed for the current query and the
facets currently applied, then formats what comes back.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_CLIENT = "search.client.NullSearchClient"


@dataclass
class Bucket:
    name: str
    url: str
    count: int = 0

    @property
    def display_count(self) -> int:
        try:
            return abs(int(self.count))
        except (TypeError, ValueError):
            return 0


@dataclass
class FilterResult:
    name: str
    type: str = ""
    buckets: list[Bucket] = field(default_factory=list)
    widget_id: str = ""


@dataclass
class ActiveBucket:
    name: str
    type_label: str
    remove_url: str
    widget_id: str = ""


@dataclass
class SearchResult:
    title: str
    url: str
    content: str = ""
    published_on: Optional[datetime] = None


class BaseSearchClient(ABC):
    @abstractmethod
    def get_filters(self) -> list[FilterResult]:
        """Facets computed for the current query, each with its buckets."""

    @abstractmethod
    def get_active_filter_buckets(self) -> list[ActiveBucket]:
        """Facet values applied to the current query."""

    @abstractmethod
    def are_filters_by_widget_disabled(self) -> bool:
        """True when facets are configured on the client directly instead of per widget."""

    @abstractmethod
    def search(self, query: str, *, orderby: str, order: str) -> list[SearchResult]: ...


class NullSearchClient(BaseSearchClient):
    """Client used when no search service is configured."""

    def get_filters(self) -> list[FilterResult]:
        return []

    def get_active_filter_buckets(self) -> list[ActiveBucket]:
        return []

    def are_filters_by_widget_disabled(self) -> bool:
        return False

    def search(self, query: str, *, orderby: str, order: str) -> list[SearchResult]:
        return []


def get_search_client() -> BaseSearchClient:
    from django.conf import settings

    path = getattr(settings, "SEARCH_CLIENT", None) or DEFAULT_SEARCH_CLIENT
    try:
        client_class = import_string(path)
    except ImportError as exc:
        raise ImproperlyConfigured(f"SEARCH_CLIENT '{path}' could not be imported: {exc}") from exc

    if not (isinstance(client_class, type) and issubclass(client_class, BaseSearchClient)):
        raise ImproperlyConfigured(f"SEARCH_CLIENT '{path}' is not a BaseSearchClient subclass.")

    logger.debug("Using search client %s", path)
    return client_class()
