from __future__ import annotations

import logging
from dataclasses import replace
from urllib.parse import urlencode

from django import forms
from django.template.loader import render_to_string
from django.templatetags.static import static
from django.urls import reverse

from core.plugins import BaseWidget
from search.client import get_search_client
from search.sorting import (
    DEFAULT_SORT,
    current_sort,
    get_sort_types,
    normalize_sort,
    sorting_to_query_params,
)
from search.taxonomies import get_taxonomies
from search.views import is_search

from .sanitize import (
    DATE_HISTOGRAM_FIELDS,
    DATE_HISTOGRAM_INTERVALS,
    DEFAULT_FILTER_COUNT,
    FILTER_TYPES,
    MAX_FILTER_COUNT,
    MIN_FILTER_COUNT,
    getone,
    is_checked,
    safe_url,
    sanitize_filter_definitions,
    sanitize_text_field,
)

logger = logging.getLogger(__name__)


class SearchFiltersWidget(BaseWidget):
    """Search box, sort control and the facets returned by the search client."""

    slug = "search_filters"
    label = "Search"
    template_name = "widgets/search_filters_widget.html"
    title_template_name = "widgets/search_filters_title.html"
    contents_template_name = "widgets/search_filters_contents.html"
    form_template_name = "widgets/search_filters_form.html"

    DEFAULT_FILTER_COUNT = DEFAULT_FILTER_COUNT
    DEFAULT_SORT = DEFAULT_SORT

    def __init__(self, instance=None, search_client=None):
        super().__init__(instance=instance)
        self._search_client = search_client

    @property
    def search_client(self):
        if self._search_client is None:
            self._search_client = get_search_client()
        return self._search_client

    @property
    def media(self):
        return forms.Media(
            css={"all": (static("widgets/css/search-filters-admin.css"),)},
            js=(static("widgets/js/search-filters-admin.js"),),
        )

    def is_for_current_widget(self, item) -> bool:
        return bool(getattr(item, "widget_id", None)) and item.widget_id == self.widget_id

    def should_display_sitewide_filters(self) -> bool:
        """Whether facets configured on the search client itself should be shown unfiltered.

        Site-wide facets are only shown when no search filters widget has opted in to
        its own filters.
        """
        from .models import WidgetInstance

        instances = WidgetInstance.objects.filter(widget_type=self.slug)
        if not instances.exists():
            return False

        for inst in instances.filter(is_active=True):
            if is_checked((inst.config or {}).get("use_filters")):
                return False
        return True

    def render(self, config: dict, request=None) -> str:
        config = config or {}
        query = request.GET if request is not None else {}

        filters = []
        active_buckets = []
        display_filters = False
        if is_search(request):
            client = self.search_client
            filters = list(client.get_filters() or [])
            active_buckets = list(client.get_active_filter_buckets() or [])

            if filters or active_buckets:
                if (
                    not client.are_filters_by_widget_disabled()
                    and not self.should_display_sitewide_filters()
                ):
                    filters = [f for f in filters if self.is_for_current_widget(f)]
                    active_buckets = [b for b in active_buckets if self.is_for_current_widget(b)]

                display_filters = any(len(f.buckets) > 1 for f in filters) or bool(active_buckets)

        search_box_enabled = is_checked(config.get("search_box_enabled"))
        user_sort_enabled = is_checked(config.get("user_sort_enabled"))
        if not display_filters and not search_box_enabled and not user_sort_enabled:
            return ""

        default_sort = normalize_sort(config.get("sort", DEFAULT_SORT))
        orderby, order = sorting_to_query_params(default_sort, query)
        current_search = query.get("s", "")
        action_url = reverse("search:results")

        context = {
            "widget_id": self.widget_id,
            "title": sanitize_text_field(config.get("title")),
            "title_template_name": self.title_template_name,
            "contents_template_name": self.contents_template_name,
            "search_box_enabled": search_box_enabled,
            "show_sort_control": search_box_enabled and user_sort_enabled,
            "sort_types": get_sort_types(),
            "current_sort": current_sort(orderby, order),
            "sort_config": {
                "actionUrl": action_url,
                "orderByDefault": orderby,
                "orderDefault": order,
                "widgetId": self.widget_id,
                "currentSearch": current_search,
            },
            "sort_config_id": f"{self.widget_id}-sort-config",
            "action_url": action_url,
            "query": current_search,
            "display_filters": display_filters,
            "filters": [self._with_safe_urls(f) for f in filters if len(f.buckets) > 1],
            "active_buckets": [replace(b, remove_url=safe_url(b.remove_url)) for b in active_buckets],
            "remove_all_url": safe_url(f"{action_url}?{urlencode({'s': current_search})}"),
        }
        return render_to_string(self.template_name, context, request=request)

    def _with_safe_urls(self, result):
        buckets = [replace(b, url=safe_url(b.url)) for b in result.buckets]
        return replace(result, buckets=buckets)

    def render_form(self, config: dict, request=None) -> str:
        config = config or {}
        hide_filters = self.search_client.are_filters_by_widget_disabled()
        use_filters = is_checked(config.get("use_filters")) and not hide_filters

        filters = config.get("filters") or [{}]
        rows = [self._filter_row(f) for f in filters if isinstance(f, dict)] or [self._filter_row({})]

        context = {
            "widget_id": self.widget_id,
            "field_names": {
                key: self.field_name(key)
                for key in (
                    "title",
                    "search_box_enabled",
                    "user_sort_enabled",
                    "sort",
                    "use_filters",
                    "filter_name",
                    "filter_type",
                    "taxonomy_type",
                    "date_histogram_field",
                    "date_histogram_interval",
                    "num_filters",
                )
            },
            "title": sanitize_text_field(config.get("title")),
            "search_box_enabled": is_checked(config.get("search_box_enabled")),
            "user_sort_enabled": is_checked(config.get("user_sort_enabled")),
            "sort": normalize_sort(config.get("sort", DEFAULT_SORT)),
            "sort_types": get_sort_types(),
            "hide_filters": hide_filters,
            "use_filters": use_filters,
            "filter_rows": rows,
            "filter_types": FILTER_TYPES,
            "taxonomies": get_taxonomies(),
            "date_histogram_fields": DATE_HISTOGRAM_FIELDS,
            "date_histogram_intervals": DATE_HISTOGRAM_INTERVALS,
            "default_filter_count": DEFAULT_FILTER_COUNT,
            "min_filter_count": MIN_FILTER_COUNT,
            "max_filter_count": MAX_FILTER_COUNT,
        }
        return render_to_string(self.form_template_name, context, request=request)

    def _filter_row(self, definition: dict) -> dict:
        row = {
            "name": "",
            "type": "taxonomy",
            "taxonomy": "",
            "field": "",
            "interval": "",
            "count": DEFAULT_FILTER_COUNT,
        }
        row.update({k: v for k, v in definition.items() if v is not None})
        try:
            row["count"] = int(row["count"])
        except (TypeError, ValueError):
            row["count"] = DEFAULT_FILTER_COUNT
        return row

    def update(self, new_config, old_config: dict) -> dict:
        new_config = new_config or {}
        raw_sort = getone(new_config, "sort")
        config = {
            "title": sanitize_text_field(getone(new_config, "title")),
            "use_filters": is_checked(getone(new_config, "use_filters")),
            "search_box_enabled": is_checked(getone(new_config, "search_box_enabled")),
            "user_sort_enabled": is_checked(getone(new_config, "user_sort_enabled")),
            "sort": normalize_sort(raw_sort),
        }
        if raw_sort is not None and raw_sort != config["sort"]:
            logger.info("Unknown sort %r for %s, using %s", raw_sort, self.widget_id, config["sort"])

        if config["use_filters"]:
            filters = sanitize_filter_definitions(new_config)
            if filters:
                config["filters"] = filters
        return config


def widget_filter_definitions() -> list[dict]:
    """Filter definitions from every active search filters widget that uses its own filters.

    Each definition carries the ``widget_id`` the search client should tag its results with.
    """
    from .models import WidgetInstance

    definitions = []
    for inst in WidgetInstance.objects.filter(
        widget_type=SearchFiltersWidget.slug, is_active=True
    ).order_by("area", "order", "pk"):
        config = inst.config or {}
        if not is_checked(config.get("use_filters")):
            continue
        widget_id = SearchFiltersWidget(instance=inst).widget_id
        for definition in config.get("filters") or []:
            if isinstance(definition, dict):
                definitions.append({**definition, "widget_id": widget_id})
    return definitions
