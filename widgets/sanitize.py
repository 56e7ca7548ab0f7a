from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from django.utils.html import strip_tags

logger = logging.getLogger(__name__)

DEFAULT_FILTER_COUNT = 5
MIN_FILTER_COUNT = 1
MAX_FILTER_COUNT = 50

FILTER_TYPES = {
    "taxonomy": "Taxonomy",
    "post_type": "Post Type",
    "date_histogram": "Date",
}

DATE_HISTOGRAM_FIELDS = {
    "post_date": "Date",
    "post_date_gmt": "Date GMT",
    "post_modified": "Modified",
    "post_modified_gmt": "Modified GMT",
}

DATE_HISTOGRAM_INTERVALS = {
    "month": "Month",
    "year": "Year",
}

_KEY_RE = re.compile(r"[^a-z0-9_\-]")
_URL_CONTROL_RE = re.compile(r"[\x00-\x20\x7f]")

ALLOWED_URL_SCHEMES = ("http", "https")


def sanitize_text_field(value) -> str:
    if value is None:
        return ""
    return " ".join(strip_tags(str(value)).split())


def sanitize_key(value) -> str:
    if value is None:
        return ""
    return _KEY_RE.sub("", str(value).lower())


def is_checked(value) -> bool:
    if isinstance(value, (list, tuple)):
        value = value[-1] if value else None
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "off")
    return bool(value)


def clamp_filter_count(value) -> int:
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        parsed = None
    count = max(MIN_FILTER_COUNT, min(MAX_FILTER_COUNT, parsed or 0))
    if parsed != count:
        logger.debug("Clamped search filter count %r to %s", value, count)
    return count


def safe_url(value) -> str:
    """``value`` when it is relative or http(s), otherwise an empty string."""
    if not value:
        return ""
    url = str(value).strip()
    try:
        scheme = urlsplit(_URL_CONTROL_RE.sub("", url)).scheme.lower()
    except ValueError:
        logger.info("Dropping unparseable search filter URL %r", url)
        return ""
    if scheme and scheme not in ALLOWED_URL_SCHEMES:
        logger.info("Dropping search filter URL with scheme %r", scheme)
        return ""
    return url


def getlist(data, key: str) -> list:
    if hasattr(data, "getlist"):
        return data.getlist(key)
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def getone(data, key: str, default=None):
    values = getlist(data, key)
    return values[-1] if values else default


def _at(values: list, index: int):
    return values[index] if index < len(values) else None


def sanitize_filter_definitions(data) -> list[dict]:
    """Rebuild filter definitions from the parallel per-row lists of a submitted form."""
    types = getlist(data, "filter_type")
    names = getlist(data, "filter_name")
    counts = getlist(data, "num_filters")
    taxonomies = getlist(data, "taxonomy_type")
    date_fields = getlist(data, "date_histogram_field")
    intervals = getlist(data, "date_histogram_interval")

    filters = []
    for index, filter_type in enumerate(types):
        name = sanitize_text_field(_at(names, index))
        count = clamp_filter_count(_at(counts, index))

        if filter_type == "taxonomy":
            filters.append(
                {
                    "name": name,
                    "type": "taxonomy",
                    "taxonomy": sanitize_key(_at(taxonomies, index)),
                    "count": count,
                }
            )
        elif filter_type == "post_type":
            filters.append(
                {
                    "name": name,
                    "type": "post_type",
                    "count": count,
                }
            )
        elif filter_type == "date_histogram":
            filters.append(
                {
                    "name": name,
                    "type": "date_histogram",
                    "count": count,
                    "field": sanitize_key(_at(date_fields, index)),
                    "interval": sanitize_key(_at(intervals, index)),
                }
            )
        else:
            logger.info("Dropping search filter row %s with unknown type %r", index, filter_type)
    return filters
