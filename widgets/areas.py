from __future__ import annotations

DEFAULT_WIDGET_AREAS = [
    {"slug": "sidebar", "label": "Sidebar"},
]


def get_widget_areas() -> list[dict]:
    from django.conf import settings

    areas = getattr(settings, "WIDGET_AREAS", None) or DEFAULT_WIDGET_AREAS
    return [a for a in areas if isinstance(a, dict) and a.get("slug")]


def is_widget_area(slug: str) -> bool:
    return any(a["slug"] == slug for a in get_widget_areas())
