from __future__ import annotations

from dataclasses import dataclass

DEFAULT_TAXONOMIES = [
    {"name": "tag", "label": "Tags"},
    {"name": "kind", "label": "Post kinds"},
]


@dataclass
class Taxonomy:
    name: str
    label: str


def get_taxonomies() -> list[Taxonomy]:
    from django.conf import settings

    configured = getattr(settings, "SEARCH_TAXONOMIES", None)
    if configured is None:
        configured = DEFAULT_TAXONOMIES

    taxonomies = []
    for entry in configured:
        if not isinstance(entry, dict) or not entry.get("name"):
            continue
        name = str(entry["name"])
        label = entry.get("label") or name.replace("_", " ").title()
        taxonomies.append(Taxonomy(name=name, label=label))
    return taxonomies
