from __future__ import annotations

DEFAULT_SORT = "relevance_desc"

SORT_TYPES = {
    "relevance_desc": "Relevance",
    "date_desc": "Newest first",
    "date_asc": "Oldest first",
}


def get_sort_types() -> dict[str, str]:
    return dict(SORT_TYPES)


def normalize_sort(value) -> str:
    if isinstance(value, str) and value in SORT_TYPES:
        return value
    return DEFAULT_SORT


def sorting_to_query_params(sort: str, query=None) -> tuple[str, str]:
    """Resolve a sort key to an (orderby, order) pair.

    ``orderby`` and ``order`` present in ``query`` win over the stored sort.
    """
    query = query or {}
    orderby = query.get("orderby")
    if orderby is None:
        orderby = sort.split("_", 1)[0]
    order = query.get("order")
    if order is None:
        order = "ASC" if sort.endswith("_asc") else "DESC"
    return orderby, order


def current_sort(orderby: str, order: str) -> str:
    return f"{orderby}_{order}".lower()
