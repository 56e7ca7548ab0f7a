import logging

from django.conf import settings
from django.core.paginator import EmptyPage, PageNotAnInteger, Paginator
from django.shortcuts import render

from .client import get_search_client
from .excerpts import with_excerpts
from .sorting import DEFAULT_SORT, sorting_to_query_params

logger = logging.getLogger(__name__)


def is_search(request) -> bool:
    return request is not None and "s" in request.GET


def results(request):
    query = request.GET.get("s", "").strip()
    orderby, order = sorting_to_query_params(DEFAULT_SORT, request.GET)

    hits = []
    if query:
        hits = get_search_client().search(query, orderby=orderby, order=order)
        logger.info(
            "Search returned %s results",
            len(hits),
            extra={"search_query": query, "orderby": orderby, "order": order},
        )

    paginator = Paginator(with_excerpts(hits), getattr(settings, "SEARCH_RESULTS_PER_PAGE", 10))
    page_number = request.GET.get("page")

    try:
        page = paginator.page(page_number)
    except PageNotAnInteger:
        page = paginator.page(1)
    except EmptyPage:
        page = paginator.page(paginator.num_pages)

    return render(
        request,
        "search/results.html",
        {
            "query": query,
            "results": page,
        },
    )
