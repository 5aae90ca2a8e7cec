from typing import Any, Callable, Dict


def normalize_pagination(
    pagination,
    normalize_fn: Callable[[Any], Dict[str, Any]],
) -> Dict[str, Any]:
    """
    Normalize a Flask-SQLAlchemy Pagination into
    {"items": [...], "pagination": {page, per_page, total, total_pages}}.
    """
    return {
        "items": [normalize_fn(item) for item in pagination.items],
        "pagination": {
            "page": pagination.page,
            "per_page": pagination.per_page,
            "total": pagination.total,
            "total_pages": pagination.pages,
        },
    }
