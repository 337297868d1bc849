from dataclasses import dataclass

from fastapi import Query

from cms.services.base import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


@dataclass
class PageParams:
    page: int
    limit: int


def page_params(default_limit: int = DEFAULT_PAGE_SIZE):
    """Build a dependency reading ``page`` and ``limit`` query parameters."""

    def dependency(
        page: int = Query(1, ge=1),
        limit: int = Query(default_limit, ge=1, le=MAX_PAGE_SIZE),
    ) -> PageParams:
        return PageParams(page=page, limit=limit)

    return dependency


pagination = page_params()
