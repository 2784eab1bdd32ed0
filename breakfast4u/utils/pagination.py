"""
Page/limit handling for list endpoints
"""
from dataclasses import dataclass
from typing import Any, List, Tuple

from fastapi import Query
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

MAX_PAGE_SIZE = 100
MEAL_PAGE_SIZE = 12
DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class Page:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def page_params(default_limit: int):
    """Build a dependency reading ?page=&limit= with the given default size"""
    def _dependency(
        page: int = Query(1, ge=1),
        limit: int = Query(default_limit, ge=1, le=MAX_PAGE_SIZE),
    ) -> Page:
        return Page(page=page, limit=limit)
    return _dependency


meal_page = page_params(MEAL_PAGE_SIZE)
default_page = page_params(DEFAULT_PAGE_SIZE)


async def paginate(db: AsyncSession, query: Select, page: Page) -> Tuple[List[Any], int]:
    """Run query for one page and count every matching row"""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset(page.skip).limit(page.limit))
    return list(result.scalars().unique().all()), total
