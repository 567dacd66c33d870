"""
Pagination helpers shared by the admin list endpoints.

    page = await paginate(db, select(Department).order_by(Department.order), page=2, page_size=20)
    PaginatedResponse[DepartmentResponse].from_page(page, DepartmentResponse)
"""
from dataclasses import dataclass
from typing import Any, Generic, List, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

T = TypeVar('T')

MAX_PAGE_SIZE = 100


@dataclass
class Page:
    """One page of ORM rows"""
    items: List[Any]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size if self.total > 0 else 1


class PaginatedResponse(BaseModel, Generic[T]):
    """Standard paginated response"""
    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def from_page(cls, page: Page, schema: Type[BaseModel]) -> "PaginatedResponse[T]":
        total_pages = page.total_pages
        return cls(
            items=[schema.model_validate(item) for item in page.items],
            total=page.total,
            page=page.page,
            page_size=page.page_size,
            total_pages=total_pages,
            has_next=page.page < total_pages,
            has_previous=page.page > 1,
        )


async def paginate(db: AsyncSession, query: Select, page: int = 1, page_size: int = 10) -> Page:
    """Count the rows `query` matches and fetch one page of them"""
    page = max(1, page)
    page_size = max(1, min(MAX_PAGE_SIZE, page_size))

    count_stmt = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar() or 0

    result = await db.execute(query.offset((page - 1) * page_size).limit(page_size))
    return Page(items=list(result.scalars().all()), total=total, page=page, page_size=page_size)
