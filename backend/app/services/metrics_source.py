"""
Read-only data access used by the dashboard aggregator.

MetricsSource is the capability the aggregator depends on; the
SQLAlchemy adapter below is the production implementation. Tests pass
their own objects that satisfy the protocol.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, Protocol

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.database import get_session_local
from app.models import Content, Department, Document, Employee, Media, User, UserRole


@dataclass(frozen=True)
class DocumentRecord:
    id: str
    title: Any  # translatable JSON or plain string
    download_count: int
    updated_at: Optional[datetime]


@dataclass(frozen=True)
class MediaRecord:
    id: str
    title: Optional[str]
    created_at: Optional[datetime]


@dataclass(frozen=True)
class ArticleRecord:
    id: str
    title: Any
    updated_at: Optional[datetime]


@dataclass(frozen=True)
class UserRecord:
    id: str
    first_name: Optional[str]
    last_name: Optional[str]
    role: Optional[str]
    last_login_at: Optional[datetime]


class MetricsSource(Protocol):
    async def count_users(self) -> int: ...

    async def count_users_logged_in_since(self, since: datetime) -> int: ...

    async def count_users_by_role(self, role: UserRole) -> int: ...

    async def count_documents(self) -> int: ...

    async def count_media(self) -> int: ...

    async def count_articles(self) -> int: ...

    async def count_departments(self) -> int: ...

    async def count_employees(self) -> int: ...

    async def sum_document_downloads(self) -> int: ...

    async def top_documents_by_downloads(self, limit: int) -> List[DocumentRecord]: ...

    async def recent_media(self, limit: int) -> List[MediaRecord]: ...

    async def recent_articles(self, limit: int) -> List[ArticleRecord]: ...

    async def users_by_recent_login(self, limit: int) -> List[UserRecord]: ...


class SqlAlchemyMetricsSource:
    """
    MetricsSource backed by the application database.

    Every call opens its own session so the aggregator can run calls
    concurrently; an AsyncSession must not be shared across tasks.
    """

    def __init__(self, session_factory: Optional[Callable[[], async_sessionmaker[AsyncSession]]] = None):
        self._session_factory = session_factory or get_session_local

    async def _scalar(self, statement) -> int:
        async with self._session_factory()() as session:
            return (await session.scalar(statement)) or 0

    async def _rows(self, statement) -> list:
        async with self._session_factory()() as session:
            result = await session.execute(statement)
            return list(result.all())

    async def count_users(self) -> int:
        return await self._scalar(select(func.count(User.id)))

    async def count_users_logged_in_since(self, since: datetime) -> int:
        return await self._scalar(
            select(func.count(User.id)).where(User.last_login_at >= since)
        )

    async def count_users_by_role(self, role: UserRole) -> int:
        return await self._scalar(
            select(func.count(User.id)).where(User.role == role)
        )

    async def count_documents(self) -> int:
        return await self._scalar(select(func.count(Document.id)))

    async def count_media(self) -> int:
        return await self._scalar(select(func.count(Media.id)))

    async def count_articles(self) -> int:
        return await self._scalar(select(func.count(Content.id)))

    async def count_departments(self) -> int:
        return await self._scalar(select(func.count(Department.id)))

    async def count_employees(self) -> int:
        return await self._scalar(select(func.count(Employee.id)))

    async def sum_document_downloads(self) -> int:
        return await self._scalar(
            select(func.coalesce(func.sum(Document.download_count), 0))
        )

    async def top_documents_by_downloads(self, limit: int) -> List[DocumentRecord]:
        rows = await self._rows(
            select(Document.id, Document.title, Document.download_count, Document.updated_at)
            .order_by(Document.download_count.desc())
            .limit(limit)
        )
        return [
            DocumentRecord(id=row.id, title=row.title, download_count=row.download_count or 0, updated_at=row.updated_at)
            for row in rows
        ]

    async def recent_media(self, limit: int) -> List[MediaRecord]:
        rows = await self._rows(
            select(Media.id, Media.title, Media.created_at)
            .order_by(Media.created_at.desc())
            .limit(limit)
        )
        return [MediaRecord(id=row.id, title=row.title, created_at=row.created_at) for row in rows]

    async def recent_articles(self, limit: int) -> List[ArticleRecord]:
        rows = await self._rows(
            select(Content.id, Content.title, Content.updated_at)
            .order_by(Content.updated_at.desc())
            .limit(limit)
        )
        return [ArticleRecord(id=row.id, title=row.title, updated_at=row.updated_at) for row in rows]

    async def users_by_recent_login(self, limit: int) -> List[UserRecord]:
        rows = await self._rows(
            select(User.id, User.first_name, User.last_name, User.role, User.last_login_at)
            .where(User.last_login_at.is_not(None))
            .order_by(User.last_login_at.desc())
            .limit(limit)
        )
        return [
            UserRecord(
                id=row.id,
                first_name=row.first_name,
                last_name=row.last_name,
                role=row.role.value if isinstance(row.role, UserRole) else row.role,
                last_login_at=row.last_login_at,
            )
            for row in rows
        ]
