"""
Important Links Service - footer and quick links
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, cast, String
from typing import List, Optional

from app.core.exceptions import DuplicateLinkUrlError, FieldValidationError, ImportantLinkNotFoundError
from app.core.logging_config import logger
from app.models.important_link import ImportantLink
from app.schemas.common import ReorderItem
from app.schemas.important_links import ImportantLinkCreate, ImportantLinkUpdate
from app.utils.pagination import Page, paginate
from app.utils.validators import FieldErrors, add_error, check_order, has_both_languages, is_valid_url


def validate_important_link(data: dict) -> FieldErrors:
    errors: FieldErrors = []
    if "link_title" in data and not has_both_languages(data["link_title"]):
        add_error(errors, "link_title", "Link title must be provided in both English and Nepali", "VALIDATION_ERROR")
    if "link_url" in data and not is_valid_url(data["link_url"]):
        add_error(errors, "link_url", "Link URL must be a valid URL", "INVALID_URL")
    check_order(errors, data.get("order"))
    return errors


class ImportantLinksService:

    async def get_link(self, db: AsyncSession, link_id: str) -> ImportantLink:
        link = await db.get(ImportantLink, link_id)
        if link is None:
            raise ImportantLinkNotFoundError(link_id)
        return link

    async def list_links(
        self,
        db: AsyncSession,
        page: int = 1,
        page_size: int = 10,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Page:
        query = select(ImportantLink)
        if is_active is not None:
            query = query.where(ImportantLink.is_active == is_active)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                cast(ImportantLink.link_title, String).ilike(pattern) | ImportantLink.link_url.ilike(pattern)
            )
        query = query.order_by(ImportantLink.order.asc(), ImportantLink.created_at.asc())
        return await paginate(db, query, page, page_size)

    async def get_active_links(self, db: AsyncSession) -> List[ImportantLink]:
        """Links shown in the site footer"""
        result = await db.execute(
            select(ImportantLink)
            .where(ImportantLink.is_active.is_(True))
            .order_by(ImportantLink.order.asc(), ImportantLink.created_at.asc())
        )
        return list(result.scalars().all())

    async def _ensure_unique_url(self, db: AsyncSession, url: str, exclude_id: Optional[str] = None) -> None:
        query = select(ImportantLink.id).where(ImportantLink.link_url == url)
        if exclude_id:
            query = query.where(ImportantLink.id != exclude_id)
        if (await db.execute(query)).first() is not None:
            raise DuplicateLinkUrlError(url)

    async def create_link(self, db: AsyncSession, payload: ImportantLinkCreate) -> ImportantLink:
        data = payload.model_dump()
        errors = validate_important_link(data)
        if errors:
            raise FieldValidationError(errors)
        await self._ensure_unique_url(db, data["link_url"])

        link = ImportantLink(**data)
        db.add(link)
        await db.commit()
        await db.refresh(link)

        logger.info(f"Created important link {link.id} -> {link.link_url}")
        return link

    async def update_link(self, db: AsyncSession, link_id: str, payload: ImportantLinkUpdate) -> ImportantLink:
        link = await self.get_link(db, link_id)

        data = payload.model_dump(exclude_unset=True)
        errors = validate_important_link(data)
        if errors:
            raise FieldValidationError(errors)
        if data.get("link_url") and data["link_url"] != link.link_url:
            await self._ensure_unique_url(db, data["link_url"], exclude_id=link_id)

        for field, value in data.items():
            setattr(link, field, value)
        await db.commit()
        await db.refresh(link)
        return link

    async def delete_link(self, db: AsyncSession, link_id: str) -> None:
        link = await self.get_link(db, link_id)
        await db.delete(link)
        await db.commit()
        logger.info(f"Deleted important link {link_id}")

    async def reorder(self, db: AsyncSession, items: List[ReorderItem]) -> List[ImportantLink]:
        links = [await self.get_link(db, item.id) for item in items]
        for link, item in zip(links, items):
            link.order = item.order
        await db.commit()
        return links


# Singleton instance
important_links_service = ImportantLinksService()
