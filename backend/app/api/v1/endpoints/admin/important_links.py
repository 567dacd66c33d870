"""
Admin Important Links endpoints - footer / quick links.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import ReorderRequest
from app.schemas.important_links import ImportantLinkCreate, ImportantLinkResponse, ImportantLinkUpdate
from app.schemas.response import ApiResponse
from app.services.important_links_service import important_links_service
from app.utils.pagination import PaginatedResponse

router = APIRouter()


@router.get("")
async def list_important_links(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Search in title and URL"),
    is_active: Optional[bool] = Query(None),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await important_links_service.list_links(
        db, page=page, page_size=page_size, search=search, is_active=is_active
    )
    return ApiResponse.success(PaginatedResponse[ImportantLinkResponse].from_page(result, ImportantLinkResponse))


@router.get("/active")
async def list_active_important_links(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Active links in footer order"""
    links = await important_links_service.get_active_links(db)
    return ApiResponse.success([ImportantLinkResponse.model_validate(link) for link in links])


@router.post("", status_code=201)
async def create_important_link(
    link_data: ImportantLinkCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    link = await important_links_service.create_link(db, link_data)
    return ApiResponse.success(ImportantLinkResponse.model_validate(link))


@router.post("/reorder")
async def reorder_important_links(
    body: ReorderRequest,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    links = await important_links_service.reorder(db, body.items)
    return ApiResponse.success([ImportantLinkResponse.model_validate(link) for link in links])


@router.get("/{link_id}")
async def get_important_link(
    link_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    link = await important_links_service.get_link(db, link_id)
    return ApiResponse.success(ImportantLinkResponse.model_validate(link))


@router.put("/{link_id}")
async def update_important_link(
    link_id: str,
    link_data: ImportantLinkUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    link = await important_links_service.update_link(db, link_id, link_data)
    return ApiResponse.success(ImportantLinkResponse.model_validate(link))


@router.delete("/{link_id}")
async def delete_important_link(
    link_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await important_links_service.delete_link(db, link_id)
    return ApiResponse.success({"id": link_id, "deleted": True})
