"""
Admin Header Configuration endpoints - styling, publishing and CSS preview.
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.common import ReorderRequest
from app.schemas.header import HeaderConfigCreate, HeaderConfigResponse, HeaderConfigUpdate, HeaderCss
from app.schemas.response import ApiResponse
from app.services.header_config_service import header_config_service
from app.utils.pagination import PaginatedResponse

router = APIRouter()


@router.get("")
async def list_header_configs(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None),
    is_published: Optional[bool] = Query(None),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await header_config_service.list_configs(
        db, page=page, page_size=page_size, search=search, is_active=is_active, is_published=is_published
    )
    return ApiResponse.success(PaginatedResponse[HeaderConfigResponse].from_page(result, HeaderConfigResponse))


@router.get("/display")
async def get_display_header_config(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """The configuration the public site currently renders"""
    config = await header_config_service.get_display_config(db)
    return ApiResponse.success(HeaderConfigResponse.model_validate(config))


@router.post("", status_code=201)
async def create_header_config(
    config_data: HeaderConfigCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    config = await header_config_service.create_config(db, config_data)
    return ApiResponse.success(HeaderConfigResponse.model_validate(config))


@router.post("/reorder")
async def reorder_header_configs(
    body: ReorderRequest,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    configs = await header_config_service.reorder(db, body.items)
    return ApiResponse.success([HeaderConfigResponse.model_validate(c) for c in configs])


@router.get("/{config_id}")
async def get_header_config(
    config_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    config = await header_config_service.get_config(db, config_id)
    return ApiResponse.success(HeaderConfigResponse.model_validate(config))


@router.get("/{config_id}/css")
async def get_header_css(
    config_id: str,
    raw: bool = Query(False, description="Return text/css instead of the JSON envelope"),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    css = await header_config_service.generate_css(db, config_id)
    if raw:
        return PlainTextResponse(css, media_type="text/css")
    return ApiResponse.success(HeaderCss(id=config_id, css=css))


@router.put("/{config_id}")
async def update_header_config(
    config_id: str,
    config_data: HeaderConfigUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    config = await header_config_service.update_config(db, config_id, config_data)
    return ApiResponse.success(HeaderConfigResponse.model_validate(config))


@router.post("/{config_id}/publish")
async def publish_header_config(
    config_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    config = await header_config_service.set_published(db, config_id, True)
    return ApiResponse.success(HeaderConfigResponse.model_validate(config))


@router.post("/{config_id}/unpublish")
async def unpublish_header_config(
    config_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    config = await header_config_service.set_published(db, config_id, False)
    return ApiResponse.success(HeaderConfigResponse.model_validate(config))


@router.delete("/{config_id}")
async def delete_header_config(
    config_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await header_config_service.delete_config(db, config_id)
    return ApiResponse.success({"id": config_id, "deleted": True})
