"""
Admin Office Settings endpoints - the office's contact details.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.user import User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.office_settings import OfficeSettingsResponse, OfficeSettingsUpdate, OfficeSettingsUpsert
from app.schemas.response import ApiResponse
from app.services.office_settings_service import office_settings_service

router = APIRouter()


@router.get("")
async def get_office_settings(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    settings = await office_settings_service.get_settings(db)
    return ApiResponse.success(OfficeSettingsResponse.model_validate(settings))


@router.put("")
async def upsert_office_settings(
    settings_data: OfficeSettingsUpsert,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create the settings, or replace them if they already exist"""
    settings = await office_settings_service.upsert_settings(db, settings_data)
    return ApiResponse.success(OfficeSettingsResponse.model_validate(settings))


@router.patch("/{settings_id}")
async def update_office_settings(
    settings_id: str,
    settings_data: OfficeSettingsUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    settings = await office_settings_service.update_settings(db, settings_id, settings_data)
    return ApiResponse.success(OfficeSettingsResponse.model_validate(settings))


@router.delete("/{settings_id}")
async def delete_office_settings(
    settings_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await office_settings_service.delete_settings(db, settings_id)
    return ApiResponse.success({"id": settings_id, "deleted": True})
