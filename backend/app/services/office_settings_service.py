"""
Office Settings Service

The site reads a single settings row (the oldest one). `upsert_settings`
creates it on first use and replaces it afterwards.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from app.core.exceptions import FieldValidationError, OfficeSettingsNotFoundError
from app.core.logging_config import logger
from app.models.office_settings import OfficeSettings
from app.schemas.office_settings import OfficeSettingsUpdate, OfficeSettingsUpsert
from app.utils.validators import FieldErrors, add_error, has_both_languages, is_valid_email, is_valid_url

TRANSLATABLE_FIELDS = ("directorate", "office_name", "office_address", "phone_number")
URL_FIELDS = {
    "x_link": "X Link must be a valid URL",
    "website": "Website must be a valid URL",
    "youtube": "YouTube link must be a valid URL",
}


def validate_office_settings(data: dict) -> FieldErrors:
    errors: FieldErrors = []

    for field in TRANSLATABLE_FIELDS:
        if field in data and not has_both_languages(data[field]):
            add_error(errors, field, f"{field} must be provided in both English and Nepali", "VALIDATION_ERROR")

    if "email" in data and not is_valid_email(data["email"]):
        add_error(errors, "email", "Email must be a valid email address", "INVALID_EMAIL")

    for field, message in URL_FIELDS.items():
        if data.get(field) and not is_valid_url(data[field]):
            add_error(errors, field, message, "INVALID_URL")

    return errors


class OfficeSettingsService:

    async def _first(self, db: AsyncSession) -> Optional[OfficeSettings]:
        result = await db.execute(select(OfficeSettings).order_by(OfficeSettings.created_at.asc()).limit(1))
        return result.scalar_one_or_none()

    async def get_settings(self, db: AsyncSession) -> OfficeSettings:
        settings = await self._first(db)
        if settings is None:
            raise OfficeSettingsNotFoundError()
        return settings

    async def get_settings_by_id(self, db: AsyncSession, settings_id: str) -> OfficeSettings:
        settings = await db.get(OfficeSettings, settings_id)
        if settings is None:
            raise OfficeSettingsNotFoundError(settings_id)
        return settings

    async def upsert_settings(self, db: AsyncSession, payload: OfficeSettingsUpsert) -> OfficeSettings:
        data = payload.model_dump()
        errors = validate_office_settings(data)
        if errors:
            raise FieldValidationError(errors)

        settings = await self._first(db)
        if settings is None:
            settings = OfficeSettings(**data)
            db.add(settings)
            action = "Created"
        else:
            for field, value in data.items():
                setattr(settings, field, value)
            action = "Replaced"
        await db.commit()
        await db.refresh(settings)

        logger.info(f"{action} office settings {settings.id}")
        return settings

    async def update_settings(self, db: AsyncSession, settings_id: str, payload: OfficeSettingsUpdate) -> OfficeSettings:
        settings = await self.get_settings_by_id(db, settings_id)

        data = payload.model_dump(exclude_unset=True)
        errors = validate_office_settings(data)
        if errors:
            raise FieldValidationError(errors)

        for field, value in data.items():
            setattr(settings, field, value)
        await db.commit()
        await db.refresh(settings)
        return settings

    async def delete_settings(self, db: AsyncSession, settings_id: str) -> None:
        settings = await self.get_settings_by_id(db, settings_id)
        await db.delete(settings)
        await db.commit()
        logger.info(f"Deleted office settings {settings_id}")


# Singleton instance
office_settings_service = OfficeSettingsService()
