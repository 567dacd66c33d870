"""
Header Config Service - public site header styling

Several configurations can exist; the site shows the first active and
published one by display order. Each can be rendered to a CSS block
scoped by `.header-config-<id>`.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, cast, String
from typing import Any, Dict, List, Optional

from app.core.exceptions import FieldValidationError, HeaderConfigNotFoundError
from app.core.logging_config import logger
from app.models.header import HeaderConfig
from app.schemas.common import ReorderItem
from app.schemas.header import HeaderConfigCreate, HeaderConfigUpdate
from app.utils.pagination import Page, paginate
from app.utils.validators import FieldErrors, add_error, check_order, has_both_languages


def validate_header_config(data: dict) -> FieldErrors:
    """Rules for name, typography and layout; only the keys present are checked"""
    errors: FieldErrors = []

    if "name" in data and not has_both_languages(data["name"]):
        add_error(errors, "name", "Name must be provided in both English and Nepali", "REQUIRED_FIELD")

    typography = data.get("typography")
    if typography is not None:
        if not typography.get("font_family"):
            add_error(errors, "typography.font_family", "Font family is required", "REQUIRED_FIELD")
        if (typography.get("font_size") or 0) <= 0:
            add_error(errors, "typography.font_size", "Font size must be greater than 0", "INVALID_VALUE")
        if not typography.get("color"):
            add_error(errors, "typography.color", "Color is required", "REQUIRED_FIELD")

    layout = data.get("layout")
    if layout is not None:
        if (layout.get("header_height") or 0) <= 0:
            add_error(errors, "layout.header_height", "Header height must be greater than 0", "INVALID_VALUE")
        if not layout.get("background_color"):
            add_error(errors, "layout.background_color", "Background color is required", "REQUIRED_FIELD")

    check_order(errors, data.get("order"))
    return errors


def _num(value: Any) -> str:
    """Drop a trailing .0 from floats"""
    return f"{value:g}" if isinstance(value, float) else str(value)


def _box(spacing: Optional[Dict[str, Any]], default: Dict[str, int]) -> str:
    spacing = spacing or {}
    return " ".join(f"{_num(spacing.get(side) or default[side])}px" for side in ("top", "right", "bottom", "left"))


def render_header_css(config_id: str, config: Dict[str, Any]) -> str:
    """CSS for one header configuration; missing settings fall back to site defaults"""
    layout = config.get("layout") or {}
    typography = config.get("typography")
    logo = config.get("logo") or {}
    alignment = config.get("alignment") or "left"
    selector = f".header-config-{config_id}"

    lines = [
        f"{selector} {{",
        f"  height: {_num(layout.get('header_height') or 80)}px;",
        f"  background-color: {layout.get('background_color') or '#ffffff'};",
        f"  padding: {_box(layout.get('padding'), {'top': 10, 'right': 20, 'bottom': 10, 'left': 20})};",
        f"  margin: {_box(layout.get('margin'), {'top': 0, 'right': 0, 'bottom': 0, 'left': 0})};",
    ]
    if layout.get("border_color") and layout.get("border_width"):
        lines.append(f"  border: {_num(layout['border_width'])}px solid {layout['border_color']};")
    lines.append(f"  text-align: {getattr(alignment, 'value', alignment).lower()};")

    if typography:
        lines += [
            f"  font-family: {typography.get('font_family') or 'Arial, sans-serif'};",
            f"  font-size: {_num(typography.get('font_size') or 16)}px;",
            f"  font-weight: {typography.get('font_weight') or 'normal'};",
            f"  color: {typography.get('color') or '#333333'};",
            f"  line-height: {_num(typography.get('line_height') or 1.5)};",
            f"  letter-spacing: {_num(typography.get('letter_spacing') or 0)}px;",
        ]
    lines.append("}")

    spacing = logo.get("logo_spacing") or 0
    for side, margin in (("left", "margin-right"), ("right", "margin-left")):
        item = logo.get(f"{side}_logo") or {}
        if item.get("width") and item.get("height"):
            lines += [
                "",
                f"{selector} .logo-{side} {{",
                f"  width: {_num(item['width'])}px;",
                f"  height: {_num(item['height'])}px;",
                f"  {margin}: {_num(spacing)}px;",
                "}",
            ]

    return "\n".join(lines) + "\n"


class HeaderConfigService:
    """Service for managing header configurations"""

    async def get_config(self, db: AsyncSession, config_id: str) -> HeaderConfig:
        config = await db.get(HeaderConfig, config_id)
        if config is None:
            raise HeaderConfigNotFoundError(config_id)
        return config

    async def list_configs(
        self,
        db: AsyncSession,
        page: int = 1,
        page_size: int = 10,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
        is_published: Optional[bool] = None,
    ) -> Page:
        query = select(HeaderConfig)

        conditions = []
        if is_active is not None:
            conditions.append(HeaderConfig.is_active == is_active)
        if is_published is not None:
            conditions.append(HeaderConfig.is_published == is_published)
        if search:
            conditions.append(cast(HeaderConfig.name, String).ilike(f"%{search}%"))
        if conditions:
            query = query.where(*conditions)

        query = query.order_by(HeaderConfig.order.asc(), HeaderConfig.created_at.asc())
        return await paginate(db, query, page, page_size)

    async def get_display_config(self, db: AsyncSession) -> HeaderConfig:
        """The header the public site renders: first active and published by order"""
        result = await db.execute(
            select(HeaderConfig)
            .where(HeaderConfig.is_active.is_(True), HeaderConfig.is_published.is_(True))
            .order_by(HeaderConfig.order.asc(), HeaderConfig.created_at.asc())
            .limit(1)
        )
        config = result.scalar_one_or_none()
        if config is None:
            raise HeaderConfigNotFoundError("active")
        return config

    async def create_config(self, db: AsyncSession, payload: HeaderConfigCreate) -> HeaderConfig:
        data = payload.model_dump()
        errors = validate_header_config(data)
        if errors:
            raise FieldValidationError(errors)

        config = HeaderConfig(**data)
        db.add(config)
        await db.commit()
        await db.refresh(config)

        logger.info(f"Created header config {config.id}")
        return config

    async def update_config(self, db: AsyncSession, config_id: str, payload: HeaderConfigUpdate) -> HeaderConfig:
        config = await self.get_config(db, config_id)

        data = payload.model_dump(exclude_unset=True)
        errors = validate_header_config(data)
        if errors:
            raise FieldValidationError(errors)

        for field, value in data.items():
            setattr(config, field, value)
        await db.commit()
        await db.refresh(config)
        return config

    async def delete_config(self, db: AsyncSession, config_id: str) -> None:
        config = await self.get_config(db, config_id)
        await db.delete(config)
        await db.commit()
        logger.info(f"Deleted header config {config_id}")

    async def set_published(self, db: AsyncSession, config_id: str, is_published: bool) -> HeaderConfig:
        config = await self.get_config(db, config_id)
        config.is_published = is_published
        await db.commit()
        await db.refresh(config)

        logger.info(f"{'Published' if is_published else 'Unpublished'} header config {config_id}")
        return config

    async def reorder(self, db: AsyncSession, items: List[ReorderItem]) -> List[HeaderConfig]:
        """Apply new display orders; nothing changes if any id is unknown"""
        configs = [await self.get_config(db, item.id) for item in items]
        for config, item in zip(configs, items):
            config.order = item.order
        await db.commit()
        return configs

    async def generate_css(self, db: AsyncSession, config_id: str) -> str:
        config = await self.get_config(db, config_id)
        return render_header_css(config.id, {
            "layout": config.layout,
            "typography": config.typography,
            "logo": config.logo,
            "alignment": config.alignment,
        })


# Singleton instance
header_config_service = HeaderConfigService()
