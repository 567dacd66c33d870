"""
Dashboard Service
=================

Facade over the metrics aggregator and the TTL cache used by the admin
dashboard endpoints: cached overviews, role-based views, widget data,
per-role layout configuration, export, and cache management.

Cache keys all live under the "dashboard" category:
    dashboard:overview:<query hash>
    dashboard:widget:<widget id>:<query hash>
    dashboard:config:<role>
    dashboard:exports:<user id>:<ms timestamp>
"""

import hashlib
import json
from datetime import date, datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel

from app.core.config import settings
from app.core.exceptions import (
    CsvConversionError,
    ExportNotImplementedError,
    UnknownWidgetError,
    UnsupportedExportFormatError,
)
from app.core.logging_config import logger
from app.schemas.dashboard import (
    CacheClearResult,
    CacheStats,
    ContentAnalytics,
    ContentGrowth,
    DashboardConfig,
    DashboardConfigUpdate,
    DashboardExport,
    DashboardHealth,
    DashboardOverview,
    DashboardQuery,
    DashboardWidget,
    HrAnalytics,
    HrMetrics,
    MarketingAnalytics,
    RoleDistribution,
    StorageMetrics,
    SystemHealth,
    UserAnalytics,
    UserGrowth,
)
from app.services.cache_service import TTLCache, dashboard_cache
from app.services.metrics_service import MetricsService

CACHE_CATEGORY = "dashboard"

EXPORT_CONTENT_TYPES = {
    "json": "application/json",
    "csv": "text/csv",
}


def query_fingerprint(query: Optional[DashboardQuery]) -> str:
    """Stable hash of the query filters, used in cache keys"""
    payload = (query or DashboardQuery()).model_dump(mode="json", exclude_none=True)
    return hashlib.sha256(json.dumps(payload, sort_keys=True).encode()).hexdigest()


# ==================== Role Filtering ====================

def _empty_hr() -> HrAnalytics:
    return HrAnalytics(
        total_employees=0,
        departments=[],
        metrics=HrMetrics(),
        open_positions=0,
        training_programs=0,
        employee_satisfaction=0,
    )


def _redacted_storage(label: str) -> StorageMetrics:
    return StorageMetrics(
        used=label,
        total=label,
        used_percentage=0,
        largest_consumer=label,
        monthly_growth=label,
    )


def _redacted_health(message: str, checked_at: datetime) -> SystemHealth:
    return SystemHealth(
        status="unknown",
        uptime=0,
        recent_errors=0,
        message=message,
        last_checked=checked_at,
    )


def _limited_system(overview: DashboardOverview, storage_label: str, health_message: str):
    return overview.system.model_copy(update={
        "total_departments": 0,
        "storage": _redacted_storage(storage_label),
        "system_health": _redacted_health(health_message, overview.generated_at),
    })


def _denied(overview: DashboardOverview) -> DashboardOverview:
    generated_at = overview.generated_at
    return overview.model_copy(update={
        "system": overview.system.model_copy(update={
            "total_users": 0,
            "active_users": 0,
            "total_documents": 0,
            "total_media": 0,
            "total_articles": 0,
            "total_departments": 0,
            "storage": _redacted_storage("Not available"),
            "system_health": _redacted_health("Access denied for unknown role", generated_at),
            "last_updated": generated_at,
        }),
        "content": ContentAnalytics(
            top_documents=[],
            top_media=[],
            top_articles=[],
            document_growth=ContentGrowth(),
            media_growth=ContentGrowth(),
            article_growth=ContentGrowth(),
            total_downloads=0,
            total_views=0,
            average_engagement=0,
        ),
        "users": UserAnalytics(
            user_growth=UserGrowth(),
            role_distribution=RoleDistribution(),
            daily_active_users=0,
            weekly_active_users=0,
            monthly_active_users=0,
            top_active_users=[],
            average_session_duration=0,
            average_actions_per_session=0,
        ),
        "hr": _empty_hr(),
        "marketing": MarketingAnalytics(
            top_sliders=[],
            top_searches=[],
            average_click_through_rate=0,
            total_banner_views=0,
            total_banner_clicks=0,
            unique_visitors=0,
        ),
    })


def filter_dashboard_by_role(overview: DashboardOverview, role: str) -> DashboardOverview:
    """
    Project the overview down to what the given role may see.

    Returns a new object; the input is never modified. Redacted
    timestamps are copied from overview.generated_at so the result
    depends only on the arguments.
    """
    role = (role or "").lower()

    if role == "admin":
        return overview

    if role == "manager":
        health = overview.system.system_health.model_copy(
            update={"message": "System health information limited for managers"}
        )
        return overview.model_copy(update={
            "system": overview.system.model_copy(update={"system_health": health}),
        })

    if role == "editor":
        return overview.model_copy(update={
            "system": _limited_system(
                overview, "Limited", "System health information not available for editors"
            ),
            "hr": _empty_hr(),
        })

    if role == "user":
        distribution = RoleDistribution(user=overview.users.role_distribution.user)
        return overview.model_copy(update={
            "system": _limited_system(
                overview, "Not available", "System health information not available for users"
            ),
            "users": overview.users.model_copy(update={
                "role_distribution": distribution,
                "top_active_users": [],
            }),
            "hr": _empty_hr(),
        })

    return _denied(overview)


# ==================== CSV Export ====================

def _csv_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def flatten_for_csv(data: Any, prefix: str = "") -> Dict[str, str]:
    """
    Flatten nested mappings and lists into a single-level dict.

    Nested keys are joined with '.', list items are addressed as
    'key[i]'. Insertion order follows the input.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump()

    flattened: Dict[str, str] = {}
    for key, value in data.items():
        name = f"{prefix}.{key}" if prefix else str(key)

        if isinstance(value, BaseModel):
            value = value.model_dump()

        if isinstance(value, dict):
            flattened.update(flatten_for_csv(value, name))
        elif isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                item_name = f"{name}[{index}]"
                if isinstance(item, BaseModel):
                    item = item.model_dump()
                if isinstance(item, dict):
                    flattened.update(flatten_for_csv(item, item_name))
                else:
                    flattened[item_name] = _csv_scalar(item)
        else:
            flattened[name] = _csv_scalar(value)

    return flattened


def _csv_escape(value: str) -> str:
    if any(ch in value for ch in (",", '"', "\n")):
        return '"' + value.replace('"', '""') + '"'
    return value


def to_csv(data: Any) -> str:
    """Header row of flattened keys followed by a single value row"""
    try:
        flattened = flatten_for_csv(data)
    except (AttributeError, TypeError) as e:
        logger.error(f"Failed to convert data to CSV: {e}")
        raise CsvConversionError() from e

    header = ",".join(_csv_escape(key) for key in flattened)
    row = ",".join(_csv_escape(value) for value in flattened.values())
    return f"{header}\n{row}"


# ==================== Default Configurations ====================

def _widget(widget_id: str, title: str, widget_type: str, order: int) -> DashboardWidget:
    return DashboardWidget(id=widget_id, title=title, type=widget_type, enabled=True, order=order)


def default_dashboard_config(role: str) -> DashboardConfig:
    """Built-in widget layout for a role"""
    role = (role or "").lower()
    base_widgets = [
        _widget("system-overview", "System Overview", "widget", 1),
        _widget("content-analytics", "Content Analytics", "chart", 2),
        _widget("user-analytics", "User Analytics", "chart", 3),
    ]

    if role == "admin":
        return DashboardConfig(
            id="admin-dashboard",
            name="Admin Dashboard",
            role="admin",
            widgets=base_widgets + [
                _widget("hr-analytics", "HR Analytics", "widget", 4),
                _widget("marketing-analytics", "Marketing Analytics", "chart", 5),
            ],
            layout="grid",
            auto_refresh=True,
            refresh_interval=30_000,
        )

    if role == "manager":
        return DashboardConfig(
            id="manager-dashboard",
            name="Manager Dashboard",
            role="manager",
            widgets=base_widgets + [_widget("hr-analytics", "HR Analytics", "widget", 4)],
            layout="grid",
            auto_refresh=True,
            refresh_interval=60_000,
        )

    if role == "editor":
        return DashboardConfig(
            id="editor-dashboard",
            name="Editor Dashboard",
            role="editor",
            widgets=[
                _widget("content-analytics", "Content Analytics", "chart", 1),
                _widget("user-analytics", "User Analytics", "chart", 2),
            ],
            layout="list",
            auto_refresh=False,
            refresh_interval=300_000,
        )

    if role == "user":
        return DashboardConfig(
            id="user-dashboard",
            name="User Dashboard",
            role="user",
            widgets=[_widget("content-analytics", "Content Overview", "widget", 1)],
            layout="list",
            auto_refresh=False,
            refresh_interval=600_000,
        )

    return DashboardConfig(
        id="default-dashboard",
        name="Default Dashboard",
        role="unknown",
        widgets=[_widget("system-overview", "System Overview", "widget", 1)],
        layout="list",
        auto_refresh=False,
        refresh_interval=600_000,
    )


# ==================== Service ====================

class DashboardService:
    """Caching facade used by the admin dashboard API"""

    def __init__(
        self,
        metrics: Optional[MetricsService] = None,
        cache: Optional[TTLCache] = None,
        now: Callable[[], datetime] = datetime.utcnow,
    ):
        self.metrics = metrics or MetricsService()
        self.cache = cache if cache is not None else dashboard_cache
        self._now = now

        self._widgets: Dict[str, Callable[[DashboardQuery], Awaitable[BaseModel]]] = {
            "system-overview": lambda query: self.metrics.get_system_overview(),
            "content-analytics": self.metrics.get_content_analytics,
            "user-analytics": self.metrics.get_user_analytics,
            "hr-analytics": self.metrics.get_hr_analytics,
            "marketing-analytics": self.metrics.get_marketing_analytics,
        }

    @property
    def widget_ids(self) -> List[str]:
        return list(self._widgets)

    # ========== Overview ==========

    async def get_dashboard_overview(self, query: Optional[DashboardQuery] = None) -> DashboardOverview:
        query = query or DashboardQuery()
        key = self.cache.generate_key(CACHE_CATEGORY, "overview", query_fingerprint(query))

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        logger.info("Generating dashboard overview")
        overview = await self.metrics.get_dashboard_overview(query)
        self.cache.set(key, overview, settings.DASHBOARD_OVERVIEW_TTL)
        return overview

    async def get_role_based_dashboard(
        self, role: str, query: Optional[DashboardQuery] = None
    ) -> DashboardOverview:
        logger.info(f"Generating dashboard overview for role: {role}")
        overview = await self.get_dashboard_overview(query)
        return filter_dashboard_by_role(overview, role)

    # ========== Widgets ==========

    async def get_widget_data(self, widget_id: str, query: Optional[DashboardQuery] = None) -> BaseModel:
        producer = self._widgets.get(widget_id)
        if producer is None:
            raise UnknownWidgetError(widget_id, known=self.widget_ids)

        query = query or DashboardQuery()
        key = self.cache.generate_key(CACHE_CATEGORY, "widget", widget_id, query_fingerprint(query))

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        data = await producer(query)
        self.cache.set(key, data, settings.DASHBOARD_WIDGET_TTL)
        return data

    # ========== Configuration ==========

    async def get_dashboard_config(self, role: str) -> DashboardConfig:
        role = role.lower()
        key = self.cache.generate_key(CACHE_CATEGORY, "config", role)

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        config = default_dashboard_config(role)
        self.cache.set(key, config, settings.DASHBOARD_CONFIG_TTL)
        return config

    async def update_dashboard_config(self, role: str, update: DashboardConfigUpdate) -> DashboardConfig:
        """Merge a partial update into the role's current configuration"""
        role = role.lower()
        current = await self.get_dashboard_config(role)

        merged = DashboardConfig.model_validate({
            **current.model_dump(),
            **update.model_dump(exclude_unset=True),
        })

        key = self.cache.generate_key(CACHE_CATEGORY, "config", role)
        self.cache.set(key, merged, settings.DASHBOARD_CONFIG_TTL)
        logger.info(f"Updated dashboard configuration for role: {role}")
        return merged

    # ========== Export ==========

    async def export_dashboard(
        self,
        query: Optional[DashboardQuery] = None,
        export_format: str = "json",
        user_id: str = "system",
    ) -> Tuple[bytes, DashboardExport]:
        """
        Render a freshly computed overview (never the cached one) as a
        downloadable file.

        Returns:
            (file body, export metadata)

        Raises:
            ExportNotImplementedError: for pdf
            UnsupportedExportFormatError: for any other unknown format
        """
        export_format = (export_format or "").lower()
        if export_format == "pdf":
            raise ExportNotImplementedError(export_format)
        if export_format not in EXPORT_CONTENT_TYPES:
            raise UnsupportedExportFormatError(export_format)

        logger.info(f"Exporting dashboard data in {export_format} format")
        overview = await self.metrics.get_dashboard_overview(query)

        if export_format == "json":
            body = overview.model_dump_json(indent=2).encode("utf-8")
        else:
            body = to_csv(overview).encode("utf-8")

        exported_at = self._now()
        export = DashboardExport(
            filename=f"dashboard-export-{exported_at.date().isoformat()}.{export_format}",
            content_type=EXPORT_CONTENT_TYPES[export_format],
            size=len(body),
            exported_at=exported_at,
            exported_by=user_id,
        )

        key = self.cache.generate_key(
            CACHE_CATEGORY, "exports", user_id, int(exported_at.timestamp() * 1000)
        )
        self.cache.set(key, export, settings.DASHBOARD_EXPORT_TTL)
        return body, export

    # ========== Cache Management ==========

    def get_cache_stats(self) -> CacheStats:
        return CacheStats(**self.cache.get_stats())

    def clear_cache(self, category: Optional[str] = None) -> CacheClearResult:
        """Clear one category, or everything when no category is given (cleared=-1)"""
        if category:
            cleared = self.cache.invalidate_category(category)
            logger.info(f"Cleared {cleared} cache items for category: {category}")
            return CacheClearResult(cleared=cleared)

        self.cache.clear()
        logger.info("Cleared all dashboard cache")
        return CacheClearResult(cleared=-1)

    async def refresh_dashboard(self, query: Optional[DashboardQuery] = None) -> DashboardOverview:
        logger.info("Refreshing dashboard data")
        self.cache.invalidate_category(CACHE_CATEGORY)
        return await self.get_dashboard_overview(query)

    def get_dashboard_health(self) -> DashboardHealth:
        try:
            cache_health = self.cache.is_healthy()
        except Exception as e:
            logger.log_error_with_context(e, context="dashboard health")
            return DashboardHealth(
                status="unhealthy",
                message="Unable to determine dashboard health",
                cache_health=False,
                last_updated=self._now(),
            )

        if cache_health:
            status, message = "healthy", "Dashboard is operating normally"
        else:
            status, message = "degraded", "Cache performance is degraded"

        return DashboardHealth(
            status=status,
            message=message,
            cache_health=cache_health,
            last_updated=self._now(),
        )


dashboard_service = DashboardService()


def get_dashboard_service() -> DashboardService:
    """FastAPI dependency; override in tests"""
    return dashboard_service
