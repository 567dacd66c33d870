# Pydantic schemas
from app.schemas.dashboard import (
    DashboardOverview,
    DashboardQuery,
    DashboardConfig,
    DashboardConfigUpdate,
    DashboardExport,
    DashboardHealth,
    CacheStats,
    CacheClearResult,
)

from app.schemas.media import (
    MediaUploadMetadata,
    MediaResponse,
    PresignedUrlResponse,
)

from app.schemas.response import ApiResponse

__all__ = [
    # Dashboard
    "DashboardOverview",
    "DashboardQuery",
    "DashboardConfig",
    "DashboardConfigUpdate",
    "DashboardExport",
    "DashboardHealth",
    "CacheStats",
    "CacheClearResult",
    # Media
    "MediaUploadMetadata",
    "MediaResponse",
    "PresignedUrlResponse",
    # Envelope
    "ApiResponse",
]
