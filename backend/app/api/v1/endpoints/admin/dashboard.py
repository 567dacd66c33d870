"""
Admin Dashboard endpoints - overview, widgets, configuration, export and cache.
All routes require an admin bearer token.
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from datetime import datetime
from typing import Optional

from app.models import User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.dashboard import (
    Category,
    DashboardConfigUpdate,
    DashboardQuery,
    Granularity,
)
from app.schemas.response import ApiResponse
from app.services.dashboard_service import DashboardService, get_dashboard_service

router = APIRouter()


def dashboard_query(
    date_from: Optional[datetime] = Query(None, alias="dateFrom"),
    date_to: Optional[datetime] = Query(None, alias="dateTo"),
    granularity: Optional[Granularity] = Query(None),
    query_role: Optional[str] = Query(None, alias="role"),
    category: Optional[Category] = Query(None),
    include_trends: Optional[bool] = Query(None, alias="includeTrends"),
    limit: Optional[int] = Query(None, ge=1, le=100),
) -> DashboardQuery:
    """Shared query-string filters"""
    return DashboardQuery(
        date_from=date_from,
        date_to=date_to,
        granularity=granularity,
        role=query_role,
        category=category,
        include_trends=include_trends,
        limit=limit,
    )


# ==================== Overview ====================

@router.get("/overview")
async def get_dashboard_overview(
    query: DashboardQuery = Depends(dashboard_query),
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    """Complete dashboard overview"""
    overview = await service.get_dashboard_overview(query)
    return ApiResponse.success(overview)


@router.get("/overview/{role}")
async def get_role_based_dashboard(
    role: str,
    query: DashboardQuery = Depends(dashboard_query),
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    """Dashboard overview as seen by the given role"""
    overview = await service.get_role_based_dashboard(role, query)
    return ApiResponse.success(overview)


# ==================== Configuration ====================

@router.get("/config/{role}")
async def get_dashboard_config(
    role: str,
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    config = await service.get_dashboard_config(role)
    return ApiResponse.success(config)


@router.put("/config/{role}")
async def update_dashboard_config(
    role: str,
    update: DashboardConfigUpdate,
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    config = await service.update_dashboard_config(role, update)
    return ApiResponse.success(config)


# ==================== Widgets ====================

@router.get("/widget/{widget_id}")
async def get_widget_data(
    widget_id: str,
    query: DashboardQuery = Depends(dashboard_query),
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    data = await service.get_widget_data(widget_id, query)
    return ApiResponse.success(data)


@router.get("/system/overview")
async def get_system_overview(
    query: DashboardQuery = Depends(dashboard_query),
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    data = await service.get_widget_data("system-overview", query)
    return ApiResponse.success(data)


@router.get("/content/analytics")
async def get_content_analytics(
    query: DashboardQuery = Depends(dashboard_query),
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    data = await service.get_widget_data("content-analytics", query)
    return ApiResponse.success(data)


@router.get("/users/analytics")
async def get_user_analytics(
    query: DashboardQuery = Depends(dashboard_query),
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    data = await service.get_widget_data("user-analytics", query)
    return ApiResponse.success(data)


@router.get("/hr/analytics")
async def get_hr_analytics(
    query: DashboardQuery = Depends(dashboard_query),
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    data = await service.get_widget_data("hr-analytics", query)
    return ApiResponse.success(data)


@router.get("/marketing/analytics")
async def get_marketing_analytics(
    query: DashboardQuery = Depends(dashboard_query),
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    data = await service.get_widget_data("marketing-analytics", query)
    return ApiResponse.success(data)


# ==================== Export ====================

@router.get("/export")
async def export_dashboard(
    export_format: str = Query("json", alias="format"),
    query: DashboardQuery = Depends(dashboard_query),
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    """Download the overview as a JSON or CSV file"""
    body, export = await service.export_dashboard(query, export_format, str(current_admin.id))
    return Response(
        content=body,
        media_type=export.content_type,
        headers={
            "Content-Disposition": f'attachment; filename="{export.filename}"',
            "Content-Length": str(export.size),
        },
    )


# ==================== Cache & Health ====================

@router.get("/cache/stats")
async def get_cache_stats(
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    return ApiResponse.success(service.get_cache_stats())


@router.post("/cache/clear")
async def clear_cache(
    category: Optional[str] = Query(None),
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    """Clear one cache category, or the whole cache when none is given"""
    return ApiResponse.success(service.clear_cache(category))


@router.post("/refresh")
async def refresh_dashboard(
    query: DashboardQuery = Depends(dashboard_query),
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    """Drop cached dashboard data and recompute the overview"""
    overview = await service.refresh_dashboard(query)
    return ApiResponse.success(overview)


@router.get("/health")
async def get_dashboard_health(
    service: DashboardService = Depends(get_dashboard_service),
    current_admin: User = Depends(get_current_admin)
):
    return ApiResponse.success(service.get_dashboard_health())
