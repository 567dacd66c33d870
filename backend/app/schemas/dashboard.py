from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal
from datetime import datetime


HealthStatus = Literal["excellent", "good", "warning", "critical", "unknown"]
Granularity = Literal["hourly", "daily", "weekly", "monthly"]
Category = Literal["system", "content", "users", "hr", "marketing", "all"]
ExportFormat = Literal["json", "csv", "pdf"]


# ==================== System Overview ====================

class SystemHealth(BaseModel):
    status: HealthStatus
    uptime: float
    recent_errors: int
    message: str
    last_checked: datetime


class StorageMetrics(BaseModel):
    used: str
    total: str
    used_percentage: float
    largest_consumer: str
    monthly_growth: str


class SystemOverview(BaseModel):
    total_users: int
    active_users: int
    total_documents: int
    total_media: int
    total_articles: int
    total_departments: int
    storage: StorageMetrics
    system_health: SystemHealth
    last_updated: datetime


# ==================== Content Analytics ====================

class TopContent(BaseModel):
    id: str
    title: str
    views: int
    trend: str
    type: str  # 'documents', 'media', 'articles'
    last_accessed: Optional[datetime] = None


class ContentGrowth(BaseModel):
    monthly: int = 0
    trend: str = "0%"
    weekly: int = 0
    daily: int = 0


class ContentAnalytics(BaseModel):
    top_documents: List[TopContent]
    top_media: List[TopContent]
    top_articles: List[TopContent]
    document_growth: ContentGrowth
    media_growth: ContentGrowth
    article_growth: ContentGrowth
    total_downloads: int
    total_views: int
    average_engagement: float


# ==================== User Analytics ====================

class UserGrowth(ContentGrowth):
    pass


class RoleDistribution(BaseModel):
    admin: int = 0
    editor: int = 0
    user: int = 0
    manager: int = 0


class ActiveUser(BaseModel):
    id: str
    name: str
    actions: int
    last_active: str
    role: str


class UserAnalytics(BaseModel):
    user_growth: UserGrowth
    role_distribution: RoleDistribution
    daily_active_users: int
    weekly_active_users: int
    monthly_active_users: int
    top_active_users: List[ActiveUser]
    average_session_duration: float
    average_actions_per_session: float


# ==================== HR Analytics ====================

class DepartmentMetrics(BaseModel):
    name: str
    count: int
    growth: str
    satisfaction: float
    status: str


class HrMetrics(BaseModel):
    turnover_rate: float = 0
    average_tenure: float = 0
    recent_hires: int = 0
    pending_approvals: int = 0
    document_compliance: float = 0


class HrAnalytics(BaseModel):
    total_employees: int
    departments: List[DepartmentMetrics]
    metrics: HrMetrics
    open_positions: int
    training_programs: int
    employee_satisfaction: float


# ==================== Marketing Analytics ====================

class SliderPerformance(BaseModel):
    id: str
    title: str
    views: int
    clicks: int
    click_through_rate: float
    trend: str


class SearchTrend(BaseModel):
    query: str
    searches: int
    trend: str
    success_rate: float


class MarketingAnalytics(BaseModel):
    top_sliders: List[SliderPerformance]
    top_searches: List[SearchTrend]
    average_click_through_rate: float
    total_banner_views: int
    total_banner_clicks: int
    unique_visitors: int


# ==================== Dashboard ====================

class DashboardOverview(BaseModel):
    """Snapshot of every dashboard category"""
    system: SystemOverview
    content: ContentAnalytics
    users: UserAnalytics
    hr: HrAnalytics
    marketing: MarketingAnalytics
    generated_at: datetime
    # Dotted paths of fields filled with fixed placeholder values
    placeholder_metrics: List[str] = Field(default_factory=list)


class DashboardQuery(BaseModel):
    """Filters accepted by the overview, widget and export endpoints"""
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    granularity: Optional[Granularity] = None
    role: Optional[str] = None
    category: Optional[Category] = None
    include_trends: Optional[bool] = None
    limit: Optional[int] = Field(default=None, ge=1, le=100)


class DashboardWidget(BaseModel):
    id: str
    title: str
    type: Literal["widget", "chart", "table", "metric"]
    enabled: bool = True
    order: int
    data: Dict[str, Any] = Field(default_factory=dict)


class DashboardConfig(BaseModel):
    id: str
    name: str
    role: str
    widgets: List[DashboardWidget]
    layout: Literal["grid", "list", "custom"]
    auto_refresh: bool
    refresh_interval: int  # milliseconds


class DashboardConfigUpdate(BaseModel):
    """Partial update; unset fields keep their current value"""
    name: Optional[str] = None
    widgets: Optional[List[DashboardWidget]] = None
    layout: Optional[Literal["grid", "list", "custom"]] = None
    auto_refresh: Optional[bool] = None
    refresh_interval: Optional[int] = Field(default=None, ge=1000)


class DashboardExport(BaseModel):
    filename: str
    content_type: str
    size: int
    exported_at: datetime
    exported_by: str


class CacheStats(BaseModel):
    size: int
    max_size: int
    hit_rate: float
    hits: int
    misses: int
    keys: List[str]


class CacheClearResult(BaseModel):
    cleared: int  # -1 means the whole cache was wiped


class DashboardHealth(BaseModel):
    status: Literal["healthy", "degraded", "unhealthy"]
    message: str
    cache_health: bool
    last_updated: datetime
