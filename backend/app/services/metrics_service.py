"""
Dashboard Metrics Aggregator
============================

Fans out independent leaf queries against a MetricsSource and composes
the five dashboard categories (system, content, users, hr, marketing).

Every leaf metric is isolated: a failure is logged and the metric falls
back to its zero value, so one broken table never takes down the whole
dashboard. Failures above the leaf level propagate.

Several figures have no data source yet. They are filled with fixed
values and their dotted paths are listed in PLACEHOLDER_METRICS, which
is copied into every DashboardOverview.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from app.core.logging_config import logger
from app.models import UserRole
from app.schemas.dashboard import (
    ActiveUser,
    ContentAnalytics,
    ContentGrowth,
    DashboardOverview,
    DashboardQuery,
    DepartmentMetrics,
    HrAnalytics,
    HrMetrics,
    MarketingAnalytics,
    RoleDistribution,
    SearchTrend,
    SliderPerformance,
    StorageMetrics,
    SystemHealth,
    SystemOverview,
    TopContent,
    UserAnalytics,
    UserGrowth,
)
from app.services.metrics_source import MetricsSource, SqlAlchemyMetricsSource

T = TypeVar("T")

DEFAULT_TOP_LIMIT = 5
DEFAULT_ACTIVE_USERS_LIMIT = 10

PLACEHOLDER_METRICS: List[str] = [
    "system.storage",
    "system.system_health.uptime",
    "system.system_health.recent_errors",
    "content.top_documents.trend",
    "content.top_media.views",
    "content.top_media.trend",
    "content.top_articles.views",
    "content.top_articles.trend",
    "content.document_growth",
    "content.media_growth",
    "content.article_growth",
    "content.total_views",
    "users.user_growth",
    "users.top_active_users.actions",
    "users.average_session_duration",
    "users.average_actions_per_session",
    "hr.departments",
    "hr.metrics",
    "hr.open_positions",
    "hr.training_programs",
    "hr.employee_satisfaction",
    "marketing",
]

# Fixed figures for metrics without a backing data source
PLACEHOLDER_STORAGE = StorageMetrics(
    used="45.2 GB",
    total="100 GB",
    used_percentage=45.2,
    largest_consumer="documents",
    monthly_growth="2.1 GB",
)
PLACEHOLDER_UPTIME = 99.9
PLACEHOLDER_TOTAL_VIEWS = 2340
PLACEHOLDER_ARTICLE_VIEWS = 120
PLACEHOLDER_CONTENT_GROWTH = {
    "documents": (45, "+15%"),
    "media": (120, "+22%"),
    "articles": (15, "+8%"),
}
PLACEHOLDER_USER_GROWTH = UserGrowth(monthly=23, trend="+8%", weekly=5, daily=1)
PLACEHOLDER_SESSION_DURATION = 12.5
PLACEHOLDER_ACTIONS_PER_SESSION = 3.2
PLACEHOLDER_DEPARTMENTS = [
    DepartmentMetrics(name="Engineering", count=25, growth="+3", satisfaction=85.5, status="Active"),
    DepartmentMetrics(name="Marketing", count=15, growth="+1", satisfaction=88.2, status="Active"),
    DepartmentMetrics(name="Sales", count=20, growth="+2", satisfaction=82.1, status="Active"),
    DepartmentMetrics(name="HR", count=8, growth="+0", satisfaction=90.0, status="Active"),
]
PLACEHOLDER_HR_METRICS = HrMetrics(
    turnover_rate=2.3,
    average_tenure=3.2,
    recent_hires=8,
    pending_approvals=2,
    document_compliance=98.5,
)
PLACEHOLDER_OPEN_POSITIONS = 15
PLACEHOLDER_TRAINING_PROGRAMS = 23
PLACEHOLDER_EMPLOYEE_SATISFACTION = 95.2
PLACEHOLDER_SEARCHES = [
    SearchTrend(query="employee handbook", searches=45, trend="+12%", success_rate=0.8),
    SearchTrend(query="policy guide", searches=32, trend="+8%", success_rate=0.9),
    SearchTrend(query="training materials", searches=28, trend="+5%", success_rate=0.7),
    SearchTrend(query="office hours", searches=22, trend="+3%", success_rate=0.95),
    SearchTrend(query="contact information", searches=18, trend="+1%", success_rate=0.85),
]
PLACEHOLDER_CLICK_THROUGH_RATE = 6.5
PLACEHOLDER_BANNER_VIEWS = 2340
PLACEHOLDER_BANNER_CLICKS = 156
PLACEHOLDER_UNIQUE_VISITORS = 89


def _utcnow() -> datetime:
    return datetime.utcnow()


def ranked_trend(index: int, steps: tuple) -> str:
    """Trend label by rank: first two, next two, rest"""
    if index < 2:
        return steps[0]
    if index < 4:
        return steps[1]
    return steps[2]


def extract_title(value: Any, default: str = "Untitled") -> str:
    """English title of a translatable {"en": ..., "ne": ...} field"""
    if isinstance(value, dict):
        return value.get("en") or default
    if isinstance(value, str) and value:
        return value
    return default


def _display_role(role: Optional[str]) -> str:
    """Dashboard role label; viewers are shown as plain users"""
    if not role or role == UserRole.VIEWER.value:
        return "user"
    return role


def health_from_uptime(uptime: float, recent_errors: int, checked_at: datetime) -> SystemHealth:
    if uptime < 95:
        status, message = "critical", "System uptime below acceptable threshold"
    elif uptime < 98:
        status, message = "warning", "System uptime below optimal level"
    elif uptime < 99.5:
        status, message = "good", "System operating normally"
    else:
        status, message = "excellent", "All systems operational"

    return SystemHealth(
        status=status,
        uptime=uptime,
        recent_errors=recent_errors,
        message=message,
        last_checked=checked_at,
    )


def format_time_ago(value: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Human readable age of a timestamp, e.g. '5 minutes ago'"""
    if value is None:
        return "Never"

    now = now or _utcnow()
    seconds = (now - value).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} minutes ago"
    if hours < 24:
        return f"{hours} hours ago"
    if days < 7:
        return f"{days} days ago"
    return value.date().isoformat()


class MetricsService:
    """
    Aggregates dashboard metrics from a MetricsSource.

    Args:
        source: data access capability; defaults to the database adapter
        now: clock returning naive UTC datetimes
    """

    def __init__(
        self,
        source: Optional[MetricsSource] = None,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.source = source or SqlAlchemyMetricsSource()
        self._now = now

    # ========== Overview ==========

    async def get_dashboard_overview(self, query: Optional[DashboardQuery] = None) -> DashboardOverview:
        query = query or DashboardQuery()
        try:
            system, content, users, hr, marketing = await asyncio.gather(
                self.get_system_overview(),
                self.get_content_analytics(query),
                self.get_user_analytics(query),
                self.get_hr_analytics(query),
                self.get_marketing_analytics(query),
            )
        except Exception as e:
            logger.log_error_with_context(e, context="dashboard overview")
            raise

        return DashboardOverview(
            system=system,
            content=content,
            users=users,
            hr=hr,
            marketing=marketing,
            generated_at=self._now(),
            placeholder_metrics=list(PLACEHOLDER_METRICS),
        )

    # ========== Categories ==========

    async def get_system_overview(self) -> SystemOverview:
        source = self.source
        since = self._now() - timedelta(days=30)
        (
            total_users,
            active_users,
            total_documents,
            total_media,
            total_articles,
            total_departments,
        ) = await asyncio.gather(
            self._leaf("total users", source.count_users, 0),
            self._leaf("active users", lambda: source.count_users_logged_in_since(since), 0),
            self._leaf("total documents", source.count_documents, 0),
            self._leaf("total media", source.count_media, 0),
            self._leaf("total articles", source.count_articles, 0),
            self._leaf("total departments", source.count_departments, 0),
        )

        now = self._now()
        return SystemOverview(
            total_users=total_users,
            active_users=active_users,
            total_documents=total_documents,
            total_media=total_media,
            total_articles=total_articles,
            total_departments=total_departments,
            storage=PLACEHOLDER_STORAGE.model_copy(),
            system_health=health_from_uptime(PLACEHOLDER_UPTIME, 0, now),
            last_updated=now,
        )

    async def get_content_analytics(self, query: Optional[DashboardQuery] = None) -> ContentAnalytics:
        limit = (query.limit if query else None) or DEFAULT_TOP_LIMIT
        top_documents, top_media, top_articles, total_downloads = await asyncio.gather(
            self._leaf("top documents", lambda: self._top_documents(limit), []),
            self._leaf("top media", lambda: self._top_media(limit), []),
            self._leaf("top articles", lambda: self._top_articles(limit), []),
            self._leaf("total downloads", self.source.sum_document_downloads, 0),
        )

        total_views = PLACEHOLDER_TOTAL_VIEWS
        average_engagement = total_downloads / total_views * 100 if total_views > 0 else 0

        return ContentAnalytics(
            top_documents=top_documents,
            top_media=top_media,
            top_articles=top_articles,
            document_growth=self._content_growth("documents"),
            media_growth=self._content_growth("media"),
            article_growth=self._content_growth("articles"),
            total_downloads=total_downloads,
            total_views=total_views,
            average_engagement=average_engagement,
        )

    async def get_user_analytics(self, query: Optional[DashboardQuery] = None) -> UserAnalytics:
        limit = (query.limit if query else None) or DEFAULT_ACTIVE_USERS_LIMIT
        now = self._now()
        source = self.source

        role_distribution, daily, weekly, monthly, top_active_users = await asyncio.gather(
            self._leaf("role distribution", self._role_distribution, RoleDistribution()),
            self._leaf(
                "daily active users",
                lambda: source.count_users_logged_in_since(now - timedelta(days=1)),
                0,
            ),
            self._leaf(
                "weekly active users",
                lambda: source.count_users_logged_in_since(now - timedelta(days=7)),
                0,
            ),
            self._leaf(
                "monthly active users",
                lambda: source.count_users_logged_in_since(now - timedelta(days=30)),
                0,
            ),
            self._leaf("top active users", lambda: self._top_active_users(limit, now), []),
        )

        return UserAnalytics(
            user_growth=PLACEHOLDER_USER_GROWTH.model_copy(),
            role_distribution=role_distribution,
            daily_active_users=daily,
            weekly_active_users=weekly,
            monthly_active_users=monthly,
            top_active_users=top_active_users,
            average_session_duration=PLACEHOLDER_SESSION_DURATION,
            average_actions_per_session=PLACEHOLDER_ACTIONS_PER_SESSION,
        )

    async def get_hr_analytics(self, query: Optional[DashboardQuery] = None) -> HrAnalytics:
        total_employees = await self._leaf("total employees", self.source.count_employees, 0)

        return HrAnalytics(
            total_employees=total_employees,
            departments=[department.model_copy() for department in PLACEHOLDER_DEPARTMENTS],
            metrics=PLACEHOLDER_HR_METRICS.model_copy(),
            open_positions=PLACEHOLDER_OPEN_POSITIONS,
            training_programs=PLACEHOLDER_TRAINING_PROGRAMS,
            employee_satisfaction=PLACEHOLDER_EMPLOYEE_SATISFACTION,
        )

    async def get_marketing_analytics(self, query: Optional[DashboardQuery] = None) -> MarketingAnalytics:
        limit = (query.limit if query else None) or DEFAULT_TOP_LIMIT

        return MarketingAnalytics(
            top_sliders=self._top_sliders(limit),
            top_searches=[search.model_copy() for search in PLACEHOLDER_SEARCHES[:limit]],
            average_click_through_rate=PLACEHOLDER_CLICK_THROUGH_RATE,
            total_banner_views=PLACEHOLDER_BANNER_VIEWS,
            total_banner_clicks=PLACEHOLDER_BANNER_CLICKS,
            unique_visitors=PLACEHOLDER_UNIQUE_VISITORS,
        )

    # ========== Leaf Metrics ==========

    async def _leaf(self, metric: str, fetch: Callable[[], Awaitable[T]], fallback: T) -> T:
        """Run one leaf query, degrading to the fallback on any error"""
        try:
            return await fetch()
        except Exception as e:
            logger.log_metric_fallback(metric, e)
            return fallback

    async def _top_documents(self, limit: int) -> List[TopContent]:
        documents = await self.source.top_documents_by_downloads(limit)
        return [
            TopContent(
                id=str(doc.id),
                title=extract_title(doc.title),
                views=doc.download_count or 0,
                trend=ranked_trend(index, ("+12%", "+5%", "+2%")),
                type="documents",
                last_accessed=doc.updated_at,
            )
            for index, doc in enumerate(documents)
        ]

    async def _top_media(self, limit: int) -> List[TopContent]:
        media = await self.source.recent_media(limit)
        return [
            TopContent(
                id=str(item.id),
                title=item.title or "Untitled",
                views=max(150 - index * 20, 50),
                trend=ranked_trend(index, ("+18%", "+8%", "+3%")),
                type="media",
                last_accessed=item.created_at,
            )
            for index, item in enumerate(media)
        ]

    async def _top_articles(self, limit: int) -> List[TopContent]:
        articles = await self.source.recent_articles(limit)
        return [
            TopContent(
                id=str(article.id),
                title=extract_title(article.title),
                views=PLACEHOLDER_ARTICLE_VIEWS,
                trend=ranked_trend(index, ("+15%", "+7%", "+2%")),
                type="articles",
                last_accessed=article.updated_at,
            )
            for index, article in enumerate(articles)
        ]

    async def _role_distribution(self) -> RoleDistribution:
        count = self.source.count_users_by_role
        admin, manager, editor, viewer = await asyncio.gather(
            count(UserRole.ADMIN),
            count(UserRole.MANAGER),
            count(UserRole.EDITOR),
            count(UserRole.VIEWER),
        )
        return RoleDistribution(admin=admin, editor=editor, user=viewer, manager=manager)

    async def _top_active_users(self, limit: int, now: datetime) -> List[ActiveUser]:
        users = await self.source.users_by_recent_login(limit)
        return [
            ActiveUser(
                id=str(user.id),
                name=f"{user.first_name or ''} {user.last_name or ''}".strip() or "Unknown User",
                actions=max(200 - index * 15, 50),
                last_active=format_time_ago(user.last_login_at, now),
                role=_display_role(user.role),
            )
            for index, user in enumerate(users)
        ]

    @staticmethod
    def _content_growth(kind: str) -> ContentGrowth:
        monthly, trend = PLACEHOLDER_CONTENT_GROWTH[kind]
        return ContentGrowth(monthly=monthly, trend=trend, weekly=monthly // 4, daily=monthly // 30)

    @staticmethod
    def _top_sliders(limit: int) -> List[SliderPerformance]:
        sliders = []
        for index in range(limit):
            views = max(500 - index * 60, 100)
            clicks = max(50 - index * 6, 10)
            sliders.append(SliderPerformance(
                id=f"slider-{index + 1}",
                title=f"Banner {index + 1}",
                views=views,
                clicks=clicks,
                click_through_rate=round(clicks / views * 100, 2),
                trend=ranked_trend(index, ("+8%", "+3%", "+1%")),
            ))
        return sliders
