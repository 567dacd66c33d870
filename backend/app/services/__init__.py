from app.services.storage_service import StorageService, storage_service
from app.services.cache_service import TTLCache, dashboard_cache
from app.services.metrics_source import MetricsSource, SqlAlchemyMetricsSource
from app.services.metrics_service import MetricsService
from app.services.dashboard_service import DashboardService, dashboard_service
from app.services.media_service import MediaService
from app.services.department_service import DepartmentService, department_service
from app.services.employee_service import EmployeeService, employee_service
from app.services.document_service import DocumentService, document_service
from app.services.header_config_service import HeaderConfigService, header_config_service
from app.services.important_links_service import ImportantLinksService, important_links_service
from app.services.office_settings_service import OfficeSettingsService, office_settings_service

__all__ = [
    # Storage
    "StorageService",
    "storage_service",
    # Dashboard
    "TTLCache",
    "dashboard_cache",
    "MetricsSource",
    "SqlAlchemyMetricsSource",
    "MetricsService",
    "DashboardService",
    "dashboard_service",
    # Media
    "MediaService",
    # HR
    "DepartmentService",
    "department_service",
    "EmployeeService",
    "employee_service",
    # Documents
    "DocumentService",
    "document_service",
    # Site configuration
    "HeaderConfigService",
    "header_config_service",
    "ImportantLinksService",
    "important_links_service",
    "OfficeSettingsService",
    "office_settings_service",
]
