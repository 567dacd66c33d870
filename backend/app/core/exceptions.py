"""
Custom Exceptions for the ICMS admin API
========================================

Raise these instead of generic Exception so the API layer can map them to
an HTTP status and the standard error envelope.

Usage:
    from app.core.exceptions import MediaNotFoundError

    if not media:
        raise MediaNotFoundError(media_id)
"""

from typing import Optional, Any, Dict, List


class ICMSError(Exception):
    """Base exception for all ICMS errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(ICMSError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(ICMSError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(ICMSError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class MediaNotFoundError(ResourceNotFoundError):
    """Media item not found"""

    def __init__(self, media_id: str):
        super().__init__("Media", media_id)


class DepartmentNotFoundError(ResourceNotFoundError):
    def __init__(self, department_id: str):
        super().__init__("Department", department_id)


class EmployeeNotFoundError(ResourceNotFoundError):
    def __init__(self, employee_id: str):
        super().__init__("Employee", employee_id)


class DocumentNotFoundError(ResourceNotFoundError):
    """Document not found"""

    def __init__(self, document_id: str):
        super().__init__("Document", document_id)


class HeaderConfigNotFoundError(ResourceNotFoundError):
    def __init__(self, config_id: str):
        super().__init__("Header config", config_id)


class ImportantLinkNotFoundError(ResourceNotFoundError):
    def __init__(self, link_id: str):
        super().__init__("Important link", link_id)


class OfficeSettingsNotFoundError(ResourceNotFoundError):
    """No office settings row yet, or none with this id"""

    def __init__(self, settings_id: str = "current"):
        super().__init__("Office settings", settings_id)


class UnknownWidgetError(ResourceNotFoundError):
    """Dashboard widget id has no registered producer"""

    def __init__(self, widget_id: str, known: Optional[List[str]] = None):
        super().__init__("Widget", widget_id)
        self.message = f"Unknown widget: {widget_id}"
        self.args = (self.message,)
        self.code = "UNKNOWN_WIDGET"
        if known:
            self.details["known_widgets"] = known


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(ICMSError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class UnsupportedExportFormatError(ValidationError):
    """Export format is not one of json/csv/pdf"""

    def __init__(self, export_format: str):
        super().__init__(f"Unsupported export format: {export_format}", field="format")
        self.code = "UNSUPPORTED_EXPORT_FORMAT"


class FieldValidationError(ValidationError):
    """
    One or more fields failed business rules.

    errors: [{"field", "message", "code"}, ...]
    """

    def __init__(self, errors: List[Dict[str, str]], message: str = "Validation failed"):
        super().__init__(message)
        self.details = {"errors": errors}


class MediaValidationError(FieldValidationError):
    """Uploaded file failed one or more checks"""

    def __init__(self, errors: List[Dict[str, str]]):
        super().__init__(errors, "File validation failed")
        self.code = "FILE_VALIDATION_FAILED"


# ============================================
# Conflict Errors (409-type)
# ============================================

class ResourceConflictError(ICMSError):
    """Request clashes with the current state of a resource"""

    status_code = 409

    def __init__(self, message: str, code: str = "CONFLICT", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class DepartmentInUseError(ResourceConflictError):
    """Department still has employees or child departments"""

    def __init__(self, department_id: str, reason: str):
        super().__init__(
            f"Cannot delete department with {reason}",
            code="DEPARTMENT_IN_USE",
            details={"department_id": department_id, "reason": reason}
        )


class DuplicateLinkUrlError(ResourceConflictError):
    def __init__(self, url: str):
        super().__init__(
            "Link with this URL already exists",
            code="DUPLICATE_LINK_URL",
            details={"link_url": url}
        )


# ============================================
# Dashboard Errors
# ============================================

class ExportNotImplementedError(ICMSError):
    """Export format is recognised but has no implementation"""

    status_code = 501

    def __init__(self, export_format: str):
        super().__init__(
            f"{export_format.upper()} export not implemented yet",
            code="EXPORT_NOT_IMPLEMENTED",
            details={"format": export_format}
        )


class CsvConversionError(ICMSError):
    """Dashboard data could not be flattened into CSV"""

    def __init__(self, message: str = "Failed to convert dashboard data to CSV format"):
        super().__init__(message, code="CSV_CONVERSION_FAILED")


# ============================================
# Storage Errors
# ============================================

class StorageError(ICMSError):
    """Storage operation failed"""

    status_code = 502

    def __init__(self, message: str):
        super().__init__(message, code="STORAGE_ERROR")


class StorageUploadError(StorageError):
    """Object upload failed"""

    def __init__(self, key: str, message: str = "Upload failed"):
        super().__init__(f"Failed to upload to object storage: {message}")
        self.code = "STORAGE_UPLOAD_FAILED"
        self.details["key"] = key


class PresignedUrlError(StorageError):
    """Presigned URL could not be generated"""

    def __init__(self, key: str, message: str = ""):
        super().__init__(f"Failed to generate presigned URL: {message}")
        self.code = "PRESIGN_FAILED"
        self.details["key"] = key


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: ICMSError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "error": error.to_dict()
    }
