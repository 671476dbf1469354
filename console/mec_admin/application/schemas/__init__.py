from .api import (
    AdminCounts,
    ApiResult,
    DashboardResult,
    DashboardSummary,
    EnquiryCounts,
    ReviewCounts,
    UploadedFile,
    UploadResult,
)
from .entity_forms import (
    BANNER_FORM,
    CLIENT_FORM,
    ENQUIRY_FORM,
    FORM_SCHEMAS,
    PROJECT_FORM,
    REVIEW_FORM,
    SUBSCRIBER_FORM,
    WORK_FORM,
    get_form_schema,
)

__all__ = [
    "AdminCounts",
    "ApiResult",
    "DashboardResult",
    "DashboardSummary",
    "EnquiryCounts",
    "ReviewCounts",
    "UploadedFile",
    "UploadResult",
    "BANNER_FORM",
    "CLIENT_FORM",
    "ENQUIRY_FORM",
    "FORM_SCHEMAS",
    "PROJECT_FORM",
    "REVIEW_FORM",
    "SUBSCRIBER_FORM",
    "WORK_FORM",
    "get_form_schema",
]
