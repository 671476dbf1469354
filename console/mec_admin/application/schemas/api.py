"""Pydantic schemas for the admin API response envelopes."""

from typing import Any

from pydantic import BaseModel, Field


class ApiResult(BaseModel):
    """Generic ``{success, message?, data?}`` envelope returned by every route."""

    success: bool = False
    message: str | None = None
    data: Any = None

    model_config = {"extra": "allow"}


class UploadedFile(BaseModel):
    url: str


class UploadResult(BaseModel):
    """Envelope returned by the media upload route."""

    success: bool = False
    message: str | None = None
    files: list[UploadedFile] = Field(default_factory=list)

    model_config = {"extra": "allow"}


class ReviewCounts(BaseModel):
    total: int = 0


class EnquiryCounts(BaseModel):
    unopened: int = 0


class AdminCounts(BaseModel):
    total: int = 0
    superadmin: int = 0


class DashboardSummary(BaseModel):
    """Combined counts across all domains, as returned by the dashboard route."""

    blogs: int = 0
    banners: int = 0
    clients: int = 0
    projects: int = 0
    works: int = 0
    subscribers: int = 0
    reviews: ReviewCounts = Field(default_factory=ReviewCounts)
    enquiries: EnquiryCounts = Field(default_factory=EnquiryCounts)
    admins: AdminCounts = Field(default_factory=AdminCounts)

    model_config = {"extra": "allow"}


class DashboardResult(BaseModel):
    success: bool = False
    message: str | None = None
    data: DashboardSummary | None = None
