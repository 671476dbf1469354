"""HTTP infrastructure package."""

from .admin_api_client import HttpAdminApi

__all__ = ["HttpAdminApi"]
