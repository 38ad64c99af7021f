"""API routers for CardBox."""

from cardbox.routers import bulk_upload

__all__ = ["bulk_upload"]
