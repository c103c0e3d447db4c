"""Adbroll services module.

Business logic for matching scraped TikTok videos to the product catalog.
"""

from adbroll.services.exceptions import (
    CatalogUnavailableError,
    ConfigurationError,
    DataStoreError,
    DomainError,
    ExternalServiceError,
    JobError,
    ServiceError,
    ValidationError,
    VideoPageUnavailableError,
)

__all__ = [
    # Base exceptions
    "ServiceError",
    "ConfigurationError",
    # External service exceptions
    "ExternalServiceError",
    "DataStoreError",
    "CatalogUnavailableError",
    "VideoPageUnavailableError",
    # Domain exceptions
    "DomainError",
    "ValidationError",
    "JobError",
]
