"""Standardized exception hierarchy for adbroll services.

Exception Hierarchy:
    ServiceError (base)
        ConfigurationError
        ExternalServiceError
            DataStoreError
                CatalogUnavailableError
                VideoPageUnavailableError
        DomainError
            ValidationError
            JobError

Usage:
    from adbroll.services.exceptions import DataStoreError, ServiceError

    try:
        orchestrator.match_batch(offset=0, batch_size=100)
    except DataStoreError:
        # The catalog or the video page could not be read; nothing was written.
        ...
    except ServiceError:
        ...
"""

from typing import Any


class ServiceError(Exception):
    """Base exception for all service-related errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ConfigurationError(ServiceError):
    """Raised when a required setting or credential is missing or invalid."""

    pass


class ExternalServiceError(ServiceError):
    """Base exception for failures of collaborators outside this process."""

    pass


class DataStoreError(ExternalServiceError):
    """Raised when the relational store cannot be read for a whole batch.

    These errors are fatal for the current invocation; writes already made
    stay committed.
    """

    pass


class CatalogUnavailableError(DataStoreError):
    """Raised when the product catalog cannot be loaded."""

    pass


class VideoPageUnavailableError(DataStoreError):
    """Raised when the page of unmatched videos cannot be loaded."""

    pass


class DomainError(ServiceError):
    """Base exception for business-rule errors."""

    pass


class ValidationError(DomainError):
    """Raised when caller-supplied parameters break a business rule."""

    pass


class JobError(DomainError):
    """Raised when a queued match job cannot be claimed or executed."""

    pass
