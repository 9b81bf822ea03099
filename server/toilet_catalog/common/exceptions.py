"""
Custom Exception Hierarchy for the Toilet Catalog Sync
======================================================

Provides specific exceptions for the failure classes of the sync job,
so callers catch what they can recover from and let the rest reach the
global error handler.

Usage:
    from toilet_catalog.common.exceptions import (
        MongoDBError,
        DirectoryServiceError,
        UnknownRegionError
    )

    try:
        collection.update_one(...)
    except PyMongoError as e:
        raise MongoDBError("Failed to upsert store") from e
"""


class CatalogSyncError(Exception):
    """
    Base exception for all catalog sync errors.

    Attributes:
        message: Human-readable error message
        code: Error code for API responses
        details: Additional error details
    """

    def __init__(self, message: str, code: str = "CS000", details: dict = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API response."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details
        }


# ============================================
# Database Exceptions
# ============================================

class DatabaseError(CatalogSyncError):
    """Base exception for database-related errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="DB001", details=details)


class MongoDBError(DatabaseError):
    """MongoDB operation failed."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, details=details)
        self.code = "DB002"


# ============================================
# External API Exceptions
# ============================================

class ExternalAPIError(CatalogSyncError):
    """Base exception for external API call failures."""

    def __init__(self, message: str, provider: str = None, details: dict = None):
        details = details or {}
        if provider:
            details["provider"] = provider
        super().__init__(message, code="API001", details=details)


class DirectoryServiceError(ExternalAPIError):
    """Store-locator request failed (transport, timeout, HTTP status)."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, provider="seven_eleven_emap", details=details)
        self.code = "API002"


class DirectoryParseError(DirectoryServiceError):
    """Store-locator payload could not be parsed."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, details=details)
        self.code = "API003"


# ============================================
# Validation Exceptions
# ============================================

class ValidationError(CatalogSyncError):
    """Input validation failed."""

    def __init__(self, message: str, field: str = None, details: dict = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, code="VAL001", details=details)


# ============================================
# Authorization Exceptions
# ============================================

class AuthorizationError(CatalogSyncError):
    """Caller is not allowed to trigger the sync."""

    def __init__(self, message: str = "Unauthorized", details: dict = None):
        super().__init__(message, code="AUTH003", details=details)


# ============================================
# Resource Exceptions
# ============================================

class NotFoundError(CatalogSyncError):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str = None, details: dict = None):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with id '{identifier}' not found"
        details = details or {}
        details["resource"] = resource
        if identifier:
            details["identifier"] = identifier
        super().__init__(message, code="NF001", details=details)


class UnknownRegionError(NotFoundError):
    """Region id is not in the registry."""

    def __init__(self, region_id: str, valid_ids: list = None):
        super().__init__("Region", identifier=region_id, details={"valid_ids": valid_ids or []})
        self.code = "NF002"
        self.valid_ids = valid_ids or []
