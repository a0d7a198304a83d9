"""
Custom exception classes.
Every application error carries a machine-readable error code and a details
mapping that the error handler renders as-is.
"""

from typing import Any, Dict, Optional


class BaseApplicationError(Exception):
    """Base application error"""

    default_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None
    ):
        self.message = message
        self.error_code = error_code or self.default_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class DatabaseError(BaseApplicationError):
    """Database failure"""
    default_code = "DATABASE_ERROR"


class SweepError(DatabaseError):
    """A stage of the activation sweep could not reach the store"""
    default_code = "SWEEP_FAILED"

    def __init__(self, message: str, stage: str, scope: str):
        super().__init__(message, details={"stage": stage, "scope": scope})
        self.stage = stage
        self.scope = scope


class ConcurrencyError(DatabaseError):
    """Transaction conflict"""
    default_code = "CONCURRENCY_CONFLICT"


class AuthenticationError(BaseApplicationError):
    """Missing or invalid credentials"""
    default_code = "AUTHENTICATION_REQUIRED"


class PermissionDeniedError(BaseApplicationError):
    """Actor lacks the required role"""
    default_code = "PERMISSION_DENIED"


class NotFoundError(BaseApplicationError):
    """Resource not found"""
    default_code = "RESOURCE_NOT_FOUND"


class PeriodNotFoundError(NotFoundError):
    default_code = "PERIOD_NOT_FOUND"


class ClassroomNotFoundError(NotFoundError):
    default_code = "CLASSROOM_NOT_FOUND"


class SettingsNotFoundError(NotFoundError):
    default_code = "SETTINGS_NOT_FOUND"


class BusinessRuleError(BaseApplicationError):
    """Business rule violation"""
    default_code = "BUSINESS_RULE_VIOLATION"


class ActivePeriodExistsError(BusinessRuleError):
    """An active period already covers the requested start date"""
    default_code = "ACTIVE_PERIOD_EXISTS"


class ValidationError(BaseApplicationError):
    """Input rejected; the caller can resubmit corrected data"""
    default_code = "VALIDATION_ERROR"


class InvalidPeriodDatesError(ValidationError):
    default_code = "INVALID_PERIOD_DATES"


class ConfigMissingError(ValidationError):
    """No facility timing configuration has been saved yet"""
    default_code = "CONFIG_MISSING"


class EntryValidationError(ValidationError):
    """Rejection of one entry (slot or meal) of a batch"""

    def __init__(self, message: str, day: str = None, index: int = None, **details):
        if day is not None:
            details["day"] = day
        if index is not None:
            details["index"] = index
        super().__init__(message, details=details)
        self.day = day
        self.index = index


class DayCapacityExceededError(EntryValidationError):
    default_code = "DAY_CAPACITY_EXCEEDED"


class DuplicateEntryError(EntryValidationError):
    default_code = "DUPLICATE_ENTRY"


class InvalidDurationError(EntryValidationError):
    default_code = "INVALID_DURATION"


class MisalignedStartError(EntryValidationError):
    default_code = "MISALIGNED_START"


class IncompleteStructureError(EntryValidationError):
    default_code = "INCOMPLETE_STRUCTURE"


class ForbiddenFieldError(EntryValidationError):
    default_code = "FORBIDDEN_FIELD"
