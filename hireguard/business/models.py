"""
Data Models for Profile Validation and Error Reporting

Pydantic 2.x models for the value objects passed between the validators, the
error classifier and the error loggers. All models are created fresh per call
and owned by the caller; rule definitions are frozen once built.

Models:
    ValidationRule: Declarative constraints for one profile field
    FieldValidationResult: Outcome of validating one field value
    ValidationResult: Aggregate outcome for a full profile record
    ErrorContext: Caller-supplied context stamped with a creation timestamp
    ErrorInfo: Classified, log-ready description of a failure
"""

import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Pattern

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .exceptions import ERROR_SEVERITY_MAP, ErrorSeverity, ErrorType


class ValidationRule(BaseModel):
    """
    Declarative validation constraints for a single field.

    Rules are plain data interpreted by ``validate_field``; nothing is attached
    to the record classes themselves. A ``custom`` predicate receives the raw
    value and returns ``True`` to pass, or a message string (or any other
    value) to fail.

    Example:
        ValidationRule(required=True, min_length=2, max_length=50,
                       pattern=r'^[a-zA-Z0-9\\s\\-_]+$',
                       message='Display name must be 2-50 characters')
    """

    model_config = ConfigDict(frozen=True, extra='forbid', arbitrary_types_allowed=True)

    required: bool = False
    min_length: Optional[int] = Field(default=None, ge=0)
    max_length: Optional[int] = Field(default=None, ge=0)
    pattern: Optional[Pattern[str]] = None
    min: Optional[float] = None
    max: Optional[float] = None
    custom: Optional[Callable[[Any], Any]] = None
    message: Optional[str] = None

    @field_validator('pattern', mode='before')
    @classmethod
    def compile_pattern(cls, value: Any) -> Any:
        if isinstance(value, str):
            return re.compile(value)
        return value


class FieldValidationResult(BaseModel):
    """Outcome of validating one field value against one rule."""

    is_valid: bool = True
    error: Optional[str] = None
    warning: Optional[str] = None
    value: Any = None


class ValidationResult(BaseModel):
    """Aggregate validation outcome for a complete record."""

    is_valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ErrorContext(BaseModel):
    """
    Context attached to a reported error.

    Every field except ``timestamp`` is optional and supplied by the caller;
    ``timestamp`` is always stamped when the context is created.
    """

    model_config = ConfigDict(extra='ignore')

    component: Optional[str] = None
    action: Optional[str] = None
    user_id: Optional[str] = None
    profile_id: Optional[str] = None
    form_data: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=_utc_now)
    user_agent: Optional[str] = None
    url: Optional[str] = None
    attempt: Optional[int] = None


class ErrorInfo(BaseModel):
    """
    Classified description of a failure, ready for logging or remote reporting.

    ``severity`` is computed from ``type`` through ERROR_SEVERITY_MAP and cannot
    be supplied by the caller; ``original_error`` is kept for in-process
    consumers and excluded from serialization.
    """

    model_config = ConfigDict(extra='forbid', arbitrary_types_allowed=True)

    type: ErrorType
    message: str
    user_message: str
    code: Optional[str] = None
    context: ErrorContext = Field(default_factory=ErrorContext)
    original_error: Any = Field(default=None, exclude=True)
    stack: Optional[str] = None

    @computed_field  # type: ignore[misc]
    @property
    def severity(self) -> ErrorSeverity:
        return ERROR_SEVERITY_MAP[self.type]


__all__ = [
    'ValidationRule',
    'FieldValidationResult',
    'ValidationResult',
    'ErrorContext',
    'ErrorInfo',
]
