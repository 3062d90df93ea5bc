"""
Business layer: profile rule tables, validators, form sessions and the error taxonomy.

Usage:
    from hireguard.business import validate_developer_profile

    result = validate_developer_profile({'displayName': 'Jo', 'currency': 'USD'})
    if not result.is_valid:
        print(result.errors)
"""

from .exceptions import (
    ERROR_SEVERITY_MAP,
    ApplicationError,
    ConfigurationError,
    ErrorSeverity,
    ErrorType,
    coerce_error_type,
)
from .forms import (
    FieldProps,
    FormValidationSession,
    client_profile_session,
    developer_profile_session,
)
from .models import (
    ErrorContext,
    ErrorInfo,
    FieldValidationResult,
    ValidationResult,
    ValidationRule,
)
from .rules import (
    CROSS_FIELD_RULES,
    PROFILE_TYPES,
    PROFILE_VALIDATION_RULES,
    CrossFieldRule,
    get_rules,
)
from .validators import (
    format_validation_error,
    get_form_errors,
    get_form_validation_state,
    get_form_warnings,
    is_form_valid,
    sanitize_form_data,
    validate_client_profile,
    validate_developer_profile,
    validate_field,
    validate_field_real_time,
    validate_profile,
    validate_profile_picture,
)

__all__ = [
    'ERROR_SEVERITY_MAP',
    'ApplicationError',
    'ConfigurationError',
    'ErrorSeverity',
    'ErrorType',
    'coerce_error_type',
    'FieldProps',
    'FormValidationSession',
    'client_profile_session',
    'developer_profile_session',
    'ErrorContext',
    'ErrorInfo',
    'FieldValidationResult',
    'ValidationResult',
    'ValidationRule',
    'CROSS_FIELD_RULES',
    'PROFILE_TYPES',
    'PROFILE_VALIDATION_RULES',
    'CrossFieldRule',
    'get_rules',
    'format_validation_error',
    'get_form_errors',
    'get_form_validation_state',
    'get_form_warnings',
    'is_form_valid',
    'sanitize_form_data',
    'validate_client_profile',
    'validate_developer_profile',
    'validate_field',
    'validate_field_real_time',
    'validate_profile',
    'validate_profile_picture',
]
