"""
Profile Validation Engine

This module interprets the declarative rule tables in ``rules`` against profile
records. Validation failures are data, never exceptions: every entry point
returns a FieldValidationResult or ValidationResult for the caller to render.

Validation pipeline:
    validate_field: one value against one ValidationRule, first failure wins
    validate_profile: every known field of a record, then the cross-field rules
    get_form_validation_state: per-field results keyed by field name

Field checks run in a fixed order and stop at the first failure:
    1. required (None or blank string fails)
    2. empty and optional values pass without further checks
    3. strings: min_length, max_length, pattern
    4. numbers: min, max
    5. custom predicate

Length and range checks are delegated to marshmallow validators so messages
and boundary semantics match the rest of the marshmallow-based request schemas.
"""

import re
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

import structlog
from marshmallow import ValidationError, validate

from .models import FieldValidationResult, ValidationResult, ValidationRule
from .rules import CROSS_FIELD_RULES, get_rules

logger = structlog.get_logger("business.validators")

ALLOWED_PICTURE_TYPES = ('image/jpeg', 'image/jpg', 'image/png', 'image/webp')
PROFILE_PICTURE_MAX_BYTES = 5 * 1024 * 1024
PROFILE_PICTURE_MIN_BYTES = 1024

_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])([A-Z])')
_WHITESPACE_RUN = re.compile(r'\s+')


# ============================================================================
# HELPERS
# ============================================================================

def to_snake_case(name: str) -> str:
    """Convert a camelCase form field name to snake_case."""
    return _CAMEL_BOUNDARY.sub(r'_\1', name).lower()


def normalize_field_names(value: Any) -> Any:
    """
    Recursively convert camelCase mapping keys to snake_case.

    Form payloads produced by JavaScript clients use camelCase keys while the
    rule tables and custom predicates use snake_case.
    """
    if isinstance(value, Mapping):
        return {
            to_snake_case(key) if isinstance(key, str) else key: normalize_field_names(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [normalize_field_names(item) for item in value]
    return value


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == '')


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _literal(message: str) -> str:
    # marshmallow formats error templates with str.format
    return message.replace('{', '{{').replace('}', '}}')


def _check(validator: validate.Validator, value: Any) -> Optional[str]:
    try:
        validator(value)
    except ValidationError as error:
        messages = error.messages
        return messages[0] if isinstance(messages, list) else str(messages)
    return None


def _failure(value: Any, message: str) -> FieldValidationResult:
    return FieldValidationResult(is_valid=False, error=message, value=value)


# ============================================================================
# FIELD VALIDATION
# ============================================================================

def validate_field(field_name: str, value: Any, rule: ValidationRule) -> FieldValidationResult:
    """
    Validate a single field value against its rule.

    Args:
        field_name: Field name used in default error messages
        value: Raw field value
        rule: Constraints to apply

    Returns:
        FieldValidationResult carrying at most one error message
    """
    if is_empty(value):
        if rule.required:
            return _failure(value, rule.message or f'{field_name} is required')
        return FieldValidationResult(is_valid=True, value=value)

    if isinstance(value, str):
        if rule.min_length is not None:
            error = _check(validate.Length(
                min=rule.min_length,
                error=_literal(rule.message or f'{field_name} must be at least {rule.min_length} characters'),
            ), value)
            if error:
                return _failure(value, error)

        if rule.max_length is not None:
            error = _check(validate.Length(
                max=rule.max_length,
                error=_literal(rule.message or f'{field_name} must be less than {rule.max_length} characters'),
            ), value)
            if error:
                return _failure(value, error)

        if rule.pattern is not None and not rule.pattern.search(value):
            return _failure(value, rule.message or f'{field_name} format is invalid')

    if _is_number(value):
        if rule.min is not None:
            error = _check(validate.Range(
                min=rule.min,
                error=_literal(rule.message or f'{field_name} must be at least {rule.min:g}'),
            ), value)
            if error:
                return _failure(value, error)

        if rule.max is not None:
            error = _check(validate.Range(
                max=rule.max,
                error=_literal(rule.message or f'{field_name} must be less than {rule.max:g}'),
            ), value)
            if error:
                return _failure(value, error)

    if rule.custom is not None:
        outcome = rule.custom(value)
        if outcome is not True:
            message = outcome if isinstance(outcome, str) else f'{field_name} is invalid'
            return _failure(value, message)

    return FieldValidationResult(is_valid=True, value=value)


def validate_field_real_time(field_name: str, value: Any, profile_type: str) -> FieldValidationResult:
    """
    Validate one form field as the user edits it.

    Fields without a rule for the profile type always pass.
    """
    rules = get_rules(profile_type)
    rule = rules.get(to_snake_case(field_name))
    if rule is None:
        return FieldValidationResult(is_valid=True, value=value)
    return validate_field(field_name, normalize_field_names(value), rule)


# ============================================================================
# PROFILE VALIDATION
# ============================================================================

def validate_profile(record: Mapping[str, Any], profile_type: str) -> ValidationResult:
    """
    Validate a complete profile record.

    Every field present in both the record and the rule table is validated;
    fields without a rule are ignored. Cross-field rules for the profile type
    are evaluated afterwards, blocking rules adding errors and the others
    adding warnings.

    Args:
        record: Profile field values keyed by field name (snake_case or camelCase)
        profile_type: 'developer' or 'client'

    Returns:
        ValidationResult with every error and warning found

    Raises:
        ValueError: If the profile type is unknown
    """
    rules = get_rules(profile_type)
    data = normalize_field_names(record or {})
    result = ValidationResult()

    for field_name, value in data.items():
        rule = rules.get(field_name)
        if rule is None:
            continue
        field_result = validate_field(field_name, value, rule)
        if not field_result.is_valid and field_result.error:
            result.add_error(field_result.error)

    for cross_rule in CROSS_FIELD_RULES.get(profile_type, ()):
        if not cross_rule.predicate(data):
            continue
        if cross_rule.blocking:
            result.add_error(cross_rule.message)
        else:
            result.add_warning(cross_rule.message)

    if not result.is_valid:
        logger.debug("Profile validation failed",
                     profile_type=profile_type,
                     error_count=len(result.errors))

    return result


def validate_developer_profile(record: Mapping[str, Any]) -> ValidationResult:
    """Validate a developer profile record."""
    return validate_profile(record, 'developer')


def validate_client_profile(record: Mapping[str, Any]) -> ValidationResult:
    """Validate a client profile record."""
    return validate_profile(record, 'client')


# ============================================================================
# FORM STATE HELPERS
# ============================================================================

def get_form_validation_state(
    form_data: Mapping[str, Any],
    profile_type: str,
) -> Dict[str, FieldValidationResult]:
    """Validate every ruled field of a form, keyed by normalized field name."""
    rules = get_rules(profile_type)
    state = {}
    for field_name, value in normalize_field_names(form_data or {}).items():
        rule = rules.get(field_name)
        if rule is not None:
            state[field_name] = validate_field(field_name, value, rule)
    return state


def is_form_valid(validation_state: Mapping[str, FieldValidationResult]) -> bool:
    return all(field.is_valid for field in validation_state.values())


def get_form_errors(validation_state: Mapping[str, FieldValidationResult]) -> List[str]:
    return [field.error for field in validation_state.values() if not field.is_valid and field.error]


def get_form_warnings(validation_state: Mapping[str, FieldValidationResult]) -> List[str]:
    return [field.warning for field in validation_state.values() if field.warning]


# ============================================================================
# UPLOADS, SANITIZATION AND FORMATTING
# ============================================================================

def validate_profile_picture(
    content_type: str,
    size: int,
    max_bytes: int = PROFILE_PICTURE_MAX_BYTES,
    min_bytes: int = PROFILE_PICTURE_MIN_BYTES,
    allowed_types: Iterable[str] = ALLOWED_PICTURE_TYPES,
) -> ValidationResult:
    """
    Validate a profile picture upload by MIME type and byte size.

    Oversized files and unsupported types are errors; very small files only
    produce a warning since they are likely below 100x100 pixels.
    """
    result = ValidationResult()

    if (content_type or '').lower() not in tuple(allowed_types):
        result.add_error('Profile picture must be a JPEG, PNG, or WebP image')

    if size > max_bytes:
        result.add_error(f'Profile picture must be less than {max_bytes // (1024 * 1024)}MB')

    if size < min_bytes:
        result.add_warning('Profile picture should be at least 100x100 pixels for best quality')

    return result


def sanitize_form_data(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Clean form data before submission.

    Strings are trimmed with internal whitespace runs collapsed to one space;
    lists lose None and empty-string items and have their strings trimmed.
    Other values pass through unchanged.
    """
    sanitized = dict(data)

    for key, value in sanitized.items():
        if isinstance(value, str):
            sanitized[key] = _WHITESPACE_RUN.sub(' ', value).strip()
        elif isinstance(value, list):
            sanitized[key] = [
                item.strip() if isinstance(item, str) else item
                for item in value
                if item is not None and item != ''
            ]

    return sanitized


def field_display_name(field_name: str) -> str:
    """'hourly_rate' or 'hourlyRate' -> 'Hourly Rate'."""
    return ' '.join(word.capitalize() for word in to_snake_case(field_name).split('_') if word)


def format_validation_error(field_name: str, error: str) -> str:
    """Replace the raw field name in an error message with its display name."""
    return error.replace(field_name, field_display_name(field_name), 1)


__all__ = [
    'to_snake_case',
    'normalize_field_names',
    'is_empty',
    'validate_field',
    'validate_field_real_time',
    'validate_profile',
    'validate_developer_profile',
    'validate_client_profile',
    'get_form_validation_state',
    'is_form_valid',
    'get_form_errors',
    'get_form_warnings',
    'validate_profile_picture',
    'sanitize_form_data',
    'field_display_name',
    'format_validation_error',
]
