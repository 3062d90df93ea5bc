"""
Profile Validation API Blueprint

Exposes the profile validation engine over HTTP so that clients which cannot
run the rule tables locally get exactly the same verdicts as in-process
callers.

Endpoints:
    POST /api/v1/profiles/<profile_type>/validate
        Body: profile record (camelCase or snake_case keys)
        Returns: is_valid, errors, warnings and per-field results
    POST /api/v1/profiles/<profile_type>/fields/<field_name>/validate
        Body: {"value": ...}
        Returns: the single-field verdict
    POST /api/v1/uploads/profile-picture/validate
        Body: {"content_type": ..., "size": ...}
        Returns: upload verdict using the configured size limits
    GET /api/v1/health
        Returns: service status and version

A record that fails validation is still a successful request (HTTP 200); only
malformed bodies (400) and unknown profile types (404) are request errors.
"""

import structlog
from flask import Blueprint, current_app, request
from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate
from prometheus_client import Counter

from hireguard import __version__
from hireguard.business.rules import PROFILE_TYPES
from hireguard.business.validators import (
    field_display_name,
    format_validation_error,
    get_form_validation_state,
    sanitize_form_data,
    to_snake_case,
    validate_field_real_time,
    validate_profile,
    validate_profile_picture,
)
from .responses import format_api_response, format_error_response

logger = structlog.get_logger("blueprints.profiles")

profiles_bp = Blueprint('profiles', __name__, url_prefix='/api/v1')

# ============================================================================
# PROMETHEUS METRICS CONFIGURATION
# ============================================================================

PROFILE_VALIDATIONS = Counter(
    'hireguard_profile_validations_total',
    'Profile validation requests by profile type and outcome',
    ['profile_type', 'outcome']
)

VALIDATION_ERRORS = Counter(
    'hireguard_request_validation_errors_total',
    'Malformed request bodies rejected by the API',
    ['endpoint']
)

# ============================================================================
# REQUEST VALIDATION SCHEMAS
# ============================================================================


class FieldValueSchema(Schema):
    """Body of a single-field validation request."""
    value = fields.Raw(required=True, allow_none=True)

    class Meta:
        unknown = EXCLUDE


class ProfilePictureSchema(Schema):
    """Metadata of a profile picture upload."""
    content_type = fields.String(required=True, validate=validate.Length(min=1, max=100))
    size = fields.Integer(required=True, strict=True, validate=validate.Range(min=0))

    class Meta:
        unknown = EXCLUDE


def _json_body():
    """Return the JSON request body, raising ValidationError unless it is an object."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError({'_schema': ['Request body must be a JSON object']})
    return payload


def _unknown_profile_type(profile_type):
    return format_error_response(
        message=f"Unknown profile type '{profile_type}'",
        error_code="UNKNOWN_PROFILE_TYPE",
        details={'supported_profile_types': list(PROFILE_TYPES)},
        status_code=404,
    )


# ============================================================================
# ENDPOINTS
# ============================================================================

@profiles_bp.route('/profiles/<profile_type>/validate', methods=['POST'])
def validate_profile_record(profile_type: str):
    """
    Validate a complete profile record.

    Query Parameters:
        sanitize: 'true' to trim and collapse whitespace before validating

    Returns:
        JSON response with the aggregate and per-field verdicts
    """
    if profile_type not in PROFILE_TYPES:
        return _unknown_profile_type(profile_type)

    record = _json_body()
    if request.args.get('sanitize', '').lower() == 'true':
        record = sanitize_form_data(record)

    result = validate_profile(record, profile_type)
    field_state = get_form_validation_state(record, profile_type)

    PROFILE_VALIDATIONS.labels(
        profile_type=profile_type,
        outcome='valid' if result.is_valid else 'invalid',
    ).inc()

    logger.info("Profile validated",
                profile_type=profile_type,
                is_valid=result.is_valid,
                error_count=len(result.errors),
                warning_count=len(result.warnings))

    return format_api_response(
        data={
            'is_valid': result.is_valid,
            'errors': result.errors,
            'warnings': result.warnings,
            'fields': {
                name: {'is_valid': state.is_valid, 'error': state.error}
                for name, state in field_state.items()
            },
        },
        message="Profile is valid" if result.is_valid else "Profile validation failed",
    )


@profiles_bp.route('/profiles/<profile_type>/fields/<field_name>/validate', methods=['POST'])
def validate_profile_field(profile_type: str, field_name: str):
    """Validate one field value as a form would while the user edits it."""
    if profile_type not in PROFILE_TYPES:
        return _unknown_profile_type(profile_type)

    body = FieldValueSchema().load(_json_body())
    field = to_snake_case(field_name)
    result = validate_field_real_time(field, body['value'], profile_type)

    return format_api_response(
        data={
            'field': field,
            'label': field_display_name(field),
            'is_valid': result.is_valid,
            'error': format_validation_error(field, result.error) if result.error else None,
            'warning': result.warning,
        },
        message="Field is valid" if result.is_valid else "Field validation failed",
    )


@profiles_bp.route('/uploads/profile-picture/validate', methods=['POST'])
def validate_picture_upload():
    """Validate profile picture metadata against the configured limits."""
    body = ProfilePictureSchema().load(_json_body())
    result = validate_profile_picture(
        body['content_type'],
        body['size'],
        max_bytes=current_app.config['PROFILE_PICTURE_MAX_BYTES'],
        min_bytes=current_app.config['PROFILE_PICTURE_MIN_BYTES'],
    )
    return format_api_response(
        data=result.model_dump(),
        message="Upload is valid" if result.is_valid else "Upload validation failed",
    )


@profiles_bp.route('/health', methods=['GET'])
def health_check():
    """Service health and version."""
    return format_api_response(
        data={
            'status': 'healthy',
            'version': __version__,
            'environment': current_app.config.get('ENVIRONMENT', 'unknown'),
            'error_reporting_mode': current_app.config.get('ERROR_REPORTING_MODE'),
        },
        message="Service is healthy",
    )


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@profiles_bp.errorhandler(ValidationError)
def handle_validation_error(e):
    """Handle marshmallow validation errors."""
    VALIDATION_ERRORS.labels(endpoint=request.endpoint or 'unknown').inc()
    logger.warning("Request validation failed",
                   endpoint=request.endpoint,
                   validation_errors=e.messages)
    return format_error_response(
        message="Request validation failed",
        error_code="VALIDATION_ERROR",
        details={'validation_errors': e.messages},
        status_code=400,
    )


__all__ = [
    'profiles_bp',
    'FieldValueSchema',
    'ProfilePictureSchema',
]
