"""
Form validation sessions.

A FormValidationSession keeps the per-field validation state of one profile
form while it is being edited: the latest result for every validated field and
the set of fields the user has touched. It is the server-side counterpart of a
client form-validation hook and is owned by a single caller; it is not shared
between requests.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from .models import FieldValidationResult, ValidationResult
from .rules import get_rules
from .validators import (
    get_form_errors,
    get_form_validation_state,
    get_form_warnings,
    is_form_valid,
    sanitize_form_data,
    to_snake_case,
    validate_field_real_time,
    validate_profile,
)


@dataclass(frozen=True)
class FieldProps:
    """Snapshot of one field's validation state for rendering."""
    error: Optional[str]
    warning: Optional[str]
    is_valid: bool
    is_touched: bool

    @property
    def has_error(self) -> bool:
        return bool(self.error)

    @property
    def has_warning(self) -> bool:
        return bool(self.warning)


class FormValidationSession:
    """
    Validation state for a single profile form.

    Args:
        profile_type: 'developer' or 'client'
        validate_on_change: record results from handle_field_change
        validate_on_blur: record results from handle_field_blur

    Example:
        session = FormValidationSession('developer')
        session.handle_field_blur('displayName', 'J')
        session.get_field_error('displayName')
    """

    def __init__(self, profile_type: str, validate_on_change: bool = True,
                 validate_on_blur: bool = True):
        get_rules(profile_type)  # fail fast on unknown profile types
        self.profile_type = profile_type
        self.validate_on_change = validate_on_change
        self.validate_on_blur = validate_on_blur
        self._state: Dict[str, FieldValidationResult] = {}
        self._touched: Set[str] = set()

    # -- aggregate state ----------------------------------------------------

    @property
    def validation_state(self) -> Dict[str, FieldValidationResult]:
        return dict(self._state)

    @property
    def is_valid(self) -> bool:
        return is_form_valid(self._state)

    @property
    def errors(self) -> List[str]:
        return get_form_errors(self._state)

    @property
    def warnings(self) -> List[str]:
        return get_form_warnings(self._state)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    # -- validation actions -------------------------------------------------

    def validate_field(self, field_name: str, value: Any) -> FieldValidationResult:
        """Validate one field without touching it; recorded when validate_on_change is set."""
        result = validate_field_real_time(field_name, value, self.profile_type)
        if self.validate_on_change:
            self._state[to_snake_case(field_name)] = result
        return result

    def validate_all_fields(self, form_data: Optional[Mapping[str, Any]]) -> None:
        """Replace the state with fresh results for every ruled field."""
        if not form_data:
            self._state = {}
            return
        self._state = get_form_validation_state(form_data, self.profile_type)

    def validate_form(self, form_data: Optional[Mapping[str, Any]]) -> ValidationResult:
        """
        Refresh the per-field state and return the full profile result.

        The returned result also includes cross-field rules, which have no
        single field to be recorded against.
        """
        if not form_data:
            return ValidationResult()
        self.validate_all_fields(form_data)
        return validate_profile(form_data, self.profile_type)

    def clear_validation(self, field_name: Optional[str] = None) -> None:
        if field_name is None:
            self._state = {}
            self._touched = set()
            return
        key = to_snake_case(field_name)
        self._state.pop(key, None)
        self._touched.discard(key)

    # -- field accessors ----------------------------------------------------

    def get_field_error(self, field_name: str) -> Optional[str]:
        result = self._state.get(to_snake_case(field_name))
        return result.error if result else None

    def get_field_warning(self, field_name: str) -> Optional[str]:
        result = self._state.get(to_snake_case(field_name))
        return result.warning if result else None

    def is_field_valid(self, field_name: str) -> bool:
        result = self._state.get(to_snake_case(field_name))
        return result.is_valid if result else True

    def is_field_touched(self, field_name: str) -> bool:
        return to_snake_case(field_name) in self._touched

    def field_props(self, field_name: str) -> FieldProps:
        return FieldProps(
            error=self.get_field_error(field_name),
            warning=self.get_field_warning(field_name),
            is_valid=self.is_field_valid(field_name),
            is_touched=self.is_field_touched(field_name),
        )

    # -- submission helpers -------------------------------------------------

    def can_submit(self, form_data: Optional[Mapping[str, Any]]) -> bool:
        if not form_data:
            return False
        return self.validate_form(form_data).is_valid

    def get_submission_errors(self, form_data: Optional[Mapping[str, Any]]) -> List[str]:
        if not form_data:
            return []
        return self.validate_form(form_data).errors

    def sanitize_and_validate(
        self, form_data: Optional[Mapping[str, Any]]
    ) -> Tuple[Dict[str, Any], ValidationResult]:
        """Sanitize the form and validate the sanitized copy."""
        if not form_data:
            return {}, ValidationResult()
        sanitized = sanitize_form_data(form_data)
        return sanitized, self.validate_form(sanitized)

    # -- field events -------------------------------------------------------

    def handle_field_blur(self, field_name: str, value: Any) -> None:
        if not self.validate_on_blur:
            return
        key = to_snake_case(field_name)
        self._touched.add(key)
        self._state[key] = validate_field_real_time(field_name, value, self.profile_type)

    def handle_field_change(self, field_name: str, value: Any) -> None:
        if not self.validate_on_change:
            return
        key = to_snake_case(field_name)
        self._touched.add(key)
        self._state[key] = validate_field_real_time(field_name, value, self.profile_type)


def developer_profile_session(**options: Any) -> FormValidationSession:
    return FormValidationSession('developer', **options)


def client_profile_session(**options: Any) -> FormValidationSession:
    return FormValidationSession('client', **options)


__all__ = [
    'FieldProps',
    'FormValidationSession',
    'developer_profile_session',
    'client_profile_session',
]
