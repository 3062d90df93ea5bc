"""
Unit tests for FormValidationSession.
"""

import pytest

from hireguard.business.forms import (
    FieldProps,
    FormValidationSession,
    client_profile_session,
    developer_profile_session,
)

DISPLAY_NAME_MESSAGE = (
    'Display name must be 2-50 characters and contain only letters, numbers, '
    'spaces, hyphens, and underscores'
)


@pytest.fixture
def session():
    return developer_profile_session()


class TestFieldEvents:

    def test_blur_records_result_and_touches_field(self, session):
        session.handle_field_blur('displayName', 'J')

        assert session.is_field_touched('display_name') is True
        assert session.get_field_error('displayName') == DISPLAY_NAME_MESSAGE
        assert session.is_field_valid('displayName') is False
        assert session.has_errors is True

    def test_change_replaces_previous_result(self, session):
        session.handle_field_change('displayName', 'J')
        session.handle_field_change('displayName', 'Jo')

        assert session.get_field_error('displayName') is None
        assert session.is_valid is True

    def test_blur_disabled(self):
        session = FormValidationSession('developer', validate_on_blur=False)

        session.handle_field_blur('displayName', 'J')

        assert session.is_field_touched('displayName') is False
        assert session.validation_state == {}

    def test_change_disabled(self):
        session = FormValidationSession('developer', validate_on_change=False)

        session.handle_field_change('displayName', 'J')
        result = session.validate_field('displayName', 'J')

        assert result.is_valid is False
        assert session.validation_state == {}

    def test_untouched_fields_default_to_valid(self, session):
        assert session.is_field_valid('bio') is True
        assert session.get_field_error('bio') is None
        assert session.get_field_warning('bio') is None

    def test_field_props(self, session):
        session.handle_field_blur('currency', 'usd')

        props = session.field_props('currency')

        assert isinstance(props, FieldProps)
        assert props.has_error is True
        assert props.has_warning is False
        assert props.is_touched is True
        assert props.is_valid is False


class TestFormValidation:

    def test_validate_all_fields(self, session, developer_profile):
        developer_profile['bio'] = 'x' * 600

        session.validate_all_fields(developer_profile)

        assert session.errors == ['Bio must be less than 500 characters']
        assert 'display_name' in session.validation_state

    def test_validate_form_includes_cross_field_rules(self, session):
        result = session.validate_form({'displayName': 'Ada', 'hourlyRate': 10})

        assert result.errors == ['Currency is required when setting an hourly rate']
        # per-field state has no entry for a cross-field rule
        assert session.is_valid is True

    def test_empty_form(self, session):
        assert session.validate_form({}).is_valid is True
        assert session.can_submit({}) is False
        assert session.get_submission_errors(None) == []

    def test_can_submit(self, session, developer_profile):
        assert session.can_submit(developer_profile) is True

        developer_profile['currency'] = 'dollars'

        assert session.can_submit(developer_profile) is False
        assert session.get_submission_errors(developer_profile) == [
            'Currency must be a 3-letter code (e.g., USD, EUR)'
        ]

    def test_sanitize_and_validate(self, session):
        sanitized, result = session.sanitize_and_validate({
            'display_name': '   Ada    Lovelace  ',
            'currency': ' USD ',
        })

        assert sanitized == {'display_name': 'Ada Lovelace', 'currency': 'USD'}
        assert result.is_valid is True

    def test_clear_single_field(self, session):
        session.handle_field_blur('displayName', 'J')
        session.handle_field_blur('currency', 'usd')

        session.clear_validation('displayName')

        assert session.get_field_error('displayName') is None
        assert session.is_field_touched('displayName') is False
        assert session.get_field_error('currency') is not None

    def test_clear_everything(self, session):
        session.handle_field_blur('displayName', 'J')

        session.clear_validation()

        assert session.validation_state == {}
        assert session.is_field_touched('displayName') is False


class TestSessionFactories:

    def test_client_session_uses_client_rules(self):
        session = client_profile_session()

        session.handle_field_blur('contactEmail', 'nope')

        assert session.get_field_error('contactEmail') == 'Contact email must be a valid email address'

    def test_unknown_profile_type(self):
        with pytest.raises(ValueError):
            FormValidationSession('agency')
