"""
Unit tests for the profile validation engine.

Test Coverage Areas:
- Field validator check ordering and default messages
- Rule table messages for developer and client profiles
- Cross-field rules (blocking errors and non-blocking warnings)
- camelCase form keys normalized to rule table field names
- Form state helpers, profile picture checks, sanitization and display formatting
"""

import re

import pytest
from pydantic import ValidationError as PydanticValidationError

from hireguard.business.models import ValidationRule
from hireguard.business.rules import get_rules
from hireguard.business.validators import (
    field_display_name,
    format_validation_error,
    get_form_errors,
    get_form_validation_state,
    get_form_warnings,
    is_empty,
    is_form_valid,
    normalize_field_names,
    sanitize_form_data,
    to_snake_case,
    validate_client_profile,
    validate_developer_profile,
    validate_field,
    validate_field_real_time,
    validate_profile,
    validate_profile_picture,
)

DISPLAY_NAME_RULE = ValidationRule(
    required=True,
    min_length=2,
    max_length=50,
    pattern=r'^[a-zA-Z0-9\s\-_]+$',
)

DISPLAY_NAME_MESSAGE = (
    'Display name must be 2-50 characters and contain only letters, numbers, '
    'spaces, hyphens, and underscores'
)


class TestValidationRule:
    """Rule definitions are immutable plain data."""

    def test_string_pattern_is_compiled(self):
        assert isinstance(DISPLAY_NAME_RULE.pattern, re.Pattern)

    def test_rules_are_frozen(self):
        with pytest.raises(PydanticValidationError):
            DISPLAY_NAME_RULE.required = False

    def test_negative_length_is_rejected(self):
        with pytest.raises(PydanticValidationError):
            ValidationRule(min_length=-1)

    def test_unknown_constraint_is_rejected(self):
        with pytest.raises(PydanticValidationError):
            ValidationRule(minimum=3)


class TestFieldValidator:
    """Check ordering, short-circuiting and default messages of validate_field."""

    def test_valid_display_name(self):
        result = validate_field('displayName', 'Jo', DISPLAY_NAME_RULE)

        assert result.is_valid is True
        assert result.value == 'Jo'
        assert result.error is None

    def test_display_name_too_short(self):
        result = validate_field('displayName', 'J', DISPLAY_NAME_RULE)

        assert result.is_valid is False
        assert result.error == 'displayName must be at least 2 characters'

    @pytest.mark.parametrize('value', [None, '', '   ', '\t\n'])
    def test_required_rejects_empty_values(self, value):
        result = validate_field('currency', value, ValidationRule(required=True))

        assert result.is_valid is False
        assert result.error == 'currency is required'

    def test_required_uses_rule_message(self):
        rule = ValidationRule(required=True, message='Currency must be a 3-letter code')
        result = validate_field('currency', None, rule)

        assert result.error == 'Currency must be a 3-letter code'

    @pytest.mark.parametrize('value', [None, ''])
    def test_optional_empty_value_skips_remaining_checks(self, value):
        rule = ValidationRule(min_length=10, pattern=r'^x+$', custom=lambda v: 'never called')

        result = validate_field('bio', value, rule)

        assert result.is_valid is True
        assert result.error is None

    def test_zero_and_false_are_not_empty(self):
        assert is_empty(0) is False
        assert is_empty(False) is False
        assert is_empty([]) is False
        assert validate_field('experience', 0, ValidationRule(required=True, min=0)).is_valid

    def test_min_length_checked_before_pattern(self):
        result = validate_field('displayName', '!', DISPLAY_NAME_RULE)

        assert result.error == 'displayName must be at least 2 characters'

    def test_max_length_checked_before_pattern(self):
        result = validate_field('displayName', '!' * 51, DISPLAY_NAME_RULE)

        assert result.error == 'displayName must be less than 50 characters'

    def test_pattern_failure(self):
        result = validate_field('displayName', 'Jo!', DISPLAY_NAME_RULE)

        assert result.error == 'displayName format is invalid'

    def test_length_boundaries_are_inclusive(self):
        assert validate_field('displayName', 'ab', DISPLAY_NAME_RULE).is_valid
        assert validate_field('displayName', 'a' * 50, DISPLAY_NAME_RULE).is_valid

    def test_message_with_braces_is_returned_verbatim(self):
        rule = ValidationRule(min_length=3, message='Use at least {min} chars')

        assert validate_field('code', 'ab', rule).error == 'Use at least {min} chars'

    @pytest.mark.parametrize('value,expected', [
        (-1, 'experience must be at least 0'),
        (51, 'experience must be less than 50'),
        (50.5, 'experience must be less than 50'),
    ])
    def test_numeric_range_failures(self, value, expected):
        rule = ValidationRule(min=0, max=50)

        result = validate_field('experience', value, rule)

        assert result.is_valid is False
        assert result.error == expected

    @pytest.mark.parametrize('value', [0, 25, 50, 12.5])
    def test_numeric_range_passes(self, value):
        assert validate_field('experience', value, ValidationRule(min=0, max=50)).is_valid

    def test_booleans_are_not_range_checked(self):
        assert validate_field('flag', True, ValidationRule(min=5)).is_valid

    def test_string_length_rules_ignore_numbers(self):
        assert validate_field('rate', 123456, ValidationRule(max_length=2)).is_valid

    def test_custom_returning_true_passes(self):
        assert validate_field('tags', ['a'], ValidationRule(custom=lambda v: True)).is_valid

    def test_custom_returning_message_fails_with_message(self):
        result = validate_field('tags', ['a'], ValidationRule(custom=lambda v: 'Too few tags'))

        assert result.is_valid is False
        assert result.error == 'Too few tags'

    @pytest.mark.parametrize('outcome', [False, None, 1, 0])
    def test_custom_returning_anything_else_fails_generically(self, outcome):
        result = validate_field('tags', ['a'], ValidationRule(custom=lambda v: outcome))

        assert result.is_valid is False
        assert result.error == 'tags is invalid'

    def test_custom_runs_after_string_checks(self):
        calls = []
        rule = ValidationRule(min_length=5, custom=lambda v: calls.append(v) or True)

        validate_field('name', 'abc', rule)

        assert calls == []


class TestDeveloperProfileValidation:
    """Developer rule table and cross-field rules."""

    def test_valid_profile(self, developer_profile):
        result = validate_developer_profile(developer_profile)

        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_invalid_display_name_uses_rule_message(self, developer_profile):
        developer_profile['display_name'] = 'J'

        result = validate_developer_profile(developer_profile)

        assert result.is_valid is False
        assert result.errors == [DISPLAY_NAME_MESSAGE]

    def test_camel_case_keys_are_normalized(self):
        result = validate_developer_profile({
            'displayName': 'J',
            'currency': 'USD',
            'hourlyRate': 2000,
            'availability': {'maxHoursPerWeek': 50},
        })

        assert result.errors == [DISPLAY_NAME_MESSAGE, 'Hourly rate must be between $0 and $1000']
        assert result.warnings == ['Working more than 40 hours per week may affect work-life balance']

    def test_unruled_fields_are_ignored(self):
        result = validate_developer_profile({'favorite_color': '!!!', 'currency': 'EUR'})

        assert result.is_valid is True

    def test_hourly_rate_without_currency_is_blocking(self):
        result = validate_developer_profile({'display_name': 'Ada', 'hourly_rate': 50})

        assert result.is_valid is False
        assert result.errors == ['Currency is required when setting an hourly rate']

    def test_zero_hourly_rate_needs_no_currency(self):
        assert validate_developer_profile({'hourly_rate': 0}).is_valid

    def test_long_working_week_is_only_a_warning(self, developer_profile):
        developer_profile['availability'] = {'max_hours_per_week': 45}

        result = validate_developer_profile(developer_profile)

        assert result.is_valid is True
        assert result.warnings == ['Working more than 40 hours per week may affect work-life balance']

    def test_availability_out_of_range(self, developer_profile):
        developer_profile['availability'] = {'max_hours_per_week': 200}

        result = validate_developer_profile(developer_profile)

        assert 'Maximum hours per week must be between 1 and 168' in result.errors

    def test_availability_hours_must_be_numeric(self, developer_profile):
        developer_profile['availability'] = {'max_hours_per_week': 'lots'}

        result = validate_developer_profile(developer_profile)

        assert result.errors == ['Maximum hours per week must be a number']

    def test_lowercase_currency_rejected(self, developer_profile):
        developer_profile['currency'] = 'usd'

        result = validate_developer_profile(developer_profile)

        assert result.errors == ['Currency must be a 3-letter code (e.g., USD, EUR)']

    @pytest.mark.parametrize('skills,expected', [
        ('python', 'Skills must be a list'),
        (['skill'] * 21, 'Maximum 20 skills allowed'),
        (['x' * 51], 'Each skill must be less than 50 characters'),
        (['rust!'], 'Skills can only contain letters, numbers, spaces, hyphens, underscores, #, and +'),
        ([42], 'Each skill must be text'),
    ])
    def test_invalid_skills(self, developer_profile, skills, expected):
        developer_profile['skills'] = skills

        assert validate_developer_profile(developer_profile).errors == [expected]

    def test_invalid_portfolio_link(self, developer_profile):
        developer_profile['portfolio_links'] = {'github': 'ftp://github.com/ada'}

        assert validate_developer_profile(developer_profile).errors == [
            'github URL must be a valid HTTP/HTTPS URL'
        ]

    def test_incomplete_custom_portfolio_link(self, developer_profile):
        developer_profile['portfolio_links'] = {'custom_links': [{'label': 'Blog'}]}

        assert validate_developer_profile(developer_profile).errors == [
            'Custom portfolio links must have both label and URL'
        ]

    def test_bio_too_long(self, developer_profile):
        developer_profile['bio'] = 'x' * 501

        assert validate_developer_profile(developer_profile).errors == [
            'Bio must be less than 500 characters'
        ]


class TestClientProfileValidation:
    """Client rule table and cross-field rules."""

    def test_valid_profile(self, client_profile):
        result = validate_client_profile(client_profile)

        assert result.is_valid is True
        assert result.warnings == []

    @pytest.mark.parametrize('field,value,expected', [
        ('company_website', 'acme.example.com', 'Company website must be a valid HTTP/HTTPS URL'),
        ('company_size', '12-40', 'Company size must be one of: 1-10, 11-50, 51-200, 201-500, 501-1000, 1000+'),
        ('contact_email', 'wile@acme', 'Contact email must be a valid email address'),
        ('contact_phone', '0123', 'Contact phone must be a valid phone number'),
        ('contact_person', 'W1le', 'Contact person name must be 2-100 characters and contain only '
                                   'letters, spaces, hyphens, and apostrophes'),
    ])
    def test_invalid_fields(self, client_profile, field, value, expected):
        client_profile[field] = value

        result = validate_client_profile(client_profile)

        assert result.is_valid is False
        assert result.errors == [expected]

    def test_nested_location_limits(self, client_profile):
        client_profile['location'] = {'city': 'x' * 101}

        assert validate_client_profile(client_profile).errors == ['City must be less than 100 characters']

    def test_billing_postal_code_limit(self, client_profile):
        client_profile['billingAddress'] = {'postalCode': '9' * 21}
        del client_profile['billing_address']

        assert validate_client_profile(client_profile).errors == [
            'Postal code must be less than 20 characters'
        ]

    def test_website_without_company_name_warns(self):
        result = validate_client_profile({'company_website': 'https://acme.example.com'})

        assert result.is_valid is True
        assert result.warnings == ['Consider adding a company name when providing a website']

    def test_unknown_profile_type_raises(self):
        with pytest.raises(ValueError, match="Unknown profile type 'agency'"):
            validate_profile({}, 'agency')

        with pytest.raises(ValueError):
            get_rules('agency')


class TestFormHelpers:
    """Real-time validation and form state helpers."""

    def test_real_time_validation_uses_profile_rules(self):
        result = validate_field_real_time('displayName', 'J', 'developer')

        assert result.error == DISPLAY_NAME_MESSAGE

    def test_real_time_validation_passes_unruled_fields(self):
        assert validate_field_real_time('nickname', '!!!', 'developer').is_valid

    def test_real_time_validation_normalizes_nested_values(self):
        result = validate_field_real_time('availability', {'maxHoursPerWeek': 500}, 'developer')

        assert result.error == 'Maximum hours per week must be between 1 and 168'

    def test_form_validation_state(self):
        state = get_form_validation_state(
            {'displayName': 'J', 'currency': 'USD', 'nickname': 'x'}, 'developer'
        )

        assert set(state) == {'display_name', 'currency'}
        assert is_form_valid(state) is False
        assert get_form_errors(state) == [DISPLAY_NAME_MESSAGE]
        assert get_form_warnings(state) == []

    def test_empty_state_is_valid(self):
        assert is_form_valid({}) is True
        assert get_form_errors({}) == []


class TestProfilePicture:

    def test_valid_picture(self):
        result = validate_profile_picture('IMAGE/PNG', 200 * 1024)

        assert result.is_valid is True
        assert result.warnings == []

    def test_unsupported_type(self):
        result = validate_profile_picture('image/gif', 200 * 1024)

        assert result.errors == ['Profile picture must be a JPEG, PNG, or WebP image']

    def test_too_large(self):
        result = validate_profile_picture('image/jpeg', 6 * 1024 * 1024)

        assert result.errors == ['Profile picture must be less than 5MB']

    def test_tiny_picture_only_warns(self):
        result = validate_profile_picture('image/webp', 512)

        assert result.is_valid is True
        assert result.warnings == ['Profile picture should be at least 100x100 pixels for best quality']

    def test_custom_limits(self):
        result = validate_profile_picture('image/png', 3 * 1024 * 1024, max_bytes=2 * 1024 * 1024)

        assert result.errors == ['Profile picture must be less than 2MB']


class TestSanitizationAndFormatting:

    def test_sanitize_form_data(self):
        sanitized = sanitize_form_data({
            'display_name': '  Ada    Dev ',
            'skills': [' Python ', '', None, 'Go'],
            'hourly_rate': 50,
        })

        assert sanitized == {
            'display_name': 'Ada Dev',
            'skills': ['Python', 'Go'],
            'hourly_rate': 50,
        }

    def test_sanitize_does_not_mutate_input(self):
        data = {'bio': '  hi  '}

        sanitize_form_data(data)

        assert data == {'bio': '  hi  '}

    @pytest.mark.parametrize('name,expected', [
        ('displayName', 'display_name'),
        ('maxHoursPerWeek', 'max_hours_per_week'),
        ('hourly_rate', 'hourly_rate'),
        ('x', 'x'),
    ])
    def test_to_snake_case(self, name, expected):
        assert to_snake_case(name) == expected

    def test_normalize_field_names_is_recursive(self):
        assert normalize_field_names({
            'portfolioLinks': {'customLinks': [{'linkUrl': 'https://a.dev'}]},
        }) == {
            'portfolio_links': {'custom_links': [{'link_url': 'https://a.dev'}]},
        }

    def test_field_display_name(self):
        assert field_display_name('hourly_rate') == 'Hourly Rate'
        assert field_display_name('hourlyRate') == 'Hourly Rate'

    def test_format_validation_error(self):
        assert format_validation_error(
            'hourly_rate', 'hourly_rate must be at least 0'
        ) == 'Hourly Rate must be at least 0'
