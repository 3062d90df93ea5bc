"""
Profile Validation Rule Tables

Static rule tables mapping a profile type and field name to a ValidationRule,
plus the cross-field rules evaluated after per-field validation. The tables are
process-wide constants: they are built once at import time and never mutated.

Profile types:
    developer: freelancer profile (display name, rates, skills, portfolio)
    client: hiring company profile (company details, contact, addresses)
"""

import re
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Tuple, Union

from .models import ValidationRule

PROFILE_TYPES: Tuple[str, ...] = ('developer', 'client')

URL_PATTERN = re.compile(r'^https?://.+')
SKILL_PATTERN = re.compile(r'^[a-zA-Z0-9\s\-_#+]+$')
PORTFOLIO_LINK_FIELDS = ('github', 'linkedin', 'website', 'x')

MAX_SKILLS = 20
MAX_SKILL_LENGTH = 50
MAX_HOURS_PER_WEEK = 168
STANDARD_HOURS_PER_WEEK = 40

CustomResult = Union[bool, str]


# ============================================================================
# CUSTOM FIELD PREDICATES
# ============================================================================

def validate_skills(skills: Any) -> CustomResult:
    if not isinstance(skills, (list, tuple)):
        return 'Skills must be a list'
    if len(skills) > MAX_SKILLS:
        return f'Maximum {MAX_SKILLS} skills allowed'
    if any(not isinstance(skill, str) for skill in skills):
        return 'Each skill must be text'
    if any(len(skill) > MAX_SKILL_LENGTH for skill in skills):
        return f'Each skill must be less than {MAX_SKILL_LENGTH} characters'
    if any(not SKILL_PATTERN.search(skill) for skill in skills):
        return 'Skills can only contain letters, numbers, spaces, hyphens, underscores, #, and +'
    return True


def validate_availability(availability: Any) -> CustomResult:
    if not availability:
        return True
    if not isinstance(availability, Mapping):
        return 'Availability must be an object'
    max_hours = availability.get('max_hours_per_week')
    if not max_hours:
        return True
    if not isinstance(max_hours, (int, float)) or isinstance(max_hours, bool):
        return 'Maximum hours per week must be a number'
    if max_hours < 1 or max_hours > MAX_HOURS_PER_WEEK:
        return f'Maximum hours per week must be between 1 and {MAX_HOURS_PER_WEEK}'
    return True


def validate_portfolio_links(links: Any) -> CustomResult:
    if not links:
        return True
    if not isinstance(links, Mapping):
        return 'Portfolio links must be an object'

    for field in PORTFOLIO_LINK_FIELDS:
        url = links.get(field)
        if url and not URL_PATTERN.search(str(url)):
            return f'{field} URL must be a valid HTTP/HTTPS URL'

    custom_links = links.get('custom_links')
    if isinstance(custom_links, (list, tuple)):
        for link in custom_links:
            if not isinstance(link, Mapping) or not link.get('label') or not link.get('url'):
                return 'Custom portfolio links must have both label and URL'
            if not URL_PATTERN.search(str(link['url'])):
                return 'Custom portfolio link URL must be a valid HTTP/HTTPS URL'

    return True


def _max_length_checks(checks: Tuple[Tuple[str, int, str], ...]) -> Callable[[Any], CustomResult]:
    """Build a predicate enforcing maximum lengths on keys of a nested object."""
    def predicate(value: Any) -> CustomResult:
        if not value:
            return True
        if not isinstance(value, Mapping):
            return 'Value must be an object'
        for key, limit, message in checks:
            item = value.get(key)
            if item and len(str(item)) > limit:
                return message
        return True
    return predicate


validate_location = _max_length_checks((
    ('country', 100, 'Country must be less than 100 characters'),
    ('city', 100, 'City must be less than 100 characters'),
    ('state', 100, 'State must be less than 100 characters'),
))

validate_billing_address = _max_length_checks((
    ('street', 200, 'Street address must be less than 200 characters'),
    ('postal_code', 20, 'Postal code must be less than 20 characters'),
))


# ============================================================================
# RULE TABLES
# ============================================================================

DEVELOPER_RULES: Dict[str, ValidationRule] = {
    'display_name': ValidationRule(
        required=True,
        min_length=2,
        max_length=50,
        pattern=r'^[a-zA-Z0-9\s\-_]+$',
        message='Display name must be 2-50 characters and contain only letters, numbers, '
                'spaces, hyphens, and underscores',
    ),
    'bio': ValidationRule(
        max_length=500,
        message='Bio must be less than 500 characters',
    ),
    'experience': ValidationRule(
        min=0,
        max=50,
        message='Experience must be between 0 and 50 years',
    ),
    'hourly_rate': ValidationRule(
        min=0,
        max=1000,
        message='Hourly rate must be between $0 and $1000',
    ),
    'currency': ValidationRule(
        required=True,
        pattern=r'^[A-Z]{3}$',
        message='Currency must be a 3-letter code (e.g., USD, EUR)',
    ),
    'skills': ValidationRule(custom=validate_skills),
    'availability': ValidationRule(custom=validate_availability),
    'portfolio_links': ValidationRule(custom=validate_portfolio_links),
}

CLIENT_RULES: Dict[str, ValidationRule] = {
    'company_name': ValidationRule(
        required=True,
        min_length=2,
        max_length=100,
        pattern=r'^[a-zA-Z0-9\s\-_&.,()]+$',
        message='Company name must be 2-100 characters and contain only letters, numbers, '
                'spaces, and common punctuation',
    ),
    'company_website': ValidationRule(
        pattern=URL_PATTERN,
        message='Company website must be a valid HTTP/HTTPS URL',
    ),
    'company_size': ValidationRule(
        pattern=r'^(1-10|11-50|51-200|201-500|501-1000|1000\+)$',
        message='Company size must be one of: 1-10, 11-50, 51-200, 201-500, 501-1000, 1000+',
    ),
    'industry': ValidationRule(
        max_length=100,
        message='Industry must be less than 100 characters',
    ),
    'company_description': ValidationRule(
        max_length=1000,
        message='Company description must be less than 1000 characters',
    ),
    'contact_person': ValidationRule(
        required=True,
        min_length=2,
        max_length=100,
        pattern=r"^[a-zA-Z\s\-']+$",
        message='Contact person name must be 2-100 characters and contain only letters, '
                'spaces, hyphens, and apostrophes',
    ),
    'contact_email': ValidationRule(
        required=True,
        pattern=r'^[^\s@]+@[^\s@]+\.[^\s@]+$',
        message='Contact email must be a valid email address',
    ),
    'contact_phone': ValidationRule(
        pattern=r'^[\+]?[1-9][\d]{0,15}$',
        message='Contact phone must be a valid phone number',
    ),
    'location': ValidationRule(custom=validate_location),
    'billing_address': ValidationRule(custom=validate_billing_address),
}

PROFILE_VALIDATION_RULES: Dict[str, Dict[str, ValidationRule]] = {
    'developer': DEVELOPER_RULES,
    'client': CLIENT_RULES,
}


# ============================================================================
# CROSS-FIELD RULES
# ============================================================================

class CrossFieldRule(NamedTuple):
    """
    Predicate over a whole record evaluated after per-field validation.

    A triggered blocking rule adds an error and invalidates the record; a
    non-blocking rule only adds a warning.
    """
    name: str
    predicate: Callable[[Mapping[str, Any]], bool]
    message: str
    blocking: bool = True


def _rate_without_currency(record: Mapping[str, Any]) -> bool:
    rate = record.get('hourly_rate')
    return isinstance(rate, (int, float)) and not isinstance(rate, bool) and rate > 0 \
        and not record.get('currency')


def _long_working_week(record: Mapping[str, Any]) -> bool:
    availability = record.get('availability')
    if not isinstance(availability, Mapping):
        return False
    max_hours = availability.get('max_hours_per_week')
    return isinstance(max_hours, (int, float)) and max_hours > STANDARD_HOURS_PER_WEEK


def _website_without_company_name(record: Mapping[str, Any]) -> bool:
    return bool(record.get('company_website')) and not record.get('company_name')


CROSS_FIELD_RULES: Dict[str, List[CrossFieldRule]] = {
    'developer': [
        CrossFieldRule(
            'hourly_rate_requires_currency',
            _rate_without_currency,
            'Currency is required when setting an hourly rate',
        ),
        CrossFieldRule(
            'long_working_week',
            _long_working_week,
            'Working more than 40 hours per week may affect work-life balance',
            blocking=False,
        ),
    ],
    'client': [
        CrossFieldRule(
            'website_without_company_name',
            _website_without_company_name,
            'Consider adding a company name when providing a website',
            blocking=False,
        ),
    ],
}


def get_rules(profile_type: str) -> Dict[str, ValidationRule]:
    """
    Return the rule table for a profile type.

    Raises:
        ValueError: If the profile type is not one of PROFILE_TYPES
    """
    try:
        return PROFILE_VALIDATION_RULES[profile_type]
    except KeyError:
        raise ValueError(
            f"Unknown profile type '{profile_type}'. Expected one of: {', '.join(PROFILE_TYPES)}"
        ) from None


__all__ = [
    'PROFILE_TYPES',
    'PROFILE_VALIDATION_RULES',
    'DEVELOPER_RULES',
    'CLIENT_RULES',
    'CROSS_FIELD_RULES',
    'CrossFieldRule',
    'get_rules',
    'validate_skills',
    'validate_availability',
    'validate_portfolio_links',
    'validate_location',
    'validate_billing_address',
]
