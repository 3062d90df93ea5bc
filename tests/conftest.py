"""
Global pytest Configuration and Fixtures

Shared fixtures for the unit test suite:
- Flask application and test client built from TestingConfig
- Sample developer and client profile records (valid by default)
- Recording error logger capturing every ErrorInfo handed to it
- Non-blocking fake sleeps recording retry backoff delays
"""

from typing import Any, Dict, List

import pytest
from flask import Flask
from flask.testing import FlaskClient

from hireguard.app import create_app
from hireguard.business.models import ErrorContext, ErrorInfo
from hireguard.integrations.loggers import ErrorLogger
from hireguard.integrations.retry import set_default_error_handler


class RecordingErrorLogger(ErrorLogger):
    """ErrorLogger keeping every logged ErrorInfo in memory."""

    def __init__(self):
        self.entries: List[ErrorInfo] = []
        self.successes: List[ErrorContext] = []

    def log(self, info: ErrorInfo) -> None:
        self.entries.append(info)

    def log_success(self, context: ErrorContext) -> None:
        self.successes.append(context)

    @property
    def actions(self) -> List[str]:
        return [entry.context.action for entry in self.entries]


class FakeSleep:
    """Records requested delays instead of sleeping."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FakeSyncSleep:
    def __init__(self):
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def app() -> Flask:
    """Flask application configured for testing."""
    application = create_app('testing')
    application.config.update(TESTING=True)
    return application


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def recording_logger() -> RecordingErrorLogger:
    return RecordingErrorLogger()


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def fake_sync_sleep() -> FakeSyncSleep:
    return FakeSyncSleep()


@pytest.fixture(autouse=True)
def reset_default_error_handler():
    """Keep the process-wide error handler isolated between tests."""
    set_default_error_handler(None)
    yield
    set_default_error_handler(None)


@pytest.fixture
def developer_profile() -> Dict[str, Any]:
    return {
        'display_name': 'Ada Dev',
        'bio': 'Backend engineer focused on data pipelines.',
        'experience': 7,
        'hourly_rate': 85,
        'currency': 'USD',
        'skills': ['Python', 'C#', 'C++', 'machine-learning'],
        'availability': {'max_hours_per_week': 30},
        'portfolio_links': {
            'github': 'https://github.com/ada',
            'website': 'https://ada.dev',
            'custom_links': [{'label': 'Blog', 'url': 'https://blog.ada.dev'}],
        },
    }


@pytest.fixture
def client_profile() -> Dict[str, Any]:
    return {
        'company_name': 'Acme & Sons, Inc.',
        'company_website': 'https://acme.example.com',
        'company_size': '11-50',
        'industry': 'Manufacturing',
        'company_description': 'We build anvils.',
        'contact_person': "Wile O'Coyote",
        'contact_email': 'wile@acme.example.com',
        'contact_phone': '+15551234567',
        'location': {'country': 'US', 'city': 'Phoenix', 'state': 'AZ'},
        'billing_address': {'street': '1 Desert Road', 'postal_code': '85001'},
    }
