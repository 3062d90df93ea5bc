"""
Unit tests for the HTTP API.

Exercises the profile validation, upload validation, health and error
collection endpoints through the Flask test client.
"""

from unittest.mock import Mock

import pytest

from hireguard.blueprints import errors as errors_blueprint

DISPLAY_NAME_MESSAGE = (
    'Display name must be 2-50 characters and contain only letters, numbers, '
    'spaces, hyphens, and underscores'
)


class TestProfileValidationEndpoint:

    def test_valid_developer_profile(self, client, developer_profile):
        response = client.post('/api/v1/profiles/developer/validate', json=developer_profile)

        assert response.status_code == 200
        body = response.get_json()
        assert body['success'] is True
        assert body['data']['is_valid'] is True
        assert body['data']['errors'] == []
        assert body['data']['fields']['display_name'] == {'is_valid': True, 'error': None}

    def test_invalid_profile_is_still_200(self, client):
        response = client.post('/api/v1/profiles/developer/validate',
                               json={'displayName': 'J', 'hourlyRate': 10})

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['is_valid'] is False
        assert DISPLAY_NAME_MESSAGE in data['errors']
        assert 'Currency is required when setting an hourly rate' in data['errors']
        assert data['fields']['display_name']['is_valid'] is False

    def test_valid_client_profile(self, client, client_profile):
        response = client.post('/api/v1/profiles/client/validate', json=client_profile)

        assert response.get_json()['data']['is_valid'] is True

    def test_sanitize_query_parameter(self, client):
        record = {'displayName': '   Ada     Lovelace   ', 'currency': ' USD '}

        plain = client.post('/api/v1/profiles/developer/validate', json=record)
        sanitized = client.post('/api/v1/profiles/developer/validate?sanitize=true', json=record)

        assert plain.get_json()['data']['is_valid'] is False
        assert sanitized.get_json()['data']['is_valid'] is True

    def test_unknown_profile_type(self, client):
        response = client.post('/api/v1/profiles/agency/validate', json={})

        assert response.status_code == 404
        body = response.get_json()
        assert body['success'] is False
        assert body['error_code'] == 'UNKNOWN_PROFILE_TYPE'
        assert body['details']['supported_profile_types'] == ['developer', 'client']

    @pytest.mark.parametrize('payload', [[1, 2], 'text', None])
    def test_body_must_be_object(self, client, payload):
        response = client.post('/api/v1/profiles/developer/validate', json=payload)

        assert response.status_code == 400
        body = response.get_json()
        assert body['error_code'] == 'VALIDATION_ERROR'
        assert body['details']['validation_errors'] == {'_schema': ['Request body must be a JSON object']}


class TestFieldValidationEndpoint:

    def test_camel_case_field(self, client):
        response = client.post('/api/v1/profiles/developer/fields/displayName/validate',
                               json={'value': 'J'})

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['field'] == 'display_name'
        assert data['label'] == 'Display Name'
        assert data['is_valid'] is False
        assert data['error'] == DISPLAY_NAME_MESSAGE

    def test_valid_value(self, client):
        response = client.post('/api/v1/profiles/client/fields/contact_email/validate',
                               json={'value': 'wile@acme.example.com'})

        data = response.get_json()['data']
        assert data['is_valid'] is True
        assert data['error'] is None

    def test_null_value_is_allowed(self, client):
        response = client.post('/api/v1/profiles/developer/fields/bio/validate', json={'value': None})

        assert response.get_json()['data']['is_valid'] is True

    def test_missing_value(self, client):
        response = client.post('/api/v1/profiles/developer/fields/bio/validate', json={})

        assert response.status_code == 400
        assert 'value' in response.get_json()['details']['validation_errors']


class TestProfilePictureEndpoint:

    def test_valid_upload(self, client):
        response = client.post('/api/v1/uploads/profile-picture/validate',
                               json={'content_type': 'image/png', 'size': 200 * 1024})

        assert response.get_json()['data'] == {'is_valid': True, 'errors': [], 'warnings': []}

    def test_invalid_upload(self, client):
        response = client.post('/api/v1/uploads/profile-picture/validate',
                               json={'content_type': 'image/gif', 'size': 10 * 1024 * 1024})

        data = response.get_json()['data']
        assert data['is_valid'] is False
        assert data['errors'] == [
            'Profile picture must be a JPEG, PNG, or WebP image',
            'Profile picture must be less than 5MB',
        ]

    def test_small_upload_warns(self, client):
        response = client.post('/api/v1/uploads/profile-picture/validate',
                               json={'content_type': 'image/jpeg', 'size': 100})

        data = response.get_json()['data']
        assert data['is_valid'] is True
        assert data['warnings'] == ['Profile picture should be at least 100x100 pixels for best quality']

    def test_size_must_be_integer(self, client):
        response = client.post('/api/v1/uploads/profile-picture/validate',
                               json={'content_type': 'image/png', 'size': '2048'})

        assert response.status_code == 400
        assert 'size' in response.get_json()['details']['validation_errors']


class TestErrorCollectionEndpoint:

    def test_accepts_report_and_recomputes_severity(self, client):
        response = client.post('/api/errors', json={
            'type': 'authentication',
            'severity': 'LOW',
            'message': 'HTTP 401',
            'context': {'action': 'profile_fetch_attempt_1', 'attempt': 1},
        })

        assert response.status_code == 202
        assert response.get_json()['data'] == {'type': 'AUTHENTICATION', 'severity': 'HIGH'}

    def test_camel_case_context_keys(self, client, monkeypatch):
        sink = Mock()
        monkeypatch.setattr(errors_blueprint, 'ingest_logger', sink)

        response = client.post('/api/errors', json={
            'type': 'NETWORK',
            'message': 'down',
            'context': {'userId': 'u1', 'profileId': 'p9', 'formData': {'displayName': 'Ada'}},
        })

        assert response.status_code == 202
        context = sink.log.call_args.args[0].context
        assert context.user_id == 'u1'
        assert context.profile_id == 'p9'
        assert context.form_data == {'displayName': 'Ada'}

    def test_rejects_unknown_type(self, client):
        response = client.post('/api/errors', json={'type': 'BOGUS', 'message': 'x'})

        assert response.status_code == 400
        assert 'type' in response.get_json()['details']['validation_errors']

    def test_rejects_missing_message(self, client):
        response = client.post('/api/errors', json={'type': 'NETWORK'})

        assert response.status_code == 400
        assert 'message' in response.get_json()['details']['validation_errors']

    def test_rejects_malformed_context(self, client):
        response = client.post('/api/errors', json={
            'type': 'NETWORK',
            'message': 'down',
            'context': {'attempt': 'first'},
        })

        assert response.status_code == 400
        assert response.get_json()['error_code'] == 'INVALID_CONTEXT'


class TestApplicationPlumbing:

    def test_health(self, client):
        response = client.get('/api/v1/health')

        data = response.get_json()['data']
        assert data['status'] == 'healthy'
        assert data['environment'] == 'testing'
        assert data['error_reporting_mode'] == 'console'

    def test_correlation_id_is_echoed(self, client):
        response = client.get('/api/v1/health', headers={'X-Correlation-ID': 'abc-123'})

        assert response.headers['X-Correlation-ID'] == 'abc-123'

    def test_correlation_id_is_generated(self, client):
        response = client.get('/api/v1/health')

        assert len(response.headers['X-Correlation-ID']) == 32

    def test_not_found_uses_error_envelope(self, client):
        response = client.get('/api/v1/nope', headers={'X-Correlation-ID': 'abc-123'})

        assert response.status_code == 404
        body = response.get_json()
        assert body['error_code'] == 'NOT_FOUND'
        assert body['correlation_id'] == 'abc-123'

    def test_metrics(self, client, developer_profile):
        client.post('/api/v1/profiles/developer/validate', json=developer_profile)

        response = client.get('/metrics')

        assert response.status_code == 200
        assert b'hireguard_profile_validations_total' in response.data

    def test_error_handler_is_attached(self, app):
        handler = app.extensions['hireguard']['error_handler']

        assert handler.retry_delay == 0.0
