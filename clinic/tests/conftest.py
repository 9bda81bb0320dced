import time
import uuid

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.state import token_backend


def make_token(sub=None, role='authenticated', expires_in=3600, **claims):
    payload = {'sub': str(sub or uuid.uuid4()), 'role': role, 'exp': int(time.time()) + expires_in}
    payload.update(claims)
    return token_backend.encode(payload)


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def other_user_id():
    return uuid.uuid4()


def _client_for(sub):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {make_token(sub)}')
    return client


@pytest.fixture
def api_client(user_id):
    return _client_for(user_id)


@pytest.fixture
def other_client(other_user_id):
    return _client_for(other_user_id)


@pytest.fixture
def create_patient(api_client):
    def _create(**overrides):
        body = {'first_name': 'Ada', 'last_name': 'Lovelace', 'dob': '1985-12-10'}
        body.update(overrides)
        resp = api_client.post('/api/patients', body, format='json')
        assert resp.status_code == 201, resp.content
        return resp.json()
    return _create


@pytest.fixture
def create_case(api_client, create_patient):
    def _create(patient_id=None, **overrides):
        body = {'patient_id': patient_id or create_patient()['id'], 'diagnosis': 'Asthma'}
        body.update(overrides)
        resp = api_client.post('/api/cases', body, format='json')
        assert resp.status_code == 201, resp.content
        return resp.json()
    return _create


@pytest.fixture
def create_appointment(api_client):
    def _create(patient_id, **overrides):
        body = {'patient_id': patient_id, 'scheduled_at': '2030-01-15T09:30:00Z', 'reason': 'Follow-up'}
        body.update(overrides)
        resp = api_client.post('/api/appointments', body, format='json')
        assert resp.status_code == 201, resp.content
        return resp.json()
    return _create


@pytest.fixture
def token_for():
    return make_token
