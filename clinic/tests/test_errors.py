import pytest
from rest_framework.exceptions import ErrorDetail

from clinic.exceptions import flatten_errors

pytestmark = pytest.mark.django_db


def test_flatten_nested_detail():
    detail = {
        'name': [ErrorDetail('This field is required.', code='required')],
        'address': {'city': [ErrorDetail('Too long.', code='max_length')]},
        'items': [{}, {'qty': [ErrorDetail('Must be positive.', code='min_value')]}],
        'non_field_errors': [ErrorDetail('Bad combination.', code='invalid')],
    }
    assert flatten_errors(detail) == [
        {'field': 'name', 'message': 'This field is required.'},
        {'field': 'address.city', 'message': 'Too long.'},
        {'field': 'items[1].qty', 'message': 'Must be positive.'},
        {'field': 'non_field_errors', 'message': 'Bad combination.'},
    ]


def _boom(monkeypatch):
    def explode(scope):
        raise RuntimeError('connection reset by peer')

    monkeypatch.setattr('clinic.views.patients.dashboard_stats', explode)


def test_server_error_is_redacted_by_default(api_client, monkeypatch, settings):
    settings.EXPOSE_UPSTREAM_ERRORS = False
    _boom(monkeypatch)
    resp = api_client.get('/api/patients/stats')
    assert resp.status_code == 500
    assert resp.json() == {'ok': False, 'error': {'code': 'server_error', 'message': 'Internal server error'}}


def test_server_error_can_expose_upstream_message(api_client, monkeypatch, settings):
    settings.EXPOSE_UPSTREAM_ERRORS = True
    _boom(monkeypatch)
    resp = api_client.get('/api/patients/stats')
    assert resp.json()['error']['message'] == 'connection reset by peer'


def test_unknown_route_id_shape_is_404(api_client):
    assert api_client.get('/api/patients/123').status_code == 404
