"""
Patient endpoints: listing, admission, updates, deletion and notes.
"""
from datetime import timedelta

import pytest
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from clinic.models import Appointment, AuditEvent, Case, Patient, VisitNote

pytestmark = pytest.mark.django_db


def test_create_without_admission_has_no_case(api_client, create_patient, user_id):
    body = create_patient()
    assert body['initial_case'] is None
    assert body['gender'] == 'Unknown'
    patient = Patient.objects.get(pk=body['id'])
    assert patient.user_id == user_id
    assert not Case.objects.exists()


def test_create_with_admission_opens_active_case(create_patient):
    before = timezone.now()
    body = create_patient(diagnosis='Pneumonia', attachment_url='patients/ada/xray.png')
    case = body['initial_case']
    assert case['status'] == 'Active'
    assert case['admit_type'] == 'Routine'
    assert case['diagnosis'] == 'Pneumonia'
    assert case['attachment_path'] == 'patients/ada/xray.png'
    assert case['patient_id'] == body['id']
    started = parse_datetime(case['started_at'])
    assert before - timedelta(seconds=5) <= started <= timezone.now() + timedelta(seconds=5)


def test_admit_reason_alone_opens_one_routine_case(create_patient):
    body = create_patient(admit_reason='Chest pain')
    cases = Case.objects.filter(patient_id=body['id'])
    assert cases.count() == 1
    case = cases.get()
    assert case.status == Case.STATUS_ACTIVE
    assert case.admit_type == Case.ADMIT_ROUTINE
    assert case.admit_reason == 'Chest pain'
    assert body['initial_case']['id'] == str(case.id)


def test_create_accepts_js_timestamp_dob(create_patient):
    body = create_patient(dob='1990-04-01T00:00:00.000Z')
    assert body['dob'] == '1990-04-01'


def test_create_rolls_back_patient_when_case_fails(api_client, monkeypatch):
    from clinic.services import patients as service

    real_create = service.log_action

    def failing(**kwargs):
        if kwargs['action'] == 'case.create':
            raise RuntimeError('case insert failed')
        return real_create(**kwargs)

    monkeypatch.setattr(service, 'log_action', failing)
    resp = api_client.post('/api/patients', {
        'first_name': 'Alan', 'last_name': 'Turing', 'dob': '1972-06-23', 'admit_reason': 'Chest pain',
    }, format='json')
    assert resp.status_code == 500
    assert resp.json()['error']['code'] == 'server_error'
    assert not Patient.objects.exists()


def test_missing_required_fields_lists_every_field(api_client):
    resp = api_client.post('/api/patients', {'email': 'nope'}, format='json')
    assert resp.status_code == 400
    error = resp.json()['error']
    assert error['code'] == 'validation_error'
    fields = {d['field'] for d in error['details']}
    assert {'first_name', 'last_name', 'dob', 'email'} <= fields


def test_names_are_sanitised(create_patient):
    body = create_patient(first_name='  <b>Grace</b> ', last_name='Hopper<script>x</script>')
    assert body['first_name'] == 'Grace'
    assert '<' not in body['last_name']


def test_list_paginates_newest_first(api_client, create_patient):
    ids = [create_patient(first_name=f'P{i}')['id'] for i in range(7)]
    page1 = api_client.get('/api/patients?page=1&limit=5').json()
    page2 = api_client.get('/api/patients?page=2&limit=5').json()
    assert page1['pagination'] == {'page': 1, 'limit': 5, 'total': 7, 'totalPages': 2}
    assert len(page1['data']) == 5
    assert len(page2['data']) == 2
    assert [p['id'] for p in page1['data'] + page2['data']] == list(reversed(ids))


def test_page_past_end_is_empty(api_client, create_patient):
    create_patient()
    body = api_client.get('/api/patients?page=9').json()
    assert body['data'] == []
    assert body['pagination']['total'] == 1


def test_invalid_page_is_rejected(api_client):
    resp = api_client.get('/api/patients?page=0')
    assert resp.status_code == 400
    assert resp.json()['error']['details'][0]['field'] == 'page'


def test_search_is_case_insensitive_over_both_names(api_client, create_patient):
    create_patient(first_name='Maria', last_name='Smith')
    create_patient(first_name='John', last_name='Marino')
    create_patient(first_name='Zoe', last_name='Quinn')
    body = api_client.get('/api/patients?search=MAR').json()
    assert sorted(p['first_name'] for p in body['data']) == ['John', 'Maria']


@pytest.mark.parametrize('term', ['jane', 'DOE', 'ane do'])
def test_search_matches_across_first_and_last_name(api_client, create_patient, term):
    jane = create_patient(first_name='Jane', last_name='Doe')
    create_patient(first_name='Janet', last_name='Smith')
    body = api_client.get('/api/patients', {'search': term}).json()
    assert jane['id'] in [p['id'] for p in body['data']]
    if term != 'jane':
        assert body['pagination']['total'] == 1


def test_status_filter_all_means_no_filter(api_client, create_patient):
    a = create_patient()
    create_patient()
    api_client.patch(f"/api/patients/{a['id']}/status", {'status': 'Critical'}, format='json')
    assert api_client.get('/api/patients?status=All').json()['pagination']['total'] == 2
    only = api_client.get('/api/patients?status=Critical').json()
    assert [p['id'] for p in only['data']] == [a['id']]


def test_other_practitioner_sees_404(api_client, other_client, create_patient):
    pid = create_patient()['id']
    for method, path in [
        ('get', f'/api/patients/{pid}'),
        ('get', f'/api/patients/{pid}/profile'),
        ('put', f'/api/patients/{pid}'),
        ('delete', f'/api/patients/{pid}'),
    ]:
        resp = getattr(other_client, method)(path, {}, format='json')
        assert resp.status_code == 404, path
        assert resp.json()['error']['code'] == 'not_found'
    assert other_client.get('/api/patients').json()['data'] == []
    assert Patient.objects.filter(pk=pid).exists()


def test_update_leaves_omitted_fields(api_client, create_patient):
    p = create_patient(phone='555-0100', allergies='Penicillin')
    resp = api_client.put(f"/api/patients/{p['id']}", {'phone': '555-0199'}, format='json')
    assert resp.status_code == 200
    body = resp.json()
    assert body['phone'] == '555-0199'
    assert body['allergies'] == 'Penicillin'
    assert body['first_name'] == 'Ada'
    assert body['gender'] == 'Unknown'


def test_update_ignores_status(api_client, create_patient):
    p = create_patient()
    api_client.put(f"/api/patients/{p['id']}", {'status': 'Discharged'}, format='json')
    assert Patient.objects.get(pk=p['id']).status is None


def test_legacy_status_is_deprecated_and_guarded(api_client, create_patient):
    p = create_patient()
    url = f"/api/patients/{p['id']}/status"
    resp = api_client.patch(url, {'status': 'Discharged'}, format='json')
    assert resp.status_code == 200
    assert resp['Deprecation'] == 'true'
    assert '/api/cases' in resp['Link']
    resp = api_client.patch(url, {'status': 'Critical'}, format='json')
    assert resp.status_code == 400
    assert resp.json()['error']['code'] == 'invalid_transition'
    assert Patient.objects.get(pk=p['id']).status == 'Discharged'


def test_delete_cascades(api_client, create_patient, create_case, create_appointment):
    p = create_patient()
    case = create_case(p['id'])
    appt = create_appointment(p['id'], case_id=case['id'])
    api_client.post(f"/api/patients/{p['id']}/notes", {'note': 'seen', 'appointment_id': appt['id']}, format='json')
    resp = api_client.delete(f"/api/patients/{p['id']}")
    assert resp.status_code == 204
    assert not Case.objects.exists()
    assert not Appointment.objects.exists()
    assert not VisitNote.objects.exists()
    assert AuditEvent.objects.filter(action='patient.delete', object_id=p['id']).exists()


def test_profile_nests_everything_newest_first(api_client, create_patient, create_case, create_appointment):
    p = create_patient()
    case = create_case(p['id'])
    early = create_appointment(p['id'], scheduled_at='2030-01-01T09:00:00Z', case_id=case['id'])
    late = create_appointment(p['id'], scheduled_at='2030-02-01T09:00:00Z')
    api_client.post(f"/api/patients/{p['id']}/notes", {'note': 'first', 'appointment_id': early['id']}, format='json')
    api_client.post(f"/api/patients/{p['id']}/notes", {'note': 'second'}, format='json')

    body = api_client.get(f"/api/patients/{p['id']}/profile").json()
    assert body['patient']['id'] == p['id']
    assert [a['id'] for a in body['appointments']] == [late['id'], early['id']]
    assert body['appointments'][0]['case'] is None
    assert body['appointments'][1]['case']['id'] == case['id']
    assert [c['id'] for c in body['cases']] == [case['id']]
    assert [n['note'] for n in body['notes']] == ['second', 'first']
    linked = body['notes'][1]
    assert linked['appointment']['id'] == early['id']
    assert linked['case']['id'] == case['id']


def test_note_inherits_case_from_appointment(api_client, create_patient, create_case, create_appointment):
    p = create_patient()
    case = create_case(p['id'])
    appt = create_appointment(p['id'], case_id=case['id'])
    resp = api_client.post(f"/api/patients/{p['id']}/notes", {'note': 'BP ok', 'appointment_id': appt['id']},
                           format='json')
    assert resp.status_code == 201
    assert resp.json()['case_id'] == case['id']


def test_note_with_foreign_appointment_is_404(api_client, create_patient, create_appointment):
    a = create_patient()
    b = create_patient(first_name='Bob')
    appt_b = create_appointment(b['id'])
    resp = api_client.post(f"/api/patients/{a['id']}/notes", {'note': 'x', 'appointment_id': appt_b['id']},
                           format='json')
    assert resp.status_code == 404
    assert not VisitNote.objects.exists()


def test_note_must_not_be_empty(api_client, create_patient):
    p = create_patient()
    resp = api_client.post(f"/api/patients/{p['id']}/notes", {'note': ''}, format='json')
    assert resp.status_code == 400
    assert resp.json()['error']['details'][0]['field'] == 'note'
