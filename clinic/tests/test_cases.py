import pytest

from clinic.models import Appointment, Case, VisitNote

pytestmark = pytest.mark.django_db


def test_create_defaults_and_embedded_patient(create_patient, create_case):
    p = create_patient()
    case = create_case(p['id'])
    assert case['status'] == 'Active'
    assert case['admit_type'] == 'Routine'
    assert case['patient'] == {'id': p['id'], 'first_name': 'Ada', 'last_name': 'Lovelace', 'dob': '1985-12-10'}


def test_create_for_foreign_patient_is_field_error(api_client, other_client, create_patient):
    p = create_patient()
    resp = other_client.post('/api/cases', {'patient_id': p['id']}, format='json')
    assert resp.status_code == 400
    details = resp.json()['error']['details']
    assert details[0]['field'] == 'patient_id'
    assert not Case.objects.exists()


def test_unknown_status_is_rejected_citing_status(api_client, create_patient):
    p = create_patient()
    resp = api_client.post('/api/cases', {'patient_id': p['id'], 'status': 'Archived'}, format='json')
    assert resp.status_code == 400
    assert [d['field'] for d in resp.json()['error']['details']] == ['status']


def test_list_filters(api_client, create_patient, create_case):
    p = create_patient()
    q = create_patient(first_name='Quinn')
    create_case(p['id'], status='Active', diagnosis='Asthma attack')
    create_case(p['id'], status='Upcoming', admit_type='Emergency', admit_reason='Fall', diagnosis='Sprain')
    create_case(q['id'], status='Closed', diagnosis='Flu')

    def total(qs):
        resp = api_client.get(f'/api/cases?{qs}')
        assert resp.status_code == 200, resp.content
        return resp.json()['pagination']['total']

    assert total('') == 3
    assert total('status=All') == 3
    assert total('status=Open') == 2
    assert total('status=Closed') == 1
    assert total('admit_type=Emergency') == 1
    assert total('admit_type=All') == 3
    assert total(f"patient_id={q['id']}") == 1
    assert total('search=asthma') == 1
    assert total('search=FALL') == 1


def test_list_orders_by_started_at_desc(api_client, create_patient, create_case):
    p = create_patient()
    old = create_case(p['id'], started_at='2024-01-01T00:00:00Z')
    new = create_case(p['id'], started_at='2025-01-01T00:00:00Z')
    data = api_client.get('/api/cases').json()['data']
    assert [c['id'] for c in data] == [new['id'], old['id']]


def test_read_includes_appointments_and_notes(api_client, create_patient, create_case, create_appointment):
    p = create_patient()
    case = create_case(p['id'])
    appt = create_appointment(p['id'], case_id=case['id'])
    api_client.post(f"/api/cases/{case['id']}/notes", {'note': 'stable'}, format='json')
    body = api_client.get(f"/api/cases/{case['id']}").json()
    assert body['case']['id'] == case['id']
    assert [a['id'] for a in body['appointments']] == [appt['id']]
    assert [n['note'] for n in body['notes']] == ['stable']


def test_status_transitions(api_client, create_patient, create_case):
    case = create_case(create_patient()['id'], status='Upcoming')
    url = f"/api/cases/{case['id']}/status"
    assert api_client.patch(url, {'status': 'Active'}, format='json').json()['status'] == 'Active'
    resp = api_client.patch(url, {'status': 'Upcoming'}, format='json')
    assert resp.status_code == 400
    assert resp.json()['error']['code'] == 'invalid_transition'
    assert api_client.patch(url, {'status': 'Closed'}, format='json').status_code == 200
    assert api_client.patch(url, {'status': 'Active'}, format='json').status_code == 200


def test_update_through_put_respects_transitions(api_client, create_patient, create_case):
    case = create_case(create_patient()['id'])
    resp = api_client.put(f"/api/cases/{case['id']}", {'status': 'Upcoming'}, format='json')
    assert resp.status_code == 400
    resp = api_client.put(f"/api/cases/{case['id']}", {'diagnosis': 'Bronchitis', 'attachment_url': 'c/1.pdf'},
                          format='json')
    assert resp.status_code == 200
    body = resp.json()
    assert body['diagnosis'] == 'Bronchitis'
    assert body['attachment_path'] == 'c/1.pdf'
    assert body['status'] == 'Active'


def test_delete_unlinks_appointments_and_drops_notes(api_client, create_patient, create_case, create_appointment):
    p = create_patient()
    case = create_case(p['id'])
    appt = create_appointment(p['id'], case_id=case['id'])
    api_client.post(f"/api/cases/{case['id']}/notes", {'note': 'x'}, format='json')
    assert api_client.delete(f"/api/cases/{case['id']}").status_code == 204
    assert Appointment.objects.get(pk=appt['id']).case_id is None
    assert not VisitNote.objects.exists()


def test_case_note_takes_case_patient(api_client, create_patient, create_case, create_appointment):
    p = create_patient()
    case = create_case(p['id'])
    appt = create_appointment(p['id'], case_id=case['id'])
    resp = api_client.post(f"/api/cases/{case['id']}/notes", {'note': 'ok', 'appointment_id': appt['id']},
                           format='json')
    assert resp.status_code == 201
    body = resp.json()
    assert body['patient_id'] == p['id']
    assert body['case_id'] == case['id']
    assert body['appointment_id'] == appt['id']


def test_case_note_with_appointment_of_other_case_is_404(api_client, create_patient, create_case,
                                                        create_appointment):
    p = create_patient()
    a = create_case(p['id'])
    b = create_case(p['id'])
    appt = create_appointment(p['id'], case_id=b['id'])
    resp = api_client.post(f"/api/cases/{a['id']}/notes", {'note': 'x', 'appointment_id': appt['id']},
                           format='json')
    assert resp.status_code == 404
    assert not VisitNote.objects.exists()


def test_other_practitioner_cannot_touch_case(other_client, create_patient, create_case):
    case = create_case(create_patient()['id'])
    assert other_client.get(f"/api/cases/{case['id']}").status_code == 404
    assert other_client.patch(f"/api/cases/{case['id']}/status", {'status': 'Closed'},
                              format='json').status_code == 404
    assert other_client.delete(f"/api/cases/{case['id']}").status_code == 404
    assert Case.objects.get(pk=case['id']).status == 'Active'


def test_patient_id_resolves_through_request_owner_scope(create_patient, user_id, other_user_id):
    from types import SimpleNamespace

    from clinic.scope import OwnerScope
    from clinic.serializers.case import CaseCreateSerializer

    patient_id = create_patient()['id']
    mine = SimpleNamespace(user=None, _owner_scope=OwnerScope(user_id))
    serializer = CaseCreateSerializer(data={'patient_id': patient_id}, context={'request': mine})
    assert serializer.is_valid(), serializer.errors
    assert str(serializer.validated_data['patient'].id) == patient_id

    theirs = SimpleNamespace(user=None, _owner_scope=OwnerScope(other_user_id))
    serializer = CaseCreateSerializer(data={'patient_id': patient_id}, context={'request': theirs})
    assert not serializer.is_valid()
    assert serializer.errors['patient_id'] == ['Patient not found.']
