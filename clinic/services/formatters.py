"""
JSON shapes returned by the API.

Ids are emitted as strings; dates and timestamps are left to the REST
framework encoder (ISO 8601).
"""
from __future__ import annotations


def _id(value):
    return str(value) if value is not None else None


def patient_summary(p) -> dict:
    return {'id': _id(p.id), 'first_name': p.first_name, 'last_name': p.last_name, 'dob': p.dob}


def case_summary(c) -> dict | None:
    if c is None:
        return None
    return {'id': _id(c.id), 'status': c.status, 'started_at': c.started_at}


def appointment_summary(a) -> dict | None:
    if a is None:
        return None
    return {'id': _id(a.id), 'scheduled_at': a.scheduled_at, 'status': a.status}


def format_patient(p) -> dict:
    return {
        'id': _id(p.id),
        'user_id': _id(p.user_id),
        'first_name': p.first_name,
        'last_name': p.last_name,
        'dob': p.dob,
        'gender': p.gender,
        'phone': p.phone,
        'email': p.email,
        'address': p.address,
        'medical_history': p.medical_history,
        'allergies': p.allergies,
        'attachment_path': p.attachment_path,
        'status': p.status,
        'created_at': p.created_at,
    }


def format_case(c, *, with_patient=True) -> dict:
    data = {
        'id': _id(c.id),
        'user_id': _id(c.user_id),
        'patient_id': _id(c.patient_id),
        'status': c.status,
        'admit_type': c.admit_type,
        'admit_reason': c.admit_reason,
        'diagnosis': c.diagnosis,
        'attachment_path': c.attachment_path,
        'started_at': c.started_at,
        'created_at': c.created_at,
    }
    if with_patient:
        data['patient'] = patient_summary(c.patient)
    return data


def format_appointment(a, *, with_patient=True) -> dict:
    data = {
        'id': _id(a.id),
        'user_id': _id(a.user_id),
        'patient_id': _id(a.patient_id),
        'case_id': _id(a.case_id),
        'scheduled_at': a.scheduled_at,
        'status': a.status,
        'reason': a.reason,
        'created_at': a.created_at,
        'case': case_summary(a.case),
    }
    if with_patient:
        data['patient'] = patient_summary(a.patient)
    return data


def format_note(n) -> dict:
    return {
        'id': _id(n.id),
        'user_id': _id(n.user_id),
        'patient_id': _id(n.patient_id),
        'case_id': _id(n.case_id),
        'appointment_id': _id(n.appointment_id),
        'note': n.note,
        'created_at': n.created_at,
        'appointment': appointment_summary(n.appointment),
        'case': case_summary(n.case),
    }


def format_doctor(d) -> dict | None:
    if d is None:
        return None
    return {
        'user_id': _id(d.user_id),
        'display_name': d.display_name,
        'title': d.title,
        'department': d.department,
        'avatar_url': d.avatar_url,
        'updated_at': d.updated_at,
    }
