import logging

from django.db import transaction
from django.db.models import Q, Value
from django.db.models.functions import Concat
from django.utils import timezone
from rest_framework.exceptions import NotFound

from clinic.models import Appointment, Case, Patient, VisitNote
from .audit import log_action
from .formatters import format_appointment, format_case, format_note, format_patient
from .pagination import paginate
from .storage import signed_url
from .transitions import apply_status

logger = logging.getLogger(__name__)

DEMOGRAPHIC_FIELDS = (
    'first_name', 'last_name', 'dob', 'gender', 'phone', 'email',
    'address', 'medical_history', 'allergies',
)
ADMISSION_FIELDS = ('admit_type', 'admit_reason', 'diagnosis', 'attachment_url')


def list_patients(scope, *, page, limit, search=None, status=None):
    qs = scope(Patient).order_by('-created_at')
    if search:
        qs = qs.annotate(full_name=Concat('first_name', Value(' '), 'last_name')).filter(
            Q(first_name__icontains=search) | Q(last_name__icontains=search) | Q(full_name__icontains=search)
        )
    if status and status != 'All':
        qs = qs.filter(status=status)
    return paginate(qs, page=page, limit=limit, formatter=format_patient)


def get_patient(scope, patient_id):
    return scope.get(Patient, patient_id)


def create_patient(scope, data):
    """Insert a patient and, when admission data is present, its first case.

    Both rows are written in one transaction, so a failed case insert
    leaves no orphan patient behind.
    """
    fields = {k: data[k] for k in DEMOGRAPHIC_FIELDS if k in data}
    admitting = any(data.get(k) for k in ADMISSION_FIELDS)
    with transaction.atomic():
        patient = scope.create(Patient, **fields)
        log_action(user_id=scope.user_id, action='patient.create', obj=patient)
        case = None
        if admitting:
            case = scope.create(
                Case,
                patient=patient,
                status=Case.STATUS_ACTIVE,
                admit_type=data.get('admit_type') or Case.ADMIT_ROUTINE,
                admit_reason=data.get('admit_reason') or '',
                diagnosis=data.get('diagnosis') or '',
                attachment_path=data.get('attachment_url') or None,
                started_at=timezone.now(),
            )
            log_action(user_id=scope.user_id, action='case.create', obj=case,
                       detail={'patient_id': str(patient.id), 'auto_admission': True})
    logger.info('created patient %s%s', patient.id, f' with case {case.id}' if case else '')
    return patient, case


def update_patient(scope, patient_id, data):
    with transaction.atomic():
        patient = scope.get(Patient, patient_id, for_update=True)
        changed = [k for k in DEMOGRAPHIC_FIELDS if k in data]
        for k in changed:
            setattr(patient, k, data[k])
        if 'attachment_url' in data:
            patient.attachment_path = data['attachment_url'] or None
            changed.append('attachment_path')
        if changed:
            patient.save(update_fields=changed)
        log_action(user_id=scope.user_id, action='patient.update', obj=patient, detail={'fields': changed})
    return patient


def set_patient_status(scope, patient_id, status):
    with transaction.atomic():
        patient = scope.get(Patient, patient_id, for_update=True)
        old = apply_status(patient, status)
        patient.save(update_fields=['status'])
        log_action(user_id=scope.user_id, action='patient.status', obj=patient,
                   detail={'from': old, 'to': status})
    return patient


def delete_patient(scope, patient_id):
    with transaction.atomic():
        patient = scope.get(Patient, patient_id, for_update=True)
        log_action(user_id=scope.user_id, action='patient.delete', obj=patient)
        patient.delete()
    logger.info('deleted patient %s with its cases, appointments and notes', patient_id)


def patient_profile(scope, patient_id):
    patient = scope.get(Patient, patient_id)
    appointments = (
        scope(Appointment).filter(patient=patient)
        .select_related('case').order_by('-scheduled_at')
    )
    cases = scope(Case).filter(patient=patient).order_by('-started_at')
    notes = (
        scope(VisitNote).filter(patient=patient)
        .select_related('appointment', 'case').order_by('-created_at')
    )
    return {
        'patient': format_patient(patient),
        'appointments': [format_appointment(a, with_patient=False) for a in appointments],
        'cases': [format_case(c, with_patient=False) for c in cases],
        'notes': [format_note(n) for n in notes],
    }


def add_patient_note(scope, patient_id, *, note, appointment_id=None):
    """Append a note; a linked appointment lends the note its case."""
    with transaction.atomic():
        patient = scope.get(Patient, patient_id)
        appointment = None
        if appointment_id:
            appointment = scope(Appointment).filter(pk=appointment_id, patient=patient).first()
            if appointment is None:
                raise NotFound('Appointment not found for this patient')
        row = scope.create(
            VisitNote,
            patient=patient,
            case_id=appointment.case_id if appointment else None,
            appointment=appointment,
            note=note,
        )
        log_action(user_id=scope.user_id, action='note.create', obj=row, detail={'patient_id': str(patient.id)})
    return row


def patient_attachment_url(scope, patient_id):
    patient = scope.get(Patient, patient_id)
    return signed_url(patient.attachment_path)
