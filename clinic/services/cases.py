import logging

from django.db import transaction
from django.db.models import Q
from rest_framework.exceptions import NotFound

from clinic.models import Appointment, Case, VisitNote
from .audit import log_action
from .formatters import format_appointment, format_case, format_note
from .pagination import paginate
from .storage import signed_url
from .transitions import apply_status

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('admit_type', 'admit_reason', 'diagnosis', 'started_at')


def list_cases(scope, *, page, limit, status=None, admit_type=None, patient_id=None, search=None):
    qs = scope(Case).select_related('patient').order_by('-started_at')
    if status == 'Open':
        qs = qs.filter(status__in=Case.OPEN_STATUSES)
    elif status and status != 'All':
        qs = qs.filter(status=status)
    if admit_type and admit_type != 'All':
        qs = qs.filter(admit_type=admit_type)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if search:
        qs = qs.filter(Q(diagnosis__icontains=search) | Q(admit_reason__icontains=search))
    return paginate(qs, page=page, limit=limit, formatter=format_case)


def case_detail(scope, case_id):
    case = scope.get(Case, case_id, select_related=('patient',))
    appointments = (
        scope(Appointment).filter(case=case)
        .select_related('case', 'patient').order_by('-scheduled_at')
    )
    notes = (
        scope(VisitNote).filter(case=case)
        .select_related('appointment', 'case').order_by('-created_at')
    )
    return {
        'case': format_case(case),
        'appointments': [format_appointment(a) for a in appointments],
        'notes': [format_note(n) for n in notes],
    }


def create_case(scope, data):
    with transaction.atomic():
        case = scope.create(
            Case,
            patient=data['patient'],
            status=data.get('status', Case.STATUS_ACTIVE),
            admit_type=data.get('admit_type', Case.ADMIT_ROUTINE),
            admit_reason=data.get('admit_reason', ''),
            diagnosis=data.get('diagnosis', ''),
            attachment_path=data.get('attachment_url') or None,
            **({'started_at': data['started_at']} if data.get('started_at') else {}),
        )
        log_action(user_id=scope.user_id, action='case.create', obj=case,
                   detail={'patient_id': str(case.patient_id)})
    logger.info('created case %s for patient %s', case.id, case.patient_id)
    return case


def update_case(scope, case_id, data):
    with transaction.atomic():
        case = scope.get(Case, case_id, for_update=True)
        changed = [k for k in EDITABLE_FIELDS if k in data]
        for k in changed:
            setattr(case, k, data[k])
        if 'attachment_url' in data:
            case.attachment_path = data['attachment_url'] or None
            changed.append('attachment_path')
        if 'status' in data:
            apply_status(case, data['status'])
            changed.append('status')
        if changed:
            case.save(update_fields=changed)
        log_action(user_id=scope.user_id, action='case.update', obj=case, detail={'fields': changed})
    return scope.get(Case, case.pk, select_related=('patient',))


def set_case_status(scope, case_id, status):
    with transaction.atomic():
        case = scope.get(Case, case_id, for_update=True)
        old = apply_status(case, status)
        case.save(update_fields=['status'])
        log_action(user_id=scope.user_id, action='case.status', obj=case, detail={'from': old, 'to': status})
    return scope.get(Case, case.pk, select_related=('patient',))


def delete_case(scope, case_id):
    with transaction.atomic():
        case = scope.get(Case, case_id, for_update=True)
        log_action(user_id=scope.user_id, action='case.delete', obj=case,
                   detail={'patient_id': str(case.patient_id)})
        case.delete()
    logger.info('deleted case %s; appointments unlinked, notes removed', case_id)


def add_case_note(scope, case_id, *, note, appointment_id=None):
    """Append a note to a case; it is filed under the case's patient."""
    with transaction.atomic():
        case = scope.get(Case, case_id)
        appointment = None
        if appointment_id:
            appointment = scope(Appointment).filter(pk=appointment_id, case=case).first()
            if appointment is None:
                raise NotFound('Appointment not found for this case')
        row = scope.create(VisitNote, patient_id=case.patient_id, case=case, appointment=appointment, note=note)
        log_action(user_id=scope.user_id, action='note.create', obj=row, detail={'case_id': str(case.id)})
    return row


def case_attachment_url(scope, case_id):
    case = scope.get(Case, case_id)
    return signed_url(case.attachment_path)
