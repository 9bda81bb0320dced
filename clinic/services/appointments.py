import logging

from django.db import transaction

from clinic.models import Appointment
from .audit import log_action
from .formatters import format_appointment
from .pagination import paginate
from .transitions import apply_status

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('patient', 'case', 'scheduled_at', 'reason')
RELATED = ('patient', 'case')


def list_appointments(scope, *, page, limit, status=None, search=None, patient_id=None, case_id=None):
    qs = scope(Appointment).select_related(*RELATED).order_by('scheduled_at')
    if status and status != 'All':
        qs = qs.filter(status=status)
    if search:
        qs = qs.filter(reason__icontains=search)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if case_id:
        qs = qs.filter(case_id=case_id)
    return paginate(qs, page=page, limit=limit, formatter=format_appointment)


def get_appointment(scope, appointment_id):
    return scope.get(Appointment, appointment_id, select_related=RELATED)


def create_appointment(scope, data):
    with transaction.atomic():
        appt = scope.create(
            Appointment,
            patient=data['patient'],
            case=data.get('case'),
            scheduled_at=data['scheduled_at'],
            status=data.get('status', Appointment.STATUS_SCHEDULED),
            reason=data.get('reason', ''),
        )
        log_action(user_id=scope.user_id, action='appointment.create', obj=appt,
                   detail={'patient_id': str(appt.patient_id)})
    return get_appointment(scope, appt.pk)


def update_appointment(scope, appointment_id, data):
    """General edit; moving ``scheduled_at`` is a reschedule."""
    with transaction.atomic():
        appt = scope.get(Appointment, appointment_id, for_update=True)
        changed = [k for k in EDITABLE_FIELDS if k in data]
        for k in changed:
            setattr(appt, k, data[k])
        if 'status' in data:
            apply_status(appt, data['status'])
            changed.append('status')
        if changed:
            appt.save(update_fields=changed)
        log_action(user_id=scope.user_id, action='appointment.update', obj=appt,
                   detail={'fields': changed})
    return get_appointment(scope, appt.pk)


def set_appointment_status(scope, appointment_id, status):
    with transaction.atomic():
        appt = scope.get(Appointment, appointment_id, for_update=True)
        old = apply_status(appt, status)
        appt.save(update_fields=['status'])
        log_action(user_id=scope.user_id, action='appointment.status', obj=appt,
                   detail={'from': old, 'to': status})
    return get_appointment(scope, appt.pk)


def delete_appointment(scope, appointment_id):
    with transaction.atomic():
        appt = scope.get(Appointment, appointment_id, for_update=True)
        log_action(user_id=scope.user_id, action='appointment.delete', obj=appt)
        appt.delete()
    logger.info('deleted appointment %s', appointment_id)
