from rest_framework import serializers

from ..models import Appointment, Case, Patient
from .common import ListQuerySerializer, status_serializer
from .fields import OwnedRelatedField


class AppointmentSerializer(serializers.Serializer):
    """Create, edit and reschedule an appointment.

    A linked case must belong to the same patient.  On partial updates the
    side that is not being changed is taken from the stored appointment.
    """
    patient_id = OwnedRelatedField(model=Patient, source='patient')
    case_id = OwnedRelatedField(model=Case, source='case', required=False, allow_null=True)
    scheduled_at = serializers.DateTimeField()
    status = serializers.ChoiceField(choices=Appointment.STATUS_CHOICES, default=Appointment.STATUS_SCHEDULED)
    reason = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        patient = attrs.get('patient') or getattr(self.instance, 'patient', None)
        if 'case' in attrs:
            case = attrs['case']
        else:
            case = getattr(self.instance, 'case', None)
        if case is not None and patient is not None and case.patient_id != patient.pk:
            raise serializers.ValidationError({'case_id': 'Case does not belong to this patient.'})
        return attrs


class AppointmentListQuerySerializer(ListQuerySerializer):
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=6)
    status = serializers.ChoiceField(
        choices=['All'] + [c for c, _ in Appointment.STATUS_CHOICES], required=False
    )
    patient_id = serializers.UUIDField(required=False)
    case_id = serializers.UUIDField(required=False)


AppointmentStatusSerializer = status_serializer(Appointment.STATUS_CHOICES)
