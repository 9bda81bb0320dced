from rest_framework import serializers

from ..models import Case, Patient
from .common import ListQuerySerializer, status_serializer
from .fields import OwnedRelatedField


class CaseSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Case.STATUS_CHOICES, default=Case.STATUS_ACTIVE)
    admit_type = serializers.ChoiceField(choices=Case.ADMIT_TYPE_CHOICES, default=Case.ADMIT_ROUTINE)
    admit_reason = serializers.CharField(required=False, allow_blank=True)
    diagnosis = serializers.CharField(required=False, allow_blank=True)
    attachment_url = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=512)
    started_at = serializers.DateTimeField(required=False)


class CaseCreateSerializer(CaseSerializer):
    patient_id = OwnedRelatedField(model=Patient, source='patient')


class CaseListQuerySerializer(ListQuerySerializer):
    STATUS_FILTERS = ['All', 'Open'] + [c for c, _ in Case.STATUS_CHOICES]
    ADMIT_FILTERS = ['All'] + [c for c, _ in Case.ADMIT_TYPE_CHOICES]

    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=5)
    status = serializers.ChoiceField(choices=STATUS_FILTERS, required=False)
    admit_type = serializers.ChoiceField(choices=ADMIT_FILTERS, required=False)
    patient_id = serializers.UUIDField(required=False)


CaseStatusSerializer = status_serializer(Case.STATUS_CHOICES)
