from rest_framework import serializers

from ..models import Case, Patient
from .common import ListQuerySerializer, status_serializer
from .fields import DATE_INPUT_FORMATS, CleanCharField


class PatientSerializer(serializers.Serializer):
    """Demographic fields; used with ``partial=True`` for updates."""
    first_name = CleanCharField(max_length=100)
    last_name = CleanCharField(max_length=100)
    dob = serializers.DateField(input_formats=DATE_INPUT_FORMATS)
    gender = serializers.ChoiceField(choices=Patient.GENDER_CHOICES, default=Patient.GENDER_UNKNOWN)
    phone = CleanCharField(required=False, allow_blank=True, max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = CleanCharField(required=False, allow_blank=True)
    medical_history = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    allergies = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    attachment_url = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=512)


class PatientCreateSerializer(PatientSerializer):
    """Patient plus the optional admission that opens an initial case."""
    admit_type = serializers.ChoiceField(
        choices=Case.ADMIT_TYPE_CHOICES, required=False, allow_blank=True, allow_null=True
    )
    admit_reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    diagnosis = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class PatientListQuerySerializer(ListQuerySerializer):
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=5)
    status = serializers.ChoiceField(choices=['All'] + [c for c, _ in Patient.STATUS_CHOICES], required=False)


PatientStatusSerializer = status_serializer(Patient.STATUS_CHOICES)
