from rest_framework import serializers

from .fields import CleanCharField


class DoctorProfileSerializer(serializers.Serializer):
    display_name = CleanCharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    title = CleanCharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    department = CleanCharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    avatar_url = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=512)
