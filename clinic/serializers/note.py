from rest_framework import serializers


class VisitNoteSerializer(serializers.Serializer):
    note = serializers.CharField()
    appointment_id = serializers.UUIDField(required=False, allow_null=True)
