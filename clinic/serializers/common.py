from rest_framework import serializers


class ListQuerySerializer(serializers.Serializer):
    """Offset pagination shared by every list endpoint."""
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=10)
    search = serializers.CharField(required=False, allow_blank=True, trim_whitespace=True)


def status_serializer(choices):
    """Build the body serializer for a ``PATCH .../status`` route."""
    return type('StatusSerializer', (serializers.Serializer,), {
        'status': serializers.ChoiceField(choices=choices),
    })
