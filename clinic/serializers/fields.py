import bleach
from rest_framework import serializers

from clinic.scope import OwnerScope

# Clients send either a plain date or a full JS ISO timestamp for dob.
DATE_INPUT_FORMATS = ['iso-8601', '%Y-%m-%dT%H:%M:%S.%fZ', '%Y-%m-%dT%H:%M:%SZ']


def clean_text(value):
    """Strip surrounding whitespace and any HTML markup."""
    if value is None:
        return None
    return bleach.clean(value.strip(), tags=[], strip=True)


class CleanCharField(serializers.CharField):
    """CharField for short display strings, sanitised with bleach."""

    def to_internal_value(self, data):
        value = clean_text(super().to_internal_value(data))
        if value == '' and not self.allow_blank:
            self.fail('blank')
        return value


class OwnedRelatedField(serializers.PrimaryKeyRelatedField):
    """Primary key of a row owned by the requesting practitioner.

    Unknown ids and ids owned by someone else fail the same way.
    """

    def __init__(self, model=None, **kwargs):
        self.model = model
        kwargs.setdefault('pk_field', serializers.UUIDField())
        messages = kwargs.setdefault('error_messages', {})
        messages.setdefault('does_not_exist', f'{model._meta.verbose_name.capitalize()} not found.')
        super().__init__(**kwargs)

    def get_queryset(self):
        return OwnerScope.for_request(self.context['request'])(self.model)
