from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from clinic.models import DoctorProfile
from .audit import log_action
from .storage import signed_url

OPTIONAL_FIELDS = ('title', 'department', 'avatar_url')


def get_profile(scope):
    return scope(DoctorProfile).first()


def upsert_profile(scope, data):
    """Create or update the caller's profile.

    ``display_name`` is always written (blank becomes null); the other
    fields only when the payload carries them.
    """
    defaults = {
        'display_name': (data.get('display_name') or '').strip() or None,
        'updated_at': timezone.now(),
    }
    for k in OPTIONAL_FIELDS:
        if k in data:
            defaults[k] = data[k] or None
    with transaction.atomic():
        profile, created = DoctorProfile.objects.update_or_create(user_id=scope.user_id, defaults=defaults)
        log_action(user_id=scope.user_id, action='doctor.create' if created else 'doctor.update', obj=profile,
                   detail={'fields': sorted(defaults)})
    return profile


def avatar_url(scope):
    profile = get_profile(scope)
    if profile is None:
        raise NotFound('Doctor profile not found')
    return signed_url(profile.avatar_url)
