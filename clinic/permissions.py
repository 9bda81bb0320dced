"""
Custom permission classes for practitioner access control.
"""
from rest_framework.permissions import BasePermission

PRACTITIONER_ROLES = {"authenticated"}


class IsPractitioner(BasePermission):
    """Allow access only to signed-in practitioners.

    The identity provider also hands out tokens for anonymous and service
    roles; those authenticate but must not reach clinical data.
    """
    message = "Practitioner access required."

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) in PRACTITIONER_ROLES)
