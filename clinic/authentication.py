"""
Bearer token authentication against the external identity provider.

Access tokens are issued elsewhere (a Supabase-style auth service) and
verified here with ``djangorestframework-simplejwt``'s stateless
machinery: the signature, expiry and audience are checked and the
claims are exposed through a :class:`Practitioner` without touching a
local user table.  Keeping this module free of view imports avoids
circular imports when REST framework loads authentication classes
during initialisation.
"""
from __future__ import annotations

import uuid

from rest_framework_simplejwt.authentication import JWTStatelessUserAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.models import TokenUser
from rest_framework_simplejwt.tokens import UntypedToken

from .rls import forward_claims


class ProviderAccessToken(UntypedToken):
    """Access token minted by the identity provider.

    Provider tokens carry no ``token_type`` claim, so the type check of
    the stock access token does not apply.
    """


class Practitioner(TokenUser):
    """The authenticated practitioner, backed only by token claims."""

    @property
    def user_id(self) -> uuid.UUID:
        return uuid.UUID(str(self.id))

    @property
    def role(self):
        return self.token.get('role')


class BearerTokenAuthentication(JWTStatelessUserAuthentication):
    """``Authorization: Bearer <jwt>`` authentication.

    The subject claim must be a UUID; anything else is rejected as an
    invalid token.
    """

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        try:
            user.user_id
        except (TypeError, ValueError, AttributeError):
            raise InvalidToken('Token subject is not a valid user id')
        return user

    def authenticate(self, request):
        result = super().authenticate(request)
        if result is not None:
            forward_claims(result[1].payload)
        return result
