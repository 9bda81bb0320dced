"""
Forwarding of verified JWT claims to the database session.

Supabase-style row-level-security policies read the caller from the
``request.jwt.claims`` setting (``auth.uid()``) and only bind roles that
are not the table owner.  When ``DB_FORWARD_JWT_CLAIMS`` is on and the
connection is PostgreSQL, the claims are written and the session switches
to the token's role for the lifetime of the request.  Both are reset when
the request finishes so pooled connections never leak a caller.

The database user Django connects as must be a member of every role in
``PRACTITIONER_ROLES``.
"""
from __future__ import annotations

import json
import logging

from django.conf import settings
from django.core.signals import request_finished
from django.db import connection
from django.dispatch import receiver

from clinic.permissions import PRACTITIONER_ROLES

logger = logging.getLogger(__name__)

CLAIMS_SETTING = 'request.jwt.claims'


def _enabled() -> bool:
    return bool(getattr(settings, 'DB_FORWARD_JWT_CLAIMS', False)) and connection.vendor == 'postgresql'


def forward_claims(claims: dict) -> bool:
    """Write ``claims`` to the session; return True if anything was sent."""
    if not _enabled():
        return False
    role = claims.get('role')
    with connection.cursor() as cursor:
        cursor.execute('select set_config(%s, %s, false)', [CLAIMS_SETTING, json.dumps(claims, default=str)])
        if role in PRACTITIONER_ROLES:
            cursor.execute('select set_config(%s, %s, false)', ['role', role])
    logger.debug('forwarded jwt claims for sub=%s role=%s', claims.get('sub'), role)
    return True


@receiver(request_finished, dispatch_uid='clinic.rls.clear_claims')
def clear_claims(sender=None, **kwargs) -> None:
    if not _enabled() or connection.connection is None:
        return
    with connection.cursor() as cursor:
        cursor.execute('reset role')
        cursor.execute('select set_config(%s, %s, false)', [CLAIMS_SETTING, ''])
