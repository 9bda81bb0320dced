"""
Unified error envelope for the API.

Every error leaves the service as
``{"ok": false, "error": {"code", "message", "details"?}}``.
"""
import logging

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler, set_rollback

logger = logging.getLogger(__name__)

# Django's Http404 and PermissionDenied carry no DRF code.
FALLBACK_CODES = {404: 'not_found', 403: 'permission_denied'}


class InvalidTransition(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Status transition not allowed.'
    default_code = 'invalid_transition'


class StorageUnavailable(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Object storage request failed.'
    default_code = 'storage_error'


def _error(code, message, details=None):
    body = {'code': code, 'message': message}
    if details is not None:
        body['details'] = details
    return {'ok': False, 'error': body}


def flatten_errors(detail, prefix=''):
    """Turn DRF's nested error detail into ``[{field, message}]``.

    Nested serializers produce dotted paths, list items an index suffix
    (``items[2].name``).
    """
    out = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            out.extend(flatten_errors(value, f'{prefix}.{key}' if prefix else str(key)))
    elif isinstance(detail, list):
        for i, item in enumerate(detail):
            if isinstance(item, (dict, list)):
                out.extend(flatten_errors(item, f'{prefix}[{i}]'))
            else:
                out.append({'field': prefix or 'non_field_errors', 'message': str(item)})
    else:
        out.append({'field': prefix or 'non_field_errors', 'message': str(detail)})
    return out


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('unhandled error in %s', type(view).__name__ if view else 'view')
        set_rollback()
        message = str(exc) if settings.EXPOSE_UPSTREAM_ERRORS else 'Internal server error'
        return Response(_error('server_error', message), status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        resp.data = _error('validation_error', 'Validation Error', flatten_errors(exc.detail))
        return resp

    if isinstance(resp.data, dict) and 'detail' in resp.data:
        message = str(resp.data['detail'])
    else:
        message = str(resp.data)
    code = getattr(exc, 'default_code', None) or FALLBACK_CODES.get(resp.status_code, 'api_error')
    resp.data = _error(code, message)
    return resp
