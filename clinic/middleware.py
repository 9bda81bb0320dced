import re


class DeprecatedPatientStatusMiddleware:
    """Mark the legacy patient status endpoint as deprecated.

    Patient-level status predates cases; clients should move to
    ``/api/cases``.  Responses still go through, with RFC 8594 style
    ``Deprecation`` and ``Link`` headers attached.
    """
    LEGACY_PATH = re.compile(r'^/api/patients/[0-9a-fA-F-]{36}/status$')
    SUCCESSOR = '</api/cases>; rel="successor-version"'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        if self.LEGACY_PATH.match(request.path or ''):
            response['Deprecation'] = 'true'
            response['Link'] = self.SUCCESSOR
        return response
