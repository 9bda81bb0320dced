"""
The signed-in practitioner's own profile.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import IsPractitioner
from clinic.scope import OwnerScope
from clinic.serializers.doctor import DoctorProfileSerializer
from clinic.services import doctors as service
from clinic.services.formatters import format_doctor


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, IsPractitioner])
def doctor_me(request):
    scope = OwnerScope.for_request(request)
    if request.method == 'GET':
        return Response({'profile': format_doctor(service.get_profile(scope))})

    s = DoctorProfileSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response({'profile': format_doctor(service.upsert_profile(scope, s.validated_data))})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPractitioner])
def doctor_avatar(request):
    return Response({'url': service.avatar_url(OwnerScope.for_request(request))})
