"""
Appointment endpoints: scheduling, rescheduling and status changes.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import IsPractitioner
from clinic.scope import OwnerScope
from clinic.serializers.appointment import (
    AppointmentListQuerySerializer,
    AppointmentSerializer,
    AppointmentStatusSerializer,
)
from clinic.services import appointments as service
from clinic.services.formatters import format_appointment


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsPractitioner])
def appointments_collection(request):
    scope = OwnerScope.for_request(request)
    if request.method == 'GET':
        q = AppointmentListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        return Response(service.list_appointments(scope, **q.validated_data))

    s = AppointmentSerializer(data=request.data, context={'request': request})
    s.is_valid(raise_exception=True)
    appt = service.create_appointment(scope, s.validated_data)
    return Response(format_appointment(appt), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsPractitioner])
def appointment_detail(request, pk):
    scope = OwnerScope.for_request(request)
    if request.method == 'GET':
        return Response(format_appointment(service.get_appointment(scope, pk)))
    if request.method == 'DELETE':
        service.delete_appointment(scope, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    current = service.get_appointment(scope, pk)
    s = AppointmentSerializer(current, data=request.data, partial=True, context={'request': request})
    s.is_valid(raise_exception=True)
    return Response(format_appointment(service.update_appointment(scope, pk, s.validated_data)))


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsPractitioner])
def appointment_status(request, pk):
    s = AppointmentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appt = service.set_appointment_status(OwnerScope.for_request(request), pk, s.validated_data['status'])
    return Response(format_appointment(appt))
