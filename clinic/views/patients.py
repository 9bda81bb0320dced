"""
Patient endpoints.

Every handler works through the caller's :class:`~clinic.scope.OwnerScope`,
so rows belonging to another practitioner answer 404.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import IsPractitioner
from clinic.scope import OwnerScope
from clinic.serializers.note import VisitNoteSerializer
from clinic.serializers.patient import (
    PatientCreateSerializer,
    PatientListQuerySerializer,
    PatientSerializer,
    PatientStatusSerializer,
)
from clinic.services import patients as service
from clinic.services.formatters import format_case, format_note, format_patient
from clinic.services.stats import dashboard_stats


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsPractitioner])
def patients_collection(request):
    scope = OwnerScope.for_request(request)
    if request.method == 'GET':
        q = PatientListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        return Response(service.list_patients(scope, **q.validated_data))

    s = PatientCreateSerializer(data=request.data, context={'request': request})
    s.is_valid(raise_exception=True)
    patient, case = service.create_patient(scope, s.validated_data)
    body = format_patient(patient)
    body['initial_case'] = format_case(case) if case else None
    return Response(body, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPractitioner])
def patient_stats(request):
    """Dashboard counters for the signed-in practitioner."""
    return Response(dashboard_stats(OwnerScope.for_request(request)))


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsPractitioner])
def patient_detail(request, pk):
    scope = OwnerScope.for_request(request)
    if request.method == 'GET':
        return Response(format_patient(service.get_patient(scope, pk)))
    if request.method == 'DELETE':
        service.delete_patient(scope, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    s = PatientSerializer(data=request.data, partial=True, context={'request': request})
    s.is_valid(raise_exception=True)
    return Response(format_patient(service.update_patient(scope, pk, s.validated_data)))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPractitioner])
def patient_profile(request, pk):
    """Patient with appointments, cases and notes, newest first."""
    return Response(service.patient_profile(OwnerScope.for_request(request), pk))


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsPractitioner])
def patient_status(request, pk):
    """Legacy patient-level status.  Superseded by case status."""
    s = PatientStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = service.set_patient_status(OwnerScope.for_request(request), pk, s.validated_data['status'])
    return Response(format_patient(patient))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPractitioner])
def patient_attachment(request, pk):
    return Response({'url': service.patient_attachment_url(OwnerScope.for_request(request), pk)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsPractitioner])
def patient_notes(request, pk):
    s = VisitNoteSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    note = service.add_patient_note(OwnerScope.for_request(request), pk, **s.validated_data)
    return Response(format_note(note), status=status.HTTP_201_CREATED)
