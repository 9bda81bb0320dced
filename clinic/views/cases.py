"""
Case (clinical episode) endpoints.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.permissions import IsPractitioner
from clinic.scope import OwnerScope
from clinic.serializers.case import (
    CaseCreateSerializer,
    CaseListQuerySerializer,
    CaseSerializer,
    CaseStatusSerializer,
)
from clinic.serializers.note import VisitNoteSerializer
from clinic.services import cases as service
from clinic.services.formatters import format_case, format_note


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsPractitioner])
def cases_collection(request):
    scope = OwnerScope.for_request(request)
    if request.method == 'GET':
        q = CaseListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        return Response(service.list_cases(scope, **q.validated_data))

    s = CaseCreateSerializer(data=request.data, context={'request': request})
    s.is_valid(raise_exception=True)
    return Response(format_case(service.create_case(scope, s.validated_data)), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsPractitioner])
def case_detail(request, pk):
    scope = OwnerScope.for_request(request)
    if request.method == 'GET':
        return Response(service.case_detail(scope, pk))
    if request.method == 'DELETE':
        service.delete_case(scope, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    s = CaseSerializer(data=request.data, partial=True, context={'request': request})
    s.is_valid(raise_exception=True)
    return Response(format_case(service.update_case(scope, pk, s.validated_data)))


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsPractitioner])
def case_status(request, pk):
    s = CaseStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    case = service.set_case_status(OwnerScope.for_request(request), pk, s.validated_data['status'])
    return Response(format_case(case))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPractitioner])
def case_attachment(request, pk):
    return Response({'url': service.case_attachment_url(OwnerScope.for_request(request), pk)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsPractitioner])
def case_notes(request, pk):
    s = VisitNoteSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    note = service.add_case_note(OwnerScope.for_request(request), pk, **s.validated_data)
    return Response(format_note(note), status=status.HTTP_201_CREATED)
