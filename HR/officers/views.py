"""
Officer Directory endpoints.

No view serializes an Officer directly: every officer field goes out
through core.privacy.services.FieldSecurityService.
"""
from django.core.exceptions import ValidationError as DjangoValidationError
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.privacy.dtos import CallerContext, RequestMeta
from core.privacy.serializers import FieldAccessLogSerializer, UnmaskRequestCreateSerializer
from core.privacy.services import get_field_security_service
from core.user_accounts.decorators import require_roles
from core.user_accounts.models import Role
from directory_project.pagination import auto_paginate
from directory_project.response_formatter import success_response
from HR.officers.models import Officer
from HR.officers.serializers import OfficerVisibilityReadSerializer, OfficerVisibilitySerializer
from HR.officers.services import OfficerExportService, OfficerService


def _active_officer(pk):
    return get_object_or_404(Officer.objects.active(), pk=pk)


@api_view(['GET'])
@auto_paginate
def officer_list(request):
    """
    Directory listing.

    GET /hr/officers/
    - Filters: search, department, office, designation, employment_status
    - Rows carry public and internal fields only; restricted fields are never listed
    """
    officers = OfficerService.directory_queryset(request.query_params)
    rows = OfficerService.list_directory(CallerContext.from_user(request.user), officers)
    return Response(rows, status=status.HTTP_200_OK)


@api_view(['GET'])
def officer_detail(request, pk):
    """
    Detailed officer record, masked for the caller.

    GET /hr/officers/<id>/
    - Every restricted field shown or masked is written to the access log
    - 503 when the access log cannot be written; nothing is returned then
    """
    officer = _active_officer(pk)
    detail = OfficerService.get_detail(
        CallerContext.from_user(request.user),
        officer,
        RequestMeta.from_request(request),
    )
    return Response(detail, status=status.HTTP_200_OK)


@api_view(['PATCH'])
@require_roles(Role.ADMIN, Role.HR)
def officer_visibility(request, pk):
    """
    Change visibility overrides.

    PATCH /hr/officers/<id>/visibility/
    - Request body: any of phone_visibility, email_visibility, nid_visibility,
      dob_visibility, salary_visibility; value public/internal/restricted or null
    """
    officer = _active_officer(pk)

    serializer = OfficerVisibilitySerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        officer = OfficerService.update_visibility(request.user, serializer.to_dto(officer.pk))
    except DjangoValidationError as e:
        return Response(
            {'detail': e.message_dict if hasattr(e, 'message_dict') else e.messages},
            status=status.HTTP_400_BAD_REQUEST
        )

    return success_response(
        data=OfficerVisibilityReadSerializer(officer).data,
        message='Visibility updated',
        status_code=status.HTTP_200_OK
    )


@api_view(['POST'])
def officer_unmask_requests(request, pk):
    """
    Ask for restricted fields of this officer to be unmasked.

    POST /hr/officers/<id>/unmask-requests/
    - Request body: { "fields": [...], "justification": "..." }
    - 403 for viewer accounts or once the daily request limit is reached
    """
    officer = _active_officer(pk)

    serializer = UnmaskRequestCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    request_id = get_field_security_service().request_unmask(
        CallerContext.from_user(request.user),
        officer,
        serializer.validated_data['fields'],
        serializer.validated_data['justification'],
    )
    return success_response(
        data={'id': request_id},
        message='Unmask request submitted',
        status_code=status.HTTP_201_CREATED
    )


@api_view(['GET'])
@require_roles(Role.ADMIN, Role.HR)
def officer_audit_trail(request, pk):
    """
    Recent access log entries for one officer, newest first.

    GET /hr/officers/<id>/audit-trail/?limit=50
    """
    officer = _active_officer(pk)
    entries = get_field_security_service().get_audit_trail(
        CallerContext.from_user(request.user),
        officer,
        request.query_params.get('limit'),
    )
    serializer = FieldAccessLogSerializer(entries, many=True)
    return success_response(
        data=serializer.data,
        message=f"{len(serializer.data)} access log entries",
        status_code=status.HTTP_200_OK
    )


@api_view(['GET'])
@require_roles(Role.ADMIN, Role.HR, Role.MANAGER)
def officer_export(request):
    """
    Download the directory as xlsx, rendered for the caller.

    GET /hr/officers/export/
    - Same filters as the directory list
    - Every restricted field written to the file is logged with access_type=export
    """
    officers = OfficerService.directory_queryset(request.query_params)
    return OfficerExportService().export_response(
        officers,
        CallerContext.from_user(request.user),
        RequestMeta.from_request(request),
    )
