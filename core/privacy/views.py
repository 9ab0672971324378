"""
Unmask request endpoints.

Requests are opened from the officer they concern
(POST /hr/officers/<id>/unmask-requests/); these views list, show and
decide them.
"""
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.user_accounts.decorators import require_roles
from core.user_accounts.models import Role
from directory_project.pagination import auto_paginate
from directory_project.response_formatter import success_response

from .constants import UnmaskStatus
from .dtos import CallerContext
from .models import UnmaskRequest
from .serializers import UnmaskDecisionSerializer, UnmaskRequestSerializer
from .services import get_field_security_service


@api_view(['GET'])
@auto_paginate
def unmask_request_list(request):
    """
    List unmask requests.

    admin/hr see every request; other accounts see their own.

    GET /core/privacy/unmask-requests/
    - Filters: status (pending/approved/denied/expired), subject_id, requester (admin/hr only)
    """
    queryset = UnmaskRequest.objects.select_related('requester', 'decided_by', 'subject_type')

    if not request.user.has_privileged_access():
        queryset = queryset.filter(requester=request.user)
    else:
        requester_id = request.query_params.get('requester')
        if requester_id:
            queryset = queryset.filter(requester_id=requester_id)

    status_filter = request.query_params.get('status')
    if status_filter:
        if status_filter not in UnmaskStatus.values:
            return Response(
                {'detail': f"status must be one of: {', '.join(UnmaskStatus.values)}"},
                status=status.HTTP_400_BAD_REQUEST
            )
        queryset = queryset.filter(status=status_filter)

    subject_id = request.query_params.get('subject_id')
    if subject_id:
        queryset = queryset.filter(subject_id=subject_id)

    serializer = UnmaskRequestSerializer(queryset, many=True)
    return Response(serializer.data, status=status.HTTP_200_OK)


@api_view(['GET'])
def unmask_request_detail(request, pk):
    """
    GET /core/privacy/unmask-requests/<id>/

    Visible to the requester and to admin/hr.
    """
    unmask_request = get_object_or_404(
        UnmaskRequest.objects.select_related('requester', 'decided_by', 'subject_type'),
        pk=pk
    )
    if unmask_request.requester_id != request.user.pk and not request.user.has_privileged_access():
        return Response({'detail': 'Unmask request not found'}, status=status.HTTP_404_NOT_FOUND)

    serializer = UnmaskRequestSerializer(unmask_request)
    return Response(serializer.data, status=status.HTTP_200_OK)


@api_view(['POST'])
@require_roles(Role.ADMIN, Role.HR)
def unmask_request_decision(request, pk):
    """
    Approve or deny a pending unmask request.

    POST /core/privacy/unmask-requests/<id>/decision/
    - Request body: { "decision": "approve"|"deny", "ttl_minutes"?, "reason"? }
    - 403 on self-approval, 409 when the request is no longer pending
    """
    unmask_request = get_object_or_404(UnmaskRequest, pk=pk)

    serializer = UnmaskDecisionSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    decided = get_field_security_service().decide_unmask(
        CallerContext.from_user(request.user),
        unmask_request.pk,
        data['decision'],
        ttl_minutes=data.get('ttl_minutes'),
        reason=data.get('reason', ''),
    )
    return success_response(
        data=UnmaskRequestSerializer(decided).data,
        message=f"Unmask request {decided.pk} {decided.status}",
        status_code=status.HTTP_200_OK
    )
