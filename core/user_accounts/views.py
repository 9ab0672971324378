"""
API Views for User Account management and authentication.
Provides REST API endpoints for login, profile management, and account administration.
"""
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.tokens import RefreshToken
from django.contrib.auth import authenticate
from django.db.models import Q
from django.shortcuts import get_object_or_404

from directory_project.pagination import auto_paginate
from directory_project.response_formatter import success_response
from .decorators import require_roles
from .models import CustomUser, Role
from .serializers import (
    UserProfileSerializer,
    ChangePasswordSerializer,
    AdminUserCreationSerializer,
    AdminUserUpdateSerializer,
    UserListSerializer,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Public Authentication Views
# ============================================================================

@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """
    Public endpoint for user login.
    Authenticates user and returns JWT tokens.

    POST /auth/login/
    - Request body: { "email": "...", "password": "..." }
    - Returns: User data and JWT tokens
    """
    email = request.data.get('email')
    password = request.data.get('password')

    if not email or not password:
        return Response(
            {'detail': 'Please provide both email and password'},
            status=status.HTTP_400_BAD_REQUEST
        )

    user = authenticate(request, username=email, password=password)

    if user is None:
        logger.warning(f"Failed login attempt for {email}")
        return Response(
            {'detail': 'Invalid credentials'},
            status=status.HTTP_401_UNAUTHORIZED
        )

    refresh = RefreshToken.for_user(user)

    return success_response(
        data={
            'user': {
                'id': user.id,
                'email': user.email,
                'name': user.name,
                'role': user.role,
            },
            'tokens': {
                'refresh': str(refresh),
                'access': str(refresh.access_token)
            }
        },
        message='Login successful',
        status_code=status.HTTP_200_OK
    )


# ============================================================================
# User Profile Views (Self-Management)
# ============================================================================

@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def user_profile(request):
    """
    Authenticated endpoint for viewing and updating own profile.
    Users can only update name and phone_number; role and email are read-only.

    GET /accounts/profile/
    PUT/PATCH /accounts/profile/
    - Request body: { "name", "phone_number" }
    """
    user = request.user

    if request.method == 'GET':
        serializer = UserProfileSerializer(user)
        return Response(serializer.data, status=status.HTTP_200_OK)

    partial = request.method == 'PATCH'
    serializer = UserProfileSerializer(user, data=request.data, partial=partial)

    if serializer.is_valid():
        serializer.save()
        return success_response(
            data=serializer.data,
            message='Profile updated successfully',
            status_code=status.HTTP_200_OK
        )

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password(request):
    """
    Authenticated endpoint for changing own password.

    POST /auth/change-password/
    - Request body: { "old_password", "new_password", "confirm_password" }
    """
    serializer = ChangePasswordSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    user = request.user

    if not user.check_password(serializer.validated_data['old_password']):
        return Response(
            {'detail': 'Old password is incorrect'},
            status=status.HTTP_400_BAD_REQUEST
        )

    user.set_password(serializer.validated_data['new_password'])
    user.save()

    return Response({'detail': 'Password changed successfully'}, status=status.HTTP_200_OK)


# ============================================================================
# Admin User Management Views
# ============================================================================

@api_view(['GET', 'POST'])
@require_roles(Role.ADMIN)
@auto_paginate
def admin_user_list(request):
    """
    Admin endpoint for listing and creating accounts.

    GET /accounts/admin/users/
    - Filters: role, search (name/email)

    POST /accounts/admin/users/
    - Request body: AdminUserCreationSerializer fields
    """
    if request.method == 'GET':
        users = CustomUser.objects.all().order_by('email')

        role = request.query_params.get('role')
        if role:
            users = users.filter(role=role)

        search = request.query_params.get('search')
        if search:
            users = users.filter(Q(name__icontains=search) | Q(email__icontains=search))

        serializer = UserListSerializer(users, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    serializer = AdminUserCreationSerializer(data=request.data, context={'request': request})

    if serializer.is_valid():
        user = serializer.save()
        logger.info(f"Account {user.email} created with role {user.role} by user {request.user.id}")
        return success_response(
            data=UserListSerializer(user).data,
            message='User created successfully',
            status_code=status.HTTP_201_CREATED
        )

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH'])
@require_roles(Role.ADMIN)
def admin_user_detail(request, user_id):
    """
    Admin endpoint for viewing and updating a specific account.

    Accounts are never deleted; set is_active to false instead.

    GET /accounts/admin/users/<id>/
    PUT/PATCH /accounts/admin/users/<id>/
    - Request body: AdminUserUpdateSerializer fields
    """
    target_user = get_object_or_404(CustomUser, pk=user_id)

    if request.method == 'GET':
        serializer = UserListSerializer(target_user)
        return Response(serializer.data, status=status.HTTP_200_OK)

    partial = request.method == 'PATCH'
    previous_role = target_user.role
    serializer = AdminUserUpdateSerializer(
        target_user,
        data=request.data,
        partial=partial,
        context={'request': request}
    )

    if serializer.is_valid():
        serializer.save()
        if target_user.role != previous_role:
            logger.info(
                f"Role of account {target_user.id} changed from {previous_role} "
                f"to {target_user.role} by user {request.user.id}"
            )
        return success_response(
            data=UserListSerializer(target_user).data,
            message='User updated successfully',
            status_code=status.HTTP_200_OK
        )

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
