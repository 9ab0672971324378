"""
Role decorators for function-based views.
"""
from functools import wraps
from rest_framework.response import Response
from rest_framework import status


def require_roles(*roles):
    """
    Decorator restricting a function-based view to accounts holding one of `roles`.

    Place it below @api_view so the request is already authenticated by DRF.

    Usage:
        @api_view(['PATCH'])
        @require_roles(Role.ADMIN, Role.HR)
        def officer_visibility(request, pk):
            ...
    """
    allowed = {str(role) for role in roles}

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return Response(
                    {'detail': 'Authentication required'},
                    status=status.HTTP_401_UNAUTHORIZED
                )

            if getattr(request.user, 'role', None) not in allowed:
                return Response(
                    {'detail': f"Permission denied. Requires one of the roles: {', '.join(sorted(allowed))}"},
                    status=status.HTTP_403_FORBIDDEN
                )

            return view_func(request, *args, **kwargs)

        # Metadata for introspection/documentation
        wrapper.required_roles = tuple(sorted(allowed))

        return wrapper
    return decorator
