"""
Pagination for function-based list views.

The `auto_paginate` decorator pages any GET response whose data is a list,
keeping the standard envelope:
{
    "status": "success",
    "message": "",
    "data": {"count": ..., "next": ..., "previous": ..., "results": [...]}
}
"""
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from functools import wraps


class StandardResultsSetPagination(PageNumberPagination):
    """
    Query parameters:
    - page: Page number (default: 1)
    - page_size: Items per page (default: 20, max: 100)
    """
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data):
        return Response({
            'status': 'success',
            'message': '',
            'data': {
                'count': self.page.paginator.count,
                'next': self.get_next_link(),
                'previous': self.get_previous_link(),
                'results': data
            }
        })


def auto_paginate(view_func):
    """
    Page list responses of a function-based view.

    Usage:
        @api_view(['GET'])
        @auto_paginate
        def officer_list(request):
            ...
            return Response(rows)

    Only GET requests returning a list are paged; detail views and
    non-GET methods pass through untouched.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        response = view_func(request, *args, **kwargs)

        if (
            request.method == 'GET' and
            isinstance(response, Response) and
            isinstance(response.data, list)
        ):
            paginator = StandardResultsSetPagination()
            page = paginator.paginate_queryset(response.data, request)

            if page is not None:
                return paginator.get_paginated_response(page)

        return response

    return wrapper
