"""
List envelope used by every paginated endpoint.
"""

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data) -> Response:
        paginator = self.page.paginator
        return Response({
            'success': True,
            'count': paginator.count,
            'total_pages': paginator.num_pages,
            'current_page': self.page.number,
            'page_size': self.get_page_size(self.request),
            'next': self.get_next_link(),
            'previous': self.get_previous_link(),
            'results': data,
        })

    def get_paginated_response_schema(self, schema):
        integer = {'type': 'integer'}
        link = {'type': 'string', 'nullable': True, 'format': 'uri'}
        return {
            'type': 'object',
            'required': ['success', 'count', 'results'],
            'properties': {
                'success': {'type': 'boolean'},
                'count': integer,
                'total_pages': integer,
                'current_page': integer,
                'page_size': integer,
                'next': link,
                'previous': link,
                'results': schema,
            },
        }
