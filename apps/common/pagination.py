from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """
    Page-number pagination for list endpoints: ``?page=2&page_size=50``.
    """
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class MessagePagination(StandardResultsSetPagination):
    page_size = 50
