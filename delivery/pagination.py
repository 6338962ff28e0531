"""Pagination classes for API endpoints."""

from rest_framework.pagination import PageNumberPagination

from delivery.services.delivery_log_store import DEFAULT_LOG_PAGE_SIZE


class DeliveryLogPageNumberPagination(PageNumberPagination):
    """Page-number pagination for the delivery log listing."""

    page_size = DEFAULT_LOG_PAGE_SIZE
    page_size_query_param = "page_size"
    max_page_size = 100
