"""Order-level API errors."""

from rest_framework import status
from rest_framework.exceptions import APIException


class OrderError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid order request.'
    default_code = 'order_error'


class PricingError(OrderError):
    """No pricing source could produce a total price."""

    default_detail = 'A pricing source or total_price is required.'
    default_code = 'pricing_required'


class OrderDeleteForbidden(OrderError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Only pending orders can be deleted.'
    default_code = 'order_delete_forbidden'
