"""Stock-related API errors."""

from rest_framework import status
from rest_framework.exceptions import APIException


class InsufficientStockError(APIException):
    """A stock-consuming operation needs more than is on hand.

    The response carries ``material_info`` so the caller can show how much
    is missing instead of a bare message.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = 'insufficient_stock'

    def __init__(self, material, required, available=None):
        available = material.current_stock if available is None else available
        shortage = required - available
        super().__init__(
            f"Insufficient stock for {material.name}. Required: {required}, available: {available}."
        )
        self.extra = {
            'material_info': {
                'material_id': material.pk,
                'material_name': material.name,
                'unit': material.unit,
                'required': required,
                'available': available,
                'shortage': shortage,
            }
        }
