"""Project-wide DRF exception handling."""

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """Return DRF's default error payload, enriched with structured details.

    Domain exceptions may carry an ``extra`` mapping (for example the
    ``material_info`` shortage detail); it is merged into the response body.
    Errors DRF cannot map are logged and turned into a 500 outside DEBUG.
    """

    response = exception_handler(exc, context)
    if response is None:
        view = context.get('view')
        logger.exception('Unhandled error in %s', view.__class__.__name__ if view else 'unknown view', exc_info=exc)
        if settings.DEBUG:
            return None
        return Response({'detail': 'Internal server error.'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    extra = getattr(exc, 'extra', None)
    if extra and isinstance(response.data, dict):
        response.data.update(extra)
    return response
