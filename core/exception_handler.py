"""
DRF exception handler for the Seva API.

Maps database uniqueness violations, JWT failures and integration
exceptions onto JSON error bodies, and logs everything DRF does not
handle itself before answering 500.
"""

import logging

from django.db import IntegrityError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler
from rest_framework_simplejwt.exceptions import TokenError

from .exceptions import SevaException

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown"

    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error in %s: %s", view_name, exc)
        return Response(
            {"success": False, "message": "Duplicate value error"},
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, TokenError):
        return Response(
            {"success": False, "message": "Invalid token"},
            status=status.HTTP_401_UNAUTHORIZED,
        )

    if isinstance(exc, SevaException):
        logger.error("%s in %s: %s", exc.__class__.__name__, view_name, exc.message)
        return Response(
            {"success": False, "message": exc.message, "error_code": exc.error_code},
            status=exc.status_code,
        )

    logger.exception("Unhandled error in %s", view_name)
    return Response(
        {"success": False, "message": "Internal server error"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
