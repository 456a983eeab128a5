# common/exceptions.py
import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_handler

logger = logging.getLogger(__name__)


class InsufficientStock(exceptions.APIException):
    """Raised when a product cannot cover the requested quantity."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Insufficient stock."
    default_code = "insufficient_stock"

    def __init__(self, product_id=None, product_name=None, available=None):
        self.product_id = product_id
        self.available = available
        if product_name:
            detail = f"Insufficient stock for {product_name}."
        elif product_id:
            detail = f"Insufficient stock for product {product_id}."
        else:
            detail = None
        super().__init__(detail=detail)


class ProductNotFound(exceptions.APIException):
    """An order line references a product that does not exist or is not for sale."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Product not found."
    default_code = "product_not_found"

    def __init__(self, product_id=None):
        self.product_id = product_id
        detail = f"Product not found: {product_id}" if product_id else None
        super().__init__(detail=detail)


class InvalidTransition(exceptions.ValidationError):
    default_detail = "Invalid status transition."
    default_code = "invalid_transition"


# Taxonomy names exposed as the `code` of every error body.
ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "VALIDATION",
}


def _first_message(data):
    if isinstance(data, dict):
        if "detail" in data:
            return _first_message(data["detail"])
        for field, value in data.items():
            message = _first_message(value)
            if field == "non_field_errors":
                return message
            return f"{field}: {message}"
        return "Invalid input."
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else "Invalid input."
    return str(data)


def marketplace_exception_handler(exc, context):
    """
    Render every error as {"message": ..., "code": ...}.
    Anything DRF does not know about becomes a logged, generic 500.
    """
    response = drf_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else "unknown view", exc_info=exc)
        return Response(
            {"message": "Internal server error", "code": "INTERNAL"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, InsufficientStock):
        code = "INSUFFICIENT_STOCK"
    elif isinstance(exc, ProductNotFound):
        code = "PRODUCT_NOT_FOUND"
    elif isinstance(exc, (Http404, exceptions.NotFound)):
        code = "NOT_FOUND"
    elif isinstance(exc, (PermissionDenied, exceptions.PermissionDenied)) and response.status_code == 403:
        code = "FORBIDDEN"
    else:
        code = ERROR_CODES.get(response.status_code, "INTERNAL")

    response.data = {"message": _first_message(response.data), "code": code}
    return response
