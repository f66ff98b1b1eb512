import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "error"
    default_message = "Something went wrong."

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Resource not found."


class InvalidRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_request"
    default_message = "Invalid request."


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    default_message = "Resource already exists."


class TransientInfrastructureError(AppError):
    """Queue or store temporarily unavailable; the caller may retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "unavailable"
    default_message = "Service temporarily unavailable."


class PromoCodeValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "promo_code_invalid"
    default_message = "Promo code cannot be applied."


class InactiveCodeError(PromoCodeValidationError):
    code = "promo_code_inactive"
    default_message = "Promo code is not active."


class TotalLimitExceededError(PromoCodeValidationError):
    code = "promo_code_total_limit"
    default_message = "Promo code total limit exceeded."


class PerUserLimitExceededError(PromoCodeValidationError):
    code = "promo_code_user_limit"
    default_message = "User limit exceeded for this promo code."


class NotYetStartedError(PromoCodeValidationError):
    code = "promo_code_not_started"
    default_message = "Promo code has not started yet."


class ExpiredError(PromoCodeValidationError):
    code = "promo_code_expired"
    default_message = "Promo code has expired."


def custom_exception_handler(exc, context):
    request = context.get("request")
    where = f"{request.method} {request.path}" if request is not None else "n/a"

    if isinstance(exc, AppError):
        if exc.status_code >= 500:
            logger.error("%s failed: %s", where, exc.message)
        else:
            logger.warning("%s rejected (%s): %s", where, exc.code, exc.message)
        return Response(
            {"message": exc.message, "errors": exc.errors, "code": exc.code},
            status=exc.status_code,
        )

    if isinstance(exc, DRFValidationError):
        logger.warning("Validation failed on %s: %s", where, exc.detail)
        return Response(
            {"message": "Validation failed", "errors": exc.detail},
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)
    if response is None:
        logger.exception("Unhandled error on %s", where, exc_info=exc)
    return response
