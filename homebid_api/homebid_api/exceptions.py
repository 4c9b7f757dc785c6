from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler as drf_exception_handler


class HomeBidError(APIException):
    """Base class for marketplace errors raised by the service layer."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = 'error'


class ValidationError(HomeBidError):
    default_detail = "Invalid input."
    default_code = 'validation_error'


class NotFoundError(HomeBidError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = 'not_found'


class InvalidTransitionError(HomeBidError):
    default_detail = "Status change is not allowed from the current state."
    default_code = 'invalid_transition'


class ExternalServiceError(HomeBidError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Payment provider request failed."
    default_code = 'external_service_error'


class PaymentDeclinedError(ExternalServiceError):
    """The processor answered, but the payment did not succeed. Caller may retry."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Payment not completed."
    default_code = 'payment_declined'


def exception_handler(exc, context):
    """
    Render every API error as ``{"message": ..., "code": ...}``.

    Field-level serializer errors are kept under ``errors``.
    """
    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(exc, HomeBidError):
        response.data = {'message': str(exc.detail), 'code': exc.default_code}
    elif isinstance(data, dict) and 'detail' in data:
        response.data = {'message': str(data['detail']), 'code': getattr(data['detail'], 'code', 'error')}
    else:
        response.data = {'message': "Invalid input.", 'code': 'validation_error', 'errors': data}
    return response
