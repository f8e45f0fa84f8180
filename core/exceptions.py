"""
Core — Exception Handling

Domain exceptions raised by the service layer and the DRF exception
handler that renders them in the standard API error envelope.

@file core/exceptions.py
"""

import logging

from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('eafoods')


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class BusinessRuleViolation(APIException):
    """Raised when input or a business rule is rejected at the service layer."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Business rule violation.'
    default_code = 'BUSINESS_RULE_VIOLATION'


class DeliveryPolicyError(BusinessRuleViolation):
    """Raised when a delivery date or the order cutoff rule is violated."""
    default_detail = 'Delivery policy violation.'
    default_code = 'DELIVERY_POLICY_VIOLATION'


class InsufficientStockError(APIException):
    """Raised when a reservation exceeds the recorded quantity of a product."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Insufficient stock for this operation.'
    default_code = 'INSUFFICIENT_STOCK'

    def __init__(self, detail=None, code=None, *, product_id=None, requested=None, available=None):
        super().__init__(detail=detail, code=code)
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidStateTransition(APIException):
    """Raised when an order status change is not allowed."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Invalid state transition.'
    default_code = 'INVALID_STATE_TRANSITION'


class DuplicateResourceError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'DUPLICATE_RESOURCE'


class ResourceNotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'RESOURCE_NOT_FOUND'


# ---------------------------------------------------------------------------
# Standard exception handler
# ---------------------------------------------------------------------------

def standard_exception_handler(exc, context):
    """
    Wraps every error response in the standard envelope:
      { "success": false, "errors": {...}, "code": "ERROR_CODE" }
    """
    if isinstance(exc, Http404):
        exc = ResourceNotFoundError()
    elif isinstance(exc, PermissionDenied):
        exc = APIException(detail='Permission denied.', code='PERMISSION_DENIED')
        exc.status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, ValidationError):
        data = {
            'success': False,
            'errors': exc.message_dict if hasattr(exc, 'message_dict') else {'detail': exc.messages},
            'code': 'VALIDATION_ERROR',
        }
        return Response(data, status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)

    if response is None:
        logger.exception('Unhandled exception in view: %s', exc)
        return Response(
            {'success': False, 'errors': {'detail': ['Internal server error.']}, 'code': 'INTERNAL_ERROR'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    code = getattr(exc, 'default_code', 'ERROR')
    if isinstance(response.data, dict):
        errors = response.data
        code = errors.pop('code', code)
    elif isinstance(response.data, list):
        errors = {'detail': response.data}
    else:
        errors = {'detail': [str(response.data)]}

    if isinstance(exc, InsufficientStockError) and exc.product_id is not None:
        errors['product_id'] = exc.product_id
        errors['requested'] = exc.requested
        errors['available'] = exc.available

    response.data = {
        'success': False,
        'errors': errors,
        'code': code,
    }
    return response
