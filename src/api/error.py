"""API error type and the business code -> HTTP status table"""

from typing import Optional
from fastapi import status
from libs.result import Error
from src.app import errors

STATUS_BY_CODE = {
    errors.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    errors.AUTH_REQUIRED: status.HTTP_401_UNAUTHORIZED,
    errors.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    errors.UNAUTHORIZED_ACCESS: status.HTTP_403_FORBIDDEN,
    errors.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    errors.INVOICE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    errors.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    errors.PRODUCT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    errors.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    errors.ALREADY_PAID: status.HTTP_409_CONFLICT,
    errors.SHOP_CLOSED: status.HTTP_409_CONFLICT,
    errors.PAYMENT_PROVIDER_ERROR: status.HTTP_502_BAD_GATEWAY,
    errors.EMAIL_SEND_FAILED: status.HTTP_502_BAD_GATEWAY,
    errors.INVALID_WEBHOOK_SIGNATURE: status.HTTP_400_BAD_REQUEST,
    errors.PRODUCT_UNAVAILABLE: status.HTTP_400_BAD_REQUEST,
    errors.INVALID_QUANTITY: status.HTTP_400_BAD_REQUEST,
    errors.INVALID_POSTAL_CODE: status.HTTP_400_BAD_REQUEST,
    errors.DELIVERY_ZONE_NOT_COVERED: status.HTTP_400_BAD_REQUEST,
    errors.BEREAVEMENT_INFO_REQUIRED: status.HTTP_400_BAD_REQUEST,
    errors.SEARCH_QUERY_TOO_SHORT: status.HTTP_400_BAD_REQUEST,
}


def status_for(code: str) -> int:
    """Unmapped codes are unclassified failures"""
    return STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)


class ClientError(Exception):
    """
    Raised by routes for a failed use case Result

    Args:
        error: Business error from the use case
        status_code: Explicit HTTP status, defaults to the code table
    """

    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or status_for(error.code)
