"""Business error codes shared by use cases and the API layer"""

from libs.result import Error

VALIDATION_ERROR = "VALIDATION_ERROR"
AUTH_REQUIRED = "AUTH_REQUIRED"
FORBIDDEN = "FORBIDDEN"
UNAUTHORIZED_ACCESS = "UNAUTHORIZED_ACCESS"

ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
INVOICE_NOT_FOUND = "INVOICE_NOT_FOUND"
USER_NOT_FOUND = "USER_NOT_FOUND"
PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"

INVALID_TRANSITION = "INVALID_TRANSITION"
ALREADY_PAID = "ALREADY_PAID"
PAYMENT_PROVIDER_ERROR = "PAYMENT_PROVIDER_ERROR"
INVALID_WEBHOOK_SIGNATURE = "INVALID_WEBHOOK_SIGNATURE"

PRODUCT_UNAVAILABLE = "PRODUCT_UNAVAILABLE"
INVALID_QUANTITY = "INVALID_QUANTITY"
INVALID_POSTAL_CODE = "INVALID_POSTAL_CODE"
DELIVERY_ZONE_NOT_COVERED = "DELIVERY_ZONE_NOT_COVERED"
BEREAVEMENT_INFO_REQUIRED = "BEREAVEMENT_INFO_REQUIRED"
SHOP_CLOSED = "SHOP_CLOSED"
SEARCH_QUERY_TOO_SHORT = "SEARCH_QUERY_TOO_SHORT"
EMAIL_SEND_FAILED = "EMAIL_SEND_FAILED"


def not_found(code: str, entity: str, entity_id: str) -> Error:
    return Error(code=code, message=f"{entity} with ID {entity_id} not found")


def invalid_transition(current: str, requested: str) -> Error:
    return Error(
        code=INVALID_TRANSITION,
        message=f"Cannot change status from '{current}' to '{requested}'",
    )
