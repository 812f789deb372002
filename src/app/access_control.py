"""Access rules for orders, invoices and admin resources

Each check returns None when access is granted, or the Error to return.
Dispatch is exhaustive over the identity types; an identity of any other
type raises TypeError instead of being allowed through.
"""

from typing import Optional
from libs.result import Error
from src.app import errors
from src.domain.corporate_invoice import CorporateInvoice
from src.domain.identity import Admin, Anonymous, Corporate, Identity, Individual
from src.domain.order import CUSTOMER_CANCELLABLE_STATUSES, Order

AUTH_REQUIRED_ERROR = Error(code=errors.AUTH_REQUIRED, message="Authentication required")


def _unknown(identity) -> TypeError:
    return TypeError(f"Unknown identity type: {type(identity).__name__}")


def owns_order(identity: Identity, order: Order) -> bool:
    """Owner by account, or guest order placed with the identity's e-mail"""
    if isinstance(identity, (Individual, Corporate)):
        if order.user_id is not None and order.user_id == identity.user_id:
            return True
        return order.customer_email.lower() == identity.email.lower()
    return False


def require_authenticated(identity: Identity) -> Optional[Error]:
    if isinstance(identity, Anonymous):
        return AUTH_REQUIRED_ERROR
    if isinstance(identity, (Individual, Corporate, Admin)):
        return None
    raise _unknown(identity)


def require_admin(identity: Identity) -> Optional[Error]:
    if isinstance(identity, Anonymous):
        return AUTH_REQUIRED_ERROR
    if isinstance(identity, Admin):
        return None
    if isinstance(identity, (Individual, Corporate)):
        return Error(code=errors.FORBIDDEN, message="Admin access required")
    raise _unknown(identity)


def check_order_read(identity: Identity, order: Order) -> Optional[Error]:
    if isinstance(identity, Anonymous):
        return AUTH_REQUIRED_ERROR
    if isinstance(identity, Admin):
        return None
    if isinstance(identity, (Individual, Corporate)):
        if owns_order(identity, order):
            return None
        return Error(
            code=errors.UNAUTHORIZED_ACCESS,
            message="You are not allowed to access this order",
        )
    raise _unknown(identity)


def check_order_cancel(identity: Identity, order: Order) -> Optional[Error]:
    """
    Admins cancel any non-terminal order (terminal states are rejected by the
    transition rules). Individual owners cancel only before preparation starts.
    Corporate orders are read-only for their owner.
    """
    if isinstance(identity, Anonymous):
        return AUTH_REQUIRED_ERROR
    if isinstance(identity, Admin):
        return None
    if isinstance(identity, Corporate):
        return Error(
            code=errors.FORBIDDEN,
            message="Corporate orders can only be cancelled by the shop",
        )
    if isinstance(identity, Individual):
        if not owns_order(identity, order):
            return Error(
                code=errors.UNAUTHORIZED_ACCESS,
                message="You are not allowed to access this order",
            )
        if order.status not in CUSTOMER_CANCELLABLE_STATUSES:
            return Error(
                code=errors.INVALID_TRANSITION,
                message=f"Order in status '{order.status.value}' can no longer be cancelled",
            )
        return None
    raise _unknown(identity)


def check_order_payment(identity: Identity, order: Order) -> Optional[Error]:
    """Guests pay right after checkout, so anyone holding the order id may pay it"""
    if isinstance(identity, (Anonymous, Admin)):
        return None
    if isinstance(identity, (Individual, Corporate)):
        if order.user_id is None or owns_order(identity, order):
            return None
        return Error(
            code=errors.UNAUTHORIZED_ACCESS,
            message="You are not allowed to access this order",
        )
    raise _unknown(identity)


def check_invoice_read(identity: Identity, invoice: CorporateInvoice) -> Optional[Error]:
    if isinstance(identity, Anonymous):
        return AUTH_REQUIRED_ERROR
    if isinstance(identity, Admin):
        return None
    if isinstance(identity, Individual):
        return Error(code=errors.FORBIDDEN, message="Corporate account required")
    if isinstance(identity, Corporate):
        if invoice.corporate_user_id == identity.user_id:
            return None
        return Error(
            code=errors.UNAUTHORIZED_ACCESS,
            message="You are not allowed to access this invoice",
        )
    raise _unknown(identity)


def require_corporate(identity: Identity) -> Optional[Error]:
    if isinstance(identity, Anonymous):
        return AUTH_REQUIRED_ERROR
    if isinstance(identity, Corporate):
        return None
    if isinstance(identity, (Individual, Admin)):
        return Error(code=errors.FORBIDDEN, message="Corporate account required")
    raise _unknown(identity)
