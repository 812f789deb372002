"""Request Identity

Closed set of identities a request can carry. Access rules dispatch on the
concrete type and must handle every member of IDENTITY_TYPES.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Individual:
    user_id: str
    email: str


@dataclass(frozen=True)
class Corporate:
    user_id: str
    email: str
    company_name: Optional[str] = None


@dataclass(frozen=True)
class Admin:
    user_id: str
    email: str


Identity = Union[Anonymous, Individual, Corporate, Admin]

IDENTITY_TYPES = (Anonymous, Individual, Corporate, Admin)


def identity_from_claims(claims: dict) -> Identity:
    """
    Build an identity from verified token claims

    Expected claims: sub, email, role ("client" | "admin"),
    account_type ("individual" | "corporate"), company_name.
    """
    user_id = claims.get("sub")
    email = (claims.get("email") or "").strip().lower()
    if not user_id or not email:
        return Anonymous()

    if claims.get("role") == "admin":
        return Admin(user_id=user_id, email=email)
    if claims.get("account_type") == "corporate":
        return Corporate(
            user_id=user_id,
            email=email,
            company_name=claims.get("company_name"),
        )
    return Individual(user_id=user_id, email=email)
