"""User Domain Entity

Account record used to resolve invoice owners and their contact details.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import String
from src.domain.base import BaseModel, generate_uuid


class UserRole(str, Enum):
    CLIENT = "client"
    ADMIN = "admin"


class AccountType(str, Enum):
    INDIVIDUAL = "individual"
    CORPORATE = "corporate"


class User(BaseModel, table=True):
    """
    User - Storefront account

    Domain Rules:
    - email is unique and lower-cased
    - Corporate accounts carry a company name and are billed monthly
    """

    __tablename__ = "users"

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique user identifier"
    )

    email: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True),
        description="Login e-mail (lower-cased)"
    )

    name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Display name"
    )

    role: UserRole = Field(
        default=UserRole.CLIENT,
        description="Account role (client, admin)"
    )

    account_type: AccountType = Field(
        default=AccountType.INDIVIDUAL,
        description="Account type (individual, corporate)"
    )

    company_name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(200), nullable=True),
        description="Company name for corporate accounts"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Account creation timestamp"
    )

    @property
    def is_corporate(self) -> bool:
        return self.account_type == AccountType.CORPORATE
