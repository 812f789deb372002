"""Shop Settings Domain Entity

Singleton row holding the shop closure window. The persisted row is flat;
callers work with the tagged closure value returned by ``closure()``.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union
from sqlmodel import Field, Column
from sqlalchemy import Date, String, Text
from src.domain.base import BaseModel

SINGLETON_KEY = ""
DEFAULT_CLOSURE_REASON = "Congés"
DEFAULT_CLOSURE_MESSAGE = (
    "Nous sommes actuellement fermés. Les commandes reprendront bientôt."
)


class InvalidClosure(ValueError):
    pass


@dataclass(frozen=True)
class ClosureDisabled:
    pass


@dataclass(frozen=True)
class ClosureEnabled:
    start_date: date
    end_date: date
    reason: str = DEFAULT_CLOSURE_REASON
    message: str = DEFAULT_CLOSURE_MESSAGE

    def __post_init__(self):
        if self.start_date is None or self.end_date is None:
            raise InvalidClosure("Start and end dates are required when closure is enabled")
        if self.end_date < self.start_date:
            raise InvalidClosure("End date must be on or after start date")

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


Closure = Union[ClosureDisabled, ClosureEnabled]


@dataclass(frozen=True)
class ShopStatus:
    is_closed: bool
    reason: Optional[str] = None
    message: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ShopSettings(BaseModel, table=True):
    """
    ShopSettings - Storefront configuration

    Domain Rules:
    - Exactly one row, enforced by the unique singleton_key column
    - Closure dates are set when and only when closure is enabled
    """

    __tablename__ = "shop_settings"

    id: Optional[int] = Field(default=None, primary_key=True)

    singleton_key: str = Field(
        default=SINGLETON_KEY,
        sa_column=Column(String(1), nullable=False, unique=True, default=SINGLETON_KEY),
        description="Always empty, makes a second row impossible"
    )

    closure_enabled: bool = Field(default=False)

    closure_start: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
    )

    closure_end: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
    )

    closure_reason: str = Field(
        default=DEFAULT_CLOSURE_REASON,
        sa_column=Column(String(200), nullable=False, default=DEFAULT_CLOSURE_REASON),
    )

    closure_message: str = Field(
        default=DEFAULT_CLOSURE_MESSAGE,
        sa_column=Column(Text, nullable=False, default=DEFAULT_CLOSURE_MESSAGE),
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    def closure(self) -> Closure:
        if not self.closure_enabled:
            return ClosureDisabled()
        return ClosureEnabled(
            start_date=self.closure_start,
            end_date=self.closure_end,
            reason=self.closure_reason,
            message=self.closure_message,
        )

    def set_closure(self, closure: Closure) -> None:
        if isinstance(closure, ClosureEnabled):
            self.closure_enabled = True
            self.closure_start = closure.start_date
            self.closure_end = closure.end_date
            self.closure_reason = closure.reason
            self.closure_message = closure.message
        elif isinstance(closure, ClosureDisabled):
            self.closure_enabled = False
            self.closure_start = None
            self.closure_end = None
        else:
            raise TypeError(f"Unknown closure type: {type(closure).__name__}")
        self.updated_at = datetime.utcnow()


def evaluate_shop_status(closure: Closure, today: date) -> ShopStatus:
    """Closed when closure is enabled and today falls inside the window, both ends inclusive"""
    if isinstance(closure, ClosureDisabled):
        return ShopStatus(is_closed=False)
    if isinstance(closure, ClosureEnabled):
        return ShopStatus(
            is_closed=closure.covers(today),
            reason=closure.reason,
            message=closure.message,
            start_date=closure.start_date,
            end_date=closure.end_date,
        )
    raise TypeError(f"Unknown closure type: {type(closure).__name__}")
