"""Data Transfer Objects for Shop Settings Use Cases"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field
from src.domain.shop_settings import ShopSettings, ShopStatus


class ShopStatusDTO(BaseModel):
    """Public availability of the shop"""

    is_open: bool = Field(..., description="False while a closure window covers today")
    is_closed: bool = Field(..., description="Negation of is_open")
    reason: Optional[str] = None
    message: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @classmethod
    def from_status(cls, status: ShopStatus) -> "ShopStatusDTO":
        if not status.is_closed:
            return cls.open()
        return cls(
            is_open=False,
            is_closed=True,
            reason=status.reason,
            message=status.message,
            start_date=status.start_date,
            end_date=status.end_date,
        )

    @classmethod
    def open(cls) -> "ShopStatusDTO":
        return cls(is_open=True, is_closed=False)


class ShopSettingsDTO(BaseModel):
    closure_enabled: bool
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: str
    message: str
    updated_at: Optional[datetime] = None

    @classmethod
    def from_settings(cls, settings: ShopSettings) -> "ShopSettingsDTO":
        return cls(
            closure_enabled=settings.closure_enabled,
            start_date=settings.closure_start,
            end_date=settings.closure_end,
            reason=settings.closure_reason,
            message=settings.closure_message,
            updated_at=settings.updated_at,
        )


class UpdateShopSettingsCommandDTO(BaseModel):
    """
    Command DTO for closure settings

    Dates are required when closure_enabled is true.
    """

    closure_enabled: bool = Field(..., description="Whether the closure window applies")
    start_date: Optional[date] = Field(default=None, description="First closed day")
    end_date: Optional[date] = Field(default=None, description="Last closed day")
    reason: Optional[str] = Field(default=None, max_length=200, description="Closure reason")
    message: Optional[str] = Field(default=None, max_length=1000, description="Message shown to customers")

    class Config:
        json_schema_extra = {
            "example": {
                "closure_enabled": True,
                "start_date": "2024-08-01",
                "end_date": "2024-08-15",
                "reason": "Congés",
                "message": "Nous sommes actuellement fermés. Les commandes reprendront le 16 août.",
            }
        }
