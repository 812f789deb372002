"""GetShopStatus Use Case

Public shop availability derived from the closure settings.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo
from libs.result import Result, Return
from src.app.repositories.shop_settings_repository import ShopSettingsRepository
from src.domain.shop_settings import ClosureDisabled, evaluate_shop_status
from .dtos import ShopStatusDTO

logger = logging.getLogger(__name__)


class GetShopStatus:
    """
    Use Case: Tell whether the shop accepts orders today

    Business Rules:
    1. Closure is evaluated on whole days in the shop's timezone
    2. Both ends of the closure window are closed days
    3. Fail-open: any error while reading settings reports the shop as open

    Flow:
    1. Load settings (missing row = closure disabled)
    2. Convert now to the shop's local date
    3. Evaluate the closure window
    """

    def __init__(self, settings_repo: ShopSettingsRepository, shop_timezone: str = "Europe/Paris"):
        self.settings_repo = settings_repo
        self.shop_timezone = shop_timezone

    async def execute(self, now: Optional[datetime] = None) -> Result[ShopStatusDTO]:
        """
        Execute shop status lookup

        Args:
            now: Evaluation instant, naive values are taken as UTC

        Returns:
            Result[ShopStatusDTO]: always ok
        """
        try:
            now = now or datetime.now(timezone.utc)
            if now.tzinfo is None:
                now = now.replace(tzinfo=timezone.utc)
            today = now.astimezone(ZoneInfo(self.shop_timezone)).date()

            settings = await self.settings_repo.get()
            closure = settings.closure() if settings else ClosureDisabled()

            return Return.ok(ShopStatusDTO.from_status(evaluate_shop_status(closure, today)))

        except Exception as e:
            logger.warning(f"Shop status unavailable, reporting open: {e}")
            return Return.ok(ShopStatusDTO.open())
