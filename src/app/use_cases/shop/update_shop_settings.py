"""UpdateShopSettings Use Case"""

from libs.result import Result, Return, Error
from src.app import errors
from src.app.access_control import require_admin
from src.app.repositories.shop_settings_repository import ShopSettingsRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.identity import Identity
from src.domain.shop_settings import (
    DEFAULT_CLOSURE_MESSAGE,
    DEFAULT_CLOSURE_REASON,
    ClosureDisabled,
    ClosureEnabled,
    InvalidClosure,
    ShopSettings,
)
from .dtos import ShopSettingsDTO, UpdateShopSettingsCommandDTO


class UpdateShopSettings:
    """
    Use Case: Save closure settings (admin)

    Business Rules:
    1. Enabling closure requires a start and an end date, end >= start
    2. Empty reason and message fall back to the defaults
    3. Disabling closure clears the dates
    4. The settings row is created on first save

    Flow:
    1. Check admin access
    2. Build the closure value
    3. Load or create the settings row and apply the closure
    4. Commit transaction
    """

    def __init__(self, uow: UnitOfWork, settings_repo: ShopSettingsRepository):
        self.uow = uow
        self.settings_repo = settings_repo

    async def execute(
        self, command: UpdateShopSettingsCommandDTO, identity: Identity
    ) -> Result[ShopSettingsDTO]:
        denied = require_admin(identity)
        if denied:
            return Return.err(denied)

        # Step 1: Build closure
        if command.closure_enabled:
            try:
                closure = ClosureEnabled(
                    start_date=command.start_date,
                    end_date=command.end_date,
                    reason=(command.reason or "").strip() or DEFAULT_CLOSURE_REASON,
                    message=(command.message or "").strip() or DEFAULT_CLOSURE_MESSAGE,
                )
            except InvalidClosure as e:
                return Return.err(Error(code=errors.VALIDATION_ERROR, message=str(e)))
        else:
            closure = ClosureDisabled()

        try:
            # Step 2: Apply to the singleton row
            settings = await self.settings_repo.get() or ShopSettings()
            settings.set_closure(closure)
            saved = await self.settings_repo.save(settings)

            # Step 3: Commit transaction
            await self.uow.commit()

            return Return.ok(ShopSettingsDTO.from_settings(saved))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_SETTINGS_FAILED",
                    message="Failed to update shop settings",
                    reason=str(e),
                )
            )
