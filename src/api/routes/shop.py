"""Shop Status and Settings API Routes"""

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.auth import get_identity
from src.api.error import ClientError
from src.api.schemas.response import ApiResponse, success_response
from src.app.use_cases.shop.dtos import ShopSettingsDTO, ShopStatusDTO, UpdateShopSettingsCommandDTO
from src.app.use_cases.shop.get_shop_settings import GetShopSettings
from src.app.use_cases.shop.get_shop_status import GetShopStatus
from src.app.use_cases.shop.update_shop_settings import UpdateShopSettings
from src.adapter.repositories.shop_settings_repository import SqlAlchemyShopSettingsRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.domain.identity import Identity

router = APIRouter(tags=["Shop"])


@router.get("/shop/status", response_model=ApiResponse[ShopStatusDTO])
async def get_shop_status(session: AsyncSession = Depends(get_session)):
    """
    Tell the storefront whether orders are accepted today.

    Reports the shop open when the settings cannot be read.
    """
    use_case = GetShopStatus(
        SqlAlchemyShopSettingsRepository(session),
        shop_timezone=ApplicationConfig.SHOP_TIMEZONE,
    )
    result = await use_case.execute()
    return success_response(result.value)


@router.get("/admin/settings", response_model=ApiResponse[ShopSettingsDTO])
async def get_shop_settings(
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    use_case = GetShopSettings(SqlAlchemyShopSettingsRepository(session))
    result = await use_case.execute(identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)


@router.put("/admin/settings", response_model=ApiResponse[ShopSettingsDTO])
async def update_shop_settings(
    request: UpdateShopSettingsCommandDTO,
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    Enable or disable the closure window.

    **Example request:**
    ```json
    {
      "closure_enabled": true,
      "start_date": "2024-08-01",
      "end_date": "2024-08-15",
      "reason": "Congés d'été"
    }
    ```

    **Returns:**
    - 200: Settings saved
    - 400: Dates missing or end before start
    - 403: Admin role required
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = UpdateShopSettings(uow, SqlAlchemyShopSettingsRepository(session))
    result = await use_case.execute(request, identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value, "Paramètres enregistrés")
