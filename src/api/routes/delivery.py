"""Delivery Zone API Routes"""

from typing import List
from fastapi import APIRouter

from libs.result import Error
from src.api.error import ClientError
from src.api.schemas.delivery_response import DeliveryZoneSchema
from src.api.schemas.response import ApiResponse, success_response
from src.app import errors
from src.domain.delivery_zone import InvalidPostalCode, find_zone, list_deliverable_zones

router = APIRouter(prefix="/delivery", tags=["Delivery"])


@router.get("/zones", response_model=ApiResponse[List[DeliveryZoneSchema]])
async def list_zones():
    """List every deliverable postal code, nearest first."""
    return success_response([DeliveryZoneSchema.from_zone(zone) for zone in list_deliverable_zones()])


@router.get(
    "/zones/{postal_code}",
    response_model=ApiResponse[DeliveryZoneSchema],
    responses={
        400: {"description": "Postal code is not five digits"},
        404: {"description": "Postal code not covered"},
    }
)
async def lookup_zone(postal_code: str):
    """
    Look up the delivery zone of a postal code.

    **Returns:**
    - 200: Zone with its communes and distance
    - 400: `INVALID_POSTAL_CODE`, the code is not exactly five digits
    - 404: `DELIVERY_ZONE_NOT_COVERED`, we do not deliver there
    """
    try:
        zone = find_zone(postal_code)
    except InvalidPostalCode as e:
        raise ClientError(Error(code=errors.INVALID_POSTAL_CODE, message=str(e)))

    if zone is None or not zone.deliverable:
        raise ClientError(
            Error(
                code=errors.DELIVERY_ZONE_NOT_COVERED,
                message=f"We do not deliver to postal code {postal_code}",
            ),
            status_code=404,
        )

    return success_response(DeliveryZoneSchema.from_zone(zone))
