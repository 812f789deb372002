"""Response schemas for delivery zone lookup"""

from typing import List
from pydantic import BaseModel
from src.domain.delivery_zone import DeliveryZone


class DeliveryZoneSchema(BaseModel):
    postal_code: str
    zone: int
    cities: List[str]
    distance_km: float
    deliverable: bool

    @classmethod
    def from_zone(cls, zone: DeliveryZone) -> "DeliveryZoneSchema":
        return cls(
            postal_code=zone.postal_code,
            zone=zone.zone,
            cities=list(zone.cities),
            distance_km=zone.distance_km,
            deliverable=zone.deliverable,
        )
