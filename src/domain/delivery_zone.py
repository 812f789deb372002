"""Delivery Zone Lookup

Pure lookup of delivery eligibility by French postal code. Zones are
distance bands around the shop in Brétigny-sur-Orge (91).

A malformed postal code raises InvalidPostalCode; a well-formed code outside
the covered communes simply has no zone. Callers must keep the two apart.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

POSTAL_CODE_PATTERN = re.compile(r"^\d{5}$")


class InvalidPostalCode(ValueError):
    """Raised when a postal code is not exactly five digits"""

    def __init__(self, postal_code: str):
        super().__init__(f"Invalid postal code format: {postal_code!r}")
        self.postal_code = postal_code


@dataclass(frozen=True)
class Commune:
    postal_code: str
    city: str
    population: int
    distance_km: float
    zone: int
    deliverable: bool = True


@dataclass(frozen=True)
class DeliveryZone:
    """All covered communes sharing one postal code"""

    postal_code: str
    zone: int
    cities: Tuple[str, ...]
    distance_km: float
    deliverable: bool


DELIVERY_COMMUNES: Tuple[Commune, ...] = (
    # Zone 1: 1.7 - 4.5 km
    Commune("91220", "Le Plessis-Pâté", 3928, 1.7, 1),
    Commune("91240", "Saint-Michel-sur-Orge", 20258, 2.6, 1),
    Commune("91310", "Leuville-sur-Orge", 4199, 3.3, 1),
    Commune("91700", "Sainte-Geneviève-des-Bois", 34320, 3.6, 1),
    Commune("91310", "Longpont-sur-Orge", 6631, 3.9, 1),
    Commune("91310", "Linas", 6334, 4.0, 1),
    Commune("91180", "Saint-Germain-lès-Arpajon", 9181, 4.2, 1),
    Commune("91310", "Montlhéry", 6645, 4.2, 1),
    Commune("91290", "La Norville", 4036, 4.4, 1),
    Commune("91700", "Fleury-Mérogis", 9205, 4.5, 1),
    # Zone 2: 4.9 - 6.8 km
    Commune("91290", "Arpajon", 9783, 4.9, 2),
    Commune("91630", "Guibeville", 748, 5.0, 2),
    Commune("91630", "Leudeville", 1295, 5.1, 2),
    Commune("91630", "Marolles-en-Hurepoix", 4787, 5.3, 2),
    Commune("91070", "Bondoufle", 9572, 5.4, 2),
    Commune("91700", "Villiers-sur-Orge", 3840, 5.4, 2),
    Commune("91810", "Vert-le-Grand", 2321, 5.5, 2),
    Commune("91620", "La Ville-du-Bois", 6886, 6.4, 2),
    Commune("91360", "Villemoisson-sur-Orge", 6964, 6.4, 2),
    Commune("91490", "Marcoussis", 7772, 6.8, 2),
    # Zone 3: 6.8 - 7.7 km
    Commune("91470", "Morsang-sur-Orge", 21884, 6.8, 3),
    Commune("91580", "Avrainville", 685, 6.8, 3),
    Commune("91400", "Ollainville", 4671, 6.9, 3),
    Commune("91170", "Égly", 5267, 7.0, 3),
    Commune("91630", "Cheptainville", 1790, 7.2, 3),
    Commune("91580", "Épinay-sur-Orge", 10234, 7.3, 3),
    Commune("91160", "Courcouronnes", 14595, 7.4, 3),
    Commune("91160", "Ballainvilliers", 3608, 7.4, 3),
    Commune("91830", "Nozay", 4766, 7.4, 3),
    Commune("91940", "Vert-le-Petit", 2560, 7.7, 3),
    # Zone 4: 7.8 - 9.6 km
    Commune("91270", "Saint-Vrain", 2825, 7.8, 4),
    Commune("91600", "Savigny-sur-Orge", 37623, 7.9, 4),
    Commune("91350", "Grigny", 26131, 7.9, 4),
    Commune("91170", "Viry-Châtillon", 31626, 8.3, 4),
    Commune("91290", "Écharcon", 716, 8.7, 4),
    Commune("91740", "Bruyères-le-Châtel", 3140, 8.7, 4),
    Commune("91090", "Lisses", 7001, 8.8, 4),
    Commune("91360", "Ris-Orangis", 26813, 9.0, 4),
    Commune("91800", "Boissy-sous-Saint-Yon", 3680, 9.4, 4),
    Commune("91540", "Fontenay-le-Vicomte", 1234, 9.6, 4),
    # Zone 5: 9.7 - 10.0 km
    Commune("91160", "Villejust", 2079, 9.7, 5),
    Commune("91160", "Saulx-les-Chartreux", 4938, 9.7, 5),
    Commune("91160", "Longjumeau", 21177, 9.8, 5),
    Commune("91590", "Bouray-sur-Juine", 1943, 10.0, 5),
)


def normalize_postal_code(postal_code: str) -> str:
    """Strip all whitespace and check the five-digit format"""
    normalized = re.sub(r"\s+", "", postal_code or "")
    if not POSTAL_CODE_PATTERN.match(normalized):
        raise InvalidPostalCode(postal_code)
    return normalized


def find_zone(postal_code: str) -> Optional[DeliveryZone]:
    """
    Find the delivery zone of a postal code

    Raises:
        InvalidPostalCode: postal code is not five digits

    Returns:
        DeliveryZone if the postal code is covered, None otherwise
    """
    normalized = normalize_postal_code(postal_code)
    communes = [c for c in DELIVERY_COMMUNES if c.postal_code == normalized]
    if not communes:
        return None

    nearest = min(communes, key=lambda c: c.distance_km)
    return DeliveryZone(
        postal_code=normalized,
        zone=nearest.zone,
        cities=tuple(c.city for c in communes),
        distance_km=nearest.distance_km,
        deliverable=any(c.deliverable for c in communes),
    )


def is_deliverable(postal_code: str) -> bool:
    zone = find_zone(postal_code)
    return zone.deliverable if zone else False


def list_deliverable_zones() -> List[DeliveryZone]:
    """One entry per deliverable postal code, nearest first"""
    codes = sorted(
        {c.postal_code for c in DELIVERY_COMMUNES if c.deliverable},
        key=lambda code: min(
            c.distance_km for c in DELIVERY_COMMUNES if c.postal_code == code
        ),
    )
    return [find_zone(code) for code in codes]
