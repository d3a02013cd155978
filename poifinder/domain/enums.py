"""Domain enumerations."""

import enum


class EntityKind(str, enum.Enum):
    FUEL_STATION = "FUEL_STATION"
    PARKING_LOT = "PARKING_LOT"


class RankMode(str, enum.Enum):
    PRICE = "price"
    DISTANCE = "distance"
    VALUE = "value"


class FuelProduct(str, enum.Enum):
    """Opinet product codes."""

    GASOLINE = "B027"
    DIESEL = "D047"
    PREMIUM_GASOLINE = "B034"
    KEROSENE = "C004"
    LPG = "K015"
