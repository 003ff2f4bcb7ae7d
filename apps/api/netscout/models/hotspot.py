"""
hotspot.py — Pydantic models for hotspot discovery and the scan snapshot.

Hotspot is the only domain entity. Records are frozen: a scan replaces the
whole list, and re-sorting builds a new ordering, so nothing ever patches a
hotspot in place.

JSON field names are camelCase (distanceValue, signalStrength, ...) because
the scanner web app consumes them directly. Python code uses snake_case;
populate_by_name lets both spellings in.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

SENTINEL_PASSWORD = "None"


class SecurityType(str, Enum):
    OPEN = "Open"
    WPA2 = "WPA2"
    WPA3 = "WPA3"
    PUBLIC = "Public"
    ENTERPRISE = "Enterprise"


class VenueType(str, Enum):
    CAFE = "Cafe"
    LIBRARY = "Library"
    PUBLIC_SPACE = "Public Space"
    TRANSIT = "Transit"
    OTHER = "Other"


class SignalTier(str, Enum):
    HIGH = "high"      # > 80
    MEDIUM = "medium"  # > 50
    LOW = "low"


class SortKey(str, Enum):
    NAME = "name"
    DISTANCE = "distanceValue"
    SIGNAL = "signalStrength"


class ScanStatus(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    POPULATED = "populated"
    EMPTY = "empty"
    ERRORED = "errored"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Coordinates(_CamelModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


def signal_from_distance(distance_m: float) -> int:
    """Fallback signal score: 100 at the door, -1 per 10 m, never below 30."""
    return max(30, 100 - int(distance_m // 10))


def tier_for_signal(strength: int) -> SignalTier:
    if strength > 80:
        return SignalTier.HIGH
    if strength > 50:
        return SignalTier.MEDIUM
    return SignalTier.LOW


class Hotspot(_CamelModel):
    """A discovered Wi-Fi-bearing venue candidate."""

    id: str                                  # resolver-assigned, opaque, per scan
    name: str
    address: str
    distance: str                            # "150m" unless the source formatted it
    distance_value: Optional[int] = None     # metres
    signal_strength: int = Field(..., ge=0, le=100)
    security: SecurityType
    password: Optional[str] = None           # never the sentinel
    venue_type: VenueType = Field(..., alias="type")
    coordinates: Optional[Coordinates] = None

    @computed_field(alias="signalTier")
    @property
    def signal_tier(self) -> SignalTier:
        return tier_for_signal(self.signal_strength)


class RetrievalOutcome(_CamelModel):
    """Result of a community-password lookup."""

    password: Optional[str] = None
    message: str


class ScanSnapshot(_CamelModel):
    """Read-only view of the scan controller, hotspots already ordered."""

    status: ScanStatus
    hotspots: list[Hotspot]
    sort_key: SortKey
    selected_id: Optional[str] = None
    error: Optional[str] = None
    location: Optional[Coordinates] = None
    is_retrieving: bool = False
    retrieval: Optional[RetrievalOutcome] = None
