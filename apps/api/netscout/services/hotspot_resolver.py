"""
hotspot_resolver.py — Coordinates → Hotspot list via Gemini + Maps grounding.

Flow:
  1. One Gemini call asking for 8–12 public Wi-Fi venues near the fix.
  2. Pull the first [...] array out of the free-form reply and json-decode it.
  3. Normalise every record into a Hotspot (defaults, distance, signal,
     security, sentinel password).
  4. Anything wrong in 2–3 → the fixed three-entry sample set.
  5. The Gemini call itself failing → no hotspots, outcome FAILED.

resolve() never raises. resolve_with_outcome() additionally says whether an
empty list means "nothing around here" or "the backend failed", so the scan
controller can show the right message.
"""

import json
import logging
import math
import random
import re
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, TypeVar

from netscout.ai.gemini_client import GeminiClient, gemini_client
from netscout.core.errors import ParseFailed
from netscout.models.hotspot import (
    SENTINEL_PASSWORD,
    Coordinates,
    Hotspot,
    SecurityType,
    VenueType,
    signal_from_distance,
)

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")

EnumT = TypeVar("EnumT", bound=Enum)

_HOTSPOT_PROMPT = """\
Find 8-12 nearby public places with Wi-Fi (cafes, libraries, coworking spaces, transit hubs) near coordinates {latitude}, {longitude}.
For each place, provide:
1. Name (SSID)
2. Full Address
3. Precise distance in meters (e.g., "120m")
4. Type (Cafe, Library, Public Space, Transit, Other)
5. Security type (Open, WPA2, WPA3, Public, Enterprise)
6. A community-shared password if available, or 'None' if open.

Format the response as a JSON array of objects with properties: name, address, distanceValue (number in meters), type, password, security."""

# (name, address, metres, signal, security, password, venue)
_FALLBACK_SAMPLES = [
    ("Starbucks_Guest", "123 Main St", 150, 92, SecurityType.PUBLIC, "None (Web Login)", VenueType.CAFE),
    ("Library_Free_WiFi", "456 Library Ln", 300, 85, SecurityType.OPEN, None, VenueType.LIBRARY),
    ("DailyGrind_Secure", "789 Brew Blvd", 450, 78, SecurityType.WPA2, "coffee_lover", VenueType.CAFE),
]


class ResolutionOutcome(str, Enum):
    SUCCESS = "success"  # at least one hotspot (possibly the fallback set)
    EMPTY = "empty"      # the model answered with an empty list
    FAILED = "failed"    # the Gemini call raised


@dataclass
class Resolution:
    outcome: ResolutionOutcome
    hotspots: list[Hotspot] = field(default_factory=list)


def _new_id(index: int) -> str:
    return f"wifi-{index}-{int(time.time() * 1000)}"


def extract_json_array(text: str) -> Optional[list[Any]]:
    """
    Return the first bracketed JSON array embedded in *text*, or None.

    Tries the widest span first (first "[" to last "]"), then falls back to
    decoding from the first "[" and ignoring whatever trails the array.
    Never raises.
    """
    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end < start:
        return None

    try:
        data = json.loads(text[start : end + 1])
    except (json.JSONDecodeError, RecursionError):
        try:
            data, _ = json.JSONDecoder().raw_decode(text, start)
        except (json.JSONDecodeError, RecursionError):
            return None

    return data if isinstance(data, list) else None


def _as_metres(value: Any) -> Optional[int]:
    """
    Accept 120, 120.4, "120", "120m", "0.3 km"... and return whole metres.

    Negative, infinite and NaN values count as missing.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        m = _NUMBER.search(value)
        if not m:
            return None
        number = float(m.group())
        if "km" in value.lower():
            number *= 1000
    else:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return int(number)


def _lookup_enum(enum_cls: type[EnumT], raw: Any) -> Optional[EnumT]:
    if not isinstance(raw, str):
        return None
    wanted = raw.strip().lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    return None


def normalize_password(raw: Any) -> Optional[str]:
    """Strip the "None" sentinel (and empty values) to absence."""
    if raw is None or raw == SENTINEL_PASSWORD:
        return None
    text = str(raw)
    return text if text else None


def _coordinates(record: dict[str, Any]) -> Optional[Coordinates]:
    coords = record.get("coordinates")
    if not isinstance(coords, dict):
        return None
    lat = coords.get("lat", coords.get("latitude"))
    lng = coords.get("lng", coords.get("longitude"))
    try:
        return Coordinates(latitude=float(lat), longitude=float(lng))
    except (TypeError, ValueError):
        return None


def normalize_record(record: Any, index: int) -> Hotspot:
    """Map one loosely-typed model record onto a Hotspot."""
    if not isinstance(record, dict):
        raise ParseFailed(f"record {index} is {type(record).__name__}, not an object")

    distance_value = _as_metres(record.get("distanceValue"))
    if distance_value is None:
        distance_value = _as_metres(record.get("distance"))
    if distance_value is None:
        distance_value = random.randrange(500)

    source_distance = record.get("distance")
    if isinstance(source_distance, str) and source_distance.strip():
        distance = source_distance.strip()
    else:
        distance = f"{distance_value}m"

    raw_signal = record.get("signalStrength")
    if (
        isinstance(raw_signal, (int, float))
        and not isinstance(raw_signal, bool)
        and math.isfinite(raw_signal)
    ):
        signal = max(0, min(100, int(raw_signal)))
    else:
        signal = signal_from_distance(distance_value)

    password = normalize_password(record.get("password"))
    security = _lookup_enum(SecurityType, record.get("security"))
    if security is None:
        security = SecurityType.WPA2 if password else SecurityType.OPEN

    raw_type = record.get("type")
    if raw_type is None or raw_type == "":
        venue = VenueType.PUBLIC_SPACE
    else:
        venue = _lookup_enum(VenueType, raw_type) or VenueType.OTHER

    return Hotspot(
        id=_new_id(index),
        name=str(record.get("name") or "Unknown Hotspot"),
        address=str(record.get("address") or "Nearby"),
        distance=distance,
        distance_value=distance_value,
        signal_strength=signal,
        security=security,
        password=password,
        venue_type=venue,
        coordinates=_coordinates(record),
    )


def parse_hotspots(text: str) -> list[Hotspot]:
    """
    Turn a raw model reply into hotspots.

    Raises:
        ParseFailed: no array in the reply, or a record that can't be used.
    """
    records = extract_json_array(text)
    if records is None:
        raise ParseFailed("no JSON array found in model response")
    try:
        return [normalize_record(record, i) for i, record in enumerate(records)]
    except (ValueError, TypeError, OverflowError) as exc:
        # pydantic.ValidationError is a ValueError
        raise ParseFailed(str(exc)) from exc


def fallback_hotspots() -> list[Hotspot]:
    """The fixed sample set shown whenever the model reply is unusable."""
    return [
        Hotspot(
            id=_new_id(i),
            name=name,
            address=address,
            distance=f"{metres}m",
            distance_value=metres,
            signal_strength=signal,
            security=security,
            password=password,
            venue_type=venue,
        )
        for i, (name, address, metres, signal, security, password, venue) in enumerate(_FALLBACK_SAMPLES)
    ]


class HotspotResolver:
    """Resolves a location into nearby hotspots. Never raises to the caller."""

    def __init__(self, client: Optional[GeminiClient] = None) -> None:
        self._client = client

    @property
    def client(self) -> GeminiClient:
        # Resolved lazily so tests can patch the module-level singleton.
        return self._client or gemini_client

    async def resolve_with_outcome(self, latitude: float, longitude: float) -> Resolution:
        prompt = _HOTSPOT_PROMPT.format(latitude=latitude, longitude=longitude)

        try:
            location = Coordinates(latitude=latitude, longitude=longitude)
            text = await self.client.generate(
                prompt,
                response_key="nearby_hotspots",
                location=location,
            )
        except Exception as exc:
            logger.error("Hotspot lookup failed for (%s, %s): %s", latitude, longitude, exc)
            return Resolution(ResolutionOutcome.FAILED)

        try:
            hotspots = parse_hotspots(text or "")
        except ParseFailed as exc:
            logger.warning("Failed to parse Gemini response, using sample hotspots: %s", exc)
            return Resolution(ResolutionOutcome.SUCCESS, fallback_hotspots())

        if not hotspots:
            return Resolution(ResolutionOutcome.EMPTY)

        logger.info("Resolved %d hotspots near (%s, %s)", len(hotspots), latitude, longitude)
        return Resolution(ResolutionOutcome.SUCCESS, hotspots)

    async def resolve(self, latitude: float, longitude: float) -> list[Hotspot]:
        return (await self.resolve_with_outcome(latitude, longitude)).hotspots


hotspot_resolver = HotspotResolver()
