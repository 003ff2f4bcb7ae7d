"""
geolocation.py — Location sources for a scan.

The device fix happens on the client (browser Geolocation API). The client
reports what it got in the scan request: coordinates, or one of the
Geolocation API failure reasons. A provider turns that report into either
Coordinates or a LocationError, and the scan controller only cares which.

Failure reasons:
  unsupported → LocationUnavailable  (no geolocation capability)
  denied      → LocationDenied       (PERMISSION_DENIED)
  unavailable → LocationDenied       (POSITION_UNAVAILABLE)
  timeout     → LocationDenied       (TIMEOUT)
"""

import logging
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from netscout.core.config import settings
from netscout.core.errors import LocationDenied, LocationUnavailable
from netscout.models.hotspot import Coordinates

logger = logging.getLogger(__name__)

LocationFailure = Literal["unsupported", "denied", "unavailable", "timeout"]


class LocationReport(BaseModel):
    """What the client's geolocation request produced."""

    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    error: Optional[LocationFailure] = None

    @model_validator(mode="after")
    def check_coordinate_pair(self) -> "LocationReport":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be sent together")
        return self

    @property
    def has_fix(self) -> bool:
        return self.error is None and self.latitude is not None


class LocationProvider:
    """One-shot location source. Subclasses override locate()."""

    async def locate(self) -> Coordinates:
        raise NotImplementedError


class StaticLocationProvider(LocationProvider):
    """Always returns the same fix."""

    def __init__(self, coordinates: Coordinates) -> None:
        self.coordinates = coordinates

    async def locate(self) -> Coordinates:
        return self.coordinates


class ReportedLocationProvider(LocationProvider):
    """Replays the client's geolocation result."""

    def __init__(self, report: LocationReport) -> None:
        self.report = report

    async def locate(self) -> Coordinates:
        report = self.report
        if report.has_fix:
            return Coordinates(latitude=report.latitude, longitude=report.longitude)
        if report.error is None or report.error == "unsupported":
            raise LocationUnavailable("Geolocation is not supported by the client")
        raise LocationDenied(f"Geolocation failed: {report.error}")


def provider_for_report(report: LocationReport) -> LocationProvider:
    """
    Pick the location source for a scan request.

    A client that reports nothing at all gets the configured default
    location when DEFAULT_LATITUDE / DEFAULT_LONGITUDE are set; an explicit
    error from the client always wins.
    """
    if (
        not report.has_fix
        and report.error is None
        and settings.default_latitude is not None
        and settings.default_longitude is not None
    ):
        logger.debug("No client fix reported — using configured default location")
        return StaticLocationProvider(
            Coordinates(latitude=settings.default_latitude, longitude=settings.default_longitude)
        )
    return ReportedLocationProvider(report)
