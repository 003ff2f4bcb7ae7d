"""
Tests for location sources: the client's reported geolocation result and
the configured default location.
"""

import pytest
from pydantic import ValidationError

from netscout.core.errors import LocationDenied, LocationUnavailable
from netscout.services.geolocation import (
    LocationReport,
    ReportedLocationProvider,
    StaticLocationProvider,
    provider_for_report,
)


async def test_reported_fix_is_returned():
    provider = ReportedLocationProvider(LocationReport(latitude=48.8566, longitude=2.3522))
    coords = await provider.locate()
    assert (coords.latitude, coords.longitude) == (48.8566, 2.3522)


async def test_unsupported_raises_unavailable():
    with pytest.raises(LocationUnavailable):
        await ReportedLocationProvider(LocationReport(error="unsupported")).locate()


async def test_empty_report_raises_unavailable():
    with pytest.raises(LocationUnavailable):
        await ReportedLocationProvider(LocationReport()).locate()


@pytest.mark.parametrize("reason", ["denied", "unavailable", "timeout"])
async def test_other_failures_raise_denied(reason):
    with pytest.raises(LocationDenied):
        await ReportedLocationProvider(LocationReport(error=reason)).locate()


async def test_error_wins_over_coordinates():
    report = LocationReport(latitude=1.0, longitude=2.0, error="denied")
    with pytest.raises(LocationDenied):
        await ReportedLocationProvider(report).locate()


def test_half_a_coordinate_is_rejected():
    with pytest.raises(ValidationError):
        LocationReport(latitude=10.0)


@pytest.mark.parametrize("lat, lng", [(91, 0), (-91, 0), (0, 181), (0, -181)])
def test_out_of_range_coordinates_rejected(lat, lng):
    with pytest.raises(ValidationError):
        LocationReport(latitude=lat, longitude=lng)


def test_unknown_error_reason_rejected():
    with pytest.raises(ValidationError):
        LocationReport(error="exploded")


class TestDefaultLocation:
    def setup_method(self):
        import netscout.core.config as cfg

        self._original = (cfg.settings.default_latitude, cfg.settings.default_longitude)
        cfg.settings.default_latitude = 40.7128
        cfg.settings.default_longitude = -74.0060

    def teardown_method(self):
        import netscout.core.config as cfg

        cfg.settings.default_latitude, cfg.settings.default_longitude = self._original

    async def test_empty_report_uses_default(self):
        provider = provider_for_report(LocationReport())
        assert isinstance(provider, StaticLocationProvider)
        coords = await provider.locate()
        assert (coords.latitude, coords.longitude) == (40.7128, -74.0060)

    async def test_client_error_beats_default(self):
        provider = provider_for_report(LocationReport(error="denied"))
        with pytest.raises(LocationDenied):
            await provider.locate()

    async def test_client_fix_beats_default(self):
        coords = await provider_for_report(LocationReport(latitude=1.5, longitude=2.5)).locate()
        assert (coords.latitude, coords.longitude) == (1.5, 2.5)


def test_no_default_configured_replays_report():
    assert isinstance(provider_for_report(LocationReport()), ReportedLocationProvider)
