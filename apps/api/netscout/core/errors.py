"""
errors.py — NetScout exception hierarchy.

LocationError subclasses become visible error text on the scan. ParseFailed
never leaves the resolver (fallback data takes its place). A failed Gemini
call and a failed password lookup are not exceptions here: the resolver
reports ResolutionOutcome.FAILED and the scan controller maps a raising
retriever to a generic message. HotspotNotFound / NoSelection are API misuse
and are turned into HTTP errors by the routes.
"""


class NetScoutError(Exception):
    """Base class for every error raised by NetScout."""


class LocationError(NetScoutError):
    """The device could not provide a location fix."""


class LocationUnavailable(LocationError):
    """No geolocation capability on the client."""


class LocationDenied(LocationError):
    """The user refused location access, or the fix failed for another reason."""


class ParseFailed(NetScoutError):
    """The generative service answered, but no usable hotspot list was found."""


class HotspotNotFound(NetScoutError):
    def __init__(self, hotspot_id: str) -> None:
        super().__init__(f"Hotspot {hotspot_id!r} is not in the current scan")
        self.hotspot_id = hotspot_id


class NoSelection(NetScoutError):
    """A password retrieval was requested without a matching selection."""
