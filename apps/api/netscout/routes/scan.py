"""
scan.py — Hotspot scan endpoints.

Routes:
  GET  /api/v1/scan                      — current snapshot
  POST /api/v1/scan                      — start a scan (rate limited)
  PUT  /api/v1/scan/sort                 — change the sort key
  POST /api/v1/scan/select/{hotspot_id}  — toggle the selection
  POST /api/v1/scan/retrieve             — community-password lookup

Every route returns the full ScanSnapshot so the client never has to merge
partial state. The client does its own device geolocation and sends the
result as the POST /scan body:

  curl -X POST http://localhost:8000/api/v1/scan \\
    -H 'Content-Type: application/json' \\
    -d '{"latitude": 37.7955, "longitude": -122.3937}'

  curl -X POST http://localhost:8000/api/v1/scan \\
    -H 'Content-Type: application/json' \\
    -d '{"error": "denied"}'
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from netscout.core.config import settings
from netscout.core.errors import HotspotNotFound, NoSelection
from netscout.core.rate_limit import limiter
from netscout.models.hotspot import ScanSnapshot, SortKey
from netscout.services.geolocation import LocationReport, provider_for_report
from netscout.services.scan_state import ScanController, get_scan_controller

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/scan", tags=["scan"])


class SortRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sort_key: SortKey


class RetrieveRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    hotspot_id: Optional[str] = None


@router.get("", response_model=ScanSnapshot)
async def get_scan(controller: ScanController = Depends(get_scan_controller)):
    """Current scan state, hotspots ordered by the active sort key."""
    return controller.snapshot()


@router.post("", response_model=ScanSnapshot)
@limiter.limit(settings.scan_rate_limit)
async def start_scan(
    request: Request,
    payload: LocationReport,
    controller: ScanController = Depends(get_scan_controller),
):
    """
    Start a new scan from the client's geolocation result.

    Location failures are not HTTP errors: the snapshot comes back with
    status="errored" and a user-facing message, exactly like a failed
    Gemini lookup.
    """
    return await controller.start_scan(provider_for_report(payload))


@router.put("/sort", response_model=ScanSnapshot)
async def set_sort_key(
    payload: SortRequest,
    controller: ScanController = Depends(get_scan_controller),
):
    return controller.set_sort_key(payload.sort_key)


@router.post("/select/{hotspot_id}", response_model=ScanSnapshot)
async def select_hotspot(
    hotspot_id: str,
    controller: ScanController = Depends(get_scan_controller),
):
    """Select a hotspot; selecting the current one again clears the selection."""
    try:
        return controller.select_hotspot(hotspot_id)
    except HotspotNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.post("/retrieve", response_model=ScanSnapshot)
async def retrieve_password(
    payload: Optional[RetrieveRequest] = None,
    controller: ScanController = Depends(get_scan_controller),
):
    """
    Look up the community password for the selected hotspot.

    Takes ~2 s (simulated lookup). 409 when nothing, or a different
    hotspot, is selected.
    """
    hotspot_id = payload.hotspot_id if payload else None
    try:
        return await controller.retrieve_password(hotspot_id)
    except NoSelection as exc:
        raise HTTPException(status_code=409, detail=str(exc))
