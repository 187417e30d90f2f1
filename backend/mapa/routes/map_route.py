import logging
from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import HTMLResponse

from mapa.core.exceptions import MapaError
from mapa.core.logger import logs
from mapa.models.base_model import (
    EventFilterRequest, GrowZoneRequest, LocationFilterRequest, SearchRequest, SessionSnapshot
)
from mapa.services.filter_coordinator import FilterCoordinator
from mapa.services.map_view import render_map_html
from mapa.services.session_state import SessionStateManager, session_manager

router = APIRouter(prefix="/sessions", tags=["map"])

# --- Dependency Injection ---
def get_session_manager() -> SessionStateManager:
    return session_manager

def get_coordinator(
    session_id: str, manager: SessionStateManager = Depends(get_session_manager)
) -> FilterCoordinator:
    try:
        return manager.get(session_id)
    except MapaError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


def _raise_http(e: MapaError, action: str):
    logs.log(logging.WARNING if e.status_code < 500 else logging.ERROR, f"{action} failed: {e.message}")
    raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=SessionSnapshot, status_code=201)
async def create_session(manager: SessionStateManager = Depends(get_session_manager)):
    try:
        session_id = await manager.create_session()
    except MapaError as e:
        _raise_http(e, "Session creation")
    return manager.get(session_id).snapshot(session_id)

@router.get("/{session_id}", response_model=SessionSnapshot)
async def get_session(session_id: str, coordinator: FilterCoordinator = Depends(get_coordinator)):
    return coordinator.snapshot(session_id)

@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, manager: SessionStateManager = Depends(get_session_manager)):
    try:
        manager.clear_state(session_id)
    except MapaError as e:
        _raise_http(e, "Session deletion")
    return Response(status_code=204)

@router.put("/{session_id}/filters/location", response_model=SessionSnapshot)
async def change_location_filter(
    session_id: str,
    request: LocationFilterRequest,
    coordinator: FilterCoordinator = Depends(get_coordinator),
):
    try:
        await coordinator.change_location_filter(request.value)
    except MapaError as e:
        _raise_http(e, "Location filter")
    return coordinator.snapshot(session_id)

@router.put("/{session_id}/filters/event", response_model=SessionSnapshot)
async def change_event_filter(
    session_id: str,
    request: EventFilterRequest,
    coordinator: FilterCoordinator = Depends(get_coordinator),
):
    try:
        await coordinator.change_event_filter(request.value)
    except MapaError as e:
        _raise_http(e, "Event filter")
    return coordinator.snapshot(session_id)

@router.post("/{session_id}/search", response_model=SessionSnapshot)
async def search_address(
    session_id: str,
    request: SearchRequest,
    coordinator: FilterCoordinator = Depends(get_coordinator),
):
    try:
        await coordinator.submit_search(request.address)
    except MapaError as e:
        _raise_http(e, "Address search")
    return coordinator.snapshot(session_id)

@router.post("/{session_id}/zones/{zone_key}/grow", response_model=SessionSnapshot)
async def grow_zone(
    session_id: str,
    zone_key: str,
    request: GrowZoneRequest = None,
    coordinator: FilterCoordinator = Depends(get_coordinator),
):
    delta = request.delta if request is not None else None
    try:
        coordinator.grow_zone_radius(zone_key, delta)
    except MapaError as e:
        _raise_http(e, "Zone growth")
    return coordinator.snapshot(session_id)

@router.get("/{session_id}/map", response_class=HTMLResponse)
async def render_map(session_id: str, coordinator: FilterCoordinator = Depends(get_coordinator)):
    return HTMLResponse(render_map_html(coordinator.view, coordinator.zones.zones(), coordinator.markers))
