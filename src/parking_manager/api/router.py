"""FastAPI route definitions."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from ..config import AppConfig
from ..errors import (
    InvalidConfig,
    InvalidTimeRange,
    InvalidVehicleId,
    LedgerConsistencyError,
    ParkingRejection,
    SlotUnavailable,
    VehicleAlreadyParked,
    VehicleNotFound,
)
from ..metrics import get_metrics
from ..report import PAGE_BREAK, render_report
from ..service import ParkingService
from ..state.models import MAX_SLOT_COUNT
from .schemas import (
    ErrorResponse,
    ExitResponse,
    HealthResponse,
    HistoryEntryResponse,
    HourlyRateUpdate,
    ParkRequest,
    ResetResponse,
    SessionCreatedResponse,
    SessionResponse,
    SettingsResponse,
    SlotCountUpdate,
    SlotResponse,
    StatusResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

REJECTION_STATUS = {
    VehicleAlreadyParked: 409,
    SlotUnavailable: 409,
    VehicleNotFound: 404,
    InvalidConfig: 422,
    InvalidVehicleId: 422,
    InvalidTimeRange: 409,
}


def get_service(request: Request) -> ParkingService:
    """Service created at startup and attached to the app."""
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return service


def get_config(request: Request) -> AppConfig:
    return getattr(request.app.state, "config", None) or AppConfig()


def require_confirmation(confirm: bool = False) -> None:
    """Destructive operations must be sent with ?confirm=true."""
    if not confirm:
        raise HTTPException(
            status_code=428,
            detail="This operation discards data; repeat the request with confirm=true",
        )


async def rejection_handler(request: Request, exc: ParkingRejection) -> JSONResponse:
    """Turn a rejected operation into a 4xx response."""
    status_code = REJECTION_STATUS.get(type(exc), 400)
    body = ErrorResponse(error=exc.code, detail=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def consistency_error_handler(request: Request, exc: LedgerConsistencyError) -> JSONResponse:
    logger.error(f"Internal consistency fault on {request.url.path}: {exc}")
    body = ErrorResponse(error="internal_error", detail=str(exc))
    return JSONResponse(status_code=500, content=body.model_dump())


def _settings_response(service: ParkingService) -> SettingsResponse:
    return SettingsResponse(
        slot_count=service.settings.slot_count,
        hourly_rate=service.settings.hourly_rate,
        max_slot_count=MAX_SLOT_COUNT,
        durable=service.durable,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint.

    Reports whether the latest state change reached storage.
    """
    started_at = getattr(request.app.state, "started_at", datetime.now())
    uptime = (datetime.now() - started_at).total_seconds()
    service = getattr(request.app.state, "service", None)

    return HealthResponse(
        status="healthy" if service is not None else "starting",
        durable=service.durable if service is not None else False,
        uptime_seconds=uptime,
    )


@router.get("/status", response_model=StatusResponse)
async def get_status(service: ParkingService = Depends(get_service)) -> StatusResponse:
    """
    Get overall lot status.

    Returns revenue, occupancy and the state of every slot.
    """
    stats = service.statistics()

    return StatusResponse(
        total_slots=stats.total_slots,
        available=stats.available_count,
        occupied=stats.occupied_count,
        occupancy_rate=stats.occupancy_rate,
        total_revenue=stats.total_revenue,
        hourly_rate=service.settings.hourly_rate,
        active_sessions=stats.active_sessions,
        completed_sessions=stats.completed_sessions,
        slots=[SlotResponse(**s.model_dump()) for s in service.slots()],
        durable=service.durable,
    )


@router.get("/slots", response_model=list[SlotResponse])
async def list_slots(
    free: bool | None = None,
    service: ParkingService = Depends(get_service),
) -> list[SlotResponse]:
    """
    List slots in id order.

    Args:
        free: Only free slots if true, only occupied ones if false
    """
    if free is None:
        slots = service.slots()
    elif free:
        slots = service.registry.list_free()
    else:
        slots = service.registry.list_occupied()

    return [SlotResponse(**s.model_dump()) for s in slots]


@router.get("/slots/{slot_id}", response_model=SlotResponse)
async def get_slot(slot_id: int, service: ParkingService = Depends(get_service)) -> SlotResponse:
    """
    Get a specific parking slot.

    Args:
        slot_id: The number of the slot to query
    """
    slot = service.get_slot(slot_id)
    if slot is None:
        raise HTTPException(status_code=404, detail=f"Slot {slot_id} not found")

    return SlotResponse(**slot.model_dump())


@router.get("/sessions", response_model=list[SessionResponse])
async def list_sessions(service: ParkingService = Depends(get_service)) -> list[SessionResponse]:
    """
    List active sessions with their elapsed time.

    Clients poll this to keep live durations current.
    """
    return [SessionResponse(**v.model_dump()) for v in service.active_session_views()]


@router.post("/sessions", response_model=SessionCreatedResponse, status_code=201)
async def park_vehicle(
    body: ParkRequest,
    service: ParkingService = Depends(get_service),
) -> SessionCreatedResponse:
    """Park a vehicle in a free slot."""
    session = service.park(body.vehicle_id, body.slot_id)
    return SessionCreatedResponse(**session.model_dump(), durable=service.durable)


@router.delete("/sessions/{vehicle_id}", response_model=ExitResponse)
async def exit_vehicle(
    vehicle_id: str,
    service: ParkingService = Depends(get_service),
) -> ExitResponse:
    """
    Exit a vehicle.

    Computes the fee, frees the slot and returns the archived record.
    """
    entry = service.unpark(vehicle_id)
    return ExitResponse(**entry.model_dump(), durable=service.durable)


@router.get("/history", response_model=list[HistoryEntryResponse])
async def list_history(
    newest_first: bool = False,
    service: ParkingService = Depends(get_service),
) -> list[HistoryEntryResponse]:
    """Completed sessions, in exit order unless newest_first is set."""
    entries = service.history()
    if newest_first:
        entries.reverse()
    return [HistoryEntryResponse(**e.model_dump()) for e in entries]


@router.get("/settings", response_model=SettingsResponse)
async def get_settings(service: ParkingService = Depends(get_service)) -> SettingsResponse:
    return _settings_response(service)


@router.put(
    "/settings/slot-count",
    response_model=SettingsResponse,
    dependencies=[Depends(require_confirmation)],
)
async def update_slot_count(
    body: SlotCountUpdate,
    service: ParkingService = Depends(get_service),
) -> SettingsResponse:
    """
    Resize the lot.

    Resets every slot and discards active sessions and history.
    Requires confirm=true.
    """
    service.update_slot_count(body.slot_count)
    return _settings_response(service)


@router.put("/settings/hourly-rate", response_model=SettingsResponse)
async def update_hourly_rate(
    body: HourlyRateUpdate,
    service: ParkingService = Depends(get_service),
) -> SettingsResponse:
    """Change the rate charged for future exits."""
    service.update_hourly_rate(body.hourly_rate)
    return _settings_response(service)


@router.post("/reset", response_model=ResetResponse, dependencies=[Depends(require_confirmation)])
async def clear_all(service: ParkingService = Depends(get_service)) -> ResetResponse:
    """
    Clear all data.

    Frees every slot and deletes active sessions and history.
    Requires confirm=true.
    """
    service.clear_all()
    return ResetResponse(
        success=True,
        message="All data cleared",
        durable=service.durable,
    )


@router.get("/report", response_class=PlainTextResponse)
async def get_report(
    service: ParkingService = Depends(get_service),
    config: AppConfig = Depends(get_config),
) -> PlainTextResponse:
    """
    Plain-text report of statistics, slots, sessions and history.

    Pages are separated by form feeds.
    """
    pages = render_report(
        service.snapshot(),
        service.statistics(),
        generated_at=service.clock(),
        currency=config.lot.currency_symbol,
        lines_per_page=config.report.lines_per_page,
    )
    return PlainTextResponse(PAGE_BREAK.join(pages))


@router.get("/metrics")
async def prometheus_metrics() -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format including:
    - parking_sessions_started_total / parking_sessions_completed_total
    - parking_revenue_total: Fees charged since process start
    - parking_session_fee / parking_session_billed_hours: Per-exit histograms
    - parking_rejections_total: Rejected operations by reason
    - parking_snapshot_save_failures_total: Failed snapshot writes
    - parking_slots_total / _available / _occupied: Current slot counts
    """
    return Response(
        content=get_metrics(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
