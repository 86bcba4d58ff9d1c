"""
Reports API Router
==================

The endpoints the map frontend talks to.

HOW IT WORKS:
------------
1. Frontend sends an HTTP request (GET or POST, JSON body)
2. FastAPI routes it to the right function here
3. We call the ReportManager to do the work
4. We send back JSON

ALL ENDPOINTS:
-------------
GET    /api/data            - Sensor data + citizen reports + pre-reports
GET    /api/stream/sensor   - Same as /api/data
POST   /api/add/sensor      - Add a sensor reading     (lat, lon, smoke, temp)
POST   /api/add/citizen     - Add a citizen report     (lat, lon)
POST   /api/add/pre         - Add a pre-burn report    (lat, lon, startDate, endDate)

Bodies are loosely typed on purpose: numbers may arrive as strings and get
coerced. A missing or non-numeric required field is a 400.
"""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.exceptions import ConfigurationError, ValidationError
from app.models import RecordKind, AddRecordResponse, CombinedDataResponse
from app.services import CollectionGateway, ReportManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reports"])


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================

def get_report_manager(request: Request) -> ReportManager:
    """
    Build a ReportManager around the app's store handle.

    The handle lives on `app.state.store` (set at startup or passed to
    create_app). Every endpoint that touches Firestore uses this.
    """
    store = getattr(request.app.state, "store", None)
    if store is None or not store.is_available:
        raise ConfigurationError(getattr(store, "reason", None) or "Document store not initialized")

    config = request.app.state.config
    return ReportManager(
        CollectionGateway(store.client),
        batch_size=config.DELETE_BATCH_SIZE,
        window_hours=config.RECENCY_WINDOW_HOURS,
    )


async def read_payload(request: Request, kind: RecordKind):
    """Decode the JSON body. An empty body counts as `{}`."""
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except ValueError:
        raise ValidationError(kind, invalid=["body"], message="Request body is not valid JSON")


# =============================================================================
# READ ENDPOINTS
# =============================================================================

@router.get("/data", response_model=CombinedDataResponse, response_model_exclude_none=True)
async def get_combined_data(manager: ReportManager = Depends(get_report_manager)):
    """
    Get everything the map should show right now.

    - sensorData / citizenReports: `time` within the last 24 hours
    - preReports: `endDate` still in the future

    If a collection can't be read, this returns 500 with an `error` and an
    empty list for that collection, so the map can still render.
    """
    snapshot = await manager.fetch_snapshot()

    if not snapshot.ok:
        logger.error(f"Combined read failed for: {', '.join(snapshot.errors)}")
        content = dict(snapshot.records)
        content["error"] = "Error fetching combined data"
        return JSONResponse(status_code=500, content=jsonable_encoder(content))

    return snapshot.records


# Older frontends poll this path
router.add_api_route(
    "/stream/sensor",
    get_combined_data,
    methods=["GET"],
    response_model=CombinedDataResponse,
    response_model_exclude_none=True,
    include_in_schema=False,
)


# =============================================================================
# WRITE ENDPOINTS
# =============================================================================

async def _add(kind: RecordKind, request: Request, manager: ReportManager) -> AddRecordResponse:
    payload = await read_payload(request, kind)
    doc_id = await manager.add_record(kind, payload)
    return AddRecordResponse(message=f"{kind.label.capitalize()} added", id=doc_id)


@router.post("/add/sensor", status_code=201, response_model=AddRecordResponse)
async def add_sensor_data(request: Request, manager: ReportManager = Depends(get_report_manager)):
    """
    Add a sensor reading.

    Send us:
    - lat, lon, smoke, temp (required)
    - humidity (optional, default 0)
    - time (optional epoch millis, default now)
    """
    return await _add(RecordKind.SENSOR, request, manager)


@router.post("/add/citizen", status_code=201, response_model=AddRecordResponse)
async def add_citizen_report(request: Request, manager: ReportManager = Depends(get_report_manager)):
    """Add a citizen smoke report (lat, lon, optional time)."""
    return await _add(RecordKind.CITIZEN, request, manager)


@router.post("/add/pre", status_code=201, response_model=AddRecordResponse)
async def add_pre_report(request: Request, manager: ReportManager = Depends(get_report_manager)):
    """
    Add a pre-burn report.

    Send us:
    - lat, lon (required)
    - startDate, endDate (required, epoch millis)
    - rangeKm (optional, default 0.1)

    The report shows on the map until endDate.
    """
    return await _add(RecordKind.PRE, request, manager)
