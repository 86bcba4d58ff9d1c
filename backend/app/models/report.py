"""
Report Models
=============
Pydantic models for the three kinds of map reports we store.

This module defines all data structures used throughout the application:
- Record models: What a normalized report looks like before it is written
- Filter models: Which stored reports a read should return
- Response models: What the backend returns to the frontend

RECORD KINDS SUPPORTED:
1. Sensor - Smoke/temperature readings from field sensors
2. Citizen - "I see smoke here" reports from the map
3. Pre - Pre-burn notifications (someone is planning an open burn)

Each kind lives in its own Firestore collection. There are no links between
collections; the frontend merges them on the map.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional
from enum import Enum


# =============================================================================
# ENUMS
# =============================================================================

class RecordKind(str, Enum):
    """
    Kinds of records supported by the system.

    Each kind has its own:
    - Required fields and defaults
    - Firestore collection
    - Read filter (recency window or validity window)
    """
    SENSOR = "sensor"
    CITIZEN = "citizen"
    PRE = "pre"

    @property
    def collection(self) -> str:
        """Firestore collection name for this kind."""
        return COLLECTION_NAMES[self]

    @property
    def label(self) -> str:
        """Human-readable name used in messages."""
        return KIND_LABELS[self]


COLLECTION_NAMES = {
    RecordKind.SENSOR: "sensorData",
    RecordKind.CITIZEN: "citizenReports",
    RecordKind.PRE: "preReports",
}

KIND_LABELS = {
    RecordKind.SENSOR: "sensor data",
    RecordKind.CITIZEN: "citizen report",
    RecordKind.PRE: "pre-report",
}


# =============================================================================
# RECORD MODELS - What we write to Firestore
# =============================================================================
# None of these carry `id` or `createdAt`. Firestore assigns both on insert.

class SensorReading(BaseModel):
    """
    A single reading pushed by a field sensor (or the simulator).

    Fields:
        lat, lon: Position of the sensor
        smoke: Smoke concentration
        temp: Temperature
        humidity: Relative humidity % (0 when the sensor doesn't report it)
        time: Event time in epoch milliseconds (sensor clock)

    Example Request:
        POST /api/add/sensor
        {
            "lat": "37.5",
            "lon": 127.03,
            "smoke": 412,
            "temp": "31.2"
        }
    """
    lat: float = Field(..., description="Latitude", examples=[37.5665])
    lon: float = Field(..., description="Longitude", examples=[126.978])
    smoke: float = Field(..., description="Smoke concentration")
    temp: float = Field(..., description="Temperature")
    humidity: float = Field(default=0.0, description="Relative humidity %")
    time: int = Field(..., description="Event time (epoch millis)")


class CitizenReport(BaseModel):
    """A smoke sighting reported by someone using the map."""
    lat: float = Field(..., description="Latitude")
    lon: float = Field(..., description="Longitude")
    time: int = Field(..., description="Report time (epoch millis)")


class PreReport(BaseModel):
    """
    A pre-burn notification.

    The report is shown on the map until `endDate` passes. `startDate` is
    stored for display but never used to hide the report.
    """
    lat: float = Field(..., description="Latitude")
    lon: float = Field(..., description="Longitude")
    startDate: int = Field(..., description="Planned start (epoch millis)")
    endDate: int = Field(..., description="Planned end (epoch millis)")
    rangeKm: float = Field(default=0.1, description="Affected radius in km")


RECORD_MODELS = {
    RecordKind.SENSOR: SensorReading,
    RecordKind.CITIZEN: CitizenReport,
    RecordKind.PRE: PreReport,
}


# =============================================================================
# FILTER MODELS
# =============================================================================

class QueryFilter(BaseModel):
    """
    A single `field <op> value` predicate applied to a collection read.

    Kept independent of the Firestore SDK so it can be built and compared
    without a client. The gateway turns it into a `FieldFilter`.
    """
    model_config = ConfigDict(frozen=True)

    field: str
    op: str
    value: Any


# =============================================================================
# RESPONSE MODELS - What backend returns to frontend
# =============================================================================

class AddRecordResponse(BaseModel):
    """Returned by every POST /api/add/* endpoint (HTTP 201)."""
    message: str = Field(..., description="Status message")
    id: str = Field(..., description="Firestore document ID")


class CombinedDataResponse(BaseModel):
    """
    Everything the map needs in one response.

    Each entry is the stored document plus its `id`.
    """
    sensorData: list[dict] = Field(default_factory=list)
    citizenReports: list[dict] = Field(default_factory=list)
    preReports: list[dict] = Field(default_factory=list)
    error: Optional[str] = Field(None, description="Set when a read failed")


class DeleteAllResponse(BaseModel):
    """
    Result of DELETE /api/delete/all.

    `deleted` always has a count for every collection, even the ones that
    failed part way (documents already removed are not restored).
    """
    ok: bool
    deleted: dict[str, int] = Field(default_factory=dict)
    error: Optional[str] = None
    detail: Optional[str] = None
    failed: Optional[dict[str, str]] = None
