"""
Record Normalizer
=================

Turns a raw JSON body into a typed record, ready to be written.

WHAT IT DOES:
------------
1. Checks the required fields for the kind are there
2. Coerces every numeric field (strings like "37.5" are fine)
3. Fills in defaults (time = now, humidity = 0, rangeKm = 0.1)

No I/O happens here. `createdAt` is NOT set here either; Firestore stamps it
with its own clock when the gateway inserts the record.

REQUIRED FIELDS:
---------------
    sensor:  lat, lon, smoke, temp
    citizen: lat, lon
    pre:     lat, lon, startDate, endDate
"""

import logging
from typing import Any, Optional, Union

from pydantic import BaseModel

from app.exceptions import ValidationError
from app.models import RecordKind, RECORD_MODELS
from app.utils.validation import (
    epoch_millis,
    is_missing,
    missing_fields,
    parse_float,
    parse_epoch_millis,
)

logger = logging.getLogger(__name__)


REQUIRED_FIELDS = {
    RecordKind.SENSOR: ("lat", "lon", "smoke", "temp"),
    RecordKind.CITIZEN: ("lat", "lon"),
    RecordKind.PRE: ("lat", "lon", "startDate", "endDate"),
}

# field -> (parser, default). Default None means "required".
FIELD_RULES = {
    RecordKind.SENSOR: {
        "lat": (parse_float, None),
        "lon": (parse_float, None),
        "smoke": (parse_float, None),
        "temp": (parse_float, None),
        "humidity": (parse_float, 0.0),
    },
    RecordKind.CITIZEN: {
        "lat": (parse_float, None),
        "lon": (parse_float, None),
    },
    RecordKind.PRE: {
        "lat": (parse_float, None),
        "lon": (parse_float, None),
        "startDate": (parse_epoch_millis, None),
        "endDate": (parse_epoch_millis, None),
        "rangeKm": (parse_float, 0.1),
    },
}

# Kinds that carry a client-side event time
TIMED_KINDS = {RecordKind.SENSOR, RecordKind.CITIZEN}


def normalize(
    kind: Union[RecordKind, str],
    payload: Any,
    now_ms: Optional[int] = None,
) -> BaseModel:
    """
    Normalize a raw payload into the record model for `kind`.

    Args:
        kind: "sensor", "citizen" or "pre"
        payload: The decoded JSON body
        now_ms: Clock reading used for the `time` default (epoch millis).
                Sampled when the function is called if not given.

    Returns:
        A SensorReading, CitizenReport or PreReport

    Raises:
        ValidationError: Required field missing or a number didn't parse
        ValueError: `kind` is not a record kind (programming error)
    """
    kind = RecordKind(kind)

    if not isinstance(payload, dict):
        raise ValidationError(
            kind,
            invalid=["body"],
            message=f"Request body for {kind.label} must be a JSON object",
        )

    missing = missing_fields(payload, REQUIRED_FIELDS[kind])
    if missing:
        raise ValidationError(kind, missing=missing)

    values = {}
    invalid = []
    for name, (parser, default) in FIELD_RULES[kind].items():
        raw = payload.get(name)
        if is_missing(raw) or raw == "":
            if default is None:
                # Empty string on a required field is as good as missing
                invalid.append(name)
            else:
                values[name] = default
            continue
        parsed = parser(raw)
        if parsed is None:
            invalid.append(name)
        else:
            values[name] = parsed

    if invalid:
        raise ValidationError(kind, invalid=invalid)

    if kind in TIMED_KINDS:
        values["time"] = _event_time(payload.get("time"), now_ms)

    return RECORD_MODELS[kind](**values)


def _event_time(raw: Any, now_ms: Optional[int]) -> int:
    """Client `time` if it parses, otherwise the current time."""
    parsed = None if is_missing(raw) else parse_epoch_millis(raw)
    if parsed is not None:
        return parsed
    if not is_missing(raw):
        logger.debug(f"Ignoring non-numeric time {raw!r}, using ingestion time")
    return epoch_millis() if now_ms is None else now_ms
