import logging
import math
from datetime import date

from core.errors import InvalidMeasurement
from core.models import ExtruderType, MeasurementPoint

logger = logging.getLogger(__name__)

REQUIRED_SESSION_KEYS = ("line_id", "extruder_type", "verification_date", "counter", "points")

_SCREW_KEYS = ("screw", "vis", "screw_reading")
_BARREL_KEYS = ("barrel", "chemise", "barrel_reading")


def normalize_reading(raw, point_id, field: str = "reading") -> float:
    """
    Operator input -> float (µm).

    "58,4" -> 58.4, blank -> 0.0. Anything else that is not a finite
    number is rejected.
    """
    if raw is None:
        return 0.0

    if isinstance(raw, bool):
        raise InvalidMeasurement(point_id, f"{field} is not a number: {raw!r}")

    if isinstance(raw, str):
        text = raw.replace(",", ".").strip()
        if text == "":
            return 0.0
        try:
            value = float(text)
        except ValueError:
            raise InvalidMeasurement(point_id, f"{field} is not a number: {raw!r}") from None
    else:
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise InvalidMeasurement(point_id, f"{field} is not a number: {raw!r}") from None

    if not math.isfinite(value):
        raise InvalidMeasurement(point_id, f"{field} is not finite: {raw!r}")

    return value


def _first_present(raw: dict, keys):
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _point_id(raw_id, index: int) -> int:
    if isinstance(raw_id, bool):
        raise InvalidMeasurement(raw_id, f"point #{index + 1} has an invalid id")
    try:
        point_id = int(raw_id)
    except (TypeError, ValueError, OverflowError):
        raise InvalidMeasurement(raw_id, f"point #{index + 1} has an invalid id") from None

    # 2.5 truncates silently under int(); "02" is a padded 2
    truncated = float(raw_id) != point_id

    if point_id <= 0 or truncated:
        raise InvalidMeasurement(raw_id, f"point #{index + 1} id must be a positive integer")
    return point_id


def parse_points(raw_points) -> list[MeasurementPoint]:
    if not raw_points:
        raise InvalidMeasurement(None, "session has no measurement points")

    points = []
    for index, raw in enumerate(raw_points):
        if not isinstance(raw, dict):
            raise InvalidMeasurement(None, f"point #{index + 1} is malformed")

        point_id = _point_id(raw.get("id", index + 1), index)

        points.append(
            MeasurementPoint(
                id=point_id,
                screw_reading=normalize_reading(_first_present(raw, _SCREW_KEYS), point_id, "screw"),
                barrel_reading=normalize_reading(_first_present(raw, _BARREL_KEYS), point_id, "barrel"),
            )
        )

    return points


def _parse_date(value, key: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValueError(f"{key} is not an ISO date: {value!r}") from None


def validate_session_payload(payload: dict) -> dict:
    """
    Normalize a measurement session payload.

    Raises ValueError (InvalidMeasurement for point data) when the
    session cannot be used.
    """
    missing = [k for k in REQUIRED_SESSION_KEYS if payload.get(k) in (None, "")]
    if missing:
        raise ValueError(f"session payload missing keys: {missing}")

    counter = payload["counter"]
    if isinstance(counter, bool) or not isinstance(counter, (int, str)):
        raise ValueError(f"counter is not an integer: {counter!r}")
    try:
        counter = int(counter)
    except ValueError:
        raise ValueError(f"counter is not an integer: {counter!r}") from None
    if counter < 0:
        raise ValueError(f"counter must not be negative: {counter}")

    verification_date = _parse_date(payload["verification_date"], "verification_date")
    entry_date = payload.get("entry_date")

    session = {
        "line_id": str(payload["line_id"]),
        "line_name": payload.get("line_name"),
        "extruder_type": ExtruderType(payload["extruder_type"]),
        "verification_date": verification_date,
        "entry_date": _parse_date(entry_date, "entry_date") if entry_date else verification_date,
        "counter": counter,
        "points": parse_points(payload["points"]),
        "remark": payload.get("remark") or "",
        "created_by": payload.get("created_by"),
    }

    logger.debug(
        "Session %s/%s validated (%d points)",
        session["line_id"], session["extruder_type"].value, len(session["points"]),
    )
    return session
