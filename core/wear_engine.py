import math
import numbers
from decimal import Decimal, ROUND_HALF_UP, localcontext

from core.errors import InvalidMeasurement
from core.models import MeasurementPoint, WearCalculation, WearFormulaSet
from health.status_classifier import classify

_PLACES = Decimal("0.001")


def round3(value: float) -> float:
    """
    Round half away from zero to 3 decimals.

    Works on the shortest repr of the float, so 2.9699999999999998
    (3.09 - 6.06) rounds to 2.970 and not 2.969. Precision grows with
    the magnitude, any finite float can be quantized.
    """
    exact = Decimal(repr(float(value)))

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, exact.adjusted() + 4)
        return float(exact.quantize(_PLACES, rounding=ROUND_HALF_UP))


def _checked(point: MeasurementPoint, name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidMeasurement(point.id, f"{name} reading is not a number: {value!r}")

    if not math.isfinite(value):
        raise InvalidMeasurement(point.id, f"{name} reading is not finite: {value!r}")

    return float(value)


def compute_point(point: MeasurementPoint, formulas: WearFormulaSet) -> WearCalculation:
    screw = _checked(point, "screw", point.screw_reading)
    barrel = _checked(point, "barrel", point.barrel_reading)

    screw_wear = round3(
        formulas.screw_constant_a - formulas.screw_constant_b - screw
    )
    barrel_wear = round3(formulas.barrel_constant_c - barrel / 100)

    # deviation comes from the rounded wear values
    deviation = round3(barrel_wear - screw_wear)

    return WearCalculation(
        point_id=point.id,
        screw_wear=screw_wear,
        barrel_wear=barrel_wear,
        deviation=deviation,
        status=classify(deviation),
    )


def compute_wear(points, formulas: WearFormulaSet) -> list[WearCalculation]:
    """
    Wear calculation for every point of a session.

    Output[i] belongs to points[i]; ids are neither sorted nor
    de-duplicated. Constants are taken as given.
    """
    points = list(points)

    if not points:
        raise InvalidMeasurement(None, "session has no measurement points")

    return [compute_point(p, formulas) for p in points]
