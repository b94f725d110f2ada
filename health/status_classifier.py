# health/status_classifier.py

import math
from enum import Enum

from core.errors import EmptySessionError

# Deviation (écart) threshold in mm.
DEVIATION_THRESHOLD = 1.0


class Status(str, Enum):
    OK = "ok"
    TO_ORDER = "a_commander"
    TO_REPLACE = "a_changer"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def label(self) -> str:
        return _LABELS[self]


_SEVERITY = {
    Status.OK: 0,
    Status.TO_ORDER: 1,
    Status.TO_REPLACE: 2,
}

_LABELS = {
    Status.OK: "OK",
    Status.TO_ORDER: "À commander",
    Status.TO_REPLACE: "À changer",
}


def classify(deviation: float) -> Status:
    """
    Map a deviation to a status.

    Three-way split on the literal threshold:
        deviation <  1.0 -> OK
        deviation == 1.0 -> TO_ORDER
        deviation >  1.0 -> TO_REPLACE

    The TO_ORDER branch is exact equality. Continuous readings almost
    never land on it; rounded engine output (3 dp) can.
    """
    if math.isnan(deviation):
        raise ValueError("cannot classify NaN deviation")

    if deviation < DEVIATION_THRESHOLD:
        return Status.OK
    if deviation == DEVIATION_THRESHOLD:
        return Status.TO_ORDER
    return Status.TO_REPLACE


def reduce_overall(statuses) -> Status:
    """
    Worst-case rule: TO_REPLACE > TO_ORDER > OK.
    An empty list is OK.
    """
    overall = Status.OK

    for status in statuses:
        status = Status(status)
        if status.severity > overall.severity:
            overall = status

    return overall


def max_deviation(calculations) -> float:
    """
    Largest deviation of a session. Raises EmptySessionError on an
    empty session.
    """
    if not calculations:
        raise EmptySessionError("max deviation of an empty session")

    return max(c.deviation for c in calculations)
