"""
Shared fixtures for the wear monitor tests.
"""
from datetime import date

import pytest

from config.formulas import FormulaRegistry
from core.archive import build_archive_record
from core.archive_store import ArchiveStore
from core.models import ExtruderType, Line, MeasurementPoint, WearFormulaSet


class RecordingPublisher:
    """Stands in for MQTTPublisher; keeps every call in memory."""

    def __init__(self):
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name, args))

    def publish_calculation(self, line_id, extruder, record):
        self._record("calculation", line_id, extruder, record)

    def publish_prediction(self, line_id, extruder, payload):
        self._record("prediction", line_id, extruder, payload)

    def publish_recommendations(self, line_id, extruder, recommendations):
        self._record("recommendations", line_id, extruder, recommendations)

    def publish_line_status(self, line):
        self._record("line_status", line)

    def publish_alerts(self, alerts):
        self._record("alerts", alerts)

    def last(self, name):
        for call_name, args in reversed(self.calls):
            if call_name == name:
                return args
        return None


@pytest.fixture
def reference_formulas():
    """Legacy single constant set (A=75, B=8.94, C=61.09)."""
    return WearFormulaSet(screw_constant_a=75, screw_constant_b=8.94, barrel_constant_c=61.09)


@pytest.fixture
def simple_formulas():
    """
    A=10, B=0, C=10: deviation = screw_reading - barrel_reading / 100,
    exact in binary for the readings used in the tests.
    """
    return WearFormulaSet(screw_constant_a=10.0, screw_constant_b=0.0, barrel_constant_c=10.0)


@pytest.fixture
def sample_line():
    return Line(id="line-01", name="Line 01")


@pytest.fixture
def sample_config():
    return {
        "alerts": {"upcoming_window_days": 30, "max_alerts": 8},
        "recommendation": {"lang": "fr"},
        "formulas": [
            {
                "version": "p-1",
                "extruder_type": "principale",
                "screw_constant_a": 10.0,
                "screw_constant_b": 0.0,
                "barrel_constant_c": 10.0,
                "is_active": True,
            },
            {
                "version": "s-1",
                "extruder_type": "secondaire",
                "screw_constant_a": 50,
                "screw_constant_b": 8.94,
                "barrel_constant_c": 46.18,
                "is_active": True,
            },
        ],
    }


@pytest.fixture
def formula_registry(sample_config):
    return FormulaRegistry.from_config(sample_config)


@pytest.fixture
def archive_store():
    return ArchiveStore(max_history=50)


@pytest.fixture
def recording_publisher():
    return RecordingPublisher()


def points_with_deviations(deviations):
    """
    Points producing the given deviations under simple_formulas
    (barrel reading fixed at 100 µm -> barrel wear 9.0).
    """
    return [
        MeasurementPoint(id=i + 1, screw_reading=1.0 + d, barrel_reading=100.0)
        for i, d in enumerate(deviations)
    ]


@pytest.fixture
def make_record(sample_line, simple_formulas):
    """Factory: archive record with a given max deviation, date and counter."""

    def _make(deviation, verification_date, counter, extruder_type=ExtruderType.PRINCIPAL):
        return build_archive_record(
            line=sample_line,
            extruder_type=extruder_type,
            points=points_with_deviations([deviation - 0.5, deviation]),
            formulas=simple_formulas,
            verification_date=verification_date,
            counter=counter,
        )

    return _make


@pytest.fixture
def day0():
    return date(2024, 1, 1)


@pytest.fixture
def deviation_points():
    return points_with_deviations
