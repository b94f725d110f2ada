"""
Input boundary: operator readings and session payloads.
"""
from datetime import date

import pytest

from core.errors import InvalidMeasurement
from core.models import ExtruderType
from raw_ingest.mqtt_listener import parse_topic
from raw_ingest.validator import (
    normalize_reading,
    parse_points,
    validate_session_payload,
)


@pytest.fixture
def session_payload():
    return {
        "line_id": "line-03",
        "line_name": "Line 03",
        "extruder_type": "secondaire",
        "verification_date": "2024-05-02",
        "counter": "6120",
        "points": [
            {"id": 1, "screw": "58,4", "barrel": 5800},
            {"id": 2, "vis": 60.1, "chemise": "5 900"},
        ],
    }


class TestNormalizeReading:
    def test_comma_decimal(self):
        assert normalize_reading(" 58,4 ", 1) == 58.4

    def test_blank_is_zero(self):
        assert normalize_reading("", 1) == 0.0
        assert normalize_reading("   ", 1) == 0.0
        assert normalize_reading(None, 1) == 0.0

    def test_numbers_pass_through(self):
        assert normalize_reading(61, 1) == 61.0
        assert normalize_reading(5800.5, 1) == 5800.5

    @pytest.mark.parametrize("raw", ["abc", "5 900", "nan", "inf", float("nan"), True, [1]])
    def test_rejected(self, raw):
        with pytest.raises(InvalidMeasurement) as exc:
            normalize_reading(raw, 7, "barrel")

        assert exc.value.point_id == 7


class TestParsePoints:
    def test_aliases_and_order(self):
        points = parse_points([
            {"id": 3, "vis": "59", "chemise": "5700"},
            {"id": 1, "screw": 60, "barrel": 5800},
        ])

        assert [p.id for p in points] == [3, 1]
        assert points[0].screw_reading == 59.0
        assert points[1].barrel_reading == 5800.0

    def test_missing_id_uses_position(self):
        points = parse_points([{"screw": 60, "barrel": 5800}, {"screw": 61, "barrel": 5800}])

        assert [p.id for p in points] == [1, 2]

    @pytest.mark.parametrize("bad_id", [0, -2, 2.5, "x", True, float("inf")])
    def test_invalid_ids(self, bad_id):
        with pytest.raises(InvalidMeasurement):
            parse_points([{"id": bad_id, "screw": 60, "barrel": 5800}])

    def test_zero_padded_ids(self):
        points = parse_points([
            {"id": "01", "screw": 60, "barrel": 5800},
            {"id": "02", "screw": 61, "barrel": 5800},
            {"id": 3.0, "screw": 62, "barrel": 5800},
        ])

        assert [p.id for p in points] == [1, 2, 3]

    def test_empty(self):
        with pytest.raises(InvalidMeasurement):
            parse_points([])


class TestValidateSessionPayload:
    def test_rejects_bad_reading_with_point_id(self, session_payload):
        with pytest.raises(InvalidMeasurement) as exc:
            validate_session_payload(session_payload)

        assert exc.value.point_id == 2

    def test_valid_session(self, session_payload):
        session_payload["points"][1]["chemise"] = "5900"

        session = validate_session_payload(session_payload)

        assert session["extruder_type"] is ExtruderType.SECONDARY
        assert session["verification_date"] == date(2024, 5, 2)
        assert session["entry_date"] == date(2024, 5, 2)
        assert session["counter"] == 6120
        assert [p.screw_reading for p in session["points"]] == [58.4, 60.1]
        assert session["remark"] == ""

    def test_counter_is_mandatory(self, session_payload):
        session_payload["counter"] = ""

        with pytest.raises(ValueError, match="counter"):
            validate_session_payload(session_payload)

    @pytest.mark.parametrize("counter", [-1, "12a", 12.5])
    def test_invalid_counter(self, session_payload, counter):
        session_payload["counter"] = counter

        with pytest.raises(ValueError):
            validate_session_payload(session_payload)

    def test_unknown_extruder(self, session_payload):
        session_payload["extruder_type"] = "tertiaire"

        with pytest.raises(ValueError):
            validate_session_payload(session_payload)

    def test_bad_date(self, session_payload):
        session_payload["verification_date"] = "02/05/2024"

        with pytest.raises(ValueError):
            validate_session_payload(session_payload)


class TestTopic:
    def test_parse(self):
        assert parse_topic("wear/sessions/line-01/principale") == ("line-01", "principale")

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_topic("wear/line-01/principale")
