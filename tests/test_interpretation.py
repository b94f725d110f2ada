"""
Session report figures.
"""
import pytest

from analytics.interpretation.interpretation_engine import summarize_session
from core.errors import EmptySessionError
from core.wear_engine import compute_wear


def test_kpis_and_decision(simple_formulas, deviation_points):
    calculations = compute_wear(deviation_points([0.25, 1.0, 0.5]), simple_formulas)

    report = summarize_session(calculations)

    assert report["kpi"]["points_total"] == 3
    assert report["kpi"]["points_nok"] == 1
    assert report["kpi"]["deviation_max"] == 1.0
    assert report["kpi"]["deviation_min"] == 0.25
    assert report["kpi"]["deviation_avg"] == pytest.approx(1.75 / 3)
    assert report["kpi"]["screw_wear_avg"] == pytest.approx(25.25 / 3)
    assert report["kpi"]["barrel_wear_avg"] == pytest.approx(9.0)
    assert report["status"] == "a_commander"
    assert report["decision"] == "changer"


def test_healthy_session_is_kept(simple_formulas, deviation_points):
    report = summarize_session(compute_wear(deviation_points([0.1, 0.2]), simple_formulas))

    assert report["kpi"]["points_nok"] == 0
    assert report["status"] == "ok"
    assert report["decision"] == "garder"


def test_chart_rows_follow_input_order(simple_formulas, deviation_points):
    calculations = compute_wear(deviation_points([0.5, 1.5]), simple_formulas)

    chart = summarize_session(calculations)["chart"]

    assert [row["point"] for row in chart] == ["P01", "P02"]
    assert chart[1] == {
        "point": "P02",
        "point_id": 2,
        "screw_wear": 7.5,
        "barrel_wear": 9.0,
        "deviation": 1.5,
        "threshold": 1.0,
    }


def test_empty_session():
    with pytest.raises(EmptySessionError):
        summarize_session([])
