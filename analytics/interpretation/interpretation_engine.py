from health.status_classifier import DEVIATION_THRESHOLD, max_deviation, reduce_overall


def _mean(values) -> float:
    values = list(values)
    return sum(values) / len(values)


def summarize_session(calculations) -> dict:
    """
    Report figures for one measurement session.

    A point is NOK once its deviation reaches the threshold; a single
    NOK point makes the decision "changer".
    """
    calculations = list(calculations)
    deviation_max = max_deviation(calculations)

    deviations = [c.deviation for c in calculations]
    points_nok = sum(1 for d in deviations if d >= DEVIATION_THRESHOLD)

    return {
        "kpi": {
            "points_total": len(calculations),
            "points_nok": points_nok,
            "deviation_avg": _mean(deviations),
            "deviation_max": deviation_max,
            "deviation_min": min(deviations),
            "screw_wear_avg": _mean(c.screw_wear for c in calculations),
            "barrel_wear_avg": _mean(c.barrel_wear for c in calculations),
        },
        "status": reduce_overall(c.status for c in calculations).value,
        "decision": "changer" if points_nok > 0 else "garder",
        "chart": [
            {
                "point": f"P{index + 1:02d}",
                "point_id": c.point_id,
                "screw_wear": c.screw_wear,
                "barrel_wear": c.barrel_wear,
                "deviation": c.deviation,
                "threshold": DEVIATION_THRESHOLD,
            }
            for index, c in enumerate(calculations)
        ],
    }
