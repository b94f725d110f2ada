"""
Archive records
===============
- Build an ArchiveRecord from a measurement session
- Status / max deviation always derived from the calculations
- Filtering and counts for the archive view
"""

import uuid
from datetime import datetime, timezone

from dateutil.relativedelta import relativedelta

from core.models import ArchiveRecord, ExtruderType, Line
from core.wear_engine import compute_wear
from health.status_classifier import Status, max_deviation, reduce_overall

# months between verification and the planned intervention
INTERVENTION_DELAY_MONTHS = {
    Status.OK: None,
    Status.TO_ORDER: 3,
    Status.TO_REPLACE: 1,
}


STATUS_KEYS = {
    Status.OK: "ok",
    Status.TO_ORDER: "to_order",
    Status.TO_REPLACE: "to_replace",
}


def planned_intervention(status: Status, verification_date):
    months = INTERVENTION_DELAY_MONTHS[Status(status)]
    if months is None:
        return None
    return verification_date + relativedelta(months=months)


def build_archive_record(
    line: Line,
    extruder_type,
    points,
    formulas,
    verification_date,
    counter: int,
    entry_date=None,
    remark: str = "",
    created_by: str | None = None,
    record_id: str | None = None,
    created_at: datetime | None = None,
) -> ArchiveRecord:
    extruder_type = ExtruderType(extruder_type)
    points = tuple(points)
    calculations = tuple(compute_wear(points, formulas))
    status = reduce_overall(c.status for c in calculations)

    return ArchiveRecord(
        id=record_id or f"archive-{line.id}-{uuid.uuid4().hex[:8]}",
        line_id=line.id,
        line_name=line.name,
        extruder_type=extruder_type,
        verification_date=verification_date,
        entry_date=entry_date or verification_date,
        counter=counter,
        measurements=points,
        wear_calculations=calculations,
        formulas=formulas,
        overall_status=status,
        max_deviation=max_deviation(calculations),
        planned_intervention_date=planned_intervention(status, verification_date),
        remark=remark,
        created_at=created_at or datetime.now(timezone.utc),
        created_by=created_by,
    )


def rederive(record: ArchiveRecord) -> tuple[Status, float]:
    """
    Recompute (overall status, max deviation) from the stored
    measurements and formula set. Raises ValueError if the cached
    projections disagree.
    """
    calculations = compute_wear(record.measurements, record.formulas)
    status = reduce_overall(c.status for c in calculations)
    deviation = max_deviation(calculations)

    if tuple(calculations) != tuple(record.wear_calculations):
        raise ValueError(f"{record.id}: stored calculations do not match formulas")
    if status is not record.overall_status or deviation != record.max_deviation:
        raise ValueError(f"{record.id}: cached status / max deviation are stale")

    return status, deviation


def filter_records(records, line_id: str | None = None, status=None, query: str | None = None):
    status = Status(status) if status else None
    query = query.lower() if query else None

    result = []
    for record in records:
        if line_id and record.line_id != line_id:
            continue
        if status and record.overall_status is not status:
            continue
        if query and query not in record.line_name.lower():
            continue
        result.append(record)

    return result


def archive_stats(records) -> dict:
    stats = {"total": 0, **{key: 0 for key in STATUS_KEYS.values()}}

    for record in records:
        stats["total"] += 1
        stats[STATUS_KEYS[record.overall_status]] += 1

    return stats
