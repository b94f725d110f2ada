from dataclasses import replace

from dateutil.relativedelta import relativedelta

from core.models import ArchiveRecord, ExtruderSnapshot, ExtruderType, Line
from health.status_classifier import Status

VERIFICATION_INTERVAL = relativedelta(years=1)


def apply_record(line: Line, record: ArchiveRecord) -> Line:
    """
    New Line whose extruder snapshot reflects the given record.
    Older records never overwrite a newer snapshot.
    """
    if record.line_id != line.id:
        raise ValueError(f"record {record.id} belongs to {record.line_id}, not {line.id}")

    current = line.snapshot(record.extruder_type)
    if current.last_verification and current.last_verification > record.verification_date:
        return line

    snapshot = ExtruderSnapshot(
        status=record.overall_status,
        counter=record.counter,
        deviation=record.max_deviation,
        last_verification=record.verification_date,
        next_verification=record.verification_date + VERIFICATION_INTERVAL,
    )

    if record.extruder_type is ExtruderType.PRINCIPAL:
        return replace(line, principal=snapshot)
    return replace(line, secondary=snapshot)


def dashboard_stats(lines) -> dict:
    """
    Status counts over both extruders of every line.
    """
    stats = {
        "total_lines": 0,
        "active_lines": 0,
        "ok": 0,
        "to_order": 0,
        "to_replace": 0,
        "pending_verifications": 0,
    }
    keys = {
        Status.OK: "ok",
        Status.TO_ORDER: "to_order",
        Status.TO_REPLACE: "to_replace",
    }

    for line in lines:
        stats["total_lines"] += 1
        if line.is_active:
            stats["active_lines"] += 1

        for snapshot in (line.principal, line.secondary):
            if snapshot.status is None:
                if line.is_active:
                    stats["pending_verifications"] += 1
                continue
            stats[keys[snapshot.status]] += 1

    return stats


def filter_lines(lines, status=None) -> list[Line]:
    """Active lines, optionally those with an extruder in the given status."""
    status = Status(status) if status else None

    return [
        line for line in lines
        if line.is_active
        and (
            status is None
            or line.principal.status is status
            or line.secondary.status is status
        )
    ]
