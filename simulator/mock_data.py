# simulator/mock_data.py

from datetime import date

import numpy as np
from dateutil.relativedelta import relativedelta

from core.archive import build_archive_record
from core.models import (
    ExtruderType,
    Line,
    LineDefinition,
    MeasurementPoint,
    ScrewDefinition,
    line_id_for,
    line_name_for,
)
from health.line_health import apply_record
from simulator.config import SIM_CONFIG


class MockDataGenerator:
    """
    Seedable demo data: lines, sessions, archive history.

    Demo only. Nothing in the wear / trend / classification path
    draws random numbers.
    """

    def __init__(self, seed: int | None = None, cfg: dict | None = None):
        self.cfg = cfg or SIM_CONFIG
        self.rng = np.random.default_rng(seed)

    # =========================================================
    # LINES
    # =========================================================
    def _definition(self, number: int) -> LineDefinition:
        brands = self.cfg["definitions"]
        raw = brands[number % len(brands)]
        return LineDefinition(
            brand=raw["brand"],
            principal_screw=ScrewDefinition(**raw["principale"]),
            secondary_screw=ScrewDefinition(**raw["secondaire"]),
        )

    def lines(self, count: int | None = None) -> list[Line]:
        count = count or self.cfg["line_count"]
        remarks = self.cfg["line_remarks"]

        return [
            Line(
                id=line_id_for(i),
                name=line_name_for(i),
                is_active=i <= self.cfg["active_lines"],
                definition=self._definition(i) if i <= self.cfg["defined_lines"] else None,
                remark=remarks[int(self.rng.integers(len(remarks)))],
            )
            for i in range(1, count + 1)
        ]

    # =========================================================
    # SESSIONS
    # =========================================================
    def measurements(self, points: int | None = None, drift: float = 0.0) -> list[MeasurementPoint]:
        """
        drift (µm) shifts the screw readings upward, which raises the
        deviation of every point by drift.
        """
        points = points or self.cfg["points"]
        screw_low, screw_high = self.cfg["screw_range"]
        barrel_low, barrel_high = self.cfg["barrel_range"]

        screw = self.rng.uniform(screw_low, screw_high, points) + drift
        barrel = self.rng.uniform(barrel_low, barrel_high, points)

        return [
            MeasurementPoint(
                id=i + 1,
                screw_reading=round(float(screw[i]), 2),
                barrel_reading=round(float(barrel[i]), 1),
            )
            for i in range(points)
        ]

    def counter(self) -> int:
        low, high = self.cfg["counter_range"]
        return int(self.rng.integers(low, high))

    def session_payload(self, line: Line, extruder_type, verification_date: date, counter: int,
                        drift: float = 0.0) -> dict:
        extruder_type = ExtruderType(extruder_type)
        return {
            "line_id": line.id,
            "line_name": line.name,
            "extruder_type": extruder_type.value,
            "verification_date": verification_date.isoformat(),
            "counter": counter,
            "points": [p.to_dict() for p in self.measurements(drift=drift)],
            "remark": "",
            "created_by": "Simulateur",
        }

    # =========================================================
    # ARCHIVE
    # =========================================================
    def archive(self, lines, formulas_for, today: date, sessions_per_line: int | None = None):
        """
        History for the first archived lines, one session every few
        months, extruder type alternating.

        formulas_for: callable extruder_type -> WearFormulaSet
        Returns (records, lines updated with their latest snapshot).
        """
        sessions_per_line = sessions_per_line or self.cfg["sessions_per_line"]
        spacing = relativedelta(months=self.cfg["session_spacing_months"])
        remarks = self.cfg["archive_remarks"]

        records = []
        updated = []

        for index, line in enumerate(lines):
            if index >= self.cfg["archived_lines"]:
                updated.append(line)
                continue

            counter = self.counter()
            for j in reversed(range(sessions_per_line)):
                extruder_type = ExtruderType.PRINCIPAL if j % 2 == 0 else ExtruderType.SECONDARY
                verification_date = today - spacing * j
                counter += int(self.rng.integers(500, 2000))

                record = build_archive_record(
                    line=line,
                    extruder_type=extruder_type,
                    points=self.measurements(),
                    formulas=formulas_for(extruder_type),
                    verification_date=verification_date,
                    counter=counter,
                    entry_date=verification_date - relativedelta(days=1),
                    remark=remarks[int(self.rng.integers(len(remarks)))],
                    created_by="Système",
                    record_id=f"archive-{line.id}-{j}",
                )
                records.append(record)
                line = apply_record(line, record)

            updated.append(line)

        records.sort(key=lambda r: r.verification_date, reverse=True)
        return records, updated
