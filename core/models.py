# core/models.py

from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from enum import Enum

from health.status_classifier import Status


class ExtruderType(str, Enum):
    PRINCIPAL = "principale"
    SECONDARY = "secondaire"

    @property
    def label(self) -> str:
        return "Principale" if self is ExtruderType.PRINCIPAL else "Secondaire"


# =========================================================
# MEASUREMENT SESSION
# =========================================================
@dataclass(frozen=True)
class MeasurementPoint:
    """
    One reading pair at a numbered location (µm).
    """
    id: int
    screw_reading: float
    barrel_reading: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "screw": self.screw_reading,
            "barrel": self.barrel_reading,
        }


@dataclass(frozen=True)
class WearFormulaSet:
    """
    Calibration constants of one extruder type.

        screw wear  = A - B - screw_reading
        barrel wear = C - barrel_reading / 100
    """
    screw_constant_a: float
    screw_constant_b: float
    barrel_constant_c: float

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "WearFormulaSet":
        return cls(
            screw_constant_a=float(data["screw_constant_a"]),
            screw_constant_b=float(data["screw_constant_b"]),
            barrel_constant_c=float(data["barrel_constant_c"]),
        )


@dataclass(frozen=True)
class WearCalculation:
    point_id: int
    screw_wear: float
    barrel_wear: float
    deviation: float
    status: Status

    def to_dict(self) -> dict:
        return {
            "point_id": self.point_id,
            "screw_wear": self.screw_wear,
            "barrel_wear": self.barrel_wear,
            "deviation": self.deviation,
            "status": self.status.value,
        }


# =========================================================
# HISTORY
# =========================================================
@dataclass(frozen=True)
class ArchiveRecord:
    """
    Snapshot of one verification session for one line + extruder.

    overall_status / max_deviation / planned_intervention_date are
    projections of wear_calculations, built by core.archive only.
    """
    id: str
    line_id: str
    line_name: str
    extruder_type: ExtruderType
    verification_date: date
    entry_date: date
    counter: int
    measurements: tuple[MeasurementPoint, ...]
    wear_calculations: tuple[WearCalculation, ...]
    formulas: WearFormulaSet
    overall_status: Status
    max_deviation: float
    planned_intervention_date: date | None
    remark: str = ""
    created_at: datetime | None = None
    created_by: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "line_id": self.line_id,
            "line_name": self.line_name,
            "extruder_type": self.extruder_type.value,
            "verification_date": self.verification_date.isoformat(),
            "entry_date": self.entry_date.isoformat(),
            "counter": self.counter,
            "measurements": [m.to_dict() for m in self.measurements],
            "wear_calculations": [c.to_dict() for c in self.wear_calculations],
            "formulas": self.formulas.to_dict(),
            "status": self.overall_status.value,
            "max_deviation": self.max_deviation,
            "planned_intervention_date": (
                self.planned_intervention_date.isoformat()
                if self.planned_intervention_date else None
            ),
            "remark": self.remark,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "created_by": self.created_by,
        }


# =========================================================
# LINES
# =========================================================
@dataclass(frozen=True)
class ScrewDefinition:
    dimensions: str
    reference: str


@dataclass(frozen=True)
class LineDefinition:
    brand: str
    principal_screw: ScrewDefinition
    secondary_screw: ScrewDefinition

    def screw(self, extruder_type: ExtruderType) -> ScrewDefinition:
        if extruder_type is ExtruderType.PRINCIPAL:
            return self.principal_screw
        return self.secondary_screw


@dataclass(frozen=True)
class ExtruderSnapshot:
    status: Status | None = None
    counter: int | None = None
    deviation: float | None = None
    last_verification: date | None = None
    next_verification: date | None = None

    def to_dict(self) -> dict:
        return {
            "status": self.status.value if self.status else None,
            "counter": self.counter,
            "deviation": self.deviation,
            "last_verification": (
                self.last_verification.isoformat() if self.last_verification else None
            ),
            "next_verification": (
                self.next_verification.isoformat() if self.next_verification else None
            ),
        }


@dataclass(frozen=True)
class Line:
    id: str
    name: str
    is_active: bool = True
    definition: LineDefinition | None = None
    principal: ExtruderSnapshot = field(default_factory=ExtruderSnapshot)
    secondary: ExtruderSnapshot = field(default_factory=ExtruderSnapshot)
    remark: str = ""

    def snapshot(self, extruder_type: ExtruderType) -> ExtruderSnapshot:
        if extruder_type is ExtruderType.PRINCIPAL:
            return self.principal
        return self.secondary

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "is_active": self.is_active,
            "brand": self.definition.brand if self.definition else None,
            "principale": self.principal.to_dict(),
            "secondaire": self.secondary.to_dict(),
            "remark": self.remark,
        }


def line_id_for(number: int) -> str:
    return f"line-{number:02d}"


def line_name_for(number: int) -> str:
    return f"Line {number:02d}"
