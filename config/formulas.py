# config/formulas.py

import logging
import math
import threading
from dataclasses import dataclass

from core.errors import FormulaConfigError
from core.models import ExtruderType, WearFormulaSet

logger = logging.getLogger(__name__)

CONSTANT_KEYS = ("screw_constant_a", "screw_constant_b", "barrel_constant_c")


@dataclass(frozen=True)
class FormulaEntry:
    version: str
    extruder_type: ExtruderType
    formulas: WearFormulaSet
    is_active: bool

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "extruder_type": self.extruder_type.value,
            **self.formulas.to_dict(),
            "is_active": self.is_active,
        }


def _parse_entry(raw: dict, index: int) -> FormulaEntry:
    try:
        extruder_type = ExtruderType(raw.get("extruder_type"))
    except ValueError:
        raise FormulaConfigError(
            raw.get("extruder_type"), f"formula entry {index} has an unknown extruder type"
        ) from None

    constants = {}
    for key in CONSTANT_KEYS:
        if raw.get(key) is None:
            raise FormulaConfigError(extruder_type.value, f"formula entry {index} is missing {key}")
        try:
            value = float(raw[key])
        except (TypeError, ValueError):
            raise FormulaConfigError(
                extruder_type.value, f"formula entry {index}: {key} is not a number"
            ) from None
        if not math.isfinite(value):
            raise FormulaConfigError(extruder_type.value, f"formula entry {index}: {key} is not finite")
        constants[key] = value

    return FormulaEntry(
        version=str(raw.get("version", f"v{index}")),
        extruder_type=extruder_type,
        formulas=WearFormulaSet(**constants),
        is_active=bool(raw.get("is_active", True)),
    )


class FormulaRegistry:
    """
    Calibration constants per extruder type.

    - Read-mostly, replace-on-update
    - Superseded sets stay in history with is_active=False
    """

    def __init__(self, entries: list[FormulaEntry] | None = None):
        self._entries = list(entries or [])
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: dict) -> "FormulaRegistry":
        raw_entries = config.get("formulas") or []
        return cls([_parse_entry(raw, i) for i, raw in enumerate(raw_entries)])

    # =========================================================
    # PUBLIC API
    # =========================================================
    def active(self, extruder_type) -> WearFormulaSet:
        extruder_type = ExtruderType(extruder_type)

        with self._lock:
            active = [
                e for e in self._entries
                if e.extruder_type is extruder_type and e.is_active
            ]

        if not active:
            raise FormulaConfigError(extruder_type.value, "no active formula set")
        if len(active) > 1:
            versions = ", ".join(e.version for e in active)
            raise FormulaConfigError(
                extruder_type.value, f"several active formula sets ({versions})"
            )

        return active[0].formulas

    def activate(self, extruder_type, formulas: WearFormulaSet, version: str) -> FormulaEntry:
        extruder_type = ExtruderType(extruder_type)
        entry = FormulaEntry(
            version=version,
            extruder_type=extruder_type,
            formulas=formulas,
            is_active=True,
        )

        with self._lock:
            self._entries = [
                FormulaEntry(e.version, e.extruder_type, e.formulas, False)
                if e.extruder_type is extruder_type else e
                for e in self._entries
            ] + [entry]

        logger.info(
            "Formula set %s activated for %s: %s",
            version, extruder_type.value, formulas.to_dict(),
        )
        return entry

    def history(self, extruder_type) -> list[FormulaEntry]:
        extruder_type = ExtruderType(extruder_type)
        with self._lock:
            return [e for e in self._entries if e.extruder_type is extruder_type]
