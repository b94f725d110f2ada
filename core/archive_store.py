import logging
from collections import deque

from core.models import ArchiveRecord, ExtruderType

logger = logging.getLogger(__name__)


class ArchiveStore:
    """
    Archive Store
    =============
    - Per line + extruder history
    - Append-only, bounded (oldest dropped past max_history)
    - In memory; records are immutable
    """

    def __init__(self, max_history=200):
        self.max_history = max_history
        self.histories = {}

    # =========================================================
    # INTERNAL
    # =========================================================
    def _key(self, line_id, extruder_type):
        return f"{line_id}:{ExtruderType(extruder_type).value}"

    # =========================================================
    # PUBLIC API
    # =========================================================
    def append(self, record: ArchiveRecord):
        key = self._key(record.line_id, record.extruder_type)

        if key not in self.histories:
            self.histories[key] = deque(maxlen=self.max_history)

        history = self.histories[key]
        if len(history) == history.maxlen:
            logger.warning("Archive %s full, dropping oldest record", key)

        history.append(record)

    def extend(self, records):
        for record in records:
            self.append(record)

    def history(self, line_id, extruder_type) -> list[ArchiveRecord]:
        """
        Records of one line + extruder, oldest verification first.
        This is the input of the trend engine.
        """
        key = self._key(line_id, extruder_type)

        if key not in self.histories:
            return []

        return sorted(self.histories[key], key=lambda r: r.verification_date)

    def latest(self, line_id, extruder_type) -> ArchiveRecord | None:
        history = self.history(line_id, extruder_type)
        return history[-1] if history else None

    def all_records(self) -> list[ArchiveRecord]:
        """All records, most recent verification first."""
        records = [r for history in self.histories.values() for r in history]
        return sorted(records, key=lambda r: r.verification_date, reverse=True)

    def __len__(self):
        return sum(len(h) for h in self.histories.values())
