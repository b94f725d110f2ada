# health/alerts.py

from dataclasses import dataclass
from datetime import date

from core.models import ExtruderType
from health.status_classifier import Status

ALERT_ORDER = {"danger": 0, "warning": 1, "upcoming": 2}

_STATUS_ALERTS = {
    Status.TO_REPLACE: ("danger", "Changement requis - Écart critique détecté"),
    Status.TO_ORDER: ("warning", "Pièce à commander - Seuil atteint"),
    Status.OK: None,
}


@dataclass(frozen=True)
class Alert:
    id: str
    line_id: str
    line_name: str
    type: str              # danger | warning | upcoming
    extruder_type: ExtruderType
    message: str
    due_date: date | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "line_id": self.line_id,
            "line_name": self.line_name,
            "type": self.type,
            "extruder": self.extruder_type.value,
            "message": self.message,
            "date": self.due_date.isoformat() if self.due_date else None,
        }


def build_alerts(lines, today: date, window_days: int = 30, limit: int | None = 8) -> list[Alert]:
    """
    Alerts for the dashboard panel.

    danger   -> extruder TO_REPLACE
    warning  -> extruder TO_ORDER
    upcoming -> next verification within window_days (0 included)
    """
    alerts = []

    for line in lines:
        for extruder_type in ExtruderType:
            snapshot = line.snapshot(extruder_type)
            short = extruder_type.value[0]

            if snapshot.status is not None:
                status_alert = _STATUS_ALERTS[snapshot.status]
                if status_alert is not None:
                    kind, message = status_alert
                    alerts.append(
                        Alert(
                            id=f"{line.id}-{short}-{kind}",
                            line_id=line.id,
                            line_name=line.name,
                            type=kind,
                            extruder_type=extruder_type,
                            message=message,
                        )
                    )

            if snapshot.next_verification is not None:
                days_until = (snapshot.next_verification - today).days
                if 0 <= days_until <= window_days:
                    alerts.append(
                        Alert(
                            id=f"{line.id}-{short}-upcoming",
                            line_id=line.id,
                            line_name=line.name,
                            type="upcoming",
                            extruder_type=extruder_type,
                            message=f"Vérification dans {days_until} jours",
                            due_date=snapshot.next_verification,
                        )
                    )

    # stable sort keeps line order within a type
    alerts.sort(key=lambda a: ALERT_ORDER[a.type])

    if limit is not None:
        alerts = alerts[:limit]

    return alerts
