import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import yaml

from analytics.prognostics.degradation_model import (
    HIGH_WEAR_RATE_PER_1000,
    ORDER_NOW_DAYS,
    ORDER_THRESHOLD,
    PLAN_PREVENTIVE_DAYS,
)
from analytics.prognostics.wear_trend import Prediction, TrendDirection


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Recommendation:
    priority: Priority
    action_code: str
    title: str
    description: str

    def to_dict(self) -> dict:
        return {
            "priority": self.priority.value,
            "action_code": self.action_code,
            "title": self.title,
            "description": self.description,
        }


class RecommendationEngine:
    def __init__(self, mapping_file: str | None = None, lang: str | None = None):
        if mapping_file is None:
            mapping_file = Path(__file__).parent / "mapping.yaml"

        with open(mapping_file, "r", encoding="utf-8") as f:
            self.cfg = yaml.safe_load(f) or {}

        self.actions = self.cfg.get("actions", {})
        self.lang = lang or self.cfg.get("defaults", {}).get("lang", "fr")

    # ==========================================================
    # PUBLIC API
    # ==========================================================
    def recommend(self, prediction: Prediction, lang: str | None = None) -> list[Recommendation]:
        """
        Decision table over a prediction.

        Urgency rules (first match wins):
            deviation >= 1.0       -> HIGH   IMMEDIATE_INTERVENTION
            days to order < 30     -> HIGH   ORDER_PARTS
            days to order < 90     -> MEDIUM PLAN_PREVENTIVE
        Independent rules:
            wear rate > 0.1 / 1000 -> MEDIUM HIGH_WEAR_RATE
            stable trend           -> LOW    STABLE_TREND
        Nothing fired              -> LOW    NO_ACTION
        """
        lang = lang or self.lang
        fired = []

        days = prediction.days_to_order

        if prediction.current_deviation >= ORDER_THRESHOLD:
            fired.append((Priority.HIGH, "IMMEDIATE_INTERVENTION"))
        elif days is not None and days < ORDER_NOW_DAYS:
            fired.append((Priority.HIGH, "ORDER_PARTS"))
        elif days is not None and days < PLAN_PREVENTIVE_DAYS:
            fired.append((Priority.MEDIUM, "PLAN_PREVENTIVE"))

        if prediction.wear_rate_per_1000 > HIGH_WEAR_RATE_PER_1000:
            fired.append((Priority.MEDIUM, "HIGH_WEAR_RATE"))

        if prediction.trend is TrendDirection.STABLE:
            fired.append((Priority.LOW, "STABLE_TREND"))

        if not fired:
            fired.append((Priority.LOW, "NO_ACTION"))

        values = self._template_values(prediction)

        return [
            self._build(priority, code, values, lang)
            for priority, code in fired
        ]

    # ==========================================================
    # INTERNAL HELPERS
    # ==========================================================
    def _build(self, priority: Priority, code: str, values: dict, lang: str) -> Recommendation:
        action = self.actions.get(code, {})

        title = self._pick_lang(action.get("title", {}), lang) or code
        text = self._pick_lang(action.get("text", {}), lang)

        return Recommendation(
            priority=priority,
            action_code=code,
            title=title,
            description=text.format(**values),
        )

    @staticmethod
    def _template_values(prediction: Prediction) -> dict:
        days = prediction.days_to_order
        return {
            "current_deviation": prediction.current_deviation,
            "days_to_order": days,
            "months_to_order": int(math.floor(days / 30 + 0.5)) if days is not None else None,
            "wear_rate_per_1000": prediction.wear_rate_per_1000,
        }

    @staticmethod
    def _pick_lang(text_block: dict, lang: str) -> str:
        if not isinstance(text_block, dict):
            return ""
        return text_block.get(lang) or text_block.get("en", "")
