import logging
from datetime import date

from raw_ingest.mqtt_listener import start_mqtt_listener
from raw_ingest.validator import validate_session_payload

from core.archive import build_archive_record
from core.archive_store import ArchiveStore
from core.errors import FormulaConfigError, InvalidMeasurement
from core.models import Line

from health.alerts import build_alerts
from health.line_health import apply_record

from analytics.prognostics.wear_trend import predict
from analytics.recommendation.recommendation_engine import RecommendationEngine

from config.config_loader import load_config
from config.formulas import FormulaRegistry

from publish.mqtt_publisher import MQTTPublisher

logger = logging.getLogger(__name__)


class SessionHandler:
    """
    One measurement session in, every derived result out.

    session -> formula set -> archive record -> line snapshot
            -> prediction -> recommendations -> alerts -> publish
    """

    def __init__(
        self,
        config: dict,
        formulas: FormulaRegistry,
        store: ArchiveStore,
        publisher,
        recommendation_engine: RecommendationEngine | None = None,
        lines: dict | None = None,
        today=date.today,
    ):
        self.config = config
        self.formulas = formulas
        self.store = store
        self.publisher = publisher
        self.recommendation_engine = recommendation_engine or RecommendationEngine(
            lang=config.get("recommendation", {}).get("lang"),
        )
        self.lines = lines if lines is not None else {}
        self.today = today

        alerts_cfg = config.get("alerts", {})
        self.alert_window_days = alerts_cfg.get("upcoming_window_days", 30)
        self.max_alerts = alerts_cfg.get("max_alerts", 8)

    # =========================================================
    # LINES
    # =========================================================
    def _line(self, line_id, line_name=None) -> Line:
        if line_id not in self.lines:
            self.lines[line_id] = Line(id=line_id, name=line_name or line_id)
            logger.info("Registered new line %s", line_id)
        return self.lines[line_id]

    # =========================================================
    # CALLBACK
    # =========================================================
    def __call__(self, line_id, extruder_type, payload):
        payload = dict(payload)
        payload.setdefault("line_id", line_id)
        payload.setdefault("extruder_type", extruder_type)

        if payload["line_id"] != line_id or payload["extruder_type"] != extruder_type:
            logger.warning(
                "Session payload %s/%s does not match topic %s/%s, dropped",
                payload["line_id"], payload["extruder_type"], line_id, extruder_type,
            )
            return None

        try:
            session = validate_session_payload(payload)
            formulas = self.formulas.active(session["extruder_type"])
        except InvalidMeasurement as e:
            logger.warning("Rejected session %s/%s: %s", line_id, extruder_type, e)
            return None
        except FormulaConfigError as e:
            logger.error("No usable formula set for %s: %s", extruder_type, e)
            return None
        except ValueError as e:
            logger.warning("Rejected session %s/%s: %s", line_id, extruder_type, e)
            return None

        return self.process(session, formulas)

    def process(self, session: dict, formulas) -> dict:
        line = self._line(session["line_id"], session.get("line_name"))
        extruder_type = session["extruder_type"]

        # ---- WEAR + ARCHIVE ----
        record = build_archive_record(
            line=line,
            extruder_type=extruder_type,
            points=session["points"],
            formulas=formulas,
            verification_date=session["verification_date"],
            counter=session["counter"],
            entry_date=session["entry_date"],
            remark=session["remark"],
            created_by=session["created_by"],
        )
        self.store.append(record)

        # ---- LINE SNAPSHOT ----
        line = apply_record(line, record)
        self.lines[line.id] = line

        # ---- TREND ----
        history = self.store.history(line.id, extruder_type)
        prediction = predict(history)

        # ---- RECOMMENDATION ----
        recommendations = (
            self.recommendation_engine.recommend(prediction)
            if prediction is not None else []
        )

        # ---- ALERTS ----
        alerts = build_alerts(
            self.lines.values(),
            today=self.today(),
            window_days=self.alert_window_days,
            limit=self.max_alerts,
        )

        logger.info(
            "%s/%s: status=%s max_deviation=%.3f history=%d",
            line.id, extruder_type.value, record.overall_status.value,
            record.max_deviation, len(history),
        )

        # ---- PUBLISH ----
        extruder = extruder_type.value
        record_dict = record.to_dict()

        self.publisher.publish_calculation(line.id, extruder, record_dict)
        self.publisher.publish_line_status(line.to_dict())
        self.publisher.publish_prediction(
            line.id, extruder, prediction.to_dict() if prediction else None,
        )
        self.publisher.publish_recommendations(
            line.id, extruder, [r.to_dict() for r in recommendations],
        )
        self.publisher.publish_alerts([a.to_dict() for a in alerts])

        return {
            "record": record,
            "line": line,
            "prediction": prediction,
            "recommendations": recommendations,
            "alerts": alerts,
        }


def configure_logging(config: dict):
    log_cfg = config.get("logging", {})
    logging.basicConfig(
        level=log_cfg.get("level", "INFO"),
        format=log_cfg.get("format", "%(asctime)s %(levelname)s %(name)s: %(message)s"),
    )


def main():
    # =========================
    # LOAD CONFIG
    # =========================
    config = load_config()
    configure_logging(config)

    # =========================
    # STATE
    # =========================
    formulas = FormulaRegistry.from_config(config)
    store = ArchiveStore(
        max_history=config.get("archive", {}).get("max_history", 200)
    )

    # =========================
    # PUBLISHER
    # =========================
    publisher = MQTTPublisher(
        broker=config["mqtt"]["broker"],
        port=config["mqtt"]["port"],
        base_topic=config["mqtt"].get("base_topic", "wear"),
    )

    handler = SessionHandler(config, formulas, store, publisher)

    # =========================
    # START MQTT LISTENER
    # =========================
    try:
        start_mqtt_listener(
            callback=handler,
            broker=config["mqtt"]["broker"],
            port=config["mqtt"]["port"],
            topic=config["mqtt"]["session_topic"],
        )
    finally:
        publisher.stop()


if __name__ == "__main__":
    main()
