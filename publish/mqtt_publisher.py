import json
import logging
import time

import paho.mqtt.client as mqtt

logger = logging.getLogger(__name__)


class MQTTPublisher:
    """
    MQTT Publisher

    Responsibility:
    - Publish computed results for dashboards / reports
    - NO business logic
    - Flat JSON only
    - Every wear result carries the formula set that produced it
    """

    def __init__(self, broker, port, base_topic="wear", client=None):
        self.base_topic = base_topic

        if client is None:
            client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2)
            client.connect(broker, port)
            client.loop_start()

        self.client = client

    # =========================================================
    # INTERNAL
    # =========================================================
    def _publish(self, topic, payload, qos=1, retain=False):
        self.client.publish(
            topic,
            json.dumps(payload),
            qos=qos,
            retain=retain,
        )
        logger.debug("Published %s", topic)

    # =========================================================
    # SESSION RESULTS
    # =========================================================
    def publish_calculation(self, line_id, extruder, record: dict):
        """
        Full archive record: readings, wear values, formula set.
        """
        topic = f"{self.base_topic}/calculation/{line_id}/{extruder}"
        self._publish(topic, record)

    def publish_prediction(self, line_id, extruder, payload: dict | None):
        topic = f"{self.base_topic}/prediction/{line_id}/{extruder}"
        self._publish(
            topic,
            {
                "line_id": line_id,
                "extruder": extruder,
                "prediction": payload,
                "timestamp": time.time(),
            },
            retain=True,
        )

    def publish_recommendations(self, line_id, extruder, recommendations: list[dict]):
        topic = f"{self.base_topic}/recommendation/{line_id}/{extruder}"
        self._publish(
            topic,
            {
                "line_id": line_id,
                "extruder": extruder,
                "recommendations": recommendations,
                "timestamp": time.time(),
            },
            retain=True,
        )

    # =========================================================
    # DASHBOARD STATE (RETAINED)
    # =========================================================
    def publish_line_status(self, line: dict):
        topic = f"{self.base_topic}/line_status/{line['id']}"
        self._publish(topic, line, retain=True)

    def publish_alerts(self, alerts: list[dict]):
        topic = f"{self.base_topic}/alerts"
        self._publish(
            topic,
            {"alerts": alerts, "timestamp": time.time()},
            retain=True,
        )

    # =========================================================
    # SHUTDOWN
    # =========================================================
    def stop(self):
        self.client.loop_stop()
        self.client.disconnect()
