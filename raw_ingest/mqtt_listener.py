import json
import logging

import paho.mqtt.client as mqtt

logger = logging.getLogger(__name__)


def start_mqtt_listener(
    callback,
    broker: str,
    port: int,
    topic: str,
):
    """
    Measurement Session Listener
    ----------------------------
    Expected topic:
        wear/sessions/{line_id}/{extruder}

    Callback signature:
        callback(
            line_id: str,
            extruder_type: str,
            payload: dict
        )
    """

    # =========================================================
    # ON CONNECT
    # =========================================================
    def on_connect(client, userdata, flags, reason_code, properties):
        if reason_code.is_failure:
            logger.error("MQTT connection failed: %s", reason_code)
            return

        logger.info("MQTT connected to %s:%s", broker, port)
        client.subscribe(topic)
        logger.info("MQTT subscribed to %s", topic)

    # =========================================================
    # ON MESSAGE
    # =========================================================
    def on_message(client, userdata, msg):
        try:
            payload = json.loads(msg.payload.decode())
            line_id, extruder = parse_topic(msg.topic)

            callback(
                line_id=line_id,
                extruder_type=extruder,
                payload=payload,
            )

        except Exception:
            logger.exception("MQTT message processing error on %s", msg.topic)

    # =========================================================
    # CLIENT INIT
    # =========================================================
    client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2)
    client.on_connect = on_connect
    client.on_message = on_message

    client.connect(broker, port, keepalive=60)
    client.loop_forever()


# =========================================================
# TOPIC PARSER
# =========================================================
def parse_topic(topic: str):
    """
    Supported format:
        <base>/sessions/<LINE_ID>/<EXTRUDER>
    """
    parts = topic.split("/")

    if len(parts) == 4 and parts[1] == "sessions":
        _, _, line_id, extruder = parts
        return line_id, extruder

    raise ValueError(f"Invalid session topic format: {topic}")
