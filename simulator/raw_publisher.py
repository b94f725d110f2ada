# simulator/raw_publisher.py

import json

import paho.mqtt.publish as publish


def session_topic(cfg, payload):
    return f"{cfg['topic_prefix']}/{payload['line_id']}/{payload['extruder_type']}"


def publish_session(cfg, payload):
    publish.single(
        session_topic(cfg, payload),
        json.dumps(payload),
        qos=1,
        hostname=cfg["broker"],
        port=cfg["port"],
    )
