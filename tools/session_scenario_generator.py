import argparse
import logging
import time
from datetime import date

from dateutil.relativedelta import relativedelta

from core.models import ExtruderType
from simulator.config import SIM_CONFIG
from simulator.mock_data import MockDataGenerator
from simulator.raw_publisher import publish_session

logger = logging.getLogger(__name__)

# ==========================================================
# SCENARIO PHASES
# (name, screw drift in µm, sessions)
# ==========================================================
SCENARIO = [
    ("NORMAL", 0.0, 2),
    ("ORDER", 1.2, 2),
    ("REPLACE", 2.5, 2),
]


def build_scenario(generator: MockDataGenerator, lines, start: date, spacing_months: int = 2):
    """
    Session payloads for every line, phase by phase. Counters and
    verification dates increase monotonically per line.
    """
    counters = {line.id: generator.counter() for line in lines}
    payloads = []
    step = 0

    for phase, drift, sessions in SCENARIO:
        for _ in range(sessions):
            verification_date = start + relativedelta(months=spacing_months * step)
            step += 1

            for line in lines:
                counters[line.id] += 1500
                for extruder_type in ExtruderType:
                    payload = generator.session_payload(
                        line,
                        extruder_type,
                        verification_date,
                        counters[line.id],
                        drift=drift,
                    )
                    payload["remark"] = f"Scenario {phase}"
                    payloads.append(payload)

    return payloads


# ==========================================================
# MAIN
# ==========================================================
def main():
    parser = argparse.ArgumentParser(description="Publish a drifting wear scenario")
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--lines", type=int, default=3)
    parser.add_argument("--interval", type=float, default=1.0)
    parser.add_argument("--broker", default=SIM_CONFIG["broker"])
    parser.add_argument("--port", type=int, default=SIM_CONFIG["port"])
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    cfg = dict(SIM_CONFIG, broker=args.broker, port=args.port)
    generator = MockDataGenerator(seed=args.seed, cfg=cfg)
    lines = generator.lines()[: args.lines]

    start = date.today() - relativedelta(years=1)
    payloads = build_scenario(generator, lines, start)

    logger.info("Publishing %d sessions", len(payloads))

    for payload in payloads:
        publish_session(cfg, payload)
        logger.info(
            "TX %s/%s | %s | %s",
            payload["line_id"], payload["extruder_type"],
            payload["verification_date"], payload["remark"],
        )
        time.sleep(args.interval)


if __name__ == "__main__":
    main()
