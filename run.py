"""
Replay captured app messages through the decoder.

Each line of the capture file is one raw app message exactly as the transport
delivered it (JSON objects, quote-wrapped strings or the bare ``listening``
sentinel). Every line is decoded and the resulting event is logged, which makes
it easy to check how a recorded call would be seen by an application.

Usage:
    python run.py CAPTURE_FILE [--log-level LEVEL] [--errors-only]
"""

import argparse
import os
import sys
from pathlib import Path

from vapi_client.app_message_decoder import AppMessageDecoder
from vapi_client.config.logging_config import configure_logging
from vapi_client.event_bus import EventBus
from vapi_client.models.events import ErrorEvent


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Decode a capture of raw app messages and log the events"
    )
    parser.add_argument("capture", type=Path, help="File with one raw app message per line")
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO or LOG_LEVEL env var)",
    )
    parser.add_argument(
        "--errors-only",
        action="store_true",
        help="Only report messages that failed to decode",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Decode every line of the capture. Exits with 1 if any message failed."""
    args = parse_args(argv)
    logger = configure_logging(args.log_level, log_to_file=False)

    if not args.capture.exists():
        logger.error(f"Capture file not found: {args.capture}")
        return 1

    decoder = AppMessageDecoder()
    bus = EventBus()
    failures = []

    def report(event):
        if isinstance(event, ErrorEvent):
            failures.append(event)
        elif not args.errors_only:
            logger.info(f"{event.type}: {event.model_dump_json(exclude={'type'})}")

    bus.subscribe(report)

    with args.capture.open("rb") as capture:
        for line in capture:
            line = line.rstrip(b"\r\n")
            if line:
                bus.publish(decoder.decode(line))

    logger.info(f"Replay finished with {len(failures)} decode error(s)")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
