from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from subscription_scheduler.core.domain.errors import SchedulingError
from subscription_scheduler.core.domain.instants import sample_reference_time
from subscription_scheduler.core.events.event_bus import EventBus
from subscription_scheduler.core.events.sinks import FileRecorderSink, LoggingEventSink
from subscription_scheduler.core.scheduling.scheduler import PhaseScheduler
from subscription_scheduler.core.scheduling.scheduler_config import SchedulerConfig
from subscription_scheduler.reporting.timeline_printer import print_phases

LOGGER = logging.getLogger(__name__)

# Error code reported for unreadable or malformed requests and configs.
INVALID_INPUT = "INVALID_INPUT"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    return json.loads(path.read_text(encoding="utf-8"))


def _build_event_bus(events_out: Path | None) -> EventBus:
    sinks: list[Any] = [LoggingEventSink(logging.getLogger("subscription_scheduler.events"))]
    if events_out is not None:
        sinks.append(FileRecorderSink(events_out))
    return EventBus(sinks=sinks)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute a subscription schedule timeline from existing phases and property updates"
    )

    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help=(
            "Path to a JSON request: "
            '{"existing_phases": [...], "property_updates": [...], "cancel_at": <epoch|null>}'
        ),
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional path to a scheduler JSON config.",
    )

    parser.add_argument(
        "--reference-time",
        type=int,
        default=None,
        help="Reference epoch second (defaults to now).",
    )

    parser.add_argument(
        "--print",
        action="store_true",
        help="Print a human-readable timeline instead of JSON.",
    )

    parser.add_argument(
        "--events-out",
        type=Path,
        default=None,
        help="Append scheduling events as JSON lines to this file.",
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )

    return parser


def _report_failure(code: str, exc: Exception) -> int:
    LOGGER.error("Scheduling failed: %s", exc, extra={"code": code})
    print(f"error [{code}]: {exc}", file=sys.stderr)
    return 1


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )

    try:
        request = _load_json(args.input)
        config = (
            SchedulerConfig.from_json_obj(_load_json(args.config))
            if args.config is not None
            else SchedulerConfig()
        )
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        return _report_failure(INVALID_INPUT, exc)

    reference_time = (
        args.reference_time if args.reference_time is not None else sample_reference_time()
    )

    with _build_event_bus(args.events_out) as event_bus:
        scheduler = PhaseScheduler(config=config, event_bus=event_bus)
        try:
            phases = scheduler.schedule(
                request.get("existing_phases"),
                request.get("property_updates"),
                reference_time,
                cancel_at=request.get("cancel_at"),
            )
        except SchedulingError as exc:
            return _report_failure(exc.code, exc)
        except ValidationError as exc:
            return _report_failure(INVALID_INPUT, exc)

    if args.print:
        print_phases(phases, reference_time)
    else:
        print(json.dumps([phase.payload() for phase in phases], indent=2))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
