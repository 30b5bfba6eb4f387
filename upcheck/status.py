"""
Design (status.py)
- Purpose: Render targets and transition events as operator-facing log lines.
- Inputs: Target copies (from TargetRepo.snapshot) and TransitionEvents.
- Outputs: Strings; log records on the "upcheck.status" logger.
- Side effects: Logging only.
- Thread-safety: Works on copies; safe from any thread.
"""

import logging
from typing import Iterable, Optional

from .logger_config import get_logger
from .models import Target, Transition, TransitionEvent
from .utils import format_duration

logger = get_logger("status")

SEPARATOR = "----"


def format_rate(rate: Optional[float]) -> str:
    if rate is None:
        return "n/a"
    return f"{rate:.2f}%"


def format_target(target: Target) -> str:
    """
    Purpose: One status line, e.g.
        "8.8.8.8:53 - Alive: True since 2026-01-01T10:00:00 (90.00% success rate) 9/10 {'timed out': 1}"
    Notes: Before the first attempt the rate reads "n/a" instead of dividing by zero.
    """
    since = target.since.isoformat(timespec="seconds")
    return (
        f"{target.address} - Alive: {target.is_alive} since {since} "
        f"({format_rate(target.success_rate)} success rate) "
        f"{target.successes}/{target.attempts} {target.errors}"
    )


def format_event(event: TransitionEvent) -> str:
    if event.kind is Transition.RECOVERED:
        what = "is back up - was down for"
    else:
        what = "is down - was up for"
    return f"target {event.target_name} ({event.host}:{event.port}) {what} {format_duration(event.previous_duration)}"


def show_status(target: Target) -> None:
    level = logging.INFO if target.is_alive else logging.WARNING
    logger.log(level, "target: %s", format_target(target))


def show_statuses(targets: Iterable[Target]) -> None:
    """Dump every target (INFO when alive, WARNING when dead) followed by a separator line."""
    for target in targets:
        show_status(target)
    logger.info(SEPARATOR)
