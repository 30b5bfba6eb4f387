"""
Liveness tracking for targets.

Design:
- apply_result() is the only place a Target's counters, histogram and liveness change.
- Every probe:
    1) attempts += 1, error text (if any) counted in the bounded histogram.
    2) Reachable -> alive; unreachable -> failures += 1 and dead.
    3) If liveness flips, stamp `since` and return a TransitionEvent carrying how
       long the previous state lasted. Otherwise return None.
- confirm_threshold > 1 delays the flip until that many consecutive contrary probes
  were seen; the default of 1 flips on the first one.
- Thread-safety: mutates the Target in place; callers hold TargetRepo's lock.
"""

from datetime import datetime
from typing import Optional

from .config import CONFIRM_THRESHOLD, MAX_ERROR_KINDS, OTHER_ERRORS_KEY
from .models import ProbeResult, Target, Transition, TransitionEvent
from .utils import elapsed_since


def count_error(target: Target, error: str, max_kinds: int = MAX_ERROR_KINDS) -> None:
    """Bump the histogram entry for `error`; novel texts beyond max_kinds go to OTHER_ERRORS_KEY."""
    if error in target.errors:
        target.errors[error] += 1
    elif len(target.errors) < max_kinds:
        target.errors[error] = 1
    else:
        target.errors[OTHER_ERRORS_KEY] = target.errors.get(OTHER_ERRORS_KEY, 0) + 1


def apply_result(target: Target, result: ProbeResult, now: Optional[datetime] = None,
                 confirm_threshold: int = CONFIRM_THRESHOLD) -> Optional[TransitionEvent]:
    if now is None:
        now = datetime.now()
    target.attempts += 1
    if result.error is not None:
        count_error(target, result.error)

    alive = result.counts_as_reachable
    if not alive:
        target.failures += 1

    if alive == target.is_alive:
        target.streak = 0
        return None

    target.streak += 1
    if target.streak < max(confirm_threshold, 1):
        return None

    event = TransitionEvent(
        target_name=target.name,
        host=target.host,
        port=target.port,
        kind=Transition.RECOVERED if alive else Transition.DOWN,
        previous_duration=elapsed_since(target.since, now),
        at=now,
    )
    target.is_alive = alive
    target.since = now
    target.streak = 0
    return event

