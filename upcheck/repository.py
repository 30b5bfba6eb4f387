"""
Design (repository.py)
- Purpose: Encapsulate all mutable target state behind a tiny API (and a lock), so the probe
           and report threads don't share a bare global list.
- Inputs: Target objects and probe results.
- Outputs: Snapshots (copies) of the targets; transition events from applied results.
- Side effects: Mutates the owned Targets.
- Thread-safety: All mutating methods take the internal lock; snapshot returns copies.
"""

import threading
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from .config import CONFIRM_THRESHOLD
from .models import ProbeResult, Target, TransitionEvent
from .tracker import apply_result


class TargetRepo:
    """
    Design (TargetRepo)
    - State:
        _targets: [Target] in load order (probe order)
        _lock: threading.Lock to protect all mutating/reading operations
    """

    def __init__(self, targets: Iterable[Target] = ()) -> None:
        self._lock = threading.Lock()
        self._targets: List[Target] = list(targets)

    def __len__(self) -> int:
        with self._lock:
            return len(self._targets)

    # -------- CRUD for targets --------

    def add(self, target: Target) -> None:
        """
        Purpose: Append a target; it is probed after the ones already present.
        Thread-safety: Protected by _lock.
        """
        with self._lock:
            self._targets.append(target)

    # -------- Probe handling --------

    def probe_plan(self) -> List[Tuple[int, str, int]]:
        """
        Purpose: List (index, host, port) for one probe cycle, in collection order.
        Thread-safety: Protected by _lock; the probes themselves run without it.
        """
        with self._lock:
            return [(i, t.host, t.port) for i, t in enumerate(self._targets)]

    def apply(self, index: int, result: ProbeResult, now: Optional[datetime] = None,
              confirm_threshold: int = CONFIRM_THRESHOLD) -> Optional[TransitionEvent]:
        """
        Purpose: Feed one probe result into the target's state machine.
        Outputs: TransitionEvent if liveness flipped, else None.
        Side effects: Mutates counters, histogram, is_alive/since.
        Thread-safety: Protected by _lock.
        """
        with self._lock:
            return apply_result(self._targets[index], result, now, confirm_threshold)

    # -------- Snapshots for safe reading --------

    def snapshot(self) -> List[Target]:
        """
        Purpose: Return copies of all targets for safe iteration (reports, final dump).
        Thread-safety: Protected by _lock; returns copies to avoid mutation races.
        """
        with self._lock:
            return [replace(t, errors=dict(t.errors)) for t in self._targets]
