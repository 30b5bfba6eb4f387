"""
Design (models.py)
- Purpose: Define simple, typed data structures for domain entities (Target, probe results,
           transition events).
- Inputs: Field values.
- Outputs: Dataclass / enum instances.
- Side effects: None.
- Thread-safety: Dataclasses are plain containers; TargetRepo protects concurrent access.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Optional

from . import config


class Outcome(Enum):
    REACHABLE = "reachable"
    UNREACHABLE = "unreachable"
    RESOURCE_EXHAUSTED = "resource_exhausted"


class Transition(Enum):
    DOWN = "down"
    RECOVERED = "recovered"


@dataclass
class Target:
    """
    Design (Target)
    - Purpose: A single monitored host:port endpoint and its accumulated liveness state.
    - Fields:
        name: free-form label (usually the raw config line).
        host: IP literal or resolvable hostname.
        port: TCP port, 1..65535.
        type: reserved classification (e.g. internal/external); unused by logic.
        is_alive: current liveness.
        since: when liveness last flipped (creation time until the first flip).
        attempts / failures: monotonic probe counters, failures <= attempts.
        errors: error text -> occurrence count (bounded, see tracker.count_error).
        streak: consecutive probes disagreeing with is_alive (confirmation threshold).
    """
    name: str
    host: str
    port: int
    type: int = 0
    is_alive: bool = False
    since: datetime = field(default_factory=datetime.now)
    attempts: int = 0
    failures: int = 0
    errors: Dict[str, int] = field(default_factory=dict)
    streak: int = 0

    @property
    def address(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    @property
    def successes(self) -> int:
        return self.attempts - self.failures

    @property
    def success_rate(self) -> Optional[float]:
        """Percentage of successful probes, or None before the first attempt."""
        if self.attempts == 0:
            return None
        return self.successes / self.attempts * 100.0


@dataclass(frozen=True)
class ProbeResult:
    outcome: Outcome
    error: Optional[str] = None
    elapsed: float = 0.0

    @property
    def counts_as_reachable(self) -> bool:
        if self.outcome is Outcome.RESOURCE_EXHAUSTED:
            return config.RESOURCE_EXHAUSTED_COUNTS_AS_ALIVE
        return self.outcome is Outcome.REACHABLE


@dataclass(frozen=True)
class TransitionEvent:
    """
    Design (TransitionEvent)
    - Purpose: Emitted when a target's liveness flips.
    - Fields:
        previous_duration: how long the prior state lasted, rounded to whole seconds.
        at: when the flip was observed (the new `since`).
    """
    target_name: str
    host: str
    port: int
    kind: Transition
    previous_duration: timedelta
    at: datetime
