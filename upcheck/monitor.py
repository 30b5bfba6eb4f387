"""
Background monitoring workers.

Design:
- Two daemon threads share one TargetRepo:
    probe thread: every PROBE_INTERVAL_SEC
        1) Take the probe plan (index, host, port) from the repository.
        2) Probe each target once, sequentially, in collection order (no lock held while dialing).
        3) Apply each result under the repo lock; log and forward any transition event.
    report thread: every REPORT_INTERVAL_SEC, hand a snapshot of all targets to the reporter.
- Methods:
    start(): begin both daemon threads
    stop(): signal both threads to stop; they wake from their sleep immediately
    join(): wait for the threads to finish
    run_probe_cycle(): one synchronous tick (the probe thread's body)
- Thread-safety: Repo does its own locking; callbacks run on the probe thread.
"""

import threading
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from .config import CONFIRM_THRESHOLD, PROBE_INTERVAL_SEC, REPORT_INTERVAL_SEC
from .logger_config import TRACE, get_logger, kv
from .models import ProbeResult, Target, TransitionEvent
from .probe import probe as tcp_probe
from .repository import TargetRepo
from .status import format_event, show_statuses

logger = get_logger("monitor")


class TargetMonitor:
    def __init__(self, repo: TargetRepo,
                 probe: Callable[[str, int], ProbeResult] = tcp_probe,
                 on_transition: Optional[Callable[[TransitionEvent], None]] = None,
                 reporter: Callable[[Iterable[Target]], None] = show_statuses,
                 probe_interval: float = PROBE_INTERVAL_SEC,
                 report_interval: float = REPORT_INTERVAL_SEC,
                 confirm_threshold: int = CONFIRM_THRESHOLD,
                 clock: Callable[[], datetime] = datetime.now):
        self.repo = repo
        self.probe = probe
        self.on_transition = on_transition
        self.reporter = reporter
        self.probe_interval = probe_interval
        self.report_interval = report_interval
        self.confirm_threshold = confirm_threshold
        self.clock = clock
        self._stop = threading.Event()
        self._threads = [
            threading.Thread(target=self._probe_loop, name="upcheck-probe", daemon=True),
            threading.Thread(target=self._report_loop, name="upcheck-report", daemon=True),
        ]

    def start(self) -> None:
        for thread in self._threads:
            thread.start()

    def stop(self) -> None:
        self._stop.set()

    def join(self, timeout: Optional[float] = None) -> None:
        for thread in self._threads:
            if thread.is_alive():
                thread.join(timeout)

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def run_probe_cycle(self) -> List[TransitionEvent]:
        events = []
        for index, host, port in self.repo.probe_plan():
            if self._stop.is_set():
                break
            result = self.probe(host, port)
            event = self.repo.apply(index, result, self.clock(), self.confirm_threshold)
            logger.log(TRACE, "probed" + kv(host=host, port=port, outcome=result.outcome.value,
                                            error=result.error, elapsed=f"{result.elapsed:.3f}s"))
            if event is None:
                continue
            events.append(event)
            logger.info(format_event(event))
            if self.on_transition is not None:
                try:
                    self.on_transition(event)
                except Exception:
                    logger.exception("transition callback failed" + kv(target=event.target_name))
        return events

    def report(self) -> None:
        self.reporter(self.repo.snapshot())

    def _probe_loop(self) -> None:
        while not self._stop.is_set():
            self.run_probe_cycle()
            self._stop.wait(self.probe_interval)

    def _report_loop(self) -> None:
        while not self._stop.is_set():
            self.report()
            self._stop.wait(self.report_interval)
