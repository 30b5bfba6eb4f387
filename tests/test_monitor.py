from __future__ import annotations

import threading
from datetime import timedelta

from upcheck.models import Outcome, ProbeResult, Target, Transition
from upcheck.monitor import TargetMonitor
from upcheck.repository import TargetRepo

UP = ProbeResult(Outcome.REACHABLE)
DOWN = ProbeResult(Outcome.UNREACHABLE, "timed out")


class ScriptedProbe:
    def __init__(self, script):
        self.script = {host: list(results) for host, results in script.items()}
        self.calls = []

    def __call__(self, host, port):
        self.calls.append((host, port))
        return self.script[host].pop(0)


def _repo(t0):
    return TargetRepo([
        Target(name="web", host="192.0.2.1", port=80, is_alive=True, since=t0),
        Target(name="dns", host="192.0.2.2", port=53, is_alive=True, since=t0),
    ])


def test_probe_cycle_forwards_transitions(t0) -> None:
    probe = ScriptedProbe({"192.0.2.1": [UP, DOWN], "192.0.2.2": [DOWN, DOWN]})
    seen = []
    ticks = iter(t0 + timedelta(seconds=s) for s in range(1, 10))
    monitor = TargetMonitor(_repo(t0), probe=probe, on_transition=seen.append, clock=lambda: next(ticks))

    first = monitor.run_probe_cycle()
    second = monitor.run_probe_cycle()

    assert [(e.target_name, e.kind) for e in first] == [("dns", Transition.DOWN)]
    assert [(e.target_name, e.kind) for e in second] == [("web", Transition.DOWN)]
    assert seen == first + second
    assert probe.calls == [("192.0.2.1", 80), ("192.0.2.2", 53)] * 2


def test_failing_callback_does_not_stop_the_cycle(t0) -> None:
    probe = ScriptedProbe({"192.0.2.1": [DOWN], "192.0.2.2": [DOWN]})

    def boom(event):
        raise RuntimeError("sink broken")

    monitor = TargetMonitor(_repo(t0), probe=probe, on_transition=boom)

    assert len(monitor.run_probe_cycle()) == 2
    assert all(t.attempts == 1 for t in monitor.repo.snapshot())


def test_threads_probe_and_report_until_stopped(t0) -> None:
    reported = threading.Event()
    reports = []

    def reporter(targets):
        targets = list(targets)
        reports.append(targets)
        if all(t.attempts >= 1 for t in targets):
            reported.set()

    repo = _repo(t0)
    monitor = TargetMonitor(repo, probe=lambda host, port: UP, reporter=reporter,
                            probe_interval=0.01, report_interval=0.01)
    monitor.start()
    try:
        assert reported.wait(2)
    finally:
        monitor.stop()
        monitor.join(2)

    assert monitor.stopped
    assert all(len(r) == 2 for r in reports)
    assert all(t.is_alive and t.attempts >= 1 for t in repo.snapshot())
