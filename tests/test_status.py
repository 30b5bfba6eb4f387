from __future__ import annotations

import logging
from datetime import timedelta

from upcheck.models import Target, Transition, TransitionEvent
from upcheck.status import format_event, format_target, show_statuses


def test_format_target(t0) -> None:
    target = Target(name="Test Target", host="localhost", port=8080, is_alive=True, since=t0,
                    attempts=10, failures=2, errors={"timed out": 1, "refused": 1})

    line = format_target(target)

    assert line.startswith("localhost:8080 - Alive: True since 2026-01-01T10:00:00")
    assert "(80.00% success rate) 8/10" in line
    assert line.endswith("{'timed out': 1, 'refused': 1}")


def test_zero_attempts_has_no_rate(t0) -> None:
    target = Target(name="new", host="192.0.2.1", port=80, since=t0)

    assert target.success_rate is None
    assert "(n/a success rate) 0/0" in format_target(target)


def test_ipv6_address_is_bracketed(t0) -> None:
    target = Target(name="v6", host="2001:db8::1", port=22, since=t0)

    assert format_target(target).startswith("[2001:db8::1]:22 - Alive: False")


def test_format_event(t0) -> None:
    down = TransitionEvent("db", "192.0.2.5", 5432, Transition.DOWN, timedelta(minutes=3, seconds=4), t0)
    back = TransitionEvent("db", "192.0.2.5", 5432, Transition.RECOVERED, timedelta(seconds=9), t0)

    assert format_event(down) == "target db (192.0.2.5:5432) is down - was up for 3m4s"
    assert format_event(back) == "target db (192.0.2.5:5432) is back up - was down for 9s"


def test_show_statuses_levels(t0, caplog) -> None:
    up = Target(name="up", host="192.0.2.1", port=80, is_alive=True, since=t0, attempts=1)
    down = Target(name="down", host="192.0.2.2", port=80, is_alive=False, since=t0, attempts=1, failures=1)

    with caplog.at_level(logging.INFO):
        show_statuses([up, down])

    levels = [r.levelno for r in caplog.records]
    assert levels == [logging.INFO, logging.WARNING, logging.INFO]
    assert caplog.records[-1].getMessage() == "----"
