"""
Design (utils.py)
- Purpose: Reusable helpers: IP literal detection, duration rounding and formatting.
- Inputs: Various helper parameters (host strings, timedeltas).
- Outputs: Helper results (bools, timedeltas, strings).
- Side effects: None.
- Thread-safety: Stateless; safe to call from any thread.
"""

import ipaddress
from datetime import datetime, timedelta


def is_ip_literal(host: str) -> bool:
    """
    Purpose: Tell an IPv4/IPv6 literal apart from a hostname.
    Inputs: host (str)
    Outputs: True if host parses as an IP address.
    """
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def round_to_seconds(delta: timedelta) -> timedelta:
    """Round a duration to the nearest whole second (halves round away from zero)."""
    micros = delta // timedelta(microseconds=1)
    seconds, rest = divmod(abs(micros), 1_000_000)
    if rest >= 500_000:
        seconds += 1
    return timedelta(seconds=seconds if micros >= 0 else -seconds)


def elapsed_since(since: datetime, now: datetime) -> timedelta:
    return round_to_seconds(now - since)


def format_duration(delta: timedelta) -> str:
    """
    Purpose: Compact human form used in transition logs.
    Outputs: e.g. "0s", "45s", "2m5s", "1h0m12s", "-3s".
    """
    total = int(delta.total_seconds())
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"
