"""
Design (probe.py)
- Purpose: One bounded TCP connectivity check against host:port.
- Inputs: host (str), port (int), timeout (seconds).
- Outputs: ProbeResult (REACHABLE / UNREACHABLE / RESOURCE_EXHAUSTED + error text).
- Side effects: Opens and immediately closes a TCP connection. Never raises for dial errors.
- Thread-safety: Stateless; safe to call from any thread.
"""

import errno
import os
import socket
import time

import psutil

from .config import PROBE_TIMEOUT_SEC
from .logger_config import TRACE, get_logger, kv
from .models import Outcome, ProbeResult

logger = get_logger("probe")

MEMORY_ERROR_TEXT = "cannot allocate memory"


def is_memory_error(err: OSError) -> bool:
    """True when the dial failed because this machine ran out of memory."""
    if err.errno == errno.ENOMEM:
        return True
    return MEMORY_ERROR_TEXT in str(err).lower()


def describe_error(err: OSError) -> str:
    """Stable text for the error histogram ("timed out", "[Errno 111] Connection refused", ...)."""
    if isinstance(err, socket.timeout) and not str(err):
        return "timed out"
    text = str(err) or err.__class__.__name__
    if isinstance(err, socket.gaierror):
        return f"lookup failed: {text}"
    return text


def log_memory_usage() -> None:
    mem = psutil.Process(os.getpid()).memory_info()
    vm = psutil.virtual_memory()
    logger.debug("memory usage" + kv(rss_mib=mem.rss // (1024 * 1024),
                                     vms_mib=mem.vms // (1024 * 1024),
                                     available_mib=vm.available // (1024 * 1024),
                                     percent=vm.percent))


def probe(host: str, port: int, timeout: float = PROBE_TIMEOUT_SEC) -> ProbeResult:
    """
    Purpose: Try to establish a TCP connection; success means "listening", nothing is exchanged.
    Outputs: ProbeResult with elapsed seconds.
    """
    t0 = time.perf_counter()
    try:
        with socket.create_connection((host, port), timeout=timeout):
            pass
    except OSError as e:
        elapsed = time.perf_counter() - t0
        text = describe_error(e)
        if is_memory_error(e):
            logger.debug("memory error connecting" + kv(host=host, port=port, error=text))
            log_memory_usage()
            return ProbeResult(Outcome.RESOURCE_EXHAUSTED, text, elapsed)
        logger.log(TRACE, "dial failed" + kv(host=host, port=port, error=text))
        return ProbeResult(Outcome.UNREACHABLE, text, elapsed)
    return ProbeResult(Outcome.REACHABLE, None, time.perf_counter() - t0)
