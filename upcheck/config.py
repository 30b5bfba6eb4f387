"""
Design (config.py)
- Purpose: Centralize constants and configuration.
- Inputs: Process environment (DEBUG, UPCHECK_HOSTS_FILE).
- Outputs: Constants (file names, intervals, timeouts, default targets, policies).
- Side effects: None.
- Thread-safety: N/A (read-only constants).
"""

import os

# Target list read at startup (one host[:port][,type] per line)
HOSTS_FILENAME = os.environ.get("UPCHECK_HOSTS_FILE", "hosts.txt")

DEFAULT_PORT = 80

PROBE_TIMEOUT_SEC = 5.0      # one TCP dial per target per tick
PROBE_INTERVAL_SEC = 1.0     # sleep between probe cycles
REPORT_INTERVAL_SEC = 10.0   # status dump cadence

# Number of consecutive contrary probes before liveness flips (1 = flip immediately)
CONFIRM_THRESHOLD = 1

# Error histogram bound: distinct error texts kept per target, the rest are lumped together
MAX_ERROR_KINDS = 32
OTHER_ERRORS_KEY = "other errors"

# A local "cannot allocate memory" during dial says nothing about the target,
# so it is counted as reachable instead of reporting a false outage.
RESOURCE_EXHAUSTED_COUNTS_AS_ALIVE = True

# Any non-empty DEBUG value switches logging to TRACE
DEBUG = bool(os.environ.get("DEBUG"))

# Used when no target file is given (name, host, port)
DEFAULT_TARGETS = [
    ("Google DNS", "8.8.8.8", 53),
    ("Cloudflare DNS", "1.1.1.1", 53),
]

# Startup subnet sanity check: is CHECK_IP on the same /24 as BASE_IP?
SUBNET_BASE_IP = "192.168.1.1"
SUBNET_BASE_MASK = "255.255.255.0"
SUBNET_CHECK_IP = "1.1.1.1"
