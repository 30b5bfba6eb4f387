"""
Design (storage.py)
- Purpose: Load the target list from disk (hosts.txt) or build the built-in default targets.
- Inputs: Path to a UTF-8 text file, one "host[:port][,type]" per line.
- Outputs: list[Target] in file order.
- Side effects: Reads the file; DNS lookups for hostnames; logs skipped lines.
- Errors: A missing/unreadable file raises OSError (caller treats it as fatal); a bad line
          is logged as a warning and skipped.
"""

from datetime import datetime
from pathlib import Path
from typing import Iterable, List

from .config import DEFAULT_PORT, DEFAULT_TARGETS
from .logger_config import get_logger, kv
from .models import Target
from .resolver import DescriptorError, parse_descriptor

logger = get_logger("storage")


def parse_targets(lines: Iterable[str], default_port: int = DEFAULT_PORT) -> List[Target]:
    """
    Turn descriptor lines into Targets. Comments ("#...") and blank lines are skipped;
    file-loaded targets start optimistically alive with zeroed counters.
    """
    targets: List[Target] = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        try:
            host, port = parse_descriptor(line, default_port)
        except DescriptorError as e:
            logger.warning(f"invalid line: {line} - skipping" + kv(error=e))
            continue
        target = Target(name=line, host=host, port=port, is_alive=True, since=datetime.now())
        targets.append(target)
        logger.info(f"added {target.address}" + kv(name=line))
    return targets


def load_targets(path: Path, default_port: int = DEFAULT_PORT) -> List[Target]:
    """
    Read targets from `path`. Raises FileNotFoundError/OSError when the file itself
    can't be read; individual bad lines never abort the load. Undecodable bytes become
    U+FFFD so the damaged line is rejected on its own instead of failing the whole file.
    """
    with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
        return parse_targets(f, default_port)


def default_targets() -> List[Target]:
    """Built-in public resolvers; they start dead until a probe proves them reachable."""
    return [Target(name=name, host=host, port=port, is_alive=False) for name, host, port in DEFAULT_TARGETS]
