"""
Design (logger_config.py)
- Purpose: One place to set up stderr logging for the whole app (colours per level, TRACE level).
- Inputs: debug flag (from config.DEBUG / CLI).
- Outputs: Configured "upcheck" logger hierarchy; get_logger(name) for modules.
- Side effects: Installs a StreamHandler on the "upcheck" root logger.
- Thread-safety: logging module is thread-safe; setup_logging is meant to run once at startup.
"""

import logging
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

ROOT_LOGGER = "upcheck"


class CustomFormatter(logging.Formatter):
    grey = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    def __init__(self, fmt, datefmt, use_colour=True):
        super().__init__(fmt, datefmt)
        if use_colour:
            self.FORMATS = {
                TRACE: self.grey + fmt + self.reset,
                logging.DEBUG: self.grey + fmt + self.reset,
                logging.INFO: self.grey + fmt + self.reset,
                logging.WARNING: self.yellow + fmt + self.reset,
                logging.ERROR: self.red + fmt + self.reset,
                logging.CRITICAL: self.bold_red + fmt + self.reset
            }
        else:
            self.FORMATS = {}

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno, self._fmt)
        formatter = logging.Formatter(log_fmt, self.datefmt)
        return formatter.format(record)


def get_logger(name):
    """Return a child of the app logger, e.g. get_logger("monitor") -> "upcheck.monitor"."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(debug=False, stream=None):
    """
    Purpose: Attach the stderr handler and pick the level (TRACE when debug, else INFO).
    Outputs: The configured app logger.
    Side effects: Replaces any handlers previously installed by this function.
    """
    stream = stream if stream is not None else sys.stderr
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    fmt = '%(asctime)s [%(levelname)s][%(name)s] %(message)s'
    datefmt = '%Y-%m-%dT%H:%M:%S'
    handler.setFormatter(CustomFormatter(fmt, datefmt, use_colour=stream.isatty()))
    logger.addHandler(handler)
    logger.setLevel(TRACE if debug else logging.INFO)

    if debug:
        logger.info("enabling Trace level logging")
    else:
        logger.info("enabling Info level logging")
    return logger


def kv(**fields):
    """Render structured fields as ' key=value' pairs appended to a log message."""
    return "".join(f" {key}={value}" for key, value in fields.items())
