"""
Entry point: parse arguments, log the local network context, load targets and run the
probe/report threads until SIGINT/SIGTERM, then dump the final status of every target.
"""

import argparse
import signal
import sys
import threading
from pathlib import Path

from upcheck import config
from upcheck.logger_config import get_logger, setup_logging
from upcheck.monitor import TargetMonitor
from upcheck.network import get_network_info, is_in_same_subnet, log_network_info
from upcheck.probe import probe
from upcheck.repository import TargetRepo
from upcheck.status import show_statuses
from upcheck.storage import default_targets, load_targets

logger = get_logger("main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Poll host:port targets over TCP and log up/down transitions.")
    parser.add_argument("--hosts", type=Path, default=Path(config.HOSTS_FILENAME),
                        help="target list, one host[:port][,type] per line (default: %(default)s)")
    parser.add_argument("--defaults", action="store_true",
                        help="monitor the built-in default targets instead of reading a file")
    parser.add_argument("--interval", type=float, default=config.PROBE_INTERVAL_SEC,
                        help="seconds between probe cycles (default: %(default)s)")
    parser.add_argument("--report-interval", type=float, default=config.REPORT_INTERVAL_SEC,
                        help="seconds between status dumps (default: %(default)s)")
    parser.add_argument("--timeout", type=float, default=config.PROBE_TIMEOUT_SEC,
                        help="TCP connect timeout in seconds (default: %(default)s)")
    parser.add_argument("--confirm", type=int, default=config.CONFIRM_THRESHOLD,
                        help="consecutive contrary probes needed to flip up/down (default: %(default)s)")
    parser.add_argument("--skip-network-info", action="store_true",
                        help="don't look up local IP, netmask and default gateway at startup")
    parser.add_argument("--debug", action="store_true", default=config.DEBUG,
                        help="trace level logging (also enabled by a non-empty DEBUG env var)")
    return parser


def log_subnet_check() -> None:
    if is_in_same_subnet(config.SUBNET_BASE_IP, config.SUBNET_BASE_MASK, config.SUBNET_CHECK_IP):
        logger.info(f"{config.SUBNET_CHECK_IP} is in the same subnet as {config.SUBNET_BASE_IP}")
    else:
        logger.info(f"{config.SUBNET_CHECK_IP} is not in the same subnet as {config.SUBNET_BASE_IP}")


def register_signals(monitor: TargetMonitor, done: threading.Event) -> None:
    logger.info("registering signals")

    def handle(signum, _frame):
        logger.info(f"Received signal: {signal.Signals(signum).name}")
        monitor.stop()
        done.set()

    signal.signal(signal.SIGINT, handle)
    signal.signal(signal.SIGTERM, handle)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)

    if args.confirm < 1:
        logger.critical("--confirm must be at least 1")
        return 2
    if not args.timeout > 0:
        logger.critical("--timeout must be greater than 0")
        return 2
    if not (args.interval >= 0 and args.report_interval >= 0):
        logger.critical("--interval and --report-interval must not be negative")
        return 2

    log_subnet_check()
    if not args.skip_network_info:
        log_network_info(get_network_info())

    if args.defaults:
        targets = default_targets()
    else:
        try:
            targets = load_targets(args.hosts)
        except OSError as e:
            logger.critical(f"error opening {args.hosts}: {e}")
            return 1
    if not targets:
        logger.warning("no targets to monitor")

    repo = TargetRepo(targets)
    monitor = TargetMonitor(
        repo,
        probe=lambda host, port: probe(host, port, args.timeout),
        probe_interval=args.interval,
        report_interval=args.report_interval,
        confirm_threshold=args.confirm,
    )
    done = threading.Event()
    register_signals(monitor, done)
    monitor.start()
    while not done.wait(1.0):
        pass
    monitor.join(args.timeout + 1)
    show_statuses(repo.snapshot())
    return 0


if __name__ == "__main__":
    sys.exit(main())
