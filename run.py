"""Launcher for scheduled log rolling.

Runs a sequence of actions once, which is what cron or a systemd timer
should call. With ``--interval`` it repeats the sequence until stopped,
for hosts without an external scheduler.

Usage:
    python run.py
    python run.py copy delete
    python run.py --config config/config.json --interval 3600 copy delete
"""

import argparse
import logging
import os
import signal
import sys
import threading

from log_roller.actions.roller import ACTIONS, LogRoller
from log_roller.cli import EXIT_CONFIG_ERROR, EXIT_FILE_ERRORS, EXIT_OK, configure_logging
from log_roller.config.defaults import DEFAULT_CONFIG_PATH
from log_roller.config.roller_config import ConfigError, load_config

logger = logging.getLogger("log_roller")


def run_once(roller, actions) -> bool:
    results = roller.run(actions)
    return all(r.ok for r in results)


def run_every(roller, actions, interval: float, stop_event: threading.Event):
    """Run ``actions`` every ``interval`` seconds until stop_event is set.

    An action in progress always runs to completion; the stop flag is only
    checked between runs.
    """
    while not stop_event.is_set():
        if not run_once(roller, actions):
            logger.warning("Run finished with file errors; retrying next interval")
        stop_event.wait(timeout=interval)


def main():
    parser = argparse.ArgumentParser(
        description="Log Roller - scheduled log backup and cleanup",
    )
    parser.add_argument(
        "actions",
        nargs="*",
        help="Actions to run in order: copy, move, delete (default: copy delete)",
    )
    parser.add_argument(
        "-c", "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to config.json (default: config/config.json)",
    )
    parser.add_argument(
        "--interval",
        default=None,
        type=float,
        help="Repeat every N seconds instead of running once",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    args = parser.parse_args()

    actions = args.actions or ["copy", "delete"]
    unknown = [a for a in actions if a not in ACTIONS]
    if unknown:
        parser.error(f"unknown action(s): {', '.join(unknown)}")

    if args.interval is not None and args.interval <= 0:
        parser.error("--interval must be positive")

    try:
        config = load_config(args.config)
    except (ConfigError, FileNotFoundError) as exc:
        configure_logging(args.log_level or "INFO")
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR

    configure_logging(args.log_level or config.log_level, config.log_file)
    roller = LogRoller(config)

    if args.interval is None:
        return EXIT_OK if run_once(roller, actions) else EXIT_FILE_ERRORS

    stop_event = threading.Event()

    def handle_signal(signum, frame):
        logger.info("Received signal %s, shutting down...", signum)
        stop_event.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    logger.info("Running %s every %.0f seconds", " ".join(actions), args.interval)
    run_every(roller, actions, args.interval, stop_event)
    logger.info("Log roller stopped.")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
