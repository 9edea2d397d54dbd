"""Command line interface.

Usage:
    log-roller copy
    log-roller move
    log-roller delete --target backup
    log-roller scan copy
    log-roller run copy delete
    log-roller -c /etc/log-roller/config.json --log-level DEBUG copy
"""

import argparse
import json
import logging
import sys

from log_roller.actions.roller import ACTIONS, LogRoller
from log_roller.config.defaults import DEFAULT_CONFIG_PATH, DELETE_TARGETS, LOG_FORMAT
from log_roller.config.roller_config import ConfigError, load_config

logger = logging.getLogger("log_roller")

EXIT_OK = 0
EXIT_FILE_ERRORS = 1
EXIT_CONFIG_ERROR = 2


def configure_logging(level: str, log_file: str | None = None):
    """Set up root logging once; later calls are no-ops."""
    if logging.getLogger().handlers:
        return
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="log-roller",
        description="Back up, move and purge old log files",
    )
    parser.add_argument(
        "-c", "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to config.json (default: config/config.json)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: logging.level from config)",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("copy", help="Copy old files into the partitioned backup tree")
    sub.add_parser("move", help="Move old files into the backup directory")

    delete = sub.add_parser("delete", help="Delete files past their hold period")
    delete.add_argument(
        "--target",
        choices=DELETE_TARGETS,
        default=None,
        help="Directory set to purge (default: delete.target from config)",
    )

    scan = sub.add_parser("scan", help="List files an action would handle")
    scan.add_argument("action", choices=ACTIONS)
    scan.add_argument("--target", choices=DELETE_TARGETS, default=None)
    scan.add_argument("--json", action="store_true", help="Print JSON instead of text")

    run = sub.add_parser("run", help="Run several actions in order")
    run.add_argument("actions", nargs="+", choices=ACTIONS)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (ConfigError, FileNotFoundError) as exc:
        configure_logging(args.log_level or "INFO")
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR

    configure_logging(args.log_level or config.log_level, config.log_file)
    return dispatch(LogRoller(config), args)


def dispatch(roller: LogRoller, args) -> int:
    if args.command == "scan":
        records = roller.scan(args.action, target=args.target)
        if args.json:
            print(json.dumps(
                [{"path": r.path, "modified": r.modified.isoformat()} for r in records],
                indent=2,
            ))
        else:
            for r in records:
                print(f"{r.modified.isoformat(timespec='seconds')}  {r.path}")
        return EXIT_OK

    if args.command == "delete":
        results = [roller.delete(target=args.target)]
    elif args.command == "run":
        results = roller.run(args.actions)
    else:
        results = [roller.run_action(args.command)]

    return EXIT_OK if all(r.ok for r in results) else EXIT_FILE_ERRORS


if __name__ == "__main__":
    sys.exit(main())
