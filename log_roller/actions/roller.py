"""Action orchestration.

Binds a ``RollerConfig`` to the copy, move and delete actions so callers
(the CLI, the launcher, tests) only pick which action to run.
"""

import logging
import os
from datetime import datetime

import psutil

from log_roller.actions.file_actions import copy_files, delete_files, move_files
from log_roller.actions.results import ActionResult
from log_roller.config.defaults import DELETE_TARGET_BACKUP, DELETE_TARGETS
from log_roller.config.roller_config import RollerConfig
from log_roller.retention.scanner import Clock, FileRecord, RetentionRule, scan_rule

logger = logging.getLogger(__name__)

ACTIONS = ("copy", "move", "delete")


class LogRoller:
    """Runs configured log lifecycle actions.

    Usage::

        roller = LogRoller(load_config("config/config.json"))
        roller.copy()
        roller.delete(target="backup")
    """

    def __init__(self, config: RollerConfig, clock: Clock | None = None):
        self.config = config
        self.clock = clock or datetime.now

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def copy(self) -> ActionResult:
        cfg = self.config
        self._log_disk_usage(cfg.backup_dir)
        return copy_files(
            cfg.origin_dirs,
            cfg.backup_dir,
            cfg.partition,
            cfg.copy_days,
            cfg.extension_filter,
            cfg.extension_types,
            now=self.clock(),
        )

    def move(self) -> ActionResult:
        cfg = self.config
        self._log_disk_usage(cfg.backup_dir)
        return move_files(
            cfg.origin_dirs,
            cfg.backup_dir,
            cfg.move_days,
            cfg.extension_filter,
            cfg.extension_types,
            now=self.clock(),
        )

    def delete(self, target: str | None = None) -> ActionResult:
        dirs, hold_days = self._delete_targets(target)
        return delete_files(
            dirs,
            hold_days,
            self.config.extension_filter,
            self.config.extension_types,
            now=self.clock(),
        )

    def run(self, actions) -> list[ActionResult]:
        """Run several actions in order, e.g. ``["copy", "delete"]``."""
        results = []
        for name in actions:
            results.append(self.run_action(name))
        return results

    def run_action(self, name: str) -> ActionResult:
        if name == "copy":
            return self.copy()
        if name == "move":
            return self.move()
        if name == "delete":
            return self.delete()
        raise ValueError(f"Unknown action: {name!r}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def rule_for(self, action: str, target: str | None = None) -> RetentionRule:
        cfg = self.config
        if action == "copy":
            days = cfg.copy_days
        elif action == "move":
            days = cfg.move_days
        elif action == "delete":
            _, days = self._delete_targets(target)
        else:
            raise ValueError(f"Unknown action: {action!r}")
        return RetentionRule(
            threshold_days=days,
            extension_filter=cfg.extension_filter,
            allowed_extensions=cfg.extension_types,
        )

    def scan(self, action: str, target: str | None = None) -> list[FileRecord]:
        """List the files ``action`` would handle right now, without acting."""
        if action == "delete":
            dirs, _ = self._delete_targets(target)
        else:
            dirs = self.config.origin_dirs
        return scan_rule(dirs, self.rule_for(action, target), now=self.clock())

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _delete_targets(self, target: str | None) -> tuple[list[str], int]:
        target = (target or self.config.delete_target).lower()
        if target not in DELETE_TARGETS:
            raise ValueError(f"Unknown delete target: {target!r}")
        if target == DELETE_TARGET_BACKUP:
            return self.config.backup_dirs, self.config.backup_hold_days
        return self.config.origin_dirs, self.config.origin_hold_days

    @staticmethod
    def _log_disk_usage(path: str):
        # Report on the nearest existing ancestor; the root may not exist yet
        probe = os.path.abspath(path)
        while not os.path.exists(probe) and os.path.dirname(probe) != probe:
            probe = os.path.dirname(probe)
        try:
            usage = psutil.disk_usage(probe)
        except OSError as exc:
            logger.warning("Could not read disk usage for %s: %s", probe, exc)
            return
        logger.info(
            "Backup volume %s: %.1f MiB free (%.1f%% used)",
            probe, usage.free / (1024 * 1024), usage.percent,
        )
