"""
CLI workflow orchestration for Glowie.

Provides the CLIOrchestrator class that coordinates the CLI workflow from
argument parsing through index update and streamed duplicate reporting.
"""

from __future__ import annotations

import logging
import os
import signal
import threading

from ..database import IndexStore
from ..dedup import stream_exact_duplicates, stream_near_duplicates
from ..errors import ClusteringError
from ..indexer import find_candidate_files, update_paths_parallel
from ..user_config import get_user_config
from ..utils.selection import KeepPolicy
from ..utils.validators import validate_directory, validate_distance_percent
from .arg_parser import parse_arguments
from .reporting import print_duplicate_sets, print_update_summary


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Orchestrates the CLI workflow.

    Phases: setup, validation, configuration, discovery, index update,
    clustering. Ctrl-C sets the shared cancellation flag so in-flight work
    finishes cleanly and partial results are still reported.
    """

    def __init__(self, argv=None):
        self.argv = argv
        self.logger = None
        self.args = None
        self.store = None
        self.candidates = []
        self.update_stats = None
        self.keep_policy = None
        self.show_progress = True
        self.cancel = threading.Event()

    def run(self) -> int:
        """
        Execute the complete CLI workflow.

        Returns:
            Exit code (0 for success, 1 for error, 130 when interrupted)
        """
        self._setup_phase()

        exit_code = self._validate_phase()
        if exit_code != 0:
            return exit_code

        exit_code = self._configure_phase()
        if exit_code != 0:
            return exit_code

        previous_handler = self._install_interrupt_handler()
        try:
            if not self.args.skip_update and self.args.directories:
                self._discover_phase()
                self._update_phase()

            exit_code = self._cluster_phase()
        finally:
            if previous_handler is not None:
                signal.signal(signal.SIGINT, previous_handler)

        if self.cancel.is_set():
            self.logger.info("Interrupted; results above are partial")
            return 130
        return exit_code

    def _setup_phase(self) -> None:
        """Parse arguments and setup logging."""
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)

    def _validate_phase(self) -> int:
        """
        Validate arguments.

        Returns:
            0 for success, 1 for validation error
        """
        for directory in self.args.directories:
            valid, message = validate_directory(str(directory))
            if not valid:
                self.logger.error(message)
                return 1

        if self.args.distance is not None:
            valid, message = validate_distance_percent(self.args.distance)
            if not valid:
                self.logger.error(message)
                return 1

        if self.args.workers is not None and self.args.workers < 1:
            self.logger.error("--workers must be at least 1")
            return 1

        return 0

    def _configure_phase(self) -> int:
        """
        Resolve unset options from the user config and open the store.

        Values from the config file or environment are validated here, the
        same way command-line values are in the validation phase.

        Returns:
            0 for success, 1 for an invalid configured value
        """
        config = get_user_config()

        if self.args.db_path is None:
            self.args.db_path = config.db_path
        if self.args.workers is None:
            try:
                self.args.workers = config.default_workers
            except (TypeError, ValueError) as e:
                self.logger.error(f"Invalid default_workers in configuration: {e}")
                return 1
        if self.args.distance is None:
            self.args.distance = config.distance_percent
        if self.args.keep_policy is None:
            self.args.keep_policy = config.keep_policy
        if self.args.reversed is None:
            self.args.reversed = config.keep_reversed
        if self.args.include_ignored is None:
            self.args.include_ignored = config.include_ignored

        valid, message = validate_distance_percent(self.args.distance)
        if not valid:
            self.logger.error(f"Invalid distance_percent in configuration: {message}")
            return 1

        if self.args.workers < 1:
            self.logger.error(f"Invalid default_workers in configuration: {self.args.workers}")
            return 1

        try:
            self.keep_policy = KeepPolicy(self.args.keep_policy)
        except ValueError:
            choices = ', '.join(policy.value for policy in KeepPolicy)
            self.logger.error(
                f"Invalid keep_policy in configuration: {self.args.keep_policy!r} "
                f"(choose from {choices})"
            )
            return 1

        self.show_progress = not self.args.no_progress

        self.logger.debug(f"Using index database {self.args.db_path}")
        self.store = IndexStore(self.args.db_path)
        return 0

    def _install_interrupt_handler(self):
        """Route Ctrl-C to the cancellation flag (main thread only)."""
        if threading.current_thread() is not threading.main_thread():
            return None

        def _on_interrupt(signum, frame):
            if self.cancel.is_set():
                raise KeyboardInterrupt
            self.logger.warning("Cancelling... press Ctrl-C again to abort immediately")
            self.cancel.set()

        return signal.signal(signal.SIGINT, _on_interrupt)

    def _discover_phase(self) -> None:
        """
        Collect candidate paths.

        Previously indexed paths under each root are included too, so files
        that have since vanished are reported instead of silently skipped.
        """
        seen = set()
        recursive = not self.args.no_recursive

        for directory in self.args.directories:
            root = str(directory.resolve())
            self.logger.info(f"Scanning {root}...")
            found = find_candidate_files(
                root, recursive=recursive, images_only=self.args.images_only
            )
            stored = self.store.list_paths(prefix=os.path.join(root, ''))
            for path in found + stored:
                if path not in seen:
                    seen.add(path)
                    self.candidates.append(path)

        self.logger.info(f"Found {len(self.candidates):,} candidate files")

    def _update_phase(self) -> None:
        """Update the index for every candidate path."""
        self.update_stats = update_paths_parallel(
            self.candidates,
            self.store,
            max_workers=self.args.workers,
            cancel=self.cancel,
            show_progress=self.show_progress,
        )
        print_update_summary(self.update_stats)

    def _cluster_phase(self) -> int:
        """
        Stream and print duplicate sets.

        Returns:
            0 for success, 1 if clustering failed
        """
        modes = {'exact': ['exact'], 'near': ['near'], 'both': ['exact', 'near'], 'none': []}
        for mode in modes[self.args.mode]:
            if self.cancel.is_set():
                break

            if mode == 'exact':
                title = "EXACT DUPLICATES (identical bytes)"
                stream = stream_exact_duplicates(
                    self.store,
                    include_ignored=self.args.include_ignored,
                    keep_policy=self.keep_policy,
                    reversed=self.args.reversed,
                    cancel=self.cancel,
                )
            else:
                title = f"NEAR DUPLICATES (within {self.args.distance:g}% of hash bits)"
                stream = stream_near_duplicates(
                    self.store,
                    self.args.distance,
                    keep_policy=self.keep_policy,
                    reversed=self.args.reversed,
                    cancel=self.cancel,
                )

            try:
                print_duplicate_sets(stream.iter_sets(), title)
            except ClusteringError as e:
                self.logger.error(f"Clustering failed: {e}")
                return 1

        return 0


__all__ = ['CLIOrchestrator', 'setup_logging']
