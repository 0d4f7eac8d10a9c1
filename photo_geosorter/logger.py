"""
Logging module for the photo geosorter.

This module provides centralized logging configuration, the end-of-run
summary and the optional progress bar.
"""

import logging
import sys
from typing import Optional, Dict

from tqdm import tqdm


class Logger:
    """
    Centralized logging configuration for the photo geosorter.

    Diagnostics go through the standard logging tree; per-file progress
    lines are printed by the driver and are not log records.
    """

    def __init__(self, log_level: str = "WARNING", log_file: Optional[str] = None):
        """
        Initialize the logger.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Optional log file path
        """
        self.log_level = getattr(logging, log_level.upper(), logging.WARNING)
        self.log_file = log_file
        self._setup_logging()

    def _setup_logging(self):
        """Set up logging configuration."""
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if self.log_file:
            try:
                file_handler = logging.FileHandler(self.log_file, mode='w')
                file_handler.setLevel(self.log_level)
                file_handler.setFormatter(formatter)
                root_logger.addHandler(file_handler)
                logging.info(f"Logging to file: {self.log_file}")
            except OSError as e:
                logging.error(f"Failed to set up file logging: {e}")

        # Keep HTTP connection chatter out of the progress output
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('requests').setLevel(logging.WARNING)

        logging.debug("Logging system initialized")

    def get_logger(self, name: str) -> logging.Logger:
        """
        Get a logger instance for a specific module.

        Args:
            name: Logger name (usually __name__)

        Returns:
            Configured logger instance
        """
        return logging.getLogger(name)

    def log_operation_summary(self, stats: Dict[str, int]):
        """
        Log a summary of a sorting run.

        Args:
            stats: Run statistics with total, moved, planned, no_gps,
                geocoding_failed and move_failed counters
        """
        logger = logging.getLogger(__name__)

        total = stats.get('total', 0)
        moved = stats.get('moved', 0)
        planned = stats.get('planned', 0)

        logger.info("=" * 50)
        logger.info("OPERATION SUMMARY")
        logger.info("=" * 50)
        logger.info(f"Candidate images found: {total}")
        logger.info(f"Moved: {moved}")
        if planned:
            logger.info(f"Planned (dry run, not moved): {planned}")
        logger.info(f"Without GPS data: {stats.get('no_gps', 0)}")
        logger.info(f"Geocoding failed: {stats.get('geocoding_failed', 0)}")
        logger.info(f"Move failed: {stats.get('move_failed', 0)}")

        if total > 0:
            success_rate = ((moved + planned) / total) * 100
            label = "Located rate" if planned else "Success rate"
            logger.info(f"{label}: {success_rate:.1f}%")

        logger.info("=" * 50)

    def create_progress_bar(self, total: int, desc: str = "Sorting") -> Optional[tqdm]:
        """
        Create a progress bar for tracking the run.

        Args:
            total: Total number of items to process
            desc: Description for the progress bar

        Returns:
            tqdm progress bar instance, or None when there is nothing to track
        """
        if total > 0:
            return tqdm(total=total, desc=desc, unit="files", ncols=80)
        return None
