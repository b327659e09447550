"""
Structured logging system for Customer Orders.

Provides logging to console and file, log levels, and counters for
what the store persisted and what the operator selected.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Logger with support for console and file outputs.
    Tracks metrics for seeding and the selection loop.
    """

    def __init__(
        self,
        name: str = "customerorders",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers.clear()  # Remove existing handlers
        self.logger.propagate = False

        self.metrics = {
            "records_persisted": 0,
            "batches_failed": 0,
            "selections_confirmed": 0,
            "input_format_errors": 0,
            "lookup_misses": 0,
            "records_by_kind": {},
        }

        # Console handler
        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        # File handler
        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            self.log_file = log_dir / f"customerorders_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)
        else:
            self.log_file = None

        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_persisted(self, kind: str, count: int):
        """Count records committed for a kind."""
        self.metrics["records_persisted"] += count
        by_kind = self.metrics["records_by_kind"]
        by_kind[kind] = by_kind.get(kind, 0) + count

    def record_batch_failure(self):
        self.metrics["batches_failed"] += 1

    def record_selection(self):
        self.metrics["selections_confirmed"] += 1

    def record_input_error(self, error_type: str):
        """Record a recovered operator error (InputFormatError or LookupMiss)."""
        if error_type == "InputFormatError":
            self.metrics["input_format_errors"] += 1
        elif error_type == "LookupMiss":
            self.metrics["lookup_misses"] += 1

    def get_metrics(self) -> dict:
        """Return a copy of current metrics."""
        metrics_copy = self.metrics.copy()
        metrics_copy["records_by_kind"] = dict(self.metrics["records_by_kind"])
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Session Metrics ===")
        self.info(f"Records persisted: {metrics['records_persisted']}")
        for kind, count in metrics["records_by_kind"].items():
            self.info(f"  {kind}: {count}")
        if metrics["batches_failed"]:
            self.info(f"Failed batches: {metrics['batches_failed']}")
        self.info(f"Selections confirmed: {metrics['selections_confirmed']}")
        self.info(
            f"Operator errors: {metrics['input_format_errors']} format, "
            f"{metrics['lookup_misses']} not found"
        )
