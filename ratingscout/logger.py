"""
Structured logging system for RatingScout.

Provides centralized logging with console and file outputs, log levels,
and metrics tracking for monitoring rating provider health.
"""

import copy
import logging
import sys
import threading
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for monitoring provider lookups and match outcomes.
    """

    def __init__(
        self,
        name: str = "ratingscout",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """`log_dir` defaults to ./logs; the file handler always logs at DEBUG."""
        self.logger = logging.getLogger(name)
        # Providers report from worker threads
        self._lock = threading.Lock()
        self.metrics = self._empty_metrics()
        self.configure(level=level, log_dir=log_dir, enable_file=enable_file, enable_console=enable_console)

    @staticmethod
    def _empty_metrics() -> dict:
        return {
            "requests_made": 0,
            "searches_attempted": 0,
            "searches_successful": 0,
            "searches_failed": 0,
            "matches_found": 0,
            "matches_missing": 0,
            "errors_by_type": {},
            "provider_success_rate": {},
        }

    def configure(
        self,
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """(Re)build handlers. Metrics are kept."""
        self.logger.setLevel(getattr(logging, level.upper()))
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()

        if enable_console:
            # stderr keeps stdout free for command output
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"ratingscout_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

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
        """Internal logging method with context."""
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_request(self):
        """Increment HTTP request counter."""
        with self._lock:
            self.metrics["requests_made"] += 1

    def record_search_attempt(self, provider: str):
        """Record a lookup attempt against a provider."""
        with self._lock:
            self.metrics["searches_attempted"] += 1
            stats = self.metrics["provider_success_rate"].setdefault(provider, {"attempts": 0, "successes": 0})
            stats["attempts"] += 1

    def record_search_success(self, provider: str):
        """Record successful lookup."""
        with self._lock:
            self.metrics["searches_successful"] += 1
            if provider in self.metrics["provider_success_rate"]:
                self.metrics["provider_success_rate"][provider]["successes"] += 1

    def record_search_failure(self, provider: str, error_type: str):
        """Record failed lookup, counted under `error_type`."""
        with self._lock:
            self.metrics["searches_failed"] += 1
            errors = self.metrics["errors_by_type"]
            errors[error_type] = errors.get(error_type, 0) + 1

    def record_match(self, found: bool):
        """Record whether best-match selection produced a result."""
        with self._lock:
            self.metrics["matches_found" if found else "matches_missing"] += 1

    def get_metrics(self) -> dict:
        """Snapshot of the metrics with per-provider success rates filled in."""
        with self._lock:
            metrics_copy = copy.deepcopy(self.metrics)
        for provider, stats in metrics_copy["provider_success_rate"].items():
            if stats["attempts"] > 0:
                stats["success_rate"] = round(
                    stats["successes"] / stats["attempts"], 3
                )

        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        total_attempts = metrics["searches_attempted"]
        total_successes = metrics["searches_successful"]
        overall_rate = 0
        if total_attempts > 0:
            overall_rate = round(total_successes / total_attempts * 100, 1)

        self.info("=== Rating Lookup Metrics ===")
        self.info(f"HTTP Requests: {metrics['requests_made']}")
        self.info(f"Lookups: {total_successes}/{total_attempts} ({overall_rate}% success)")
        self.info(f"Matches: {metrics['matches_found']} found, {metrics['matches_missing']} missing")

        if metrics["provider_success_rate"]:
            self.info("Provider Success Rates:")
            for provider, stats in metrics["provider_success_rate"].items():
                rate = stats.get("success_rate", 0) * 100
                self.info(f"  {provider}: {stats['successes']}/{stats['attempts']} ({rate:.1f}%)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "ratingscout",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    The first call decides the handlers. No log file is opened unless
    `enable_file=True` is passed here or `configure()` is called later,
    so importing the library leaves the filesystem alone.
    """
    global _global_logger

    if _global_logger is None:
        kwargs.setdefault("enable_file", False)
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
