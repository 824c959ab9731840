# =============================================================================
# core/reporting.py - Progress and diagnostic reporters
# =============================================================================

import logging

from core.models import AuditStats


class Reporter:
    """Receives progress and diagnostics from the audit loop. Default is silent."""

    def progress(self, index: int, total: int, identifier: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def complete(self, stats: AuditStats) -> None:
        pass


class LoggingReporter(Reporter):
    """Reporter that writes status lines through the logging module"""

    def __init__(self, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)

    def progress(self, index: int, total: int, identifier: str) -> None:
        percent = (index / total) * 100 if total else 100.0
        self.logger.info(f"[{index}/{total}] ({percent:.0f}%) Checking {identifier}")

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def complete(self, stats: AuditStats) -> None:
        outcome_counts = {outcome.value: count for outcome, count in stats.outcome_counts.items()}
        self.logger.info(f"Outcome summary: {outcome_counts}")
        self.logger.info(f"Processed {stats.processed}/{stats.total_records} records, "
                         f"{stats.failed} lookup failures")
