"""Unit tests for the logging reporter."""

from __future__ import annotations

import logging

import pytest

from core.models import AuditOutcome, AuditStats
from core.reporting import LoggingReporter, Reporter


def test_base_reporter_is_silent() -> None:
    reporter = Reporter()

    reporter.progress(1, 1, "a@x.com")
    reporter.warning("ignored")
    reporter.complete(AuditStats())


def test_logging_reporter_output(caplog: pytest.LogCaptureFixture) -> None:
    reporter = LoggingReporter(logging.getLogger("audit.test"))
    stats = AuditStats(total_records=2)
    stats.record(AuditOutcome.MATCHED)
    stats.record(AuditOutcome.LOOKUP_FAILED)

    with caplog.at_level(logging.INFO, logger="audit.test"):
        reporter.progress(1, 4, "a@x.com")
        reporter.warning("Could not look up user ghost@x.com")
        reporter.complete(stats)

    messages = [record.getMessage() for record in caplog.records]
    assert "[1/4] (25%) Checking a@x.com" in messages
    assert "Could not look up user ghost@x.com" in messages
    assert "Processed 2/2 records, 1 lookup failures" in messages
    assert caplog.records[1].levelno == logging.WARNING
