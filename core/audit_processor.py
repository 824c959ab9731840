# =============================================================================
# core/audit_processor.py - Active users without registered devices
# =============================================================================

from typing import List, Dict, Optional, Tuple
import logging

from core.models import AuditMatch, AuditOutcome, AuditStats
from core.errors import DirectoryLookupError
from core.graph_client import GraphDirectoryClient
from core.reporting import Reporter, LoggingReporter
from utils.csv_utils import CSVHandler


class DeviceAuditProcessor:
    """Finds enabled directory users that have no registered devices"""

    def __init__(self, directory_client: GraphDirectoryClient, reporter: Optional[Reporter] = None):
        self.directory_client = directory_client
        self.reporter = reporter or LoggingReporter()
        self.stats = AuditStats()
        self.logger = logging.getLogger(self.__class__.__name__)

    def process(self, input_csv: str, identifier_column: str, output_csv: str) -> AuditStats:
        """Main processing workflow. Input and destination are validated before sign-in."""
        self.logger.info(f"Starting {self.__class__.__name__} processing workflow")

        CSVHandler.validate_destination(output_csv)
        records = CSVHandler.read_records(input_csv, identifier_column)

        with self.directory_client:
            matches = self.run(records, identifier_column)

        self.logger.info(f"Found {len(matches)} active users without registered devices")
        CSVHandler.write_matches(output_csv, matches)

        return self.stats

    def run(self, records: List[Dict[str, str]], column: str) -> List[AuditMatch]:
        """Audit each record in input order and return the matches"""
        self.stats = AuditStats(total_records=len(records))
        matches: List[AuditMatch] = []

        for index, row in enumerate(records, start=1):
            outcome, match = self.audit_record(index, len(records), row, column)
            self.stats.record(outcome)
            if match is not None:
                matches.append(match)

        self.reporter.complete(self.stats)
        return matches

    def audit_record(self, index: int, total: int, row: Dict[str, str],
                     column: str) -> Tuple[AuditOutcome, Optional[AuditMatch]]:
        """Classify a single record; directory failures never escape"""
        identifier = (row.get(column) or "").strip()
        if not identifier:
            self.reporter.warning(f"Skipping row {index} with empty '{column}' value")
            return AuditOutcome.SKIPPED, None

        self.reporter.progress(index, total, identifier)

        try:
            user = self.directory_client.get_user(identifier)
        except Exception as e:
            cause = e.message if isinstance(e, DirectoryLookupError) else e
            self.reporter.warning(f"Could not look up user {identifier}: {cause}")
            return AuditOutcome.LOOKUP_FAILED, None

        if not user.account_enabled:
            return AuditOutcome.DISABLED, None

        try:
            has_device = self.directory_client.has_registered_device(user.id)
        except Exception as e:
            cause = e.message if isinstance(e, DirectoryLookupError) else e
            self.reporter.warning(f"Could not check registered devices for {identifier}: {cause}")
            return AuditOutcome.DEVICE_LOOKUP_FAILED, None

        if has_device:
            return AuditOutcome.HAS_DEVICE, None

        self.logger.debug(f"{identifier} is active with no registered devices")
        return AuditOutcome.MATCHED, AuditMatch.from_user(user)
