# =============================================================================
# utils/csv_utils.py - CSV utilities
# =============================================================================

import csv
import logging
from pathlib import Path
from typing import List, Dict

from core.errors import (
    InputNotFoundError, EmptyInputError, MissingColumnError, InvalidDestinationError
)
from core.models import AuditMatch, OUTPUT_FIELDNAMES


class CSVHandler:
    """Utilities for reading audit input and writing audit reports"""

    @staticmethod
    def read_records(file_path: str, identifier_column: str,
                     encoding: str = 'utf-8-sig', delimiter: str = ',') -> List[Dict[str, str]]:
        """Read input CSV and validate the identifier column against the first record"""
        logger = logging.getLogger(__name__)

        path = Path(file_path)
        if not path.is_file():
            raise InputNotFoundError(f"Input file {file_path} not found")

        with open(path, 'r', newline='', encoding=encoding) as file:
            reader = csv.DictReader(file, delimiter=delimiter)
            records = list(reader)

        if not records:
            raise EmptyInputError(f"Input file {file_path} contains no data rows")

        headers = [name for name in records[0].keys() if name is not None]
        logger.info(f"CSV Headers: {headers[:10]}")
        if identifier_column not in headers:
            raise MissingColumnError(identifier_column, headers)

        logger.info(f"Successfully read {len(records)} records from {file_path}")
        return records

    @staticmethod
    def validate_destination(output_path: str) -> None:
        """Ensure the output directory exists; directories are never created"""
        parent = Path(output_path).parent
        if not parent.is_dir():
            raise InvalidDestinationError(
                f"Output directory {parent} does not exist for {output_path}"
            )

    @staticmethod
    def write_matches(output_path: str, matches: List[AuditMatch]) -> None:
        """Write audit matches to CSV. The header is written even with no matches."""
        logger = logging.getLogger(__name__)

        CSVHandler.validate_destination(output_path)

        if not matches:
            logger.warning("No matches to write, report will contain only the header")

        with open(output_path, 'w', newline='', encoding='utf-8') as file:
            writer = csv.DictWriter(file, fieldnames=OUTPUT_FIELDNAMES)
            writer.writeheader()
            writer.writerows(match.to_row() for match in matches)

        logger.info(f"Successfully wrote {len(matches)} records to {output_path}")
