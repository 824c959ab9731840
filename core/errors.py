# =============================================================================
# core/errors.py - Audit error types
# =============================================================================

from typing import List


class AuditError(Exception):
    """Base class for all audit errors"""


# -----------------------------------------------------------------------------
# Fatal errors - abort the run before any output is produced
# -----------------------------------------------------------------------------

class ConfigurationError(AuditError):
    """Required configuration is missing or invalid"""


class InputNotFoundError(AuditError, FileNotFoundError):
    """Input file does not exist or is not a regular file"""


class EmptyInputError(AuditError):
    """Input file has a header but no data rows"""


class MissingColumnError(AuditError):
    """Identifier column is not present in the input file"""

    def __init__(self, column: str, available_columns: List[str]):
        self.column = column
        self.available_columns = list(available_columns)
        super().__init__(
            f"Column '{column}' not found in input. "
            f"Available columns: {', '.join(self.available_columns)}"
        )


class InvalidDestinationError(AuditError):
    """Output directory does not exist"""


class AuthenticationError(AuditError):
    """Directory sign-in or consent was rejected"""


# -----------------------------------------------------------------------------
# Per-record errors - logged and skipped by the audit loop
# -----------------------------------------------------------------------------

class DirectoryLookupError(AuditError):
    """A directory lookup for a single identifier failed"""

    def __init__(self, identifier: str, message: str):
        self.identifier = identifier
        self.message = message
        super().__init__(f"{identifier}: {message}")


class DeviceLookupError(DirectoryLookupError):
    """Registered device lookup failed for a user"""
