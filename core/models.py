# =============================================================================
# core/models.py - Unified data models
# =============================================================================

from dataclasses import dataclass, field
from typing import Dict, Any
from enum import Enum


ACTIVE_STATUS = "Active"

OUTPUT_FIELDNAMES = ['UserPrincipalName', 'DisplayName', 'Status', 'DeviceCount']


class AuditOutcome(Enum):
    """Enumeration of per-record audit outcomes"""
    MATCHED = "matched"
    HAS_DEVICE = "has_device"
    DISABLED = "disabled"
    SKIPPED = "skipped"
    LOOKUP_FAILED = "lookup_failed"
    DEVICE_LOOKUP_FAILED = "device_lookup_failed"


@dataclass(frozen=True)
class DirectoryUser:
    """User account as returned by the directory"""
    id: str
    display_name: str = ""
    user_principal_name: str = ""
    account_enabled: bool = False

    @classmethod
    def from_graph(cls, data: Dict[str, Any]) -> "DirectoryUser":
        """Build from a Microsoft Graph user resource"""
        return cls(
            id=data.get('id') or "",
            display_name=data.get('displayName') or "",
            user_principal_name=data.get('userPrincipalName') or "",
            account_enabled=data.get('accountEnabled') is True
        )


@dataclass(frozen=True)
class AuditMatch:
    """Enabled user with no registered devices"""
    user_principal_name: str
    display_name: str
    status: str = ACTIVE_STATUS
    device_count: int = 0

    @classmethod
    def from_user(cls, user: DirectoryUser) -> "AuditMatch":
        return cls(
            user_principal_name=user.user_principal_name,
            display_name=user.display_name
        )

    def to_row(self) -> Dict[str, Any]:
        """Convert to dictionary keyed by output column"""
        return {
            'UserPrincipalName': self.user_principal_name,
            'DisplayName': self.display_name,
            'Status': self.status,
            'DeviceCount': self.device_count
        }


@dataclass
class AuditStats:
    """Statistics for an audit run"""
    total_records: int = 0
    processed: int = 0
    outcome_counts: Dict[AuditOutcome, int] = field(default_factory=dict)

    def record(self, outcome: AuditOutcome) -> None:
        self.processed += 1
        self.outcome_counts[outcome] = self.outcome_counts.get(outcome, 0) + 1

    def count(self, outcome: AuditOutcome) -> int:
        return self.outcome_counts.get(outcome, 0)

    @property
    def matched(self) -> int:
        return self.count(AuditOutcome.MATCHED)

    @property
    def failed(self) -> int:
        """Records dropped because a directory call failed"""
        return self.count(AuditOutcome.LOOKUP_FAILED) + self.count(AuditOutcome.DEVICE_LOOKUP_FAILED)
