"""Shared fixtures and fakes for the device audit tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

_ROOT_DIR = Path(__file__).resolve().parents[1]
if str(_ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(_ROOT_DIR))

from core.errors import DeviceLookupError, DirectoryLookupError  # noqa: E402
from core.models import DirectoryUser  # noqa: E402
from core.reporting import Reporter  # noqa: E402


class FakeDirectoryClient:
    """In-memory stand-in for GraphDirectoryClient."""

    def __init__(
        self,
        users: Optional[Dict[str, DirectoryUser]] = None,
        devices: Optional[Dict[str, bool]] = None,
        failing_device_checks: Optional[List[str]] = None,
    ) -> None:
        self.users = users or {}
        self.devices = devices or {}
        self.failing_device_checks = set(failing_device_checks or [])
        self.calls: List[tuple] = []
        self.connected = False
        self.connect_count = 0
        self.disconnect_count = 0

    def __enter__(self):
        self.connected = True
        self.connect_count += 1
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.connected = False
        self.disconnect_count += 1

    def get_user(self, identifier: str) -> DirectoryUser:
        self.calls.append(("get_user", identifier))
        if identifier not in self.users:
            raise DirectoryLookupError(identifier, "HTTP 404 Request_ResourceNotFound: not found")
        return self.users[identifier]

    def has_registered_device(self, user_id: str) -> bool:
        self.calls.append(("has_registered_device", user_id))
        if user_id in self.failing_device_checks:
            raise DeviceLookupError(user_id, "HTTP 403 Authorization_RequestDenied: denied")
        return self.devices.get(user_id, False)


class RecordingReporter(Reporter):
    """Reporter that keeps everything it is told."""

    def __init__(self) -> None:
        self.progress_events: List[tuple] = []
        self.warnings: List[str] = []
        self.completed = []

    def progress(self, index: int, total: int, identifier: str) -> None:
        self.progress_events.append((index, total, identifier))

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def complete(self, stats) -> None:
        self.completed.append(stats)


def make_user(upn: str, enabled: bool = True, display_name: str = "") -> DirectoryUser:
    return DirectoryUser(
        id=f"id-{upn}",
        display_name=display_name or upn.split("@")[0].title(),
        user_principal_name=upn,
        account_enabled=enabled,
    )


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def write_csv(tmp_path: Path):
    """Write CSV text to a temp file and return its path as a string."""

    def _write(text: str, name: str = "users.csv") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's .env or shell variables out of the tests."""
    monkeypatch.setattr("utils.config.load_dotenv", lambda *args, **kwargs: False)
    for name in (
        "AZURE_TENANT_ID",
        "AZURE_CLIENT_ID",
        "AZURE_AUTHORITY_HOST",
        "GRAPH_BASE_URL",
        "GRAPH_TIMEOUT_SEC",
        "AUTH_FLOW",
        "LOG_LEVEL",
        "LOG_DIR",
        "AUDIT_INPUT_CSV",
        "AUDIT_IDENTIFIER_COLUMN",
        "AUDIT_OUTPUT_CSV",
    ):
        monkeypatch.delenv(name, raising=False)
