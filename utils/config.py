# =============================================================================
# utils/config.py - Configuration management
# =============================================================================

import os
from typing import Optional, List
from dotenv import load_dotenv


AUTH_FLOWS = ('device_code', 'interactive')

DEFAULT_SCOPES = ['User.Read.All', 'Device.Read.All']


class Config:
    """Configuration management"""

    def __init__(self):
        load_dotenv()

    @property
    def tenant_id(self) -> Optional[str]:
        return os.getenv("AZURE_TENANT_ID")

    @property
    def client_id(self) -> Optional[str]:
        return os.getenv("AZURE_CLIENT_ID")

    @property
    def authority_host(self) -> str:
        return os.getenv("AZURE_AUTHORITY_HOST", "https://login.microsoftonline.com").rstrip('/')

    @property
    def authority(self) -> str:
        return f"{self.authority_host}/{self.tenant_id}"

    @property
    def graph_base_url(self) -> str:
        return os.getenv("GRAPH_BASE_URL", "https://graph.microsoft.com/v1.0").rstrip('/')

    @property
    def graph_timeout(self) -> int:
        return int(os.getenv("GRAPH_TIMEOUT_SEC", "30"))

    @property
    def auth_flow(self) -> str:
        return os.getenv("AUTH_FLOW", "device_code").strip().lower()

    @property
    def log_level(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def log_dir(self) -> str:
        return os.getenv("LOG_DIR", "logs")

    @property
    def input_csv(self) -> str:
        return os.getenv("AUDIT_INPUT_CSV", "users.csv")

    @property
    def identifier_column(self) -> str:
        return os.getenv("AUDIT_IDENTIFIER_COLUMN", "UserPrincipalName")

    @property
    def output_csv(self) -> str:
        return os.getenv("AUDIT_OUTPUT_CSV", "ActiveUsersWithoutDevices.csv")

    def validate_graph_config(self) -> bool:
        """Validate that all required Graph configuration is present and well formed"""
        return not self.get_missing_graph_vars() and not self.get_invalid_vars()

    def get_missing_graph_vars(self) -> List[str]:
        """Get list of missing Graph configuration variables"""
        vars_and_names = [
            (self.tenant_id, "AZURE_TENANT_ID"),
            (self.client_id, "AZURE_CLIENT_ID")
        ]
        return [name for var, name in vars_and_names if not var]

    def get_invalid_vars(self) -> List[str]:
        """Get list of configuration variables with unusable values"""
        invalid = []
        if self.auth_flow not in AUTH_FLOWS:
            invalid.append("AUTH_FLOW")
        try:
            if self.graph_timeout <= 0:
                invalid.append("GRAPH_TIMEOUT_SEC")
        except ValueError:
            invalid.append("GRAPH_TIMEOUT_SEC")
        return invalid
