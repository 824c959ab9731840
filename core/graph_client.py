# =============================================================================
# core/graph_client.py - Microsoft Graph directory client
# =============================================================================

import logging
from typing import Dict, Any, Optional, Iterable, Callable, List
from urllib.parse import quote

import msal
import requests

from core.errors import AuthenticationError, DirectoryLookupError, DeviceLookupError
from core.models import DirectoryUser
from utils.config import Config, DEFAULT_SCOPES


USER_SELECT = "id,displayName,userPrincipalName,accountEnabled"


class GraphDirectoryClient:
    """Delegated Microsoft Graph client for user and registered device lookups"""

    def __init__(self, config: Config, scopes: Optional[Iterable[str]] = None,
                 app: Optional[msal.PublicClientApplication] = None,
                 session_factory: Callable[[], requests.Session] = requests.Session):
        self.config = config
        self.scopes: List[str] = list(scopes or DEFAULT_SCOPES)
        self.base_url = config.graph_base_url
        self.timeout = config.graph_timeout
        self.session: Optional[requests.Session] = None
        self._app = app
        self._session_factory = session_factory
        self._token: Optional[str] = None
        self._account: Optional[Dict[str, Any]] = None
        self.logger = logging.getLogger(__name__)

    def __enter__(self):
        """Context manager entry"""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.disconnect()

    @property
    def app(self) -> msal.PublicClientApplication:
        if self._app is None:
            self._app = msal.PublicClientApplication(
                self.config.client_id,
                authority=self.config.authority
            )
        return self._app

    def connect(self, scopes: Optional[Iterable[str]] = None) -> None:
        """Sign in with the requested scopes and open the HTTP session"""
        if scopes:
            self.scopes = list(scopes)

        try:
            result = self._acquire_token()
        except AuthenticationError:
            raise
        except Exception as e:
            raise AuthenticationError(f"Sign-in to Microsoft Graph failed: {e}") from e

        if not result or "access_token" not in result:
            result = result or {}
            raise AuthenticationError(
                f"Sign-in to Microsoft Graph failed: {result.get('error', 'unknown_error')} - "
                f"{result.get('error_description', 'no access token returned')}"
            )

        self._token = result["access_token"]
        accounts = self.app.get_accounts()
        self._account = accounts[0] if accounts else None

        self.session = self._session_factory()
        self.session.headers.update({"Accept": "application/json"})
        self.logger.info(f"Successfully connected to Microsoft Graph with scopes {self.scopes}")

    def disconnect(self) -> None:
        """Close the Graph session. Safe to call more than once."""
        if self.session is None:
            return
        try:
            self.session.close()
        except Exception as e:
            self.logger.warning(f"Error while closing Graph session: {e}")
        finally:
            self.session = None
            self._token = None
            self._account = None
        self.logger.info("Disconnected from Microsoft Graph")

    def get_user(self, identifier: str) -> DirectoryUser:
        """Resolve a user by userPrincipalName or object id"""
        data = self._get(
            f"/users/{quote(identifier, safe='@')}",
            {"$select": USER_SELECT},
            identifier,
            DirectoryLookupError
        )
        user = DirectoryUser.from_graph(data)
        if not user.id:
            raise DirectoryLookupError(identifier, "Directory response did not include a user id")
        self.logger.debug(f"Found user {identifier} in directory")
        return user

    def has_registered_device(self, user_id: str) -> bool:
        """Check whether the user has at least one registered device"""
        data = self._get(
            f"/users/{quote(user_id, safe='@')}/registeredDevices",
            {"$top": "1", "$select": "id"},
            user_id,
            DeviceLookupError
        )
        devices = data.get("value")
        if not isinstance(devices, list):
            raise DeviceLookupError(user_id, "Directory response did not include a device list")
        return len(devices) > 0

    def _acquire_token(self) -> Optional[Dict[str, Any]]:
        """Try the token cache first, then the configured interactive flow"""
        app = self.app
        accounts = app.get_accounts()
        if accounts:
            result = app.acquire_token_silent(self.scopes, account=accounts[0])
            if result and "access_token" in result:
                self.logger.debug("Using cached Microsoft Graph token")
                return result

        if self.config.auth_flow == "interactive":
            return app.acquire_token_interactive(scopes=self.scopes)

        flow = app.initiate_device_flow(scopes=self.scopes)
        if "user_code" not in flow:
            raise AuthenticationError(
                f"Device code sign-in could not start: {flow.get('error')} - "
                f"{flow.get('error_description')}"
            )
        print(flow["message"], flush=True)
        return app.acquire_token_by_device_flow(flow)

    def _refresh_token(self) -> None:
        # MSAL serves the cached token until it nears expiry, then refreshes it
        if self._account is None:
            return
        try:
            result = self.app.acquire_token_silent(self.scopes, account=self._account)
        except Exception as e:
            self.logger.debug(f"Silent token refresh failed, reusing current token: {e}")
            return
        if result and "access_token" in result:
            self._token = result["access_token"]

    def _get(self, path: str, params: Dict[str, str], identifier: str,
             error_class=DirectoryLookupError) -> Dict[str, Any]:
        """Internal method to perform a Graph GET"""
        if self.session is None:
            raise ConnectionError("Not connected to Microsoft Graph")

        self._refresh_token()
        url = f"{self.base_url}{path}"
        self.logger.debug(f"GET {url} params={params}")

        try:
            response = self.session.get(
                url,
                params=params,
                headers={"Authorization": f"Bearer {self._token}"},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise error_class(identifier, f"Request failed: {e}") from e

        if response.status_code >= 400:
            raise error_class(identifier, self._error_message(response))

        try:
            data = response.json()
        except ValueError as e:
            raise error_class(identifier, f"Malformed response from directory: {e}") from e
        if not isinstance(data, dict):
            raise error_class(identifier, "Malformed response from directory")
        return data

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Extract the Graph error code and message from a failed response"""
        try:
            error = response.json().get("error", {})
            return f"HTTP {response.status_code} {error.get('code', '')}: {error.get('message', '')}".strip()
        except (ValueError, AttributeError):
            return f"HTTP {response.status_code}: {response.text[:200]}"
