from __future__ import annotations
import json, logging, os
from typing import Any, Dict, List, Optional

import requests
from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import AuthorizedSession, Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from .config import SyncConfig
from .errors import AuthorizationError

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"
SCOPES: List[str] = ["https://www.googleapis.com/auth/spreadsheets"]
SUCCESS_MESSAGE = "Authorization successful! You can close this window and return to the terminal."
PROMPT_MESSAGE = "If the browser does not open automatically, please visit this URL: {url}"


def client_config_from_pair(client_id: str, client_secret: str) -> Dict[str, Any]:
    return {"installed": {
        "client_id": client_id,
        "client_secret": client_secret,
        "auth_uri": AUTH_URI,
        "token_uri": TOKEN_URI,
        "redirect_uris": ["http://localhost"],
    }}


def load_client_config(path: str) -> Dict[str, Any]:
    """Google client-secrets JSON ('installed' or 'web' section), checked for an id/secret pair."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise AuthorizationError(f"Could not read credentials file {path}: {e}") from e
    section = (data.get("installed") or data.get("web")) if isinstance(data, dict) else None
    if not isinstance(section, dict) or not section.get("client_id") or not section.get("client_secret"):
        raise AuthorizationError(f"Credentials file {path} has no client_id/client_secret")
    installed = client_config_from_pair(section["client_id"], section["client_secret"])["installed"]
    installed.update(section)
    return {"installed": installed}


class OAuthCredentials:
    """Token file plus the installed-app consent flow for one OAuth client."""

    def __init__(
        self,
        client_config: Dict[str, Any],
        token_path: str = ".google-token.json",
        port: int = 8591,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client_config = client_config
        self.token_path = token_path
        self.port = port
        self.logger = logger or logging.getLogger("i18n-sheets")
        self.flow = InstalledAppFlow.from_client_config(client_config, scopes=SCOPES, redirect_uri=self.redirect_uri)
        self.credentials: Optional[Credentials] = self._load_token()

    @classmethod
    def from_config(cls, cfg: SyncConfig, logger: logging.Logger | None = None) -> "OAuthCredentials":
        if cfg.client_id and cfg.client_secret:
            client_config = client_config_from_pair(cfg.client_id, cfg.client_secret)
        elif cfg.credentials_path:
            client_config = load_client_config(cfg.credentials_path)
        else:
            raise AuthorizationError("No OAuth client configured")
        return cls(client_config, token_path=cfg.token_path, port=cfg.oauth_port, logger=logger)

    @property
    def redirect_uri(self) -> str:
        # same form InstalledAppFlow.run_local_server registers
        return f"http://localhost:{self.port}/"

    def _load_token(self) -> Optional[Credentials]:
        if not os.path.exists(self.token_path):
            return None
        try:
            return Credentials.from_authorized_user_file(self.token_path, SCOPES)
        except (OSError, ValueError) as e:
            self.logger.warning(f"Saved token {self.token_path} is unreadable ({e}); re-authorization needed")
            return None

    def _save_token(self) -> None:
        with open(self.token_path, "w", encoding="utf-8") as f:
            f.write(self.credentials.to_json())
        self.logger.info(f"Token saved to {self.token_path}")

    def auth_url(self) -> str:
        self.flow.redirect_uri = self.redirect_uri
        url, _state = self.flow.authorization_url(access_type="offline", prompt="consent")
        return url

    def authorize(self, code: str) -> None:
        """Exchange a pasted authorization code and save the token."""
        self.flow.redirect_uri = self.redirect_uri
        try:
            self.flow.fetch_token(code=code)
        except (OAuth2Error, requests.RequestException) as e:
            raise AuthorizationError(f"Authorization failed: {e}") from e
        self.credentials = self.flow.credentials
        self._save_token()

    def run_local_server(self, open_browser: bool = True) -> bool:
        """Serve the redirect on localhost:<port> once, exchange the code, save the token.

        The library checks the returned `state` against the one it sent, so a
        forged redirect fails the exchange.
        """
        self.logger.info(f"OAuth2 callback server is running at {self.redirect_uri}")
        try:
            self.credentials = self.flow.run_local_server(
                host="localhost",
                port=self.port,
                open_browser=open_browser,
                authorization_prompt_message=PROMPT_MESSAGE,
                success_message=SUCCESS_MESSAGE,
                access_type="offline",
                prompt="consent",
            )
        except (OAuth2Error, requests.RequestException) as e:
            self.logger.error(f"Authorization error: {e}")
            raise AuthorizationError(f"Authorization failed: {e}") from e
        self._save_token()
        return True

    def require_credentials(self) -> Credentials:
        if self.credentials is None:
            raise AuthorizationError(f"No saved token at {self.token_path}; run `i18n-sheets auth` first")
        if not self.credentials.valid:
            if not self.credentials.refresh_token:
                raise AuthorizationError("Saved token cannot be refreshed; run `i18n-sheets auth` again")
            self.logger.debug("Refreshing access token")
            try:
                self.credentials.refresh(Request())
            except (RefreshError, TransportError) as e:
                raise AuthorizationError(f"Token refresh failed: {e}") from e
            self._save_token()
        return self.credentials

    def authorized_session(self) -> AuthorizedSession:
        """A requests session that sends the bearer token and refreshes it on 401."""
        return AuthorizedSession(self.require_credentials())
