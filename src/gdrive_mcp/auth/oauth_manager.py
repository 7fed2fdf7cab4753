"""OAuth manager for Google Drive and Sheets access.

Runs the browser-based authorization-code flow with google-auth-oauthlib
and refreshes access tokens with google-auth. Client credentials come
from the caller, the environment, or the GDRIVE_OAUTH_PATH keys file
(see gdrive_mcp.config).
"""

import asyncio
import logging
import os
import secrets
import webbrowser
from datetime import datetime, timedelta, timezone
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from urllib.parse import parse_qs, urlparse

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from gdrive_mcp.auth.models import OAuthToken, StoredToken, TokenMetadata, TokenStatus
from gdrive_mcp.auth.token_storage import TokenStorage
from gdrive_mcp.config import SERVICE_NAME, load_client_secrets

logger = logging.getLogger(__name__)

GOOGLE_DRIVE_SCOPES = [
    "https://www.googleapis.com/auth/drive",
    "https://www.googleapis.com/auth/spreadsheets",
]

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"

DEFAULT_OAUTH_HOST = "127.0.0.1"
DEFAULT_OAUTH_PORT = 8789
DEFAULT_REDIRECT_URI = "http://127.0.0.1:8789/callback"


class OAuthManager:
    """OAuth authentication manager for Google Drive/Sheets.

    Handles authorization, token exchange, storage, and refresh for the
    single credential the server uses.

    Attributes:
        storage: Token storage instance for persisting credentials.
        client_id: OAuth client ID used for refresh, if known.
        client_secret: OAuth client secret used for refresh, if known.
    """

    def __init__(
        self,
        storage: TokenStorage | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
    ) -> None:
        """Initialize OAuth manager.

        Args:
            storage: Token storage instance. Creates default if not provided.
            client_id: OAuth client ID. Falls back to configuration.
            client_secret: OAuth client secret. Falls back to configuration.
        """
        self.storage = storage or TokenStorage()
        if not client_id or not client_secret:
            env_id, env_secret = load_client_secrets()
            client_id = client_id or env_id
            client_secret = client_secret or env_secret
        self.client_id = client_id
        self.client_secret = client_secret
        self._service_name = SERVICE_NAME

    def has_valid_tokens(self) -> bool:
        """Check whether a non-expired token is stored."""
        return self.storage.get_status(self._service_name) == TokenStatus.VALID

    @property
    def token_path(self) -> Path:
        """Path to the tokens.json file."""
        return self.storage.token_path

    def _credentials_to_token(self, credentials: Credentials, scopes: list[str]) -> OAuthToken:
        """Convert google-auth Credentials to OAuthToken.

        Credentials without an expiry get a one hour lifetime.
        """
        if credentials.expiry:
            expires_at = credentials.expiry
            # google-auth reports naive UTC datetimes
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
        else:
            expires_at = datetime.now(timezone.utc) + timedelta(hours=1)

        return OAuthToken(  # nosec B106 - "Bearer" is OAuth token type, not a password
            access_token=credentials.token,
            refresh_token=credentials.refresh_token,
            expires_at=expires_at,
            scopes=scopes,
            token_type="Bearer",
        )

    def _token_to_credentials(self, token: OAuthToken) -> Credentials:
        """Convert OAuthToken to google-auth Credentials."""
        return Credentials(  # nosec B106 - token_uri is public Google OAuth endpoint
            token=token.access_token,
            refresh_token=token.refresh_token,
            token_uri=GOOGLE_TOKEN_URI,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=token.scopes,
        )

    async def authenticate(
        self,
        scopes: list[str] | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
    ) -> OAuthToken:
        """Perform the complete OAuth2 authorization-code flow.

        Args:
            scopes: OAuth scopes to request. Uses GOOGLE_DRIVE_SCOPES if not specified.
            client_id: Google OAuth client ID.
            client_secret: Google OAuth client secret.

        Returns:
            OAuthToken containing access and refresh tokens.

        Raises:
            ValueError: If client ID/secret not provided.
            RuntimeError: If the consent flow fails.
        """
        if scopes is None:
            scopes = GOOGLE_DRIVE_SCOPES

        if not client_id or not client_secret:
            raise ValueError(
                "Client ID and secret required. "
                "Pass as arguments, set GOOGLE_OAUTH_CLIENT_ID and "
                "GOOGLE_OAUTH_CLIENT_SECRET, or point GDRIVE_OAUTH_PATH at a keys file."
            )

        redirect_uri = os.environ.get("GOOGLE_OAUTH_REDIRECT_URI", DEFAULT_REDIRECT_URI)

        client_config = {
            "web": {
                "client_id": client_id,
                "client_secret": client_secret,
                "auth_uri": GOOGLE_AUTH_URI,
                "token_uri": GOOGLE_TOKEN_URI,
                "redirect_uris": [redirect_uri],
            }
        }

        # Flow is blocking (local HTTP server + browser)
        loop = asyncio.get_event_loop()
        credentials = await loop.run_in_executor(
            None, self._run_oauth_flow, client_config, scopes, redirect_uri
        )

        self.client_id = client_id
        self.client_secret = client_secret

        token = self._credentials_to_token(credentials, scopes)
        metadata = TokenMetadata(service_name=self._service_name, provider="google")
        self.storage.store(self._service_name, token, metadata)
        logger.info("Stored new token at %s", self.token_path)

        return token

    def _run_oauth_flow(
        self, client_config: dict, scopes: list[str], redirect_uri: str
    ) -> Credentials:
        """Run the blocking consent flow and exchange the code for tokens.

        Opens the browser at the authorization URL and serves a single
        callback request on the redirect URI's host and port.
        """
        flow = Flow.from_client_config(
            client_config,
            scopes=scopes,
            redirect_uri=redirect_uri,
        )

        state = secrets.token_urlsafe(32)
        auth_url, _ = flow.authorization_url(
            access_type="offline",
            prompt="consent",
            state=state,
        )

        parsed = urlparse(redirect_uri)
        host = parsed.hostname or DEFAULT_OAUTH_HOST
        port = parsed.port or DEFAULT_OAUTH_PORT
        callback_path = parsed.path or "/callback"

        auth_code: list[str | None] = [None]
        error_message: list[str | None] = [None]

        class OAuthCallbackHandler(BaseHTTPRequestHandler):
            """HTTP handler for the OAuth redirect."""

            def log_message(self, format: str, *args) -> None:
                pass

            def _reply(self, status: int, body: bytes) -> None:
                self.send_response(status)
                self.send_header("Content-type", "text/html")
                self.end_headers()
                self.wfile.write(body)

            def do_GET(self) -> None:
                request_parsed = urlparse(self.path)
                if request_parsed.path != callback_path:
                    self._reply(404, b"Not Found")
                    return

                query_params = parse_qs(request_parsed.query)

                if "error" in query_params:
                    error_message[0] = query_params["error"][0]
                    self._reply(
                        400,
                        b"<html><body><h1>Authorization Failed</h1>"
                        b"<p>Please close this window and try again.</p></body></html>",
                    )
                elif query_params.get("state", [None])[0] != state:
                    error_message[0] = "state mismatch"
                    self._reply(
                        400,
                        b"<html><body><h1>Authorization Failed</h1>"
                        b"<p>Invalid state parameter.</p></body></html>",
                    )
                elif "code" in query_params:
                    auth_code[0] = query_params["code"][0]
                    self._reply(
                        200,
                        b"<html><body><h1>Authorization Successful!</h1>"
                        b"<p>You can close this window and return to the terminal.</p>"
                        b"</body></html>",
                    )
                else:
                    self._reply(
                        400,
                        b"<html><body><h1>Authorization Failed</h1>"
                        b"<p>No authorization code received.</p></body></html>",
                    )

        server = HTTPServer((host, port), OAuthCallbackHandler)
        server.timeout = 300

        # stdout may be the MCP transport; keep user prompts on stderr
        logger.info("Opening browser for Google authorization: %s", auth_url)
        webbrowser.open(auth_url)

        server.handle_request()
        server.server_close()

        if error_message[0]:
            raise RuntimeError(f"OAuth authorization failed: {error_message[0]}")

        if not auth_code[0]:
            raise RuntimeError("No authorization code received from Google")

        flow.fetch_token(code=auth_code[0])
        return flow.credentials

    async def refresh_if_needed(self) -> OAuthToken | None:
        """Refresh the stored token if it is expired or about to expire.

        Returns:
            The refreshed token, the existing token if still valid, or None
            if no token exists or it cannot be refreshed.
        """
        stored = self.storage.retrieve(self._service_name)
        if stored is None:
            return None

        if not stored.token.is_expired():
            return stored.token

        if stored.token.refresh_token is None:
            return None

        credentials = self._token_to_credentials(stored.token)

        loop = asyncio.get_event_loop()
        await loop.run_in_executor(None, credentials.refresh, Request())

        new_token = self._credentials_to_token(credentials, stored.token.scopes)
        # Google does not always return a new refresh token
        if new_token.refresh_token is None:
            new_token.refresh_token = stored.token.refresh_token

        stored.metadata.last_refreshed = datetime.now(timezone.utc)
        self.storage.store(self._service_name, new_token, stored.metadata)
        logger.info("Refreshed access token (expires %s)", new_token.expires_at.isoformat())

        return new_token

    def get_status(self) -> tuple[TokenStatus, StoredToken | None]:
        """Get the status of the stored token.

        Returns:
            Tuple of (TokenStatus, StoredToken or None).
        """
        status = self.storage.get_status(self._service_name)
        stored = (
            self.storage.retrieve(self._service_name) if status != TokenStatus.MISSING else None
        )
        return (status, stored)

    def get_credentials(self) -> Credentials | None:
        """Get google-auth credentials for the stored token, if any."""
        stored = self.storage.retrieve(self._service_name)
        if stored is None:
            return None

        return self._token_to_credentials(stored.token)
