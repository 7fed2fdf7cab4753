"""Token file for the Drive/Sheets MCP server.

The file holds one JSON object keyed by service name; the server only
ever reads and writes the SERVICE_NAME entry. It lives at
./.gdrive-mcp/tokens.json unless GDRIVE_CREDENTIALS_PATH says otherwise,
and is created owner-only (0600) inside an owner-only (0700) directory.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gdrive_mcp.auth.models import (
    OAuthToken,
    StoredToken,
    TokenMetadata,
    TokenStatus,
)
from gdrive_mcp.config import get_token_path

logger = logging.getLogger(__name__)


class TokenStorage:
    """Reads and writes the OAuth token used for every Google call.

    Attributes:
        token_path: Path to the token file.

    Example:
        ```python
        storage = TokenStorage()
        if storage.get_status("gdrive-mcp") == TokenStatus.EXPIRED:
            ...
        ```
    """

    def __init__(self, token_path: Path | None = None) -> None:
        """Initialize token storage.

        Args:
            token_path: Token file location. Defaults to
                gdrive_mcp.config.get_token_path().
        """
        self.token_path = token_path or get_token_path()
        self._secure_directory()

    @property
    def credentials_dir(self) -> Path:
        """Directory holding the token file."""
        return self.token_path.parent

    def _secure_directory(self) -> None:
        self.credentials_dir.mkdir(parents=True, mode=0o700, exist_ok=True)
        # mkdir's mode is ignored for existing directories and masked by umask
        self.credentials_dir.chmod(0o700)

    def _read_entries(self) -> dict[str, Any]:
        """Return the decoded token file, or {} when absent or unreadable."""
        try:
            raw = self.token_path.read_text()
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning("Could not read token file %s: %s", self.token_path, e)
            return {}

        if not raw.strip():
            return {}

        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Token file %s is not valid JSON: %s", self.token_path, e)
            return {}

        if not isinstance(entries, dict):
            logger.warning("Token file %s does not hold a JSON object", self.token_path)
            return {}
        return entries

    def _write_entries(self, entries: dict[str, Any]) -> None:
        self._secure_directory()
        # Created 0600 up front; the file is never group or world readable
        fd = os.open(self.token_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            json.dump(entries, f, indent=2)
        self.token_path.chmod(0o600)

    def store(self, service_name: str, token: OAuthToken, metadata: TokenMetadata) -> StoredToken:
        """Save a token for a service, replacing any previous one.

        Returns:
            The entry as written.
        """
        stored = StoredToken(metadata=metadata, token=token)

        entries = self._read_entries()
        entries[service_name] = stored.model_dump(mode="json")
        self._write_entries(entries)
        return stored

    def retrieve(self, service_name: str) -> StoredToken | None:
        """Load a service's token.

        Returns:
            The StoredToken, or None when there is no entry or it does not
            validate.
        """
        entry = self._read_entries().get(service_name)
        if entry is None:
            return None

        try:
            return StoredToken.model_validate(entry)
        except ValidationError as e:
            logger.warning("Ignoring malformed token entry for %s: %s", service_name, e)
            return None

    def get_status(self, service_name: str) -> TokenStatus:
        """Classify a service's token as VALID, EXPIRED, MISSING, or INVALID."""
        entry = self._read_entries().get(service_name)
        if entry is None:
            return TokenStatus.MISSING

        try:
            stored = StoredToken.model_validate(entry)
        except ValidationError:
            return TokenStatus.INVALID

        if stored.token.is_expired():
            return TokenStatus.EXPIRED
        return TokenStatus.VALID
