"""Environment-driven configuration for gdrive-mcp.

Environment Variables:
    GDRIVE_CREDENTIALS_PATH: Token store file (default: ./.gdrive-mcp/tokens.json)
    GDRIVE_OAUTH_PATH: OAuth client keys JSON downloaded from Google Cloud Console
    GOOGLE_OAUTH_CLIENT_ID: OAuth client ID (overrides the keys file)
    GOOGLE_OAUTH_CLIENT_SECRET: OAuth client secret (overrides the keys file)
    GOOGLE_OAUTH_REDIRECT_URI: Redirect URI for the setup flow
    GDRIVE_MCP_LOG_LEVEL: Logging level for the server (default: INFO)
"""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Service name for token storage
SERVICE_NAME = "gdrive-mcp"

DEFAULT_CREDENTIALS_DIR = ".gdrive-mcp"
DEFAULT_TOKEN_FILE = "tokens.json"
DEFAULT_LOG_LEVEL = "INFO"


def get_token_path() -> Path:
    """Resolve the token store location.

    Returns:
        GDRIVE_CREDENTIALS_PATH if set, else ./.gdrive-mcp/tokens.json.
    """
    override = os.environ.get("GDRIVE_CREDENTIALS_PATH")
    if override:
        return Path(override).expanduser()
    return Path.cwd() / DEFAULT_CREDENTIALS_DIR / DEFAULT_TOKEN_FILE


def get_log_level() -> int:
    """Return the numeric logging level from GDRIVE_MCP_LOG_LEVEL."""
    name = os.environ.get("GDRIVE_MCP_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        return logging.INFO
    return level


def load_client_secrets(path: Path | None = None) -> tuple[str | None, str | None]:
    """Load the OAuth client ID and secret.

    Environment variables win over the keys file. The keys file may hold
    either a "web" or an "installed" client section.

    Args:
        path: Keys file to read. Defaults to GDRIVE_OAUTH_PATH.

    Returns:
        Tuple of (client_id, client_secret); either may be None.
    """
    client_id = os.environ.get("GOOGLE_OAUTH_CLIENT_ID")
    client_secret = os.environ.get("GOOGLE_OAUTH_CLIENT_SECRET")
    if client_id and client_secret:
        return client_id, client_secret

    if path is None:
        env_path = os.environ.get("GDRIVE_OAUTH_PATH")
        path = Path(env_path).expanduser() if env_path else None

    if path is None or not path.exists():
        return client_id, client_secret

    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read OAuth keys file %s: %s", path, e)
        return client_id, client_secret

    section = data.get("web") or data.get("installed") or {}
    return (
        client_id or section.get("client_id"),
        client_secret or section.get("client_secret"),
    )
