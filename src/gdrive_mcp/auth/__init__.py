"""OAuth authentication for the Drive/Sheets MCP server.

Quick Start:
    ```python
    from gdrive_mcp.auth import OAuthManager

    manager = OAuthManager()

    token = await manager.authenticate(
        client_id="your-client-id",
        client_secret="your-client-secret"  # pragma: allowlist secret
    )
    ```
"""

from gdrive_mcp.auth.models import (
    OAuthToken,
    StoredToken,
    TokenMetadata,
    TokenStatus,
)
from gdrive_mcp.auth.oauth_manager import GOOGLE_DRIVE_SCOPES, OAuthManager
from gdrive_mcp.auth.token_storage import TokenStorage

__all__ = [
    "OAuthManager",
    "TokenStorage",
    "OAuthToken",
    "StoredToken",
    "TokenMetadata",
    "TokenStatus",
    "GOOGLE_DRIVE_SCOPES",
]
