"""Pydantic models for OAuth token persistence.

These models describe the shape of entries stored in tokens.json and
the status values reported by TokenStorage.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, Field


class TokenStatus(str, Enum):
    """State of a stored OAuth token."""

    VALID = "valid"
    EXPIRED = "expired"
    MISSING = "missing"
    INVALID = "invalid"


class OAuthToken(BaseModel):
    """OAuth2 access/refresh token pair.

    Attributes:
        access_token: Bearer token sent with API requests.
        refresh_token: Long-lived token used to obtain new access tokens.
        expires_at: Timezone-aware expiry of the access token.
        scopes: Granted OAuth scopes.
        token_type: Token type, always "Bearer" for Google.
    """

    access_token: str = Field(..., description="OAuth access token")
    refresh_token: str | None = Field(default=None, description="OAuth refresh token")
    expires_at: datetime = Field(..., description="Access token expiry (UTC)")
    scopes: list[str] = Field(default_factory=list, description="Granted scopes")
    token_type: str = Field(default="Bearer", description="Token type")

    def is_expired(self, buffer_seconds: int = 60) -> bool:
        """Check whether the access token is expired or about to expire.

        Args:
            buffer_seconds: Treat the token as expired this many seconds early.

        Returns:
            True if the token should be refreshed before use.
        """
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) + timedelta(seconds=buffer_seconds) >= expires_at


class TokenMetadata(BaseModel):
    """Bookkeeping stored alongside a token."""

    service_name: str = Field(..., description="Service the token belongs to")
    provider: str = Field(default="google", description="OAuth provider")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_refreshed: datetime | None = Field(default=None)


class StoredToken(BaseModel):
    """A versioned token entry as persisted in tokens.json."""

    version: int = Field(default=1, description="Storage schema version")
    metadata: TokenMetadata
    token: OAuthToken
