"""OAuth2 token model."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta


@dataclass
class OAuth2Token:
    """
    OAuth2 access token with expiration tracking.

    Attributes:
        access_token: The access token string
        token_type: Token type (typically "Bearer")
        expires_at: UTC timestamp when token expires
        scope: Scope the token was issued for
    """

    access_token: str
    token_type: str
    expires_at: datetime
    scope: str | None = None

    @classmethod
    def from_expires_on(
        cls, access_token: str, expires_on: int | float | datetime, scope: str | None = None
    ) -> "OAuth2Token":
        """Build from an azure-identity AccessToken style expiry (Unix seconds or datetime)."""
        if isinstance(expires_on, datetime):
            expires_at = expires_on
        else:
            expires_at = datetime.fromtimestamp(expires_on, UTC)
        return cls(
            access_token=access_token,
            token_type="Bearer",
            expires_at=expires_at,
            scope=scope,
        )

    def is_expired(self, buffer_seconds: int = 300) -> bool:
        """
        Check if token is expired or close to expiry.

        Args:
            buffer_seconds: Safety buffer before actual expiry (default: 5 minutes)

        Returns:
            True if token should be refreshed
        """
        return datetime.now(UTC) >= self.expires_at - timedelta(seconds=buffer_seconds)

    @property
    def remaining_lifetime(self) -> timedelta:
        """Get remaining time before token expires."""
        return self.expires_at - datetime.now(UTC)


__all__ = ["OAuth2Token"]
