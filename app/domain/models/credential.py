"""
Credential domain model.

Represents the short-lived eShopaid bearer token together with the
moment it was issued and how long it lives.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass(frozen=True)
class Credential:
    """
    Immutable eShopaid access token.

    A credential is valid while ``now < issued_at + lifetime - refresh_buffer``.
    It is never mutated: a refresh replaces the whole object.

    Attributes:
        token: Opaque token string sent in the AUTHORIZATION header
        issued_at: Moment the token was obtained (timezone-aware)
        lifetime: How long eShopaid honours the token
    """

    token: str = field(repr=False)
    issued_at: datetime
    lifetime: timedelta

    def __post_init__(self) -> None:
        """Validate credential after initialization."""
        if not self.token:
            raise ValueError("Credential token cannot be empty")

        if self.lifetime <= timedelta(0):
            raise ValueError(f"Credential lifetime must be positive: {self.lifetime}")

    @property
    def expires_at(self) -> datetime:
        """Hard expiry of the token."""
        return self.issued_at + self.lifetime

    def refresh_deadline(self, refresh_buffer: timedelta) -> datetime:
        """Moment from which the credential must no longer be handed out."""
        return self.expires_at - refresh_buffer

    def is_valid_at(self, now: datetime, refresh_buffer: timedelta) -> bool:
        """Check validity at ``now`` keeping ``refresh_buffer`` of headroom."""
        return now < self.refresh_deadline(refresh_buffer)
