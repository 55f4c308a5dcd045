"""
User and Session Models

WARNING: This is a mock authentication scheme. Credentials are held in
plaintext and compared by equality. Nothing here is a security boundary.
"""

from pydantic import BaseModel, ConfigDict, Field


class PublicUser(BaseModel):
    """A user as exposed to the rest of the app (no credential)."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1, max_length=254)
    name: str = Field(..., min_length=1, max_length=200)


class User(PublicUser):
    """A registered user, including the plaintext credential."""

    password: str = Field(..., min_length=1)

    def to_public(self) -> PublicUser:
        """Strip the credential."""
        return PublicUser(id=self.id, email=self.email, name=self.name)


class SessionPayload(BaseModel):
    """
    Claims carried by a session token.

    exp is a millisecond epoch timestamp. The session is valid only
    while the current time is strictly before it.
    """

    user: PublicUser
    exp: int = Field(..., ge=0, description="Expiry (epoch milliseconds)")

    def is_expired(self, now_ms: int) -> bool:
        return now_ms >= self.exp
