"""Token models for the OAuth2 authorization-code grant.

Contains the normalized access token parsed from a token endpoint
response and the request parameter sets sent to that endpoint.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Extra fields some providers use to identify the authorizing user
USER_ID_FIELDS = ("user_id", "uid", "x_user_id")


class AccessToken(BaseModel):
    """Normalized token endpoint response (RFC 6749 Section 5.1).

    Immutable once constructed. ``raw_fields`` keeps every key/value pair
    the provider returned, including nonstandard extras.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str
    token_type: str | None = None
    expires_in: int | None = None  # Seconds until expiry
    refresh_token: str | None = None
    scope: str | None = None
    user_id: str | None = None

    expires_at: float | None = None  # Unix timestamp, computed at parse time
    raw_fields: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("raw_fields", mode="after")
    @classmethod
    def freeze_raw_fields(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(v))

    @classmethod
    def from_fields(cls, fields: dict[str, Any]) -> AccessToken:
        """Build an access token from decoded response fields.

        Raises:
            pydantic.ValidationError: If a known field has an invalid value
        """
        expires_in = fields.get("expires_in")
        if expires_in in ("", None):
            expires_in = None

        user_id = next(
            (str(fields[name]) for name in USER_ID_FIELDS if fields.get(name)),
            None,
        )

        token = cls(
            access_token=fields["access_token"],
            token_type=_as_text(fields.get("token_type")),
            expires_in=expires_in,
            refresh_token=_as_text(fields.get("refresh_token")),
            scope=_as_text(fields.get("scope")),
            user_id=user_id,
            raw_fields=dict(fields),
        )

        if token.expires_in is not None:
            return token.model_copy(
                update={"expires_at": time.time() + token.expires_in}
            )
        return token

    def is_expired(self, buffer_seconds: float = 30.0) -> bool:
        """Check if the token expired, treating the last seconds as expired.

        Tokens without an expiry never expire.
        """
        if self.expires_at is None:
            return False
        return time.time() >= (self.expires_at - buffer_seconds)


def _as_text(value: Any) -> str | None:
    """Coerce an optional JSON value to text; scope lists are space-joined."""
    if value is None or value == "":
        return None
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value) or None
    return str(value)


@dataclass(frozen=True)
class TokenRequest:
    """Authorization code exchange parameters (RFC 6749 Section 4.1.3)."""

    token_endpoint: str
    code: str
    redirect_uri: str
    client_id: str
    client_secret: str

    grant_type: str = "authorization_code"

    def to_form_data(self) -> dict[str, str]:
        """Convert to form data for application/x-www-form-urlencoded request."""
        return {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": self.code,
            "grant_type": self.grant_type,
            "redirect_uri": self.redirect_uri,
        }


@dataclass(frozen=True)
class RefreshTokenRequest:
    """Refresh token request parameters (RFC 6749 Section 6)."""

    token_endpoint: str
    refresh_token: str
    client_id: str
    client_secret: str

    grant_type: str = "refresh_token"

    def to_form_data(self) -> dict[str, str]:
        return {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": self.refresh_token,
            "grant_type": self.grant_type,
        }
