"""Authorization flow models for the OAuth2 authorization-code grant.

Contains models for authorization requests and callback handling.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlencode, urlparse


@dataclass(frozen=True)
class AuthorizationRequest:
    """Authorization request parameters (RFC 6749 Section 4.1.1)."""

    authorization_endpoint: str
    client_id: str
    redirect_uri: str
    state: str | None = None
    scope: tuple[str, ...] = ()
    scope_delimiter: str = ","
    extra_parameters: Mapping[str, str] = field(default_factory=dict)

    def to_query_params(self) -> dict[str, str]:
        """Collect the query parameters, starting from the extra ones."""
        params = dict(self.extra_parameters)
        params["client_id"] = self.client_id
        params["redirect_uri"] = self.redirect_uri
        params["response_type"] = "code"

        if self.state is not None:
            params["state"] = self.state
        if self.scope:
            params["scope"] = self.scope_delimiter.join(self.scope)

        return params

    def build_authorization_url(self) -> str:
        """Build the complete authorization URL."""
        return f"{self.authorization_endpoint}?{urlencode(self.to_query_params())}"


def normalize_scope(scope: Iterable[str] | None) -> tuple[str, ...]:
    """Deduplicate scope entries while keeping their first-seen order."""
    if not scope:
        return ()
    if isinstance(scope, str):
        scope = [scope]
    return tuple(dict.fromkeys(scope))


@dataclass(frozen=True)
class AuthorizationResponse:
    """Query parameters received on the OAuth2 redirect URI."""

    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None
    error_uri: str | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> AuthorizationResponse:
        return cls(
            code=params.get("code"),
            state=params.get("state"),
            error=params.get("error"),
            error_description=params.get("error_description"),
            error_uri=params.get("error_uri"),
        )

    @staticmethod
    def params_from_callback_url(callback_url: str) -> dict[str, str]:
        """Extract single-valued query parameters from a callback URL."""
        query_params = parse_qs(urlparse(callback_url).query, keep_blank_values=True)
        return {key: values[0] for key, values in query_params.items() if values}

    def is_access_denied(self) -> bool:
        return self.error == "access_denied"

    def is_error(self) -> bool:
        return self.error is not None
