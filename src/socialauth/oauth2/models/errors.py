"""Exception hierarchy for OAuth2 authorization-code errors.

Each failure of an authorization attempt has its own exception type so
callers can tell a declined consent from a forged callback or a broken
token endpoint. None of them are retried internally.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from socialauth.oauth2.primitives.http import HttpResponse


class OAuth2Error(Exception):
    """Base exception for all OAuth2 related errors."""

    pass


class AuthorizationError(OAuth2Error):
    """Raised when the user authorization step fails."""

    pass


class UnknownAuthorizationError(AuthorizationError):
    """Raised when no state was ever stored for this flow.

    Usually means the session was lost or the callback was replayed
    out of band.
    """

    def __init__(self, message: str = "No authorization in progress for this flow"):
        super().__init__(message)


class UnauthorizedError(AuthorizationError):
    """Raised when the user declined consent or the callback carries no code."""

    def __init__(self, message: str = "User denied authorization"):
        super().__init__(message)


class AuthorizationCallbackError(OAuth2Error):
    """Raised when authorization server callback data is malformed or invalid.

    This indicates the authorization server sent an invalid callback,
    not that our callback handling code failed.
    """

    pass


class StateValidationError(AuthorizationCallbackError):
    """Raised when OAuth state parameter validation fails."""

    pass


class UnknownStateError(StateValidationError):
    """Raised when the callback lacks a state parameter."""

    def __init__(self, message: str = "Callback missing required state parameter"):
        super().__init__(message)


class InvalidStateError(StateValidationError):
    """Raised when the callback state does not match the stored one."""

    def __init__(
        self, message: str = "State parameter mismatch - possible CSRF attack"
    ):
        super().__init__(message)


class TokenError(OAuth2Error):
    """Raised when token operations fail."""

    pass


class InvalidAccessTokenError(TokenError):
    """Raised when the token endpoint body is empty or structurally invalid."""

    pass


class InvalidResponseError(TokenError):
    """Raised when the token endpoint answers with a non-success status.

    The raw response is kept on ``response`` for caller diagnostics.
    """

    def __init__(self, message: str, response: HttpResponse):
        super().__init__(message)
        self.response = response


class TokenTransportError(TokenError):
    """Raised when the HTTP executor fails before producing a response."""

    pass
