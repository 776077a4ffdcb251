"""High-level OAuth2 client built on the authorization code flow.

Runs URL construction, user authorization and callback completion in a
single call and keeps the resulting token fresh.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Protocol

from socialauth.oauth2.models.errors import AuthorizationError, OAuth2Error
from socialauth.oauth2.models.tokens import AccessToken
from socialauth.oauth2.services.flow import AuthorizationCodeFlow

logger = logging.getLogger(__name__)


class AuthorizationHandler(Protocol):
    """Protocol for handling user authorization step.

    Allows different strategies for browser interaction:
    - Manual (return URL to developer)
    - Browser automation (open browser + local server)
    - Custom UI integration
    """

    async def handle_authorization(self, auth_url: str) -> str:
        """Handle user authorization and return callback URL.

        Args:
            auth_url: Authorization URL for user to visit

        Returns:
            Callback URL received after user authorization
        """
        ...


class ManualAuthorizationHandler:
    """Authorization handler that requires manual user interaction.

    Hands the authorization URL to a callback and waits for it to return
    the callback URL. Suitable for CLI tools and custom integrations.
    """

    def __init__(
        self, callback_handler: Callable[[str], Awaitable[str]] | None = None
    ):
        self.callback_handler = callback_handler

    async def handle_authorization(self, auth_url: str) -> str:
        if self.callback_handler:
            return await self.callback_handler(auth_url)
        raise AuthorizationError(
            f"No callback handler configured. Please visit {auth_url} "
            "and provide the callback URL"
        )


class AuthenticatedSession:
    """Access token for one provider plus its refresh lifecycle."""

    def __init__(self, flow: AuthorizationCodeFlow, token: AccessToken):
        self.token = token
        self._flow = flow

    @property
    def access_token(self) -> str:
        return self.token.access_token

    @property
    def is_valid(self) -> bool:
        return not self.token.is_expired()

    async def refresh_if_needed(self) -> bool:
        """Refresh access token if needed and possible.

        Returns:
            True if token was refreshed or is still valid, False if refresh failed
        """
        if self.is_valid:
            return True

        if not self.token.refresh_token:
            logger.warning("Token expired and cannot be refreshed")
            return False

        try:
            new_token = await self._flow.refresh_access_token(
                self.token.refresh_token
            )
        except OAuth2Error as e:
            logger.error(f"Token refresh failed: {e}")
            return False

        # Providers may omit the refresh token when it stays the same
        if new_token.refresh_token is None:
            new_token = new_token.model_copy(
                update={"refresh_token": self.token.refresh_token}
            )

        self.token = new_token
        logger.info(f"Successfully refreshed access token for {self._flow.name}")
        return True


class OAuth2Client:
    """Drives a complete authorization code flow for one provider."""

    def __init__(
        self,
        flow: AuthorizationCodeFlow,
        authorization_handler: AuthorizationHandler | None = None,
    ):
        self.flow = flow
        self.authorization_handler = (
            authorization_handler or ManualAuthorizationHandler()
        )

    async def authenticate(
        self,
        scope: Iterable[str] | None = None,
        extra_parameters: Mapping[str, str] | None = None,
    ) -> AuthenticatedSession:
        """Authorize the user and exchange the resulting code.

        Raises:
            OAuth2Error: If any step of the flow fails
        """
        logger.info(f"Starting OAuth2 authorization with {self.flow.name}")

        auth_url = self.flow.build_authorization_url(
            extra_parameters=extra_parameters, scope=scope
        )

        logger.debug("Handling user authorization")
        callback_url = await self.authorization_handler.handle_authorization(auth_url)

        logger.debug("Processing authorization callback")
        token = await self.flow.complete_authorization_from_url(callback_url)

        logger.info(f"Successfully authenticated with {self.flow.name}")
        return AuthenticatedSession(self.flow, token)
