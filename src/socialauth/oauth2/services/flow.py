"""OAuth2 authorization-code flow state machine.

Coordinates a single authorization attempt: building the authorization
URL with its anti-forgery state, validating the provider callback, and
exchanging the code for an access token.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from socialauth.oauth2.models.errors import (
    UnauthorizedError,
    UnknownAuthorizationError,
    UnknownStateError,
)
from socialauth.oauth2.models.flow import (
    AuthorizationRequest,
    AuthorizationResponse,
    normalize_scope,
)
from socialauth.oauth2.models.provider import Consumer, ProviderConfig
from socialauth.oauth2.models.tokens import AccessToken
from socialauth.oauth2.primitives.http import HttpExecutor
from socialauth.oauth2.primitives.session import SessionStore
from socialauth.oauth2.services.security import generate_state, validate_state
from socialauth.oauth2.services.tokens import OAuth2TokenManager

logger = logging.getLogger(__name__)

STATE_SESSION_KEY = "oauth2_state"


class AuthorizationCodeFlow:
    """Client side of the OAuth2 authorization code grant for one provider.

    Handles:
    - Authorization URL construction with state (CSRF protection)
    - Callback validation in a fixed order
    - Code and refresh token exchange at the token endpoint

    The state token is stored in the session scoped by the provider name
    and is consumed by the first callback that reads it.
    """

    def __init__(
        self,
        provider: ProviderConfig,
        consumer: Consumer,
        session: SessionStore,
        http_executor: HttpExecutor,
    ):
        self.provider = provider
        self.consumer = consumer
        self.session = session
        self._token_manager = OAuth2TokenManager(provider, consumer, http_executor)

    @property
    def name(self) -> str:
        return self.provider.name

    def build_authorization_url(
        self,
        extra_parameters: Mapping[str, str] | None = None,
        scope: Iterable[str] | None = None,
        stateless: bool | None = None,
    ) -> str:
        """Build the URL the user should be redirected to.

        Args:
            extra_parameters: Provider-specific query parameters
                (e.g. ``display``, ``access_type``)
            scope: Ordered scope entries, joined with the provider delimiter
            stateless: Skip state generation; defaults to the provider setting

        Returns:
            Authorization URL with a form-encoded query string
        """
        state = None
        if not self._is_stateless(stateless):
            state = generate_state()
            self.session.set(STATE_SESSION_KEY, state, self.name)

        auth_request = AuthorizationRequest(
            authorization_endpoint=self.provider.authorize_uri,
            client_id=self.consumer.key,
            redirect_uri=self.provider.redirect_uri,
            state=state,
            scope=normalize_scope(scope),
            scope_delimiter=self.provider.scope_delimiter,
            extra_parameters=dict(extra_parameters or {}),
        )

        logger.debug(
            f"Built authorization URL for {self.name} "
            f"(client {self.consumer.key}, stateless={state is None})"
        )
        return auth_request.build_authorization_url()

    async def complete_authorization(
        self,
        callback_params: Mapping[str, str],
        stateless: bool | None = None,
    ) -> AccessToken:
        """Validate the provider callback and exchange its code.

        Checks run in a fixed order: stored state present, consent not
        denied, state present, state matches, code present.

        Args:
            callback_params: Query parameters received on the redirect URI
            stateless: Skip state validation; defaults to the provider setting

        Raises:
            UnknownAuthorizationError: No state stored for this flow
            UnauthorizedError: Consent denied or code missing
            UnknownStateError: Callback without state
            InvalidStateError: Callback state doesn't match
        """
        is_stateless = self._is_stateless(stateless)

        stored_state = None
        if not is_stateless:
            stored_state = self._consume_state()
            if not stored_state:
                raise UnknownAuthorizationError()

        auth_response = AuthorizationResponse.from_params(callback_params)

        if auth_response.is_error():
            see_also = (
                f" (see {auth_response.error_uri})" if auth_response.error_uri else ""
            )
            logger.warning(
                f"Authorization callback for {self.name} returned "
                f"{auth_response.error}: "
                f"{auth_response.error_description or 'no description'}{see_also}"
            )

        if auth_response.is_access_denied():
            raise UnauthorizedError()

        if not is_stateless:
            if auth_response.state is None:
                raise UnknownStateError()
            validate_state(stored_state, auth_response.state)

        if not auth_response.code:
            raise UnauthorizedError("Unknown code")

        return await self.exchange_code_for_token(auth_response.code)

    async def complete_authorization_from_url(
        self, callback_url: str, stateless: bool | None = None
    ) -> AccessToken:
        """Same as complete_authorization, reading parameters from a URL."""
        params = AuthorizationResponse.params_from_callback_url(callback_url)
        return await self.complete_authorization(params, stateless=stateless)

    async def exchange_code_for_token(self, code: str) -> AccessToken:
        return await self._token_manager.exchange_code_for_token(code)

    async def refresh_access_token(self, refresh_token: str) -> AccessToken:
        return await self._token_manager.refresh_access_token(refresh_token)

    def parse_token_response(self, body: str | None) -> AccessToken:
        return self._token_manager.parse_token_response(body)

    def _consume_state(self) -> str | None:
        state = self.session.get(STATE_SESSION_KEY, self.name)
        if state:
            # Single use: a replayed callback finds nothing stored
            self.session.set(STATE_SESSION_KEY, "", self.name)
        return state

    def _is_stateless(self, stateless: bool | None) -> bool:
        if stateless is None:
            return self.provider.stateless
        return stateless
