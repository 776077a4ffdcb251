"""OAuth2 token exchange and refresh service.

Implements RFC 6749 token endpoint interactions for confidential clients:
authorization code exchange, refresh, and parsing of the provider's
token response.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import parse_qsl

import httpx
from pydantic import ValidationError

from socialauth.oauth2.models.errors import (
    InvalidAccessTokenError,
    InvalidResponseError,
    TokenTransportError,
)
from socialauth.oauth2.models.provider import Consumer, ProviderConfig
from socialauth.oauth2.models.tokens import (
    AccessToken,
    RefreshTokenRequest,
    TokenRequest,
)
from socialauth.oauth2.primitives.http import HttpExecutor, HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


class OAuth2TokenManager:
    """Manages OAuth2 token exchange and refresh operations.

    Handles the token endpoint interactions including:
    - Authorization code to access token exchange (RFC 6749 Section 4.1.3)
    - Access token refresh (RFC 6749 Section 6)
    - Token response parsing (form-encoded by default, JSON per provider)
    """

    def __init__(
        self,
        provider: ProviderConfig,
        consumer: Consumer,
        http_executor: HttpExecutor,
    ):
        self.provider = provider
        self.consumer = consumer
        self._http_executor = http_executor

    async def exchange_code_for_token(self, code: str) -> AccessToken:
        """Exchange authorization code for access token.

        Args:
            code: Authorization code from the callback

        Returns:
            AccessToken: Parsed token response

        Raises:
            TypeError: If code is not a string
            ValueError: If code is empty
            InvalidResponseError: If the token endpoint returned an error status
            InvalidAccessTokenError: If the response body is not a valid token
            TokenTransportError: If the request could not be sent
        """
        if not isinstance(code, str):
            raise TypeError(f"code must be a string, got {type(code).__name__}")
        if not code:
            raise ValueError("code must not be empty")

        token_request = TokenRequest(
            token_endpoint=self.provider.token_uri,
            code=code,
            redirect_uri=self.provider.redirect_uri,
            client_id=self.consumer.key,
            client_secret=self.consumer.secret,
        )

        logger.debug(
            f"Exchanging authorization code at {token_request.token_endpoint} "
            f"for client {token_request.client_id}"
        )

        response = await self._send(
            token_request.token_endpoint, token_request.to_form_data()
        )
        return self._handle_response(response)

    async def refresh_access_token(self, refresh_token: str) -> AccessToken:
        """Refresh an access token using a refresh token.

        Does not touch session state.

        Raises:
            TypeError: If refresh_token is not a string
            InvalidResponseError: If the token endpoint returned an error status
            InvalidAccessTokenError: If the response body is not a valid token
            TokenTransportError: If the request could not be sent
        """
        if not isinstance(refresh_token, str):
            raise TypeError(
                f"refresh_token must be a string, got {type(refresh_token).__name__}"
            )

        refresh_request = RefreshTokenRequest(
            token_endpoint=self.provider.token_uri,
            refresh_token=refresh_token,
            client_id=self.consumer.key,
            client_secret=self.consumer.secret,
        )

        logger.debug(f"Refreshing access token at {refresh_request.token_endpoint}")

        response = await self._send(
            refresh_request.token_endpoint, refresh_request.to_form_data()
        )
        return self._handle_response(response)

    def parse_token_response(self, body: str | None) -> AccessToken:
        """Parse a token endpoint body into an AccessToken.

        Raises:
            InvalidAccessTokenError: If the body is empty, can't be decoded,
                or has no access_token
        """
        if not body:
            raise InvalidAccessTokenError("Provider response with empty body")

        if self.provider.token_response_format == "json":
            fields = self._decode_json(body)
        else:
            fields = dict(parse_qsl(body, keep_blank_values=True))

        if not isinstance(fields, dict) or "access_token" not in fields:
            raise InvalidAccessTokenError(
                "Provider API returned an unexpected response"
            )

        try:
            return AccessToken.from_fields(fields)
        except ValidationError as e:
            raise InvalidAccessTokenError(f"Invalid token response format: {e}") from e

    async def _send(self, url: str, form_data: dict[str, str]) -> HttpResponse:
        request = HttpRequest(
            url=url,
            parameters=form_data,
            method=self.provider.token_http_method,
            headers=FORM_HEADERS,
        )
        try:
            return await self._http_executor.execute(request)
        except httpx.HTTPError as e:
            raise TokenTransportError(f"HTTP error during token request: {e}") from e

    def _handle_response(self, response: HttpResponse) -> AccessToken:
        if not response.is_success:
            logger.warning(f"Token request to {self.provider.name} failed")
            raise InvalidResponseError("API response with error code", response)

        token = self.parse_token_response(response.text)
        logger.info(f"Token exchange with {self.provider.name} successful")
        return token

    @staticmethod
    def _decode_json(body: str) -> Any:
        try:
            return json.loads(body)
        except ValueError as e:
            raise InvalidAccessTokenError(f"Invalid token response format: {e}") from e
