from unittest.mock import AsyncMock, MagicMock

import pytest

from socialauth.oauth2.models.provider import Consumer, ProviderConfig
from socialauth.oauth2.primitives.session import InMemorySessionStore
from socialauth.oauth2.services.flow import AuthorizationCodeFlow


def make_response(body: str = "", success: bool = True) -> MagicMock:
    """Response double exposing the HttpResponse contract."""
    response = MagicMock()
    response.is_success = success
    response.text = body
    return response


@pytest.fixture(name="make_response")
def make_response_fixture():
    return make_response


@pytest.fixture
def provider() -> ProviderConfig:
    return ProviderConfig(
        name="example",
        authorize_uri="https://auth.example.com/authorize",
        token_uri="https://auth.example.com/token",
        redirect_uri="https://myapp.com/callback",
    )


@pytest.fixture
def consumer() -> Consumer:
    return Consumer(key="client-123", secret="secret-456")


@pytest.fixture
def session() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def http_executor() -> AsyncMock:
    executor = AsyncMock()
    executor.execute.return_value = make_response(
        "access_token=access-xyz&token_type=bearer"
    )
    return executor


@pytest.fixture
def flow(provider, consumer, session, http_executor) -> AuthorizationCodeFlow:
    return AuthorizationCodeFlow(provider, consumer, session, http_executor)
