"""Tests for provider, flow and token models."""

import time

import pytest
from pydantic import ValidationError

from socialauth.oauth2.models.flow import (
    AuthorizationRequest,
    AuthorizationResponse,
    normalize_scope,
)
from socialauth.oauth2.models.provider import Consumer, ProviderConfig
from socialauth.oauth2.models.tokens import AccessToken


class TestProviderConfig:
    def test_defaults(self):
        # Act
        provider = ProviderConfig(
            name="example",
            authorize_uri="https://auth.example.com/authorize",
            token_uri="https://auth.example.com/token",
            redirect_uri="https://myapp.com/callback",
        )

        # Assert
        assert provider.token_http_method == "POST"
        assert provider.scope_delimiter == ","
        assert provider.stateless is False
        assert provider.token_response_format == "form"

    def test_http_method_is_normalized(self):
        provider = ProviderConfig(
            name="example",
            authorize_uri="https://auth.example.com/authorize",
            token_uri="https://auth.example.com/token",
            redirect_uri="https://myapp.com/callback",
            token_http_method="get",
        )

        assert provider.token_http_method == "GET"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"token_http_method": "PUT"},
            {"token_uri": ""},
            {"name": ""},
            {"token_response_format": "xml"},
        ],
    )
    def test_invalid_config_rejected(self, overrides):
        fields = {
            "name": "example",
            "authorize_uri": "https://auth.example.com/authorize",
            "token_uri": "https://auth.example.com/token",
            "redirect_uri": "https://myapp.com/callback",
        }
        fields.update(overrides)

        with pytest.raises(ValidationError):
            ProviderConfig(**fields)


class TestConsumer:
    def test_consumer_is_immutable(self):
        consumer = Consumer(key="client-123", secret="secret-456")

        with pytest.raises(ValidationError):
            consumer.key = "other"

    def test_secret_hidden_from_repr(self):
        consumer = Consumer(key="client-123", secret="secret-456")

        assert "secret-456" not in repr(consumer)


class TestAuthorizationRequest:
    def test_minimal_query_params(self):
        request = AuthorizationRequest(
            authorization_endpoint="https://auth.example.com/authorize",
            client_id="client-123",
            redirect_uri="https://myapp.com/callback",
        )

        assert request.to_query_params() == {
            "client_id": "client-123",
            "redirect_uri": "https://myapp.com/callback",
            "response_type": "code",
        }

    def test_normalize_scope(self):
        assert normalize_scope(None) == ()
        assert normalize_scope([]) == ()
        assert normalize_scope("email") == ("email",)
        assert normalize_scope(["b", "a", "b"]) == ("b", "a")


class TestAuthorizationResponse:
    def test_callback_url_takes_first_value(self):
        params = AuthorizationResponse.params_from_callback_url(
            "https://myapp.com/callback?code=abc&code=def&state=xyz&empty="
        )
        response = AuthorizationResponse.from_params(params)

        assert params == {"code": "abc", "state": "xyz", "empty": ""}
        assert response.code == "abc"
        assert response.state == "xyz"
        assert not response.is_error()

    def test_access_denied(self):
        response = AuthorizationResponse.from_params(
            {"error": "access_denied", "error_description": "User denied access"}
        )

        assert response.is_error()
        assert response.is_access_denied()
        assert response.code is None


class TestAccessToken:
    def test_token_without_expiry_never_expires(self):
        token = AccessToken.from_fields({"access_token": "abc"})

        assert token.expires_at is None
        assert not token.is_expired()

    def test_expiry_is_computed_from_expires_in(self):
        token = AccessToken.from_fields({"access_token": "abc", "expires_in": "60"})

        assert token.expires_at == pytest.approx(time.time() + 60, abs=5)
        assert not token.is_expired()
        assert token.is_expired(buffer_seconds=120)

    def test_user_id_from_uid_field(self):
        token = AccessToken.from_fields({"access_token": "abc", "uid": 7})

        assert token.user_id == "7"
        assert token.raw_fields["uid"] == 7

    def test_token_is_immutable(self):
        token = AccessToken.from_fields({"access_token": "abc"})

        with pytest.raises(ValidationError):
            token.access_token = "other"

    def test_raw_fields_cannot_be_modified(self):
        token = AccessToken.from_fields(
            {"access_token": "abc123", "token_type": "bearer"}
        )

        with pytest.raises(TypeError):
            token.raw_fields["access_token"] = "forged"
        with pytest.raises(TypeError):
            del token.raw_fields["token_type"]

        assert token.raw_fields["access_token"] == "abc123"
        assert token.access_token == "abc123"

    def test_raw_fields_detached_from_source(self):
        fields = {"access_token": "abc123"}
        token = AccessToken.from_fields(fields)

        fields["access_token"] = "forged"

        assert token.raw_fields["access_token"] == "abc123"

    def test_default_raw_fields_are_read_only(self):
        token = AccessToken(access_token="abc")

        with pytest.raises(TypeError):
            token.raw_fields["extra"] = "value"

    def test_list_scope_is_space_joined(self):
        token = AccessToken.from_fields(
            {"access_token": "abc", "scope": ["email", "profile"], "token_type": 1}
        )

        assert token.scope == "email profile"
        assert token.token_type == "1"
        assert token.raw_fields["scope"] == ["email", "profile"]
