"""Provider and client configuration models.

A provider is described by data, not by subclassing: the flow only needs
its endpoints, the HTTP method for token requests and a couple of
formatting knobs.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Consumer(BaseModel):
    """Registered OAuth2 client identity (client id + secret)."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    secret: str = Field(repr=False)


class ProviderConfig(BaseModel):
    """Provider-supplied endpoints and flow options."""

    model_config = ConfigDict(frozen=True)

    # Scopes session entries so providers sharing one session don't collide
    name: str = Field(min_length=1)

    authorize_uri: str = Field(min_length=1)
    token_uri: str = Field(min_length=1)
    redirect_uri: str = Field(min_length=1)

    token_http_method: Literal["GET", "POST"] = "POST"
    scope_delimiter: str = ","
    stateless: bool = False
    token_response_format: Literal["form", "json"] = "form"

    @field_validator("token_http_method", mode="before")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        if isinstance(v, str):
            return v.upper()
        return v
