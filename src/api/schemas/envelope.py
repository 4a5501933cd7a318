"""Response envelope schemas.

Every response body produced by the API has the same shape: a ``meta``
block with correlation and timing data, plus either a ``response`` payload
(success outcomes) or an ``exception`` list (error outcomes). The two
variants are separate models, so an envelope can never carry both keys or
neither.

Field names on the wire contain dashes, so the models use aliases and must
be dumped with ``by_alias=True``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EnvelopeMeta(BaseModel):
    """Correlation, source and timing metadata attached to every response."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    trans_id: str | None = Field(
        default=None,
        alias="x-trans-id",
        description="Transaction id echoed from the x-trans-id header",
        examples=["4f1c2e7a-9d8b-4c1e-8a77-0b3f5d6e7a21"],
    )

    trans_parent_id: str | None = Field(
        default=None,
        alias="x-trans-parent-id",
        description="Parent transaction id echoed from the x-trans-parent-id header",
        examples=["a0b1c2d3-e4f5-4a6b-8c7d-9e0f1a2b3c4d"],
    )

    language: str = Field(
        ...,
        alias="x-request-or-lang",
        description="Requested language, 'en' when the header is absent",
        examples=["en", "fr"],
    )

    source: str = Field(
        ...,
        description="Component that produced the response",
        examples=["users", "billing"],
    )

    response_time: float = Field(
        ...,
        alias="response-time",
        ge=0,
        description="Milliseconds between pipeline entry and response",
        examples=[3.417],
    )


class SuccessEnvelope(BaseModel):
    """Envelope for success outcomes."""

    model_config = ConfigDict(frozen=True)

    meta: EnvelopeMeta
    response: Any = Field(
        default=None,
        description="Success payload, may be null",
    )


class ErrorEnvelope(BaseModel):
    """Envelope for error outcomes."""

    model_config = ConfigDict(frozen=True)

    meta: EnvelopeMeta
    exception: list[str] = Field(
        ...,
        min_length=1,
        description="Ordered error messages, never empty",
        examples=[["Missing required parameter: email"]],
    )


type Envelope = SuccessEnvelope | ErrorEnvelope
