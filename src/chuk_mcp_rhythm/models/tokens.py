"""
Token model - the stream the tokenizer hands to the tree builder.

Tokens form a closed union discriminated by `kind`:
- string / int / float / duration: atomic, exactly one typed payload
- container: an identifier plus a nested ordered token sequence

Streams can be validated from plain data (YAML/JSON) with TOKEN_STREAM.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, PlainSerializer, PlainValidator, TypeAdapter

from chuk_mcp_rhythm.core.duration import Duration

# Duration as a token payload: parsed from plain data, serialized as "n/d"
DurationValue = Annotated[Duration, PlainValidator(Duration.parse), PlainSerializer(str)]


class TokenBase(BaseModel):
    """Fields shared by every token."""

    identifier: str = Field(..., description="Tag selecting the handler for this token")

    model_config = {"frozen": True}


class TokenString(TokenBase):
    kind: Literal["string"] = "string"
    value: str


class TokenInt(TokenBase):
    """An integer payload, optionally carrying its 1-based indentation level."""

    kind: Literal["int"] = "int"
    value: int
    indentation_level: int | None = Field(None, ge=1, description="1-based nesting level")


class TokenFloat(TokenBase):
    kind: Literal["float"] = "float"
    value: float


class TokenDuration(TokenBase):
    """A duration payload, accepted as '3/16', 4, or [3, 16]."""

    kind: Literal["duration"] = "duration"
    value: DurationValue


class TokenContainer(TokenBase):
    """A composite token: performer declarations, pitch groups, dynamics, ..."""

    kind: Literal["container"] = "container"
    opening_value: str | None = Field(None, description="Value opening a declaration")
    tokens: list[Token] = Field(default_factory=list)


Token = Annotated[
    TokenString | TokenInt | TokenFloat | TokenDuration | TokenContainer,
    Field(discriminator="kind"),
]

TokenContainer.model_rebuild()

TOKEN_STREAM = TypeAdapter(list[Token])
