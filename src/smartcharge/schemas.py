"""Shared pydantic base for camelCase JSON bodies, and id/counter bounds."""

from __future__ import annotations

from typing import Annotated

from fastapi import Path
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Ids and balances live in 32-bit INTEGER columns
MAX_DB_INT = 2**31 - 1

DbId = Annotated[int, Field(ge=1, le=MAX_DB_INT)]
DbCount = Annotated[int, Field(ge=0, le=MAX_DB_INT)]
PathId = Annotated[int, Path(ge=1, le=MAX_DB_INT)]


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case input; serializes as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorBody(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Envelope returned for every failed request."""

    success: bool = False
    error: ErrorBody
