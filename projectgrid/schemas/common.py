"""Shared schema base: camelCase JSON on the wire, snake_case in Python."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for request/response bodies (accepts both camelCase and field names)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str


class ErrorResponse(CamelModel):
    """Body of every error response."""

    error: str = Field(..., description="Machine-readable error code")
    kind: str = Field(..., description="validation | conflict | auth | not_found | delivery | internal")
    message: str
    details: dict = Field(default_factory=dict)
