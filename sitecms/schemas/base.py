"""Shared schema configuration: camelCase on the wire, snake_case in Python."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class ListEnvelope(CamelModel):
    """Paging metadata shared by list responses. ``limit`` is None when unpaged."""

    total: int
    page: int = 1
    limit: int | None = None
