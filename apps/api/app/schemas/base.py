"""Shared schema configuration."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire models use camelCase names and also accept snake_case input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
