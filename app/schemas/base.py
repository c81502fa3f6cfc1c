"""
Base schema for payloads that follow the exchange provider's camelCase
wire format while staying snake_case in Python.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
