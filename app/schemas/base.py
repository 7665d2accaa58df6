from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exposing snake_case attributes as camelCase JSON keys."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class StrictCamelModel(CamelModel):
    """CamelModel that rejects unknown fields (used for PATCH bodies)."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"
