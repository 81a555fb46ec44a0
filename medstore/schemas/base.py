from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer
from pydantic.alias_generators import to_camel

# Currency amounts stay Decimal in Python and are emitted as JSON numbers.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Response models serialized with camelCase keys for the admin dashboard."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
