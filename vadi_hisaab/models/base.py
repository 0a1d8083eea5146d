"""
Wire Base Model

Everything exchanged with the persistence service derives from WireModel:
snake_case in Python, camelCase in JSON, numbers as JSON numbers.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


# Serialized as a JSON number (not a string) in mode="json"
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]
Quantity = Money


class WireModel(BaseModel):
    """Base for everything exchanged with the persistence service."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_wire(self) -> dict:
        """JSON-ready dict with camelCase names and no empty optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
