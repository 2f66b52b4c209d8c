"""
Shared API schema building blocks.
"""
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema serialized with camelCase keys; accepts either casing on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PartialUpdate(CamelModel):
    """
    Update body where omitted fields are left unchanged.

    An explicit null clears the fields listed in ``nullable_fields`` and is
    ignored for the rest.
    """

    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    def changes(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in self.nullable_fields
        }


class MessageResponse(CamelModel):
    """Plain acknowledgement."""
    message: str
