"""Base Pydantic schemas with common patterns.

This module defines the base schema shared by the graph model, the node
type catalog and the validation result types.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration for all schemas.

    Configures Pydantic v2 settings for consistent behavior across all schemas.
    Editor payloads use camelCase keys, so every aliased field can be
    populated by alias or by its Python name.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )


class FrozenSchema(BaseSchema):
    """Immutable schema for value objects such as validation issues."""

    model_config = ConfigDict(frozen=True)


__all__ = [
    "BaseSchema",
    "FrozenSchema",
]
