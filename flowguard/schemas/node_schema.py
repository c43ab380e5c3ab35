"""Pydantic schemas for the node type catalog.

Each node type (``webhook``, ``http``, ``conditional``, ...) declares the
configuration fields its form exposes, with per-field constraints. The
validation engine reads these descriptors; it never writes them.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field, model_validator

from flowguard.schemas.base import BaseSchema


class FieldType(str, Enum):
    """Field input types used by node configuration forms."""

    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    SELECT = "select"
    MULTISELECT = "multiselect"
    BOOLEAN = "boolean"
    JSON = "json"
    EXPRESSION = "expression"
    CREDENTIAL = "credential"
    CODE = "code"


class FieldValidation(BaseSchema):
    """Declared constraints for one field."""

    # Patterns are matched verbatim, surrounding whitespace included.
    model_config = ConfigDict(str_strip_whitespace=False)

    pattern: str | None = Field(
        default=None,
        description="Regular expression string values must match",
    )
    min: float | None = Field(default=None, description="Minimum numeric value")
    max: float | None = Field(default=None, description="Maximum numeric value")
    min_length: int | None = Field(
        default=None,
        ge=0,
        alias="minLength",
        description="Minimum string length",
    )
    max_length: int | None = Field(
        default=None,
        ge=0,
        alias="maxLength",
        description="Maximum string length",
    )


class FieldSchema(BaseSchema):
    """Descriptor of one configuration field of a node type."""

    name: str = Field(..., min_length=1, description="Key in the node data mapping")
    label: str = Field(..., description="Human-readable field label")
    type: str = Field(
        default=FieldType.TEXT.value,
        description="Field type; unknown types only get generic checks",
    )
    required: bool = Field(default=False)
    default_value: Any = Field(default=None, alias="defaultValue")
    placeholder: str | None = None
    description: str | None = None
    validation: FieldValidation | None = None

    @property
    def has_default(self) -> bool:
        """Whether the descriptor declares a default, even a null one."""
        return "default_value" in self.model_fields_set


class NodeTypeSchema(BaseSchema):
    """Schema of one node type, looked up by the node's ``nodeType``."""

    type: str = Field(..., min_length=1, description="nodeType discriminator")
    label: str = Field(..., description="Display name of the node type")
    category: str = Field(..., description="trigger, action, control or ai")
    description: str = ""
    fields: list[FieldSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_field_names(self) -> NodeTypeSchema:
        names = [f.name for f in self.fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate field names in '{self.type}': {duplicates}")
        return self

    def get_field(self, name: str) -> FieldSchema | None:
        return next((f for f in self.fields if f.name == name), None)


__all__ = [
    "FieldSchema",
    "FieldType",
    "FieldValidation",
    "NodeTypeSchema",
]
