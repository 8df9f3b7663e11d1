"""Attribute schema data model."""

from typing import Optional

from pydantic import Field, field_validator

from littag.models.literature import CamelModel


class AttributeValue(CamelModel):
    """A predefined value of an attribute schema.

    ``id`` stays ``None`` on drafts; the schema repository assigns it
    the first time the schema is saved.
    """

    id: Optional[str] = None
    value: str = Field(min_length=1)


class AttributeSchema(CamelModel):
    """A user-defined tag category."""

    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    predefined_values: Optional[list[AttributeValue]] = None
    allow_free_text: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name is required")
        return v

    @field_validator("predefined_values")
    @classmethod
    def validate_unique_value_ids(
        cls, v: Optional[list[AttributeValue]]
    ) -> Optional[list[AttributeValue]]:
        if v is None:
            return v
        ids = [item.id for item in v if item.id is not None]
        if len(ids) != len(set(ids)):
            raise ValueError("predefined value ids must be unique")
        return v

    def allows(self, value: str) -> bool:
        """Whether *value* may be applied under this schema."""
        if self.allow_free_text:
            return True
        return any(item.value == value for item in self.predefined_values or [])


class AttributeSchemaSummary(CamelModel):
    """Lightweight projection returned by repository listings."""

    id: str
    name: str
