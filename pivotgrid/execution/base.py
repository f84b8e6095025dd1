"""
Pydantic base classes for execution data models.

The analytics engine speaks camelCase JSON where tagged unions are encoded
as single-key objects, for example ``{"attributeHeader": {...}}``. Models
declared here validate from that form and serialize back to it.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    SerializerFunctionWrapHandler,
    model_serializer,
)
from pydantic.alias_generators import to_camel


class ExecutionObject(BaseModel):
    """
    Base class for all execution data objects.

    Objects are immutable once validated: a built grid snapshot is shared by
    several readers during one render cycle.
    """

    model_config = ConfigDict(
        # Wire format uses camelCase keys
        alias_generator=to_camel,
        # Python code uses snake_case field names
        populate_by_name=True,
        # Unknown wire keys (links, extra metadata) are ignored
        extra="ignore",
        # Use enum values for serialization
        use_enum_values=True,
        frozen=True,
    )

    def to_dict(self, **options: Any) -> dict[str, Any]:
        """
        Convert to the wire dictionary representation.

        Args:
            **options: Additional options passed to Pydantic's model_dump.

        Returns:
            Dictionary with camelCase keys, ``None`` values left out.
        """
        return self.model_dump(by_alias=True, exclude_none=True, **options)


class VariantObject(ExecutionObject):
    """
    A variant of a tagged union.

    On the wire the variant is wrapped in an object with a single key, the
    `kind` of the variant.
    """

    kind: ClassVar[str] = ""

    @model_serializer(mode="wrap")
    def wrap_variant(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        """Serialize to the wrapped wire representation ``{kind: {...}}``,
        also when nested inside other objects."""
        return {self.kind: handler(self)}


def unwrap_variant(value: Any, variants: tuple[type[VariantObject], ...]) -> Any:
    """
    Turn a wrapped wire object into an instance of the matching variant.

    Args:
        value: Variant instance or single-key dictionary ``{kind: payload}``
        variants: Accepted variant classes

    Returns:
        Instance of one of the `variants`

    Raises:
        ValueError: If the value is not one of the accepted variants. Raised
            inside validators it becomes a pydantic ValidationError.
    """
    if isinstance(value, variants):
        return value

    if isinstance(value, dict) and len(value) == 1:
        key, payload = next(iter(value.items()))
        for variant in variants:
            if variant.kind == key:
                return variant.model_validate(payload)

    expected = ", ".join(variant.kind for variant in variants)
    raise ValueError(f"Unknown object {value!r}, expected one of: {expected}")
