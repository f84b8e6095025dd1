"""
Header metadata of an execution.

Every grid cell and column is described by an ordered list of mapping
headers: attribute headers, attribute values, measures and totals.
"""

from __future__ import annotations

from typing import Any, ClassVar, Union

from pydantic import Field, field_validator

from .base import ExecutionObject, VariantObject, unwrap_variant

__all__ = [
    "AttributeForm",
    "AttributeHeader",
    "AttributeHeaderItem",
    "MeasureHeaderItem",
    "TotalHeaderItem",
    "MeasureGroupHeader",
    "MappingHeader",
    "ResponseHeader",
    "ResultHeaderItem",
    "MAPPING_HEADER_VARIANTS",
    "RESPONSE_HEADER_VARIANTS",
    "RESULT_HEADER_ITEM_VARIANTS",
    "mapping_header_from_dict",
]


class AttributeForm(ExecutionObject):
    """The attribute a display form belongs to."""

    uri: str = Field(..., description="Attribute object uri")
    identifier: str = Field("", description="Attribute object identifier")
    name: str = Field("", description="Attribute title")


class AttributeHeader(VariantObject):
    """Attribute (display form) placed in a result dimension."""

    kind: ClassVar[str] = "attributeHeader"

    local_identifier: str = Field(..., description="Local identifier from the AFM")
    identifier: str = Field("", description="Display form identifier")
    uri: str = Field(..., description="Display form uri")
    name: str = Field("", description="Display form title")
    form_of: AttributeForm

    @property
    def display_form_uri(self) -> str:
        return self.uri

    @property
    def attribute_uri(self) -> str:
        return self.form_of.uri


class AttributeHeaderItem(VariantObject):
    """One value (element) of an attribute."""

    kind: ClassVar[str] = "attributeHeaderItem"

    uri: str = Field(..., examples=["/gdc/md/project/obj/2210/elements?id=6340109"])
    name: str = Field("", examples=["Alabama"])


class MeasureHeaderItem(VariantObject):
    """
    A measure of the result.

    Measure group headers of the execution response carry the full measure
    description. Result header items carry just `name` and `order`, the
    position of the measure in the measure group.
    """

    kind: ClassVar[str] = "measureHeaderItem"

    local_identifier: str = ""
    name: str = ""
    format: str = ""
    uri: str | None = None
    identifier: str | None = None
    order: int | None = Field(None, ge=0)


class TotalHeaderItem(VariantObject):
    """Total (subtotal) row or column marker."""

    kind: ClassVar[str] = "totalHeaderItem"

    name: str = ""
    type: str = Field(..., examples=["sum", "avg", "max"])


class MeasureGroupHeader(VariantObject):
    """All measures of a dimension, in their result order."""

    kind: ClassVar[str] = "measureGroupHeader"

    items: list[MeasureHeaderItem] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def unwrap_items(cls, v: Any) -> list[Any]:
        return [unwrap_variant(item, (MeasureHeaderItem,)) for item in v or []]


MappingHeader = Union[AttributeHeader, AttributeHeaderItem, MeasureHeaderItem, TotalHeaderItem]
ResponseHeader = Union[AttributeHeader, MeasureGroupHeader]
ResultHeaderItem = Union[AttributeHeaderItem, MeasureHeaderItem, TotalHeaderItem]

MAPPING_HEADER_VARIANTS = (
    AttributeHeader,
    AttributeHeaderItem,
    MeasureHeaderItem,
    TotalHeaderItem,
)
RESPONSE_HEADER_VARIANTS = (AttributeHeader, MeasureGroupHeader)
RESULT_HEADER_ITEM_VARIANTS = (AttributeHeaderItem, MeasureHeaderItem, TotalHeaderItem)


def mapping_header_from_dict(value: Any) -> MappingHeader:
    """Create a mapping header from its wrapped wire form, for example
    ``{"measureHeaderItem": {"localIdentifier": "m1", "name": "Amount"}}``."""
    return unwrap_variant(value, MAPPING_HEADER_VARIANTS)
