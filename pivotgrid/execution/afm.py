"""
Query definition (AFM) and result specification models.

The AFM lists the attributes and measures of an execution. The result
specification places them into dimensions and defines the sorting of the
result.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Literal, Union

from pydantic import Field, field_validator, model_validator

from ..errors import NoSuchAttributeError
from .base import ExecutionObject, VariantObject, unwrap_variant

__all__ = [
    "SortDirection",
    "ObjQualifier",
    "AttributeDefinition",
    "SimpleMeasureDefinition",
    "ArithmeticMeasureDefinition",
    "PopMeasureDefinition",
    "PreviousPeriodMeasureDefinition",
    "MeasureDefinition",
    "Measure",
    "Afm",
    "AttributeSortItem",
    "AttributeLocatorItem",
    "MeasureLocatorItem",
    "MeasureSortItem",
    "Locator",
    "SortItem",
    "Total",
    "ResultSpecDimension",
    "ResultSpec",
    "ExecutionRequest",
    "sort_item_from_dict",
]


class SortDirection(str, Enum):
    """Sort directions shared by the grid and the query engine."""

    ASC = "asc"
    DESC = "desc"


class ObjQualifier(ExecutionObject):
    """Reference to a metadata object, either by uri or by identifier."""

    uri: str | None = None
    identifier: str | None = None

    @model_validator(mode="after")
    def validate_reference(self):
        if not self.uri and not self.identifier:
            raise ValueError("Object qualifier requires 'uri' or 'identifier'")
        return self


class AttributeDefinition(ExecutionObject):
    local_identifier: str
    display_form: ObjQualifier
    alias: str | None = None


class SimpleMeasureDefinition(VariantObject):
    """Measure computed from a metric or a fact."""

    kind: ClassVar[str] = "measure"

    item: ObjQualifier
    aggregation: str | None = None
    compute_ratio: bool | None = None
    filters: list[dict[str, Any]] = Field(default_factory=list)


class ArithmeticMeasureDefinition(VariantObject):
    """Measure computed from other measures of the same AFM. It has no
    backing metadata object."""

    kind: ClassVar[str] = "arithmeticMeasure"

    measure_identifiers: list[str] = Field(..., min_length=1)
    operator: str


class PopMeasureDefinition(VariantObject):
    """Same-period-previous-year variant of a master measure."""

    kind: ClassVar[str] = "popMeasure"

    measure_identifier: str
    pop_attribute: ObjQualifier


class PreviousPeriodMeasureDefinition(VariantObject):
    """Previous-period variant of a master measure."""

    kind: ClassVar[str] = "previousPeriodMeasure"

    measure_identifier: str
    date_data_sets: list[dict[str, Any]] = Field(default_factory=list)


MeasureDefinition = Union[
    SimpleMeasureDefinition,
    ArithmeticMeasureDefinition,
    PopMeasureDefinition,
    PreviousPeriodMeasureDefinition,
]

MEASURE_DEFINITION_VARIANTS = (
    SimpleMeasureDefinition,
    ArithmeticMeasureDefinition,
    PopMeasureDefinition,
    PreviousPeriodMeasureDefinition,
)


class Measure(ExecutionObject):
    local_identifier: str
    definition: MeasureDefinition
    alias: str | None = None
    format: str | None = None

    @field_validator("definition", mode="before")
    @classmethod
    def unwrap_definition(cls, v: Any) -> Any:
        return unwrap_variant(v, MEASURE_DEFINITION_VARIANTS)

    @property
    def is_derived(self) -> bool:
        """True for measures derived from a master measure of the AFM."""
        return isinstance(
            self.definition, PopMeasureDefinition | PreviousPeriodMeasureDefinition
        )


class Afm(ExecutionObject):
    """Attributes, measures and filters of an execution."""

    attributes: list[AttributeDefinition] = Field(default_factory=list)
    measures: list[Measure] = Field(default_factory=list)
    filters: list[dict[str, Any]] = Field(default_factory=list)
    native_totals: list[dict[str, Any]] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_identifiers(self):
        """Local identifiers must be unique across attributes and measures."""
        seen = set()
        for obj in [*self.attributes, *self.measures]:
            if obj.local_identifier in seen:
                raise ValueError(
                    f"Duplicate local identifier '{obj.local_identifier}'"
                )
            seen.add(obj.local_identifier)
        return self

    def measure(self, local_identifier: str) -> Measure:
        """Get measure by local identifier."""
        for measure in self.measures:
            if measure.local_identifier == local_identifier:
                return measure
        raise NoSuchAttributeError(
            f"Measure '{local_identifier}' not found in AFM"
        )

    def attribute(self, local_identifier: str) -> AttributeDefinition:
        """Get attribute by local identifier."""
        for attribute in self.attributes:
            if attribute.local_identifier == local_identifier:
                return attribute
        raise NoSuchAttributeError(
            f"Attribute '{local_identifier}' not found in AFM"
        )

    def master_measure_qualifier(self, local_identifier: str) -> ObjQualifier | None:
        """
        Resolve the metadata object backing a measure.

        Derived (PoP, previous period) measures resolve through their master
        measure. Arithmetic measures and unknown measures have no backing
        object.

        Args:
            local_identifier: Local identifier of the measure

        Returns:
            Qualifier of the backing object or None
        """
        seen = set()
        while local_identifier not in seen:
            seen.add(local_identifier)
            try:
                measure = self.measure(local_identifier)
            except NoSuchAttributeError:
                return None

            definition = measure.definition
            if isinstance(definition, SimpleMeasureDefinition):
                return definition.item
            if isinstance(
                definition, PopMeasureDefinition | PreviousPeriodMeasureDefinition
            ):
                local_identifier = definition.measure_identifier
                continue
            return None

        # cyclic derivation
        return None


class AttributeSortItem(VariantObject):
    kind: ClassVar[str] = "attributeSortItem"

    attribute_identifier: str
    direction: SortDirection
    aggregation: Literal["sum"] | None = None


class AttributeLocatorItem(VariantObject):
    kind: ClassVar[str] = "attributeLocatorItem"

    attribute_identifier: str
    element: str


class MeasureLocatorItem(VariantObject):
    kind: ClassVar[str] = "measureLocatorItem"

    measure_identifier: str


Locator = Union[AttributeLocatorItem, MeasureLocatorItem]


class MeasureSortItem(VariantObject):
    """Sort by the values of one measure column, located by the attribute
    elements of the column dimension and the measure."""

    kind: ClassVar[str] = "measureSortItem"

    direction: SortDirection
    locators: list[Locator] = Field(..., min_length=1)

    @field_validator("locators", mode="before")
    @classmethod
    def unwrap_locators(cls, v: Any) -> list[Any]:
        return [
            unwrap_variant(locator, (AttributeLocatorItem, MeasureLocatorItem))
            for locator in v or []
        ]


SortItem = Union[AttributeSortItem, MeasureSortItem]

SORT_ITEM_VARIANTS = (AttributeSortItem, MeasureSortItem)


def sort_item_from_dict(value: Any) -> SortItem:
    """Create a sort item from its wrapped wire form."""
    return unwrap_variant(value, SORT_ITEM_VARIANTS)


class Total(ExecutionObject):
    measure_identifier: str
    type: str
    attribute_identifier: str


class ResultSpecDimension(ExecutionObject):
    item_identifiers: list[str] = Field(default_factory=list)
    totals: list[Total] = Field(default_factory=list)


class ResultSpec(ExecutionObject):
    """Placement of AFM objects into dimensions, and result sorting."""

    dimensions: list[ResultSpecDimension] = Field(default_factory=list)
    sorts: list[SortItem] = Field(default_factory=list)

    @field_validator("sorts", mode="before")
    @classmethod
    def unwrap_sorts(cls, v: Any) -> list[Any]:
        return [sort_item_from_dict(item) for item in v or []]


class ExecutionRequest(ExecutionObject):
    afm: Afm = Field(default_factory=Afm)
    result_spec: ResultSpec = Field(default_factory=ResultSpec)
