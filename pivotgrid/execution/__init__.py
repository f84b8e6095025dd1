"""
Execution data models.

Pydantic models of the data exchanged with the analytics engine: the query
definition (AFM and result specification), the execution response with its
header metadata and the execution result with the value matrix.
"""

from .afm import (
    Afm,
    ArithmeticMeasureDefinition,
    AttributeDefinition,
    AttributeLocatorItem,
    AttributeSortItem,
    ExecutionRequest,
    Locator,
    Measure,
    MeasureLocatorItem,
    MeasureSortItem,
    ObjQualifier,
    PopMeasureDefinition,
    PreviousPeriodMeasureDefinition,
    ResultSpec,
    ResultSpecDimension,
    SimpleMeasureDefinition,
    SortDirection,
    SortItem,
    Total,
    sort_item_from_dict,
)
from .base import ExecutionObject, VariantObject
from .headers import (
    AttributeForm,
    AttributeHeader,
    AttributeHeaderItem,
    MappingHeader,
    MeasureGroupHeader,
    MeasureHeaderItem,
    ResponseHeader,
    ResultHeaderItem,
    TotalHeaderItem,
    mapping_header_from_dict,
)
from .result import (
    COLUMN_DIMENSION_INDEX,
    ROW_DIMENSION_INDEX,
    Execution,
    ExecutionResponse,
    ExecutionResult,
    Paging,
    ResultDimension,
)

__all__ = [
    "Afm",
    "ArithmeticMeasureDefinition",
    "AttributeDefinition",
    "AttributeForm",
    "AttributeHeader",
    "AttributeHeaderItem",
    "AttributeLocatorItem",
    "AttributeSortItem",
    "COLUMN_DIMENSION_INDEX",
    "Execution",
    "ExecutionObject",
    "ExecutionRequest",
    "ExecutionResponse",
    "ExecutionResult",
    "Locator",
    "MappingHeader",
    "Measure",
    "MeasureGroupHeader",
    "MeasureHeaderItem",
    "MeasureLocatorItem",
    "MeasureSortItem",
    "ObjQualifier",
    "Paging",
    "PopMeasureDefinition",
    "PreviousPeriodMeasureDefinition",
    "ROW_DIMENSION_INDEX",
    "ResponseHeader",
    "ResultDimension",
    "ResultHeaderItem",
    "ResultSpec",
    "ResultSpecDimension",
    "SimpleMeasureDefinition",
    "SortDirection",
    "SortItem",
    "Total",
    "TotalHeaderItem",
    "VariantObject",
    "mapping_header_from_dict",
    "sort_item_from_dict",
]
