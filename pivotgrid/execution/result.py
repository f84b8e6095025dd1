"""
Execution response, execution result and the execution bundle.

The response describes the shape of the result: which attributes and
measures are placed in the row dimension (index 0) and in the column
dimension (index 1). The result holds the value matrix and, for every
dimension and header level, the header items aligned with the matrix.
"""

from __future__ import annotations

from numbers import Number
from typing import Any

from pydantic import Field, field_validator

from ..errors import ArgumentError
from .afm import ExecutionRequest
from .base import ExecutionObject, unwrap_variant
from .headers import (
    RESPONSE_HEADER_VARIANTS,
    RESULT_HEADER_ITEM_VARIANTS,
    AttributeHeader,
    MeasureGroupHeader,
    ResponseHeader,
    ResultHeaderItem,
)

__all__ = [
    "ROW_DIMENSION_INDEX",
    "COLUMN_DIMENSION_INDEX",
    "ResultDimension",
    "ExecutionResponse",
    "Paging",
    "ExecutionResult",
    "Execution",
]

ROW_DIMENSION_INDEX = 0
COLUMN_DIMENSION_INDEX = 1


class ResultDimension(ExecutionObject):
    headers: list[ResponseHeader] = Field(default_factory=list)

    @field_validator("headers", mode="before")
    @classmethod
    def unwrap_headers(cls, v: Any) -> list[Any]:
        return [unwrap_variant(header, RESPONSE_HEADER_VARIANTS) for header in v or []]

    @property
    def attribute_headers(self) -> list[AttributeHeader]:
        return [h for h in self.headers if isinstance(h, AttributeHeader)]

    @property
    def measure_group_header(self) -> MeasureGroupHeader | None:
        for header in self.headers:
            if isinstance(header, MeasureGroupHeader):
                return header
        return None


class ExecutionResponse(ExecutionObject):
    """Shape of an execution result."""

    dimensions: list[ResultDimension] = Field(default_factory=list)
    links: dict[str, str] = Field(default_factory=dict)

    def dimension(self, index: int) -> ResultDimension:
        """Get dimension by index, an empty dimension when the response has
        less dimensions."""
        if index < 0:
            raise ArgumentError(f"Invalid dimension index {index}")
        if index < len(self.dimensions):
            return self.dimensions[index]
        return ResultDimension()


class Paging(ExecutionObject):
    count: list[int] = Field(default_factory=list)
    offset: list[int] = Field(default_factory=list)
    total: list[int] = Field(default_factory=list)


def _value_to_str(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, Number) and not isinstance(value, bool):
        return str(value)
    raise ValueError(f"Invalid result value {value!r}")


class ExecutionResult(ExecutionObject):
    """Value matrix of an execution and header items aligned with it."""

    data: list[list[str | None]] = Field(default_factory=list)
    header_items: list[list[list[ResultHeaderItem]]] = Field(default_factory=list)
    paging: Paging | None = None

    @field_validator("data", mode="before")
    @classmethod
    def normalize_data(cls, v: Any) -> list[list[str | None]]:
        """Read numbers as strings and a single-dimension vector as one row."""
        if not v:
            return []
        if not all(isinstance(row, list | tuple) for row in v):
            v = [v]
        return [[_value_to_str(value) for value in row] for row in v]

    @field_validator("header_items", mode="before")
    @classmethod
    def unwrap_header_items(cls, v: Any) -> list[Any]:
        return [
            [
                [unwrap_variant(item, RESULT_HEADER_ITEM_VARIANTS) for item in level]
                for level in dimension
            ]
            for dimension in v or []
        ]

    def dimension_header_items(self, index: int) -> list[list[ResultHeaderItem]]:
        """Header items of one dimension, empty when the result has none."""
        if 0 <= index < len(self.header_items):
            return self.header_items[index]
        return []

    @property
    def row_offset(self) -> int:
        """Offset of the first row of this result page."""
        if self.paging and self.paging.offset:
            return self.paging.offset[0]
        return 0


class Execution(ExecutionObject):
    """Query definition together with the response and result of running it."""

    execution_request: ExecutionRequest = Field(default_factory=ExecutionRequest)
    execution_response: ExecutionResponse
    execution_result: ExecutionResult | None = None

    @property
    def afm(self):
        return self.execution_request.afm

    @property
    def row_attribute_headers(self) -> list[AttributeHeader]:
        return self.execution_response.dimension(ROW_DIMENSION_INDEX).attribute_headers

    @property
    def column_attribute_headers(self) -> list[AttributeHeader]:
        return self.execution_response.dimension(
            COLUMN_DIMENSION_INDEX
        ).attribute_headers

    @property
    def measure_group_header(self) -> MeasureGroupHeader | None:
        return self.execution_response.dimension(
            COLUMN_DIMENSION_INDEX
        ).measure_group_header
