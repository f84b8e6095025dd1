"""
Execution to grid adapter.

Turns an execution response and result into the column tree and the row
records consumed by a data grid:

* row attribute columns come first, one leaf column per attribute of the
  row dimension;
* the column dimension header items are folded into a tree of attribute
  value columns ending with measure columns;
* every result row becomes a :class:`RowRecord` mapping row attribute
  columns to their header items and measure columns to values.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field

from ..errors import ArgumentError
from ..execution import (
    COLUMN_DIMENSION_INDEX,
    ROW_DIMENSION_INDEX,
    AttributeHeader,
    AttributeHeaderItem,
    ExecutionObject,
    ExecutionResponse,
    ExecutionResult,
    MappingHeader,
    MeasureGroupHeader,
    MeasureHeaderItem,
    ResultHeaderItem,
    TotalHeaderItem,
)
from ..logging import get_logger
from .fields import (
    ID_SEPARATOR,
    get_ids_from_uri,
    identify_header,
    identify_response_header,
    join_fields,
)
from .tree import get_tree_leaves, index_of_tree_node

__all__ = [
    "ColumnType",
    "ColumnNode",
    "RowRecord",
    "GridModel",
    "execution_to_grid_adapter",
    "get_row_node_id",
    "get_drill_row_data",
    "get_column_by_col_id",
]


class ColumnType(str, Enum):
    ROW_ATTRIBUTE_COLUMN = "ROW_ATTRIBUTE_COLUMN"
    COLUMN_ATTRIBUTE_COLUMN = "COLUMN_ATTRIBUTE_COLUMN"
    MEASURE_COLUMN = "MEASURE_COLUMN"


class ColumnNode(ExecutionObject):
    """
    One column, or column group, of the grid.

    Leaves without children are the rendered columns. Leaves of the column
    dimension know the `column_index` of their values in the result matrix.
    """

    col_id: str
    field: str
    header_name: str = ""
    type: ColumnType
    children: list[ColumnNode] = Field(default_factory=list)
    drill_items: list[MappingHeader] = Field(default_factory=list)
    column_index: int | None = None

    @property
    def is_leaf(self) -> bool:
        return not self.children


class RowRecord(ExecutionObject):
    """One grid row."""

    header_item_map: dict[str, MappingHeader] = Field(default_factory=dict)
    values: dict[str, str | None] = Field(default_factory=dict)

    @property
    def is_subtotal(self) -> bool:
        return any(
            isinstance(item, TotalHeaderItem) for item in self.header_item_map.values()
        )

    def value(self, col_id: str) -> str | None:
        """Displayed value of a column: item name for row attribute
        columns, the result value otherwise."""
        if col_id in self.header_item_map:
            return self.header_item_map[col_id].name
        return self.values.get(col_id)

    def to_dict(self, **options: Any) -> dict[str, Any]:
        """Flat grid row with a ``headerItemMap`` and one key per column."""
        row = {
            "headerItemMap": {
                col_id: item.to_dict(**options)
                for col_id, item in self.header_item_map.items()
            }
        }
        row.update((col_id, item.name) for col_id, item in self.header_item_map.items())
        row.update(self.values)
        return row


class GridModel(ExecutionObject):
    """Snapshot of the grid built from one execution."""

    column_defs: list[ColumnNode] = Field(default_factory=list)
    row_data: list[RowRecord] = Field(default_factory=list)

    @property
    def leaf_columns(self) -> list[ColumnNode]:
        return get_tree_leaves(self.column_defs)

    @property
    def row_attribute_columns(self) -> list[ColumnNode]:
        return [
            column
            for column in self.column_defs
            if column.type == ColumnType.ROW_ATTRIBUTE_COLUMN
        ]


class _ColumnDraft:
    """Mutable column used while folding header items into a tree."""

    def __init__(self, col_id, header_name, type_, drill_items):
        self.col_id = col_id
        self.header_name = header_name
        self.type = type_
        self.drill_items = drill_items
        self.children: dict[str, _ColumnDraft] = {}
        self.column_index: int | None = None

    def build(self) -> ColumnNode:
        return ColumnNode(
            col_id=self.col_id,
            field=self.col_id,
            header_name=self.header_name,
            type=self.type,
            children=[child.build() for child in self.children.values()],
            drill_items=self.drill_items,
            column_index=self.column_index,
        )


def execution_to_grid_adapter(
    execution_response: ExecutionResponse, execution_result: ExecutionResult
) -> GridModel:
    """
    Build grid columns and rows from an execution.

    The adapter is a pure transformation. When the result matrix does not
    match the header items, the affected cells are None.

    Args:
        execution_response: Shape of the result with the response headers
        execution_result: Value matrix and header items

    Returns:
        GridModel with the column tree and the row records

    Raises:
        ArgumentError: If measures are placed in the row dimension
    """
    logger = get_logger()

    row_dimension = execution_response.dimension(ROW_DIMENSION_INDEX)
    column_dimension = execution_response.dimension(COLUMN_DIMENSION_INDEX)

    if row_dimension.measure_group_header is not None:
        raise ArgumentError("Measures in the row dimension are not supported")

    row_headers = row_dimension.attribute_headers
    row_columns = [_row_attribute_column(header) for header in row_headers]

    column_tree = _column_tree(
        column_dimension.headers,
        execution_result.dimension_header_items(COLUMN_DIMENSION_INDEX),
    )
    value_columns = [
        column for column in get_tree_leaves(column_tree) if column.column_index is not None
    ]

    row_data = _rows(
        [column.col_id for column in row_columns],
        execution_result.dimension_header_items(ROW_DIMENSION_INDEX),
        execution_result.data,
        value_columns,
    )

    logger.debug(
        f"Adapted execution to {len(row_columns)} row attribute columns, "
        f"{len(value_columns)} value columns and {len(row_data)} rows"
    )

    return GridModel(column_defs=[*row_columns, *column_tree], row_data=row_data)


def _row_attribute_column(header: AttributeHeader) -> ColumnNode:
    col_id = identify_response_header(header)
    return ColumnNode(
        col_id=col_id,
        field=col_id,
        header_name=header.form_of.name,
        type=ColumnType.ROW_ATTRIBUTE_COLUMN,
        drill_items=[header],
    )


def _column_tree(
    headers: list[AttributeHeader | MeasureGroupHeader],
    header_items: list[list[ResultHeaderItem]],
) -> list[ColumnNode]:
    """Fold column header items into a tree, merging columns with the same
    col_id under the same parent."""
    if not header_items:
        return []

    level_count = len(header_items)
    position_count = min(len(level) for level in header_items)
    if position_count != max(len(level) for level in header_items):
        get_logger().debug(
            "Column header levels differ in length, ignoring incomplete columns"
        )

    roots: dict[str, _ColumnDraft] = {}

    for position in range(position_count):
        siblings = roots
        parent: _ColumnDraft | None = None

        for level in range(level_count):
            item = header_items[level][position]
            header = headers[level] if level < len(headers) else None
            col_id = join_fields(parent.col_id if parent else None, identify_header(item))

            draft = siblings.get(col_id)
            if draft is None:
                header_name, type_, own_items = _describe_column_item(item, header)
                drill_items = [*(parent.drill_items if parent else []), *own_items]
                draft = _ColumnDraft(col_id, header_name, type_, drill_items)
                siblings[col_id] = draft

            if level == level_count - 1 and draft.column_index is None:
                draft.column_index = position

            siblings = draft.children
            parent = draft

    return [draft.build() for draft in roots.values()]


def _describe_column_item(
    item: ResultHeaderItem, header: AttributeHeader | MeasureGroupHeader | None
) -> tuple[str, ColumnType, list[MappingHeader]]:
    """Header name, column type and own drill items of a column level."""
    if isinstance(item, AttributeHeaderItem):
        own_items = [item, header] if isinstance(header, AttributeHeader) else [item]
        return item.name, ColumnType.COLUMN_ATTRIBUTE_COLUMN, own_items

    if isinstance(item, MeasureHeaderItem):
        measure = item
        if isinstance(header, MeasureGroupHeader) and item.order is not None:
            if item.order < len(header.items):
                measure = header.items[item.order]
        return measure.name, ColumnType.MEASURE_COLUMN, [measure]

    if isinstance(item, TotalHeaderItem):
        return item.name, ColumnType.COLUMN_ATTRIBUTE_COLUMN, [item]

    raise ArgumentError(f"Unknown header item type: {item!r}")


def _rows(
    row_col_ids: list[str],
    header_items: list[list[ResultHeaderItem]],
    data: list[list[str | None]],
    value_columns: list[ColumnNode],
) -> list[RowRecord]:
    if row_col_ids and header_items:
        row_count = max(len(level) for level in header_items)
    else:
        row_count = len(data)

    if row_count != len(data):
        get_logger().debug(
            f"Result has {len(data)} data rows for {row_count} header rows"
        )

    rows = []
    for row_index in range(row_count):
        header_item_map = {}
        for level, col_id in enumerate(row_col_ids):
            if level < len(header_items) and row_index < len(header_items[level]):
                header_item_map[col_id] = header_items[level][row_index]

        values = {
            column.col_id: _cell_value(data, row_index, column.column_index)
            for column in value_columns
        }
        rows.append(RowRecord(header_item_map=header_item_map, values=values))

    return rows


def _cell_value(data: list[list[str | None]], row_index: int, column_index: int) -> str | None:
    if row_index < len(data) and column_index < len(data[row_index]):
        return data[row_index][column_index]
    return None


def get_row_node_id(row: RowRecord) -> str:
    """Stable row id built from the row attribute elements, for example
    ``a_2211_6340109-a_2209_6340107``."""
    parts = []
    for col_id, item in row.header_item_map.items():
        if isinstance(item, TotalHeaderItem):
            parts.append(f"{col_id}{ID_SEPARATOR}{item.type}")
        else:
            _, element_id = get_ids_from_uri(item.uri)
            parts.append(f"{col_id}{ID_SEPARATOR}{element_id}")
    return join_fields(*parts)


def get_drill_row_data(leaf_columns: list[ColumnNode], row: RowRecord) -> list[Any]:
    """Row values for a drill event: ``{"id", "name"}`` of the element for
    row attribute columns, the cell value for other columns."""
    drill_row = []
    for column in leaf_columns:
        if column.type == ColumnType.ROW_ATTRIBUTE_COLUMN:
            item = row.header_item_map.get(column.col_id)
            if isinstance(item, AttributeHeaderItem):
                _, element_id = get_ids_from_uri(item.uri, sanitize=False)
                drill_row.append({"id": element_id, "name": item.name})
            elif item is not None:
                drill_row.append({"id": getattr(item, "type", None), "name": item.name})
            else:
                drill_row.append(None)
        else:
            drill_row.append(row.values.get(column.col_id))
    return drill_row


def _has_col_id(column: ColumnNode, col_id: str) -> bool:
    return column.col_id == col_id


def get_column_by_col_id(column_defs: list[ColumnNode], col_id: str) -> ColumnNode | None:
    """Find a column anywhere in the column tree."""
    path = index_of_tree_node(col_id, column_defs, _has_col_id)
    if path is None:
        return None

    nodes = column_defs
    column = None
    for index in path:
        column = nodes[index]
        nodes = column.children
    return column
