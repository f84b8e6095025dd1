"""
Drill intersection resolution.

A drill event describes the clicked cell by its intersection: the ordered
list of attributes, attribute values and measures the cell belongs to,
outermost context first.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from ..errors import ArgumentError, NoSuchAttributeError
from ..execution import (
    Afm,
    AttributeHeader,
    AttributeHeaderItem,
    Execution,
    ExecutionObject,
    MappingHeader,
    MeasureHeaderItem,
    TotalHeaderItem,
)
from .adapter import ColumnNode, ColumnType, RowRecord, get_drill_row_data
from .fields import get_ids_from_uri
from .tree import get_tree_leaves

__all__ = [
    "DrillHeader",
    "DrillIntersectionEntry",
    "DrillEvent",
    "get_drill_intersection",
    "get_cell_drill_items",
    "build_drill_event",
]


class DrillHeader(ExecutionObject):
    uri: str = ""
    identifier: str = ""


class DrillIntersectionEntry(ExecutionObject):
    """What a cell is, one entry per mapping header. `header` is None for
    measures without a backing metadata object."""

    id: str
    title: str
    header: DrillHeader | None = None


class DrillEvent(ExecutionObject):
    column_index: int
    row_index: int
    row: list[Any] = Field(default_factory=list)
    intersection: list[DrillIntersectionEntry] = Field(default_factory=list)


def get_drill_intersection(
    drill_items: list[MappingHeader], afm: Afm
) -> list[DrillIntersectionEntry]:
    """
    Describe drill items as intersection entries.

    Entries keep the order of `drill_items`; repeated headers give repeated
    entries.

    Args:
        drill_items: Mapping headers of a cell, outermost first
        afm: Query definition used to resolve the objects backing measures

    Returns:
        List of DrillIntersectionEntry
    """
    return [_intersection_entry(item, afm) for item in drill_items]


def _intersection_entry(item: MappingHeader, afm: Afm) -> DrillIntersectionEntry:
    if isinstance(item, AttributeHeaderItem):
        _, element_id = get_ids_from_uri(item.uri, sanitize=False)
        return DrillIntersectionEntry(
            id=element_id or "",
            title=item.name,
            header=DrillHeader(uri=item.uri, identifier=""),
        )

    if isinstance(item, AttributeHeader):
        return DrillIntersectionEntry(
            id=item.identifier,
            title=item.name,
            header=DrillHeader(uri=item.uri, identifier=item.identifier),
        )

    if isinstance(item, MeasureHeaderItem):
        uri, identifier = _measure_object(item, afm)
        header = DrillHeader(uri=uri, identifier=identifier) if uri or identifier else None
        return DrillIntersectionEntry(
            id=item.local_identifier, title=item.name, header=header
        )

    if isinstance(item, TotalHeaderItem):
        return DrillIntersectionEntry(id=item.type, title=item.name)

    raise ArgumentError(f"Unknown drill item type: {item!r}")


def _measure_object(item: MeasureHeaderItem, afm: Afm) -> tuple[str, str]:
    """Uri and identifier of the object backing a measure. The AFM
    definition wins over the header, derived measures resolve to their
    master measure."""
    qualifier = afm.master_measure_qualifier(item.local_identifier)
    if qualifier is not None:
        return (qualifier.uri or item.uri or "", qualifier.identifier or item.identifier or "")
    return item.uri or "", item.identifier or ""


def get_cell_drill_items(
    column: ColumnNode, row: RowRecord, column_defs: list[ColumnNode]
) -> list[MappingHeader]:
    """
    Drill items of one grid cell, outermost first.

    A row attribute cell is described by its attribute header and the row
    value. Other cells are described by all row attribute values with their
    headers, followed by the drill items of the column.
    """
    if column.type == ColumnType.ROW_ATTRIBUTE_COLUMN:
        item = row.header_item_map.get(column.col_id)
        return [*column.drill_items, *([item] if item is not None else [])]

    row_items: list[MappingHeader] = []
    for row_column in column_defs:
        if row_column.type != ColumnType.ROW_ATTRIBUTE_COLUMN:
            continue
        item = row.header_item_map.get(row_column.col_id)
        if item is not None:
            row_items.append(item)
            row_items.extend(row_column.drill_items)

    return [*row_items, *column.drill_items]


def build_drill_event(
    execution: Execution,
    column_defs: list[ColumnNode],
    column: ColumnNode,
    row: RowRecord,
    row_index: int,
) -> DrillEvent:
    """
    Create the drill event of a clicked cell.

    Raises:
        NoSuchAttributeError: If the column is not a leaf of `column_defs`
    """
    leaf_columns = get_tree_leaves(column_defs)
    for column_index, leaf in enumerate(leaf_columns):
        if leaf is column or leaf.col_id == column.col_id:
            break
    else:
        raise NoSuchAttributeError(f"Column '{column.col_id}' is not a grid column")

    drill_items = get_cell_drill_items(column, row, column_defs)
    return DrillEvent(
        column_index=column_index,
        row_index=row_index,
        row=get_drill_row_data(leaf_columns, row),
        intersection=get_drill_intersection(drill_items, execution.afm),
    )
