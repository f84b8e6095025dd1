"""
Translation between grid sort model and analytical sort items.

The grid sorts by column ids, the query engine sorts by sort items:

* ``{"colId": "a_2211", "sort": "asc"}`` sorts by a row attribute and maps to
  an attribute sort item;
* ``{"colId": "a_2009_1-a_2071_1-m_0", "sort": "asc"}`` sorts by one measure
  column and maps to a measure sort item located by the column attribute
  elements and the measure.
"""

from __future__ import annotations

from typing import Any

from ..errors import SortResolutionError
from ..execution import (
    AttributeHeader,
    AttributeLocatorItem,
    AttributeSortItem,
    Execution,
    ExecutionObject,
    MeasureLocatorItem,
    MeasureSortItem,
    SortDirection,
    SortItem,
)
from .fields import (
    ATTRIBUTE_PREFIX,
    ID_SEPARATOR,
    MEASURE_PREFIX,
    encode_fields,
    get_ids_from_uri,
    get_parsed_fields,
)

__all__ = [
    "SortModelItem",
    "get_sort_item_by_col_id",
    "get_sorts_from_model",
    "get_sort_model_from_sort_items",
    "is_sorted_by_first_attribute",
]


class SortModelItem(ExecutionObject):
    """Sort state of one grid column."""

    col_id: str
    sort: SortDirection


def _object_id(uri: str) -> str:
    object_id, _ = get_ids_from_uri(uri)
    return object_id


def get_sort_item_by_col_id(
    execution: Execution,
    col_id: str,
    direction: SortDirection | str,
    original_sorts: list[SortItem] | None = None,
) -> SortItem:
    """
    Create the sort item for sorting by a grid column.

    Args:
        execution: Execution the grid was built from
        col_id: Column id of the sorted column
        direction: Sort direction
        original_sorts: Sort items of the current result spec, an attribute
            sort aggregation is preserved from them

    Returns:
        AttributeSortItem for row attribute columns, MeasureSortItem for
        measure columns

    Raises:
        SortResolutionError: If the column id does not match the execution
    """
    fields = get_parsed_fields(col_id)
    last_field = fields[-1]
    field_type = last_field[0]

    if field_type == ATTRIBUTE_PREFIX and len(fields) == 1 and len(last_field) == 2:
        return _attribute_sort_item(
            execution, col_id, last_field[1], direction, original_sorts or []
        )

    if field_type == MEASURE_PREFIX and len(last_field) == 2:
        return _measure_sort_item(execution, col_id, fields, direction)

    raise SortResolutionError(f"Unable to find sort item by field '{col_id}'", col_id=col_id)


def _attribute_sort_item(
    execution: Execution,
    col_id: str,
    display_form_id: str,
    direction: SortDirection | str,
    original_sorts: list[SortItem],
) -> AttributeSortItem:
    for header in execution.row_attribute_headers:
        if _object_id(header.uri) != display_form_id:
            continue

        attribute_identifier = header.local_identifier
        aggregation = None
        for sort_item in original_sorts:
            if (
                isinstance(sort_item, AttributeSortItem)
                and sort_item.attribute_identifier == attribute_identifier
            ):
                aggregation = sort_item.aggregation
                break

        return AttributeSortItem(
            attribute_identifier=attribute_identifier,
            direction=direction,
            aggregation=aggregation,
        )

    raise SortResolutionError(
        f"Could not find attribute header matching '{col_id}'", col_id=col_id
    )


def _measure_sort_item(
    execution: Execution,
    col_id: str,
    fields: list[list[str]],
    direction: SortDirection | str,
) -> MeasureSortItem:
    measure_group = execution.measure_group_header
    measure_token = fields[-1][1]

    if measure_group is None or not measure_token.isdigit():
        raise SortResolutionError(
            f"Could not find measure header matching '{col_id}'", col_id=col_id
        )

    measure_index = int(measure_token)
    if measure_index >= len(measure_group.items):
        raise SortResolutionError(
            f"Could not find measure header matching '{col_id}'", col_id=col_id
        )

    measure = measure_group.items[measure_index]
    locators = [
        _attribute_locator(execution.column_attribute_headers, field, col_id)
        for field in fields[:-1]
    ]

    return MeasureSortItem(
        direction=direction,
        locators=[
            *locators,
            MeasureLocatorItem(measure_identifier=measure.local_identifier),
        ],
    )


def _attribute_locator(
    headers: list[AttributeHeader], field: list[str], col_id: str
) -> AttributeLocatorItem:
    if len(field) != 3 or field[0] != ATTRIBUTE_PREFIX:
        raise SortResolutionError(
            f"Invalid attribute field '{ID_SEPARATOR.join(field)}'", col_id=col_id
        )

    _, attribute_id, element_id = field
    for header in headers:
        if _object_id(header.form_of.uri) == attribute_id:
            return AttributeLocatorItem(
                attribute_identifier=header.local_identifier,
                element=f"{header.form_of.uri}/elements?id={element_id}",
            )

    raise SortResolutionError(
        f"Could not find matching attribute header to field "
        f"'{ID_SEPARATOR.join(field)}'",
        col_id=col_id,
    )


def get_sorts_from_model(
    sort_model: list[SortModelItem | dict[str, Any]],
    execution: Execution,
    original_sorts: list[SortItem] | None = None,
) -> list[SortItem]:
    """
    Translate the grid sort model to sort items.

    The order of the sort model is kept, the grid decides the priority of
    multi-column sorting.

    Raises:
        SortResolutionError: If any of the columns can not be resolved
    """
    sort_items = []
    for entry in sort_model:
        entry = SortModelItem.model_validate(entry)
        sort_items.append(
            get_sort_item_by_col_id(execution, entry.col_id, entry.sort, original_sorts)
        )
    return sort_items


def get_sort_model_from_sort_items(
    sort_items: list[SortItem], execution: Execution
) -> list[SortModelItem]:
    """
    Translate sort items back to the grid sort model.

    Raises:
        SortResolutionError: If a sort item references an attribute, element
            or measure which is not part of the execution
    """
    return [
        SortModelItem(col_id=_col_id_for_sort_item(item, execution), sort=item.direction)
        for item in sort_items
    ]


def _col_id_for_sort_item(sort_item: SortItem, execution: Execution) -> str:
    if isinstance(sort_item, AttributeSortItem):
        for header in execution.row_attribute_headers:
            if header.local_identifier == sort_item.attribute_identifier:
                return encode_fields([[ATTRIBUTE_PREFIX, _object_id(header.uri)]])
        raise SortResolutionError(
            f"Attribute '{sort_item.attribute_identifier}' is not a row attribute"
        )

    fields = []
    for locator in sort_item.locators:
        if isinstance(locator, AttributeLocatorItem):
            header = _column_attribute_header(execution, locator.attribute_identifier)
            _, element_id = get_ids_from_uri(locator.element)
            if element_id is None:
                raise SortResolutionError(
                    f"Locator element '{locator.element}' is not an element uri"
                )
            fields.append([ATTRIBUTE_PREFIX, _object_id(header.form_of.uri), element_id])
        else:
            fields.append([MEASURE_PREFIX, str(_measure_index(execution, locator))])

    return encode_fields(fields)


def _column_attribute_header(execution: Execution, local_identifier: str) -> AttributeHeader:
    for header in execution.column_attribute_headers:
        if header.local_identifier == local_identifier:
            return header
    raise SortResolutionError(f"Attribute '{local_identifier}' is not a column attribute")


def _measure_index(execution: Execution, locator: MeasureLocatorItem) -> int:
    measure_group = execution.measure_group_header
    items = measure_group.items if measure_group else []
    for index, measure in enumerate(items):
        if measure.local_identifier == locator.measure_identifier:
            return index
    raise SortResolutionError(f"Measure '{locator.measure_identifier}' is not in the result")


def is_sorted_by_first_attribute(sort_items: list[SortItem], execution: Execution) -> bool:
    """
    Check whether the result is sorted by its first row attribute.

    Without sort items the engine sorts by the row attributes. With sort
    items the first of them decides.
    """
    row_headers = execution.row_attribute_headers
    if not row_headers:
        return False

    if not sort_items:
        return True

    first_sort = sort_items[0]
    return (
        isinstance(first_sort, AttributeSortItem)
        and first_sort.attribute_identifier == row_headers[0].local_identifier
    )
