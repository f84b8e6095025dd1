"""
Row grouping of the grid.

Adjacent rows with the same leading attribute value may be merged into one
visual group. The merge is only sound when the result is sorted by the first
row attribute, the decision is made by :func:`next_grouping_state` on every
data update and on every change of the grouping preference.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable, Sequence
from enum import Enum

from ..execution import AttributeHeaderItem, MappingHeader, TotalHeaderItem
from ..logging import get_logger
from .adapter import RowRecord

__all__ = [
    "GroupingState",
    "next_grouping_state",
    "GroupingProvider",
    "DefaultGroupingProvider",
    "AttributeGroupingProvider",
    "GroupingProviderFactory",
    "RowGroupingEngine",
]


class GroupingState(str, Enum):
    GROUPED = "grouped"
    UNGROUPED = "ungrouped"


def next_grouping_state(group_rows: bool, sorted_by_first_attribute: bool) -> GroupingState:
    """Grouping state for the current grouping preference and sort order."""
    if group_rows and sorted_by_first_attribute:
        return GroupingState.GROUPED
    return GroupingState.UNGROUPED


class GroupingProvider(ABC):
    """Answers grouping questions about the rows seen so far."""

    @abstractmethod
    def reset(self) -> None:
        """Forget all processed rows."""

    @abstractmethod
    def process_page(
        self, rows: Sequence[RowRecord], row_offset: int, column_ids: Sequence[str]
    ) -> None:
        """Add a page of rows starting at absolute index `row_offset`.
        `column_ids` are the row attribute columns, leading column first."""

    @abstractmethod
    def is_column_with_grouping(self, col_id: str) -> bool:
        ...

    @abstractmethod
    def is_repeated_value(self, col_id: str, row_index: int) -> bool:
        ...

    @abstractmethod
    def is_group_boundary(self, row_index: int) -> bool:
        ...

    @abstractmethod
    def get_row_spans(self) -> dict[int, int]:
        """Row span table of the leading column, first row index to run
        length."""


class DefaultGroupingProvider(GroupingProvider):
    """Provider of an ungrouped grid: no value repeats, no row spans."""

    def reset(self) -> None:
        pass

    def process_page(self, rows, row_offset, column_ids) -> None:
        pass

    def is_column_with_grouping(self, col_id: str) -> bool:
        return False

    def is_repeated_value(self, col_id: str, row_index: int) -> bool:
        return False

    def is_group_boundary(self, row_index: int) -> bool:
        return False

    def get_row_spans(self) -> dict[int, int]:
        return {}


def _item_key(item: MappingHeader | None) -> Hashable | None:
    if isinstance(item, AttributeHeaderItem):
        return ("item", item.uri)
    if isinstance(item, TotalHeaderItem):
        return ("total", item.type)
    return None


class AttributeGroupingProvider(GroupingProvider):
    """
    Provider of a grid grouped by row attribute values.

    A value is repeated when it is equal to the value of the previous row in
    the same column and the value to its left is repeated as well, so an
    inner attribute never merges across a change of an outer attribute.
    Values are compared by element uri, subtotal rows by total type.
    """

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self._column_ids: list[str] = []
        self._keys: dict[int, list[Hashable | None]] = {}
        self._repetitions: dict[int, list[bool]] = {}

    def process_page(
        self, rows: Sequence[RowRecord], row_offset: int, column_ids: Sequence[str]
    ) -> None:
        column_ids = list(column_ids)
        if column_ids != self._column_ids:
            self._keys = {}
            self._column_ids = column_ids

        for index, row in enumerate(rows, start=row_offset):
            self._keys[index] = [
                _item_key(row.header_item_map.get(col_id)) for col_id in column_ids
            ]

        self._update_repetitions()

    def _update_repetitions(self) -> None:
        self._repetitions = {}
        for index in sorted(self._keys):
            keys = self._keys[index]
            previous = self._keys.get(index - 1)
            repeated: list[bool] = []
            for position, key in enumerate(keys):
                repeated.append(
                    previous is not None
                    and key is not None
                    and key == previous[position]
                    and (position == 0 or repeated[position - 1])
                )
            self._repetitions[index] = repeated

    def is_column_with_grouping(self, col_id: str) -> bool:
        return col_id in self._column_ids

    def is_repeated_value(self, col_id: str, row_index: int) -> bool:
        if col_id not in self._column_ids or row_index not in self._repetitions:
            return False
        return self._repetitions[row_index][self._column_ids.index(col_id)]

    def is_group_boundary(self, row_index: int) -> bool:
        repeated = self._repetitions.get(row_index)
        return bool(repeated) and not repeated[0]

    def get_row_spans(self) -> dict[int, int]:
        spans: dict[int, int] = {}
        if not self._column_ids:
            return spans

        start = None
        for index in sorted(self._repetitions):
            if start is not None and self._repetitions[index][0]:
                spans[start] += 1
            else:
                start = index
                spans[start] = 1
        return spans


class GroupingProviderFactory:
    @staticmethod
    def create_provider(group_rows: bool) -> GroupingProvider:
        if group_rows:
            return AttributeGroupingProvider()
        return DefaultGroupingProvider()


class RowGroupingEngine:
    """
    Keeps the grouping state and the provider of the current rows.

    Every update creates a new provider, so the spans of a previous state are
    never carried over. Rows are never reordered.
    """

    def __init__(self, group_rows: bool = True):
        self.group_rows = group_rows
        self.state = GroupingState.UNGROUPED
        self.provider: GroupingProvider = DefaultGroupingProvider()
        self.logger = get_logger()

    def update(
        self,
        rows: Sequence[RowRecord],
        column_ids: Sequence[str],
        sorted_by_first_attribute: bool,
        group_rows: bool | None = None,
        row_offset: int = 0,
    ) -> GroupingState:
        """
        Re-evaluate the grouping state and process `rows`.

        Args:
            rows: Rows of the grid in display order
            column_ids: Row attribute column ids, leading column first
            sorted_by_first_attribute: Whether the result is sorted by the
                first row attribute
            group_rows: New grouping preference, the current one when None
            row_offset: Absolute index of the first row

        Returns:
            The new GroupingState
        """
        if group_rows is not None:
            self.group_rows = group_rows

        state = next_grouping_state(self.group_rows, sorted_by_first_attribute)
        if state != self.state:
            self.logger.debug(f"Row grouping changed from {self.state.value} to {state.value}")
        self.state = state

        self.provider = GroupingProviderFactory.create_provider(
            state == GroupingState.GROUPED
        )
        self.provider.process_page(rows, row_offset, column_ids)

        return state

    def add_page(self, rows: Sequence[RowRecord], row_offset: int, column_ids: Sequence[str]) -> None:
        """Process another page of rows in the current state."""
        self.provider.process_page(rows, row_offset, column_ids)

    @property
    def row_spans(self) -> dict[int, int]:
        return self.provider.get_row_spans()
