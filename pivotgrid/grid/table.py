"""
Pivot table state of one grid.

:class:`PivotTable` sequences a render cycle: the adapter builds the column
tree and the rows, then sorting, grouping and drilling read that snapshot.
"""

from __future__ import annotations

from typing import Any

from ..config import PivotOptions
from ..errors import ArgumentError, NoSuchAttributeError, SortResolutionError
from ..execution import Execution, SortItem
from ..logging import create_logger
from .adapter import (
    ColumnNode,
    GridModel,
    RowRecord,
    execution_to_grid_adapter,
    get_column_by_col_id,
)
from .drilling import DrillEvent, build_drill_event
from .grouping import GroupingState, RowGroupingEngine
from .sorting import (
    SortModelItem,
    get_sort_model_from_sort_items,
    get_sorts_from_model,
    is_sorted_by_first_attribute,
)

__all__ = ["PivotTable"]


class PivotTable:
    """
    Grid state built from the latest execution.

    Updates are identified by a generation number. The host asks for a
    generation with :meth:`begin_update` before fetching data and passes it
    to :meth:`set_execution`; data of a superseded generation is discarded.
    """

    def __init__(self, options: PivotOptions | None = None):
        self.options = options or PivotOptions()
        self.logger = create_logger(self.options.log_path, self.options.log_level)

        self.generation = 0
        self.execution: Execution | None = None
        self.grid = GridModel()
        # sorts of the displayed result, and sorts requested by the grid
        # which apply once their result arrives
        self.sort_items: list[SortItem] = []
        self.pending_sort_items: list[SortItem] | None = None
        self.grouping = RowGroupingEngine(self.options.group_rows)

    def begin_update(self) -> int:
        """Start a data update and return its generation."""
        self.generation += 1
        return self.generation

    def set_execution(self, execution: Execution, generation: int | None = None) -> bool:
        """
        Build the grid of `execution` and replace the current one.

        Args:
            execution: Execution with a result
            generation: Generation returned by :meth:`begin_update`, the
                latest one when None

        Returns:
            False when the update was superseded and discarded, True otherwise

        Raises:
            ArgumentError: If the execution has no result
        """
        if generation is not None and generation != self.generation:
            self.logger.debug(
                f"Discarding data of update {generation}, "
                f"update {self.generation} is the latest"
            )
            return False

        if execution.execution_result is None:
            raise ArgumentError("Execution has no result to display")

        grid = execution_to_grid_adapter(
            execution.execution_response, execution.execution_result
        )
        sort_items = list(execution.execution_request.result_spec.sorts)

        self.execution = execution
        self.grid = grid
        self.sort_items = sort_items
        self.pending_sort_items = None
        self._regroup()

        return True

    def sort_changed(self, sort_model: list[SortModelItem | dict[str, Any]]) -> list[SortItem]:
        """
        Translate a new grid sort model to sort items.

        The returned sort items are to be sent to the analytics engine and
        are kept as pending. The displayed rows keep their order until the
        sorted result is set with :meth:`set_execution`, so the grouping is
        not changed here. The table state is left unchanged when the sort
        model can not be resolved.

        Raises:
            ArgumentError: If there is no execution yet
            SortResolutionError: If a column of the sort model is unknown
        """
        execution = self._current_execution()
        original_sorts = self.pending_sort_items
        if original_sorts is None:
            original_sorts = self.sort_items

        try:
            sort_items = get_sorts_from_model(sort_model, execution, original_sorts)
        except SortResolutionError as e:
            self.logger.warning(f"Sort change ignored: {e}")
            raise

        self.pending_sort_items = sort_items
        return sort_items

    def set_group_rows(self, group_rows: bool) -> GroupingState:
        """Change the grouping preference and re-evaluate the grouping."""
        self.options = self.options.model_copy(update={"group_rows": group_rows})
        self.grouping.group_rows = group_rows
        return self._regroup()

    def drill(self, col_id: str, row_index: int) -> DrillEvent:
        """
        Drill event of the cell in column `col_id` and row `row_index`.

        Raises:
            NoSuchAttributeError: If the column is not a leaf column of the grid
            ArgumentError: If the row does not exist
        """
        execution = self._current_execution()

        column = get_column_by_col_id(self.grid.column_defs, col_id)
        if column is None or not column.is_leaf:
            raise NoSuchAttributeError(
                f"Column '{col_id}' is not a grid column", context={"col_id": col_id}
            )

        if not 0 <= row_index < len(self.grid.row_data):
            raise ArgumentError(
                f"Row {row_index} does not exist", context={"row_index": row_index}
            )

        return build_drill_event(
            execution,
            self.grid.column_defs,
            column,
            self.grid.row_data[row_index],
            row_index,
        )

    @property
    def column_defs(self) -> list[ColumnNode]:
        return self.grid.column_defs

    @property
    def row_data(self) -> list[RowRecord]:
        return self.grid.row_data

    @property
    def grouping_state(self) -> GroupingState:
        return self.grouping.state

    @property
    def row_spans(self) -> dict[int, int]:
        return self.grouping.row_spans

    @property
    def sort_model(self) -> list[SortModelItem]:
        """Grid sort model of the current sort items."""
        if self.execution is None:
            return []
        return get_sort_model_from_sort_items(self.sort_items, self.execution)

    def _current_execution(self) -> Execution:
        if self.execution is None:
            raise ArgumentError("Pivot table has no data yet")
        return self.execution

    def _regroup(self) -> GroupingState:
        if self.execution is None:
            return self.grouping.state

        # spans are keyed by the index in row_data, not by the result paging
        return self.grouping.update(
            self.grid.row_data,
            [column.col_id for column in self.grid.row_attribute_columns],
            is_sorted_by_first_attribute(self.sort_items, self.execution),
        )
