import unittest

import pytest

from pivotgrid.execution import AttributeHeaderItem, TotalHeaderItem
from pivotgrid.grid.adapter import RowRecord, execution_to_grid_adapter
from pivotgrid.grid.grouping import (
    AttributeGroupingProvider,
    DefaultGroupingProvider,
    GroupingProviderFactory,
    GroupingState,
    RowGroupingEngine,
    next_grouping_state,
)
from tests.common import create_execution, element_uri

COLUMN_IDS = ["a_2211", "a_2209"]
STATE_SPANS = {0: 1, 1: 3, 4: 3, 7: 2, 9: 4}


def fixture_rows():
    execution = create_execution()
    grid = execution_to_grid_adapter(
        execution.execution_response, execution.execution_result
    )
    return grid.row_data


def row(state, city):
    return RowRecord(
        header_item_map={
            "a_2211": AttributeHeaderItem(uri=element_uri(2210, state), name=str(state)),
            "a_2209": AttributeHeaderItem(uri=element_uri(2208, city), name=str(city)),
        }
    )


@pytest.mark.parametrize(
    "group_rows, sorted_by_first_attribute, expected",
    [
        (True, True, GroupingState.GROUPED),
        (True, False, GroupingState.UNGROUPED),
        (False, True, GroupingState.UNGROUPED),
        (False, False, GroupingState.UNGROUPED),
    ],
)
def test_next_grouping_state(group_rows, sorted_by_first_attribute, expected):
    assert next_grouping_state(group_rows, sorted_by_first_attribute) == expected


def test_factory():
    assert isinstance(GroupingProviderFactory.create_provider(True), AttributeGroupingProvider)
    assert isinstance(GroupingProviderFactory.create_provider(False), DefaultGroupingProvider)


class AttributeGroupingProviderTestCase(unittest.TestCase):
    def setUp(self):
        self.rows = fixture_rows()
        self.provider = AttributeGroupingProvider()
        self.provider.process_page(self.rows, 0, COLUMN_IDS)

    def test_row_spans(self):
        self.assertEqual(STATE_SPANS, self.provider.get_row_spans())

    def test_spans_cover_all_rows(self):
        self.assertEqual(len(self.rows), sum(self.provider.get_row_spans().values()))

    def test_repeated_values(self):
        self.assertFalse(self.provider.is_repeated_value("a_2211", 0))
        self.assertFalse(self.provider.is_repeated_value("a_2211", 1))
        self.assertTrue(self.provider.is_repeated_value("a_2211", 2))
        self.assertTrue(self.provider.is_repeated_value("a_2211", 3))
        self.assertFalse(self.provider.is_repeated_value("a_2211", 4))

        for index in range(len(self.rows)):
            self.assertFalse(self.provider.is_repeated_value("a_2209", index))

    def test_group_boundaries(self):
        boundaries = [
            index for index in range(len(self.rows)) if self.provider.is_group_boundary(index)
        ]
        self.assertEqual(sorted(STATE_SPANS), boundaries)

    def test_measure_columns_are_not_grouped(self):
        self.assertTrue(self.provider.is_column_with_grouping("a_2211"))
        self.assertTrue(self.provider.is_column_with_grouping("a_2209"))
        for col_id in self.rows[0].values:
            self.assertFalse(self.provider.is_column_with_grouping(col_id))
            self.assertFalse(self.provider.is_repeated_value(col_id, 2))

    def test_unknown_row(self):
        self.assertFalse(self.provider.is_repeated_value("a_2211", 100))
        self.assertFalse(self.provider.is_group_boundary(100))

    def test_reset(self):
        self.provider.reset()
        self.assertEqual({}, self.provider.get_row_spans())
        self.assertFalse(self.provider.is_column_with_grouping("a_2211"))

    def test_pages(self):
        provider = AttributeGroupingProvider()
        provider.process_page(self.rows[:5], 0, COLUMN_IDS)
        provider.process_page(self.rows[5:], 5, COLUMN_IDS)
        self.assertEqual(STATE_SPANS, provider.get_row_spans())

    def test_pages_with_gap(self):
        provider = AttributeGroupingProvider()
        provider.process_page(self.rows[:5], 0, COLUMN_IDS)
        provider.process_page(self.rows[10:], 10, COLUMN_IDS)
        self.assertEqual({0: 1, 1: 3, 4: 1, 10: 3}, provider.get_row_spans())


class HierarchicalRepetitionTestCase(unittest.TestCase):
    def test_inner_value_does_not_repeat_across_outer_change(self):
        provider = AttributeGroupingProvider()
        provider.process_page([row(1, 10), row(2, 10)], 0, COLUMN_IDS)
        self.assertFalse(provider.is_repeated_value("a_2209", 1))

    def test_inner_value_repeats_within_outer_group(self):
        provider = AttributeGroupingProvider()
        provider.process_page([row(1, 10), row(1, 10), row(1, 11)], 0, COLUMN_IDS)
        self.assertTrue(provider.is_repeated_value("a_2209", 1))
        self.assertFalse(provider.is_repeated_value("a_2209", 2))
        self.assertEqual({0: 3}, provider.get_row_spans())

    def test_subtotal_rows(self):
        total = TotalHeaderItem(name="Sum", type="sum")
        subtotal = RowRecord(header_item_map={"a_2211": total, "a_2209": total})

        provider = AttributeGroupingProvider()
        provider.process_page([row(1, 10), row(1, 11), subtotal], 0, COLUMN_IDS)

        self.assertEqual({0: 2, 2: 1}, provider.get_row_spans())

    def test_no_attribute_columns(self):
        provider = AttributeGroupingProvider()
        provider.process_page([RowRecord(), RowRecord()], 0, [])
        self.assertEqual({}, provider.get_row_spans())


class DefaultGroupingProviderTestCase(unittest.TestCase):
    def test_nothing_is_grouped(self):
        provider = DefaultGroupingProvider()
        provider.process_page(fixture_rows(), 0, COLUMN_IDS)

        self.assertEqual({}, provider.get_row_spans())
        self.assertFalse(provider.is_column_with_grouping("a_2211"))
        self.assertFalse(provider.is_repeated_value("a_2211", 2))
        self.assertFalse(provider.is_group_boundary(0))


class RowGroupingEngineTestCase(unittest.TestCase):
    def setUp(self):
        self.rows = fixture_rows()
        self.engine = RowGroupingEngine()

    def test_initial_state(self):
        self.assertEqual(GroupingState.UNGROUPED, self.engine.state)
        self.assertEqual({}, self.engine.row_spans)

    def test_grouped_when_sorted_by_first_attribute(self):
        state = self.engine.update(self.rows, COLUMN_IDS, True)
        self.assertEqual(GroupingState.GROUPED, state)
        self.assertEqual(STATE_SPANS, self.engine.row_spans)

    def test_resorted_by_measure(self):
        self.engine.update(self.rows, COLUMN_IDS, True)
        state = self.engine.update(self.rows, COLUMN_IDS, False)

        self.assertEqual(GroupingState.UNGROUPED, state)
        self.assertEqual({}, self.engine.row_spans)
        self.assertFalse(self.engine.provider.is_repeated_value("a_2211", 2))

    def test_grouping_preference(self):
        self.engine.update(self.rows, COLUMN_IDS, True)

        state = self.engine.update(self.rows, COLUMN_IDS, True, group_rows=False)
        self.assertEqual(GroupingState.UNGROUPED, state)
        self.assertEqual({}, self.engine.row_spans)

        # preference is kept for next updates
        self.assertEqual(GroupingState.UNGROUPED, self.engine.update(self.rows, COLUMN_IDS, True))

        state = self.engine.update(self.rows, COLUMN_IDS, True, group_rows=True)
        self.assertEqual(GroupingState.GROUPED, state)
        self.assertEqual(STATE_SPANS, self.engine.row_spans)

    def test_disabled_grouping(self):
        engine = RowGroupingEngine(group_rows=False)
        self.assertEqual(GroupingState.UNGROUPED, engine.update(self.rows, COLUMN_IDS, True))

    def test_new_provider_on_every_update(self):
        self.engine.update(self.rows, COLUMN_IDS, True)
        first = self.engine.provider
        self.engine.update(self.rows[:4], COLUMN_IDS, True)

        self.assertIsNot(first, self.engine.provider)
        self.assertEqual({0: 1, 1: 3}, self.engine.row_spans)

    def test_rows_are_not_reordered(self):
        names = [r.value("a_2209") for r in self.rows]
        self.engine.update(self.rows, COLUMN_IDS, True)
        self.assertEqual(names, [r.value("a_2209") for r in self.rows])

    def test_add_page(self):
        self.engine.update(self.rows[:5], COLUMN_IDS, True)
        self.engine.add_page(self.rows[5:], 5, COLUMN_IDS)
        self.assertEqual(STATE_SPANS, self.engine.row_spans)
