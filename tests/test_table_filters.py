"""
Tests for pa_report/table/filters.py

These tests verify that RowFilter yields exactly the included rows, in table
order, with fields taken from the matching index, and that it can be iterated
repeatedly without touching its inputs.
"""

import numpy as np
import pytest

from pa_report.table import filters
from pa_report.table.filters import Row, RowFilter


def make_filter(include, n=None):
    """RowFilter over value columns derived from the row index (value = 10*i, etc.)."""
    n = len(include) if n is None else n
    index = np.arange(n)
    return RowFilter(
        include=np.array(include, dtype=np.uint8),
        ascending=(index % 2).astype(np.uint8),
        value=(index * 10.0).astype(np.float32),
        timestamp=index + 50000.25,
    )


def test_only_included_rows_are_yielded_in_order():
    rows = list(make_filter([1, 0, 1, 1, 0]))

    assert [row.value for row in rows] == [0.0, 20.0, 30.0]
    assert [row.timestamp for row in rows] == [50000.25, 50002.25, 50003.25]
    assert [row.ascending for row in rows] == [0, 0, 1]


def test_output_length_equals_count_of_set_flags():
    """For random include masks, the k-th output row comes from the k-th set index."""
    rng = np.random.default_rng(7)

    for _ in range(20):
        include = rng.integers(0, 2, size=25)
        row_filter = make_filter(include)
        rows = list(row_filter)

        expected_indices = [i for i, flag in enumerate(include) if flag]
        assert len(rows) == len(expected_indices) == len(row_filter)
        assert [row.value for row in rows] == [i * 10.0 for i in expected_indices]
        assert row_filter.indices().tolist() == expected_indices


def test_any_nonzero_byte_counts_as_included():
    rows = list(make_filter([0, 2, 255, 0]))

    assert [row.value for row in rows] == [10.0, 20.0]


def test_iteration_is_repeatable():
    """Iterating twice gives identical rows."""
    row_filter = make_filter([1, 1, 0, 1])

    assert list(row_filter) == list(row_filter)


def test_inputs_are_not_mutated():
    include = np.array([1, 0, 1], dtype=np.uint8)
    value = np.array([1.0, 2.0, 3.0], dtype=np.float32)
    before = (include.copy(), value.copy())

    list(RowFilter(include, include, value, value.astype(np.float64)))

    np.testing.assert_array_equal(include, before[0])
    np.testing.assert_array_equal(value, before[1])


def test_no_included_rows_yields_nothing():
    row_filter = make_filter([0, 0, 0])

    assert list(row_filter) == []
    assert len(row_filter) == 0
    assert row_filter.total_rows == 3


def test_empty_columns_yield_nothing():
    assert list(make_filter([])) == []


def test_mismatched_lengths_raise():
    with pytest.raises(ValueError) as exc_info:
        RowFilter(
            include=np.array([1, 1], dtype=np.uint8),
            ascending=np.array([1, 1], dtype=np.uint8),
            value=np.array([1.0, 2.0, 3.0], dtype=np.float32),
            timestamp=np.array([1.0, 2.0]),
        )

    assert "same number of rows" in str(exc_info.value)


def test_apply_builds_a_row_filter():
    rows = filters.apply([1, 0], [1, 0], [5.0, 6.0], [7.0, 8.0])

    assert isinstance(rows, RowFilter)
    assert list(rows) == [Row(ascending=1, value=5.0, timestamp=7.0)]


def test_row_format_is_fixed_width():
    """Ascending as an integer, then PA and MJD as %12.2f, single-space separated."""
    assert Row(1, 10.0, 100.5).format() == "1        10.00       100.50"
    assert Row(0, -3.14159, 59000.125).format() == "0        -3.14     59000.12"


def test_row_format_keeps_float32_value():
    """float32 values print the same as C would after promotion to double."""
    value = float(np.float32(0.1))

    assert Row(0, value, 0.0).format() == "0         0.10         0.00"
