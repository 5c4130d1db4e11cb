"""
Row filtering by a boolean include column.

**Conceptual**: Every table row carries an "Included" flag. The report prints
only flagged rows, in their original table order. This module is the single
place where output row order and row count are decided.

**Functionally**:
  - Walk row indices 0..N-1 in ascending order.
  - For each index whose include flag is nonzero, produce one Row built from
    the value columns at that index.
  - Skip every other index. No reordering, no deduplication.

The result is a re-iterable sequence: iterating it twice gives the same rows,
and the input arrays are never modified.
"""

from dataclasses import dataclass
from typing import Iterator

import numpy as np


@dataclass(frozen=True)
class Row:
    """
    One printed row of the report.

    Attributes:
        ascending: Pass direction flag (printed as an integer).
        value: Position angle (PA).
        timestamp: Modified Julian Date (MJD).
    """
    ascending: int
    value: float
    timestamp: float

    def format(self) -> str:
        """Fixed-width text line: ascending, then value and timestamp as %12.2f."""
        return f"{self.ascending:d} {self.value:12.2f} {self.timestamp:12.2f}"


class RowFilter:
    """
    Lazily yields the rows whose include flag is set.

    Args:
        include: Byte/boolean flags, one per row.
        ascending: Direction flags, one per row.
        value: Position angles, one per row.
        timestamp: MJD values, one per row.

    Raises:
        ValueError: If the arrays are not all the same length.

    Example:
        >>> rows = RowFilter(
        ...     include=np.array([1, 0, 1], dtype=np.uint8),
        ...     ascending=np.array([1, 1, 0], dtype=np.uint8),
        ...     value=np.array([10.0, 20.0, 30.0], dtype=np.float32),
        ...     timestamp=np.array([100.5, 200.5, 300.5]),
        ... )
        >>> [row.value for row in rows]
        [10.0, 30.0]
    """

    def __init__(self, include, ascending, value, timestamp):
        self.include = np.asarray(include)
        self.ascending = np.asarray(ascending)
        self.value = np.asarray(value)
        self.timestamp = np.asarray(timestamp)

        lengths = {
            "include": len(self.include),
            "ascending": len(self.ascending),
            "value": len(self.value),
            "timestamp": len(self.timestamp),
        }
        if len(set(lengths.values())) > 1:
            raise ValueError(
                f"All columns must have the same number of rows, got: {lengths}"
            )

    def indices(self) -> np.ndarray:
        """Row indices with a nonzero include flag, ascending."""
        return np.flatnonzero(self.include)

    def __iter__(self) -> Iterator[Row]:
        for index in range(len(self.include)):
            if not self.include[index]:
                continue

            yield Row(
                ascending=int(self.ascending[index]),
                value=float(self.value[index]),
                timestamp=float(self.timestamp[index]),
            )

    def __len__(self) -> int:
        return int(np.count_nonzero(self.include))

    @property
    def total_rows(self) -> int:
        """Number of rows before filtering."""
        return len(self.include)


def apply(include, ascending, value, timestamp) -> RowFilter:
    """Filter value columns by `include`; see RowFilter."""
    return RowFilter(include, ascending, value, timestamp)
