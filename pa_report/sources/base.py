"""
Base abstractions for table sources.

**Conceptual**: This module defines the TableSource protocol, the interface the
report uses to talk to a tabular file. The column catalog, typed reader and
report orchestration only depend on this protocol; the FITS adapter in
fits_source.py is one implementation, and tests supply in-memory ones.

**Contract**: Every TableSource implementation MUST:
  1. Number blocks and columns from 1, as FITS does.
  2. Report failures as UnderlyingIOError carrying one of the status codes below.
  3. Return decoded columns as one-dimensional numpy arrays with one element per row.
  4. Release the underlying file when used as a context manager, on both the
     normal and the error path.

**Status codes**: numbering follows CFITSIO so the command line tool exits with
the same codes a CFITSIO-based reader would.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence

import numpy as np

from pa_report.table.schemas import ColumnType


FILE_NOT_OPENED = 104
END_OF_FILE = 107
READ_ERROR = 108
BAD_HDU_NUM = 301
BAD_COL_NUM = 302
NUM_OVERFLOW = 412


class BlockKind(Enum):
    """Kind of the currently selected data block (HDU)."""

    IMAGE = "image"
    ASCII_TABLE = "ascii_table"
    BINARY_TABLE = "binary_table"


@dataclass(frozen=True)
class ColumnDescriptor:
    """
    Declared layout of one column.

    Attributes:
        position: 1-based column position.
        type_code: TFORM letter as declared in the file (e.g. "E", "D", "B", "J").
        repeat: Elements per row (1 for scalar columns).
    """
    position: int
    type_code: str
    repeat: int = 1

    @property
    def column_type(self) -> Optional[ColumnType]:
        """Supported storage type, or None if the TFORM letter is not supported."""
        return ColumnType.from_code(self.type_code)

    def describe(self) -> str:
        """TFORM-style text, e.g. "E" or "3E"."""
        return self.type_code if self.repeat == 1 else f"{self.repeat}{self.type_code}"


class TableSource(Protocol):
    """
    Protocol for an open tabular file.

    **Lifecycle**: a source is opened by a factory (see fits_source.open_fits_table),
    used inside a `with` block, and closed on exit. The caller first selects a
    block, then queries counts, names and columns of that block.

    **Testing strategy**: tests implement this protocol with a small in-memory
    class holding numpy arrays, so catalog/reader/report logic runs without
    touching the filesystem.
    """

    def select_block(self, number: int) -> BlockKind:
        """
        Move to data block `number` (1-based) and return its kind.

        Raises:
            UnderlyingIOError: If the block does not exist (END_OF_FILE) or
                               its header cannot be read.
        """
        ...

    def column_count(self) -> int:
        """Number of columns in the selected table."""
        ...

    def row_count(self) -> int:
        """Number of rows in the selected table."""
        ...

    def column_names(self) -> Sequence[str]:
        """
        Column names in position order, one per column.

        A column without a name keyword is reported as an empty string so
        positions stay contiguous.
        """
        ...

    def describe_column(self, position: int) -> ColumnDescriptor:
        """
        Declared storage layout of column `position` (1-based).

        Raises:
            UnderlyingIOError: BAD_COL_NUM if `position` is out of range.
        """
        ...

    def read_column(self, position: int, n_rows: int) -> np.ndarray:
        """
        Decode the first `n_rows` values of column `position` in one bulk read.

        Raises:
            UnderlyingIOError: READ_ERROR if decoding fails.
        """
        ...

    def close(self) -> None:
        """Release the underlying file handle."""
        ...

    def __enter__(self) -> "TableSource":
        ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        ...
