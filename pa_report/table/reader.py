"""
Typed column extraction with a storage-type gate.

**Conceptual**: Downstream printing assumes a fixed binary layout per column
(PA is float32, MJD is float64, the flags are bytes). Before any data is
decoded, the reader checks that the column's declared storage type is exactly
the expected one. Only then does it decode every row in a single bulk read.

**Functionally**:
  1. Ask the source for the column's descriptor (TFORM letter + repeat count).
  2. If the type differs from the expected one, or the column holds more than
     one element per row, raise TypeMismatchError. No data is read in that case.
  3. Decode `row_count` rows with one read_column() call.
  4. Copy the values into a native-endian numpy array of the expected dtype.
     The caller owns that array; it stays valid after the source is closed.
     Values that would change in the conversion (TZERO/TSCAL scaled out of
     range, or fractional bytes) raise NUM_OVERFLOW instead.

**Null values**: FITS integer columns may declare a TNULL sentinel. The reader
passes stored values through unchanged; a byte flag equal to the sentinel is
treated like any other byte (nonzero means set).
"""

from typing import Optional

import numpy as np

from pa_report.sources.base import NUM_OVERFLOW, READ_ERROR
from pa_report.table.schemas import ColumnType, TypeMismatchError, UnderlyingIOError


class TypedColumnReader:
    """
    Reads whole columns of one selected table as typed numpy arrays.

    Args:
        source: An open TableSource with its data block already selected.
        row_count: Number of rows to decode; defaults to source.row_count().

    Example:
        >>> reader = TypedColumnReader(table)
        >>> pa = reader.read(catalog.resolve("PA"), ColumnType.FLOAT32, name="PA")
        >>> pa.dtype
        dtype('float32')
    """

    def __init__(self, source, row_count: Optional[int] = None):
        self.source = source
        self.row_count = source.row_count() if row_count is None else row_count

    def check_type(self, position: int, expected: ColumnType, name: Optional[str] = None) -> None:
        """
        Raise TypeMismatchError unless column `position` is stored as `expected`.

        Only scalar columns (repeat count 1) pass: each row must contribute
        exactly one value to the output array.
        """
        descriptor = self.source.describe_column(position)
        if descriptor.column_type is not expected or descriptor.repeat != 1:
            raise TypeMismatchError(
                position=position,
                expected=expected,
                actual=descriptor.describe(),
                name=name,
            )

    def read(self, position: int, expected: ColumnType, name: Optional[str] = None) -> np.ndarray:
        """
        Decode every row of column `position` as `expected`.

        Args:
            position: 1-based column position (usually from ColumnCatalog.resolve).
            expected: Required storage type.
            name: Column name, used only in error messages.

        Returns:
            One-dimensional array of dtype `expected.dtype` and length row_count.

        Raises:
            TypeMismatchError: If the declared type differs (no data is read).
            UnderlyingIOError: If the source fails to decode the column, or
                               returns a different number of rows,
                               or (NUM_OVERFLOW) if scaled values do not
                               fit the expected type.
        """
        self.check_type(position, expected, name=name)

        raw = self.source.read_column(position, self.row_count)
        if len(raw) != self.row_count:
            raise UnderlyingIOError(
                READ_ERROR,
                f"column {name or position} returned {len(raw)} values, "
                f"expected {self.row_count}",
            )

        values = np.asarray(raw)
        if np.can_cast(values.dtype, expected.dtype, casting="safe"):
            # Owned, native-endian copy; FITS stores big-endian values
            return np.array(values, dtype=expected.dtype, copy=True)
        if values.dtype.kind == "f" and expected.dtype.kind == "f":
            # Scaled float columns may decode as float64; narrowing rounds
            return values.astype(expected.dtype)

        # TZERO/TSCAL scaling can yield values the storage type cannot hold
        with np.errstate(invalid="ignore", over="ignore"):
            converted = values.astype(expected.dtype)
        if not np.array_equal(converted, values):
            raise UnderlyingIOError(
                NUM_OVERFLOW,
                f"column {name or position} has values that do not fit "
                f"{expected.type_name}",
            )
        return converted
