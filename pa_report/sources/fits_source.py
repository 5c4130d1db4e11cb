"""
FITS table source backed by astropy.io.fits.

**Conceptual**: This module adapts astropy's HDU objects to the TableSource
protocol. It is the only place in the project that imports the format library.
It translates astropy's exceptions into UnderlyingIOError with CFITSIO status
numbers, so callers see one error type regardless of what went wrong inside
astropy.

**Layered architecture**:
  1. astropy.io.fits: file format layer (headers, HDUs, binary decoding)
  2. FitsTableSource (this file): adapter layer, 1-based positions and status codes
  3. ColumnCatalog / TypedColumnReader / TableReport: report logic

**What this adapter reads**:
  - block kind: from the HDU class (BinTableHDU, TableHDU, anything else)
  - column count: TFIELDS keyword
  - row count: NAXIS2 keyword
  - column names: TTYPEn keywords, "" where a keyword is missing
  - column layout: the parsed TFORMn of each column (letter + repeat count)
  - values: one bulk field() read per column
"""

from pathlib import Path
from typing import List

import numpy as np
from astropy.io import fits

from pa_report.sources.base import (
    BAD_COL_NUM,
    BAD_HDU_NUM,
    END_OF_FILE,
    FILE_NOT_OPENED,
    READ_ERROR,
    BlockKind,
    ColumnDescriptor,
)
from pa_report.table.schemas import UnderlyingIOError


class FitsTableSource:
    """
    TableSource implementation for FITS files.

    **Example usage**:
        >>> with open_fits_table("observations.fits") as table:
        ...     kind = table.select_block(2)
        ...     names = table.column_names()
        ...     pa = table.read_column(names.index("PA") + 1, table.row_count())
        >>> # File closed here, even if a read raised

    Decoded arrays returned by read_column() may still reference the file
    (astropy memory-maps when asked to). TypedColumnReader copies them before
    the source is closed.
    """

    def __init__(self, path, memmap: bool = False):
        """
        Open a FITS file read-only.

        Args:
            path: Path to the FITS file (string or pathlib.Path).
            memmap: Passed through to astropy.io.fits.open().

        Raises:
            UnderlyingIOError: FILE_NOT_OPENED if the file is missing or not FITS.
        """
        self.path = Path(path)
        self._hdu = None

        try:
            self._hdul = fits.open(self.path, mode="readonly", memmap=memmap)
        except (OSError, ValueError) as e:
            raise UnderlyingIOError(
                FILE_NOT_OPENED,
                f"could not open the named file: {self.path} ({e})",
            ) from e

    def select_block(self, number: int) -> BlockKind:
        if number < 1:
            raise UnderlyingIOError(
                BAD_HDU_NUM, f"HDU number must be at least 1, got {number}"
            )

        try:
            hdu = self._hdul[number - 1]
        except IndexError as e:
            raise UnderlyingIOError(
                END_OF_FILE,
                f"{self.path} has no HDU number {number}",
            ) from e
        except (OSError, ValueError) as e:
            raise UnderlyingIOError(
                READ_ERROR,
                f"could not read header of HDU {number} in {self.path} ({e})",
            ) from e

        self._hdu = hdu

        # Compressed images are stored as binary tables on disk; their headers
        # carry no TFIELDS, so the column lookup finds nothing
        if isinstance(hdu, (fits.CompImageHDU, fits.BinTableHDU)):
            return BlockKind.BINARY_TABLE
        if isinstance(hdu, fits.TableHDU):
            return BlockKind.ASCII_TABLE
        return BlockKind.IMAGE

    def _selected(self):
        if self._hdu is None:
            raise RuntimeError("select_block() must be called before reading table metadata")
        return self._hdu

    def column_count(self) -> int:
        return int(self._selected().header.get("TFIELDS", 0))

    def row_count(self) -> int:
        return int(self._selected().header.get("NAXIS2", 0))

    def column_names(self) -> List[str]:
        header = self._selected().header
        return [
            str(header.get(f"TTYPE{position}", "")).strip()
            for position in range(1, self.column_count() + 1)
        ]

    def describe_column(self, position: int) -> ColumnDescriptor:
        self._check_position(position)
        column_format = self._selected().columns[position - 1].format

        # astropy parses TFORMn into letter, repeat count and option
        return ColumnDescriptor(
            position=position,
            type_code=column_format.format,
            repeat=int(column_format.repeat),
        )

    def read_column(self, position: int, n_rows: int) -> np.ndarray:
        self._check_position(position)

        try:
            data = self._selected().data
            if data is None:
                return np.empty(0)
            values = data.field(position - 1)[:n_rows]
        except (OSError, ValueError, TypeError, IndexError) as e:
            raise UnderlyingIOError(
                READ_ERROR,
                f"error reading column {position} of {self.path} ({e})",
            ) from e

        return np.asarray(values)

    def _check_position(self, position: int) -> None:
        count = self.column_count()
        if not 1 <= position <= count:
            raise UnderlyingIOError(
                BAD_COL_NUM,
                f"column number {position} is out of range 1-{count}",
            )

    def close(self) -> None:
        """Close the FITS file. Safe to call more than once."""
        self._hdu = None
        self._hdul.close()

    def __enter__(self):
        """Enable context manager support (with statement)."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Close the file when exiting the context manager."""
        self.close()
        return False  # Don't suppress exceptions


def open_fits_table(path, memmap: bool = False) -> FitsTableSource:
    """
    Open a FITS file as a TableSource.

    This is the default source factory used by TableReport.

    Args:
        path: Path to the FITS file.
        memmap: Passed through to astropy.io.fits.open().

    Returns:
        An open FitsTableSource; use it as a context manager.

    Raises:
        UnderlyingIOError: FILE_NOT_OPENED if the file cannot be opened.
    """
    return FitsTableSource(path, memmap=memmap)
