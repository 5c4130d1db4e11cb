"""
Report orchestration for one FITS file.

**Conceptual**: TableReport runs the whole pipeline for one file:

    open -> select block #2 -> check binary table -> catalog -> typed reads
         -> row filter -> print -> close

**Workflow**:
  1. Open the file through the source factory (a context manager, so the
     handle is released on every path, including errors).
  2. Select data block #2; raise NotBinaryTableError unless it is a binary table.
  3. Read the row count and build the ColumnCatalog from the column names.
  4. Resolve and read every required column (PA, MJD, Included, ascending)
     with its expected storage type.
  5. Build the RowFilter over the decoded arrays.
  6. Print one fixed-width line per included row.

**No partial output**: all required columns are read before the first line is
printed. If any column is missing or mistyped, nothing is printed for the file.
"""

import sys
from dataclasses import dataclass
from typing import Callable, Dict, Optional, TextIO

import numpy as np

from pa_report.config.settings import ReportSettings
from pa_report.sources.base import BlockKind
from pa_report.sources.fits_source import open_fits_table
from pa_report.table.catalog import ColumnCatalog
from pa_report.table.filters import RowFilter
from pa_report.table.reader import TypedColumnReader
from pa_report.table.schemas import (
    ASCENDING_COLUMN,
    DATA_BLOCK_NUMBER,
    INCLUDED_COLUMN,
    MJD_COLUMN,
    PA_COLUMN,
    REQUIRED_COLUMNS,
    NotBinaryTableError,
)


@dataclass(frozen=True)
class ReportSummary:
    """Counts for one processed file."""
    path: str
    total_rows: int
    included_rows: int


class TableReport:
    """
    Prints the included rows of one FITS binary table.

    Args:
        settings: ReportSettings (memmap is passed to the source factory).
                  Defaults to ReportSettings().
        source_factory: Callable (path, memmap) -> TableSource context manager.
                        Defaults to open_fits_table; tests pass in-memory sources.

    Example:
        >>> report = TableReport()
        >>> summary = report.run("observations.fits")
        1        10.00       100.50
        0        30.00       300.50
        >>> summary.included_rows
        2
    """

    def __init__(
        self,
        settings: Optional[ReportSettings] = None,
        source_factory: Optional[Callable] = None,
    ):
        self.settings = settings or ReportSettings()
        self.source_factory = source_factory or open_fits_table

    def read_columns(self, source) -> Dict[str, np.ndarray]:
        """
        Select the data block of an open source and decode every required column.

        Returns:
            Mapping of required column name to its decoded array.

        Raises:
            NotBinaryTableError: If block #2 is not a binary table.
            ColumnNotFoundError: If a required column is absent.
            TypeMismatchError: If a required column has the wrong storage type.
            UnderlyingIOError: If the source reports a failure.
        """
        kind = source.select_block(DATA_BLOCK_NUMBER)
        if kind is not BlockKind.BINARY_TABLE:
            raise NotBinaryTableError(kind.value)

        catalog = ColumnCatalog.from_source(source)
        reader = TypedColumnReader(source)

        columns = {}
        for name, expected in REQUIRED_COLUMNS.items():
            position = catalog.resolve(name)
            columns[name] = reader.read(position, expected, name=name)
        return columns

    def collect(self, path) -> RowFilter:
        """
        Read `path` and return its filtered rows.

        The file is closed before this returns; the returned RowFilter holds
        owned arrays only.
        """
        with self.source_factory(path, memmap=self.settings.memmap) as source:
            columns = self.read_columns(source)

        return RowFilter(
            include=columns[INCLUDED_COLUMN],
            ascending=columns[ASCENDING_COLUMN],
            value=columns[PA_COLUMN],
            timestamp=columns[MJD_COLUMN],
        )

    def run(self, path, out: Optional[TextIO] = None) -> ReportSummary:
        """
        Print the included rows of `path`, one line each, to `out` (stdout by default).

        Returns:
            ReportSummary with total and included row counts.
        """
        if out is None:
            out = sys.stdout
        rows = self.collect(path)

        for row in rows:
            print(row.format(), file=out)

        return ReportSummary(
            path=str(path),
            total_rows=rows.total_rows,
            included_rows=len(rows),
        )
