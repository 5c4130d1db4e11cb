"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import pa_report...' works from a
source checkout, and provides shared fixtures:
  - InMemoryTable: a TableSource backed by numpy arrays (no filesystem).
  - write_fits: writes a real FITS file with astropy into tmp_path.
"""
import sys
from pathlib import Path

import numpy as np
import pytest
from astropy.io import fits

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from pa_report.config.settings import reset_settings  # noqa: E402
from pa_report.sources.base import (  # noqa: E402
    BAD_COL_NUM,
    END_OF_FILE,
    BlockKind,
    ColumnDescriptor,
)
from pa_report.table.schemas import UnderlyingIOError  # noqa: E402


class InMemoryTable:
    """
    TableSource fake holding columns as (name, type_code, values) triples.

    Records how it was used (read calls, closed flag) so tests can assert on
    the resource and type-check behaviour.
    """

    def __init__(self, columns, kind=BlockKind.BINARY_TABLE, n_rows=None, blocks=2):
        self.columns = list(columns)
        self.kind = kind
        self.blocks = blocks
        self.n_rows = n_rows if n_rows is not None else (
            len(self.columns[0][2]) if self.columns else 0
        )
        self.read_calls = []
        self.selected = None
        self.closed = False

    def select_block(self, number):
        if number > self.blocks:
            raise UnderlyingIOError(END_OF_FILE, f"no HDU number {number}")
        self.selected = number
        return self.kind

    def column_count(self):
        return len(self.columns)

    def row_count(self):
        return self.n_rows

    def column_names(self):
        return [name for name, _, _ in self.columns]

    def describe_column(self, position):
        self._check(position)
        _, type_code, values = self.columns[position - 1]
        values = np.asarray(values)
        repeat = values.shape[1] if values.ndim > 1 else 1
        return ColumnDescriptor(position=position, type_code=type_code, repeat=repeat)

    def read_column(self, position, n_rows):
        self._check(position)
        self.read_calls.append(position)
        return np.asarray(self.columns[position - 1][2])[:n_rows]

    def _check(self, position):
        if not 1 <= position <= len(self.columns):
            raise UnderlyingIOError(BAD_COL_NUM, f"bad column {position}")

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def make_report_columns(
    included=(1, 0, 1),
    pa=(10.0, 20.0, 30.0),
    mjd=(100.5, 200.5, 300.5),
    ascending=(1, 1, 0),
):
    """
    Build the four required columns as (name, type_code, values) triples.

    Defaults reproduce the three-row table used throughout the tests.
    """
    return [
        ("PA", "E", np.array(pa, dtype=np.float32)),
        ("MJD", "D", np.array(mjd, dtype=np.float64)),
        ("Included", "B", np.array(included, dtype=np.uint8)),
        ("ascending", "B", np.array(ascending, dtype=np.uint8)),
    ]


def fits_column(name, type_code, values):
    """Build an astropy Column from a (name, type_code, values) triple."""
    return fits.Column(name=name, format=type_code, array=np.asarray(values))


@pytest.fixture
def write_fits(tmp_path):
    """
    Return a helper that writes a FITS file with a primary HDU and one extension.

    Usage:
        path = write_fits(make_report_columns())                 # binary table
        path = write_fits(extension=fits.ImageHDU(np.zeros(4)))  # image block
    """
    def _write(columns=None, extension=None, name="table.fits"):
        if extension is None:
            extension = fits.BinTableHDU.from_columns(
                [fits_column(*column) for column in columns]
            )
        path = tmp_path / name
        fits.HDUList([fits.PrimaryHDU(), extension]).writeto(path)
        return path

    return _write


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Give every test fresh settings with no PA_REPORT_* variables set."""
    for variable in ("PA_REPORT_ERROR_STREAM", "PA_REPORT_MEMMAP", "PA_REPORT_VERBOSE"):
        monkeypatch.delenv(variable, raising=False)
    reset_settings()
    yield
    reset_settings()
