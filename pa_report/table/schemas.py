"""
Column contracts and error taxonomy for binary table reports.

**Conceptual**: This module defines the "data contract" of the report: which
named columns a table must carry, which storage type each must have, and the
errors raised when a table breaks that contract. Every error carries the exit
code the command line tool terminates with, so library code can simply raise
and leave reporting to a single top-level handler.

**Storage types**: FITS binary tables declare each column's type with a TFORM
letter. Only three are supported:
  - "E": 32-bit IEEE float  (CFITSIO name TFLOAT)
  - "D": 64-bit IEEE float  (CFITSIO name TDOUBLE)
  - "B": unsigned byte      (CFITSIO name TBYTE), used for boolean flags

**Exit codes**:
  -1  the selected block is not a binary table
  -2  a required column is absent
  -3  a required column has the wrong storage type
  any other nonzero code is the format library's own status number
"""

from enum import Enum
from typing import Optional

import numpy as np


class ColumnType(Enum):
    """Supported column storage types, keyed by their TFORM letter."""

    FLOAT32 = "E"
    FLOAT64 = "D"
    BYTE = "B"

    @property
    def dtype(self) -> np.dtype:
        """Native numpy dtype that decoded values are returned in."""
        return np.dtype(_DTYPES[self])

    @property
    def type_name(self) -> str:
        """CFITSIO type name, used in user-facing messages."""
        return _TYPE_NAMES[self]

    @classmethod
    def from_code(cls, type_code: str) -> Optional["ColumnType"]:
        """Map a TFORM letter to a ColumnType, or None if unsupported."""
        try:
            return cls(type_code.strip().upper())
        except ValueError:
            return None


_DTYPES = {
    ColumnType.FLOAT32: np.float32,
    ColumnType.FLOAT64: np.float64,
    ColumnType.BYTE: np.uint8,
}

_TYPE_NAMES = {
    ColumnType.FLOAT32: "TFLOAT",
    ColumnType.FLOAT64: "TDOUBLE",
    ColumnType.BYTE: "TBYTE",
}


# The report reads these columns from block #2; names match case-insensitively.
PA_COLUMN = "PA"
MJD_COLUMN = "MJD"
INCLUDED_COLUMN = "Included"
ASCENDING_COLUMN = "ascending"

REQUIRED_COLUMNS = {
    PA_COLUMN: ColumnType.FLOAT32,
    MJD_COLUMN: ColumnType.FLOAT64,
    INCLUDED_COLUMN: ColumnType.BYTE,
    ASCENDING_COLUMN: ColumnType.BYTE,
}

# FITS numbers HDUs from 1; block #2 is the first extension after the primary HDU.
DATA_BLOCK_NUMBER = 2


class TableReportError(Exception):
    """
    Base class for all fatal report errors.

    **Conceptual**: None of these errors is recoverable for the file being
    processed. Each subclass fixes the process exit code; the message (str of
    the exception) is what the user sees.
    """

    exit_code = 1


class NotBinaryTableError(TableReportError):
    """Raised when the selected data block is not a binary table."""

    exit_code = -1

    def __init__(self, kind: str = "unknown"):
        self.kind = kind
        super().__init__("Error: this HDU is not a binary table")


class ColumnNotFoundError(TableReportError):
    """Raised when a required column name is absent from the table's catalog."""

    exit_code = -2

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Could not find key "{name}" in binary table.')


class TypeMismatchError(TableReportError):
    """
    Raised when a column's declared storage type differs from the expected one.

    Attributes:
        position: 1-based column position.
        expected: The ColumnType the caller asked for.
        actual: The TFORM code the table declares (with repeat count if not 1).
        name: Column name, when known, for the message.
    """

    exit_code = -3

    def __init__(
        self,
        position: int,
        expected: ColumnType,
        actual: str,
        name: Optional[str] = None,
    ):
        self.position = position
        self.expected = expected
        self.actual = actual
        self.name = name
        key = name if name is not None else f"#{position}"
        super().__init__(
            f"Type code for key {key} is not of type {expected.type_name}"
        )


class UnderlyingIOError(TableReportError):
    """
    Wraps a failure reported by the format library.

    The exit code is the library status itself (CFITSIO numbering), so the
    process terminates with the same code the format library reported.
    """

    def __init__(self, status: int, detail: str):
        self.status = status
        self.detail = detail
        super().__init__(f"FITSIO status = {status}: {detail}")

    @property
    def exit_code(self) -> int:
        return self.status
