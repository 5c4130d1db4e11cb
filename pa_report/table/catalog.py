"""
Column name catalog for a single open table.

**Conceptual**: A binary table names its columns through TTYPEn keywords, one
per 1-based column position. The catalog keeps those names in position order
and answers one question: "which position holds the column called X?"

**Matching rules**:
  - Comparison is case-insensitive ("pa", "PA" and "Pa" all match "PA").
  - Comparison is otherwise exact: no prefix matching, no whitespace folding.
  - Names are scanned in position order and the first match wins.
  - A missing name never falls back to a default; it raises ColumnNotFoundError.

The catalog is built once per open table and never modified.
"""

from typing import Iterator, Sequence, Tuple

from pa_report.table.schemas import ColumnNotFoundError


def _fold(name: str) -> str:
    # ASCII case folding, matching FITS keyword conventions
    return name.lower()


class ColumnCatalog:
    """
    Ordered, immutable mapping of column names to 1-based positions.

    Example:
        >>> catalog = ColumnCatalog(["PA", "MJD", "Included", "ascending"])
        >>> catalog.resolve("mjd")
        2
        >>> catalog.resolve("RA")
        Traceback (most recent call last):
        ...
        ColumnNotFoundError: Could not find key "RA" in binary table.
    """

    def __init__(self, names: Sequence[str]):
        self._names = tuple(str(name) for name in names)
        self._folded = tuple(_fold(name) for name in self._names)

    @classmethod
    def from_source(cls, source) -> "ColumnCatalog":
        """Build the catalog from the column names a TableSource reports."""
        return cls(source.column_names())

    @property
    def names(self) -> Tuple[str, ...]:
        """Column names in position order, as stored in the table."""
        return self._names

    def resolve(self, name: str) -> int:
        """
        Return the 1-based position of the column called `name`.

        Args:
            name: Column name to look up, in any letter case.

        Returns:
            Position (1-based) of the first column whose name matches.

        Raises:
            ColumnNotFoundError: If no column matches.
        """
        wanted = _fold(name)
        for position, folded in enumerate(self._folded, start=1):
            if folded == wanted:
                return position

        raise ColumnNotFoundError(name)

    def __contains__(self, name: str) -> bool:
        return _fold(name) in self._folded

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[Tuple[str, int]]:
        """Yield (name, position) pairs in position order."""
        for position, name in enumerate(self._names, start=1):
            yield name, position

    def __repr__(self) -> str:
        return f"ColumnCatalog({list(self._names)!r})"
