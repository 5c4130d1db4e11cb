"""
Column resolution, typed extraction and row filtering for binary tables.

Defines the column contract of the report (required names and storage types),
the error taxonomy, and the three core steps: ColumnCatalog, TypedColumnReader
and RowFilter.
"""
