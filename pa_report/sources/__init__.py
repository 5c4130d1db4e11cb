"""
Table source abstractions and the astropy-backed FITS adapter.

Defines the TableSource protocol consumed by the report, so the core column
logic never touches the file format library directly.
"""
