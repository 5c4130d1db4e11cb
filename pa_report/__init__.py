"""
pa_report - print included position-angle rows from FITS binary tables.

Subpackages:
  - config: environment-driven settings.
  - table: column catalog, typed column reader, row filter and error contracts.
  - sources: the TableSource protocol and its astropy-backed implementation.
  - report: orchestration (TableReport) and the command line entry point.
"""
