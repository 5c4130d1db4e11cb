"""
Report orchestration and the command line entry point.

TableReport ties a TableSource to the column catalog, typed reader and row
filter; cli.py turns report errors into process exit codes.
"""
