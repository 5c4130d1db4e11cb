"""
Command line entry point: print included PA rows from FITS binary tables.

**Usage**:
    pa-report observations.fits
    pa-report night1.fits night2.fits > pa.txt
    python main.py observations.fits

**What this script does**:
  1. Parse command line arguments (one or more FITS files)
  2. Load settings from environment (.env file)
  3. For each file, in order:
     a. Read PA, MJD, Included and ascending from block #2
     b. Print "<ascending> <PA:%12.2f> <MJD:%12.2f>" for every included row
  4. Exit 0 when every file was printed

**Exit codes**:
  - 0: Success (including when no files are given)
  - -1: Block #2 is not a binary table
  - -2: A required column is missing
  - -3: A required column has the wrong storage type
  - other: FITSIO status reported by the format library (e.g. 104 file not opened)
  - 1: Invalid configuration
  - 130: Interrupted by user

The first failing file stops the run; rows of earlier files stay printed, the
failing file prints nothing.

**Example output**:
    $ pa-report observations.fits
    1        10.00       100.50
    0        30.00       300.50
"""

import argparse
import sys
from typing import Optional, Sequence

from pa_report.config.settings import get_settings
from pa_report.report.table_report import TableReport
from pa_report.table.schemas import TableReportError


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Namespace with attributes: files (list), verbose (bool or None),
        errors_to_stdout (bool or None). None means "use the environment setting".
    """
    parser = argparse.ArgumentParser(
        prog="pa-report",
        description="Print included PA/MJD rows from the binary table in block #2 of FITS files",
        epilog="""
Examples:
  # Print one file
  pa-report observations.fits

  # Print several files in order, with a summary per file on stderr
  pa-report night1.fits night2.fits --verbose > pa.txt
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "files",
        nargs="*",
        help="FITS files to read, processed in order",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Print a summary line per file to stderr (default: PA_REPORT_VERBOSE)",
    )

    parser.add_argument(
        "--errors-to-stdout",
        action="store_true",
        default=None,
        help="Write fatal error messages to stdout instead of stderr (default: PA_REPORT_ERROR_STREAM)",
    )

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main entry point for the command line tool.

    **Error handling strategy**:
      - Report errors (missing column, wrong type, not a binary table, FITSIO
        failures) are fatal: print the message and exit with the error's code.
      - Configuration errors exit with 1 before any file is read.
      - Unexpected errors bubble up (with stack trace for debugging).
    """
    args = parse_args(argv)

    try:
        settings = get_settings().with_overrides(
            error_stream="stdout" if args.errors_to_stdout else None,
            verbose=args.verbose,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    error_stream = sys.stdout if settings.error_stream == "stdout" else sys.stderr
    report = TableReport(settings=settings)

    try:
        for path in args.files:
            summary = report.run(path, out=sys.stdout)
            if settings.verbose:
                print(
                    f"✓ {summary.path}: {summary.included_rows} of "
                    f"{summary.total_rows} rows included",
                    file=sys.stderr,
                )

    except TableReportError as e:
        sys.stdout.flush()
        print(e, file=error_stream)
        sys.exit(e.exit_code)

    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting...", file=sys.stderr)
        sys.exit(130)  # Standard Unix exit code for Ctrl+C

    sys.exit(0)


if __name__ == "__main__":
    main()
