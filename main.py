"""
pa_report - Main entry point.

Runs the command line tool from a source checkout:

    python main.py observations.fits
"""

from pa_report.report.cli import main


if __name__ == "__main__":
    main()
