"""
Configuration settings for the table report tool.

**Conceptual**: This module provides a strongly-typed configuration object that
loads from environment variables (via .env files). Settings are validated when
loaded, so a bad value fails at startup rather than halfway through a file.

The required column contract (PA, MJD, Included, ascending) is NOT part of the
settings: it is fixed by the tool and lives in pa_report.table.schemas. Only
operational knobs are configurable here:
  - where fatal error messages are written (stderr or stdout),
  - whether astropy memory-maps the FITS file,
  - whether a per-file summary is printed.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (no-op when the file does not exist)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


ERROR_STREAMS = ("stderr", "stdout")

_TRUE_VALUES = ("true", "1", "yes")
_FALSE_VALUES = ("false", "0", "no", "")


def _parse_bool(name: str, raw: str) -> bool:
    """Parse a boolean environment value, rejecting anything unrecognised."""
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(
        f"{name} must be one of {_TRUE_VALUES + _FALSE_VALUES[:-1]}, got: {raw}"
    )


@dataclass(frozen=True)
class ReportSettings:
    """
    Operational settings for printing FITS table reports.

    **Conceptual**: The report itself is fully determined by the input file;
    these settings only change how the tool behaves around it. The defaults
    reproduce the plain command line behaviour: errors on stderr, no memory
    mapping, no summaries.

    Attributes:
        error_stream: "stderr" (default) or "stdout". With "stdout", fatal
                      messages are interleaved with the data lines.
        memmap: Passed through to astropy.io.fits.open(). Decoded columns are
                always copied out of the file, so this only affects how astropy
                reads the data block.
        verbose: If True, print a one-line summary per file to stderr.
    """
    error_stream: str = "stderr"
    memmap: bool = False
    verbose: bool = False

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.error_stream not in ERROR_STREAMS:
            raise ValueError(
                f"PA_REPORT_ERROR_STREAM must be one of {ERROR_STREAMS}, "
                f"got: {self.error_stream}"
            )

    def with_overrides(
        self,
        error_stream: Optional[str] = None,
        verbose: Optional[bool] = None,
    ) -> "ReportSettings":
        """Return a copy with command line overrides applied (None keeps the current value)."""
        changes = {}
        if error_stream is not None:
            changes["error_stream"] = error_stream
        if verbose is not None:
            changes["verbose"] = verbose
        return replace(self, **changes)

    @classmethod
    def from_env(cls) -> "ReportSettings":
        """
        Load report settings from environment variables.

        **Environment variables** (all optional):
          - PA_REPORT_ERROR_STREAM: "stderr" or "stdout" (default "stderr").
          - PA_REPORT_MEMMAP: memory-map FITS files (default "false").
          - PA_REPORT_VERBOSE: print per-file summaries (default "false").

        Returns:
            ReportSettings object with values loaded from environment.

        Raises:
            ValueError: If any variable holds an unrecognised value.

        Usage example:
            >>> # In .env file:
            >>> # PA_REPORT_ERROR_STREAM=stdout
            >>>
            >>> settings = ReportSettings.from_env()
            >>> print(settings.error_stream)  # "stdout"
        """
        error_stream = os.getenv("PA_REPORT_ERROR_STREAM", "stderr").strip().lower()
        memmap = _parse_bool("PA_REPORT_MEMMAP", os.getenv("PA_REPORT_MEMMAP", "false"))
        verbose = _parse_bool("PA_REPORT_VERBOSE", os.getenv("PA_REPORT_VERBOSE", "false"))

        return cls(
            error_stream=error_stream,
            memmap=memmap,
            verbose=verbose,
        )


# Cached settings; tests can bypass this by constructing ReportSettings directly.
_default_settings: Optional[ReportSettings] = None


def get_settings() -> ReportSettings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached.

    Returns:
        Global ReportSettings singleton.

    Raises:
        ValueError: If the environment holds invalid values.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = ReportSettings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    **Testing pattern**:
      ```python
      def test_something(monkeypatch):
          reset_settings()
          monkeypatch.setenv("PA_REPORT_VERBOSE", "true")
          assert get_settings().verbose
      ```
    """
    global _default_settings
    _default_settings = None
