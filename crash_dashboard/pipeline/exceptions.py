# ========================
# crash_dashboard/pipeline/exceptions.py
# ========================

"""
Pipeline Exceptions

Fatal errors raised while loading the incident feeds. Row-level problems
(unsplittable rows, bad dates, missing severities) are not exceptions; they
are excluded from the relevant aggregate and logged at DEBUG.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for errors that abort the whole pipeline."""


class FetchError(PipelineError):
    """A feed could not be retrieved (network failure or non-2xx status)."""

    def __init__(self, source: str, reason: str, status_code: Optional[int] = None):
        self.source = source
        self.reason = reason
        self.status_code = status_code
        if status_code is not None:
            message = f"Failed to fetch {source}: HTTP {status_code} {reason}".rstrip()
        else:
            message = f"Failed to fetch {source}: {reason}"
        super().__init__(message)


class DecodeError(PipelineError):
    """A feed body could not be read as text."""

    def __init__(self, source: str, encoding: str):
        self.source = source
        self.encoding = encoding
        super().__init__(f"Could not decode {source} as {encoding} text")


class ParseError(PipelineError):
    """CSV input is not decodable text."""
