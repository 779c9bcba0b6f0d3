"""
Error types raised by the seam-carving project.

All of them derive from SeamCarvingError so the command line can report any
failure with a single handler. Each kind also derives from the closest
built-in exception, so callers catching ValueError / OSError keep working.
"""

from __future__ import annotations


class SeamCarvingError(RuntimeError):
    """Base class for every failure raised by the carving pipeline."""


class ConfigurationError(SeamCarvingError):
    """Missing or malformed invocation parameters."""


class RasterIOError(SeamCarvingError, OSError):
    """Image could not be read, decoded, or written."""


class ValidationError(SeamCarvingError, ValueError):
    """Request is not satisfiable for the current image (too many seams, image too small)."""


class InternalConsistencyError(SeamCarvingError):
    """Energy / cost / seam data does not belong to the image it is applied to."""
