"""
Error kinds raised or reported by the generation core.
"""
from typing import Any, Optional


class GenerationError(Exception):
    """Base class for failures that end a single flyer generation."""

    kind = "GenerationError"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(GenerationError):
    """Request shape is malformed (property or agent data is not an object, etc.)."""

    kind = "ValidationError"


# Non-fatal outcome kinds, recorded on the generation outcome instead of raised
UNKNOWN_STYLE_WARNING = "UnknownStyleWarning"
ANALYSIS_DEGRADED = "AnalysisDegraded"
