"""
Outcome models - what a generation attempt produced and what callers get back.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from .analysis import RecordAnalysis
from .document import GeneratedDocument
from .market import MarketAdaptations


class GenerationWarning(BaseModel):
    """Non-fatal condition noticed during generation (fallback style, degraded analysis)."""
    kind: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class GenerationErrorInfo(BaseModel):
    """Serializable description of a failed generation."""
    kind: str = "GenerationError"
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class GenerationOutcome(BaseModel):
    """
    Success with a document, or failure with an error. Never both, never neither.
    """
    success: bool
    document: Optional[GeneratedDocument] = None
    error: Optional[GenerationErrorInfo] = None
    warnings: list[GenerationWarning] = Field(default_factory=list)

    @model_validator(mode="after")
    def exactly_one_result(self) -> "GenerationOutcome":
        if self.success and (self.document is None or self.error is not None):
            raise ValueError("successful outcome needs a document and no error")
        if not self.success and (self.error is None or self.document is not None):
            raise ValueError("failed outcome needs an error and no document")
        return self

    @classmethod
    def ok(cls, document: GeneratedDocument, warnings: Optional[list[GenerationWarning]] = None):
        return cls(success=True, document=document, warnings=warnings or [])

    @classmethod
    def failed(cls, error: GenerationErrorInfo, warnings: Optional[list[GenerationWarning]] = None):
        return cls(success=False, error=error, warnings=warnings or [])


class GenerationResult(BaseModel):
    """Returned by the orchestrator for every call."""
    success: bool
    document: Optional[GeneratedDocument] = None
    error: Optional[GenerationErrorInfo] = None
    warnings: list[GenerationWarning] = Field(default_factory=list)
    record_id: Optional[str] = None
    analysis: Optional[RecordAnalysis] = None
    market: Optional[MarketAdaptations] = None

    def has_warning(self, kind: str) -> bool:
        return any(w.kind == kind for w in self.warnings)
