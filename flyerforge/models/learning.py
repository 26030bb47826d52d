"""
Learning models - generation records, the pattern library and engine status.
"""
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from .analysis import RecordAnalysis
from .outcome import GenerationOutcome


PatternCategory = Literal["colorUsage", "layoutStructure", "typography"]
PATTERN_CATEGORIES: tuple[str, ...] = ("colorUsage", "layoutStructure", "typography")


class PerformanceMetrics(BaseModel):
    generation_time_ms: float = 0.0
    section_count: int = 0
    photo_count: int = 0
    rating: Optional[float] = None
    extra: dict[str, Any] = Field(default_factory=dict)


class GenerationRecord(BaseModel):
    """
    Log entry for one generation attempt.
    References exactly one request and carries exactly one outcome.
    """
    id: str
    timestamp: datetime = Field(default_factory=datetime.now)
    request_id: str
    request: dict[str, Any] = Field(default_factory=dict, description="Request payload as received")
    style_id: Optional[str] = Field(default=None, description="Resolved design system id")
    outcome: GenerationOutcome
    metrics: PerformanceMetrics = Field(default_factory=PerformanceMetrics)
    analysis: Optional[RecordAnalysis] = None

    @property
    def success(self) -> bool:
        return self.outcome.success


class LearnedPattern(BaseModel):
    """One observed design choice with its confidence."""
    pattern: str
    confidence: float = Field(ge=0, le=0.95)
    usage_count: int = Field(default=1, ge=0)
    learned_at: datetime = Field(default_factory=datetime.now)
    source: Literal["seed", "learned"] = "learned"
    details: dict[str, Any] = Field(default_factory=dict)


StylePatterns = dict[str, list[LearnedPattern]]


class LearningTotals(BaseModel):
    generated: int = 0
    succeeded: int = 0
    failed: int = 0
    learning_cycles: int = 0

    @property
    def success_rate(self) -> float:
        if self.generated == 0:
            return 0.0
        return self.succeeded / self.generated


class LearningStatus(BaseModel):
    totals: LearningTotals
    success_rate: float = 0.0
    pattern_count: int = 0
    style_count: int = 0
    record_count: int = 0
    incorporated_count: int = 0
    average_generation_time_ms: Optional[float] = None
    p95_generation_time_ms: Optional[float] = None


class PatternLibrarySnapshot(BaseModel):
    """Checkpoint of the pattern library for an external persistence collaborator."""
    exported_at: datetime = Field(default_factory=datetime.now)
    patterns: dict[str, StylePatterns] = Field(default_factory=dict)
    incorporated_record_ids: list[str] = Field(default_factory=list)
    totals: LearningTotals = Field(default_factory=LearningTotals)


class RecordSummary(BaseModel):
    id: str
    style_id: Optional[str] = None
    success: bool
    timestamp: datetime
    incorporated: bool = False


class LearningExport(BaseModel):
    """Status, patterns and recent records for external analysis."""
    exported_at: datetime = Field(default_factory=datetime.now)
    status: LearningStatus
    patterns: dict[str, StylePatterns] = Field(default_factory=dict)
    recent_records: list[RecordSummary] = Field(default_factory=list)
