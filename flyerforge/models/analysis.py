"""
Analysis models - quantified design-quality features and the advice derived from them.
"""
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ColorFactors(BaseModel):
    contrast: float = Field(ge=0, le=1)
    balance: float = Field(ge=0, le=1)
    cohesion: float = Field(ge=0, le=1)


class ColorHarmony(BaseModel):
    """Average of contrast, balance and cohesion checks."""
    score: float = Field(ge=0, le=1)
    harmony: Literal["excellent", "good", "needs-improvement", "insufficient"]
    factors: Optional[ColorFactors] = None


class ColorAnalysis(BaseModel):
    primary_colors: list[str] = Field(default_factory=list)
    accent_colors: list[str] = Field(default_factory=list)
    neutral_colors: list[str] = Field(default_factory=list)
    distinct_colors: list[str] = Field(default_factory=list)
    harmony: ColorHarmony


class Responsiveness(BaseModel):
    score: float = Field(ge=0, le=1)
    level: Literal["excellent", "good", "basic"]
    features: list[str] = Field(default_factory=list)


class LayoutSignature(BaseModel):
    grid_system: Literal["css-grid", "flexbox", "float", "traditional"] = "traditional"
    spacing: Literal["consistent", "generous", "tight", "balanced", "unknown"] = "unknown"
    alignment: str = "mixed"
    responsiveness: Responsiveness


class TypographySignature(BaseModel):
    font_families: list[str] = Field(default_factory=list)
    font_sizes: list[str] = Field(default_factory=list)
    font_weights: list[str] = Field(default_factory=list)
    hierarchy: Literal["strong", "moderate", "basic"] = "basic"


class ContentSignature(BaseModel):
    sections: int = 0
    images: int = 0
    text_blocks: int = 0
    calls_to_action: int = 0
    balance: Literal[
        "image-balanced", "text-balanced", "image-heavy", "text-heavy", "well-balanced"
    ] = "image-heavy"


class IndicatorScore(BaseModel):
    score: float = Field(ge=0, le=1)
    level: Literal["excellent", "good", "needs-improvement"]


class VisualHierarchy(BaseModel):
    contrast: IndicatorScore
    spacing: IndicatorScore
    emphasis: IndicatorScore
    flow: IndicatorScore


class DesignPatterns(BaseModel):
    """Everything the analyzer derives from one document."""
    color_usage: ColorAnalysis
    layout_structure: LayoutSignature
    typography: TypographySignature
    content_structure: ContentSignature
    visual_hierarchy: VisualHierarchy

    @property
    def has_signal(self) -> bool:
        """False when nothing usable was declared (no colors, fonts or layout markers)."""
        return bool(
            self.color_usage.distinct_colors
            or self.typography.font_families
            or self.layout_structure.grid_system != "traditional"
        )


class Recommendation(BaseModel):
    """An improvement suggestion."""
    category: str
    priority: Literal["high", "medium", "low"]
    suggestion: str
    action: str


class LearningInsight(BaseModel):
    """A pattern worth reinforcing."""
    type: str = "success-pattern"
    pattern: str
    confidence: float = Field(ge=0, le=1)
    description: str


class RecordAnalysis(BaseModel):
    """Analysis attached to a generation record."""
    record_id: str
    style_id: Optional[str] = None
    success: bool
    patterns: Optional[DesignPatterns] = None
    recommendations: list[Recommendation] = Field(default_factory=list)
    learning_insights: list[LearningInsight] = Field(default_factory=list)
    degraded: bool = Field(default=False, description="True when the document yielded no usable signal")
