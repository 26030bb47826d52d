"""
Pydantic models for flyerforge.
All data contracts are defined here for strict validation.
"""

from .design import (
    ColorScheme,
    TypographySystem,
    LayoutSystem,
    AnimationProfile,
    DesignSystem,
)
from .request import PropertyListing, AgentProfile, GenerationRequest
from .analysis import (
    ColorHarmony,
    LayoutSignature,
    TypographySignature,
    ContentSignature,
    DesignPatterns,
    Recommendation,
    LearningInsight,
    RecordAnalysis,
)
from .market import MarketSnapshot, MarketAdaptations
from .document import GeneratedDocument, StyleDeclarations, SECTION_ORDER
from .outcome import (
    GenerationWarning,
    GenerationErrorInfo,
    GenerationOutcome,
    GenerationResult,
)
from .learning import (
    GenerationRecord,
    LearnedPattern,
    LearningStatus,
    PatternLibrarySnapshot,
)

__all__ = [
    # Design
    "ColorScheme",
    "TypographySystem",
    "LayoutSystem",
    "AnimationProfile",
    "DesignSystem",
    # Request
    "PropertyListing",
    "AgentProfile",
    "GenerationRequest",
    # Analysis
    "ColorHarmony",
    "LayoutSignature",
    "TypographySignature",
    "ContentSignature",
    "DesignPatterns",
    "Recommendation",
    "LearningInsight",
    "RecordAnalysis",
    # Market
    "MarketSnapshot",
    "MarketAdaptations",
    # Document
    "GeneratedDocument",
    "StyleDeclarations",
    "SECTION_ORDER",
    # Outcome
    "GenerationWarning",
    "GenerationErrorInfo",
    "GenerationOutcome",
    "GenerationResult",
    # Learning
    "GenerationRecord",
    "LearnedPattern",
    "LearningStatus",
    "PatternLibrarySnapshot",
]
