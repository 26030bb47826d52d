"""
Configuration and environment handling for flyerforge.
"""
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()


class CatalogConfig(BaseModel):
    """Style catalog configuration."""
    default_style_id: str = Field(
        default_factory=lambda: os.getenv("FLYERFORGE_DEFAULT_STYLE", "modern-contemporary"),
        description="Design system used when a style id cannot be resolved",
    )


class AssemblerConfig(BaseModel):
    """Document assembly configuration."""
    max_features: int = Field(default=5, description="Feature list is truncated to this length")
    accent_override_confidence: float = Field(
        default=0.75,
        ge=0, le=1,
        description="Seasonal adaptations at or above this confidence replace the accent color",
    )


class LearningConfig(BaseModel):
    """Learning engine configuration."""
    min_samples_for_learning: int = Field(default=5, description="Records needed before cycles run")
    recent_window: int = Field(default=10, description="Most recent records considered per cycle")
    min_successful_records: int = Field(default=3, description="Fresh successes needed to learn")
    initial_confidence: float = Field(default=0.7, description="Confidence of a newly learned pattern")
    confidence_step: float = Field(default=0.05, description="Confidence gain per repeat observation")
    max_confidence: float = Field(default=0.95, description="Upper bound for any pattern confidence")
    top_colors: int = Field(default=5)
    top_fonts: int = Field(default=3)

    # Recommendation / insight thresholds
    harmony_threshold: float = Field(default=0.7)
    responsiveness_threshold: float = Field(default=0.6)
    excellence_threshold: float = Field(default=0.8)


class Config(BaseModel):
    """Main configuration."""
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    assembler: AssemblerConfig = Field(default_factory=AssemblerConfig)
    learning: LearningConfig = Field(default_factory=LearningConfig)

    log_level: str = Field(default_factory=lambda: os.getenv("FLYERFORGE_LOG_LEVEL", "INFO"))


# Singleton config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the singleton config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config
