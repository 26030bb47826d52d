"""
Market models - snapshot of market signals and the adaptation hints derived from it.
"""
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .analysis import Recommendation


Season = Literal["spring", "summer", "fall", "winter"]
MarketCondition = Literal["sellers-market", "buyers-market", "balanced-market"]
PropertyClass = Literal["single-family", "condo", "townhouse", "luxury"]
PriceRange = Literal["under-300k", "300k-500k", "500k-800k", "800k-plus"]


class LocationInsights(BaseModel):
    """Keyword-derived location signal."""
    type: Literal["featured", "standard", "unknown"] = "unknown"
    tags: list[str] = Field(default_factory=list, description="urban / suburban / waterfront / mountain")
    highlights: list[str] = Field(default_factory=list, description="Selling phrases for the tags")


class MarketSnapshot(BaseModel):
    """Point-in-time classification of a listing. Recomputed per request."""
    season: Season
    market_condition: MarketCondition
    property_type_trend: PropertyClass
    price_range_segment: PriceRange
    location_insights: LocationInsights = Field(default_factory=LocationInsights)
    has_market_telemetry: bool = False


class SeasonalColors(BaseModel):
    """Seasonal palette resolved to hex values."""
    primary: str
    secondary: str
    accent: str


class SeasonalAdaptation(BaseModel):
    season: Season
    palette: list[str] = Field(default_factory=list, description="Palette names, e.g. 'fresh-greens'")
    colors: Optional[SeasonalColors] = None
    features: list[str] = Field(default_factory=list)
    messaging: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.5, ge=0, le=1)


class MarketConditionAdaptation(BaseModel):
    condition: MarketCondition
    emphasis: str = "balanced-presentation"
    pricing: str = "fair-market-value"
    features: str = "standard-amenities"
    messaging: str = "good-value"
    confidence: float = Field(default=0.4, ge=0, le=1)


class PropertyAdaptation(BaseModel):
    property_type: PropertyClass
    style: str = "modern"
    features: list[str] = Field(default_factory=list)
    target_audience: str = "general"


class PriceRangeAdaptation(BaseModel):
    segment: PriceRange
    market_segment: str = ""
    key_features: list[str] = Field(default_factory=list)
    messaging: list[str] = Field(default_factory=list)


class MarketAdaptations(BaseModel):
    """
    Everything the document assembler consumes from market intelligence.
    """
    snapshot: MarketSnapshot
    seasonal: SeasonalAdaptation
    market: MarketConditionAdaptation
    property: PropertyAdaptation
    price_range: PriceRangeAdaptation
    location: LocationInsights = Field(default_factory=LocationInsights)
    recommendations: list[Recommendation] = Field(default_factory=list)
