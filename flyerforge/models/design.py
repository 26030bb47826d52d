"""
Design system models - color, typography, layout and animation bundles.
"""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ColorScheme(BaseModel):
    """Palette with three shades per role."""
    model_config = ConfigDict(frozen=True)

    id: str
    primary: list[str] = Field(description="Primary shades, darkest role first")
    accent: list[str] = Field(description="Accent shades")
    neutral: list[str] = Field(description="Background / neutral shades")
    gradient: str = ""

    @property
    def all_colors(self) -> list[str]:
        """Lead shade of each role first, then the remaining shades."""
        leads = [shades[0] for shades in (self.primary, self.accent, self.neutral) if shades]
        rest = self.primary[1:] + self.accent[1:] + self.neutral[1:]
        return leads + rest


class TypeScale(BaseModel):
    """Responsive font-size scale."""
    model_config = ConfigDict(frozen=True)

    h1: str
    h2: str
    h3: str
    body: str
    caption: str


class TypographySystem(BaseModel):
    """Font stack, weight sets and responsive scale."""
    model_config = ConfigDict(frozen=True)

    id: str
    primary: str
    secondary: str
    accent: str
    weights: dict[str, list[int]] = Field(default_factory=dict)
    scale: TypeScale


class LayoutSystem(BaseModel):
    """Grid, spacing and proportion descriptors."""
    model_config = ConfigDict(frozen=True)

    id: str
    columns: Optional[int] = None
    ratio: Optional[float] = None
    grid: str = ""
    gutters: str = ""
    spacing: str = ""
    proportions: str = ""
    display: Literal["grid", "flex"] = "grid"
    breakpoints: Literal["mobile-first", "desktop-first"] = "desktop-first"
    description: str = ""


class MotionTiming(BaseModel):
    """Timing for one animation phase."""
    model_config = ConfigDict(frozen=True)

    duration: float
    ease: list[float] = Field(default_factory=list)
    stagger: Optional[float] = None
    scale: Optional[float] = None
    y: Optional[float] = None


class AnimationProfile(BaseModel):
    """Entrance, hover and transition timings for a style."""
    model_config = ConfigDict(frozen=True)

    id: str
    entrance: MotionTiming
    hover: MotionTiming
    transition: MotionTiming


class DesignSystem(BaseModel):
    """
    Named bundle of color scheme, typography, layout and animation profile.
    Catalog entries are created once and never mutated.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    visual_style: str = ""

    # References into the catalog tables
    color_scheme_ref: str
    typography_ref: str
    layout_ref: str
    animation_ref: str

    # Resolved entries
    color_scheme: ColorScheme
    typography: TypographySystem
    layout: LayoutSystem
    animation: AnimationProfile
