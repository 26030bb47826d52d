"""
Style catalog - static lookup of design systems.
"""
import logging
from typing import Optional

from pydantic import BaseModel

from ..config import get_config
from ..errors import UNKNOWN_STYLE_WARNING
from ..models.design import (
    AnimationProfile,
    ColorScheme,
    DesignSystem,
    LayoutSystem,
    MotionTiming,
    TypeScale,
    TypographySystem,
)
from ..models.outcome import GenerationWarning


logger = logging.getLogger(__name__)


DEFAULT_STYLE_ID = "modern-contemporary"

_EASE_ELEGANT = [0.25, 0.46, 0.45, 0.94]
_EASE_STANDARD = [0.4, 0, 0.2, 1]


COLOR_SCHEMES: dict[str, ColorScheme] = {
    "luxury-gold-black": ColorScheme(
        id="luxury-gold-black",
        primary=["#1a1a1a", "#2c2c2c", "#3d3d3d"],
        accent=["#d4af37", "#b8860b", "#daa520"],
        neutral=["#f8f8f8", "#e8e8e8", "#d8d8d8"],
        gradient="linear-gradient(135deg, #d4af37 0%, #b8860b 100%)",
    ),
    "modern-blue-white": ColorScheme(
        id="modern-blue-white",
        primary=["#1e40af", "#3b82f6", "#60a5fa"],
        accent=["#0f172a", "#1e293b", "#334155"],
        neutral=["#ffffff", "#f8fafc", "#f1f5f9"],
        gradient="linear-gradient(135deg, #1e40af 0%, #3b82f6 100%)",
    ),
    "classic-navy-cream": ColorScheme(
        id="classic-navy-cream",
        primary=["#1e3a8a", "#2563eb", "#3b82f6"],
        accent=["#92400e", "#a16207", "#ca8a04"],
        neutral=["#fefce8", "#fef3c7", "#fde68a"],
        gradient="linear-gradient(135deg, #1e3a8a 0%, #2563eb 100%)",
    ),
    "premium-gold-silver": ColorScheme(
        id="premium-gold-silver",
        primary=["#d4af37", "#b8860b", "#daa520"],
        accent=["#6b7280", "#9ca3af", "#d1d5db"],
        neutral=["#000000", "#111827", "#1f2937"],
        gradient="linear-gradient(135deg, #d4af37 0%, #b8860b 50%, #daa520 100%)",
    ),
}


TYPOGRAPHY_SYSTEMS: dict[str, TypographySystem] = {
    "luxury-serif": TypographySystem(
        id="luxury-serif",
        primary="Playfair Display",
        secondary="Montserrat",
        accent="Great Vibes",
        weights={
            "primary": [400, 500, 600, 700, 900],
            "secondary": [300, 400, 500, 600, 700],
            "accent": [400],
        },
        scale=TypeScale(
            h1="clamp(2.5rem, 6vw, 4rem)",
            h2="clamp(2rem, 4vw, 3rem)",
            h3="clamp(1.5rem, 3vw, 2.25rem)",
            body="clamp(1rem, 2vw, 1.125rem)",
            caption="clamp(0.875rem, 1.5vw, 1rem)",
        ),
    ),
    "modern-sans": TypographySystem(
        id="modern-sans",
        primary="Inter",
        secondary="Montserrat",
        accent="Poppins",
        weights={
            "primary": [300, 400, 500, 600, 700],
            "secondary": [400, 500, 600],
            "accent": [400, 500, 600],
        },
        scale=TypeScale(
            h1="clamp(2.25rem, 5vw, 3.5rem)",
            h2="clamp(1.75rem, 4vw, 2.75rem)",
            h3="clamp(1.25rem, 3vw, 2rem)",
            body="clamp(1rem, 2vw, 1.125rem)",
            caption="clamp(0.875rem, 1.5vw, 1rem)",
        ),
    ),
    "classic-serif": TypographySystem(
        id="classic-serif",
        primary="Bodoni Moda",
        secondary="Crimson Text",
        accent="Playfair Display",
        weights={
            "primary": [400, 500, 600, 700],
            "secondary": [400, 500, 600],
            "accent": [400, 500, 600],
        },
        scale=TypeScale(
            h1="clamp(2.5rem, 6vw, 4rem)",
            h2="clamp(2rem, 4vw, 3rem)",
            h3="clamp(1.5rem, 3vw, 2.25rem)",
            body="clamp(1rem, 2vw, 1.125rem)",
            caption="clamp(0.875rem, 1.5vw, 1rem)",
        ),
    ),
    "premium-combo": TypographySystem(
        id="premium-combo",
        primary="Futura",
        secondary="Bodoni Moda",
        accent="Great Vibes",
        weights={
            "primary": [300, 400, 500, 600, 700],
            "secondary": [400, 500, 600, 700],
            "accent": [400],
        },
        scale=TypeScale(
            h1="clamp(2.75rem, 7vw, 4.5rem)",
            h2="clamp(2.25rem, 5vw, 3.5rem)",
            h3="clamp(1.75rem, 4vw, 2.75rem)",
            body="clamp(1.125rem, 2.5vw, 1.25rem)",
            caption="clamp(1rem, 2vw, 1.125rem)",
        ),
    ),
}


LAYOUT_SYSTEMS: dict[str, LayoutSystem] = {
    "golden-ratio": LayoutSystem(
        id="golden-ratio",
        ratio=1.618,
        grid="golden-grid",
        spacing="golden-spacing",
        proportions="golden-proportions",
        description="Uses the golden ratio (1.618) for visual harmony and professional proportions.",
    ),
    "grid-modern": LayoutSystem(
        id="grid-modern",
        columns=12,
        gutters="modern-gutters",
        spacing="modern-spacing",
        proportions="modern-proportions",
        breakpoints="mobile-first",
        description="Modern 12-column grid with clean spacing and contemporary proportions.",
    ),
    "traditional-grid": LayoutSystem(
        id="traditional-grid",
        columns=8,
        gutters="traditional-gutters",
        spacing="traditional-spacing",
        proportions="traditional-proportions",
        description="Traditional 8-column grid with classic spacing and elegant proportions.",
    ),
    "luxury-asymmetric": LayoutSystem(
        id="luxury-asymmetric",
        ratio=1.414,
        grid="asymmetric-grid",
        spacing="luxury-spacing",
        proportions="luxury-proportions",
        display="flex",
        description="Asymmetric layout with luxury spacing and sophisticated proportions.",
    ),
}


ANIMATION_PROFILES: dict[str, AnimationProfile] = {
    "luxury-real-estate": AnimationProfile(
        id="luxury-real-estate",
        entrance=MotionTiming(duration=1.0, ease=_EASE_ELEGANT, stagger=0.15),
        hover=MotionTiming(duration=0.4, ease=_EASE_STANDARD, scale=1.03, y=-3),
        transition=MotionTiming(duration=0.6, ease=_EASE_ELEGANT),
    ),
    "modern-contemporary": AnimationProfile(
        id="modern-contemporary",
        entrance=MotionTiming(duration=0.6, ease=_EASE_STANDARD, stagger=0.1),
        hover=MotionTiming(duration=0.2, ease=_EASE_STANDARD, scale=1.02, y=-2),
        transition=MotionTiming(duration=0.3, ease=_EASE_STANDARD),
    ),
    "classic-elegant": AnimationProfile(
        id="classic-elegant",
        entrance=MotionTiming(duration=0.8, ease=_EASE_ELEGANT, stagger=0.12),
        hover=MotionTiming(duration=0.3, ease=_EASE_ELEGANT, scale=1.02, y=-2),
        transition=MotionTiming(duration=0.5, ease=_EASE_ELEGANT),
    ),
    "premium-luxury": AnimationProfile(
        id="premium-luxury",
        entrance=MotionTiming(duration=1.2, ease=_EASE_ELEGANT, stagger=0.2),
        hover=MotionTiming(duration=0.5, ease=_EASE_ELEGANT, scale=1.04, y=-4),
        transition=MotionTiming(duration=0.7, ease=_EASE_ELEGANT),
    ),
}


def _design_system(
    style_id: str,
    name: str,
    description: str,
    visual_style: str,
    color_scheme: str,
    typography: str,
    layout: str,
) -> DesignSystem:
    return DesignSystem(
        id=style_id,
        name=name,
        description=description,
        visual_style=visual_style,
        color_scheme_ref=color_scheme,
        typography_ref=typography,
        layout_ref=layout,
        animation_ref=style_id,
        color_scheme=COLOR_SCHEMES[color_scheme],
        typography=TYPOGRAPHY_SYSTEMS[typography],
        layout=LAYOUT_SYSTEMS[layout],
        animation=ANIMATION_PROFILES[style_id],
    )


DESIGN_SYSTEMS: dict[str, DesignSystem] = {
    "luxury-real-estate": _design_system(
        "luxury-real-estate",
        "Luxury Real Estate",
        "Premium, sophisticated design for high-end properties",
        "elegant, sophisticated, premium",
        "luxury-gold-black",
        "luxury-serif",
        "golden-ratio",
    ),
    "modern-contemporary": _design_system(
        "modern-contemporary",
        "Modern Contemporary",
        "Clean, minimalist design with modern aesthetics",
        "clean, minimal, contemporary",
        "modern-blue-white",
        "modern-sans",
        "grid-modern",
    ),
    "classic-elegant": _design_system(
        "classic-elegant",
        "Classic Elegant",
        "Timeless, traditional design with elegant touches",
        "traditional, elegant, timeless",
        "classic-navy-cream",
        "classic-serif",
        "traditional-grid",
    ),
    "premium-luxury": _design_system(
        "premium-luxury",
        "Premium Luxury",
        "Ultra-premium design with luxury branding",
        "luxury, premium, sophisticated",
        "premium-gold-silver",
        "premium-combo",
        "luxury-asymmetric",
    ),
}


# Market style hint -> catalog id
STYLE_KEYWORDS = {
    "luxury": "luxury-real-estate",
    "modern": "modern-contemporary",
    "contemporary": "modern-contemporary",
    "minimalist": "modern-contemporary",
    "urban": "modern-contemporary",
    "traditional": "classic-elegant",
    "classic": "classic-elegant",
}


class StyleResolution(BaseModel):
    """Result of a catalog lookup."""
    requested_id: Optional[str] = None
    design_system: DesignSystem
    fallback_used: bool = False
    warning: Optional[GenerationWarning] = None


class StyleCatalog:
    """
    Read-only catalog of design systems.
    Unknown ids never raise; they fall back to the default style.
    """

    def __init__(
        self,
        design_systems: Optional[dict[str, DesignSystem]] = None,
        default_style_id: Optional[str] = None,
    ):
        self._systems = dict(design_systems or DESIGN_SYSTEMS)
        default_id = default_style_id or get_config().catalog.default_style_id
        if default_id not in self._systems:
            logger.warning(f"Configured default style '{default_id}' not in catalog, using {DEFAULT_STYLE_ID}")
            default_id = DEFAULT_STYLE_ID
        self.default_style_id = default_id

    def get(self, style_id: Optional[str]) -> Optional[DesignSystem]:
        """Exact lookup, None when unknown."""
        if not style_id:
            return None
        return self._systems.get(style_id)

    def resolve(self, style_id: Optional[str]) -> DesignSystem:
        """Return the catalog entry for style_id, or the default entry."""
        return self.resolve_outcome(style_id).design_system

    def resolve_outcome(self, style_id: Optional[str]) -> StyleResolution:
        """Lookup that also reports the fallback as a non-fatal warning."""
        system = self.get(style_id)
        if system is not None:
            return StyleResolution(requested_id=style_id, design_system=system)

        default = self._systems[self.default_style_id]
        logger.warning(f"Unknown style '{style_id}', falling back to {default.id}")
        warning = GenerationWarning(
            kind=UNKNOWN_STYLE_WARNING,
            message=f"Unknown style '{style_id}', using '{default.id}'",
            details={"requested": style_id, "resolved": default.id},
        )
        return StyleResolution(
            requested_id=style_id,
            design_system=default,
            fallback_used=True,
            warning=warning,
        )

    def style_for_keyword(self, keyword: Optional[str], price_range: Optional[str] = None) -> str:
        """
        Pick a catalog id from a market style hint.
        Top price segment upgrades non-luxury hints to premium-luxury.
        """
        style_id = STYLE_KEYWORDS.get((keyword or "").lower(), self.default_style_id)
        if price_range == "800k-plus" and style_id != "luxury-real-estate":
            style_id = "premium-luxury"
        if style_id not in self._systems:
            return self.default_style_id
        return style_id

    def list_styles(self) -> list[DesignSystem]:
        return list(self._systems.values())

    def style_ids(self) -> list[str]:
        return list(self._systems)

    def __contains__(self, style_id: object) -> bool:
        return style_id in self._systems
