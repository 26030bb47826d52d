"""
Pattern analysis - quantify design quality of a generated flyer.

Works on the structured style declarations the assembler emits. Raw CSS/HTML
from an external renderer goes through declarations_from_css first, which is
a narrow regex reader that tolerates false negatives.

Every function here is total: empty or malformed input yields the lowest buckets.
"""
import re
import logging
from typing import Optional

import numpy as np

from ..models.analysis import (
    ColorAnalysis,
    ColorFactors,
    ColorHarmony,
    ContentSignature,
    DesignPatterns,
    IndicatorScore,
    LayoutSignature,
    Responsiveness,
    TypographySignature,
    VisualHierarchy,
)
from ..models.document import DocumentContent, GeneratedDocument, StyleDeclarations


logger = logging.getLogger(__name__)


COLOR_REGEX = re.compile(r"#[0-9a-fA-F]{6}\b|#[0-9a-fA-F]{3}\b|rgba?\([^)]*\)")

RESPONSIVE_FEATURES = ["media-queries", "flexible-units", "responsive-images", "mobile-first"]

ALIGNMENT_NAMES = {
    "center": "centered",
    "left": "left",
    "start": "left",
    "flex-start": "left",
    "right": "right",
    "end": "right",
    "flex-end": "right",
    "justify": "justified",
}

# Substring markers for the CSS reader
CSS_FLAG_MARKERS = {
    "box-shadow": "box-shadow",
    "text-shadow": "text-shadow",
    "border": "border",
    "background": "background",
    "margin": "margin",
    "padding": "padding",
    "gap": "gap",
    "position": "position",
    "z-index": "z-index",
    "media-queries": "@media",
}

CTA_REGEX = re.compile(r"call|contact|schedule|view|tour|visit|rsvp|button|cta", re.IGNORECASE)


def parse_color(value: str) -> Optional[tuple[int, int, int]]:
    """
    Parse #rgb, #rrggbb, rgb() or rgba() into an RGB triple.
    Returns None for anything else.
    """
    if not isinstance(value, str):
        return None
    value = value.strip().lower()

    if value.startswith("#"):
        digits = value[1:]
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        if len(digits) != 6:
            return None
        try:
            return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)
        except ValueError:
            return None

    match = re.match(r"rgba?\(([^)]*)\)", value)
    if not match:
        return None
    parts = [p.strip() for p in match.group(1).split(",")]
    if len(parts) < 3:
        return None
    try:
        channels = [int(float(p)) for p in parts[:3]]
    except ValueError:
        return None
    if any(c < 0 or c > 255 for c in channels):
        return None
    return channels[0], channels[1], channels[2]


def _distinct_colors(colors: list[str]) -> tuple[list[str], np.ndarray]:
    """Distinct parseable colors (first spelling kept) and their RGB matrix."""
    seen = {}
    for color in colors:
        rgb = parse_color(color)
        if rgb is not None and rgb not in seen:
            seen[rgb] = color.strip().lower()

    if not seen:
        return [], np.zeros((0, 3), dtype=float)
    return list(seen.values()), np.array(list(seen.keys()), dtype=float)


def _classify(rgb: np.ndarray) -> dict[str, np.ndarray]:
    """Vectorised color-role masks."""
    brightness = rgb.mean(axis=1)
    high = rgb.max(axis=1)
    low = rgb.min(axis=1)
    saturation = np.divide(high - low, high, out=np.zeros_like(high), where=high > 0)

    return {
        "primary": saturation > 0.3,
        "accent": brightness > 128,
        "neutral": (high - low) < 50,
        "dark": brightness < 128,
        "light": brightness > 128,
    }


def _indicator(hits: list[bool]) -> IndicatorScore:
    score = sum(1 for hit in hits if hit) / len(hits)
    if score > 0.75:
        level = "excellent"
    elif score > 0.5:
        level = "good"
    else:
        level = "needs-improvement"
    return IndicatorScore(score=score, level=level)


class PatternAnalyzer:
    """
    Derives DesignPatterns from a generated document.
    Stateless: safe to share across threads.
    """

    def color_harmony(self, colors: list[str]) -> ColorHarmony:
        """
        Harmony = mean(contrast, balance, cohesion) over distinct colors.

        contrast: 1 when dark and light colors both exist, else 0.3
        balance: 1 - |primary - accent| / total, or 1 when that skew is under 0.5
        cohesion: 1 for five or fewer colors, else 0.8
        """
        distinct, rgb = _distinct_colors(colors or [])
        if len(distinct) < 2:
            return ColorHarmony(score=0.5, harmony="insufficient")

        masks = _classify(rgb)
        total = len(distinct)

        contrast = 1.0 if masks["dark"].any() and masks["light"].any() else 0.3

        skew = abs(int(masks["primary"].sum()) - int(masks["accent"].sum())) / total
        balance = 1.0 if skew < 0.5 else 1.0 - skew

        cohesion = 1.0 if total <= 5 else 0.8

        score = float(np.mean([contrast, balance, cohesion]))
        if score > 0.7:
            harmony = "excellent"
        elif score > 0.5:
            harmony = "good"
        else:
            harmony = "needs-improvement"

        return ColorHarmony(
            score=score,
            harmony=harmony,
            factors=ColorFactors(contrast=contrast, balance=balance, cohesion=cohesion),
        )

    def color_analysis(self, declarations: StyleDeclarations) -> ColorAnalysis:
        colors = list(declarations.declared_colors)
        if not colors and declarations.palette is not None:
            colors = declarations.palette.all_colors

        distinct, rgb = _distinct_colors(colors)
        if distinct:
            masks = _classify(rgb)
            primary = [c for c, hit in zip(distinct, masks["primary"]) if hit]
            accent = [c for c, hit in zip(distinct, masks["accent"]) if hit]
            neutral = [c for c, hit in zip(distinct, masks["neutral"]) if hit]
        else:
            primary, accent, neutral = [], [], []

        return ColorAnalysis(
            primary_colors=primary,
            accent_colors=accent,
            neutral_colors=neutral,
            distinct_colors=distinct,
            harmony=self.color_harmony(distinct),
        )

    def responsiveness(self, declarations: StyleDeclarations) -> Responsiveness:
        features = [f for f in RESPONSIVE_FEATURES if declarations.has_flag(f)]
        score = len(features) / len(RESPONSIVE_FEATURES)
        if score >= 0.75:
            level = "excellent"
        elif score >= 0.5:
            level = "good"
        else:
            level = "basic"
        return Responsiveness(score=score, level=level, features=features)

    def layout_signature(self, declarations: StyleDeclarations) -> LayoutSignature:
        if declarations.has_flag("css-grid"):
            grid_system = "css-grid"
        elif declarations.has_flag("flexbox"):
            grid_system = "flexbox"
        elif declarations.has_flag("float"):
            grid_system = "float"
        else:
            grid_system = "traditional"

        return LayoutSignature(
            grid_system=grid_system,
            spacing=self._spacing_bucket(declarations.spacing_tokens),
            alignment=self._alignment(declarations.alignment),
            responsiveness=self.responsiveness(declarations),
        )

    def _spacing_bucket(self, tokens: dict[str, str]) -> str:
        if any(name.startswith("--spacing-") for name in tokens):
            return "consistent"

        values = " ".join(tokens.values())
        if re.search(r"(?<![\d.])[234]rem", values):
            return "generous"
        if re.search(r"(?<![\d.])0?\.(25|5)rem", values):
            return "tight"
        if re.search(r"(?<![\d.])1(\.5)?rem", values):
            return "balanced"
        return "unknown"

    def _alignment(self, alignment: list[str]) -> str:
        for value in alignment:
            name = ALIGNMENT_NAMES.get(value.strip().lower())
            if name:
                return name
        return "mixed"

    def typography_signature(self, declarations: StyleDeclarations) -> TypographySignature:
        families = list(dict.fromkeys(declarations.font_families))
        sizes = list(dict.fromkeys(declarations.font_sizes))
        weights = list(dict.fromkeys(declarations.font_weights))

        if len(sizes) >= 4 and len(weights) >= 3:
            hierarchy = "strong"
        elif len(sizes) >= 3 and len(weights) >= 2:
            hierarchy = "moderate"
        else:
            hierarchy = "basic"

        return TypographySignature(
            font_families=families,
            font_sizes=sizes,
            font_weights=weights,
            hierarchy=hierarchy,
        )

    def content_signature(self, content: Optional[DocumentContent]) -> ContentSignature:
        if content is None:
            return ContentSignature()
        return self._content_counts(
            sections=len(content.sections()),
            images=len(content.image_refs()),
            text_blocks=len(content.text_blocks()),
            calls_to_action=len(content.calls_to_action()),
        )

    def content_signature_from_html(self, html: str) -> ContentSignature:
        """Tag counts from rendered markup."""
        if not isinstance(html, str) or not html:
            return ContentSignature()
        return self._content_counts(
            sections=len(re.findall(r"<(?:section|div|article|aside)\b[^>]*>", html)),
            images=len(re.findall(r"<img\b[^>]*>", html)),
            text_blocks=len(re.findall(r"<(?:p|h[1-6]|span)\b[^>]*>", html)),
            calls_to_action=len(CTA_REGEX.findall(html)),
        )

    def _content_counts(
        self,
        sections: int,
        images: int,
        text_blocks: int,
        calls_to_action: int,
    ) -> ContentSignature:
        if text_blocks == 0:
            balance = "image-heavy"
        elif images == 0:
            balance = "text-heavy"
        else:
            ratio = images / text_blocks
            if ratio > 0.5:
                balance = "image-balanced"
            elif ratio < 0.2:
                balance = "text-balanced"
            else:
                balance = "well-balanced"

        return ContentSignature(
            sections=sections,
            images=images,
            text_blocks=text_blocks,
            calls_to_action=calls_to_action,
            balance=balance,
        )

    def visual_hierarchy(self, declarations: StyleDeclarations) -> VisualHierarchy:
        flag = declarations.has_flag
        return VisualHierarchy(
            contrast=_indicator([
                flag("box-shadow"), flag("text-shadow"), flag("border"), flag("background"),
            ]),
            spacing=_indicator([
                flag("margin"), flag("padding"), flag("gap"), bool(declarations.spacing_tokens),
            ]),
            emphasis=_indicator([
                bool(declarations.font_weights),
                bool(declarations.font_sizes),
                bool(declarations.declared_colors),
                flag("background"),
            ]),
            flow=_indicator([
                flag("css-grid"), flag("flexbox"), flag("position"), flag("z-index"),
            ]),
        )

    def analyze_declarations(
        self,
        declarations: Optional[StyleDeclarations],
        content: Optional[DocumentContent] = None,
    ) -> DesignPatterns:
        declarations = declarations or StyleDeclarations()
        return DesignPatterns(
            color_usage=self.color_analysis(declarations),
            layout_structure=self.layout_signature(declarations),
            typography=self.typography_signature(declarations),
            content_structure=self.content_signature(content),
            visual_hierarchy=self.visual_hierarchy(declarations),
        )

    def analyze(self, document: Optional[GeneratedDocument]) -> DesignPatterns:
        """
        Analyze a generated document.

        Args:
            document: Generated document, or None

        Returns:
            DesignPatterns (lowest buckets when nothing is declared)
        """
        if document is None:
            return self.analyze_declarations(None)
        return self.analyze_declarations(document.style, document.content)

    def analyze_markup(self, css: str, html: str = "") -> DesignPatterns:
        """Analyze raw CSS/HTML produced by an external renderer."""
        patterns = self.analyze_declarations(declarations_from_css(css, html))
        patterns.content_structure = self.content_signature_from_html(html)
        return patterns


def declarations_from_css(css: str, html: str = "") -> StyleDeclarations:
    """
    Read style declarations out of raw CSS (and inline styles in HTML).
    Misses are expected; it never raises.
    """
    css = css if isinstance(css, str) else ""
    html = html if isinstance(html, str) else ""
    text = f"{css}\n{html}"
    if not text.strip():
        return StyleDeclarations()

    colors = list(dict.fromkeys(m.group(0).lower() for m in COLOR_REGEX.finditer(text)))

    families = [
        m.group(1).replace('"', "").replace("'", "").strip()
        for m in re.finditer(r"font-family\s*:\s*([^;}]+)", text)
    ]
    families = [family for family in dict.fromkeys(families) if family]
    sizes = [m.group(1).strip() for m in re.finditer(r"font-size\s*:\s*([^;}]+)", text)]
    weights = [m.group(1).strip() for m in re.finditer(r"font-weight\s*:\s*([^;}]+)", text)]

    spacing = {}
    for m in re.finditer(r"(--spacing-[\w-]+)\s*:\s*([^;}]+)", text):
        spacing[m.group(1)] = m.group(2).strip()
    for m in re.finditer(r"(?<![\w-])(margin|padding|gap)\s*:\s*([^;}]+)", text):
        spacing.setdefault(m.group(1), m.group(2).strip())

    flags = []
    if re.search(r"display\s*:\s*grid", text) or "grid-template-columns" in text:
        flags.append("css-grid")
    if re.search(r"display\s*:\s*flex", text):
        flags.append("flexbox")
    if re.search(r"float\s*:\s*(left|right)", text):
        flags.append("float")
    for flag, marker in CSS_FLAG_MARKERS.items():
        if marker in text:
            flags.append(flag)
    if re.search(r"\d(?:rem|em|vw|vh)\b", text):
        flags.append("flexible-units")
    if re.search(r"(?:max-)?width\s*:\s*100%", text):
        flags.append("responsive-images")
    if "min-width" in text and "max-width" not in text:
        flags.append("mobile-first")

    alignment = [
        m.group(1).lower()
        for m in re.finditer(r"(?:text-align|justify-content)\s*:\s*([\w-]+)", text)
    ]

    logger.debug(f"Read {len(colors)} colors and {len(flags)} layout flags from CSS")
    return StyleDeclarations(
        declared_colors=colors,
        font_families=families,
        font_sizes=sizes,
        font_weights=weights,
        spacing_tokens=spacing,
        layout_flags=flags,
        alignment=alignment,
    )
