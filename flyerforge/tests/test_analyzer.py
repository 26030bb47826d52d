"""
Tests for design pattern analysis.
"""
from datetime import date

import pytest

from flyerforge.models.document import StyleDeclarations
from flyerforge.models.request import GenerationRequest, PropertyListing
from flyerforge.pipeline.analyzer import PatternAnalyzer, declarations_from_css, parse_color
from flyerforge.pipeline.assembler import DocumentAssembler
from flyerforge.pipeline.catalog import StyleCatalog
from flyerforge.pipeline.market import MarketIntelligenceEngine


SAMPLE_CSS = """
:root { --spacing-md: 1rem; --spacing-xl: 2rem; }
.flyer-grid { display: grid; grid-template-columns: repeat(12, 1fr); gap: 1rem; }
.flyer-headline { font-family: 'Playfair Display', serif; font-size: 3rem; font-weight: 700; color: #1a1a1a; }
.flyer-body { font-family: 'Montserrat', sans-serif; font-size: 1rem; font-weight: 400; }
.flyer-card { background: #f8f8f8; box-shadow: 0 4px 12px rgba(0, 0, 0, 0.1); text-align: center; }
.flyer-button { background: #d4af37; }
img { width: 100%; }
@media (min-width: 768px) { .flyer-headline { font-size: 4rem; } }
"""


class TestParseColor:
    """Tests for color parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("#fff", (255, 255, 255)),
        ("#1A1A1A", (26, 26, 26)),
        ("rgb(10, 20, 30)", (10, 20, 30)),
        ("rgba(0, 0, 0, 0.5)", (0, 0, 0)),
    ])
    def test_valid(self, value, expected):
        """Test supported color notations."""
        assert parse_color(value) == expected

    @pytest.mark.parametrize("value", ["blue", "#12", "rgb(300, 0, 0)", "rgb(1, 2)", "", None])
    def test_invalid(self, value):
        """Test that anything else is rejected without raising."""
        assert parse_color(value) is None


class TestColorHarmony:
    """Tests for color harmony scoring."""

    @pytest.fixture
    def analyzer(self) -> PatternAnalyzer:
        return PatternAnalyzer()

    @pytest.mark.parametrize("colors", [[], ["#ffffff"], ["#fff", "#ffffff"], ["not-a-color"]])
    def test_insufficient(self, analyzer, colors):
        """Test that fewer than two distinct colors score 0.5."""
        harmony = analyzer.color_harmony(colors)

        assert harmony.score == pytest.approx(0.5)
        assert harmony.harmony == "insufficient"

    def test_dark_and_light(self, analyzer):
        """Test that one dark and one light color scores above 0.7."""
        harmony = analyzer.color_harmony(["#000000", "#ffffff"])

        assert harmony.score > 0.7
        assert harmony.harmony == "excellent"
        assert harmony.factors.contrast == 1.0

    def test_balanced_palette(self, analyzer):
        """Test a small palette with contrast and balance."""
        harmony = analyzer.color_harmony(["#1a1a1a", "#f8f8f8", "#d4af37"])

        assert harmony.score == pytest.approx(1.0)

    def test_no_contrast(self, analyzer):
        """Test that all-dark palettes lose the contrast factor."""
        harmony = analyzer.color_harmony(["#000000", "#111111"])

        assert harmony.factors.contrast == pytest.approx(0.3)

    def test_large_palette_cohesion(self, analyzer):
        """Test that more than five colors lowers cohesion."""
        colors = ["#000000", "#ffffff", "#ff0000", "#00ff00", "#0000ff", "#888888"]
        harmony = analyzer.color_harmony(colors)

        assert harmony.factors.cohesion == pytest.approx(0.8)
        assert 0 <= harmony.score <= 1


class TestSignatures:
    """Tests for layout, typography and content signatures."""

    @pytest.fixture
    def analyzer(self) -> PatternAnalyzer:
        return PatternAnalyzer()

    def test_responsiveness_levels(self, analyzer):
        """Test responsiveness score and level."""
        full = StyleDeclarations(
            layout_flags=["media-queries", "flexible-units", "responsive-images", "mobile-first"],
        )
        half = StyleDeclarations(layout_flags=["media-queries", "flexible-units"])

        assert analyzer.responsiveness(full).score == 1.0
        assert analyzer.responsiveness(full).level == "excellent"
        assert analyzer.responsiveness(half).level == "good"
        assert analyzer.responsiveness(StyleDeclarations()).level == "basic"

    def test_grid_classification(self, analyzer):
        """Test grid system detection."""
        assert analyzer.layout_signature(StyleDeclarations(layout_flags=["css-grid"])).grid_system == "css-grid"
        assert analyzer.layout_signature(StyleDeclarations(layout_flags=["flexbox"])).grid_system == "flexbox"
        assert analyzer.layout_signature(StyleDeclarations()).grid_system == "traditional"

    def test_spacing_buckets(self, analyzer):
        """Test spacing classification."""
        def spacing(tokens):
            return analyzer.layout_signature(StyleDeclarations(spacing_tokens=tokens)).spacing

        assert spacing({"--spacing-md": "1rem"}) == "consistent"
        assert spacing({"padding": "3rem"}) == "generous"
        assert spacing({"margin": "0.5rem"}) == "tight"
        assert spacing({"gap": "1.5rem"}) == "balanced"
        assert spacing({}) == "unknown"

    def test_typography_hierarchy(self, analyzer):
        """Test hierarchy thresholds."""
        strong = StyleDeclarations(font_sizes=["4rem", "3rem", "2rem", "1rem"], font_weights=["700", "600", "400"])
        moderate = StyleDeclarations(font_sizes=["3rem", "2rem", "1rem"], font_weights=["700", "400"])
        basic = StyleDeclarations(font_sizes=["1rem", "1rem"], font_weights=["400"])

        assert analyzer.typography_signature(strong).hierarchy == "strong"
        assert analyzer.typography_signature(moderate).hierarchy == "moderate"
        assert analyzer.typography_signature(basic).hierarchy == "basic"

    @pytest.mark.parametrize("html,expected", [
        ("<img src='a.jpg'>", "image-heavy"),
        ("<p>a</p><p>b</p>", "text-heavy"),
        ("<img><img><p>a</p>", "image-balanced"),
        ("<img>" + "<p>x</p>" * 10, "text-balanced"),
        ("<img><p>a</p><p>b</p><p>c</p>", "well-balanced"),
    ])
    def test_content_balance(self, analyzer, html, expected):
        """Test content balance buckets."""
        assert analyzer.content_signature_from_html(html).balance == expected


class TestAnalyze:
    """Tests for whole-document analysis."""

    @pytest.fixture
    def analyzer(self) -> PatternAnalyzer:
        return PatternAnalyzer()

    @pytest.fixture
    def document(self):
        """A luxury flyer generated in the fall."""
        catalog = StyleCatalog(default_style_id="modern-contemporary")
        adaptations = MarketIntelligenceEngine().adaptations(PropertyListing(), date(2024, 10, 15))
        return DocumentAssembler().assemble(
            GenerationRequest(), catalog.resolve("luxury-real-estate"), adaptations,
        )

    def test_empty_input(self, analyzer):
        """Test that no document yields the lowest buckets without raising."""
        patterns = analyzer.analyze(None)

        assert patterns.has_signal is False
        assert patterns.color_usage.harmony.harmony == "insufficient"
        assert patterns.layout_structure.grid_system == "traditional"
        assert patterns.layout_structure.spacing == "unknown"
        assert patterns.typography.hierarchy == "basic"
        assert patterns.content_structure.sections == 0

    def test_generated_document(self, analyzer, document):
        """Test analysis of an assembled document."""
        patterns = analyzer.analyze(document)

        assert patterns.has_signal is True
        assert patterns.color_usage.harmony.harmony == "excellent"
        assert "#d4af37" in patterns.color_usage.distinct_colors
        assert patterns.layout_structure.grid_system == "css-grid"
        assert patterns.layout_structure.spacing == "consistent"
        assert patterns.layout_structure.alignment == "centered"
        assert patterns.typography.hierarchy == "strong"
        assert patterns.content_structure.sections == 6
        assert patterns.content_structure.balance == "text-heavy"
        assert patterns.visual_hierarchy.contrast.level == "excellent"


class TestDeclarationsFromCss:
    """Tests for the raw CSS reader."""

    def test_reads_declarations(self):
        """Test that colors, fonts and layout markers are found."""
        declarations = declarations_from_css(SAMPLE_CSS)

        assert "#1a1a1a" in declarations.declared_colors
        assert "#d4af37" in declarations.declared_colors
        assert "Playfair Display, serif" in declarations.font_families
        assert declarations.has_flag("css-grid")
        assert declarations.has_flag("media-queries")
        assert declarations.has_flag("mobile-first")
        assert declarations.spacing_tokens["--spacing-md"] == "1rem"
        assert "center" in declarations.alignment

    def test_analyze_markup(self):
        """Test analysis of raw renderer output."""
        html = "<section><h1>EXCLUSIVE PROPERTY</h1><img src='a.jpg'><p>Call today</p></section>"
        patterns = PatternAnalyzer().analyze_markup(SAMPLE_CSS, html)

        assert patterns.layout_structure.grid_system == "css-grid"
        assert patterns.layout_structure.responsiveness.level == "excellent"
        assert patterns.content_structure.images == 1
        assert patterns.content_structure.calls_to_action >= 1

    @pytest.mark.parametrize("css", ["", None, "}}}{{{ not css", 42])
    def test_garbage_never_raises(self, css):
        """Test that malformed input yields empty declarations."""
        declarations = declarations_from_css(css)
        patterns = PatternAnalyzer().analyze_declarations(declarations)

        assert patterns.color_usage.harmony.harmony == "insufficient"
        assert patterns.layout_structure.grid_system == "traditional"
