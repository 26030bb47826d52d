"""
Tests for market intelligence heuristics.
"""
from datetime import date

import pytest

from flyerforge.models.request import PropertyListing
from flyerforge.pipeline.market import PALETTE_HEX, MarketIntelligenceEngine, parse_price


@pytest.fixture
def engine() -> MarketIntelligenceEngine:
    return MarketIntelligenceEngine()


class TestSeason:
    """Tests for season detection."""

    @pytest.mark.parametrize("month,expected", [
        (3, "spring"),
        (5, "spring"),
        (6, "summer"),
        (8, "summer"),
        (9, "fall"),
        (11, "fall"),
        (12, "winter"),
        (1, "winter"),
        (2, "winter"),
    ])
    def test_month_mapping(self, engine, month, expected):
        """Test that season is a pure function of the month."""
        assert engine.season(month) == expected
        assert engine.season(date(2024, month, 15)) == expected


class TestPriceRange:
    """Tests for price bucketing."""

    @pytest.mark.parametrize("price,expected", [
        ("$299,999", "under-300k"),
        ("$300,000", "300k-500k"),
        ("$799,999", "500k-800k"),
        ("$800,000", "800k-plus"),
        ("$2,500,000", "800k-plus"),
        (450000, "300k-500k"),
    ])
    def test_buckets_are_contiguous(self, engine, price, expected):
        """Test bucket boundaries (lower bound inclusive)."""
        assert engine.price_range_class(price) == expected

    @pytest.mark.parametrize("price", [None, "", "Price upon request", "$abc"])
    def test_unparsable_price(self, engine, price):
        """Test that unparsable prices count as zero."""
        assert parse_price(price) == 0
        assert engine.price_range_class(price) == "under-300k"


class TestMarketCondition:
    """Tests for market condition classification."""

    def test_default_without_telemetry(self, engine):
        """Test that missing telemetry gives a balanced market."""
        assert engine.market_condition(PropertyListing()) == "balanced-market"

    def test_sellers_market(self, engine):
        """Test fast sales with price history."""
        listing = PropertyListing(days_on_market=10, price_history=[500000, 520000])

        assert engine.market_condition(listing) == "sellers-market"

    def test_fast_sale_without_history(self, engine):
        """Test that fast sales need price history to count as a sellers market."""
        assert engine.market_condition(PropertyListing(days_on_market=10)) == "balanced-market"

    def test_buyers_market(self, engine):
        """Test slow sales."""
        assert engine.market_condition(PropertyListing(days_on_market=60)) == "buyers-market"


class TestPropertyTypeClass:
    """Tests for property type classification."""

    @pytest.mark.parametrize("property_type,expected", [
        ("Single Family Home", "single-family"),
        ("Luxury Estate", "luxury"),
        ("Townhouse", "townhouse"),
        ("Downtown Condo", "condo"),
        ("Apartment", "condo"),
        ("Ranch", "single-family"),
        (None, "single-family"),
    ])
    def test_keyword_match(self, engine, property_type, expected):
        """Test keyword matching with single-family default."""
        listing = PropertyListing(property_type=property_type)

        assert engine.property_type_class(listing) == expected


class TestLocationInsights:
    """Tests for location tagging."""

    def test_waterfront(self, engine):
        """Test that lake addresses are tagged waterfront."""
        insights = engine.location_insights("123 Lake Shore Drive")

        assert insights.type == "featured"
        assert "waterfront" in insights.tags
        assert "scenic-views" in insights.highlights

    def test_no_match(self, engine):
        """Test that plain addresses get no tags."""
        insights = engine.location_insights("12 Main St")

        assert insights.type == "standard"
        assert insights.tags == []

    @pytest.mark.parametrize("address", [
        "12 Cambridge St, Boston",
        "4 Embay Court",
        "88 Chill Road",
    ])
    def test_keywords_inside_words_do_not_tag(self, engine, address):
        """Test that keywords buried inside other words are ignored."""
        insights = engine.location_insights(address)

        assert insights.tags == []
        assert insights.type == "standard"

    @pytest.mark.parametrize("address,tag", [
        ("9 Ridge Road, Asheville", "mountain"),
        ("21 Hillcrest Ave", "mountain"),
        ("300 Waterfront Blvd", "waterfront"),
        ("5 Bay Street", "waterfront"),
    ])
    def test_keywords_at_word_start_tag(self, engine, address, tag):
        """Test that keywords starting a word still tag the address."""
        assert tag in engine.location_insights(address).tags

    def test_missing_address(self, engine):
        """Test that a missing address is unknown."""
        insights = engine.location_insights(None)

        assert insights.type == "unknown"
        assert insights.tags == []


class TestAdaptations:
    """Tests for composed market adaptations."""

    def test_empty_listing(self, engine):
        """Test that an empty listing still gets a complete answer."""
        adaptations = engine.adaptations(PropertyListing(), date(2024, 10, 15))

        assert adaptations.snapshot.season == "fall"
        assert adaptations.snapshot.market_condition == "balanced-market"
        assert adaptations.snapshot.property_type_trend == "single-family"
        assert adaptations.snapshot.price_range_segment == "under-300k"
        assert adaptations.property.style == "modern"
        assert adaptations.market.confidence == 0.4

    def test_seasonal_palette(self, engine):
        """Test that the seasonal accent is the third palette color."""
        adaptations = engine.adaptations(PropertyListing(), date(2024, 10, 15))

        assert adaptations.seasonal.palette == ["warm-oranges", "deep-reds", "earthy-browns"]
        assert adaptations.seasonal.colors.accent == PALETTE_HEX["earthy-browns"]
        assert adaptations.seasonal.confidence == 0.6

    def test_seasonal_confidence_follows_activity(self, engine):
        """Test that busier seasons carry higher confidence."""
        listing = PropertyListing()

        summer = engine.adaptations(listing, date(2024, 7, 1)).seasonal.confidence
        spring = engine.adaptations(listing, date(2024, 4, 1)).seasonal.confidence
        winter = engine.adaptations(listing, date(2024, 1, 1)).seasonal.confidence

        assert summer > spring > winter

    def test_market_confidence_with_telemetry(self, engine):
        """Test that telemetry raises market-condition confidence."""
        adaptations = engine.adaptations(PropertyListing(days_on_market=60), date(2024, 10, 15))

        assert adaptations.market.condition == "buyers-market"
        assert adaptations.market.emphasis == "value-proposition"
        assert adaptations.market.confidence == 0.8

    def test_recommendations(self, engine):
        """Test prioritized market recommendations."""
        adaptations = engine.adaptations(PropertyListing(days_on_market=60), date(2024, 10, 15))
        categories = [r.category for r in adaptations.recommendations]

        assert categories == ["seasonal", "market", "property", "pricing"]
        assert adaptations.recommendations[0].priority == "high"

    def test_luxury_listing(self, engine):
        """Test property and price hints for a luxury listing."""
        listing = PropertyListing(property_type="Luxury Estate", price="$2,500,000")
        adaptations = engine.adaptations(listing, date(2024, 10, 15))

        assert adaptations.property.style == "luxury"
        assert adaptations.property.target_audience == "high-net-worth"
        assert adaptations.price_range.market_segment == "luxury-buyers"

    def test_summary(self, engine):
        """Test the heuristic table dump."""
        summary = engine.summary(date(2024, 12, 1))

        assert summary["current_season"] == "winter"
        assert set(summary["seasonal_trends"]) == {"spring", "summer", "fall", "winter"}
