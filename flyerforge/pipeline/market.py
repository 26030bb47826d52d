"""
Market intelligence - seasonal and market heuristics that bias flyer design.
All functions are pure and total: any listing, even an empty one, gets a well-formed answer.
"""
import re
import logging
from datetime import date, datetime
from typing import Any, Optional, Union

from ..models.analysis import Recommendation
from ..models.market import (
    LocationInsights,
    MarketAdaptations,
    MarketConditionAdaptation,
    MarketSnapshot,
    PriceRangeAdaptation,
    PropertyAdaptation,
    SeasonalAdaptation,
    SeasonalColors,
)
from ..models.request import PropertyListing


logger = logging.getLogger(__name__)


SEASONAL_TRENDS = {
    "spring": {
        "period": "March-May",
        "market_activity": "high",
        "buyer_demand": "increasing",
        "recommended_features": ["outdoor-spaces", "landscaping", "natural-light"],
        "color_palettes": ["fresh-greens", "bright-whites", "sky-blues"],
        "messaging": ["spring-renewal", "fresh-start", "outdoor-living"],
    },
    "summer": {
        "period": "June-August",
        "market_activity": "peak",
        "buyer_demand": "highest",
        "recommended_features": ["air-conditioning", "outdoor-entertaining", "pool-ready"],
        "color_palettes": ["warm-yellows", "cool-blues", "neutral-grays"],
        "messaging": ["summer-living", "entertainment-ready", "vacation-home"],
    },
    "fall": {
        "period": "September-November",
        "market_activity": "moderate",
        "buyer_demand": "stable",
        "recommended_features": ["energy-efficiency", "cozy-spaces", "storage"],
        "color_palettes": ["warm-oranges", "deep-reds", "earthy-browns"],
        "messaging": ["cozy-living", "energy-efficient", "family-ready"],
    },
    "winter": {
        "period": "December-February",
        "market_activity": "lower",
        "buyer_demand": "decreasing",
        "recommended_features": ["heating-systems", "insulation", "indoor-spaces"],
        "color_palettes": ["warm-whites", "deep-blues", "rich-burgundies"],
        "messaging": ["cozy-winter", "energy-savings", "investment-opportunity"],
    },
}

PALETTE_HEX = {
    "fresh-greens": "#16a34a",
    "bright-whites": "#ffffff",
    "sky-blues": "#38bdf8",
    "warm-yellows": "#facc15",
    "cool-blues": "#3b82f6",
    "neutral-grays": "#9ca3af",
    "warm-oranges": "#ea580c",
    "deep-reds": "#b91c1c",
    "earthy-browns": "#92400e",
    "warm-whites": "#fffbeb",
    "deep-blues": "#1e3a8a",
    "rich-burgundies": "#7f1d1d",
}

# How much a seasonal palette should be trusted, by market activity
ACTIVITY_CONFIDENCE = {
    "peak": 0.9,
    "high": 0.8,
    "moderate": 0.6,
    "lower": 0.5,
}

MARKET_CONDITIONS = {
    "buyers-market": {
        "characteristics": ["high-inventory", "low-demand", "price-declines"],
        "emphasis": "value-proposition",
        "pricing": "competitive-pricing",
        "features": "unique-selling-points",
        "messaging": "opportunity-to-buy",
    },
    "sellers-market": {
        "characteristics": ["low-inventory", "high-demand", "price-increases"],
        "emphasis": "quality-features",
        "pricing": "premium-positioning",
        "features": "luxury-amenities",
        "messaging": "exclusive-opportunity",
    },
    "balanced-market": {
        "characteristics": ["balanced-inventory", "stable-demand", "stable-prices"],
        "emphasis": "balanced-presentation",
        "pricing": "fair-market-value",
        "features": "standard-amenities",
        "messaging": "good-value",
    },
}

PROPERTY_TRENDS = {
    "single-family": {
        "current_trend": "stable",
        "popular_features": ["home-office", "outdoor-space", "energy-efficiency"],
        "target_audience": "families",
        "recommended_styles": ["modern", "traditional", "contemporary"],
    },
    "condo": {
        "current_trend": "increasing",
        "popular_features": ["amenities", "low-maintenance", "urban-location"],
        "target_audience": "young-professionals",
        "recommended_styles": ["modern", "minimalist", "urban"],
    },
    "townhouse": {
        "current_trend": "stable",
        "popular_features": ["space-efficiency", "community", "low-maintenance"],
        "target_audience": "families-and-professionals",
        "recommended_styles": ["traditional", "modern", "classic"],
    },
    "luxury": {
        "current_trend": "increasing",
        "popular_features": ["smart-home", "luxury-amenities", "exclusive-location"],
        "target_audience": "high-net-worth",
        "recommended_styles": ["luxury", "modern", "classic"],
    },
}

PRICE_RANGE_INSIGHTS = {
    "under-300k": {
        "market_segment": "first-time-buyers",
        "key_features": ["affordability", "starter-home", "good-condition"],
        "messaging": ["perfect-starter", "affordable-option", "great-value"],
    },
    "300k-500k": {
        "market_segment": "move-up-buyers",
        "key_features": ["space", "quality", "location"],
        "messaging": ["perfect-family-home", "quality-living", "great-location"],
    },
    "500k-800k": {
        "market_segment": "established-buyers",
        "key_features": ["luxury-features", "premium-location", "quality-construction"],
        "messaging": ["luxury-living", "premium-location", "exceptional-quality"],
    },
    "800k-plus": {
        "market_segment": "luxury-buyers",
        "key_features": ["exclusive-features", "premium-amenities", "unique-properties"],
        "messaging": ["exclusive-opportunity", "luxury-living", "unique-property"],
    },
}

# Checked in order; "townhouse" must win over "house"
PROPERTY_TYPE_KEYWORDS = [
    ("luxury", ["luxury", "mansion", "estate", "penthouse"]),
    ("townhouse", ["townhouse", "town house", "townhome", "town home", "rowhouse"]),
    ("condo", ["condo", "condominium", "apartment", "flat", "loft"]),
    ("single-family", ["single family", "single-family", "house", "home", "detached"]),
]

# Keywords match at a word start ("Lakeview" matches lake, "Cambridge" does not match ridge)
LOCATION_KEYWORDS = [
    ("urban", ["downtown", "city center", "city centre", "midtown", "uptown"],
     ["urban-location", "walkable-area", "city-living"]),
    ("suburban", ["suburb", "neighborhood", "neighbourhood", "cul-de-sac"],
     ["family-friendly", "quiet-area", "good-schools"]),
    ("waterfront", ["water", "lake", "ocean", "beach", "bay", "harbor", "river"],
     ["waterfront", "scenic-views", "recreation"]),
    ("mountain", ["mountain", "hill", "ridge", "summit", "canyon"],
     ["mountain-views", "natural-surroundings", "privacy"]),
]

# Price bucket upper bounds, exclusive
PRICE_BUCKETS = [
    (300_000, "under-300k"),
    (500_000, "300k-500k"),
    (800_000, "500k-800k"),
]


def parse_price(price: Any) -> float:
    """
    Parse a display price into a number.
    "$850,000" -> 850000.0; anything unparsable -> 0.
    """
    if price is None or isinstance(price, bool):
        return 0.0
    if isinstance(price, (int, float)):
        return float(price) if price > 0 else 0.0
    cleaned = re.sub(r"[^\d.]", "", str(price))
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


class MarketIntelligenceEngine:
    """
    Turns a property listing and a date into a market snapshot and
    the adaptation hints the document assembler consumes.
    Stateless: safe to share across threads.
    """

    def season(self, when: Union[date, datetime, int, None] = None) -> str:
        """Season for a date or a 1-based month number."""
        if when is None:
            when = date.today()
        month = when if isinstance(when, int) else when.month

        if 3 <= month <= 5:
            return "spring"
        if 6 <= month <= 8:
            return "summer"
        if 9 <= month <= 11:
            return "fall"
        return "winter"

    def market_condition(self, listing: PropertyListing) -> str:
        """
        Classify market condition from listing telemetry.
        Without telemetry this is balanced-market.
        """
        days_on_market = listing.days_on_market
        if days_on_market is None:
            return "balanced-market"

        if days_on_market < 15 and listing.price_history:
            return "sellers-market"
        if days_on_market > 45:
            return "buyers-market"
        return "balanced-market"

    def property_type_class(self, listing: PropertyListing) -> str:
        """Map free-text property type onto one of the known classes."""
        text = (listing.property_type or "").lower()
        if not text:
            return "single-family"

        for property_class, keywords in PROPERTY_TYPE_KEYWORDS:
            if any(keyword in text for keyword in keywords):
                return property_class
        return "single-family"

    def price_range_class(self, price: Any) -> str:
        """Bucket a price. Lower bounds are inclusive."""
        value = parse_price(price)
        for upper, label in PRICE_BUCKETS:
            if value < upper:
                return label
        return "800k-plus"

    def location_insights(self, address: Optional[str]) -> LocationInsights:
        """Tag an address by keyword. No address -> unknown, no tags."""
        if not address:
            return LocationInsights(type="unknown")

        address_lower = address.lower()
        tags = []
        highlights = []
        for tag, keywords, phrases in LOCATION_KEYWORDS:
            if any(re.search(rf"\b{re.escape(keyword)}", address_lower) for keyword in keywords):
                tags.append(tag)
                highlights.extend(phrases)

        return LocationInsights(
            type="featured" if tags else "standard",
            tags=tags,
            highlights=highlights,
        )

    def snapshot(
        self,
        listing: PropertyListing,
        on: Union[date, datetime, None] = None,
    ) -> MarketSnapshot:
        """Classify a listing at a point in time."""
        return MarketSnapshot(
            season=self.season(on),
            market_condition=self.market_condition(listing),
            property_type_trend=self.property_type_class(listing),
            price_range_segment=self.price_range_class(listing.price),
            location_insights=self.location_insights(listing.address),
            has_market_telemetry=listing.days_on_market is not None,
        )

    def adaptations(
        self,
        listing: PropertyListing,
        on: Union[date, datetime, None] = None,
    ) -> MarketAdaptations:
        """
        Compose the snapshot into design hints.

        Args:
            listing: Property data (may be empty)
            on: Date to evaluate the season for (defaults to today)

        Returns:
            MarketAdaptations with seasonal, market, property, price and location hints
        """
        snapshot = self.snapshot(listing, on)

        seasonal = self._seasonal_adaptation(snapshot.season)
        market = self._market_adaptation(snapshot.market_condition, snapshot.has_market_telemetry)
        property_hint = self._property_adaptation(snapshot.property_type_trend)
        price_range = self._price_range_adaptation(snapshot.price_range_segment)

        adaptations = MarketAdaptations(
            snapshot=snapshot,
            seasonal=seasonal,
            market=market,
            property=property_hint,
            price_range=price_range,
            location=snapshot.location_insights,
        )
        adaptations.recommendations = self.recommendations(adaptations)

        logger.info(
            f"Market snapshot: {snapshot.season}/{snapshot.market_condition}/"
            f"{snapshot.property_type_trend}/{snapshot.price_range_segment}"
        )
        return adaptations

    def _seasonal_adaptation(self, season: str) -> SeasonalAdaptation:
        trend = SEASONAL_TRENDS[season]
        palette = trend["color_palettes"]
        return SeasonalAdaptation(
            season=season,
            palette=list(palette),
            colors=SeasonalColors(
                primary=PALETTE_HEX[palette[0]],
                secondary=PALETTE_HEX[palette[1]],
                accent=PALETTE_HEX[palette[2]],
            ),
            features=list(trend["recommended_features"]),
            messaging=list(trend["messaging"]),
            confidence=ACTIVITY_CONFIDENCE.get(trend["market_activity"], 0.5),
        )

    def _market_adaptation(self, condition: str, has_telemetry: bool) -> MarketConditionAdaptation:
        strategy = MARKET_CONDITIONS[condition]
        return MarketConditionAdaptation(
            condition=condition,
            emphasis=strategy["emphasis"],
            pricing=strategy["pricing"],
            features=strategy["features"],
            messaging=strategy["messaging"],
            confidence=0.8 if has_telemetry else 0.4,
        )

    def _property_adaptation(self, property_type: str) -> PropertyAdaptation:
        trend = PROPERTY_TRENDS[property_type]
        return PropertyAdaptation(
            property_type=property_type,
            style=trend["recommended_styles"][0],
            features=list(trend["popular_features"]),
            target_audience=trend["target_audience"],
        )

    def _price_range_adaptation(self, segment: str) -> PriceRangeAdaptation:
        insight = PRICE_RANGE_INSIGHTS[segment]
        return PriceRangeAdaptation(
            segment=segment,
            market_segment=insight["market_segment"],
            key_features=list(insight["key_features"]),
            messaging=list(insight["messaging"]),
        )

    def recommendations(self, adaptations: MarketAdaptations) -> list[Recommendation]:
        """Prioritized design advice for the current market picture."""
        recommendations = []

        if adaptations.seasonal.palette:
            recommendations.append(Recommendation(
                category="seasonal",
                priority="high",
                suggestion=f"Adapt color scheme to {adaptations.seasonal.palette[0]} for seasonal appeal",
                action="Update primary color palette",
            ))

        if adaptations.market.emphasis == "value-proposition":
            recommendations.append(Recommendation(
                category="market",
                priority="high",
                suggestion="Emphasize value proposition in current market conditions",
                action="Highlight price-to-value ratio and unique features",
            ))

        if adaptations.property.features:
            recommendations.append(Recommendation(
                category="property",
                priority="medium",
                suggestion=f"Feature {', '.join(adaptations.property.features)} prominently",
                action="Update feature highlights section",
            ))

        if adaptations.price_range.messaging:
            recommendations.append(Recommendation(
                category="pricing",
                priority="medium",
                suggestion="Use price-appropriate messaging",
                action=f"Incorporate messaging: {', '.join(adaptations.price_range.messaging)}",
            ))

        return recommendations

    def summary(self, on: Union[date, datetime, None] = None) -> dict[str, Any]:
        """Heuristic tables for host tooling."""
        return {
            "current_season": self.season(on),
            "seasonal_trends": SEASONAL_TRENDS,
            "market_conditions": MARKET_CONDITIONS,
            "property_trends": PROPERTY_TRENDS,
            "price_insights": PRICE_RANGE_INSIGHTS,
        }
