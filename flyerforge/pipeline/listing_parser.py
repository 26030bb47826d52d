"""
Listing text parsing - pull property fields out of free-text listing copy.
"""
import re
import logging
from typing import Optional

from ..models.request import PropertyListing


logger = logging.getLogger(__name__)


# Phrases worth lifting into the features list
FEATURE_KEYWORDS = [
    "hardwood floors", "granite countertops", "quartz countertops", "stainless steel appliances",
    "open floor plan", "updated kitchen", "renovated kitchen", "walk-in closet",
    "fireplace", "pool", "hot tub", "deck", "patio", "garden", "fenced yard",
    "garage", "home office", "smart home", "solar panels", "central air",
    "basement", "wine cellar", "ocean view", "lake view", "mountain view", "city view",
]

PROPERTY_TYPES = [
    "single family home", "single-family home", "townhouse", "townhome",
    "condominium", "condo", "apartment", "loft", "penthouse",
    "mansion", "estate", "bungalow", "cottage", "ranch", "duplex", "house",
]

STREET_SUFFIX = re.compile(
    r"\b(st|street|ave|avenue|rd|road|dr|drive|ln|lane|blvd|boulevard|way|ct|court|"
    r"pl|place|ter|terrace|pkwy|parkway|cir|circle|hwy|highway)\b\.?",
    re.IGNORECASE,
)

# Fields the parser can fill, in merge order
PARSED_FIELDS = ["address", "property_type", "bedrooms", "bathrooms", "sqft", "price"]


class ListingTextParser:
    """
    Regex extraction of listing fields from free text.
    First match wins per field; misses are left empty.
    """

    def __init__(self):
        self.patterns = {
            "price": [
                r"(\$\s?\d{1,3}(?:,\d{3})+(?:\.\d{2})?)",
                r"(\$\s?\d{4,})",
            ],
            "bedrooms": [
                r"(\d+(?:\.\d+)?)\s*(?:bed(?:room)?s?|br|bd)\b",
            ],
            "bathrooms": [
                r"(\d+(?:\.\d+)?)\s*(?:bath(?:room)?s?|ba)\b",
            ],
            "sqft": [
                r"(\d{1,3}(?:,\d{3})+|\d{3,})\s*(?:sq\.?\s?ft\.?|square\s+feet|sf)\b",
            ],
        }

    def parse(self, text: Optional[str]) -> PropertyListing:
        """
        Parse listing copy into a PropertyListing.

        Args:
            text: Free-text listing description

        Returns:
            PropertyListing with whatever fields could be found
        """
        if not text or not text.strip():
            return PropertyListing()

        fields = {}
        for field_name, patterns in self.patterns.items():
            for pattern in patterns:
                match = re.search(pattern, text, re.IGNORECASE)
                if match:
                    fields[field_name] = match.group(1).replace(" ", "")
                    break

        property_type = self._extract_property_type(text)
        if property_type:
            fields["property_type"] = property_type

        address = self._extract_address(text)
        if address:
            fields["address"] = address

        fields["features"] = self._extract_features(text)

        logger.debug(f"Parsed listing text fields: {sorted(k for k, v in fields.items() if v)}")
        return PropertyListing(**fields)

    def _extract_property_type(self, text: str) -> Optional[str]:
        text_lower = text.lower()
        for property_type in PROPERTY_TYPES:
            if re.search(rf"\b{re.escape(property_type)}\b", text_lower):
                return property_type.title()
        return None

    def _extract_address(self, text: str) -> Optional[str]:
        """First line, when it reads like a street address."""
        first_line = text.strip().splitlines()[0].strip()
        if len(first_line) > 120 or not re.match(r"^\d+\s+\w+", first_line):
            return None
        if not STREET_SUFFIX.search(first_line):
            return None
        return first_line.rstrip(".")

    def _extract_features(self, text: str) -> list[str]:
        text_lower = text.lower()
        return [keyword.title() for keyword in FEATURE_KEYWORDS if keyword in text_lower]


def parse_listing_text(text: Optional[str]) -> PropertyListing:
    """Parse free-text listing copy with the default parser."""
    return ListingTextParser().parse(text)


def merge_listing(listing: PropertyListing, parsed: PropertyListing) -> PropertyListing:
    """
    Fill fields missing from listing with values from parsed.
    Populated fields are never overwritten.
    """
    updates = {}
    for field_name in PARSED_FIELDS:
        if getattr(listing, field_name) is None and getattr(parsed, field_name) is not None:
            updates[field_name] = getattr(parsed, field_name)
    if not listing.features and parsed.features:
        updates["features"] = list(parsed.features)

    if not updates:
        return listing
    logger.info(f"Filled {sorted(updates)} from listing text")
    return listing.model_copy(update=updates)
