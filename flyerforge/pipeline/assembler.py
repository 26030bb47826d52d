"""
Document assembly - compose a fixed-shape flyer document from request data,
a design system and market adaptations.
"""
import logging
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..config import get_config
from ..errors import ValidationError
from ..models.design import ColorScheme, DesignSystem
from ..models.document import (
    AgentSection,
    DetailsSection,
    DocumentContent,
    DocumentMetadata,
    FeaturesSection,
    FooterSection,
    GeneratedDocument,
    HeroSection,
    PhotoBlock,
    PhotosSection,
    StyleDeclarations,
)
from ..models.market import MarketAdaptations
from ..models.request import AgentProfile, GenerationRequest, PropertyListing


logger = logging.getLogger(__name__)


PLACEHOLDERS = {
    "property.address": "Beautiful Property Available",
    "property.property_type": "Residential Property",
    "property.bedrooms": "Contact for details",
    "property.bathrooms": "Contact for details",
    "property.sqft": "Contact for details",
    "property.price": "Price upon request",
    "agent.name": "Professional Agent",
    "agent.agency": "Premier Real Estate",
    "agent.phone": "Contact for details",
    "agent.email": "Contact for details",
    "agent.website": "Contact for details",
    "photo.caption": "Photo Coming Soon",
    "open_house.when": "Date and time to be announced",
}

HEADLINES = {
    "listing": "EXCLUSIVE PROPERTY",
    "open-house": "OPEN HOUSE",
}

FOOTERS = {
    "listing": {
        "headline": "Schedule a Viewing",
        "call_to_action": (
            "Don't miss this exceptional opportunity! "
            "Contact us today to schedule a private viewing."
        ),
        "cta_label": "Contact Agent",
    },
    "open-house": {
        "headline": "Join Us at the Open House",
        "call_to_action": "RSVP today to reserve your visit, or contact us for a private showing.",
        "cta_label": "RSVP Now",
    },
}

DISCLAIMER = "Equal Housing Opportunity."

SPACING_TOKENS = {
    "--spacing-xs": "0.25rem",
    "--spacing-sm": "0.5rem",
    "--spacing-md": "1rem",
    "--spacing-lg": "1.5rem",
    "--spacing-xl": "2rem",
    "--spacing-2xl": "3rem",
    "--spacing-3xl": "4rem",
}

# Headline, subheadline and body weights
FONT_WEIGHTS = ["700", "600", "400"]

# Declarations every rendered flyer carries
BASE_LAYOUT_FLAGS = [
    "media-queries",
    "flexible-units",
    "responsive-images",
    "box-shadow",
    "border",
    "background",
    "margin",
    "padding",
    "gap",
    "position",
    "z-index",
]


def _humanize(slug: str) -> str:
    """'outdoor-spaces' -> 'Outdoor Spaces'"""
    return slug.replace("-", " ").replace("_", " ").strip().title()


def coerce_request(request: Union[GenerationRequest, dict[str, Any]]) -> GenerationRequest:
    """
    Turn caller input into a GenerationRequest.

    Raises:
        ValidationError: property or agent data is not an object, or the payload is malformed
    """
    if isinstance(request, GenerationRequest):
        return request
    if not isinstance(request, dict):
        raise ValidationError(
            f"Request must be an object, got {type(request).__name__}",
            {"field": "request"},
        )

    payload = dict(request)
    for field_name in ("property_listing", "agent_profile"):
        value = payload.get(field_name)
        if value is None:
            payload.pop(field_name, None)
        elif not isinstance(value, (dict, BaseModel)):
            raise ValidationError(
                f"{field_name} must be an object, got {type(value).__name__}",
                {"field": field_name},
            )

    try:
        return GenerationRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(
            "Malformed generation request",
            {"errors": [err["msg"] for err in e.errors()]},
        ) from e


class DocumentAssembler:
    """
    Deterministic template composition.
    Same request, design system and adaptations give the same content and style.
    """

    def __init__(
        self,
        max_features: Optional[int] = None,
        accent_override_confidence: Optional[float] = None,
    ):
        config = get_config().assembler
        self.max_features = max_features if max_features is not None else config.max_features
        if accent_override_confidence is not None:
            self.accent_override_confidence = accent_override_confidence
        else:
            self.accent_override_confidence = config.accent_override_confidence

    def assemble(
        self,
        request: Union[GenerationRequest, dict[str, Any]],
        design_system: DesignSystem,
        adaptations: MarketAdaptations,
        generated_at: Optional[datetime] = None,
        explicit_style: bool = False,
    ) -> GeneratedDocument:
        """
        Build the six-section document for a request.

        Args:
            request: Generation request (dicts are validated first)
            design_system: Resolved design system
            adaptations: Market adaptations for the listing
            generated_at: Timestamp for the metadata (defaults to now)
            explicit_style: The caller named this design system; its palette is kept as-is

        Returns:
            GeneratedDocument with content, style declarations and metadata

        Raises:
            ValidationError: request shape is malformed
        """
        request = coerce_request(request)
        listing = request.property_listing
        agent = request.agent_profile

        placeholder_fields = []
        overrides = []

        content = DocumentContent(
            hero=self._hero(request, listing, adaptations, placeholder_fields),
            details=self._details(listing, placeholder_fields),
            photos=self._photos(request.photos, placeholder_fields),
            features=self._features(listing, adaptations, overrides),
            agent=self._agent(agent, placeholder_fields),
            footer=self._footer(request.kind, adaptations),
        )

        if explicit_style:
            palette = design_system.color_scheme
        else:
            palette = self._palette(design_system.color_scheme, adaptations, overrides)
        style = self._style(design_system, palette)

        metadata = DocumentMetadata(
            generated_at=generated_at or datetime.now(),
            request_id=request.request_id,
            design_system_id=design_system.id,
            design_system_name=design_system.name,
            kind=request.kind,
            market_snapshot=adaptations.snapshot,
            applied_overrides=overrides,
            placeholder_fields=sorted(set(placeholder_fields)),
        )

        logger.info(
            f"Assembled {request.kind} document {request.request_id} with {design_system.id} "
            f"({len(placeholder_fields)} placeholders, overrides={overrides})"
        )
        return GeneratedDocument(content=content, style=style, metadata=metadata)

    def _value(self, value: Optional[str], key: str, placeholder_fields: list[str]) -> str:
        if value:
            return value
        placeholder_fields.append(key)
        return PLACEHOLDERS[key]

    def _hero(
        self,
        request: GenerationRequest,
        listing: PropertyListing,
        adaptations: MarketAdaptations,
        placeholder_fields: list[str],
    ) -> HeroSection:
        subheadline = self._value(listing.address, "property.address", placeholder_fields)

        property_type = (listing.property_type or "residential property").lower()
        summary = f"Discover this exceptional {property_type}"
        if listing.bedrooms and listing.bathrooms:
            summary += f" featuring {listing.bedrooms} bedrooms and {listing.bathrooms} bathrooms"
        summary += "."

        tagline = ""
        if adaptations.price_range.messaging:
            tagline = _humanize(adaptations.price_range.messaging[0])

        open_house = None
        if request.kind == "open-house":
            parts = [p for p in (listing.open_house_date, listing.open_house_time) if p]
            if parts:
                open_house = " | ".join(parts)
            else:
                placeholder_fields.append("open_house.when")
                open_house = PLACEHOLDERS["open_house.when"]

        return HeroSection(
            headline=HEADLINES[request.kind],
            subheadline=subheadline,
            tagline=tagline,
            summary=summary,
            open_house=open_house,
        )

    def _details(self, listing: PropertyListing, placeholder_fields: list[str]) -> DetailsSection:
        return DetailsSection(
            address=self._value(listing.address, "property.address", placeholder_fields),
            property_type=self._value(listing.property_type, "property.property_type", placeholder_fields),
            bedrooms=self._value(listing.bedrooms, "property.bedrooms", placeholder_fields),
            bathrooms=self._value(listing.bathrooms, "property.bathrooms", placeholder_fields),
            sqft=self._value(listing.sqft, "property.sqft", placeholder_fields),
            price=self._value(listing.price, "property.price", placeholder_fields),
        )

    def _photos(self, photos: list[str], placeholder_fields: list[str]) -> PhotosSection:
        if not photos:
            placeholder_fields.append("photo.caption")
            return PhotosSection(photos=[
                PhotoBlock(placeholder=True, caption=PLACEHOLDERS["photo.caption"]),
            ])

        return PhotosSection(photos=[
            PhotoBlock(src=src, alt=f"Property Photo {i}")
            for i, src in enumerate(photos, start=1)
        ])

    def _features(
        self,
        listing: PropertyListing,
        adaptations: MarketAdaptations,
        overrides: list[str],
    ) -> FeaturesSection:
        if listing.features:
            return FeaturesSection(items=listing.features[:self.max_features], source="listing")

        # Market hints stand in for missing listing features
        items = []
        for slug in adaptations.property.features + adaptations.seasonal.features:
            label = _humanize(slug)
            if label not in items:
                items.append(label)
        overrides.append("market-features")
        return FeaturesSection(items=items[:self.max_features], source="market")

    def _agent(self, agent: AgentProfile, placeholder_fields: list[str]) -> AgentSection:
        return AgentSection(
            name=self._value(agent.name, "agent.name", placeholder_fields),
            agency=self._value(agent.agency, "agent.agency", placeholder_fields),
            phone=self._value(agent.phone, "agent.phone", placeholder_fields),
            email=self._value(agent.email, "agent.email", placeholder_fields),
            website=self._value(agent.website, "agent.website", placeholder_fields),
        )

    def _footer(self, kind: str, adaptations: MarketAdaptations) -> FooterSection:
        copy = FOOTERS[kind]
        return FooterSection(
            headline=copy["headline"],
            call_to_action=copy["call_to_action"],
            cta_label=copy["cta_label"],
            emphasis=_humanize(adaptations.market.emphasis),
            disclaimer=DISCLAIMER,
        )

    def _palette(
        self,
        scheme: ColorScheme,
        adaptations: MarketAdaptations,
        overrides: list[str],
    ) -> ColorScheme:
        """Swap in the seasonal accent when the seasonal signal is strong enough."""
        seasonal = adaptations.seasonal
        if seasonal.colors is None or seasonal.confidence < self.accent_override_confidence:
            return scheme

        accent = [seasonal.colors.accent] + list(scheme.accent[1:])
        overrides.append(f"seasonal-accent:{seasonal.season}")
        return scheme.model_copy(update={"accent": accent})

    def _style(self, design_system: DesignSystem, palette: ColorScheme) -> StyleDeclarations:
        typography = design_system.typography
        layout = design_system.layout

        flags = ["css-grid" if layout.display == "grid" else "flexbox"]
        flags.extend(BASE_LAYOUT_FLAGS)
        if layout.breakpoints == "mobile-first":
            flags.append("mobile-first")
        if design_system.id != "modern-contemporary":
            flags.append("text-shadow")

        declared_colors = []
        for color in palette.all_colors:
            if color not in declared_colors:
                declared_colors.append(color)

        font_families = []
        for family in (typography.primary, typography.secondary, typography.accent):
            if family not in font_families:
                font_families.append(family)

        scale = typography.scale
        return StyleDeclarations(
            design_system_id=design_system.id,
            palette=palette,
            declared_colors=declared_colors,
            font_families=font_families,
            font_sizes=[scale.h1, scale.h2, scale.h3, scale.body, scale.caption],
            font_weights=list(FONT_WEIGHTS),
            spacing_tokens=dict(SPACING_TOKENS),
            layout_flags=flags,
            alignment=["center"],
            grid_columns=layout.columns,
            layout_ratio=layout.ratio,
            animation=design_system.animation,
        )
