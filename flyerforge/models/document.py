"""
Generated document models - fixed section tree plus resolved style declarations.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .design import AnimationProfile, ColorScheme
from .market import MarketSnapshot


# Section order the layout systems are proportioned for
SECTION_ORDER = ("hero", "details", "photos", "features", "agent", "footer")


class HeroSection(BaseModel):
    headline: str
    subheadline: str
    tagline: str = ""
    summary: str = ""
    open_house: Optional[str] = Field(default=None, description="Date and time line on open-house flyers")


class DetailsSection(BaseModel):
    address: str
    property_type: str
    bedrooms: str
    bathrooms: str
    sqft: str
    price: str

    def rows(self) -> list[tuple[str, str]]:
        """Label/value rows in display order."""
        return [
            ("Type", self.property_type),
            ("Bedrooms", self.bedrooms),
            ("Bathrooms", self.bathrooms),
            ("Square Feet", self.sqft),
            ("Price", self.price),
        ]


class PhotoBlock(BaseModel):
    src: Optional[str] = None
    alt: str = "Property Photo"
    placeholder: bool = False
    caption: str = ""


class PhotosSection(BaseModel):
    title: str = "Property Photos"
    photos: list[PhotoBlock] = Field(default_factory=list)


class FeaturesSection(BaseModel):
    title: str = "Property Features"
    items: list[str] = Field(default_factory=list)
    source: str = Field(default="listing", description="'listing' or 'market' when filled from market hints")


class AgentSection(BaseModel):
    title: str = "Contact Your Agent"
    name: str
    agency: str
    phone: str
    email: str
    website: str


class FooterSection(BaseModel):
    headline: str
    call_to_action: str
    cta_label: str
    emphasis: str = ""
    disclaimer: str = ""


class DocumentContent(BaseModel):
    """The six fixed sections, always present and always in this order."""
    hero: HeroSection
    details: DetailsSection
    photos: PhotosSection
    features: FeaturesSection
    agent: AgentSection
    footer: FooterSection

    def sections(self) -> list[tuple[str, BaseModel]]:
        return [(name, getattr(self, name)) for name in SECTION_ORDER]

    def text_blocks(self) -> list[str]:
        """Renderable text blocks (one per headline, paragraph or grouped block)."""
        blocks = [
            self.hero.headline,
            self.hero.subheadline,
            self.hero.tagline,
            self.hero.summary,
            self.hero.open_house or "",
            self.details.address,
            " / ".join(value for _, value in self.details.rows()),
            ", ".join(self.features.items),
            " / ".join([self.agent.name, self.agent.agency, self.agent.phone]),
            self.footer.headline,
            self.footer.call_to_action,
            self.footer.disclaimer,
        ]
        return [block for block in blocks if block and block.strip()]

    def image_refs(self) -> list[str]:
        return [p.src for p in self.photos.photos if p.src and not p.placeholder]

    def calls_to_action(self) -> list[str]:
        return [cta for cta in (self.footer.cta_label, self.footer.call_to_action) if cta]


class StyleDeclarations(BaseModel):
    """
    Structured intermediate representation of the style a renderer will emit.
    The pattern analyzer reads these instead of re-parsing markup.
    """
    design_system_id: Optional[str] = None
    palette: Optional[ColorScheme] = None
    declared_colors: list[str] = Field(default_factory=list)
    font_families: list[str] = Field(default_factory=list)
    font_sizes: list[str] = Field(default_factory=list)
    font_weights: list[str] = Field(default_factory=list)
    spacing_tokens: dict[str, str] = Field(default_factory=dict, description="e.g. --spacing-md -> 1rem")
    layout_flags: list[str] = Field(default_factory=list, description="Layout features present, set semantics")
    alignment: list[str] = Field(default_factory=list)
    grid_columns: Optional[int] = None
    layout_ratio: Optional[float] = None
    animation: Optional[AnimationProfile] = None

    def has_flag(self, flag: str) -> bool:
        return flag in self.layout_flags


class DocumentMetadata(BaseModel):
    generated_at: datetime = Field(default_factory=datetime.now)
    request_id: str
    design_system_id: str
    design_system_name: str
    kind: str = "listing"
    market_snapshot: Optional[MarketSnapshot] = None
    applied_overrides: list[str] = Field(default_factory=list)
    placeholder_fields: list[str] = Field(default_factory=list)


class GeneratedDocument(BaseModel):
    """A structured flyer, ready for an external renderer."""
    content: DocumentContent
    style: StyleDeclarations
    metadata: DocumentMetadata

    @property
    def section_names(self) -> list[str]:
        return [name for name, _ in self.content.sections()]
