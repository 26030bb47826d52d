"""
Request models - property listing, agent profile and generation request.
"""
import uuid
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


FlyerKind = Literal["listing", "open-house"]


def _as_text(v: Any) -> Optional[str]:
    """Render scalars as display text; blank strings count as missing."""
    if v is None:
        return None
    if isinstance(v, bool):
        return None
    if isinstance(v, float) and v.is_integer():
        v = int(v)
    if isinstance(v, (int, float, str)):
        text = str(v).strip()
        return text or None
    return None


class PropertyListing(BaseModel):
    """
    Property data as supplied by the caller.
    Every field is optional; the assembler fills gaps with placeholders.
    """
    address: Optional[str] = None
    property_type: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("property_type", "type"),
        description="Free-text property type; also accepted as \"type\"",
    )
    bedrooms: Optional[str] = None
    bathrooms: Optional[str] = None
    sqft: Optional[str] = None
    price: Optional[str] = None
    features: list[str] = Field(default_factory=list)
    open_house_date: Optional[str] = None
    open_house_time: Optional[str] = None

    # Market telemetry, rarely available at generation time
    days_on_market: Optional[int] = None
    price_history: list[float] = Field(default_factory=list)

    @field_validator(
        "address", "property_type", "bedrooms", "bathrooms", "sqft", "price",
        "open_house_date", "open_house_time",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        """Accept numbers for numeric-looking fields: 4 -> "4"."""
        return _as_text(v)

    @field_validator("features", mode="before")
    @classmethod
    def coerce_features(cls, v: Any) -> list[str]:
        """Keep non-empty feature strings in order."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple)):
            return []
        features = []
        for item in v:
            text = _as_text(item)
            if text:
                features.append(text)
        return features

    @field_validator("price_history", mode="before")
    @classmethod
    def coerce_price_history(cls, v: Any) -> list[float]:
        """Drop entries that are not numbers."""
        if not isinstance(v, (list, tuple)):
            return []
        history = []
        for item in v:
            try:
                history.append(float(item))
            except (TypeError, ValueError):
                continue
        return history

    def missing_fields(self) -> list[str]:
        """Names of text fields that are not populated."""
        names = ["address", "property_type", "bedrooms", "bathrooms", "sqft", "price"]
        return [name for name in names if getattr(self, name) is None]


class AgentProfile(BaseModel):
    """Listing agent contact details."""
    name: Optional[str] = None
    agency: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None

    @field_validator("name", "agency", "phone", "email", "website", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        return _as_text(v)


class GenerationRequest(BaseModel):
    """A single flyer generation request."""
    request_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    property_listing: PropertyListing = Field(default_factory=PropertyListing)
    agent_profile: AgentProfile = Field(default_factory=AgentProfile)
    style: Optional[str] = Field(default=None, description="Design system id; absent means auto-select")
    photos: list[str] = Field(default_factory=list, description="Photo references (URLs or storage keys)")
    kind: FlyerKind = "listing"

    # Free-text listing copy; parsed to fill missing property fields
    listing_text: Optional[str] = None

    @field_validator("style", mode="before")
    @classmethod
    def blank_style_is_none(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("photos", mode="before")
    @classmethod
    def coerce_photos(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v] if v.strip() else []
        return v
