from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field

from enums.package_type import PackageType


class PriceTierDTO(BaseModel):
    """
    One step of a volume pricing schedule.

    Every photo in the album selection costs unit_price once at least
    quantity_threshold photos are selected. The data service stores tiers as
    {"quantity": 5, "price": 8}, both spellings are accepted.
    """
    quantity_threshold: int = Field(validation_alias=AliasChoices("quantity_threshold", "quantity"))
    unit_price: Decimal = Field(validation_alias=AliasChoices("unit_price", "price"))


class PricingPackageDTO(BaseModel):
    """
    Pricing policy a photographer attaches to an album.

    Example: 1+ photos: $10, 5+ photos: $8, 10+ photos: $6
    """
    id: str | None = None
    name: str | None = None
    description: str | None = None
    package_type: PackageType | None = None
    tiers: list[PriceTierDTO] = []


class AlbumPricingResultDTO(BaseModel):
    """Result of pricing one album selection (e.g., "6 × $5.00 = $30.00")."""
    album_id: str | None = None
    quantity: int
    unit_price_minor: int | None = None  # None for flat-price albums
    total_minor: int
    active_tier: PriceTierDTO | None = None
    is_flat_price: bool = False
