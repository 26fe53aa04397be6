from decimal import Decimal

from pydantic import BaseModel

from models.price_tier import PricingPackageDTO


class CartItemDTO(BaseModel):
    # One selected photo. Album and photographer fields are a snapshot taken
    # at add time; the pricing package is only replaced through
    # CartStore.update_package_for_album()
    item_id: str
    album_id: str
    album_title: str
    photographer_id: str
    photographer_name: str = "Photographer"
    preview_url: str | None = None
    title: str = "Photo"
    pricing_package: PricingPackageDTO | None = None
    album_flat_price: Decimal | None = None
