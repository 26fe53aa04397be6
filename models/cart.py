# the cart collects single photos from any number of albums. Pricing is done per
# album, so most consumers work on AlbumGroupDTO slices rather than the flat list
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from models.cartItem import CartItemDTO
from models.price_tier import PricingPackageDTO


class CartDTO(BaseModel):
    items: list[CartItemDTO] = []
    version: int = 0  # Incremented on every persisted mutation, last write wins
    updated_at: datetime | None = None


class AlbumGroupDTO(BaseModel):
    album_id: str
    album_title: str
    photographer_id: str
    photographer_name: str
    pricing_package: PricingPackageDTO | None = None
    album_flat_price: Decimal | None = None
    items: list[CartItemDTO] = []

    @property
    def photo_ids(self) -> list[str]:
        return [item.item_id for item in self.items]
