from decimal import Decimal

from pydantic import BaseModel, model_validator

from models.price_tier import PricingPackageDTO


class PhotoDTO(BaseModel):
    id: str
    title: str | None = None
    watermarked_url: str | None = None


class AlbumDTO(BaseModel):
    """
    Album record as returned by the album data service.

    Read-only input for the cart: the fields are copied onto each cart item
    when a photo is added and never re-synced.
    """
    id: str
    title: str
    photographer_id: str
    photographer_name: str | None = None
    price: Decimal | None = None  # Flat whole-album price
    pricing_package: PricingPackageDTO | None = None

    @model_validator(mode='before')
    @classmethod
    def unpack_joined_records(cls, data):
        """
        Accept the joined row shape of the data service.

        The album query joins the photographer profile and the pricing package,
        which arrive as {"profiles": {"full_name": ...}, "pricing_packages": {...}}.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        profile = data.pop("profiles", None)
        if isinstance(profile, dict) and not data.get("photographer_name"):
            data["photographer_name"] = profile.get("full_name")
        joined_package = data.pop("pricing_packages", None)
        if joined_package and not data.get("pricing_package"):
            data["pricing_package"] = joined_package
        return data
