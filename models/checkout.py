from decimal import Decimal

from pydantic import BaseModel

from enums.currency import Currency


class CheckoutComputationDTO(BaseModel):
    """Commission split of one album sale, in major currency units."""
    gross_amount: Decimal
    commission_amount: Decimal
    net_amount: Decimal


class CheckoutPayloadDTO(BaseModel):
    """
    Everything the payment gateway needs to open a checkout session.

    Monetary fields are integer minor units (cents), which is what the
    gateway API expects.
    """
    album_id: str
    photo_ids: list[str]
    currency: Currency
    gross_amount_minor_units: int
    commission_amount_minor_units: int
    destination_account_id: str
    line_item_description: str
    success_redirect: str
    cancel_redirect: str
    customer_email: str | None = None

    @property
    def net_amount_minor_units(self) -> int:
        return self.gross_amount_minor_units - self.commission_amount_minor_units


class CheckoutSessionDTO(BaseModel):
    id: str
    url: str | None = None
    payment_status: str | None = None
