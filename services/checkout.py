import json
import logging
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from urllib.parse import urlencode

import config
from exceptions.cart import EmptyCartException
from exceptions.payment import MissingPayoutAccountException
from exceptions.pricing import InvalidCommissionError
from models.cart import AlbumGroupDTO
from models.checkout import CheckoutComputationDTO, CheckoutPayloadDTO, CheckoutSessionDTO
from services.cart import CartStore
from services.payment_gateway import PaymentGateway
from services.pricing import PricingService
from utils.money import to_minor_units, from_minor_units

CommissionRateFn = Callable[[Decimal], Decimal | int | float]

# Placeholder the gateway replaces with the id of the created session
CHECKOUT_SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


def percentage_commission(rate: Decimal | float | str) -> CommissionRateFn:
    """
    Build a commission function taking a fixed share of the gross amount.

    Example:
        percentage_commission("0.15")(Decimal("100.00")) == Decimal("15.0000")
    """
    rate = Decimal(str(rate))

    def commission(gross_amount: Decimal) -> Decimal:
        return gross_amount * rate

    return commission


def platform_commission(gross_amount: Decimal) -> Decimal:
    """Platform-wide commission using config.COMMISSION_RATE."""
    return percentage_commission(config.COMMISSION_RATE)(gross_amount)


def net_amount(gross_amount: Decimal) -> Decimal:
    """Amount left for the photographer after the platform commission."""
    return from_minor_units(to_minor_units(gross_amount) - to_minor_units(platform_commission(gross_amount)))


class CheckoutService:
    """Builds gateway checkout payloads for album selections in the cart."""

    @staticmethod
    def _commission_minor(gross_minor: int, commission_rate_fn: CommissionRateFn) -> int:
        gross_amount = from_minor_units(gross_minor)
        commission_amount = commission_rate_fn(gross_amount)
        try:
            commission_value = Decimal(str(commission_amount)) if isinstance(commission_amount, float) \
                else Decimal(commission_amount)
        except (TypeError, ValueError, InvalidOperation) as e:
            raise InvalidCommissionError(gross_amount, commission_amount) from e
        # Bounds hold on the unrounded value, NaN and infinity never pass
        if not commission_value.is_finite() or not 0 <= commission_value <= gross_amount:
            raise InvalidCommissionError(gross_amount, commission_amount)
        return to_minor_units(commission_value)

    @staticmethod
    def compute_split(gross_amount: Decimal, commission_rate_fn: CommissionRateFn) -> CheckoutComputationDTO:
        """
        Split a gross sale into platform commission and photographer net amount.

        Raises:
            InvalidCommissionError: If the commission is negative or exceeds the gross amount
        """
        gross_minor = to_minor_units(gross_amount)
        commission_minor = CheckoutService._commission_minor(gross_minor, commission_rate_fn)
        return CheckoutComputationDTO(
            gross_amount=from_minor_units(gross_minor),
            commission_amount=from_minor_units(commission_minor),
            net_amount=from_minor_units(gross_minor - commission_minor)
        )

    @staticmethod
    def build_success_url(album_group: AlbumGroupDTO, gross_minor: int, destination_account_id: str) -> str:
        """
        Purchase confirmation URL the gateway redirects to after payment.

        Example:
            https://shop/my-purchases?session_id={CHECKOUT_SESSION_ID}&album_id=a1&amount=30.00
                &photographer_id=acct_1&photos=["p1","p2"]
        """
        params = {
            "session_id": CHECKOUT_SESSION_ID_PLACEHOLDER,
            "album_id": album_group.album_id,
            "amount": str(from_minor_units(gross_minor)),
            "photographer_id": destination_account_id,
        }
        if album_group.items:
            params["photos"] = json.dumps(album_group.photo_ids, separators=(",", ":"))
        # Braces of the placeholder must survive encoding
        query = urlencode(params, safe="{}")
        return f"{config.FRONTEND_URL}/my-purchases?{query}"

    @staticmethod
    def build_checkout_payload(
        album_group: AlbumGroupDTO,
        destination_account_id: str,
        commission_rate_fn: CommissionRateFn = platform_commission,
        success_url: str | None = None,
        cancel_url: str | None = None,
        customer_email: str | None = None
    ) -> CheckoutPayloadDTO:
        """
        Compute the gateway payload for one album's selection.

        Pure computation: no gateway call, no cart change.

        Args:
            album_group: The album's photos in the cart
            destination_account_id: Photographer's connected account receiving the net amount
            commission_rate_fn: Maps the gross amount (Decimal, major units) to the commission
            success_url: Redirect after payment, defaults to the purchases page
            cancel_url: Redirect on cancel, defaults to the cart page
            customer_email: Prefilled buyer e-mail

        Returns:
            CheckoutPayloadDTO with amounts in minor units

        Raises:
            InvalidCommissionError: If the commission is negative or exceeds the gross amount
            ConfigurationError: If the album's pricing is invalid
        """
        gross_minor = PricingService.price_album_group(album_group).total_minor
        commission_minor = CheckoutService._commission_minor(gross_minor, commission_rate_fn)

        return CheckoutPayloadDTO(
            album_id=album_group.album_id,
            photo_ids=album_group.photo_ids,
            currency=config.CURRENCY,
            gross_amount_minor_units=gross_minor,
            commission_amount_minor_units=commission_minor,
            destination_account_id=destination_account_id,
            line_item_description=f"{config.CHECKOUT_LINE_ITEM_NAME}: {album_group.album_title}",
            success_redirect=success_url or CheckoutService.build_success_url(
                album_group, gross_minor, destination_account_id
            ),
            cancel_redirect=cancel_url or f"{config.FRONTEND_URL}/cart",
            customer_email=customer_email
        )

    @staticmethod
    async def checkout_album(
        store: CartStore,
        album_id: str,
        destination_account_id: str | None,
        gateway: PaymentGateway,
        commission_rate_fn: CommissionRateFn = platform_commission,
        customer_email: str | None = None
    ) -> CheckoutSessionDTO:
        """
        Open a gateway checkout session for one album of the cart.

        The cart is left untouched; call confirm_checkout() once the gateway
        reports the payment as completed.

        Raises:
            EmptyCartException: If the cart has no photos from the album
            MissingPayoutAccountException: If the photographer has no connected account
            InvalidCommissionError / ConfigurationError: On pricing contract violations
            PaymentGatewayException: If the gateway rejects the session
        """
        album_group = store.get_album_group(album_id)
        if album_group is None:
            raise EmptyCartException(album_id)
        if not destination_account_id:
            raise MissingPayoutAccountException(album_group.photographer_id)

        payload = CheckoutService.build_checkout_payload(
            album_group,
            destination_account_id,
            commission_rate_fn,
            customer_email=customer_email
        )
        logging.info(
            f"[Checkout] Album {album_id}: {len(payload.photo_ids)} photo(s), "
            f"gross={payload.gross_amount_minor_units}, commission={payload.commission_amount_minor_units}"
        )
        return await gateway.create_checkout_session(payload)

    @staticmethod
    async def confirm_checkout(store: CartStore, album_id: str) -> int:
        """
        Drop a paid album's photos from the cart.

        Returns:
            Number of removed photos
        """
        removed = await store.remove_album(album_id)
        logging.info(f"[Checkout] Album {album_id} paid, removed {removed} photo(s) from cart")
        return removed
