"""
Payment gateway clients.

The cart engine never talks to the payment processor itself: it builds a
CheckoutPayloadDTO and hands it to a PaymentGateway. StripeCheckoutGateway is
the production implementation, using Stripe Checkout with a destination
charge: the buyer pays the gross amount, the platform keeps the application
fee (commission) and Stripe transfers the rest to the photographer's
connected account.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from urllib.parse import quote

import aiohttp

import config
from exceptions.payment import PaymentGatewayException
from models.checkout import CheckoutPayloadDTO, CheckoutSessionDTO


class PaymentGateway(ABC):

    @abstractmethod
    async def create_checkout_session(self, payload: CheckoutPayloadDTO) -> CheckoutSessionDTO:
        """
        Open a hosted checkout session for the payload.

        Raises:
            PaymentGatewayException: If the gateway rejects the request or is unreachable
        """


class StripeCheckoutGateway(PaymentGateway):
    """
    Stripe Checkout Sessions client (form-encoded REST API).

    Usage:
        gateway = StripeCheckoutGateway()
        session = await gateway.create_checkout_session(payload)
        redirect(session.url)
    """

    def __init__(
        self,
        secret_key: str | None = None,
        api_url: str | None = None,
        timeout_seconds: int | None = None,
        http_session: aiohttp.ClientSession | None = None
    ):
        """
        Args:
            secret_key: Stripe secret key, defaults to config.STRIPE_SECRET_KEY
            api_url: API base URL, defaults to config.STRIPE_API_URL
            timeout_seconds: Total request timeout, defaults to config.STRIPE_TIMEOUT_SECONDS
            http_session: Shared aiohttp session; a short-lived one is opened per call if omitted
        """
        self.secret_key = secret_key if secret_key is not None else config.STRIPE_SECRET_KEY
        self.api_url = (api_url or config.STRIPE_API_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds or config.STRIPE_TIMEOUT_SECONDS
        self.http_session = http_session

    @staticmethod
    def build_session_params(payload: CheckoutPayloadDTO) -> dict[str, str]:
        """
        Translate the payload into Stripe Checkout Session form fields.

        One line item for the whole album selection, quantity 1, priced at the
        gross amount. Amounts are already in minor units.
        """
        params = {
            "mode": "payment",
            "success_url": payload.success_redirect,
            "cancel_url": payload.cancel_redirect,
            "line_items[0][price_data][currency]": payload.currency.value.lower(),
            "line_items[0][price_data][product_data][name]": payload.line_item_description,
            "line_items[0][price_data][unit_amount]": str(payload.gross_amount_minor_units),
            "line_items[0][quantity]": "1",
            "payment_intent_data[application_fee_amount]": str(payload.commission_amount_minor_units),
            "payment_intent_data[transfer_data][destination]": payload.destination_account_id,
            "metadata[album_id]": payload.album_id,
            "metadata[photo_ids]": ",".join(payload.photo_ids),
        }
        if payload.customer_email:
            params["customer_email"] = payload.customer_email
        return params

    async def _request(self, method: str, path: str, data: dict[str, str] | None = None) -> dict:
        if not self.secret_key:
            raise PaymentGatewayException("Stripe secret key is not configured")

        url = f"{self.api_url}{path}"
        headers = {"Authorization": f"Bearer {self.secret_key}"}
        session = self.http_session or aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds)
        )
        try:
            async with session.request(method, url, data=data, headers=headers) as response:
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = {}
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logging.error(f"[Stripe] {method} {path} failed: {e}")
            raise PaymentGatewayException(str(e) or e.__class__.__name__) from e
        finally:
            if self.http_session is None:
                await session.close()

        if status >= 400 or not isinstance(body, dict) or "error" in body:
            error = body.get("error", {}) if isinstance(body, dict) else {}
            reason = error.get("message") if isinstance(error, dict) else None
            logging.error(f"[Stripe] {method} {path} rejected with HTTP {status}: {reason}")
            raise PaymentGatewayException(reason or "unexpected response", status)
        return body

    @staticmethod
    def _to_session(body: dict) -> CheckoutSessionDTO:
        if not body.get("id"):
            raise PaymentGatewayException("response has no session id")
        return CheckoutSessionDTO(
            id=body["id"],
            url=body.get("url"),
            payment_status=body.get("payment_status")
        )

    async def create_checkout_session(self, payload: CheckoutPayloadDTO) -> CheckoutSessionDTO:
        body = await self._request("POST", "/v1/checkout/sessions", self.build_session_params(payload))
        checkout_session = self._to_session(body)
        logging.info(f"[Stripe] Created checkout session {checkout_session.id} for album {payload.album_id}")
        return checkout_session

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSessionDTO:
        """Fetch a session to check whether it was paid before confirming the checkout."""
        body = await self._request("GET", f"/v1/checkout/sessions/{quote(session_id, safe='')}")
        return self._to_session(body)
