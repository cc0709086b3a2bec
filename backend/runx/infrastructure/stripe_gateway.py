"""Stripe Payment Gateway: creates card PaymentIntents and maps failures.

Invariants:
    - Amount sent to Stripe is an integer in minor units (rounded)
    - Every stripe.StripeError is mapped to PaymentGatewayError carrying Stripe's message
    - No retries: network retries disabled, retry is the client's decision

Design Decisions:
    - StripeClient is synchronous; calls run in a worker thread so the event loop stays free
    - HTTP timeout configured on the client from settings
"""

import asyncio
import logging

import stripe

from runx.core.errors import PaymentGatewayError

logger = logging.getLogger(__name__)


class StripePaymentGateway:
    """PaymentGateway implementation backed by the Stripe API."""

    PAYMENT_METHOD_TYPES = ["card"]

    def __init__(self, api_key: str, timeout_seconds: int = 30):
        self.client = stripe.StripeClient(
            api_key,
            http_client=stripe.RequestsClient(timeout=timeout_seconds),
            max_network_retries=0,
        )

    async def create_intent(
        self, amount: int, currency: str, metadata: dict[str, str],
    ) -> str:
        params = {
            "amount": amount,
            "currency": currency,
            "payment_method_types": self.PAYMENT_METHOD_TYPES,
            "metadata": metadata,
        }
        try:
            intent = await asyncio.to_thread(
                self.client.payment_intents.create, params=params,
            )
        except stripe.StripeError as e:
            message = e.user_message or str(e)
            logger.error(
                f"Stripe PaymentIntent creation failed: {message}",
                extra={"error_code": e.code},
            )
            raise PaymentGatewayError(message) from e
        logger.info(f"PaymentIntent {intent.id} created ({amount} {currency})")
        return intent.client_secret
