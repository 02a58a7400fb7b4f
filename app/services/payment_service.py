import asyncio

import stripe

from app.core.config import settings
from app.core.errors import UpstreamFailure
from app.core.logger import logger


def to_minor_units(price: float) -> int:
    """12.5 -> 1250"""
    return int(round(price * 100))


async def create_payment_intent(price: float) -> str:
    """
    Creates a card PaymentIntent for `price` (major currency units).
    Returns the client secret the frontend confirms the payment with.
    """
    if not settings.STRIPE_SECRET_KEY:
        logger.error("❌ STRIPE_SECRET_KEY is missing.")
        raise UpstreamFailure("Payment gateway is not configured")

    amount = to_minor_units(price)
    try:
        intent = await asyncio.wait_for(
            asyncio.to_thread(
                stripe.PaymentIntent.create,
                amount=amount,
                currency=settings.PAYMENT_CURRENCY,
                payment_method_types=["card"],
                api_key=settings.STRIPE_SECRET_KEY,
            ),
            timeout=settings.EXTERNAL_CALL_TIMEOUT,
        )
    except asyncio.TimeoutError:
        logger.error(f"⏱️ Stripe timeout after {settings.EXTERNAL_CALL_TIMEOUT}s")
        raise UpstreamFailure()
    except stripe.StripeError as e:
        logger.error(f"❌ Stripe Error: {e}")
        raise UpstreamFailure("Payment gateway error") from e

    logger.info(f"💳 PaymentIntent {intent.id} created: {amount} {settings.PAYMENT_CURRENCY}")
    return intent.client_secret
