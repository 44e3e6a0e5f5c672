import logging
from decimal import Decimal
import stripe
from app import config
from app.utils.errors import PaymentInitiationFailed, PaymentVerificationFailed

logger = logging.getLogger(__name__)


class PaymentGateway:
    """Checkout provider used to collect payment for a booking."""

    def create_checkout_session(self, booking, amount: Decimal) -> str:
        raise NotImplementedError

    def is_session_paid(self, session_id: str) -> bool:
        raise NotImplementedError


class StripeCheckoutGateway(PaymentGateway):
    def __init__(self, api_key=None, currency=None, success_url=None, cancel_url=None):
        self.api_key = api_key or config.STRIPE_SECRET_KEY
        self.currency = currency or config.PAYMENT_CURRENCY
        self.success_url = success_url or config.PAYMENT_SUCCESS_URL
        self.cancel_url = cancel_url or config.PAYMENT_CANCEL_URL

    def create_checkout_session(self, booking, amount: Decimal) -> str:
        unit_amount = int((amount * 100).to_integral_value())
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                mode="payment",
                payment_method_types=["card"],
                line_items=[
                    {
                        "price_data": {
                            "currency": self.currency,
                            "product_data": {
                                "name": f"Room {booking.room.room_number}",
                                "description": f"{booking.check_in_date} to {booking.check_out_date}",
                            },
                            "unit_amount": unit_amount,
                        },
                        "quantity": 1,
                    }
                ],
                client_reference_id=str(booking.id),
                metadata={"booking_id": str(booking.id)},
                success_url=self.success_url,
                cancel_url=self.cancel_url,
            )
        except stripe.StripeError as e:
            logger.error(f"Checkout session creation failed for booking {booking.id}: {e}")
            raise PaymentInitiationFailed() from e
        logger.debug(f"Created checkout session {session.id} for booking {booking.id}")
        return session.id

    def is_session_paid(self, session_id: str) -> bool:
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.api_key)
        except stripe.StripeError as e:
            logger.error(f"Could not retrieve checkout session {session_id}: {e}")
            raise PaymentVerificationFailed() from e
        return session.payment_status == "paid"


def get_payment_gateway() -> PaymentGateway:
    return StripeCheckoutGateway()
