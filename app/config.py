import os


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/hotel_booking.db")

# JWT configuration
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-me")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

# Stripe checkout
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "usd")
PAYMENT_SUCCESS_URL = os.getenv(
    "PAYMENT_SUCCESS_URL",
    "http://localhost:5173/bookings?payment=success&session_id={CHECKOUT_SESSION_ID}",
)
PAYMENT_CANCEL_URL = os.getenv(
    "PAYMENT_CANCEL_URL", "http://localhost:5173/bookings?payment=cancelled"
)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
