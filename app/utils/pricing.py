import logging
import math
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from app.utils.errors import ValidationError

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def count_nights(check_in: date, check_out: date) -> int:
    """Number of nights between two stay dates, rounded up to whole nights."""
    nights = math.ceil((check_out - check_in).total_seconds() / 86400)
    if nights < 1:
        logger.error(f"Stay of {nights} nights from {check_in} to {check_out}")
        raise ValidationError("A stay must be at least one night")
    return nights


def compute_total(nightly_rate, check_in: date, check_out: date) -> Decimal:
    rate = Decimal(str(nightly_rate))
    total = rate * count_nights(check_in, check_out)
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)
