import logging
from datetime import date
from app.utils.errors import ValidationError

logger = logging.getLogger(__name__)


def validate_stay_dates(check_in, check_out, today=None, check_past=True):
    if check_in is None or check_out is None:
        logger.error("Stay dates missing")
        raise ValidationError("Check-in and check-out dates are required")
    if check_past and check_in < (today or date.today()):
        logger.error(f"Check-in date in the past: {check_in}")
        raise ValidationError("Check-in date cannot be in the past")
    if check_out <= check_in:
        logger.error(f"Check-out {check_out} is not after check-in {check_in}")
        raise ValidationError("Check-out date must be after check-in date")
