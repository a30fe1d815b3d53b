import attrs

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger


def _validate_num_seats(instance: 'BookingRequest', attribute: attrs.Attribute, value: int) -> None:
    # bool is an int subclass; a checkbox value is not a seat count
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError('Number of seats must be a whole number')
    low, high = settings.MIN_SEATS_PER_BOOKING, settings.MAX_SEATS_PER_BOOKING
    if not low <= value <= high:
        raise ValidationError(f'Please enter between {low} and {high} seats')


@attrs.define(frozen=True)
class BookingRequest:
    """Seats asked for by the user; immutable once sent"""

    num_seats: int = attrs.field(validator=_validate_num_seats)

    @classmethod
    @Logger.io
    def create(cls, *, num_seats: int) -> 'BookingRequest':
        return cls(num_seats=num_seats)
