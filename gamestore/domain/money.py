"""Money values: two decimal places, bounded by the database column size."""

from decimal import Decimal, InvalidOperation

from gamestore.domain.exceptions import InvalidArgument

MONEY_DIGITS = 12
MONEY_PLACES = 2

CENT = Decimal(1).scaleb(-MONEY_PLACES)
MONEY_MAX = Decimal(10) ** (MONEY_DIGITS - MONEY_PLACES) - CENT


def parse_money(value, field="amount", allow_zero=False):
    """
    Parse ``value`` into a Decimal quantized to two places.

    Trailing zeros are fine ("1.000"); a non-zero third decimal is not.
    Values beyond what the money columns can hold are rejected.
    """
    if isinstance(value, bool):
        raise InvalidArgument(f"{field} must be a decimal number")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidArgument(f"{field} must be a decimal number")
    if not amount.is_finite():
        raise InvalidArgument(f"{field} must be a decimal number")
    if abs(amount) > MONEY_MAX:
        raise InvalidArgument(f"{field} must not exceed {MONEY_MAX}")

    quantized = amount.quantize(CENT)
    if quantized != amount:
        raise InvalidArgument(f"{field} must have at most {MONEY_PLACES} decimal places")
    if quantized < 0 or (quantized == 0 and not allow_zero):
        raise InvalidArgument(f"{field} must be positive")
    return quantized
