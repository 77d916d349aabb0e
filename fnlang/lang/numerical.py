"""Numbers in fnlang. Every value is a 64-bit float: number literals are converted here, and results are formatted here
for display.
"""

import decimal
import math

from fnlang.lang.error import GenericException


def number(digits):
    """Returns float value of a number literal. digits must be a non-empty string of ASCII digits."""
    if not digits or not all("0" <= char <= "9" for char in digits):
        raise GenericException("expected number literal, got '{}'", digits, internal=True)
    return float(digits)


def divide(dividend, divisor):
    """IEEE 754 division: dividing by zero gives a signed infinity, or NaN for 0/0 and NaN/0, instead of raising."""
    if divisor == 0:
        if dividend == 0 or math.isnan(dividend):
            return math.nan
        return math.copysign(math.inf, dividend) * math.copysign(1.0, divisor)
    return dividend / divisor


def display(value):
    """Returns str of value. Integral values are shown without a fractional part (6.0 -> '6', -0.0 -> '-0'), non-finite
    values as 'inf', '-inf' or 'NaN', and everything else positionally in shortest round-trip form, never with an
    exponent (1e-07 -> '0.0000001').
    """
    if math.isnan(value):
        return "NaN"
    elif math.isinf(value):
        return "inf" if value > 0 else "-inf"
    elif value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    elif value.is_integer():
        return str(int(value))
    return format(decimal.Decimal(repr(value)), "f")
