from __future__ import annotations

import math

import numpy as np


def is_real_number(value: object) -> bool:
    """True for finite floats; bools and empty results are not numbers here."""
    return isinstance(value, float) and not isinstance(value, bool) and math.isfinite(value)


def format_number(value: float) -> str:
    """
    Render a float with the fewest digits that still round-trip.

    Never uses an exponent and never pads with trailing zeros, so 2.0 becomes
    "2" and 1e21 is written out in full. Negative zero is shown as "0".
    """
    if value == 0.0:
        value = 0.0
    return np.format_float_positional(value, trim="-")


def describe_value(value: object) -> str:
    """Short user-facing text for an evaluation result of any kind."""
    if value is None:
        return "none"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        return format_number(value)
    return str(value)
