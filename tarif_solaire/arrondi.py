import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round half towards +inf on the scaled value: 2.5 → 3, -2.5 → -2.

    Settlement amounts on printed bills are rounded this way; the built-in
    round() would send exact halves to the even neighbour. Values that are
    not finite, or overflow once scaled, are returned untouched.
    """
    if not math.isfinite(value):
        return value
    factor = 10 ** ndigits
    scaled = value * factor
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / factor
