import math


def round_half_up(value: float) -> int:
    """Round a non-negative number to the nearest integer, .5 going up."""
    return int(math.floor(value + 0.5))
