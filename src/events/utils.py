from decimal import ROUND_HALF_UP, Decimal

TWO_PLACES = Decimal("0.01")


def percentage(numerator: int, denominator: int) -> Decimal:
    """Return numerator / denominator * 100 rounded half-up to two decimals, 0 for a zero denominator."""
    if not denominator:
        return Decimal("0.00")
    return (Decimal(numerator) * 100 / Decimal(denominator)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
