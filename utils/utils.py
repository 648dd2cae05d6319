from decimal import ROUND_HALF_UP, Decimal, localcontext


def to_significant(value: Decimal, digits: int = 6) -> str:
    """Round to ``digits`` significant digits, plain notation, no trailing zeros."""
    if digits < 1:
        raise ValueError("digits must be positive")

    with localcontext() as ctx:
        ctx.prec = digits
        ctx.rounding = ROUND_HALF_UP
        rounded = +value

    return format(rounded.normalize(), "f")


def human_amount(raw: int, decimals: int) -> float:
    return raw / 10**decimals
