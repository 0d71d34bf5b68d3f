from decimal import Decimal, ROUND_HALF_UP


MONEY_QUANT = Decimal("0.01")
PCT_QUANT = Decimal("0.01")


def money(value: Decimal | int | float | str) -> Decimal:
    """Round a currency amount to pence/cents, half up."""
    return Decimal(str(value)).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def pct(value: Decimal | int | float | str) -> Decimal:
    """Round a percentage to two decimal places, half up."""
    return Decimal(str(value)).quantize(PCT_QUANT, rounding=ROUND_HALF_UP)


def apply_buffer(value: Decimal | int | float | str, buffer_pct: Decimal | int | float | str) -> Decimal:
    """``value`` grown by ``buffer_pct`` percent, exact and unrounded."""
    return Decimal(str(value)) * (Decimal("1") + Decimal(str(buffer_pct)) / Decimal("100"))
