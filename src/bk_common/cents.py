"""Integer arithmetic utilities for cents-based balances.

All balances and amounts are int (cents). No float, no Decimal.
Conversion to a human-readable string happens only at the API boundary.
"""

from src.bk_common.errors import InvalidAmountError


def validate_amount(amount: int) -> None:
    """Validate that amount is a positive whole number of cents."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(f"Amount must be an integer number of cents, got {amount!r}")
    if amount <= 0:
        raise InvalidAmountError(f"Amount must be greater than zero, got {amount}")


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"
