"""
Conversion between human-readable token amounts and atomic units
"""
import re
from typing import Union

# Plain positive decimal notation with ASCII digits: "100", "0.1", ".5", "1."
_DECIMAL_AMOUNT = re.compile(r"([0-9]*)(?:\.([0-9]*))?")


def parse_units(amount: Union[str, int], decimals: int) -> int:
    """
    Convert a decimal amount string into integer atomic units.

    Args:
        amount: Amount in human-readable format (e.g. "0.1" ETH, "100" USDC)
        decimals: Decimal precision declared by the asset

    Returns:
        Amount multiplied by 10**decimals

    Raises:
        ValueError: If the amount is malformed, not positive, or more precise
            than the asset allows
    """
    if isinstance(amount, bool) or not isinstance(amount, (str, int)):
        raise ValueError(f"Invalid amount {amount!r}: expected a decimal string")

    text = str(amount).strip()
    match = _DECIMAL_AMOUNT.fullmatch(text)
    if not match or not (match.group(1) or match.group(2)):
        raise ValueError(f"Invalid amount {amount!r}: expected a positive decimal number")

    whole = match.group(1) or "0"
    fraction = (match.group(2) or "").rstrip("0")
    if len(fraction) > decimals:
        raise ValueError(f"Invalid amount {amount!r}: at most {decimals} decimal places allowed")

    value = int(whole) * 10**decimals + int(fraction.ljust(decimals, "0") or "0")
    if value <= 0:
        raise ValueError(f"Invalid amount {amount!r}: must be greater than zero")

    return value
