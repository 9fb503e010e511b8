"""Numeric constants and fixed-point formatting for raw token amounts."""

from decimal import Decimal

MAX_UINT256 = 2**256 - 1
WEI_PER_ETHER = 10**18


def format_units(value: int, decimals: int = 18) -> str:
    """
    Format a raw integer amount as a decimal string.

    Mirrors ethers' ``formatUnits``: the fractional part has its trailing
    zeros stripped but always keeps at least one digit.

    Parameters
    ----------
    value : int
        Raw amount in base units
    decimals : int
        Number of decimal places the amount is scaled by

    Returns
    -------
    str
        Decimal string (e.g. ``"12.5"``, ``"3.0"``)

    Examples
    --------
    >>> format_units(1500000000000000000)
    '1.5'
    >>> format_units(5 * 10**17, 16)
    '50.0'

    """
    if decimals < 0:
        msg = f"decimals must be non-negative, got {decimals}"
        raise ValueError(msg)

    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10**decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{fraction_str}"


def to_decimal_units(value: int, decimals: int = 18) -> Decimal:
    """Convert a raw amount into a ``Decimal`` token amount."""
    return Decimal(value) / Decimal(10**decimals)
