"""
Money Helpers Module

Fixed-point Decimal handling for ledger amounts. NEVER uses float for
monetary values: floats are converted through their string form.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from typing import Optional, Union
import re

from .config import get_config
from .errors import InvalidAmount

# Set global decimal context for financial precision
getcontext().prec = 28  # High precision for financial calculations

AmountLike = Union[Decimal, int, float, str]

ZERO = Decimal('0')


def quantum(precision: Optional[int] = None) -> Decimal:
    """Smallest representable amount, e.g. Decimal('0.01') for 2 places"""
    if precision is None:
        precision = get_config().amount_precision
    return Decimal('0.1') ** precision


def quantize(value: Decimal, precision: Optional[int] = None) -> Decimal:
    """Round to the minor unit"""
    return value.quantize(quantum(precision), rounding=ROUND_HALF_UP)


def to_amount(value: AmountLike, precision: Optional[int] = None) -> Decimal:
    """
    Convert a value to a Decimal amount expressed in the minor unit
    
    Values finer than the minor unit are rejected rather than rounded, so
    the sign callers check is the sign of the exact input.
    
    Args:
        value: Decimal, int, float or numeric string
        precision: Decimal places, defaults to the configured precision
        
    Returns:
        Decimal with exactly `precision` places (may be negative; sign
        checks belong to callers)
        
    Raises:
        InvalidAmount: If the value is not a finite number or has more
            decimal places than the minor unit allows
    """
    if isinstance(value, bool):
        raise InvalidAmount(f"Invalid amount: {value!r}")
    
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidAmount(f"Invalid amount: {value!r}") from None
    else:
        raise InvalidAmount(f"Invalid amount: {value!r}")
    
    if not amount.is_finite():
        raise InvalidAmount(f"Invalid amount: {value!r}")
    
    try:
        rounded = quantize(amount, precision)
    except InvalidOperation:
        raise InvalidAmount(f"Invalid amount: {value!r}") from None
    if rounded != amount:
        raise InvalidAmount(f"Amount {value} has more decimal places than the minor unit {quantum(precision)}")
    return rounded


def to_rate(value: AmountLike) -> Decimal:
    """Convert an interest rate to Decimal without rounding it to the minor unit"""
    if isinstance(value, bool):
        raise InvalidAmount(f"Invalid rate: {value!r}")
    try:
        rate = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidAmount(f"Invalid rate: {value!r}") from None
    if not rate.is_finite():
        raise InvalidAmount(f"Invalid rate: {value!r}")
    return rate


def format_amount(amount: Decimal, precision: Optional[int] = None) -> str:
    """Format for display with a fixed number of decimal places"""
    if precision is None:
        precision = get_config().amount_precision
    return f"{quantize(amount, precision):.{precision}f}"


def decimal_from_string(value: str) -> Decimal:
    """
    Safely convert user input to Decimal, handling common formats
    
    Args:
        value: String representation of number, may carry a currency symbol
        
    Returns:
        Decimal value
        
    Raises:
        InvalidAmount: If string cannot be converted to valid Decimal
    """
    if not value or not isinstance(value, str):
        raise InvalidAmount("Value must be a non-empty string")
    
    # Remove currency symbols and whitespace; anything else is not an amount
    clean_value = re.sub(r"[\s$€£¥]", "", value.strip())
    if not clean_value or re.search(r"[^\d.,\-+]", clean_value):
        raise InvalidAmount(f"Cannot convert '{value}' to Decimal")
    
    # Handle comma as decimal separator (European format)
    if ',' in clean_value and '.' in clean_value:
        # Both comma and dot - assume comma is thousands separator
        clean_value = clean_value.replace(',', '')
    elif ',' in clean_value and clean_value.count(',') == 1:
        parts = clean_value.split(',')
        if len(parts[1]) <= 2:  # Likely decimal separator
            clean_value = clean_value.replace(',', '.')
        else:  # Likely thousands separator
            clean_value = clean_value.replace(',', '')
    
    try:
        result = Decimal(clean_value)
    except InvalidOperation:
        raise InvalidAmount(f"Cannot convert '{value}' to Decimal") from None
    if not result.is_finite():
        raise InvalidAmount(f"Cannot convert '{value}' to Decimal")
    return result
