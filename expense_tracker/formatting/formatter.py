"""
Display Formatting

Pure functions turning ledger values into display strings, following
the en-IN locale conventions the tracker has always used:

- amounts: two decimals, Indian digit grouping (12,34,567.50)
- timestamps: "05 Mar 2024, 02:07 pm"

The conventions are fixed here rather than taken from the OS locale so
output is identical on every machine.
"""

from datetime import datetime, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional, Union
from zoneinfo import ZoneInfo

from expense_tracker.models.expense import Category


Amount = Union[Decimal, int, float, str]

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

CATEGORY_GLYPHS: dict[Category, str] = {
    Category.FOOD: "🍔",
    Category.TRANSPORT: "🚗",
    Category.ENTERTAINMENT: "🎬",
    Category.SHOPPING: "🛍️",
    Category.BILLS: "🧾",
    Category.OTHER: "❓",
}

FALLBACK_GLYPH = "❓"

_CENTS = Decimal("0.01")


def _to_decimal(amount: Amount) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        return Decimal(str(amount))
    return Decimal(amount)


def group_indian(digits: str) -> str:
    """
    Insert Indian-style separators into a run of digits.

    The last three digits form one group, every group before it has two:
    "1234567" -> "12,34,567".
    """
    if len(digits) <= 3:
        return digits

    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    groups.append(tail)
    return ",".join(groups)


def format_amount(amount: Amount) -> str:
    """
    Render an amount with exactly two decimals and Indian grouping.

    Rounds half up: 0.005 -> "0.01". 1234567.5 -> "12,34,567.50".
    """
    value = _to_decimal(amount)
    with localcontext() as ctx:
        # Room for every integer digit plus the two decimals
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        value = value.quantize(_CENTS, rounding=ROUND_HALF_UP)

    sign = "-" if value < 0 else ""
    integer_part, _, fraction = f"{abs(value):f}".partition(".")
    return f"{sign}{group_indian(integer_part)}.{fraction}"


def format_currency(amount: Amount, symbol: str = "₹") -> str:
    """Amount prefixed with the currency symbol: "₹1,500.00"."""
    formatted = format_amount(amount)
    if formatted.startswith("-"):
        return f"-{symbol}{formatted[1:]}"
    return f"{symbol}{formatted}"


def format_timestamp(
    instant: datetime,
    tz: Optional[Union[tzinfo, str]] = None,
) -> str:
    """
    Render an instant as "05 Mar 2024, 02:07 pm".

    Args:
        instant: The moment to show. Naive datetimes are taken as UTC.
        tz: Timezone to show it in (tzinfo or IANA name). Local time if None.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)

    if isinstance(tz, str):
        tz = ZoneInfo(tz)
    local = instant.astimezone(tz)

    hour = local.hour % 12 or 12
    meridiem = "am" if local.hour < 12 else "pm"
    month = MONTH_ABBREVIATIONS[local.month - 1]
    return f"{local.day:02d} {month} {local.year:04d}, {hour:02d}:{local.minute:02d} {meridiem}"


def category_glyph(category: Union[Category, str]) -> str:
    """Decorative symbol for a category; unknown categories get the fallback."""
    known = Category.parse(category)
    if known is None:
        return FALLBACK_GLYPH
    return CATEGORY_GLYPHS[known]


def category_label(category: Union[Category, str]) -> str:
    """Glyph and name, as shown on expense tags: "🍔 Food"."""
    name = category.value if isinstance(category, Category) else category
    return f"{category_glyph(category)} {name}"
