"""Display formatting package."""

from expense_tracker.formatting.formatter import (
    CATEGORY_GLYPHS,
    FALLBACK_GLYPH,
    category_glyph,
    category_label,
    format_amount,
    format_currency,
    format_timestamp,
    group_indian,
)

__all__ = [
    "CATEGORY_GLYPHS",
    "FALLBACK_GLYPH",
    "category_glyph",
    "category_label",
    "format_amount",
    "format_currency",
    "format_timestamp",
    "group_indian",
]
