"""Diagnostics package.

- ash_table: text table of moveable-feast dates (no extras needed)
- pretty_month: Gregorian month grid with a country's events marked
- ash_scatter: scatter plot of Ash Wednesday dates (requires the diagnostics extra)
"""

__all__ = ["ash_table", "pretty_month", "ash_scatter"]
