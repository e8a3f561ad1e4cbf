# =============================================================================
# utils/formatting.py
# =============================================================================
# PURPOSE:
#   Display formatting for money, dates and periods.
#
#   Every function takes the display settings as an explicit dict
#   (currency, language, date_format, time_format). Nothing here reads
#   the database.
# =============================================================================

import math

import pandas as pd

from config import (
    DEFAULT_APP_SETTINGS,
    CURRENCY_SYMBOLS,
    DATE_FORMATS,
    TIME_FORMATS,
    MONTH_NAMES,
)


def resolve_settings(settings=None):
    """Fill any missing keys from DEFAULT_APP_SETTINGS."""
    merged = dict(DEFAULT_APP_SETTINGS)
    if settings:
        merged.update({k: v for k, v in dict(settings).items() if v not in (None, "")})
    return merged


def currency_symbol(settings=None):
    code = resolve_settings(settings)["currency"]
    return CURRENCY_SYMBOLS.get(code, f"{code} ")


def _number(value):
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def format_money(amount, settings=None):
    """
    Money with currency symbol and thousands separator.

    EXAMPLE:
        format_money(1234.5)                      → "$1,234.50"
        format_money(-40, {"currency": "EUR"})    → "-€40.00"
    """
    number = round(_number(amount), 2)
    sign = "-" if number < 0 else ""
    return f"{sign}{currency_symbol(settings)}{abs(number):,.2f}"


def format_signed_money(amount, settings=None):
    """Like format_money() but always shows the sign: "+$10.00" / "-$10.00"."""
    number = round(_number(amount), 2)
    sign = "-" if number < 0 else "+"
    return f"{sign}{currency_symbol(settings)}{abs(number):,.2f}"


def format_plain(amount):
    """Two decimals, no symbol, no separators - for CSV files."""
    return f"{round(_number(amount), 2):.2f}"


def format_date(value, settings=None):
    if value is None:
        return "-"
    stamp = pd.to_datetime(value, errors="coerce")
    if pd.isna(stamp):
        return "-"
    pattern = DATE_FORMATS.get(resolve_settings(settings)["date_format"], "%d/%m/%Y")
    return stamp.strftime(pattern)


def format_time(value, settings=None):
    if value is None:
        return "-"
    stamp = pd.to_datetime(value, errors="coerce")
    if pd.isna(stamp):
        return "-"
    pattern = TIME_FORMATS.get(resolve_settings(settings)["time_format"], "%H:%M")
    return stamp.strftime(pattern)


def format_period(month_key, settings=None):
    """
    "2025-03" → "March 2025" (or "Marzo 2025" with language "it").
    Anything that is not a YYYY-MM key is returned unchanged.
    """
    if not month_key:
        return "All time"
    try:
        period = pd.Period(str(month_key), freq="M")
    except ValueError:
        return str(month_key)
    language = resolve_settings(settings)["language"]
    names = MONTH_NAMES.get(language, MONTH_NAMES["en"])
    return f"{names[period.month - 1]} {period.year}"


def format_window(start, end, settings=None):
    """Label for an arbitrary [start, end) window."""
    if start is None and end is None:
        return "All time"
    first = format_date(start, settings) if start is not None else "…"
    if end is None:
        return f"{first} – …"
    # end is exclusive: show the last day included
    last = format_date(pd.Timestamp(end) - pd.Timedelta(days=1), settings)
    return f"{first} – {last}"


def format_value(value, kind, settings=None, plain=False):
    """
    Format one value according to its kind.

    KINDS:
        money   → "$1,234.50"     (plain: "1234.50")
        signed  → "+$1,234.50"    (plain: "1234.50" / "-1234.50")
        count   → "12"
        date    → per date_format
        period  → "March 2025"
        text    → as is ("-" when empty)
    """
    if kind == "money":
        return format_plain(value) if plain else format_money(value, settings)
    if kind == "signed":
        return format_plain(value) if plain else format_signed_money(value, settings)
    if kind == "count":
        return str(int(_number(value)))
    if kind == "date":
        return format_date(value, settings)
    if kind == "period":
        return format_period(value, settings)
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "-"
    text = str(value).strip()
    return text if text else "-"
