# =============================================================================
# test_formatting.py - Display formatting
# =============================================================================

import pandas as pd

from utils.formatting import (
    resolve_settings,
    format_money,
    format_signed_money,
    format_plain,
    format_date,
    format_time,
    format_period,
    format_window,
    format_value,
)


def test_resolve_settings_fills_defaults():
    settings = resolve_settings({"currency": "EUR", "language": ""})
    assert settings["currency"] == "EUR"
    assert settings["language"] == "en"
    assert settings["date_format"] == "DD/MM/YYYY"


def test_format_money():
    assert format_money(1234.5) == "$1,234.50"
    assert format_money(-40, {"currency": "EUR"}) == "-€40.00"
    assert format_money(None) == "$0.00"
    assert format_money(-0.001) == "$0.00"
    assert format_money(10, {"currency": "XYZ"}) == "XYZ 10.00"


def test_format_signed_money():
    assert format_signed_money(10) == "+$10.00"
    assert format_signed_money(-10, {"currency": "GBP"}) == "-£10.00"


def test_format_plain():
    assert format_plain(1234.5) == "1234.50"
    assert format_plain(float("nan")) == "0.00"


def test_format_date_and_time():
    stamp = pd.Timestamp("2025-03-05 14:30")
    assert format_date(stamp) == "05/03/2025"
    assert format_date(stamp, {"date_format": "MM/DD/YYYY"}) == "03/05/2025"
    assert format_date("2025-03-05", {"date_format": "YYYY-MM-DD"}) == "2025-03-05"
    assert format_date(None) == "-"
    assert format_date("garbage") == "-"
    assert format_time(stamp) == "14:30"
    assert format_time(stamp, {"time_format": "12h"}) == "02:30 PM"


def test_format_period_by_language():
    assert format_period("2025-03") == "March 2025"
    assert format_period("2025-03", {"language": "it"}) == "Marzo 2025"
    assert format_period("2025-08", {"language": "fr"}) == "Août 2025"
    assert format_period(None) == "All time"
    assert format_period("soon") == "soon"


def test_format_window_shows_last_included_day():
    assert format_window(pd.Timestamp("2025-03-01"), pd.Timestamp("2025-04-01")) == "01/03/2025 – 31/03/2025"
    assert format_window(None, None) == "All time"


def test_format_value_kinds():
    assert format_value(5, "money") == "$5.00"
    assert format_value(5, "money", plain=True) == "5.00"
    assert format_value(-5, "signed", plain=True) == "-5.00"
    assert format_value(3.0, "count") == "3"
    assert format_value("2025-01", "period") == "January 2025"
    assert format_value(None, "text") == "-"
    assert format_value("  ", "text") == "-"
    assert format_value("Cash", "text") == "Cash"
