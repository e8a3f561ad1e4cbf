# =============================================================================
# pages/7_Settings.py
# =============================================================================
# PURPOSE:
#   Display settings (currency, language, date and time format, agency
#   name) and a look at the database tables.
#
# Settings only change how numbers and dates are SHOWN. They are passed
# to the formatters explicitly; no calculation reads them.
# =============================================================================

import streamlit as st
from datetime import datetime
from database import (
    init_db,
    get_table_info,
    load_app_settings,
    save_app_settings,
)
from utils import format_money, format_period
from utils.formatting import format_date, format_time
from utils.styling import apply_minimal_style
from config import CURRENCY_SYMBOLS, LANGUAGES, DATE_FORMATS, TIME_FORMATS
import config

st.set_page_config(
    page_title="Settings - Transfer Desk",
    page_icon="⚙️",
    layout="wide",
    initial_sidebar_state="expanded"
)

apply_minimal_style()
init_db()

st.title("Settings")

settings = load_app_settings()


def _index(options, value):
    return options.index(value) if value in options else 0


# -----------------------------------------------------------------------------
# DISPLAY SETTINGS
# -----------------------------------------------------------------------------
with st.form("settings"):
    agency_name = st.text_input("Agency name", value=settings["agency_name"])

    col1, col2 = st.columns(2)
    currencies = list(CURRENCY_SYMBOLS.keys())
    date_formats = list(DATE_FORMATS.keys())
    time_formats = list(TIME_FORMATS.keys())
    with col1:
        currency = st.selectbox("Currency", currencies, index=_index(currencies, settings["currency"]))
        language = st.selectbox("Language (month names)", LANGUAGES, index=_index(LANGUAGES, settings["language"]))
    with col2:
        date_format = st.selectbox("Date format", date_formats, index=_index(date_formats, settings["date_format"]))
        time_format = st.selectbox("Time format", time_formats, index=_index(time_formats, settings["time_format"]))

    if st.form_submit_button("Save settings"):
        saved = save_app_settings({
            "agency_name": agency_name,
            "currency": currency,
            "language": language,
            "date_format": date_format,
            "time_format": time_format,
        })
        if saved:
            st.success("Settings saved")
            st.rerun()
        else:
            st.error("Settings not saved")

# -----------------------------------------------------------------------------
# PREVIEW
# -----------------------------------------------------------------------------
st.write("### Preview")
now = datetime.now()
col1, col2, col3, col4 = st.columns(4)
col1.metric("Money", format_money(1234.5, settings))
col2.metric("Date", format_date(now, settings))
col3.metric("Time", format_time(now, settings))
col4.metric("Month", format_period(now.strftime("%Y-%m"), settings))

# -----------------------------------------------------------------------------
# DATABASE
# -----------------------------------------------------------------------------
st.write("---")
st.write("### Database")
st.caption(f"File: {config.DB_PATH}")

for table, columns in get_table_info().items():
    with st.expander(table):
        st.write(", ".join(col[1] for col in columns))
