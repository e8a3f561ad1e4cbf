# =============================================================================
# pages/4_Drivers.py
# =============================================================================
# PURPOSE:
#   In-house drivers: who they are, and the monthly report of the jobs
#   they did and the cash they must hand back to the agency.
# =============================================================================

import streamlit as st
from database import (
    init_db,
    load_drivers,
    load_services,
    load_app_settings,
    create_driver,
    update_driver,
)
from utils import build_driver_statement, month_keys, format_period
from utils.rollups import current_month_key
from utils.styling import apply_minimal_style, render_statement
from config import DRIVER_AVAILABILITY

st.set_page_config(
    page_title="Drivers - Transfer Desk",
    page_icon="🚗",
    layout="wide",
    initial_sidebar_state="expanded"
)

apply_minimal_style()
init_db()

settings = load_app_settings()

st.title("Drivers")
st.caption("Monthly driver reports: jobs, cash held and margin.")

# -----------------------------------------------------------------------------
# ADD DRIVER
# -----------------------------------------------------------------------------
with st.expander("➕ Add driver"):
    with st.form("add_driver", clear_on_submit=True):
        name = st.text_input("Name *")
        email = st.text_input("Email")
        phone = st.text_input("Phone")
        availability = st.selectbox("Availability", DRIVER_AVAILABILITY)
        if st.form_submit_button("Save driver"):
            if create_driver({"name": name, "email": email, "phone": phone, "availability": availability}):
                st.success(f"Added {name}")
                st.rerun()
            else:
                st.error("Driver not saved - a name is required.")

drivers_df = load_drivers()
if len(drivers_df) == 0:
    st.info("No drivers yet.")
    st.stop()

# -----------------------------------------------------------------------------
# DRIVER + MONTH SELECTOR
# -----------------------------------------------------------------------------
col1, col2, col3 = st.columns([2, 2, 1])
with col1:
    driver_id = st.selectbox(
        "Driver",
        options=drivers_df["driver_id"].tolist(),
        format_func=lambda d: drivers_df.loc[drivers_df["driver_id"] == d, "name"].iloc[0],
    )
driver = drivers_df[drivers_df["driver_id"] == driver_id].iloc[0].to_dict()

services_df = load_services(driver_id=driver_id)
months = month_keys(services_df) or [current_month_key()]

with col2:
    month = st.selectbox("Month", months, format_func=lambda m: format_period(m, settings))
with col3:
    current = driver.get("availability") or DRIVER_AVAILABILITY[0]
    availability = st.selectbox(
        "Availability",
        DRIVER_AVAILABILITY,
        index=DRIVER_AVAILABILITY.index(current) if current in DRIVER_AVAILABILITY else 0,
    )
    if availability != current:
        update_driver(driver_id, {"availability": availability})
        st.rerun()

# -----------------------------------------------------------------------------
# REPORT
# -----------------------------------------------------------------------------
st.write("---")
statement = build_driver_statement(services_df, driver, month_key=month)
st.write(f"### {statement['title']}")
render_statement(statement, settings, key=f"driver_{driver_id}_{month}")
