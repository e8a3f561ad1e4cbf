# =============================================================================
# app.py - MAIN ENTRY POINT
# =============================================================================
# PURPOSE:
#   Starts the transfer desk. `streamlit run app.py` runs this file first;
#   it prepares the database and hands over to the Dashboard.
#
# PAGES (pages/ folder, numbered so Streamlit keeps them in order):
#   1 Dashboard  - profit and cash-flow totals per month / driver
#   2 Services   - add, settle and move services through their lifecycle
#   3 Import     - bring in a booking spreadsheet
#   4 Drivers    - cash each driver owes the agency
#   5 Suppliers  - monthly statement and net balance per supplier
#   6 Clients    - what each client was billed and still owes
#   7 Settings   - currency, language, date format
#   8 Invoices   - client invoices and supplier bills, paid and due
#
# TO RUN THE APP:
#   streamlit run app.py
# =============================================================================

import streamlit as st

from config import PAGE_TITLE, PAGE_ICON, LAYOUT
from database import init_db
from utils.sidebar_nav import render_sidebar_nav

# Must be the first Streamlit command in the script
st.set_page_config(
    page_title=PAGE_TITLE,
    page_icon=PAGE_ICON,
    layout=LAYOUT
)

# Creates the tables on first run (pages call init_db() as well)
init_db()

render_sidebar_nav()

# Land on the Dashboard rather than this empty page
st.switch_page("pages/1_Dashboard.py")
