# =============================================================================
# pages/3_Import.py
# =============================================================================
# PURPOSE:
#   Data import page - upload a CSV or Excel file of services.
#
# WHAT IT DOES:
#   1. Service import (flexible column names)
#   2. Creates drivers / suppliers named in the file when they are new
#   3. Shows current counts
#
# DUPLICATE DETECTION:
#   - Same service id → duplicate
#   - No id: same start time + title + client → duplicate
# =============================================================================

import streamlit as st
from database import (
    init_db,
    load_services,
    load_drivers,
    load_suppliers,
)
from importers import ServiceImporter
from utils.styling import apply_minimal_style

# -----------------------------------------------------------------------------
# PAGE CONFIGURATION
# -----------------------------------------------------------------------------
st.set_page_config(
    page_title="Import - Transfer Desk",
    page_icon="📥",
    layout="wide",
    initial_sidebar_state="expanded"
)

apply_minimal_style()
init_db()

st.title("Import Services")
st.caption("Upload a CSV or Excel export of transfers and tours")

# -----------------------------------------------------------------------------
# SERVICE IMPORT
# -----------------------------------------------------------------------------
st.write("---")

with st.expander("Expected Format", expanded=False):
    st.code("""
Title,Client,Start,Price,Deposit,Supplier cost,Extras,Payment method,Driver,Supplier,Status
Airport → Hotel Danieli,Smith family,2025-03-05 10:00,120,0,0,15,Pay to the driver,Marco,,CONFIRMED
Dolomites day tour,Blue Line Transfers,2025-03-07 08:30,450,100,0,0,Future Invoice,Luca,,PENDING
Venice → Cortina,Jones,2025-03-09 14:00,300,0,200,0,Cash,,Alpine Cabs,COMPLETED
    """, language="csv")
    st.caption("Header names are matched loosely (e.g. 'Pickup time' works for Start). "
               "Unknown drivers and suppliers are created automatically.")

services_file = st.file_uploader(
    "Choose services CSV/Excel file",
    type=['csv', 'xlsx'],
    key="services_upload",
)

if services_file is not None:
    if st.button("Import Services", type="primary", use_container_width=True):
        with st.spinner("Importing services..."):
            importer = ServiceImporter(services_file)
            success, message, count = importer.import_services()

            if success:
                st.success(message)
                summary = importer.get_import_summary()
                if summary['errors']:
                    with st.expander(f"{len(summary['errors'])} rows not imported"):
                        for line in summary['errors']:
                            st.write(line)
                if summary['duplicates']:
                    with st.expander(f"{len(summary['duplicates'])} duplicates skipped"):
                        for line in summary['duplicates']:
                            st.write(line)
            else:
                st.error(message)

# -----------------------------------------------------------------------------
# CURRENT DATA
# -----------------------------------------------------------------------------
st.write("---")
st.write("### Current Data")

col1, col2, col3 = st.columns(3)
with col1:
    st.metric("Services", len(load_services()))
with col2:
    st.metric("Drivers", len(load_drivers()))
with col3:
    st.metric("Suppliers", len(load_suppliers()))
