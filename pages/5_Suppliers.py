# =============================================================================
# pages/5_Suppliers.py
# =============================================================================
# PURPOSE:
#   Supplier statements. A supplier can drive jobs for us AND book our
#   services for its own clients, so each month ends in ONE net figure:
#
#       net balance = receivable - payable + held
#
#   positive → the supplier pays us, negative → we pay the supplier.
#
# FEATURES:
#   - Monthly statement (cards, lines, totals, final settlement)
#   - CSV and printable HTML downloads of the same statement
#   - Month-by-month history of the net balance
#   - Jobs it did for us per month: cost, cash it held, what is still unpaid
# =============================================================================

import streamlit as st
import pandas as pd

from database import (
    init_db,
    load_suppliers,
    load_services,
    load_app_settings,
    create_supplier,
)
from utils import (
    build_supplier_statement,
    counterparty_history,
    rollup_by_supplier,
    format_money,
    format_signed_money,
    format_period,
)
from utils.rollups import current_month_key
from utils.styling import apply_minimal_style, render_statement

st.set_page_config(
    page_title="Suppliers - Transfer Desk",
    page_icon="🚚",
    layout="wide",
    initial_sidebar_state="expanded"
)

apply_minimal_style()
init_db()

settings = load_app_settings()

st.title("Suppliers")
st.caption("What we owe each supplier, what it holds for us, and what it owes us as a client.")

# -----------------------------------------------------------------------------
# ADD SUPPLIER
# -----------------------------------------------------------------------------
with st.expander("➕ Add supplier"):
    with st.form("add_supplier", clear_on_submit=True):
        name = st.text_input("Name *")
        contact_person = st.text_input("Contact person")
        email = st.text_input("Email")
        phone = st.text_input("Phone")
        if st.form_submit_button("Save supplier"):
            if create_supplier({"name": name, "contact_person": contact_person,
                                "email": email, "phone": phone}):
                st.success(f"Added {name}")
                st.rerun()
            else:
                st.error("Supplier not saved - a name is required.")

suppliers_df = load_suppliers()
if len(suppliers_df) == 0:
    st.info("No suppliers yet.")
    st.stop()

# -----------------------------------------------------------------------------
# SUPPLIER SELECTOR
# -----------------------------------------------------------------------------
supplier_id = st.selectbox(
    "Supplier",
    options=suppliers_df["supplier_id"].tolist(),
    format_func=lambda s: suppliers_df.loc[suppliers_df["supplier_id"] == s, "name"].iloc[0],
)
supplier = suppliers_df[suppliers_df["supplier_id"] == supplier_id].iloc[0].to_dict()

# Both roles are needed: jobs it did, and jobs billed to it by name
services_df = load_services()
history = counterparty_history(services_df, supplier)

tab_month, tab_history = st.tabs(["Monthly statement", "History"])

# -----------------------------------------------------------------------------
# MONTHLY STATEMENT
# -----------------------------------------------------------------------------
with tab_month:
    months = [entry["month"] for entry in history] or [current_month_key()]
    month = st.selectbox("Month", months, format_func=lambda m: format_period(m, settings))

    statement = build_supplier_statement(services_df, supplier, month_key=month)
    st.write(f"### {statement['title']}")
    render_statement(statement, settings, key=f"supplier_{supplier_id}_{month}")

# -----------------------------------------------------------------------------
# HISTORY
# -----------------------------------------------------------------------------
with tab_history:
    if not history:
        st.info("No services with this supplier yet.")
    else:
        st.dataframe(
            pd.DataFrame({
                "Month": [format_period(h["month"], settings) for h in history],
                "Jobs done": [h["outsourced_count"] for h in history],
                "Payable": [format_money(h["total_payable"], settings) for h in history],
                "Held": [format_money(h["total_held"], settings) for h in history],
                "Jobs billed": [h["client_count"] for h in history],
                "Receivable": [format_money(h["total_receivable"], settings) for h in history],
                "Net balance": [format_signed_money(h["net_balance"], settings) for h in history],
                "Direction": [h["direction"] for h in history],
            }),
            use_container_width=True,
            hide_index=True,
        )

    # Only the jobs it fulfilled, whatever it was billed as a client
    jobs = rollup_by_supplier(services_df)
    jobs = jobs[jobs["supplier_id"] == supplier_id]
    if len(jobs):
        st.write("#### Jobs done for us")
        st.dataframe(
            pd.DataFrame({
                "Month": [format_period(m, settings) for m in jobs["month"]],
                "Jobs": jobs["services_count"].tolist(),
                "Cost": [format_money(v, settings) for v in jobs["total_cost"]],
                "Cash held": [format_money(v, settings) for v in jobs["collected_by_suppliers"]],
                "Net to supplier": [format_signed_money(v, settings) for v in jobs["net_to_suppliers"]],
                "Still unpaid": [format_money(v, settings) for v in jobs["outstanding_payable"]],
            }),
            use_container_width=True,
            hide_index=True,
        )
