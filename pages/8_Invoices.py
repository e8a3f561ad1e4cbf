# =============================================================================
# pages/8_Invoices.py
# =============================================================================
# PURPOSE:
#   Invoice follow-up in two directions:
#   - Receivables: clients billed on a "Future Invoice" - amount, paid, due
#   - Payables:    supplier bills for outsourced jobs - amount, paid, due
#
# A PARTIAL client payment counts its deposit as paid. Supplier bills are
# either PAID or still due in full.
#
# With one supplier selected the page also shows the net balance with it,
# since the bills alone leave out the cash it holds and what it owes us.
# =============================================================================

import streamlit as st
import pandas as pd

from database import (
    init_db,
    load_client_names,
    load_services,
    load_suppliers,
    load_app_settings,
)
from utils import (
    build_receivables_report,
    build_payables_report,
    is_cash_flow,
    month_keys,
    format_money,
    format_period,
)
from utils.styling import apply_minimal_style, render_statement

st.set_page_config(
    page_title="Invoices - Transfer Desk",
    page_icon="🧾",
    layout="wide",
    initial_sidebar_state="expanded"
)

apply_minimal_style()
init_db()

settings = load_app_settings()

st.title("Invoices")
st.caption("What clients still owe on invoice, and what we still owe suppliers.")

services_df = load_services()
if len(services_df) == 0:
    st.info("No services yet.")
    st.stop()

ALL = "__all__"

# -----------------------------------------------------------------------------
# FILTERS
# -----------------------------------------------------------------------------
col1, col2, col3 = st.columns(3)
with col1:
    mode = st.radio("Show", ["Receivables", "Payables"], horizontal=True)
with col2:
    months = [ALL] + month_keys(services_df)
    month = st.selectbox(
        "Month", months,
        format_func=lambda m: "All months" if m == ALL else format_period(m, settings),
    )
with col3:
    confirmed_only = st.checkbox("Confirmed and later only", value=False,
                                 help="Leave out PENDING services.")

month_key = None if month == ALL else month
qualify_kwargs = {"qualifies": is_cash_flow} if confirmed_only else {}


def _entity_table(by_entity, label):
    st.dataframe(
        pd.DataFrame({
            label: by_entity["entity"].fillna("-"),
            "Invoices": by_entity["services_count"],
            "Amount": by_entity["amount"].map(lambda v: format_money(v, settings)),
            "Paid": by_entity["paid"].map(lambda v: format_money(v, settings)),
            "Due": by_entity["due"].map(lambda v: format_money(v, settings)),
        }),
        use_container_width=True,
        hide_index=True,
    )


st.write("---")

# -----------------------------------------------------------------------------
# RECEIVABLES
# -----------------------------------------------------------------------------
if mode == "Receivables":
    client_name = st.selectbox("Client", [ALL] + load_client_names(),
                               format_func=lambda c: "All clients" if c == ALL else c)
    client_name = None if client_name == ALL else client_name

    report = build_receivables_report(services_df, client_name, month_key=month_key, **qualify_kwargs)
    st.write(f"### {report['title']}")

    if client_name is None and len(report["by_entity"]):
        st.write("#### Per client")
        _entity_table(report["by_entity"], "Client")

    render_statement(report, settings, key=f"receivables_{client_name}_{month}")

# -----------------------------------------------------------------------------
# PAYABLES
# -----------------------------------------------------------------------------
else:
    suppliers_df = load_suppliers()
    supplier_ids = [ALL] + suppliers_df["supplier_id"].tolist() if len(suppliers_df) else [ALL]
    names = dict(zip(suppliers_df["supplier_id"], suppliers_df["name"])) if len(suppliers_df) else {}
    supplier_id = st.selectbox("Supplier", supplier_ids,
                               format_func=lambda s: "All suppliers" if s == ALL else names.get(s, s))

    supplier = None
    if supplier_id != ALL:
        supplier = suppliers_df[suppliers_df["supplier_id"] == supplier_id].iloc[0].to_dict()

    report = build_payables_report(services_df, suppliers_df, supplier, month_key=month_key, **qualify_kwargs)
    st.write(f"### {report['title']}")

    if supplier is None and len(report["by_entity"]):
        st.write("#### Per supplier")
        _entity_table(report["by_entity"], "Supplier")

    render_statement(report, settings, key=f"payables_{supplier_id}_{month}")

    if report["net_balance"] is not None:
        st.caption("Net balance also counts the cash this supplier holds and what it owes us "
                   "as a client. The Suppliers page has the full statement.")
