# =============================================================================
# pages/2_Services.py
# =============================================================================
# PURPOSE:
#   Day-to-day list of services with their per-service settlement:
#   what the client still owes on-site, what the driver/supplier holds,
#   and who pays whom for each job.
#
# FEATURES:
#   - Filter by month and status
#   - Settlement columns computed on the fly (never stored)
#   - Add a service
#   - Move a service along its lifecycle, or delete it
#   - Record client and supplier payments
# =============================================================================

import streamlit as st
import pandas as pd
from datetime import datetime
from database import (
    init_db,
    load_services,
    load_drivers,
    load_suppliers,
    load_app_settings,
    create_service,
    set_service_status,
    set_payment_status,
    delete_service,
)
from utils import settle_services, month_window, month_keys, format_money, format_signed_money, format_period
from utils.formatting import format_date, format_time
from utils.styling import apply_minimal_style
from config import (
    PAYMENT_METHODS,
    PAYMENT_STATUSES,
    SERVICE_STATUSES,
    SERVICE_TYPES,
    STATUS_TRANSITIONS,
)

# -----------------------------------------------------------------------------
# PAGE CONFIGURATION
# -----------------------------------------------------------------------------
st.set_page_config(
    page_title="Services - Transfer Desk",
    page_icon="🚐",
    layout="wide",
    initial_sidebar_state="expanded"
)

apply_minimal_style()
init_db()

settings = load_app_settings()
drivers_df = load_drivers()
suppliers_df = load_suppliers()

driver_names = dict(zip(drivers_df["driver_id"], drivers_df["name"])) if len(drivers_df) else {}
supplier_names = dict(zip(suppliers_df["supplier_id"], suppliers_df["name"])) if len(suppliers_df) else {}

st.title("Services")
st.caption("Every job with its settlement: balance due, cash held and who pays whom.")

# -----------------------------------------------------------------------------
# ADD SERVICE
# -----------------------------------------------------------------------------
with st.expander("➕ Add service"):
    with st.form("add_service", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            title = st.text_input("Title *")
            service_type = st.selectbox("Type", SERVICE_TYPES)
            client_name = st.text_input("Client")
            client_contact = st.text_input("Client contact")
            day = st.date_input("Date", value=datetime.now().date())
            time = st.time_input("Pickup time")
        with col2:
            client_price = st.number_input("Client price", min_value=0.0, step=5.0)
            deposit = st.number_input("Deposit", min_value=0.0, step=5.0)
            supplier_cost = st.number_input("Supplier cost", min_value=0.0, step=5.0)
            extras_amount = st.number_input("Extras", min_value=0.0, step=5.0)
            extras_info = st.text_input("Extras info")
            payment_method = st.selectbox("Payment method", PAYMENT_METHODS)
            client_payment_status = st.selectbox("Client payment", PAYMENT_STATUSES)
            supplier_payment_status = st.selectbox("Supplier payment", PAYMENT_STATUSES)

        fulfiller_options = ["Unassigned"] + [f"Driver: {n}" for n in driver_names.values()] + \
            [f"Supplier: {n}" for n in supplier_names.values()]
        fulfiller = st.selectbox("Done by", fulfiller_options)
        notes = st.text_area("Notes")

        if st.form_submit_button("Save service"):
            service = {
                "title": title,
                "service_type": service_type,
                "client_name": client_name,
                "client_contact": client_contact,
                "start_time": datetime.combine(day, time).isoformat(),
                "client_price": client_price,
                "deposit": deposit,
                "supplier_cost": supplier_cost,
                "extras_amount": extras_amount,
                "extras_info": extras_info,
                "payment_method": payment_method,
                "client_payment_status": client_payment_status,
                "supplier_payment_status": supplier_payment_status,
                "notes": notes,
            }
            if fulfiller.startswith("Driver: "):
                name = fulfiller[len("Driver: "):]
                service["driver_id"] = next(k for k, v in driver_names.items() if v == name)
            elif fulfiller.startswith("Supplier: "):
                name = fulfiller[len("Supplier: "):]
                service["supplier_id"] = next(k for k, v in supplier_names.items() if v == name)

            if create_service(service):
                st.success(f"Saved: {title}")
                st.rerun()
            else:
                st.error("Not saved - check the title, the amounts (deposit ≤ price) and the console for details.")

# -----------------------------------------------------------------------------
# FILTERS
# -----------------------------------------------------------------------------
all_services = load_services()
if len(all_services) == 0:
    st.info("No services yet.")
    st.stop()

col1, col2 = st.columns(2)
with col1:
    months = month_keys(all_services)
    month = st.selectbox(
        "Month",
        options=[None] + months,
        format_func=lambda m: format_period(m, settings),
    )
with col2:
    statuses = st.multiselect("Status", SERVICE_STATUSES, default=[])

start, end = month_window(month) if month else (None, None)
services_df = load_services(start=start, end=end)
if statuses:
    services_df = services_df[services_df["status"].isin(statuses)]

if len(services_df) == 0:
    st.info("No services match these filters.")
    st.stop()

# -----------------------------------------------------------------------------
# SERVICE TABLE
# -----------------------------------------------------------------------------
settled = settle_services(services_df)


def _done_by(row):
    if row["fulfillment"] == "INTERNAL":
        return driver_names.get(row["driver_id"], row["driver_id"])
    if row["fulfillment"] == "OUTSOURCED":
        return supplier_names.get(row["supplier_id"], row["supplier_id"])
    return "-"


table = pd.DataFrame({
    "Date": settled["start_time"].map(lambda v: format_date(v, settings)),
    "Time": settled["start_time"].map(lambda v: format_time(v, settings)),
    "Service": settled["title"],
    "Client": settled["client_name"],
    "Done by": settled.apply(_done_by, axis=1),
    "Method": settled["payment_method"],
    "Price": settled["client_price"].map(lambda v: format_money(v, settings)),
    "Balance due": settled["balance_due"].map(lambda v: format_money(v, settings)),
    "Cash held": settled["collected_by_fulfiller"].map(lambda v: format_money(v, settings)),
    "Net to fulfiller": settled["net_to_fulfiller"].map(lambda v: format_signed_money(v, settings)),
    "Settlement": settled["settlement_direction"],
    "Margin": settled["agency_margin"].map(lambda v: format_signed_money(v, settings)),
    "Client paid": settled["client_payment_status"],
    "Supplier paid": settled["supplier_payment_status"],
    "Status": settled["status"],
})
st.dataframe(table, use_container_width=True, hide_index=True)

unknown = settled[~settled["payment_method_known"].astype(bool)]
if len(unknown):
    st.warning(f"{len(unknown)} service(s) have no known payment method - nobody is assumed to hold cash for them.")

# -----------------------------------------------------------------------------
# STATUS / DELETE
# -----------------------------------------------------------------------------
st.write("### Update a service")

labels = {
    row["service_id"]: f"{format_date(row['start_time'], settings)} · {row['title']} ({row['status']})"
    for _, row in settled.iterrows()
}
selected = st.selectbox("Service", options=list(labels.keys()), format_func=lambda k: labels[k])

if selected:
    current = settled.loc[settled["service_id"] == selected, "status"].iloc[0]
    allowed = STATUS_TRANSITIONS.get(current, [])

    col1, col2 = st.columns(2)
    with col1:
        if allowed:
            new_status = st.selectbox("Move to", allowed)
            if st.button("Update status"):
                if set_service_status(selected, new_status):
                    st.success(f"Now {new_status}")
                    st.rerun()
                else:
                    st.error("Status not changed.")
        else:
            st.caption(f"{current} is final.")
    with col2:
        if st.button("🗑️ Delete service"):
            if delete_service(selected):
                st.success("Deleted")
                st.rerun()

    # -------------------------------------------------------------------------
    # PAYMENTS
    # -------------------------------------------------------------------------
    row = settled.loc[settled["service_id"] == selected].iloc[0]

    def _status_index(value):
        return PAYMENT_STATUSES.index(value) if value in PAYMENT_STATUSES else 0

    st.write("#### Payments")
    with st.form(f"payments_{selected}"):
        col1, col2 = st.columns(2)
        with col1:
            client_status = st.selectbox(
                "Client payment", PAYMENT_STATUSES,
                index=_status_index(row["client_payment_status"]),
            )
            st.caption(f"Still owed by the client: {format_money(row['client_outstanding'], settings)}")
        with col2:
            supplier_status = st.selectbox(
                "Supplier payment", PAYMENT_STATUSES,
                index=_status_index(row["supplier_payment_status"]),
                disabled=row["fulfillment"] != "OUTSOURCED",
            )
            st.caption(f"Still owed to the supplier: {format_money(row['supplier_outstanding'], settings)}")

        if st.form_submit_button("Save payments"):
            if set_payment_status(
                selected,
                client_status=client_status,
                supplier_status=supplier_status if row["fulfillment"] == "OUTSOURCED" else None,
            ):
                st.success("Payments saved")
                st.rerun()
            else:
                st.error("Payments not saved.")
