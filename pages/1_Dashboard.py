# =============================================================================
# pages/1_Dashboard.py
# =============================================================================
# PURPOSE:
#   The main dashboard - the agency's money at a glance for a period.
#
# WHAT IT SHOWS:
#   - Profit view: revenue, costs and margin of COMPLETED services
#   - Cash-flow view: what clients still owe us and what we still owe
#     suppliers, over CONFIRMED / IN_PROGRESS / COMPLETED services
#   - Cash held by drivers and suppliers
#   - Month-by-month rollup and trend
#   - Revenue per month by service type
#   - Profit by driver
#
# All numbers come from utils.rollups; this page only formats them.
# =============================================================================

import streamlit as st
import pandas as pd
from database import (
    init_db,
    load_services,
    load_drivers,
    load_app_settings,
)
from utils import (
    is_profit_recognised,
    is_cash_flow,
    preset_window,
    summarize_services,
    monthly_rollup,
    yearly_rollup,
    rollup_by_driver,
    rollup_by_service_type,
    format_money,
    format_signed_money,
    format_period,
)
from utils.formatting import format_window
from utils.styling import apply_minimal_style, render_cards, balance_tone

# -----------------------------------------------------------------------------
# PAGE CONFIGURATION
# -----------------------------------------------------------------------------
st.set_page_config(
    page_title="Dashboard - Transfer Desk",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)

apply_minimal_style()
init_db()

settings = load_app_settings()

# -----------------------------------------------------------------------------
# PAGE HEADER
# -----------------------------------------------------------------------------
st.title("Dashboard")

PRESETS = {
    "this_month": "This month",
    "last_month": "Last month",
    "year_to_date": "Year to date",
    "all": "All time",
}
preset = st.radio(
    "Period",
    options=list(PRESETS.keys()),
    format_func=lambda key: PRESETS[key],
    horizontal=True,
    label_visibility="collapsed",
)
start, end = preset_window(preset)
st.caption(format_window(start, end, settings))

# -----------------------------------------------------------------------------
# LOAD DATA
# -----------------------------------------------------------------------------
services_df = load_services()

if len(services_df) == 0:
    st.info("No services yet. Add one on the Services page or import a file.")
    st.stop()

# -----------------------------------------------------------------------------
# PROFIT VIEW (completed services)
# -----------------------------------------------------------------------------
st.write("### Profit")
st.caption("Completed services only.")

profit = summarize_services(services_df, is_profit_recognised, start, end)
render_cards(
    [
        {"key": "count", "label": "Completed services", "value": str(profit["services_count"])},
        {"key": "revenue", "label": "Revenue", "value": format_money(profit["total_revenue"], settings)},
        {"key": "cost", "label": "Supplier costs", "value": format_money(profit["total_cost"], settings)},
        {"key": "extras", "label": "Extras", "value": format_money(profit["total_extras"], settings)},
        {"key": "profit", "label": "Agency margin", "value": format_signed_money(profit["total_profit"], settings)},
    ],
    highlight={"profit": balance_tone(profit["total_profit"])},
)

# -----------------------------------------------------------------------------
# CASH-FLOW VIEW (confirmed and later)
# -----------------------------------------------------------------------------
st.write("### Cash flow")
st.caption("Confirmed, in-progress and completed services.")

flow = summarize_services(services_df, is_cash_flow, start, end)
render_cards([
    {"key": "receivable", "label": "Clients still owe", "value": format_money(flow["outstanding_receivable"], settings)},
    {"key": "payable", "label": "We still owe suppliers", "value": format_money(flow["outstanding_payable"], settings)},
    {"key": "drivers", "label": "Cash held by drivers", "value": format_money(flow["collected_by_drivers"], settings)},
    {"key": "suppliers", "label": "Cash held by suppliers", "value": format_money(flow["collected_by_suppliers"], settings)},
    {"key": "net", "label": "Net to suppliers", "value": format_signed_money(flow["net_to_suppliers"], settings)},
])

# -----------------------------------------------------------------------------
# MONTHLY ROLLUP
# -----------------------------------------------------------------------------
st.write("---")
st.write("### By month")

monthly = monthly_rollup(services_df, is_profit_recognised, start, end)

if len(monthly) == 0:
    st.info("No completed services in this period.")
else:
    trend = monthly.dropna(subset=["month"]).sort_values("month").set_index("month")
    st.bar_chart(trend[["total_revenue", "total_profit"]])

    display = pd.DataFrame({
        "Month": monthly["month"].map(lambda m: format_period(m, settings) if pd.notna(m) else "No date"),
        "Services": monthly["services_count"],
        "Revenue": monthly["total_revenue"].map(lambda v: format_money(v, settings)),
        "Supplier costs": monthly["total_cost"].map(lambda v: format_money(v, settings)),
        "Extras": monthly["total_extras"].map(lambda v: format_money(v, settings)),
        "Margin": monthly["total_profit"].map(lambda v: format_signed_money(v, settings)),
    })
    st.dataframe(display, use_container_width=True, hide_index=True)

    yearly = yearly_rollup(services_df, is_profit_recognised, start, end)
    if len(yearly) > 1:
        with st.expander("By year", expanded=False):
            st.dataframe(
                pd.DataFrame({
                    "Year": yearly["year"].fillna("No date"),
                    "Services": yearly["services_count"],
                    "Revenue": yearly["total_revenue"].map(lambda v: format_money(v, settings)),
                    "Margin": yearly["total_profit"].map(lambda v: format_signed_money(v, settings)),
                }),
                use_container_width=True,
                hide_index=True,
            )

# -----------------------------------------------------------------------------
# REVENUE BY SERVICE TYPE
# -----------------------------------------------------------------------------
st.write("### By service type")

by_type = rollup_by_service_type(services_df, is_profit_recognised, start, end)
if len(by_type) == 0:
    st.caption("No completed services in this period.")
else:
    type_labels = by_type["service_type"].map(
        lambda t: str(t).replace("_", " ").title() if pd.notna(t) else "Unspecified"
    )
    mix = by_type.dropna(subset=["month"]).assign(type_label=type_labels)
    if len(mix):
        st.bar_chart(mix.pivot_table(index="month", columns="type_label",
                                     values="total_revenue", aggfunc="sum", fill_value=0))

    st.dataframe(
        pd.DataFrame({
            "Month": by_type["month"].map(lambda m: format_period(m, settings) if pd.notna(m) else "No date"),
            "Type": type_labels,
            "Services": by_type["services_count"],
            "Revenue": by_type["total_revenue"].map(lambda v: format_money(v, settings)),
            "Margin": by_type["total_profit"].map(lambda v: format_signed_money(v, settings)),
        }),
        use_container_width=True,
        hide_index=True,
    )

# -----------------------------------------------------------------------------
# PROFIT BY DRIVER
# -----------------------------------------------------------------------------
st.write("### By driver")

by_driver = rollup_by_driver(services_df, is_profit_recognised, start, end)
if len(by_driver) == 0:
    st.caption("No completed in-house jobs in this period.")
else:
    drivers_df = load_drivers()
    names = dict(zip(drivers_df["driver_id"], drivers_df["name"])) if len(drivers_df) else {}

    totals = (
        by_driver.groupby("driver_id", dropna=False)[["services_count", "total_revenue", "total_profit", "driver_remittance"]]
        .sum()
        .reset_index()
        .sort_values("total_profit", ascending=False)
    )
    st.dataframe(
        pd.DataFrame({
            "Driver": totals["driver_id"].map(lambda d: names.get(d, d)),
            "Services": totals["services_count"],
            "Revenue": totals["total_revenue"].map(lambda v: format_money(v, settings)),
            "Margin": totals["total_profit"].map(lambda v: format_signed_money(v, settings)),
            "Cash to hand back": totals["driver_remittance"].map(lambda v: format_money(v, settings)),
        }),
        use_container_width=True,
        hide_index=True,
    )
