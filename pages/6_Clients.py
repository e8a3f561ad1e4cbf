# =============================================================================
# pages/6_Clients.py
# =============================================================================
# PURPOSE:
#   Client statements: what a client was billed in a month, what it has
#   paid, and what is still outstanding.
# =============================================================================

import streamlit as st
from database import (
    init_db,
    load_client_names,
    load_services,
    load_app_settings,
)
from utils import build_client_statement, month_keys, format_period
from utils.rollups import current_month_key
from utils.styling import apply_minimal_style, render_statement

st.set_page_config(
    page_title="Clients - Transfer Desk",
    page_icon="👥",
    layout="wide",
    initial_sidebar_state="expanded"
)

apply_minimal_style()
init_db()

settings = load_app_settings()

st.title("Clients")
st.caption("Billed, paid and outstanding per client.")

clients = load_client_names()
if not clients:
    st.info("No clients yet - client names come from services.")
    st.stop()

col1, col2 = st.columns(2)
with col1:
    client_name = st.selectbox("Client", clients)

services_df = load_services(client_name=client_name)
months = month_keys(services_df) or [current_month_key()]

with col2:
    month = st.selectbox("Month", months, format_func=lambda m: format_period(m, settings))

st.write("---")
statement = build_client_statement(services_df, client_name, month_key=month)
st.write(f"### {statement['title']}")
render_statement(statement, settings, key=f"client_{client_name}_{month}")
