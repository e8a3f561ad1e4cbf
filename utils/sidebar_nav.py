"""
Sidebar navigation for the transfer desk.

Replaces Streamlit's automatic page list with a fixed order, grouped by
what the user is doing: day-to-day work, counterparties, setup.
"""
import html

import streamlit as st

from config import DEFAULT_APP_SETTINGS
from database import load_app_settings

SIDEBAR_BG = "#1E3A5F"

# (group, label, path, icon) - ASCII paths for reliable navigation
PAGES = [
    ("Operations", "Dashboard", "pages/1_Dashboard.py", "📊"),
    ("Operations", "Services", "pages/2_Services.py", "🚐"),
    ("Operations", "Import", "pages/3_Import.py", "📥"),
    ("Counterparties", "Drivers", "pages/4_Drivers.py", "🚗"),
    ("Counterparties", "Suppliers", "pages/5_Suppliers.py", "🤝"),
    ("Counterparties", "Clients", "pages/6_Clients.py", "👥"),
    ("Counterparties", "Invoices", "pages/8_Invoices.py", "🧾"),
    ("Setup", "Settings", "pages/7_Settings.py", "⚙️"),
]

SIDEBAR_CSS = f"""
<style>
    [data-testid="stSidebarNav"] {{
        display: none !important;
    }}
    [data-testid="stSidebar"] {{
        background-color: {SIDEBAR_BG} !important;
    }}
    [data-testid="stSidebar"] * {{
        color: rgba(255,255,255,0.9) !important;
    }}
    [data-testid="stSidebar"] .nav-group {{
        font-size: 0.7rem;
        letter-spacing: 0.08em;
        text-transform: uppercase;
        opacity: 0.6;
        margin: 1rem 0 0.25rem 0;
    }}
    [data-testid="stSidebar"] .agency-name {{
        font-size: 1.1rem;
        font-weight: 700;
    }}
</style>
"""


def _agency_name():
    """Agency name from the stored settings; the default when the DB is unreadable."""
    return load_app_settings().get("agency_name") or DEFAULT_APP_SETTINGS["agency_name"]


def render_sidebar_nav():
    """
    Render the sidebar: agency name, then one link per page under its group.

    Called at the top of every page (through apply_minimal_style) so the
    sidebar looks the same wherever the user lands.
    """
    st.markdown(SIDEBAR_CSS, unsafe_allow_html=True)

    with st.sidebar:
        st.markdown(f'<div class="agency-name">{html.escape(_agency_name())}</div>', unsafe_allow_html=True)

        current_group = None
        for group, label, path, icon in PAGES:
            if group != current_group:
                st.markdown(f'<div class="nav-group">{group}</div>', unsafe_allow_html=True)
                current_group = group
            st.page_link(path, label=label, icon=icon)
