"""
Shared styling for the transfer desk pages, plus the metric-card row
every statement page renders from summary_cards().
"""
import pandas as pd
import streamlit as st

from config import AMOUNT_TOLERANCE
from utils.sidebar_nav import render_sidebar_nav
from utils.reports import (
    summary_cards,
    statement_table,
    footer_cells,
    statement_to_csv,
    statement_to_html,
    statement_filename,
)


def apply_minimal_style():
    """Apply the clean page CSS and the grouped sidebar navigation."""
    render_sidebar_nav()
    st.markdown("""
    <style>
        .main {
            padding: 3rem 5rem;
            max-width: 1400px;
        }

        h1 {
            font-size: 2.75rem;
            font-weight: 700;
            color: #0f172a;
            letter-spacing: -0.03em;
            margin-bottom: 0.25rem;
        }

        h3 {
            font-size: 1.2rem;
            font-weight: 600;
            color: #0f172a;
            margin-top: 2.5rem;
            margin-bottom: 1.25rem;
        }

        .stCaption {
            color: #64748b;
            font-size: 0.9rem;
        }

        .stButton > button {
            background-color: #1E3A5F;
            color: white;
            border: none;
            border-radius: 4px;
            padding: 0.6rem 1.5rem;
            font-weight: 500;
        }

        .stButton > button:hover {
            background-color: #0f172a;
        }

        .settle-card {
            background: #f8fafc;
            border: 1px solid #e2e8f0;
            border-radius: 8px;
            padding: 0.9rem 1rem;
        }
        .settle-card .label {
            font-size: 0.7rem;
            color: #64748b;
            text-transform: uppercase;
            font-weight: 600;
        }
        .settle-card .value {
            font-size: 1.35rem;
            font-weight: 700;
            color: #0f172a;
        }
        .settle-card.negative .value { color: #b91c1c; }
        .settle-card.positive .value { color: #15803d; }

        hr {
            border: none;
            border-top: 1px solid #e5e5e5;
            margin: 3rem 0;
        }
    </style>
    """, unsafe_allow_html=True)


def render_cards(cards, highlight=None):
    """
    Render summary_cards() output as one row of cards.

    PARAMETERS:
        cards (list of dict): {"key", "label", "value"} - values already formatted
        highlight (dict): optional key -> "positive" / "negative" colouring
    """
    highlight = highlight or {}
    columns = st.columns(len(cards)) if cards else []
    for column, card in zip(columns, cards):
        tone = highlight.get(card["key"], "")
        with column:
            st.markdown(
                f'<div class="settle-card {tone}">'
                f'<div class="label">{card["label"]}</div>'
                f'<div class="value">{card["value"]}</div>'
                f'</div>',
                unsafe_allow_html=True,
            )


def balance_tone(value):
    """Colour for a signed net balance: green when they pay us, none when settled."""
    if abs(value) < AMOUNT_TOLERANCE:
        return ""
    return "positive" if value > 0 else "negative"


def render_statement(statement, settings, key):
    """
    Show a statement on screen with its CSV and printable downloads.

    Cards, table, CSV and HTML all read the same statement dict.

    PARAMETERS:
        statement (dict): from build_*_statement()
        settings (dict): display settings
        key (str): unique prefix for the download widgets
    """
    highlight = {}
    if statement.get("net_balance"):
        highlight["net_balance"] = balance_tone(statement["net_balance"]["net_balance"])
    render_cards(summary_cards(statement, settings), highlight)

    st.write("")
    if len(statement["lines"]) == 0:
        st.info("No services in this period.")
    else:
        table = statement_table(statement, settings)
        footer = pd.DataFrame(
            [
                [footer_cells(row, statement, settings)[column] for column, _, _ in statement["columns"]]
                for row in statement["footer"]
            ],
            columns=table.columns,
        )
        st.dataframe(pd.concat([table, footer], ignore_index=True),
                     use_container_width=True, hide_index=True)

    col1, col2 = st.columns(2)
    with col1:
        st.download_button(
            "⬇️ Download CSV",
            data=statement_to_csv(statement, settings),
            file_name=statement_filename(statement, "csv"),
            mime="text/csv",
            key=f"{key}_csv",
            use_container_width=True,
        )
    with col2:
        st.download_button(
            "🖨️ Printable statement (HTML)",
            data=statement_to_html(statement, settings),
            file_name=statement_filename(statement, "html"),
            mime="text/html",
            key=f"{key}_html",
            use_container_width=True,
        )
