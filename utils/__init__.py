# =============================================================================
# utils/__init__.py
# =============================================================================
# PURPOSE:
#   Makes the utils folder a Python package and provides easy imports.
#
# WHAT LIVES HERE?
#   - calculations: settlement of ONE service (balance due, cash held,
#     net with the driver/supplier, agency margin)
#   - rollups:      monthly / yearly totals per driver, supplier, client
#   - net_balance:  who pays whom, per counterparty and period
#   - reports:      statements, invoice lists and their CSV / HTML renderings
#   - formatting:   money, dates and month names for display
#
# Pages import the engine from here:
#   from utils import settle_services, resolve_net_balance
# =============================================================================

from .calculations import (
    safe_amount,
    get_fulfillment,
    collects_cash,
    calculate_balance_due,
    calculate_agency_margin,
    calculate_service_settlement,
    settle_services,
)
from .rollups import (
    is_active,
    is_cash_flow,
    is_profit_recognised,
    month_window,
    year_window,
    preset_window,
    aggregate_services,
    summarize_services,
    monthly_rollup,
    yearly_rollup,
    rollup_by_driver,
    rollup_by_supplier,
    rollup_by_service_type,
    rollup_by_client,
    driver_summary,
    supplier_summary,
    client_summary,
    month_keys,
    client_names,
)
from .net_balance import (
    net_balance,
    net_balance_direction,
    resolve_net_balance,
    resolve_month,
    counterparty_history,
)
from .reports import (
    build_supplier_statement,
    build_client_statement,
    build_driver_statement,
    build_receivables_report,
    build_payables_report,
    summary_cards,
    statement_to_csv,
    statement_to_html,
    statement_filename,
)
from .formatting import (
    format_money,
    format_signed_money,
    format_date,
    format_period,
)
