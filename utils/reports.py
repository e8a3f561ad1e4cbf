# =============================================================================
# utils/reports.py
# =============================================================================
# PURPOSE:
#   Builds the statements the back office hands out (supplier, client,
#   driver, and the receivables / payables invoice lists) and renders
#   them three ways:
#   - summary_cards():     label/value pairs for the on-screen metric cards
#   - statement_to_csv():  CSV export
#   - statement_to_html(): printable HTML statement (print → PDF in browser)
#
# ONE STATEMENT, THREE PRESENTATIONS:
#   build_*_statement() does all the money work by calling the settlement
#   engine (calculations / rollups / net_balance). The renderers only
#   FORMAT the numbers in the statement dict. If the screen, the CSV and
#   the printout ever disagree, the bug is in a renderer, not the maths.
#
# STATEMENT DICT:
#   kind        "supplier" / "client" / "driver" / "receivables" / "payables"
#   title       e.g. "Statement: Blue Line Transfers"
#   month       "YYYY-MM" or None
#   start, end  the window used (end exclusive)
#   metrics     list of {"key", "label", "value", "format"}
#   columns     list of (column, header, format) for the lines table
#   lines       DataFrame, one row per service, raw numbers
#   footer      list of {"kind": ..., ...} rows under the table
#   summary     the engine dict the statement was built from
# =============================================================================

import html
import io

import pandas as pd

from config import (
    AMOUNT_TOLERANCE,
    SETTLEMENT_NOTHING_OWED,
    PAYMENT_FUTURE_INVOICE,
    PAYMENT_STATUS_PAID,
    PAYMENT_STATUS_PARTIAL,
    FULFILLMENT_OUTSOURCED,
)
from .calculations import clean_text
from .rollups import (
    is_active,
    month_window,
    select_services,
    client_summary,
    driver_summary,
    same_name,
    name_key,
    display_name,
    matches_value,
)
from .net_balance import (
    net_balance,
    resolve_net_balance,
    split_counterparty_services,
)
from .formatting import (
    resolve_settings,
    format_value,
    format_period,
    format_window,
    format_plain,
    format_money,
    format_signed_money,
)


REPORT_TYPE_OUTSOURCED = "OUTSOURCED"
REPORT_TYPE_AGENCY = "AGENCY"

SUPPLIER_COLUMNS = [
    ("date", "Date", "date"),
    ("title", "Service", "text"),
    ("report_type", "Type", "text"),
    ("payment_method", "Payment method", "text"),
    ("payable", "Payable (cost)", "money"),
    ("held", "Supplier holds", "money"),
    ("receivable", "Receivable (price)", "money"),
    ("net", "Net balance", "signed"),
    ("payment_status", "Status", "text"),
]

CLIENT_COLUMNS = [
    ("date", "Date", "date"),
    ("title", "Service", "text"),
    ("payment_method", "Payment method", "text"),
    ("client_price", "Client price", "money"),
    ("deposit", "Deposit", "money"),
    ("balance", "Balance due", "money"),
    ("payment_status", "Status", "text"),
]

DRIVER_COLUMNS = [
    ("date", "Date", "date"),
    ("title", "Service", "text"),
    ("client_name", "Client", "text"),
    ("payment_method", "Payment method", "text"),
    ("client_price", "Client price", "money"),
    ("cash_held", "Cash held", "money"),
    ("margin", "Margin", "signed"),
    ("payment_status", "Status", "text"),
]


def _window(month_key, start, end):
    if month_key:
        return month_window(month_key)
    return start, end


def _empty_lines(columns):
    return pd.DataFrame(columns=[col for col, _, _ in columns])


def _sorted_lines(rows, columns):
    if not rows:
        return _empty_lines(columns)
    lines = pd.DataFrame(rows)
    lines = lines.sort_values("date", ascending=False, na_position="last")
    return lines[[col for col, _, _ in columns]].reset_index(drop=True)


# =============================================================================
# SUPPLIER / COUNTERPARTY STATEMENT
# =============================================================================

def build_supplier_statement(services, supplier, month_key=None, start=None, end=None,
                             qualifies=is_active):
    """
    Monthly statement for a supplier that may also be our client.

    PARAMETERS:
        services (pd.DataFrame or list of dict): All service records
        supplier (dict or pd.Series): needs supplier_id and name
        month_key (str): "YYYY-MM" - takes precedence over start/end
        start, end: Any other window (end exclusive)

    RETURNS:
        dict: statement (see module header). statement["net_balance"] is
            the resolve_net_balance() result; the footer and metrics are
            copied from it, never recomputed.

    LINES:
        OUTSOURCED rows (jobs it did for us): payable, held, net = held - cost
        AGENCY rows (jobs billed to it):      receivable, net = receivable
        Each line's net comes from net_balance() too, so the lines add up
        to the statement's net balance.
    """
    start, end = _window(month_key, start, end)
    resolved = resolve_net_balance(services, supplier, start, end, qualifies)

    outsourced, client = split_counterparty_services(services, supplier)
    outsourced = select_services(outsourced, qualifies, start, end)
    client = select_services(client, qualifies, start, end)

    rows = []
    for _, s in outsourced.iterrows():
        payable = s["supplier_cost"]
        held = s["collected_by_fulfiller"]
        rows.append({
            "date": s["start_ts"],
            "service_id": s.get("service_id"),
            "title": s.get("title"),
            "report_type": REPORT_TYPE_OUTSOURCED,
            "payment_method": clean_text(s.get("payment_method")),
            "payable": payable,
            "held": held,
            "receivable": 0.0,
            "net": net_balance(0.0, payable, held),
            "payment_status": clean_text(s.get("supplier_payment_status")),
        })
    for _, s in client.iterrows():
        receivable = s["client_price"]
        rows.append({
            "date": s["start_ts"],
            "service_id": s.get("service_id"),
            "title": s.get("title"),
            "report_type": REPORT_TYPE_AGENCY,
            "payment_method": clean_text(s.get("payment_method")),
            "payable": 0.0,
            "held": 0.0,
            "receivable": receivable,
            "net": net_balance(receivable, 0.0, 0.0),
            "payment_status": clean_text(s.get("client_payment_status")),
        })

    metrics = [
        {"key": "period", "label": "Period", "value": month_key or format_window(start, end), "format": "period"},
        {"key": "total_payable", "label": "Amount payable", "value": resolved["total_payable"], "format": "money"},
        {"key": "total_held", "label": "Supplier holds (cash)", "value": resolved["total_held"], "format": "money"},
        {"key": "total_receivable", "label": "Amount receivable", "value": resolved["total_receivable"], "format": "money"},
        {"key": "net_balance", "label": "Net balance", "value": resolved["net_balance"], "format": "signed"},
    ]

    footer = [
        {
            "kind": "totals",
            "payable": resolved["total_payable"],
            "held": resolved["total_held"],
            "receivable": resolved["total_receivable"],
        },
        {
            "kind": "calculation",
            "payable": resolved["total_payable"],
            "held": resolved["total_held"],
            "receivable": resolved["total_receivable"],
            "net": resolved["net_balance"],
        },
        {
            "kind": "settlement",
            "amount": resolved["amount"],
            "direction": resolved["direction"],
        },
    ]

    return {
        "kind": "supplier",
        "title": f"Statement: {resolved['counterparty_name'] or resolved['counterparty_id']}",
        "entity_name": resolved["counterparty_name"],
        "month": month_key,
        "start": start,
        "end": end,
        "metrics": metrics,
        "columns": SUPPLIER_COLUMNS,
        "lines": _sorted_lines(rows, SUPPLIER_COLUMNS),
        "footer": footer,
        "net_balance": resolved,
        "summary": resolved,
    }


# =============================================================================
# CLIENT STATEMENT
# =============================================================================

def build_client_statement(services, client_name, month_key=None, start=None, end=None,
                           qualifies=is_active):
    """
    What one client was billed, paid and still owes in a period.

    The "Balance due" column is each service's outstanding amount
    (price - deposit, 0 once PAID), so the column total equals the
    "Outstanding balance" card.
    """
    start, end = _window(month_key, start, end)
    summary = client_summary(services, client_name, start, end, qualifies)

    settled = select_services(services, qualifies, start, end)
    if len(settled):
        settled = settled[settled["client_name"].map(lambda name: same_name(name, client_name))]

    rows = []
    for _, s in settled.iterrows():
        rows.append({
            "date": s["start_ts"],
            "service_id": s.get("service_id"),
            "title": s.get("title"),
            "payment_method": clean_text(s.get("payment_method")),
            "client_price": s["client_price"],
            "deposit": s["deposit"],
            "balance": s["client_outstanding"],
            "payment_status": clean_text(s.get("client_payment_status")),
        })

    metrics = [
        {"key": "period", "label": "Period", "value": month_key or format_window(start, end), "format": "period"},
        {"key": "services_count", "label": "Total services", "value": summary["services_count"], "format": "count"},
        {"key": "total_billed", "label": "Total billed", "value": summary["total_billed"], "format": "money"},
        {"key": "total_paid", "label": "Total paid", "value": summary["total_paid"], "format": "money"},
        {"key": "outstanding_balance", "label": "Outstanding balance", "value": summary["outstanding_balance"], "format": "money"},
    ]

    footer = [{
        "kind": "totals",
        "client_price": summary["total_billed"],
        "deposit": summary["total_deposits"],
        "balance": summary["outstanding_balance"],
    }]

    return {
        "kind": "client",
        "title": f"Statement: {client_name}",
        "entity_name": client_name,
        "month": month_key,
        "start": start,
        "end": end,
        "metrics": metrics,
        "columns": CLIENT_COLUMNS,
        "lines": _sorted_lines(rows, CLIENT_COLUMNS),
        "footer": footer,
        "net_balance": None,
        "summary": summary,
    }


# =============================================================================
# DRIVER STATEMENT
# =============================================================================

def build_driver_statement(services, driver, month_key=None, start=None, end=None,
                           qualifies=is_active):
    """
    The jobs one in-house driver did, and the cash they must hand back.

    PARAMETERS:
        driver (dict or pd.Series): needs driver_id and name
    """
    start, end = _window(month_key, start, end)
    driver_id = driver.get("driver_id")
    summary = driver_summary(services, driver_id, start, end, qualifies)

    settled = select_services(services, qualifies, start, end)
    if len(settled):
        settled = settled[matches_value(settled["driver_id"], driver_id)]

    rows = []
    for _, s in settled.iterrows():
        rows.append({
            "date": s["start_ts"],
            "service_id": s.get("service_id"),
            "title": s.get("title"),
            "client_name": clean_text(s.get("client_name")),
            "payment_method": clean_text(s.get("payment_method")),
            "client_price": s["client_price"],
            "cash_held": s["collected_by_fulfiller"],
            "margin": s["agency_margin"],
            "payment_status": clean_text(s.get("client_payment_status")),
        })

    metrics = [
        {"key": "period", "label": "Period", "value": month_key or format_window(start, end), "format": "period"},
        {"key": "services_count", "label": "Total services", "value": summary["services_count"], "format": "count"},
        {"key": "total_revenue", "label": "Revenue", "value": summary["total_revenue"], "format": "money"},
        {"key": "cash_to_remit", "label": "Cash to hand back", "value": summary["cash_to_remit"], "format": "money"},
        {"key": "total_profit", "label": "Agency margin", "value": summary["total_profit"], "format": "signed"},
    ]

    footer = [{
        "kind": "totals",
        "client_price": summary["total_revenue"],
        "cash_held": summary["cash_to_remit"],
        "margin": summary["total_profit"],
    }]

    name = driver.get("name") or driver_id
    return {
        "kind": "driver",
        "title": f"Driver report: {name}",
        "entity_name": name,
        "month": month_key,
        "start": start,
        "end": end,
        "metrics": metrics,
        "columns": DRIVER_COLUMNS,
        "lines": _sorted_lines(rows, DRIVER_COLUMNS),
        "footer": footer,
        "net_balance": None,
        "summary": summary,
    }


# =============================================================================
# INVOICES: RECEIVABLES AND PAYABLES
# =============================================================================
# Receivables: services billed on a "Future Invoice", per client.
# Payables:    supplier costs on outsourced jobs, per supplier.
#
# Each line shows amount / paid / due:
#   client PAID     → paid = client price
#   client PARTIAL  → paid = the deposit
#   supplier PAID   → paid = supplier cost
#   anything else   → paid = 0
# -----------------------------------------------------------------------------

RECEIVABLE_COLUMNS = [
    ("date", "Date", "date"),
    ("title", "Service", "text"),
    ("entity", "Client", "text"),
    ("amount", "Amount", "money"),
    ("paid", "Paid", "money"),
    ("due", "Due", "money"),
    ("payment_status", "Status", "text"),
]

PAYABLE_COLUMNS = [
    ("date", "Date", "date"),
    ("title", "Service", "text"),
    ("entity", "Supplier", "text"),
    ("payment_method", "Payment method", "text"),
    ("amount", "Amount", "money"),
    ("paid", "Paid", "money"),
    ("due", "Due", "money"),
    ("payment_status", "Status", "text"),
]

ENTITY_TOTAL_COLUMNS = ["entity", "services_count", "amount", "paid", "due"]


def invoice_paid_amount(amount, payment_status, deposit=0.0):
    """
    How much of an invoiced amount has been paid.

    EXAMPLE:
        invoice_paid_amount(300, "PAID")         → 300
        invoice_paid_amount(300, "PARTIAL", 50)  → 50
        invoice_paid_amount(300, "UNPAID", 50)   → 0
    """
    status = clean_text(payment_status)
    if status == PAYMENT_STATUS_PAID:
        return amount
    if status == PAYMENT_STATUS_PARTIAL:
        return min(deposit, amount)
    return 0.0


def _supplier_names(suppliers):
    if suppliers is None:
        return {}
    if isinstance(suppliers, pd.DataFrame):
        suppliers = suppliers.to_dict("records")
    return {clean_text(s.get("supplier_id")): clean_text(s.get("name")) for s in suppliers}


def _entity_totals(lines):
    """One row per client / supplier, largest amount due first."""
    if len(lines) == 0:
        return pd.DataFrame(columns=ENTITY_TOTAL_COLUMNS)
    keyed = lines.assign(_key=lines["entity"].map(lambda name: name_key(name) or ""))
    totals = keyed.groupby("_key", sort=False).agg(
        entity=("entity", "first"),
        services_count=("amount", "size"),
        amount=("amount", "sum"),
        paid=("paid", "sum"),
        due=("due", "sum"),
    )
    totals["services_count"] = totals["services_count"].astype(int)
    totals = totals.sort_values(["due", "entity"], ascending=[False, True])
    return totals[ENTITY_TOTAL_COLUMNS].reset_index(drop=True)


def _invoice_report(kind, title, entity_name, rows, columns, month_key, start, end, entity_label):
    lines = _sorted_lines(rows, columns)
    amount = float(lines["amount"].sum()) if len(lines) else 0.0
    paid = float(lines["paid"].sum()) if len(lines) else 0.0
    due = float(lines["due"].sum()) if len(lines) else 0.0

    metrics = [
        {"key": "period", "label": "Period", "value": month_key or format_window(start, end), "format": "period"},
        {"key": "services_count", "label": "Invoices", "value": len(lines), "format": "count"},
        {"key": "total_amount", "label": "Total amount", "value": amount, "format": "money"},
        {"key": "total_paid", "label": "Already paid", "value": paid, "format": "money"},
        {"key": "total_due", "label": "Still due", "value": due, "format": "money"},
    ]
    footer = [{"kind": "totals", "amount": amount, "paid": paid, "due": due}]

    return {
        "kind": kind,
        "title": title,
        "entity_name": entity_name or entity_label,
        "month": month_key,
        "start": start,
        "end": end,
        "metrics": metrics,
        "columns": columns,
        "lines": lines,
        "footer": footer,
        "by_entity": _entity_totals(lines),
        "net_balance": None,
        "summary": {"services_count": len(lines), "total_amount": amount,
                    "total_paid": paid, "total_due": due},
    }


def build_receivables_report(services, client_name=None, month_key=None, start=None, end=None,
                             qualifies=is_active):
    """
    What clients on a "Future Invoice" were billed, have paid and still owe.

    PARAMETERS:
        services (pd.DataFrame or list of dict): All service records
        client_name (str): Only this client (matched loosely); None = all
        month_key (str): "YYYY-MM" - takes precedence over start/end
        start, end: Any other window (end exclusive)

    RETURNS:
        dict: statement (see module header) plus "by_entity", a DataFrame
            with one row per client: services_count, amount, paid, due.

    EXAMPLE:
        Price 300, deposit 50, PARTIAL → amount 300, paid 50, due 250
    """
    start, end = _window(month_key, start, end)
    settled = select_services(services, qualifies, start, end)
    if len(settled):
        settled = settled[settled["payment_method"].map(clean_text) == PAYMENT_FUTURE_INVOICE]
    if client_name and len(settled):
        settled = settled[settled["client_name"].map(lambda name: same_name(name, client_name))]

    rows = []
    for _, s in settled.iterrows():
        amount = s["client_price"]
        paid = invoice_paid_amount(amount, s.get("client_payment_status"), s["deposit"])
        rows.append({
            "date": s["start_ts"],
            "service_id": s.get("service_id"),
            "title": s.get("title"),
            "entity": display_name(s.get("client_name")),
            "amount": amount,
            "paid": paid,
            "due": max(0.0, amount - paid),
            "payment_status": clean_text(s.get("client_payment_status")),
        })

    title = f"Receivables: {client_name}" if client_name else "Receivables: all clients"
    return _invoice_report("receivables", title, client_name, rows, RECEIVABLE_COLUMNS,
                           month_key, start, end, "receivables")


def build_payables_report(services, suppliers=None, supplier=None, month_key=None, start=None,
                          end=None, qualifies=is_active):
    """
    Supplier bills: the cost of every outsourced job, paid or still due.

    PARAMETERS:
        services (pd.DataFrame or list of dict): All service records
        suppliers (pd.DataFrame or list of dict): For supplier names
        supplier (dict or pd.Series): Only this supplier; None = all.
            With one supplier the report also carries its net balance
            (report["net_balance"], from resolve_net_balance), because
            the bills alone ignore the cash it holds and what it owes
            us as a client.

    RETURNS:
        dict: statement plus "by_entity" (one row per supplier)
    """
    start, end = _window(month_key, start, end)
    settled = select_services(services, qualifies, start, end)
    if len(settled):
        settled = settled[settled["fulfillment"] == FULFILLMENT_OUTSOURCED]

    supplier_id = None
    if supplier is not None:
        supplier_id = clean_text(supplier.get("supplier_id"))
        if len(settled):
            settled = settled[matches_value(settled["supplier_id"], supplier_id)]

    names = _supplier_names(suppliers)
    if supplier is not None and supplier.get("name"):
        names[supplier_id] = clean_text(supplier.get("name"))

    rows = []
    for _, s in settled.iterrows():
        amount = s["supplier_cost"]
        paid = invoice_paid_amount(amount, s.get("supplier_payment_status"))
        sid = clean_text(s.get("supplier_id"))
        rows.append({
            "date": s["start_ts"],
            "service_id": s.get("service_id"),
            "title": s.get("title"),
            "entity": names.get(sid) or sid,
            "payment_method": clean_text(s.get("payment_method")),
            "amount": amount,
            "paid": paid,
            "due": max(0.0, amount - paid),
            "payment_status": clean_text(s.get("supplier_payment_status")),
        })

    entity_name = (names.get(supplier_id) or supplier_id) if supplier is not None else None
    title = f"Supplier bills: {entity_name}" if entity_name else "Supplier bills: all suppliers"
    report = _invoice_report("payables", title, entity_name, rows, PAYABLE_COLUMNS,
                             month_key, start, end, "payables")

    if supplier is not None:
        resolved = resolve_net_balance(services, supplier, start, end, qualifies)
        report["net_balance"] = resolved
        report["metrics"].append(
            {"key": "net_balance", "label": "Net balance", "value": resolved["net_balance"], "format": "signed"}
        )
    return report


# =============================================================================
# RENDERERS
# =============================================================================

def statement_subtitle(statement, settings=None):
    if statement.get("month"):
        return format_period(statement["month"], settings)
    return format_window(statement.get("start"), statement.get("end"), settings)


def summary_cards(statement, settings=None):
    """
    Metric cards for the screen.

    RETURNS:
        list of dict: {"key", "label", "value"} with value already formatted
    """
    settings = resolve_settings(settings)
    cards = []
    for metric in statement["metrics"]:
        if metric["key"] == "period":
            value = statement_subtitle(statement, settings)
        else:
            value = format_value(metric["value"], metric["format"], settings)
        cards.append({"key": metric["key"], "label": metric["label"], "value": value})
    return cards


def statement_table(statement, settings=None, plain=False):
    """The lines as a DataFrame of display strings, headed with column labels."""
    settings = resolve_settings(settings)
    columns = statement["columns"]
    lines = statement["lines"]

    table = pd.DataFrame({
        header: [format_value(value, fmt, settings, plain=plain) for value in lines[column]]
        for column, header, fmt in columns
    }, columns=[header for _, header, _ in columns])
    return table


def _paren(amount, sign, settings, plain):
    text = format_plain(abs(amount)) if plain else format_money(abs(amount), settings)
    return f"({sign}{text})"


def footer_cells(row, statement, settings=None, plain=False):
    """
    One footer row as {column: display string}.

    totals       → label in the first column, totals under their columns
    calculation  → (-payable) (+held) (+receivable) = net
    settlement   → final amount and direction under the net column
                   ("nothing owed either way" when the amount rounds to 0)
    """
    settings = resolve_settings(settings)
    columns = statement["columns"]
    formats = {column: fmt for column, _, fmt in columns}
    first = columns[0][0]
    cells = {column: "" for column, _, _ in columns}

    if row["kind"] == "totals":
        cells[first] = "TOTALS"
        for column, value in row.items():
            if column in formats:
                cells[column] = format_value(value, "money", settings, plain=plain)

    elif row["kind"] == "calculation":
        cells[first] = "Calculation"
        cells["payable"] = _paren(row["payable"], "-", settings, plain)
        cells["held"] = _paren(row["held"], "+", settings, plain)
        cells["receivable"] = _paren(row["receivable"], "+", settings, plain)
        net_text = format_plain(row["net"]) if plain else format_signed_money(row["net"], settings)
        cells["net"] = f"= {net_text}"

    elif row["kind"] == "settlement":
        cells[first] = "Final settlement"
        amount = format_plain(row["amount"]) if plain else format_money(row["amount"], settings)
        if abs(row["amount"]) < AMOUNT_TOLERANCE:
            cells["net"] = f"{amount} ({SETTLEMENT_NOTHING_OWED})"
        else:
            cells["net"] = f"{amount} ({row['direction']})"

    return cells


def statement_to_csv(statement, settings=None):
    """
    CSV export of a statement: lines, a blank spacer row, then the footer.

    Amounts are written as plain numbers with two decimals.

    RETURNS:
        str: CSV text (header row included)
    """
    settings = resolve_settings(settings)
    table = statement_table(statement, settings, plain=True)
    headers = {column: header for column, header, _ in statement["columns"]}

    extra = []
    if statement["footer"]:
        extra.append({header: "" for header in table.columns})
        for row in statement["footer"]:
            cells = footer_cells(row, statement, settings, plain=True)
            extra.append({headers[column]: text for column, text in cells.items()})

    if extra:
        table = pd.concat([table, pd.DataFrame(extra, columns=table.columns)], ignore_index=True)

    buffer = io.StringIO()
    table.to_csv(buffer, index=False, lineterminator="\n")
    return buffer.getvalue()


def statement_filename(statement, extension="csv"):
    name = (statement.get("entity_name") or statement["kind"]).strip().replace(" ", "_")
    period = statement.get("month") or "all"
    return f"statement_{name}_{period}.{extension}"


PRINT_CSS = """
    body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; padding: 40px; color: #333; }
    .header { margin-bottom: 30px; border-bottom: 2px solid #eee; padding-bottom: 20px; }
    h1 { margin: 0; font-size: 24px; color: #1e293b; }
    p { margin: 5px 0 0; color: #64748b; font-size: 14px; }
    .metrics { display: flex; gap: 20px; margin-bottom: 30px; flex-wrap: wrap; }
    .metric { background: #f8fafc; padding: 15px; border-radius: 8px; min-width: 140px; border: 1px solid #e2e8f0; }
    .metric-label { display: block; font-size: 11px; color: #64748b; text-transform: uppercase; font-weight: 600; }
    .metric-value { display: block; font-size: 18px; font-weight: bold; margin-top: 5px; color: #0f172a; }
    table { width: 100%; border-collapse: collapse; font-size: 13px; }
    th { text-align: left; padding: 12px 8px; background: #f1f5f9; border-bottom: 2px solid #cbd5e1; font-size: 11px; text-transform: uppercase; }
    td { padding: 10px 8px; border-bottom: 1px solid #e2e8f0; vertical-align: top; }
    tr.footer td { font-weight: bold; background: #f8fafc; }
    .footer { margin-top: 40px; font-size: 11px; color: #94a3b8; text-align: center; }
    @media print { body { padding: 0; } th { background-color: #eee !important; } }
"""


def statement_to_html(statement, settings=None, generated_on=None):
    """
    Printable HTML version of a statement.

    Open it in a browser and print (Ctrl+P / Cmd+P) to save as PDF.

    RETURNS:
        str: a complete HTML document
    """
    settings = resolve_settings(settings)
    esc = html.escape

    cards = summary_cards(statement, settings)
    metrics_html = "".join(
        f'<div class="metric"><span class="metric-label">{esc(card["label"])}</span>'
        f'<span class="metric-value">{esc(card["value"])}</span></div>'
        for card in cards
    )

    table = statement_table(statement, settings)
    header_html = "".join(f"<th>{esc(header)}</th>" for header in table.columns)
    body_rows = [
        "<tr>" + "".join(f"<td>{esc(str(cell))}</td>" for cell in row) + "</tr>"
        for row in table.itertuples(index=False)
    ]
    for footer_row in statement["footer"]:
        cells = footer_cells(footer_row, statement, settings)
        body_rows.append(
            '<tr class="footer">'
            + "".join(f"<td>{esc(cells[column])}</td>" for column, _, _ in statement["columns"])
            + "</tr>"
        )

    generated = format_value(generated_on or pd.Timestamp.now(), "date", settings)
    title = esc(statement["title"])

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>{PRINT_CSS}</style>
</head>
<body>
<div class="header">
    <h1>{title}</h1>
    <p>{esc(statement_subtitle(statement, settings))} · {esc(settings["agency_name"])}</p>
    <p>Generated on {esc(generated)}</p>
</div>
<div class="metrics">{metrics_html}</div>
<table>
    <thead><tr>{header_html}</tr></thead>
    <tbody>{"".join(body_rows)}</tbody>
</table>
<div class="footer">Use your browser's print function (Ctrl+P / Cmd+P) to save this statement as a PDF.</div>
</body>
</html>
"""
