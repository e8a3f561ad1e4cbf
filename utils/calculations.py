# =============================================================================
# utils/calculations.py
# =============================================================================
# PURPOSE:
#   The per-service settlement calculator. For ONE service record it works out:
#   - How much the client still owes on-site (balance due)
#   - How much cash the driver/supplier physically holds after the job
#   - What the agency and the fulfiller owe each other for that job
#   - The agency margin (profit) on the job
#
# WHY SEPARATE FROM DATABASE QUERIES?
#   - Queries are about GETTING data
#   - Calculations are about PROCESSING data
#   - Every screen (dashboard, statements, CSV export, print) calls these
#     functions instead of redoing the arithmetic, so they can never drift
#
# BUSINESS RULES:
#   - Prepaid / Future Invoice: the client settles off-site, nothing to collect
#   - Pay to the driver / Deposit + balance to the driver / Cash:
#     the fulfiller collects the balance from the client
#   - Extras are always collected on-site by whoever did the job
#   - Profit = client price - supplier cost + extras, whoever holds the cash
# =============================================================================

import math

import pandas as pd

from config import (
    OFFSITE_PAYMENT_METHODS,
    CASH_COLLECTING_METHODS,
    PAYMENT_METHODS,
    PAYMENT_STATUS_PAID,
    STATUS_CANCELLED,
    FULFILLMENT_INTERNAL,
    FULFILLMENT_OUTSOURCED,
    FULFILLMENT_UNASSIGNED,
    DIRECTION_AGENCY_PAYS_SUPPLIER,
    DIRECTION_SUPPLIER_PAYS_AGENCY,
    DIRECTION_DRIVER_PAYS_AGENCY,
    DIRECTION_NOTHING_TO_SETTLE,
)


# Columns every service record is normalised to before calculating.
SERVICE_COLUMNS = [
    "service_id",
    "title",
    "client_name",
    "client_contact",
    "start_time",
    "end_time",
    "client_price",
    "deposit",
    "supplier_cost",
    "extras_amount",
    "extras_info",
    "payment_method",
    "client_payment_status",
    "supplier_payment_status",
    "driver_id",
    "supplier_id",
    "status",
]

MONEY_FIELDS = ["client_price", "deposit", "supplier_cost", "extras_amount"]

# Columns added by calculate_service_settlement()
SETTLEMENT_COLUMNS = [
    "fulfillment",
    "payment_method_known",
    "collects_cash",
    "balance_due",
    "cash_collected",
    "collected_by_fulfiller",
    "net_to_fulfiller",
    "settlement_direction",
    "agency_margin",
    "client_outstanding",
    "supplier_outstanding",
    "non_cash_revenue",
]


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def safe_amount(value):
    """
    Turn whatever sits in a money field into a float.

    Missing values never propagate into a sum:
        None, NaN, "", "n/a", "-"  → 0.0
        "1,250.50"                 → 1250.5
        "abc"                      → 0.0
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        if math.isnan(value) or math.isinf(value):
            return 0.0
        return float(value)
    # numpy scalars coming out of pandas
    if hasattr(value, "item"):
        return safe_amount(value.item())
    try:
        cleaned = str(value).replace(",", "").strip()
        if cleaned == "" or cleaned.lower() in ("nan", "none", "n/a", "-"):
            return 0.0
        return safe_amount(float(cleaned))
    except (ValueError, TypeError):
        return 0.0


def clean_text(value):
    """Strip a text field; None/NaN/blank become None."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    if text == "" or text.lower() == "nan":
        return None
    return text


def _field(service, name):
    # Works for dicts and pandas Series alike
    try:
        return service.get(name)
    except AttributeError:
        return getattr(service, name, None)


def get_fulfillment(service):
    """
    Which kind of party fulfils this service.

    RETURNS:
        str: INTERNAL (driver_id set), OUTSOURCED (supplier_id set)
             or UNASSIGNED (neither)

    A record carrying both ids is invalid upstream; the driver wins here
    so the record is still counted exactly once.
    """
    if clean_text(_field(service, "driver_id")):
        return FULFILLMENT_INTERNAL
    if clean_text(_field(service, "supplier_id")):
        return FULFILLMENT_OUTSOURCED
    return FULFILLMENT_UNASSIGNED


def is_cancelled(service):
    return clean_text(_field(service, "status")) == STATUS_CANCELLED


def is_offsite_payment(payment_method):
    """True when the client settles away from the service (Prepaid, Future Invoice)."""
    return clean_text(payment_method) in OFFSITE_PAYMENT_METHODS


def collects_cash(payment_method):
    """
    True when the driver/supplier physically takes money from the client.

    Unknown or missing methods are treated as NOT collecting: we never
    assume somebody holds cash unless the method says so.
    """
    return clean_text(payment_method) in CASH_COLLECTING_METHODS


def calculate_balance_due(client_price, deposit, payment_method):
    """
    Amount still owed by the client at time of service.

    BUSINESS RULES:
        - Prepaid / Future Invoice → 0 (settled off-site)
        - Anything else (including unknown methods) → price - deposit
        - Never negative: a deposit larger than the price clamps to 0

    EXAMPLE:
        calculate_balance_due(100, 20, "Cash")      → 80.0
        calculate_balance_due(100, 20, "Prepaid")   → 0.0
        calculate_balance_due(100, 150, "Cash")     → 0.0
    """
    if is_offsite_payment(payment_method):
        return 0.0
    return max(0.0, safe_amount(client_price) - safe_amount(deposit))


def calculate_agency_margin(client_price, supplier_cost, extras_amount):
    """Profit on one job: price - cost + extras. Independent of who holds the cash."""
    return safe_amount(client_price) - safe_amount(supplier_cost) + safe_amount(extras_amount)


def settlement_direction(fulfillment, net_to_fulfiller):
    """Label for the per-service settlement between agency and fulfiller."""
    if fulfillment == FULFILLMENT_OUTSOURCED:
        if net_to_fulfiller >= 0:
            return DIRECTION_AGENCY_PAYS_SUPPLIER
        return DIRECTION_SUPPLIER_PAYS_AGENCY
    if fulfillment == FULFILLMENT_INTERNAL and net_to_fulfiller < 0:
        return DIRECTION_DRIVER_PAYS_AGENCY
    return DIRECTION_NOTHING_TO_SETTLE


# =============================================================================
# PER-SERVICE SETTLEMENT
# =============================================================================

def calculate_service_settlement(service):
    """
    Calculate the full settlement picture for a single service.

    PARAMETERS:
        service (dict or pd.Series): One service record. Money fields may be
            missing, None, NaN or text - they all count as 0.

    RETURNS:
        dict: The settlement result:
            - client_price, deposit, supplier_cost, extras_amount:
                  the cleaned amounts actually used
            - fulfillment: INTERNAL / OUTSOURCED / UNASSIGNED
            - payment_method_known: is the method one of PAYMENT_METHODS?
            - collects_cash: does the fulfiller take money from the client?
            - balance_due: what the client owes on-site (never negative)
            - cash_collected: the part of balance_due the fulfiller took
            - collected_by_fulfiller: cash_collected + extras
            - net_to_fulfiller: signed settlement with the fulfiller
                  positive → agency pays the fulfiller
                  negative → fulfiller pays the agency
            - settlement_direction: human label for the sign above
            - agency_margin: price - cost + extras
            - client_outstanding: unpaid client amount (0 once PAID)
            - supplier_outstanding: unpaid supplier cost (0 once PAID)
            - non_cash_revenue: revenue NOT collected in cash on-site
                  (deposits, card, bank transfer, invoice)

    HOW IT WORKS:
        1. Balance due on-site from price, deposit and payment method
        2. Cash flag from the payment method
        3. Amount held = (cash ? balance due : 0) + extras
        4. Net with the fulfiller:
           - driver: no cost owed, everything held goes back to the agency
           - supplier: cost - held
        5. Margin = price - cost + extras

    EXAMPLE:
        calculate_service_settlement({
            "client_price": 100, "supplier_cost": 60,
            "payment_method": "Pay to the driver", "supplier_id": "sup-1",
        })
        → collected_by_fulfiller 100, net_to_fulfiller -40
          ("supplier pays agency")
    """
    client_price = safe_amount(_field(service, "client_price"))
    deposit = safe_amount(_field(service, "deposit"))
    extras_amount = safe_amount(_field(service, "extras_amount"))
    payment_method = clean_text(_field(service, "payment_method"))
    fulfillment = get_fulfillment(service)

    # Supplier cost means nothing when our own driver did the job
    if fulfillment == FULFILLMENT_INTERNAL:
        supplier_cost = 0.0
    else:
        supplier_cost = safe_amount(_field(service, "supplier_cost"))

    # -----------------------------------------------------------------
    # STEP 1-3: WHAT THE FULFILLER HOLDS
    # -----------------------------------------------------------------
    balance_due = calculate_balance_due(client_price, deposit, payment_method)
    cash = collects_cash(payment_method)
    cash_collected = balance_due if cash else 0.0
    collected_by_fulfiller = cash_collected + extras_amount

    # -----------------------------------------------------------------
    # STEP 4: NET SETTLEMENT WITH THE FULFILLER
    # -----------------------------------------------------------------
    if fulfillment == FULFILLMENT_OUTSOURCED:
        net_to_fulfiller = supplier_cost - collected_by_fulfiller
    elif fulfillment == FULFILLMENT_INTERNAL:
        # The driver hands back everything collected
        net_to_fulfiller = -collected_by_fulfiller
    else:
        net_to_fulfiller = 0.0

    # -----------------------------------------------------------------
    # STEP 5: PROFIT
    # -----------------------------------------------------------------
    agency_margin = calculate_agency_margin(client_price, supplier_cost, extras_amount)

    # -----------------------------------------------------------------
    # OUTSTANDING AMOUNTS (for receivable / payable views)
    # -----------------------------------------------------------------
    if clean_text(_field(service, "client_payment_status")) == PAYMENT_STATUS_PAID:
        client_outstanding = 0.0
    else:
        client_outstanding = max(0.0, client_price - deposit)

    if (fulfillment == FULFILLMENT_OUTSOURCED
            and clean_text(_field(service, "supplier_payment_status")) != PAYMENT_STATUS_PAID):
        supplier_outstanding = supplier_cost
    else:
        supplier_outstanding = 0.0

    return {
        "client_price": client_price,
        "deposit": deposit,
        "supplier_cost": supplier_cost,
        "extras_amount": extras_amount,
        "fulfillment": fulfillment,
        "payment_method_known": payment_method in PAYMENT_METHODS,
        "collects_cash": cash,
        "balance_due": balance_due,
        "cash_collected": cash_collected,
        "collected_by_fulfiller": collected_by_fulfiller,
        "net_to_fulfiller": net_to_fulfiller,
        "settlement_direction": settlement_direction(fulfillment, net_to_fulfiller),
        "agency_margin": agency_margin,
        "client_outstanding": client_outstanding,
        "supplier_outstanding": supplier_outstanding,
        "non_cash_revenue": client_price - cash_collected,
    }


# =============================================================================
# MANY SERVICES AT ONCE
# =============================================================================

def to_services_frame(services):
    """
    Accept a DataFrame, a list of dicts, or None and return a DataFrame
    that has at least SERVICE_COLUMNS.
    """
    if services is None:
        df = pd.DataFrame(columns=SERVICE_COLUMNS)
    elif isinstance(services, pd.DataFrame):
        df = services.copy()
    else:
        df = pd.DataFrame(list(services))

    for col in SERVICE_COLUMNS:
        if col not in df.columns:
            df[col] = None
    return df


def settle_services(services):
    """
    Run calculate_service_settlement() on every service.

    PARAMETERS:
        services (pd.DataFrame or list of dict): Service records

    RETURNS:
        pd.DataFrame: The input columns with the cleaned money fields,
            every SETTLEMENT_COLUMNS column, plus:
            - start_ts: parsed start time (NaT when unparseable)
            - period_month: "YYYY-MM" of the start time
            - period_year: "YYYY" of the start time

    The input is never modified (we work on a copy).
    """
    df = to_services_frame(services)

    if len(df) == 0:
        for col in SETTLEMENT_COLUMNS + ["start_ts", "period_month", "period_year"]:
            df[col] = pd.Series(dtype="object")
        for col in MONEY_FIELDS:
            df[col] = pd.Series(dtype="float64")
        return df

    df = df.reset_index(drop=True)

    # Calculate for each row
    results = pd.DataFrame(
        [calculate_service_settlement(row) for _, row in df.iterrows()],
        index=df.index,
    )

    # Cleaned amounts replace the raw ones
    for col in results.columns:
        df[col] = results[col]

    df["start_ts"] = parse_timestamps(df["start_time"])
    df["period_month"] = df["start_ts"].dt.strftime("%Y-%m")
    df["period_year"] = df["start_ts"].dt.strftime("%Y")
    return df


def parse_timestamp(value):
    """
    Parse one start time; unreadable values become NaT instead of raising.

    Offsets are dropped and the wall-clock time kept, the same way
    database/queries.py stores start times:
        "2025-04-01T00:30:00+02:00" → 2025-04-01 00:30 (April, not March)
    """
    if isinstance(value, str):
        value = value.strip()
    if value is None or value == "" or (not isinstance(value, str) and pd.isna(value)):
        return pd.NaT
    stamp = pd.to_datetime(value, errors="coerce", format="mixed")
    if pd.isna(stamp):
        return pd.NaT
    if stamp.tzinfo is not None:
        stamp = stamp.tz_localize(None)
    return stamp


def parse_timestamps(values):
    """
    Parse a column of start times, each value on its own.

    A record's month never depends on which other records are in the
    column (two offsets side by side do not push everything to UTC).
    """
    series = pd.Series(values)
    parsed = [parse_timestamp(value) for value in series]
    return pd.Series(parsed, index=series.index, dtype="datetime64[ns]")


# =============================================================================
# LEARNING NOTES: MONEY FIELDS THAT ARE NOT NUMBERS
# =============================================================================
#
# WHY safe_amount() EVERYWHERE?
#   Records come from forms, CSV imports and SQLite. A missing price can be
#   None, NaN, "" or "n/a" depending on where it came from. Adding NaN to a
#   total silently turns the whole total into NaN, so every money field is
#   cleaned before it touches a sum.
#
# WHY CLAMP THE BALANCE?
#   A deposit larger than the price is a data-entry mistake. The engine
#   does not try to fix it - it just never reports a negative balance.
#   Validation belongs to the screen that accepts the record.
#
# =============================================================================
