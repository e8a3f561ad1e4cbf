# =============================================================================
# utils/rollups.py
# =============================================================================
# PURPOSE:
#   The period aggregator. Takes a set of service records and a reporting
#   window, runs the per-service settlement on each one and sums the results
#   per bucket (calendar month, year, month x driver, month x supplier ...).
#
# WHAT IT PRODUCES:
#   One "rollup" row per bucket with:
#   - services_count
#   - revenue, deposits, supplier cost, extras, profit
#   - cash held by drivers vs by suppliers, and revenue settled off-site
#   - outstanding receivables (client not PAID) and payables (supplier not PAID)
#
# WHICH SERVICES COUNT?
#   Cancelled services never count. On top of that the caller picks a
#   "qualifies" predicate:
#   - is_active:            everything not cancelled (default)
#   - is_cash_flow:         CONFIRMED, IN_PROGRESS, COMPLETED (live money views)
#   - is_profit_recognised: COMPLETED only (profit views)
#
# WINDOWS:
#   Windows are half-open: start <= start_time < end. Two windows that
#   share a boundary never count the same service twice.
# =============================================================================

from datetime import datetime

import pandas as pd

from config import (
    CASH_FLOW_STATUSES,
    PROFIT_STATUSES,
    FULFILLMENT_INTERNAL,
    FULFILLMENT_OUTSOURCED,
)
from .calculations import settle_services, to_services_frame, is_cancelled, clean_text


# -----------------------------------------------------------------------------
# WHAT A ROLLUP ROW CONTAINS
# -----------------------------------------------------------------------------
# output column -> (settled column, aggregation)
ROLLUP_AGGREGATIONS = {
    "services_count": ("client_price", "size"),
    "total_revenue": ("client_price", "sum"),
    "total_deposits": ("deposit", "sum"),
    "total_cost": ("supplier_cost", "sum"),
    "total_extras": ("extras_amount", "sum"),
    "total_balance_due": ("balance_due", "sum"),
    "total_collected": ("collected_by_fulfiller", "sum"),
    "collected_by_drivers": ("_collected_by_driver", "sum"),
    "collected_by_suppliers": ("_collected_by_supplier", "sum"),
    "non_cash_revenue": ("non_cash_revenue", "sum"),
    "total_profit": ("agency_margin", "sum"),
    "net_to_suppliers": ("_net_to_supplier", "sum"),
    "driver_remittance": ("_collected_by_driver", "sum"),
    "outstanding_receivable": ("client_outstanding", "sum"),
    "outstanding_payable": ("supplier_outstanding", "sum"),
}

ROLLUP_COLUMNS = list(ROLLUP_AGGREGATIONS.keys())

# Friendly group names -> settled column
PERIOD_KEYS = {
    "month": "period_month",
    "year": "period_year",
}


# =============================================================================
# QUALIFYING PREDICATES
# =============================================================================

def is_active(service):
    """Default predicate: everything that is not cancelled."""
    return not is_cancelled(service)


def is_cash_flow(service):
    """Confirmed or later - used for receivable / payable views."""
    return clean_text(service.get("status")) in CASH_FLOW_STATUSES


def is_profit_recognised(service):
    """Completed services only - used for revenue / profit views."""
    return clean_text(service.get("status")) in PROFIT_STATUSES


# =============================================================================
# REPORTING WINDOWS
# =============================================================================

def month_window(month_key):
    """
    Window covering one calendar month.

    PARAMETERS:
        month_key (str): "YYYY-MM"

    RETURNS:
        tuple: (start, end) Timestamps, end exclusive

    EXAMPLE:
        month_window("2025-02") → (2025-02-01 00:00, 2025-03-01 00:00)
    """
    try:
        period = pd.Period(str(month_key), freq="M")
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid month key {month_key!r} (expected YYYY-MM)") from e
    return period.start_time, (period + 1).start_time


def year_window(year):
    """Window covering one calendar year; end exclusive."""
    try:
        period = pd.Period(str(year), freq="Y")
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid year {year!r}") from e
    return period.start_time, (period + 1).start_time


def current_month_key(today=None):
    today = today or datetime.now()
    return today.strftime("%Y-%m")


def preset_window(preset, today=None):
    """
    Windows for the dashboard period selector.

    PRESETS:
        this_month, last_month, year_to_date, all

    RETURNS:
        tuple: (start, end) - both None for "all"
    """
    now = pd.Timestamp(today or datetime.now())

    if preset == "this_month":
        return month_window(now.strftime("%Y-%m"))
    if preset == "last_month":
        last = now.to_period("M") - 1
        return month_window(str(last))
    if preset == "year_to_date":
        start, _ = year_window(now.year)
        # Up to the end of today
        return start, now.normalize() + pd.Timedelta(days=1)
    if preset == "all":
        return None, None
    raise ValueError(f"Unknown period preset: {preset!r}")


def _as_timestamp(value):
    if value is None:
        return None
    return pd.Timestamp(value)


def filter_by_window(settled_df, start=None, end=None):
    """
    Keep services with start <= start_time < end.

    Either bound may be None (open). When a bound is given, services
    whose start time cannot be parsed are left out.
    """
    if start is None and end is None:
        return settled_df

    mask = settled_df["start_ts"].notna()
    start = _as_timestamp(start)
    end = _as_timestamp(end)
    if start is not None:
        mask &= settled_df["start_ts"] >= start
    if end is not None:
        mask &= settled_df["start_ts"] < end
    return settled_df[mask]


# =============================================================================
# SELECTION
# =============================================================================

def matches_value(column, value):
    """Boolean mask: column equals value after trimming."""
    wanted = clean_text(value)
    return column.map(clean_text) == wanted


def name_key(name):
    """
    Matching key for a client / counterparty name.

    EXAMPLE:
        name_key("  Blue  Line ") → "blue line"
        name_key(None)            → None
    """
    text = clean_text(name)
    if text is None:
        return None
    return " ".join(text.split()).casefold()


def display_name(name):
    """Name as shown: trimmed, inner runs of spaces collapsed."""
    text = clean_text(name)
    return " ".join(text.split()) if text is not None else None


def same_name(a, b):
    """Client / counterparty names match ignoring case and extra spaces."""
    a = name_key(a)
    b = name_key(b)
    if a is None or b is None:
        return False
    return a == b


def select_services(services, qualifies=is_active, start=None, end=None):
    """
    Settle every service, then keep the ones that count.

    PARAMETERS:
        services: DataFrame or list of dicts
        qualifies (callable): row -> bool; cancelled rows are dropped anyway
        start, end: optional window bounds (end exclusive)

    RETURNS:
        pd.DataFrame: settled rows (see settle_services) that qualify
    """
    settled = settle_services(services)
    if len(settled) == 0:
        return settled

    keep = settled.apply(lambda row: is_active(row) and bool(qualifies(row)), axis=1)
    settled = settled[keep.astype(bool)]
    return filter_by_window(settled, start, end)


def _add_split_columns(settled):
    """Helper columns that split held cash by who holds it."""
    df = settled.copy()
    internal = df["fulfillment"] == FULFILLMENT_INTERNAL
    outsourced = df["fulfillment"] == FULFILLMENT_OUTSOURCED
    collected = df["collected_by_fulfiller"].astype(float)

    df["_collected_by_driver"] = collected.where(internal, 0.0)
    df["_collected_by_supplier"] = collected.where(outsourced, 0.0)
    df["_net_to_supplier"] = df["net_to_fulfiller"].astype(float).where(outsourced, 0.0)
    return df


def _resolve_group_by(group_by, df):
    """
    Turn a group_by value into a list of column names on df.
    Callables get evaluated into a "group" column.
    """
    if callable(group_by):
        df["group"] = df.apply(group_by, axis=1) if len(df) else pd.Series(dtype="object")
        return ["group"]

    keys = [group_by] if isinstance(group_by, str) else list(group_by)
    columns = []
    for key in keys:
        if not isinstance(key, str):
            raise ValueError(f"Invalid group_by entry: {key!r}")
        column = PERIOD_KEYS.get(key, key)
        if column not in df.columns:
            raise ValueError(f"Cannot group by unknown field {key!r}")
        columns.append(column)
    if not columns:
        raise ValueError("group_by must name at least one field")
    return columns


# =============================================================================
# AGGREGATION
# =============================================================================

def aggregate_services(services, group_by="month", qualifies=is_active, start=None, end=None):
    """
    Sum the per-service settlement results per bucket.

    PARAMETERS:
        services (pd.DataFrame or list of dict): Service records
        group_by: How to bucket the services:
            - "month" / "year"
            - any service column, e.g. "driver_id", "client_name"
            - a list of those, e.g. ["month", "supplier_id"]
            - a callable row -> key
        qualifies (callable): Which services count (default: not cancelled)
        start, end: Optional reporting window (end exclusive)

    RETURNS:
        pd.DataFrame: One row per bucket, the group columns first
            (named as given: "month", "year", "driver_id" ...) followed by
            ROLLUP_COLUMNS. Most recent period first. Empty input gives an
            empty frame with the same columns.

    EXAMPLE:
        aggregate_services(services_df, group_by=["month", "driver_id"],
                           qualifies=is_profit_recognised)
    """
    settled = _add_split_columns(select_services(services, qualifies, start, end))
    key_columns = _resolve_group_by(group_by, settled)

    # Output names: period_month -> month, period_year -> year
    rename = {col: name for name, col in PERIOD_KEYS.items() if col in key_columns}
    output_keys = [rename.get(col, col) for col in key_columns]

    if len(settled) == 0:
        return pd.DataFrame(columns=output_keys + ROLLUP_COLUMNS)

    grouped = settled.groupby(key_columns, dropna=False, sort=False)
    rollup = grouped.agg(**ROLLUP_AGGREGATIONS).reset_index()
    rollup["services_count"] = rollup["services_count"].astype(int)
    rollup = rollup.rename(columns=rename)

    # Most recent period first; other keys alphabetical
    ascending = [name not in PERIOD_KEYS for name in output_keys]
    rollup = rollup.sort_values(output_keys, ascending=ascending, na_position="last")
    return rollup[output_keys + ROLLUP_COLUMNS].reset_index(drop=True)


def summarize_services(services, qualifies=is_active, start=None, end=None):
    """
    Same sums as aggregate_services(), for the whole selection at once.

    RETURNS:
        dict: ROLLUP_COLUMNS -> value. All zeros when nothing qualifies.
    """
    settled = _add_split_columns(select_services(services, qualifies, start, end))
    return _summarize_settled(settled)


def _summarize_settled(settled):
    summary = {}
    for name, (column, how) in ROLLUP_AGGREGATIONS.items():
        if how == "size":
            summary[name] = int(len(settled))
        else:
            summary[name] = float(settled[column].astype(float).sum()) if len(settled) else 0.0
    return summary


def monthly_rollup(services, qualifies=is_active, start=None, end=None):
    return aggregate_services(services, "month", qualifies, start, end)


def yearly_rollup(services, qualifies=is_active, start=None, end=None):
    return aggregate_services(services, "year", qualifies, start, end)


# =============================================================================
# PER-ENTITY ROLLUPS
# =============================================================================

def _only(services, column, value):
    df = settle_services(services)
    return df[matches_value(df[column], value)] if len(df) else df


def _only_client(services, client_name):
    df = settle_services(services)
    if len(df) == 0:
        return df
    return df[df["client_name"].map(lambda name: same_name(name, client_name))]


def rollup_by_driver(services, qualifies=is_active, start=None, end=None):
    """Month x driver rollup over internally fulfilled services."""
    settled = settle_services(services)
    internal = settled[settled["fulfillment"] == FULFILLMENT_INTERNAL] if len(settled) else settled
    return aggregate_services(internal, ["month", "driver_id"], qualifies, start, end)


def rollup_by_supplier(services, qualifies=is_active, start=None, end=None):
    """Month x supplier rollup over outsourced services."""
    settled = settle_services(services)
    outsourced = settled[settled["fulfillment"] == FULFILLMENT_OUTSOURCED] if len(settled) else settled
    return aggregate_services(outsourced, ["month", "supplier_id"], qualifies, start, end)


def rollup_by_service_type(services, qualifies=is_active, start=None, end=None):
    """
    Month x service type rollup: where the revenue comes from.

    Services without a type share one bucket (service_type None / NaN),
    listed last within their month.
    """
    settled = settle_services(services)
    if "service_type" not in settled.columns:
        settled["service_type"] = None
    return aggregate_services(settled, ["month", "service_type"], qualifies, start, end)


def _client_spellings(names):
    """First spelling seen for each client key, e.g. {"smith": "Smith"}."""
    spellings = {}
    for name in names:
        key = name_key(name)
        if key is not None:
            spellings.setdefault(key, display_name(name))
    return spellings


def rollup_by_client(services, qualifies=is_active, start=None, end=None):
    """
    Month x client rollup.

    "Smith" and "  smith " are one client: services are grouped on
    name_key() and the bucket shows the first spelling seen.
    """
    settled = settle_services(services)
    if len(settled) == 0:
        return aggregate_services(settled, ["month", "client_name"], qualifies, start, end)

    settled["client_key"] = settled["client_name"].map(name_key)
    rollup = aggregate_services(settled, ["month", "client_key"], qualifies, start, end)
    spellings = _client_spellings(settled["client_name"])
    rollup.insert(1, "client_name", rollup["client_key"].map(spellings))
    return rollup.drop(columns=["client_key"])


def driver_summary(services, driver_id, start=None, end=None, qualifies=is_active):
    """
    Totals for one driver over a window.

    RETURNS:
        dict: the rollup sums plus
            - driver_id
            - cash_to_remit: everything the driver holds and hands back
    """
    summary = summarize_services(_only(services, "driver_id", driver_id), qualifies, start, end)
    summary["driver_id"] = driver_id
    summary["cash_to_remit"] = summary["driver_remittance"]
    return summary


def supplier_summary(services, supplier_id, start=None, end=None, qualifies=is_active):
    """Totals for the services one supplier fulfilled over a window."""
    summary = summarize_services(_only(services, "supplier_id", supplier_id), qualifies, start, end)
    summary["supplier_id"] = supplier_id
    return summary


def client_summary(services, client_name, start=None, end=None, qualifies=is_active):
    """
    Totals for one client (or agency billed as a client) over a window.

    RETURNS:
        dict: the rollup sums plus
            - client_name
            - total_billed: sum of client prices
            - outstanding_balance: unpaid part (price - deposit, 0 once PAID)
            - total_paid: billed - outstanding
    """
    summary = summarize_services(_only_client(services, client_name), qualifies, start, end)
    summary["client_name"] = client_name
    summary["total_billed"] = summary["total_revenue"]
    summary["outstanding_balance"] = summary["outstanding_receivable"]
    summary["total_paid"] = summary["total_revenue"] - summary["outstanding_receivable"]
    return summary


def month_keys(services, qualifies=is_active):
    """All "YYYY-MM" months that have qualifying services, most recent first."""
    settled = select_services(services, qualifies)
    if len(settled) == 0:
        return []
    months = settled["period_month"].dropna().unique().tolist()
    return sorted(months, reverse=True)


def client_names(services):
    """Distinct client names, sorted. Spellings of the same name are listed once."""
    df = to_services_frame(services)
    spellings = _client_spellings(df["client_name"]) if len(df) else {}
    return sorted(spellings.values(), key=str.casefold)


# =============================================================================
# LEARNING NOTES: GROUPBY
# =============================================================================
#
# pandas groupby() + agg() does the "bucket and sum" in one step:
#
#   df.groupby(["period_month", "driver_id"]).agg(
#       total_revenue=("client_price", "sum"),
#       services_count=("client_price", "size"),
#   )
#
# dropna=False keeps services with no driver / no date in their own bucket
# instead of silently dropping them from the totals.
#
# ADDITIVITY:
#   Because windows are half-open and every bucket is an independent sum,
#   the rollups of two halves of a month add up to the rollup of the month.
#
# =============================================================================
