# =============================================================================
# utils/net_balance.py
# =============================================================================
# PURPOSE:
#   Works out ONE signed number per counterparty and period: who pays whom,
#   and how much.
#
# THE SITUATION:
#   A supplier can be on both sides of the agency at once:
#   - As a VENDOR: it drives services we outsourced to it. We owe it the
#     supplier cost, but it may already hold cash it collected from our
#     clients on those jobs.
#   - As a CLIENT: it books our services for its own customers. It owes us
#     the client price.
#
# THE FORMULA (the only place it exists):
#
#     net_balance = total_receivable - total_payable + total_held
#
#     net_balance >= 0  → the counterparty pays the agency
#     net_balance <  0  → the agency pays the counterparty
#
#   The dashboard cards, the CSV export and the printable statement all
#   read the dict returned by resolve_net_balance(). None of them redo
#   this subtraction.
# =============================================================================

from config import (
    DIRECTION_COUNTERPARTY_PAYS_AGENCY,
    DIRECTION_AGENCY_PAYS_COUNTERPARTY,
)
from .calculations import settle_services, clean_text
from .rollups import (
    is_active,
    summarize_services,
    month_window,
    month_keys,
    same_name,
    matches_value,
)


def net_balance(total_receivable, total_payable, total_held):
    """
    The net settlement between the agency and one counterparty.

    PARAMETERS:
        total_receivable (float): What the counterparty owes us as a client
        total_payable (float): What we owe it as a supplier (its costs)
        total_held (float): Cash it already collected on our behalf

    RETURNS:
        float: receivable - payable + held (positive → they pay us)

    EXAMPLE:
        net_balance(150, 500, 200) → -150.0 (we pay them 150)
    """
    return float(total_receivable) - float(total_payable) + float(total_held)


def net_balance_direction(value):
    """Direction label for a net balance."""
    if value >= 0:
        return DIRECTION_COUNTERPARTY_PAYS_AGENCY
    return DIRECTION_AGENCY_PAYS_COUNTERPARTY


def _counterparty_identity(supplier):
    """Accept a supplier dict/Series, or a (supplier_id, name) pair."""
    if isinstance(supplier, (tuple, list)):
        supplier_id, name = supplier
    else:
        supplier_id = supplier.get("supplier_id")
        name = supplier.get("name")
    return clean_text(supplier_id), clean_text(name)


def split_counterparty_services(services, supplier):
    """
    Split the records that involve a counterparty into its two roles.

    RETURNS:
        tuple: (outsourced_df, client_df)
            - outsourced_df: services it fulfilled for us (supplier_id match)
            - client_df: services billed to it (client_name match)
        A record matching both ways shows up in both frames.
    """
    supplier_id, name = _counterparty_identity(supplier)
    settled = settle_services(services)
    if len(settled) == 0:
        return settled, settled

    if supplier_id:
        outsourced = settled[matches_value(settled["supplier_id"], supplier_id)]
    else:
        outsourced = settled.iloc[0:0]

    if name:
        client = settled[settled["client_name"].map(lambda value: same_name(value, name))]
    else:
        client = settled.iloc[0:0]

    return outsourced, client


def resolve_net_balance(services, supplier, start=None, end=None, qualifies=is_active):
    """
    Resolve the net balance with one counterparty for a period.

    PARAMETERS:
        services (pd.DataFrame or list of dict): All service records
        supplier (dict, pd.Series or tuple): The counterparty - needs
            supplier_id (vendor side) and name (client side)
        start, end: Optional reporting window (end exclusive)
        qualifies (callable): Which services count (cancelled never do)

    RETURNS:
        dict:
            - counterparty_id, counterparty_name
            - total_payable: supplier costs on jobs it fulfilled
            - total_held: cash + extras it collected on those jobs
            - total_receivable: client prices on jobs billed to it
            - outstanding_payable / outstanding_receivable: not-yet-PAID parts
            - outsourced_count / client_count: services on each side
            - net_balance: receivable - payable + held
            - direction: "counterparty pays agency" / "agency pays counterparty"
            - amount: abs(net_balance)
            - period_start, period_end: the window used

    HOW IT WORKS:
        1. Aggregate the services it fulfilled  → payable, held
        2. Aggregate the services billed to it  → receivable
        3. Combine with net_balance()
    """
    supplier_id, name = _counterparty_identity(supplier)
    outsourced, client = split_counterparty_services(services, supplier)

    vendor_side = summarize_services(outsourced, qualifies, start, end)
    client_side = summarize_services(client, qualifies, start, end)

    total_payable = vendor_side["total_cost"]
    total_held = vendor_side["total_collected"]
    total_receivable = client_side["total_revenue"]
    balance = net_balance(total_receivable, total_payable, total_held)

    return {
        "counterparty_id": supplier_id,
        "counterparty_name": name,
        "total_payable": total_payable,
        "total_held": total_held,
        "total_receivable": total_receivable,
        "outstanding_payable": vendor_side["outstanding_payable"],
        "outstanding_receivable": client_side["outstanding_receivable"],
        "outsourced_count": vendor_side["services_count"],
        "client_count": client_side["services_count"],
        "services_count": vendor_side["services_count"] + client_side["services_count"],
        "net_balance": balance,
        "direction": net_balance_direction(balance),
        "amount": abs(balance),
        "period_start": start,
        "period_end": end,
    }


def resolve_month(services, supplier, month_key, qualifies=is_active):
    """resolve_net_balance() for one "YYYY-MM" month."""
    start, end = month_window(month_key)
    result = resolve_net_balance(services, supplier, start, end, qualifies)
    result["month"] = month_key
    return result


def counterparty_history(services, supplier, qualifies=is_active):
    """
    One resolved net balance per month the counterparty was involved in.

    RETURNS:
        list of dict: resolve_month() results, most recent month first.

    Every month uses the same three-term formula as the detailed view,
    so the yearly table and the monthly statement always agree.
    """
    outsourced, client = split_counterparty_services(services, supplier)
    months = set(month_keys(outsourced, qualifies)) | set(month_keys(client, qualifies))
    return [
        resolve_month(services, supplier, month, qualifies)
        for month in sorted(months, reverse=True)
    ]


# =============================================================================
# LEARNING NOTES: ONE FORMULA, MANY SCREENS
# =============================================================================
#
# It is tempting to recompute the supplier balance inside each screen
# (statement, CSV export, history tab). Copies drift: one forgets the
# held cash, another flips the sign.
#
# The cure is boring but effective:
#   - one function computes the number (net_balance)
#   - one function gathers its inputs (resolve_net_balance)
#   - every screen formats the dict it returns and nothing else
#
# =============================================================================
