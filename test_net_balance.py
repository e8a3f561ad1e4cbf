# =============================================================================
# test_net_balance.py - Cross-entity net balance
# =============================================================================
# Run: pytest test_net_balance.py
# =============================================================================

from config import (
    DIRECTION_COUNTERPARTY_PAYS_AGENCY,
    DIRECTION_AGENCY_PAYS_COUNTERPARTY,
)
from utils.net_balance import (
    net_balance,
    net_balance_direction,
    resolve_net_balance,
    resolve_month,
    counterparty_history,
)
from utils.rollups import month_window, is_profit_recognised


SUPPLIER = {"supplier_id": "sup-1", "name": "Blue Line Transfers"}


def _services():
    return [
        # Jobs Blue Line did for us in March: cost 500, held 200
        {"service_id": "o1", "title": "Airport run", "client_name": "Smith",
         "start_time": "2025-03-03T10:00:00", "client_price": 350, "supplier_cost": 300,
         "payment_method": "Prepaid", "supplier_id": "sup-1", "status": "COMPLETED"},
        {"service_id": "o2", "title": "Venice tour", "client_name": "Jones",
         "start_time": "2025-03-12T09:00:00", "client_price": 260, "deposit": 60,
         "supplier_cost": 200, "payment_method": "Paid deposit + balance to the driver",
         "supplier_id": "sup-1", "status": "CONFIRMED", "supplier_payment_status": "PAID"},
        # A job we did for Blue Line's own client in March: receivable 150
        {"service_id": "c1", "title": "Hotel transfer", "client_name": "blue line  transfers",
         "start_time": "2025-03-20T18:00:00", "client_price": 150,
         "payment_method": "Future Invoice", "driver_id": "drv-1", "status": "PENDING"},
        # Cancelled - never counts
        {"service_id": "x1", "title": "Cancelled", "client_name": "Blue Line Transfers",
         "start_time": "2025-03-21T18:00:00", "client_price": 1000,
         "payment_method": "Future Invoice", "driver_id": "drv-1", "status": "CANCELLED"},
        # April: only a receivable
        {"service_id": "c2", "title": "Wine tour", "client_name": "Blue Line Transfers",
         "start_time": "2025-04-02T10:00:00", "client_price": 90,
         "payment_method": "Future Invoice", "driver_id": "drv-1", "status": "COMPLETED"},
        # Another supplier - ignored
        {"service_id": "z1", "title": "Other", "client_name": "Smith",
         "start_time": "2025-03-05T10:00:00", "client_price": 500, "supplier_cost": 400,
         "payment_method": "Cash", "supplier_id": "sup-2", "status": "COMPLETED"},
    ]


def test_net_balance_formula():
    assert net_balance(150, 500, 200) == -150.0
    assert net_balance(0, 0, 0) == 0.0
    assert net_balance(100, 60, 0) == 40.0


def test_direction_labels():
    assert net_balance_direction(-0.01) == DIRECTION_AGENCY_PAYS_COUNTERPARTY
    assert net_balance_direction(0) == DIRECTION_COUNTERPARTY_PAYS_AGENCY
    assert net_balance_direction(25) == DIRECTION_COUNTERPARTY_PAYS_AGENCY


def test_resolve_month_example():
    start, end = month_window("2025-03")
    result = resolve_net_balance(_services(), SUPPLIER, start, end)

    assert result["total_payable"] == 500.0
    assert result["total_held"] == 200.0
    assert result["total_receivable"] == 150.0
    assert result["net_balance"] == -150.0
    assert result["amount"] == 150.0
    assert result["direction"] == DIRECTION_AGENCY_PAYS_COUNTERPARTY
    assert result["outsourced_count"] == 2
    assert result["client_count"] == 1


def test_resolver_is_consistent_with_its_totals():
    for month in ("2025-03", "2025-04", "2025-05"):
        result = resolve_month(_services(), SUPPLIER, month)
        assert result["net_balance"] == (
            result["total_receivable"] - result["total_payable"] + result["total_held"]
        )
        assert result["amount"] == abs(result["net_balance"])


def test_outstanding_sides():
    result = resolve_month(_services(), SUPPLIER, "2025-03")
    # o2 is PAID to the supplier, o1 is not
    assert result["outstanding_payable"] == 300.0
    assert result["outstanding_receivable"] == 150.0


def test_counterparty_as_tuple_and_predicate():
    start, end = month_window("2025-03")
    result = resolve_net_balance(_services(), ("sup-1", "Blue Line Transfers"), start, end,
                                 qualifies=is_profit_recognised)
    # Only o1 is COMPLETED in March
    assert result["total_payable"] == 300.0
    assert result["total_receivable"] == 0.0
    assert result["net_balance"] == -300.0


def test_unknown_counterparty_resolves_to_zero():
    result = resolve_net_balance(_services(), {"supplier_id": "nobody", "name": "Nobody"})
    assert result["services_count"] == 0
    assert result["net_balance"] == 0.0
    assert result["direction"] == DIRECTION_COUNTERPARTY_PAYS_AGENCY


def test_empty_services():
    result = resolve_net_balance([], SUPPLIER)
    assert result["net_balance"] == 0.0


def test_history_most_recent_first_and_includes_held():
    history = counterparty_history(_services(), SUPPLIER)
    assert [entry["month"] for entry in history] == ["2025-04", "2025-03"]

    april, march = history
    assert april["net_balance"] == 90.0
    assert april["direction"] == DIRECTION_COUNTERPARTY_PAYS_AGENCY
    assert march["total_held"] == 200.0
    assert march["net_balance"] == -150.0
