# =============================================================================
# test_calculations.py - Per-service settlement
# =============================================================================
# Run: pytest test_calculations.py
# =============================================================================

import math

import numpy as np
import pandas as pd

from config import (
    DIRECTION_AGENCY_PAYS_SUPPLIER,
    DIRECTION_SUPPLIER_PAYS_AGENCY,
    DIRECTION_DRIVER_PAYS_AGENCY,
    DIRECTION_NOTHING_TO_SETTLE,
    FULFILLMENT_INTERNAL,
    FULFILLMENT_OUTSOURCED,
    FULFILLMENT_UNASSIGNED,
    PAYMENT_METHODS,
)
from utils.calculations import (
    safe_amount,
    calculate_balance_due,
    calculate_service_settlement,
    settle_services,
    parse_timestamps,
    SETTLEMENT_COLUMNS,
)


# -----------------------------------------------------------------------------
# safe_amount
# -----------------------------------------------------------------------------

def test_safe_amount_treats_missing_values_as_zero():
    for value in (None, float("nan"), "", "n/a", "-", "abc", float("inf")):
        assert safe_amount(value) == 0.0


def test_safe_amount_reads_numbers_and_text():
    assert safe_amount(12) == 12.0
    assert safe_amount("1,250.50") == 1250.5
    assert safe_amount(" 40 ") == 40.0
    assert safe_amount(np.float64(7.5)) == 7.5
    assert safe_amount(np.int64(3)) == 3.0


# -----------------------------------------------------------------------------
# Worked examples
# -----------------------------------------------------------------------------

def test_cash_collects_price_minus_deposit():
    result = calculate_service_settlement({
        "client_price": 100, "deposit": 20, "payment_method": "Cash", "driver_id": "drv-1",
    })
    assert result["balance_due"] == 80.0
    assert result["collected_by_fulfiller"] == 80.0


def test_cash_extras_are_added_to_cash_held():
    result = calculate_service_settlement({
        "client_price": 100, "deposit": 20, "extras_amount": 15,
        "payment_method": "Cash", "driver_id": "drv-1",
    })
    assert result["balance_due"] == 80.0
    assert result["collected_by_fulfiller"] == 95.0


def test_prepaid_holds_only_extras():
    result = calculate_service_settlement({
        "client_price": 100, "deposit": 20, "payment_method": "Prepaid", "driver_id": "drv-1",
    })
    assert result["balance_due"] == 0.0
    assert result["collected_by_fulfiller"] == 0.0

    with_extras = calculate_service_settlement({
        "client_price": 100, "deposit": 20, "extras_amount": 10,
        "payment_method": "Prepaid", "driver_id": "drv-1",
    })
    assert with_extras["collected_by_fulfiller"] == 10.0


def test_future_invoice_is_settled_offsite():
    result = calculate_service_settlement({
        "client_price": 300, "payment_method": "Future Invoice", "supplier_id": "sup-1",
        "supplier_cost": 200,
    })
    assert result["balance_due"] == 0.0
    assert result["collected_by_fulfiller"] == 0.0
    assert result["net_to_fulfiller"] == 200.0
    assert result["settlement_direction"] == DIRECTION_AGENCY_PAYS_SUPPLIER


def test_outsourced_supplier_holding_more_than_cost_pays_agency():
    result = calculate_service_settlement({
        "client_price": 100, "supplier_cost": 60, "extras_amount": 0,
        "payment_method": "Pay to the driver", "supplier_id": "sup-1",
    })
    assert result["fulfillment"] == FULFILLMENT_OUTSOURCED
    assert result["collected_by_fulfiller"] == 100.0
    assert result["net_to_fulfiller"] == -40.0
    assert result["settlement_direction"] == DIRECTION_SUPPLIER_PAYS_AGENCY
    assert result["agency_margin"] == 40.0


def test_deposit_plus_balance_to_driver_collects_balance():
    result = calculate_service_settlement({
        "client_price": 250, "deposit": 50,
        "payment_method": "Paid deposit + balance to the driver", "driver_id": "drv-1",
    })
    assert result["collects_cash"] is True
    assert result["collected_by_fulfiller"] == 200.0
    assert result["non_cash_revenue"] == 50.0


# -----------------------------------------------------------------------------
# Invariants
# -----------------------------------------------------------------------------

def test_balance_due_never_negative():
    for method in PAYMENT_METHODS + [None, "Bitcoin"]:
        for price, deposit in [(100, 150), (0, 10), (50, 50), (-5, 0)]:
            assert calculate_balance_due(price, deposit, method) >= 0.0


def test_deposit_above_price_clamps_to_zero():
    result = calculate_service_settlement({
        "client_price": 100, "deposit": 150, "payment_method": "Cash", "driver_id": "drv-1",
    })
    assert result["balance_due"] == 0.0
    assert result["collected_by_fulfiller"] == 0.0
    assert result["client_outstanding"] == 0.0


def test_margin_independent_of_who_fulfils():
    base = {"client_price": 180, "extras_amount": 20, "payment_method": "Cash"}
    internal = calculate_service_settlement(dict(base, driver_id="drv-1", supplier_cost=999))
    outsourced = calculate_service_settlement(dict(base, supplier_id="sup-1", supplier_cost=0))
    assert internal["agency_margin"] == outsourced["agency_margin"] == 200.0


def test_margin_does_not_depend_on_payment_method():
    margins = {
        calculate_service_settlement({
            "client_price": 100, "supplier_cost": 70, "extras_amount": 5,
            "payment_method": method, "supplier_id": "sup-1",
        })["agency_margin"]
        for method in PAYMENT_METHODS
    }
    assert margins == {35.0}


# -----------------------------------------------------------------------------
# Fulfillment branches
# -----------------------------------------------------------------------------

def test_internal_driver_hands_back_everything_held():
    result = calculate_service_settlement({
        "client_price": 120, "extras_amount": 10, "supplier_cost": 50,
        "payment_method": "Pay to the driver", "driver_id": "drv-1",
    })
    assert result["fulfillment"] == FULFILLMENT_INTERNAL
    assert result["supplier_cost"] == 0.0
    assert result["net_to_fulfiller"] == -130.0
    assert result["settlement_direction"] == DIRECTION_DRIVER_PAYS_AGENCY


def test_internal_driver_with_nothing_held_has_nothing_to_settle():
    result = calculate_service_settlement({
        "client_price": 120, "payment_method": "Prepaid", "driver_id": "drv-1",
    })
    assert result["net_to_fulfiller"] == 0.0
    assert result["settlement_direction"] == DIRECTION_NOTHING_TO_SETTLE


def test_unassigned_service_settles_nothing():
    result = calculate_service_settlement({
        "client_price": 90, "payment_method": "Cash",
    })
    assert result["fulfillment"] == FULFILLMENT_UNASSIGNED
    assert result["balance_due"] == 90.0
    assert result["net_to_fulfiller"] == 0.0
    assert result["settlement_direction"] == DIRECTION_NOTHING_TO_SETTLE


# -----------------------------------------------------------------------------
# Unknown / missing payment method
# -----------------------------------------------------------------------------

def test_unknown_payment_method_collects_no_cash():
    result = calculate_service_settlement({
        "client_price": 100, "deposit": 30, "payment_method": "Bitcoin", "supplier_id": "sup-1",
        "supplier_cost": 60,
    })
    assert result["payment_method_known"] is False
    assert result["collects_cash"] is False
    assert result["balance_due"] == 70.0
    assert result["collected_by_fulfiller"] == 0.0
    assert result["net_to_fulfiller"] == 60.0


def test_missing_payment_method_collects_no_cash():
    result = calculate_service_settlement({"client_price": 100, "driver_id": "drv-1"})
    assert result["balance_due"] == 100.0
    assert result["collected_by_fulfiller"] == 0.0


def test_missing_money_fields_count_as_zero():
    result = calculate_service_settlement({
        "client_price": None, "deposit": float("nan"), "extras_amount": "",
        "payment_method": "Cash", "supplier_id": "sup-1",
    })
    for key in ("client_price", "deposit", "supplier_cost", "extras_amount",
                "balance_due", "collected_by_fulfiller", "net_to_fulfiller", "agency_margin"):
        assert result[key] == 0.0
        assert not math.isnan(result[key])


# -----------------------------------------------------------------------------
# Outstanding amounts
# -----------------------------------------------------------------------------

def test_outstanding_amounts_follow_payment_status():
    unpaid = calculate_service_settlement({
        "client_price": 100, "deposit": 25, "supplier_cost": 60, "supplier_id": "sup-1",
        "client_payment_status": "UNPAID", "supplier_payment_status": "PARTIAL",
    })
    assert unpaid["client_outstanding"] == 75.0
    assert unpaid["supplier_outstanding"] == 60.0

    paid = calculate_service_settlement({
        "client_price": 100, "deposit": 25, "supplier_cost": 60, "supplier_id": "sup-1",
        "client_payment_status": "PAID", "supplier_payment_status": "PAID",
    })
    assert paid["client_outstanding"] == 0.0
    assert paid["supplier_outstanding"] == 0.0


# -----------------------------------------------------------------------------
# settle_services
# -----------------------------------------------------------------------------

def test_settle_services_adds_columns_and_periods():
    df = settle_services([
        {"service_id": "a", "client_price": 100, "payment_method": "Cash",
         "driver_id": "drv-1", "start_time": "2025-03-05T10:00:00"},
        {"service_id": "b", "client_price": "50", "payment_method": "Prepaid",
         "start_time": "2025-04-01"},
        {"service_id": "c", "client_price": 10, "start_time": "not a date"},
    ])
    for col in SETTLEMENT_COLUMNS:
        assert col in df.columns
    assert df["period_month"].tolist()[:2] == ["2025-03", "2025-04"]
    assert df["period_year"].tolist()[:2] == ["2025", "2025"]
    assert pd.isna(df.loc[2, "start_ts"])
    assert df.loc[1, "client_price"] == 50.0


def test_settle_services_does_not_modify_input():
    original = pd.DataFrame([{"client_price": "100", "payment_method": "Cash"}])
    settle_services(original)
    assert list(original.columns) == ["client_price", "payment_method"]
    assert original.loc[0, "client_price"] == "100"


def test_settle_services_empty():
    df = settle_services([])
    assert len(df) == 0
    assert "net_to_fulfiller" in df.columns


def test_month_keeps_wall_clock_time_whatever_the_other_records():
    late = {"client_price": 100, "payment_method": "Cash",
            "start_time": "2025-04-01T00:30:00+02:00"}
    winter = {"client_price": 50, "payment_method": "Cash",
              "start_time": "2025-01-10T09:00:00+01:00"}

    alone = settle_services([late])
    mixed = settle_services([late, winter])

    assert alone["period_month"].tolist() == ["2025-04"]
    assert mixed["period_month"].tolist() == ["2025-04", "2025-01"]
    assert mixed.loc[0, "start_ts"] == pd.Timestamp("2025-04-01 00:30")


def test_parse_timestamps_handles_mixed_values():
    parsed = parse_timestamps(["2025-03-05", " 2025-03-05T10:00 ", None, "", "soon",
                               pd.Timestamp("2025-03-06 08:00", tz="Europe/Rome")])
    assert parsed[0] == pd.Timestamp("2025-03-05")
    assert parsed[1] == pd.Timestamp("2025-03-05 10:00")
    assert parsed[2:5].isna().all()
    assert parsed[5] == pd.Timestamp("2025-03-06 08:00")
