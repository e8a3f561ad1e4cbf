# =============================================================================
# test_e2e_flow.py - End-to-end test: Import → Settle → Supplier statement
# =============================================================================
# Runs the full app flow against a temporary test database:
#   1. Import a booking export (creates drivers and suppliers)
#   2. Settle every service of the month
#   3. Resolve the month's net balance with a supplier
#   4. Build the supplier statement and check CSV / HTML agree
#   5. Close a job and check the profit view picks it up
#
# Run: pytest test_e2e_flow.py   (or: python test_e2e_flow.py)
# =============================================================================

import os
import sys
import tempfile

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
import config

from database import (
    init_db,
    load_services,
    load_supplier_by_name,
    load_driver_by_name,
    set_service_status,
)
from importers import ServiceImporter
from utils import (
    settle_services,
    summarize_services,
    resolve_month,
    build_supplier_statement,
    statement_to_csv,
    statement_to_html,
    month_window,
    is_profit_recognised,
)

BOOKINGS_CSV = """Booking ref,Title,Client,Pickup time,Price,Deposit,Supplier cost,Extras,Payment method,Driver,Supplier,Status
BK-1,Airport run,Smith,2025-03-03 10:00,350,,300,,Prepaid,,Blue Line Transfers,COMPLETED
BK-2,Venice tour,Jones,2025-03-12 09:00,260,60,200,,Paid deposit + balance to the driver,,Blue Line Transfers,CONFIRMED
BK-3,Hotel transfer,Blue Line Transfers,2025-03-20 18:00,150,,,,Future Invoice,Marco,,PENDING
BK-4,Dolomites day,Smith,2025-03-25 08:00,400,100,,20,Cash,Marco,,CONFIRMED
BK-5,Wine tour,Blue Line Transfers,2025-04-02 10:00,90,,,,Future Invoice,Marco,,PENDING
"""


def step(name):
    print(f"\n--- {name} ---")


def run_flow(workdir):
    config.DB_PATH = os.path.join(workdir, "transfer_desk_e2e.db")
    print("Using DB:", config.DB_PATH)

    # -------------------------------------------------------------------------
    # 1. Init DB and import
    # -------------------------------------------------------------------------
    step("1. Import bookings")
    assert init_db(), "init_db failed"

    csv_path = os.path.join(workdir, "bookings.csv")
    with open(csv_path, "w", encoding="utf-8") as f:
        f.write(BOOKINGS_CSV)

    success, msg, count = ServiceImporter(csv_path).import_services()
    print(f"Result: {msg}")
    assert success, msg
    assert count == 5

    supplier = load_supplier_by_name("Blue Line Transfers")
    driver = load_driver_by_name("Marco")
    assert supplier is not None
    assert driver is not None

    # -------------------------------------------------------------------------
    # 2. Settle March
    # -------------------------------------------------------------------------
    step("2. Settle March")
    start, end = month_window("2025-03")
    march = load_services(start=start, end=end)
    settled = settle_services(march)
    assert len(settled) == 4

    dolomites = settled[settled["service_id"] == "BK-4"].iloc[0]
    assert dolomites["balance_due"] == 300.0
    assert dolomites["collected_by_fulfiller"] == 320.0
    assert dolomites["net_to_fulfiller"] == -320.0
    assert dolomites["agency_margin"] == 420.0

    summary = summarize_services(march)
    print(f"March revenue: {summary['total_revenue']}")
    assert summary["total_revenue"] == 1160.0

    # -------------------------------------------------------------------------
    # 3. Net balance with the supplier
    # -------------------------------------------------------------------------
    step("3. Net balance")
    services = load_services()
    result = resolve_month(services, supplier, "2025-03")
    print(f"Net: {result['net_balance']} ({result['direction']})")
    assert result["total_payable"] == 500.0
    assert result["total_held"] == 200.0
    assert result["total_receivable"] == 150.0
    assert result["net_balance"] == -150.0
    assert result["direction"] == config.DIRECTION_AGENCY_PAYS_COUNTERPARTY

    april = resolve_month(services, supplier, "2025-04")
    assert april["net_balance"] == 90.0
    assert april["direction"] == config.DIRECTION_COUNTERPARTY_PAYS_AGENCY

    # -------------------------------------------------------------------------
    # 4. Statement presentations agree
    # -------------------------------------------------------------------------
    step("4. Supplier statement")
    statement = build_supplier_statement(services, supplier, month_key="2025-03")
    assert statement["net_balance"]["net_balance"] == result["net_balance"]

    csv_text = statement_to_csv(statement)
    assert "= -150.00" in csv_text
    assert "150.00 (agency pays counterparty)" in csv_text

    html_text = statement_to_html(statement, generated_on="2025-04-01")
    assert "-$150.00" in html_text
    print("OK: CSV and HTML show the resolved balance")

    # -------------------------------------------------------------------------
    # 5. Profit view follows the lifecycle
    # -------------------------------------------------------------------------
    step("5. Complete a job")
    before = summarize_services(load_services(), start=start, end=end, qualifies=is_profit_recognised)
    assert before["services_count"] == 1

    assert set_service_status("BK-4", "COMPLETED")
    after = summarize_services(load_services(), start=start, end=end, qualifies=is_profit_recognised)
    assert after["services_count"] == 2
    assert after["total_profit"] == before["total_profit"] + 420.0

    assert set_service_status("BK-2", "CANCELLED")
    result = resolve_month(load_services(), supplier, "2025-03")
    assert result["total_payable"] == 300.0
    assert result["net_balance"] == -150.0


def test_e2e_flow(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DB_PATH", config.DB_PATH)
    run_flow(str(tmp_path))


def main():
    print("=" * 60)
    print("E2E TEST: Import -> Settle -> Statement")
    print("=" * 60)
    with tempfile.TemporaryDirectory() as workdir:
        run_flow(workdir)
    print("\nALL STEPS PASSED")


if __name__ == "__main__":
    main()
