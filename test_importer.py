# =============================================================================
# test_importer.py - CSV service import
# =============================================================================

import pandas as pd

from database import load_services, load_drivers, load_suppliers
from importers import ServiceImporter


BOOKINGS_CSV = """Booking ref,Title,Client,Pickup time,Price,Deposit,Supplier cost,Payment method,Driver,Supplier,Status
BK-1,Airport run,Smith,2025-03-03 10:00,€350,,300,prepaid,,Blue Line Transfers,completed
BK-2,Venice tour,Jones,2025-03-12 09:00,260,60,200,Paid deposit + balance to the driver,,blue line transfers,confirmed
,Hotel transfer,Blue Line Transfers,2025-03-20 18:00,150,,,Future Invoice,Marco,,pending
,,,,,,,,,,
BK-4,Broken deposit,Smith,2025-03-22 10:00,100,500,,Cash,Luca,,pending
BK-5,Two fulfillers,Smith,2025-03-23 10:00,100,,,Cash,Marco,Blue Line Transfers,pending
BK-6,Odd payment,Smith,2025-03-24 10:00,100,,,Bitcoin,Marco,,pending
"""


def _write(tmp_path, text=BOOKINGS_CSV, name="bookings.csv"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_detect_columns():
    df = pd.DataFrame(columns=["Booking ref", "Title", "Client", "Pickup time (local)",
                               "Price", "Paid by", "Driver", "Notes"])
    col_map = ServiceImporter("x.csv")._detect_columns(df)
    assert col_map["service_id"] == "Booking ref"
    assert col_map["start_time"] == "Pickup time (local)"
    assert col_map["client_price"] == "Price"
    assert col_map["payment_method"] == "Paid by"
    assert col_map["driver_name"] == "Driver"
    assert col_map["notes"] == "Notes"


def test_import_services(db, tmp_path):
    importer = ServiceImporter(_write(tmp_path))
    success, message, count = importer.import_services()

    assert success
    assert count == 3
    assert message.startswith("Imported 3 services")

    summary = importer.get_import_summary()
    assert summary["created_drivers"] == ["Marco"]
    assert summary["created_suppliers"] == ["Blue Line Transfers"]
    assert len(summary["skipped"]) == 1
    assert len(summary["errors"]) == 3
    assert "Row 6" in summary["errors"][0]

    # Invalid rows never create their driver
    assert load_drivers()["name"].tolist() == ["Marco"]
    assert len(load_suppliers()) == 1

    services = load_services()
    first = services[services["service_id"] == "BK-1"].iloc[0]
    assert first["client_price"] == 350.0
    assert first["payment_method"] == "Prepaid"
    assert first["status"] == "COMPLETED"
    assert first["start_time"] == "2025-03-03T10:00:00"

    # Both supplier rows point at the same supplier
    assert services["supplier_id"].dropna().nunique() == 1


def test_reimport_reports_duplicates(db, tmp_path):
    path = _write(tmp_path)
    ServiceImporter(path).import_services()

    importer = ServiceImporter(path)
    success, message, count = importer.import_services()
    assert success
    assert count == 0
    assert len(importer.get_import_summary()["duplicates"]) == 3
    assert len(load_services()) == 3


def test_missing_title_column(db, tmp_path):
    path = _write(tmp_path, "Client,Price\nSmith,10\n", name="no_title.csv")
    success, message, count = ServiceImporter(path).import_services()
    assert not success
    assert count == 0
    assert "Title" in message
