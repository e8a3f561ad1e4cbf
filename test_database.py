# =============================================================================
# test_database.py - SQLite persistence
# =============================================================================
# Every test gets its own database file (see the db fixture in conftest.py).
# =============================================================================

from utils.calculations import settle_services
from database import (
    get_table_info,
    validate_service,
    load_services,
    load_service_by_id,
    create_service,
    update_service,
    set_service_status,
    set_payment_status,
    delete_service,
    check_service_exists,
    load_drivers,
    load_driver_by_name,
    create_driver,
    update_driver,
    load_suppliers,
    load_supplier_by_id,
    load_supplier_by_name,
    create_supplier,
    load_client_names,
    load_app_settings,
    save_app_settings,
)


def _service(**overrides):
    service = {
        "title": "Airport → Hotel Danieli",
        "client_name": "Smith",
        "start_time": "2025-03-05 10:00",
        "client_price": 120,
        "deposit": 20,
        "payment_method": "Pay to the driver",
    }
    service.update(overrides)
    return service


# -----------------------------------------------------------------------------
# Schema
# -----------------------------------------------------------------------------

def test_init_db_creates_tables(db):
    tables = get_table_info()
    assert {"services", "drivers", "suppliers", "app_settings"} <= set(tables)
    service_columns = {col[1] for col in tables["services"]}
    assert {"client_price", "deposit", "supplier_cost", "extras_amount",
            "driver_id", "supplier_id", "status"} <= service_columns


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------

def test_validate_service_accepts_valid_record():
    assert validate_service(_service()) == []


def test_validate_service_rules():
    assert "Title is required" in validate_service(_service(title="  "))
    assert any("not both" in p for p in validate_service(_service(driver_id="d", supplier_id="s")))
    assert any("negative" in p for p in validate_service(_service(supplier_cost=-1)))
    assert "Deposit cannot exceed the client price" in validate_service(_service(deposit=500))
    assert any("payment method" in p for p in validate_service(_service(payment_method="Bitcoin")))
    assert any("status" in p for p in validate_service(_service(status="DONE")))
    assert any("client_payment_status" in p for p in validate_service(_service(client_payment_status="MAYBE")))


# -----------------------------------------------------------------------------
# Services
# -----------------------------------------------------------------------------

def test_create_and_load_service(db):
    driver_id = create_driver({"name": "Marco"})
    service_id = create_service(_service(driver_id=driver_id))
    assert service_id

    service = load_service_by_id(service_id)
    assert service["title"] == "Airport → Hotel Danieli"
    assert service["start_time"] == "2025-03-05T10:00:00"
    assert service["client_price"] == 120.0
    assert service["status"] == "PENDING"
    assert service["client_payment_status"] == "UNPAID"
    assert service["supplier_cost"] == 0.0
    assert service["driver_id"] == driver_id


def test_create_service_keeps_given_id(db):
    assert create_service(_service(service_id="BK-1001")) == "BK-1001"
    assert load_service_by_id("BK-1001") is not None


def test_create_service_rejects_invalid(db):
    assert create_service(_service(deposit=999)) is None
    assert create_service(_service(title="")) is None
    assert len(load_services()) == 0


def test_load_services_filters_and_order(db):
    driver_id = create_driver({"name": "Marco"})
    supplier_id = create_supplier({"name": "Alpine Cabs"})
    create_service(_service(title="March early", start_time="2025-03-01 00:00", driver_id=driver_id))
    create_service(_service(title="March late", start_time="2025-03-31 23:30", supplier_id=supplier_id))
    create_service(_service(title="April", start_time="2025-04-01 00:00", client_name="  JONES "))
    cancelled = create_service(_service(title="Cancelled", start_time="2025-03-10 09:00"))
    set_service_status(cancelled, "CANCELLED")

    everything = load_services()
    assert everything["title"].tolist() == ["April", "March late", "Cancelled", "March early"]

    march = load_services(start="2025-03-01", end="2025-04-01", include_cancelled=False)
    assert march["title"].tolist() == ["March late", "March early"]

    assert load_services(driver_id=driver_id)["title"].tolist() == ["March early"]
    assert load_services(supplier_id=supplier_id)["title"].tolist() == ["March late"]
    assert load_services(client_name="jones")["title"].tolist() == ["April"]


def test_update_service(db):
    service_id = create_service(_service())
    assert update_service(service_id, {"client_price": 150, "extras_amount": "15"})
    service = load_service_by_id(service_id)
    assert service["client_price"] == 150.0
    assert service["extras_amount"] == 15.0

    # Merged record is validated: deposit 200 > price 150
    assert not update_service(service_id, {"deposit": 200})
    assert load_service_by_id(service_id)["deposit"] == 20.0

    assert not update_service("missing", {"title": "x"})


def test_status_transitions(db):
    service_id = create_service(_service())
    assert not set_service_status(service_id, "COMPLETED")
    assert set_service_status(service_id, "CONFIRMED")
    assert set_service_status(service_id, "IN_PROGRESS")
    assert set_service_status(service_id, "COMPLETED")
    assert not set_service_status(service_id, "CANCELLED")
    assert set_service_status(service_id, "CANCELLED", force=True)
    assert load_service_by_id(service_id)["status"] == "CANCELLED"
    assert not set_service_status(service_id, "DONE", force=True)


def test_set_payment_status_changes_outstanding(db):
    supplier_id = create_supplier({"name": "Alpine Cabs"})
    service_id = create_service(_service(supplier_id=supplier_id, supplier_cost=90))

    before = settle_services(load_services()).iloc[0]
    assert before["client_outstanding"] == 100.0
    assert before["supplier_outstanding"] == 90.0

    assert set_payment_status(service_id, client_status="PAID")
    assert set_payment_status(service_id, supplier_status="PARTIAL")
    service = load_service_by_id(service_id)
    assert service["client_payment_status"] == "PAID"
    assert service["supplier_payment_status"] == "PARTIAL"

    after = settle_services(load_services()).iloc[0]
    assert after["client_outstanding"] == 0.0
    assert after["supplier_outstanding"] == 90.0

    assert set_payment_status(service_id, supplier_status="PAID")
    assert settle_services(load_services()).iloc[0]["supplier_outstanding"] == 0.0

    assert not set_payment_status(service_id, client_status="MAYBE")
    assert load_service_by_id(service_id)["client_payment_status"] == "PAID"
    assert not set_payment_status("missing", client_status="PAID")
    assert set_payment_status(service_id)


def test_delete_service(db):
    service_id = create_service(_service())
    assert delete_service(service_id)
    assert load_service_by_id(service_id) is None
    assert not delete_service(service_id)


def test_check_service_exists(db):
    service_id = create_service(_service())
    assert check_service_exists(service_id=service_id)
    assert not check_service_exists(service_id="nope")
    assert check_service_exists(start_time="2025-03-05T10:00", title=" airport → hotel danieli",
                                client_name="SMITH")
    assert not check_service_exists(start_time="2025-03-06 10:00", title="Airport → Hotel Danieli",
                                    client_name="Smith")


def test_unknown_driver_id_is_rejected(db):
    assert create_service(_service(driver_id="not-a-driver")) is None


# -----------------------------------------------------------------------------
# Drivers / suppliers / clients
# -----------------------------------------------------------------------------

def test_drivers(db):
    driver_id = create_driver({"name": "Marco", "phone": "+39 333"})
    create_driver({"name": "anna"})
    assert create_driver({"name": ""}) is None
    assert create_driver({"name": "Luca", "availability": "Asleep"}) is None

    assert load_drivers()["name"].tolist() == ["anna", "Marco"]
    assert load_driver_by_name(" marco ")["driver_id"] == driver_id
    assert load_driver_by_name("Nobody") is None

    assert update_driver(driver_id, {"availability": "On Leave"})
    assert load_driver_by_name("Marco")["availability"] == "On Leave"


def test_suppliers(db):
    supplier_id = create_supplier({"name": "Alpine Cabs", "contact_person": "Heidi"})
    assert load_supplier_by_id(supplier_id)["contact_person"] == "Heidi"
    assert load_supplier_by_name("ALPINE CABS")["supplier_id"] == supplier_id
    assert len(load_suppliers()) == 1
    assert create_supplier({}) is None


def test_client_names_merge_case_and_spacing(db):
    create_service(_service(client_name="Blue  Line"))
    create_service(_service(client_name="blue line", start_time="2025-03-06 10:00"))
    create_service(_service(client_name="Alpha", start_time="2025-03-07 10:00"))
    create_service(_service(client_name=None, start_time="2025-03-08 10:00"))
    assert load_client_names() == ["Alpha", "Blue Line"]


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------

def test_app_settings_round_trip(db):
    assert load_app_settings()["currency"] == "USD"
    assert save_app_settings({"currency": "EUR", "language": "it", "unknown": "x"})
    settings = load_app_settings()
    assert settings["currency"] == "EUR"
    assert settings["language"] == "it"
    assert settings["date_format"] == "DD/MM/YYYY"
    assert "unknown" not in settings

    assert save_app_settings({"currency": "GBP"})
    assert load_app_settings()["currency"] == "GBP"
