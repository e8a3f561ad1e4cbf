# =============================================================================
# database/queries.py
# =============================================================================
# PURPOSE:
#   Contains all database queries - loading and saving data.
#   This is the "data access layer" - the only code that talks to the database.
#
# ORGANIZATION:
#   Functions are grouped by table:
#   - Services (load_services, create_service, set_service_status,
#     set_payment_status, ...)
#   - Drivers (load_drivers, create_driver, ...)
#   - Suppliers (load_suppliers, create_supplier, ...)
#   - Clients (load_client_names - clients are just names on services)
#   - App settings (load_app_settings, save_app_settings)
#
# NAMING CONVENTION:
#   - load_X() → Read data (SELECT)
#   - create_X() → Insert new data (INSERT)
#   - update_X() → Modify existing data (UPDATE)
#   - delete_X() → Remove data (DELETE)
#   - check_X_exists() → Check for duplicates
#
# ERRORS:
#   Every function catches its own errors, prints an [ERROR] line and
#   returns an empty DataFrame / None / False, so a page never crashes
#   because of one bad row.
# =============================================================================

import uuid
from datetime import datetime

import pandas as pd

from config import (
    DEFAULT_APP_SETTINGS,
    PAYMENT_METHODS,
    PAYMENT_STATUSES,
    PAYMENT_STATUS_UNPAID,
    SERVICE_STATUSES,
    SERVICE_TYPES,
    STATUS_PENDING,
    STATUS_CANCELLED,
    STATUS_TRANSITIONS,
    DRIVER_AVAILABILITY,
)
from utils.calculations import MONEY_FIELDS, safe_amount, clean_text
from .connection import get_db_connection


SERVICE_FIELDS = [
    "service_id",
    "title",
    "service_type",
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
    "notes",
]

DRIVER_FIELDS = ["driver_id", "name", "email", "phone", "availability"]
SUPPLIER_FIELDS = ["supplier_id", "name", "contact_person", "email", "phone"]


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _new_id():
    """Random text id, e.g. "3f2a9c..." (32 hex chars)."""
    return uuid.uuid4().hex


def _normalize_time(value):
    """
    Store times as ISO text so SQL can compare and sort them.

    EXAMPLE:
        "2025-03-05 10:00" → "2025-03-05T10:00:00"
        "next tuesday"     → "next tuesday" (unreadable text is kept as typed)
    """
    text = clean_text(value)
    if text is None:
        return None
    stamp = pd.to_datetime(text, errors="coerce", format="mixed")
    if pd.isna(stamp):
        return text
    if stamp.tzinfo is not None:
        stamp = stamp.tz_localize(None)
    return stamp.isoformat()


def _window_bound(value):
    if value is None:
        return None
    return pd.Timestamp(value).isoformat()


def _row_to_dict(cursor, row):
    columns = [desc[0] for desc in cursor.description]
    return dict(zip(columns, row))


def _clean_service(service_data):
    """
    Keep known columns only, trim text, coerce money and normalise times.
    Unknown keys (e.g. settlement columns from a DataFrame row) are dropped.
    """
    cleaned = {}
    for field in SERVICE_FIELDS:
        if field not in service_data:
            continue
        value = service_data[field]
        if field in MONEY_FIELDS:
            cleaned[field] = safe_amount(value)
        elif field in ("start_time", "end_time"):
            cleaned[field] = _normalize_time(value)
        else:
            cleaned[field] = clean_text(value)
    return cleaned


# =============================================================================
# VALIDATION
# =============================================================================

def validate_service(service):
    """
    Check a service record before it is saved.

    PARAMETERS:
        service (dict): The full record (after merging any update)

    RETURNS:
        list of str: Problems found - empty list means valid

    RULES:
        - title is required
        - driver_id and supplier_id cannot both be set
        - money fields cannot be negative
        - deposit cannot exceed client price
        - payment method, payment statuses, status and type come from
          the fixed lists in config
    """
    problems = []

    if not clean_text(service.get("title")):
        problems.append("Title is required")

    if clean_text(service.get("driver_id")) and clean_text(service.get("supplier_id")):
        problems.append("A service is either done by a driver or by a supplier, not both")

    for field in MONEY_FIELDS:
        if safe_amount(service.get(field)) < 0:
            problems.append(f"{field} cannot be negative")

    if safe_amount(service.get("deposit")) > safe_amount(service.get("client_price")):
        problems.append("Deposit cannot exceed the client price")

    method = clean_text(service.get("payment_method"))
    if method is not None and method not in PAYMENT_METHODS:
        problems.append(f"Unknown payment method: {method}")

    for field in ("client_payment_status", "supplier_payment_status"):
        value = clean_text(service.get(field))
        if value is not None and value not in PAYMENT_STATUSES:
            problems.append(f"Unknown {field}: {value}")

    status = clean_text(service.get("status"))
    if status is not None and status not in SERVICE_STATUSES:
        problems.append(f"Unknown status: {status}")

    service_type = clean_text(service.get("service_type"))
    if service_type is not None and service_type not in SERVICE_TYPES:
        problems.append(f"Unknown service type: {service_type}")

    return problems


# =============================================================================
# SERVICES QUERIES
# =============================================================================

def load_services(start=None, end=None, driver_id=None, supplier_id=None,
                  client_name=None, include_cancelled=True):
    """
    Load services with optional filters.

    PARAMETERS:
        start, end: Window on start_time (end exclusive)
        driver_id (str): Only this driver's jobs
        supplier_id (str): Only this supplier's jobs
        client_name (str): Only this client (case and spacing ignored)
        include_cancelled (bool): False hides CANCELLED services

    RETURNS:
        pd.DataFrame: Matching services, most recent start time first

    EXAMPLE:
        # March 2025 for one supplier
        df = load_services(start="2025-03-01", end="2025-04-01", supplier_id=sid)
    """
    try:
        conn = get_db_connection()

        query = "SELECT * FROM services WHERE 1=1"
        params = []

        if start is not None:
            query += " AND start_time >= ?"
            params.append(_window_bound(start))
        if end is not None:
            query += " AND start_time < ?"
            params.append(_window_bound(end))
        if driver_id:
            query += " AND driver_id = ?"
            params.append(driver_id)
        if supplier_id:
            query += " AND supplier_id = ?"
            params.append(supplier_id)
        if not include_cancelled:
            query += " AND (status IS NULL OR status != ?)"
            params.append(STATUS_CANCELLED)

        query += " ORDER BY start_time DESC"

        df = pd.read_sql_query(query, conn, params=params if params else None)
        conn.close()

        # Client names are matched loosely, which SQL cannot do for spacing
        if client_name:
            wanted = " ".join(str(client_name).split()).casefold()
            mask = df["client_name"].map(
                lambda name: " ".join(str(name or "").split()).casefold() == wanted
            )
            df = df[mask].reset_index(drop=True)

        return df

    except Exception as e:
        print(f"[ERROR] Error loading services: {e}")
        return pd.DataFrame()


def load_service_by_id(service_id):
    """
    Load a single service by its ID.

    RETURNS:
        dict: Service data, or None if not found
    """
    try:
        conn = get_db_connection()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM services WHERE service_id = ?", (service_id,))
        row = cursor.fetchone()
        service = _row_to_dict(cursor, row) if row else None
        conn.close()
        return service

    except Exception as e:
        print(f"[ERROR] Error loading service {service_id}: {e}")
        return None


def create_service(service_data):
    """
    Create a new service.

    PARAMETERS:
        service_data (dict): Field values; missing ones get defaults
            (PENDING, UNPAID, amounts 0). A service_id is generated
            when none is given.

    RETURNS:
        str: The service_id, or None if invalid or failed

    EXAMPLE:
        service_id = create_service({
            "title": "Airport → Hotel Danieli",
            "client_name": "Smith family",
            "start_time": "2025-03-05 10:00",
            "client_price": 120,
            "payment_method": "Pay to the driver",
            "driver_id": driver_id,
        })
    """
    service = _clean_service(service_data)
    service.setdefault("status", STATUS_PENDING)
    service.setdefault("client_payment_status", PAYMENT_STATUS_UNPAID)
    service.setdefault("supplier_payment_status", PAYMENT_STATUS_UNPAID)
    for field in MONEY_FIELDS:
        service.setdefault(field, 0.0)
    if not service.get("service_id"):
        service["service_id"] = _new_id()

    problems = validate_service(service)
    if problems:
        print(f"[WARN] Service not saved: {'; '.join(problems)}")
        return None

    try:
        conn = get_db_connection()
        cursor = conn.cursor()

        now = datetime.now().isoformat()
        service["created_at"] = now
        service["updated_at"] = now

        columns = ", ".join(service.keys())
        placeholders = ", ".join(["?"] * len(service))
        cursor.execute(f"""
            INSERT INTO services ({columns})
            VALUES ({placeholders})
        """, list(service.values()))

        conn.commit()
        conn.close()

        print(f"[OK] Created service {service['service_id']}: {service.get('title')}")
        return service["service_id"]

    except Exception as e:
        print(f"[ERROR] Error creating service: {e}")
        return None


def update_service(service_id, updates):
    """
    Update an existing service.

    The updated record is validated as a whole, so e.g. raising the
    deposit above the stored price is refused.

    RETURNS:
        bool: True if successful
    """
    existing = load_service_by_id(service_id)
    if existing is None:
        print(f"[WARN] Service {service_id} not found")
        return False

    changes = _clean_service(updates)
    changes.pop("service_id", None)
    if not changes:
        return True

    merged = dict(existing)
    merged.update(changes)
    problems = validate_service(merged)
    if problems:
        print(f"[WARN] Service {service_id} not updated: {'; '.join(problems)}")
        return False

    try:
        conn = get_db_connection()
        cursor = conn.cursor()

        changes["updated_at"] = datetime.now().isoformat()
        set_clause = ", ".join([f"{k} = ?" for k in changes.keys()])
        values = list(changes.values()) + [service_id]

        cursor.execute(f"""
            UPDATE services SET {set_clause}
            WHERE service_id = ?
        """, values)

        conn.commit()
        conn.close()
        return True

    except Exception as e:
        print(f"[ERROR] Error updating service {service_id}: {e}")
        return False


def set_service_status(service_id, new_status, force=False):
    """
    Move a service along its lifecycle.

    PENDING → CONFIRMED → IN_PROGRESS → COMPLETED, or CANCELLED from any
    state that is not final. force=True skips the transition check
    (used for corrections).

    RETURNS:
        bool: True if the status was changed
    """
    service = load_service_by_id(service_id)
    if service is None:
        print(f"[WARN] Service {service_id} not found")
        return False

    if new_status not in SERVICE_STATUSES:
        print(f"[WARN] Unknown status: {new_status}")
        return False

    current = service.get("status") or STATUS_PENDING
    if current == new_status:
        return True
    if not force and new_status not in STATUS_TRANSITIONS.get(current, []):
        print(f"[WARN] Cannot move service {service_id} from {current} to {new_status}")
        return False

    if update_service(service_id, {"status": new_status}):
        print(f"[OK] Service {service_id}: {current} → {new_status}")
        return True
    return False


def set_payment_status(service_id, client_status=None, supplier_status=None):
    """
    Record who has paid: the client, the agency (to the supplier), or both.

    PARAMETERS:
        service_id (str): The service
        client_status (str): UNPAID / PARTIAL / PAID, or None to leave as is
        supplier_status (str): UNPAID / PARTIAL / PAID, or None to leave as is

    RETURNS:
        bool: True if saved

    EXAMPLE:
        set_payment_status(service_id, client_status="PAID")
    """
    changes = {}
    if client_status is not None:
        changes["client_payment_status"] = client_status
    if supplier_status is not None:
        changes["supplier_payment_status"] = supplier_status
    if not changes:
        return True

    if update_service(service_id, changes):
        print(f"[OK] Service {service_id} payment: "
              + ", ".join(f"{k} = {v}" for k, v in changes.items()))
        return True
    return False


def delete_service(service_id):
    """
    Delete a service.

    RETURNS:
        bool: True if a row was deleted
    """
    try:
        conn = get_db_connection()
        cursor = conn.cursor()
        cursor.execute("DELETE FROM services WHERE service_id = ?", (service_id,))
        deleted = cursor.rowcount > 0
        conn.commit()
        conn.close()

        if deleted:
            print(f"[OK] Deleted service {service_id}")
        return deleted

    except Exception as e:
        print(f"[ERROR] Error deleting service {service_id}: {e}")
        return False


def check_service_exists(service_id=None, start_time=None, title=None, client_name=None):
    """
    Check whether a service is already in the database.

    MATCHING:
        - By service_id when one is given
        - Otherwise by start time + title + client name (the same job
          imported twice from two exports)

    RETURNS:
        bool: True if a matching service exists
    """
    try:
        conn = get_db_connection()
        cursor = conn.cursor()

        if clean_text(service_id):
            cursor.execute(
                "SELECT 1 FROM services WHERE service_id = ?",
                (clean_text(service_id),)
            )
        else:
            cursor.execute("""
                SELECT 1 FROM services
                WHERE start_time IS ?
                  AND LOWER(TRIM(title)) = LOWER(TRIM(?))
                  AND LOWER(TRIM(COALESCE(client_name, ''))) = LOWER(TRIM(?))
            """, (
                _normalize_time(start_time),
                clean_text(title) or "",
                clean_text(client_name) or "",
            ))

        exists = cursor.fetchone() is not None
        conn.close()
        return exists

    except Exception as e:
        print(f"[ERROR] Error checking service: {e}")
        return False


# =============================================================================
# DRIVERS QUERIES
# =============================================================================

def load_drivers():
    """
    RETURNS:
        pd.DataFrame: All drivers, sorted by name
    """
    try:
        conn = get_db_connection()
        df = pd.read_sql_query("SELECT * FROM drivers ORDER BY name COLLATE NOCASE", conn)
        conn.close()
        return df
    except Exception as e:
        print(f"[ERROR] Error loading drivers: {e}")
        return pd.DataFrame()


def load_driver_by_name(name):
    """Find a driver by name (case-insensitive). Returns dict or None."""
    try:
        conn = get_db_connection()
        cursor = conn.cursor()
        cursor.execute(
            "SELECT * FROM drivers WHERE LOWER(TRIM(name)) = LOWER(TRIM(?))",
            (name or "",)
        )
        row = cursor.fetchone()
        driver = _row_to_dict(cursor, row) if row else None
        conn.close()
        return driver
    except Exception as e:
        print(f"[ERROR] Error loading driver {name}: {e}")
        return None


def create_driver(driver_data):
    """
    Create a new driver.

    RETURNS:
        str: The new driver_id, or None if failed
    """
    driver = {k: clean_text(v) for k, v in driver_data.items() if k in DRIVER_FIELDS}
    if not driver.get("name"):
        print("[WARN] Driver not saved: name is required")
        return None
    if driver.get("availability") and driver["availability"] not in DRIVER_AVAILABILITY:
        print(f"[WARN] Driver not saved: unknown availability {driver['availability']}")
        return None
    driver.setdefault("availability", DRIVER_AVAILABILITY[0])
    if not driver.get("driver_id"):
        driver["driver_id"] = _new_id()

    try:
        conn = get_db_connection()
        cursor = conn.cursor()

        now = datetime.now().isoformat()
        driver["created_at"] = now
        driver["updated_at"] = now

        columns = ", ".join(driver.keys())
        placeholders = ", ".join(["?"] * len(driver))
        cursor.execute(f"INSERT INTO drivers ({columns}) VALUES ({placeholders})",
                       list(driver.values()))

        conn.commit()
        conn.close()

        print(f"[OK] Created driver {driver['name']}")
        return driver["driver_id"]

    except Exception as e:
        print(f"[ERROR] Error creating driver: {e}")
        return None


def update_driver(driver_id, updates):
    """
    Update a driver's details.

    RETURNS:
        bool: True if successful
    """
    try:
        changes = {k: clean_text(v) for k, v in updates.items()
                   if k in DRIVER_FIELDS and k != "driver_id"}
        if not changes:
            return True

        conn = get_db_connection()
        cursor = conn.cursor()

        changes["updated_at"] = datetime.now().isoformat()
        set_clause = ", ".join([f"{k} = ?" for k in changes.keys()])
        cursor.execute(f"UPDATE drivers SET {set_clause} WHERE driver_id = ?",
                       list(changes.values()) + [driver_id])

        conn.commit()
        conn.close()
        return True

    except Exception as e:
        print(f"[ERROR] Error updating driver {driver_id}: {e}")
        return False


# =============================================================================
# SUPPLIERS QUERIES
# =============================================================================

def load_suppliers():
    """
    RETURNS:
        pd.DataFrame: All suppliers, sorted by name
    """
    try:
        conn = get_db_connection()
        df = pd.read_sql_query("SELECT * FROM suppliers ORDER BY name COLLATE NOCASE", conn)
        conn.close()
        return df
    except Exception as e:
        print(f"[ERROR] Error loading suppliers: {e}")
        return pd.DataFrame()


def load_supplier_by_id(supplier_id):
    try:
        conn = get_db_connection()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM suppliers WHERE supplier_id = ?", (supplier_id,))
        row = cursor.fetchone()
        supplier = _row_to_dict(cursor, row) if row else None
        conn.close()
        return supplier
    except Exception as e:
        print(f"[ERROR] Error loading supplier {supplier_id}: {e}")
        return None


def load_supplier_by_name(name):
    """Find a supplier by name (case-insensitive). Returns dict or None."""
    try:
        conn = get_db_connection()
        cursor = conn.cursor()
        cursor.execute(
            "SELECT * FROM suppliers WHERE LOWER(TRIM(name)) = LOWER(TRIM(?))",
            (name or "",)
        )
        row = cursor.fetchone()
        supplier = _row_to_dict(cursor, row) if row else None
        conn.close()
        return supplier
    except Exception as e:
        print(f"[ERROR] Error loading supplier {name}: {e}")
        return None


def create_supplier(supplier_data):
    """
    Create a new supplier.

    RETURNS:
        str: The new supplier_id, or None if failed
    """
    supplier = {k: clean_text(v) for k, v in supplier_data.items() if k in SUPPLIER_FIELDS}
    if not supplier.get("name"):
        print("[WARN] Supplier not saved: name is required")
        return None
    if not supplier.get("supplier_id"):
        supplier["supplier_id"] = _new_id()

    try:
        conn = get_db_connection()
        cursor = conn.cursor()

        now = datetime.now().isoformat()
        supplier["created_at"] = now
        supplier["updated_at"] = now

        columns = ", ".join(supplier.keys())
        placeholders = ", ".join(["?"] * len(supplier))
        cursor.execute(f"INSERT INTO suppliers ({columns}) VALUES ({placeholders})",
                       list(supplier.values()))

        conn.commit()
        conn.close()

        print(f"[OK] Created supplier {supplier['name']}")
        return supplier["supplier_id"]

    except Exception as e:
        print(f"[ERROR] Error creating supplier: {e}")
        return None


# =============================================================================
# CLIENTS
# =============================================================================

def load_client_names():
    """
    Distinct client names across all services, sorted case-insensitively.

    Names that differ only in case or spacing are listed once.
    """
    try:
        conn = get_db_connection()
        cursor = conn.cursor()
        cursor.execute("SELECT DISTINCT client_name FROM services WHERE client_name IS NOT NULL")
        names = {}
        for (name,) in cursor.fetchall():
            cleaned = " ".join(name.split())
            if cleaned:
                names.setdefault(cleaned.casefold(), cleaned)
        conn.close()
        return sorted(names.values(), key=str.casefold)
    except Exception as e:
        print(f"[ERROR] Error loading client names: {e}")
        return []


# =============================================================================
# APP SETTINGS
# =============================================================================

def load_app_settings():
    """
    Display settings, stored values over DEFAULT_APP_SETTINGS.

    RETURNS:
        dict: currency, language, date_format, time_format, agency_name
    """
    settings = dict(DEFAULT_APP_SETTINGS)
    try:
        conn = get_db_connection()
        cursor = conn.cursor()
        cursor.execute("SELECT key, value FROM app_settings")
        for key, value in cursor.fetchall():
            if value not in (None, ""):
                settings[key] = value
        conn.close()
    except Exception as e:
        print(f"[ERROR] Error loading settings: {e}")
    return settings


def save_app_settings(settings):
    """
    Save display settings (only the keys DEFAULT_APP_SETTINGS knows).

    RETURNS:
        bool: True if successful
    """
    try:
        conn = get_db_connection()
        cursor = conn.cursor()
        for key, value in settings.items():
            if key not in DEFAULT_APP_SETTINGS:
                continue
            cursor.execute("""
                INSERT INTO app_settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """, (key, str(value)))
        conn.commit()
        conn.close()
        print("[OK] Settings saved")
        return True
    except Exception as e:
        print(f"[ERROR] Error saving settings: {e}")
        return False
