# =============================================================================
# database/schema.py
# =============================================================================
# PURPOSE:
#   Defines the DATABASE SCHEMA - the structure of all tables.
#
# DATA MODEL:
#   The central concept is a SERVICE - one transfer, tour or custom job.
#
#   [SERVICES] ←── one row per bookable job
#      ├── driver_id   → [DRIVERS]    (done by our own driver)
#      └── supplier_id → [SUPPLIERS]  (outsourced to another operator)
#
#   [APP_SETTINGS] ←── key/value display settings (currency, language...)
#
# WHAT IS NOT STORED:
#   Balance due, cash held, net with the fulfiller and agency margin are
#   always recomputed from the service row (utils/calculations.py).
#   Storing them would let them go stale when a price is edited.
# =============================================================================

from .connection import get_db_connection


def init_db():
    """
    Initialize the database by creating all tables.

    SAFE TO CALL MULTIPLE TIMES:
        "CREATE TABLE IF NOT EXISTS" does nothing when the table exists,
        so every page calls init_db() on load.

    RETURNS:
        bool: True if successful, False if error
    """
    try:
        conn = get_db_connection()
        cursor = conn.cursor()

        # =====================================================================
        # TABLE 1: DRIVERS (internal fulfillers)
        # =====================================================================
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS drivers (
                driver_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT,
                phone TEXT,
                availability TEXT DEFAULT 'Available',

                created_at TEXT,
                updated_at TEXT
            )
        """)

        # =====================================================================
        # TABLE 2: SUPPLIERS (outsourced fulfillers, sometimes also clients)
        # =====================================================================
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS suppliers (
                supplier_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                contact_person TEXT,
                email TEXT,
                phone TEXT,

                created_at TEXT,
                updated_at TEXT
            )
        """)

        # =====================================================================
        # TABLE 3: SERVICES (the hub)
        # =====================================================================
        # Money columns default to 0 so sums never meet NULL.
        # start_time is stored as ISO text ("2025-03-05T10:00:00") so that
        # plain string comparison orders it correctly.
        # =====================================================================
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS services (
                service_id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                service_type TEXT,
                client_name TEXT,
                client_contact TEXT,

                start_time TEXT,
                end_time TEXT,

                -- Money
                client_price REAL DEFAULT 0,
                deposit REAL DEFAULT 0,
                supplier_cost REAL DEFAULT 0,
                extras_amount REAL DEFAULT 0,
                extras_info TEXT,

                -- Payment
                payment_method TEXT,
                client_payment_status TEXT DEFAULT 'UNPAID',
                supplier_payment_status TEXT DEFAULT 'UNPAID',

                -- Fulfillment: at most one of these is set
                driver_id TEXT REFERENCES drivers(driver_id),
                supplier_id TEXT REFERENCES suppliers(supplier_id),

                status TEXT DEFAULT 'PENDING',
                notes TEXT,

                created_at TEXT,
                updated_at TEXT
            )
        """)

        # =====================================================================
        # TABLE 4: APP SETTINGS
        # =====================================================================
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS app_settings (
                key TEXT PRIMARY KEY,
                value TEXT
            )
        """)

        # =====================================================================
        # INDEXES
        # =====================================================================
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_services_start ON services(start_time)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_services_driver ON services(driver_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_services_supplier ON services(supplier_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_services_client ON services(client_name)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_services_status ON services(status)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_drivers_name ON drivers(name)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_suppliers_name ON suppliers(name)")

        conn.commit()
        conn.close()
        return True

    except Exception as e:
        print(f"[ERROR] Error initializing database: {e}")
        return False


def get_table_info():
    """
    Column information for every table - used by the Settings page.

    RETURNS:
        dict: table name → list of (cid, name, type, notnull, default, pk)
    """
    try:
        conn = get_db_connection()
        cursor = conn.cursor()
        cursor.execute("""
            SELECT name FROM sqlite_master
            WHERE type='table'
            ORDER BY name
        """)
        tables = [row[0] for row in cursor.fetchall()]

        info = {}
        for table in tables:
            cursor.execute(f"PRAGMA table_info({table})")
            info[table] = cursor.fetchall()

        conn.close()
        return info

    except Exception as e:
        print(f"[ERROR] Error reading table info: {e}")
        return {}
