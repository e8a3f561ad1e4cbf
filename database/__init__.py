# =============================================================================
# database/__init__.py
# =============================================================================
# PURPOSE:
#   Makes the database folder a Python package and provides easy imports.
#
# USAGE:
#   Instead of writing:
#       from database.schema import init_db
#       from database.queries import load_services
#
#   You can write:
#       from database import init_db, load_services
# =============================================================================

from .connection import get_db_connection

from .schema import init_db, get_table_info

from .queries import (
    # Services
    validate_service,
    load_services,
    load_service_by_id,
    create_service,
    update_service,
    set_service_status,
    set_payment_status,
    delete_service,
    check_service_exists,

    # Drivers
    load_drivers,
    load_driver_by_name,
    create_driver,
    update_driver,

    # Suppliers
    load_suppliers,
    load_supplier_by_id,
    load_supplier_by_name,
    create_supplier,

    # Clients
    load_client_names,

    # Settings
    load_app_settings,
    save_app_settings,
)
