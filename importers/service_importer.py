# =============================================================================
# importers/service_importer.py
# =============================================================================
# PURPOSE:
#   Imports service records (transfers, tours) from CSV or Excel exports,
#   e.g. a booking spreadsheet or another system's export.
#
# WHAT THIS IMPORTER DOES:
#   1. Reads the CSV/Excel file
#   2. Works out which column holds which field (flexible headers)
#   3. For each row:
#      a. Skips blank rows
#      b. Resolves the driver / supplier NAME to an id, creating the
#         driver or supplier when it is not known yet
#      c. Skips duplicates (same id, or same start time + title + client)
#      d. Saves the service (validation happens in create_service)
#
# EXPECTED COLUMNS (any order, header names are matched loosely):
#   Title | Client | Contact | Start | End | Price | Deposit | Supplier cost |
#   Extras | Extras info | Payment method | Client payment | Supplier payment |
#   Driver | Supplier | Status | Type | Notes
# =============================================================================

from datetime import datetime

import pandas as pd

from config import (
    PAYMENT_METHODS,
    PAYMENT_STATUSES,
    SERVICE_STATUSES,
    SERVICE_TYPES,
)
from database import (
    create_service,
    check_service_exists,
    validate_service,
    load_driver_by_name,
    create_driver,
    load_supplier_by_name,
    create_supplier,
)
from utils.calculations import safe_amount


# Possible header names for each field
COLUMN_MAPPINGS = {
    'service_id': ['service id', 'service_id', 'booking id', 'booking ref'],
    'title': ['title', 'service', 'description', 'job'],
    'service_type': ['type', 'service type', 'category'],
    'client_name': ['client', 'client name', 'customer', 'guest'],
    'client_contact': ['contact', 'client contact', 'phone', 'email'],
    'start_time': ['start', 'start time', 'pickup', 'pickup time', 'date'],
    'end_time': ['end', 'end time', 'drop off'],
    'client_price': ['price', 'client price', 'amount', 'total'],
    'deposit': ['deposit', 'prepaid', 'advance'],
    'supplier_cost': ['supplier cost', 'cost', 'net cost'],
    'extras_amount': ['extras', 'extras amount', 'commission'],
    'extras_info': ['extras info', 'extras notes', 'extras description'],
    'payment_method': ['payment method', 'payment', 'paid by'],
    'client_payment_status': ['client payment', 'client payment status', 'client status'],
    'supplier_payment_status': ['supplier payment', 'supplier payment status', 'supplier status'],
    'driver_name': ['driver', 'driver name', 'chauffeur'],
    'supplier_name': ['supplier', 'supplier name', 'operator', 'partner'],
    'status': ['status', 'service status', 'state'],
    'notes': ['notes', 'remarks', 'comments'],
}

MONEY_COLUMNS = ['client_price', 'deposit', 'supplier_cost', 'extras_amount']
TEXT_COLUMNS = [
    'service_id', 'title', 'client_name', 'client_contact', 'start_time',
    'end_time', 'extras_info', 'notes',
]

# Fields whose values must come from a fixed list
CHOICE_COLUMNS = {
    'payment_method': PAYMENT_METHODS,
    'client_payment_status': PAYMENT_STATUSES,
    'supplier_payment_status': PAYMENT_STATUSES,
    'status': SERVICE_STATUSES,
    'service_type': SERVICE_TYPES,
}


class ServiceImporter:
    """
    Imports service records from CSV or Excel.

    USAGE:
        importer = ServiceImporter("services.csv")
        success, message, count = importer.import_services()

    FEATURES:
        - Flexible column detection
        - Drivers / suppliers looked up by name, created when missing
        - Duplicate detection by id or by start time + title + client
        - Invalid rows reported, not imported
    """

    def __init__(self, source):
        """
        PARAMETERS:
            source: File path or file-like object (e.g. a Streamlit upload)
        """
        self.source = source
        self.batch_id = datetime.now().strftime("batch_%Y%m%d_%H%M%S")
        self.errors = []
        self.skipped = []
        self.duplicates = []
        self.created_drivers = []
        self.created_suppliers = []

    def import_services(self):
        """
        Main method: Import services from the file.

        RETURNS:
            tuple: (success, message, count)
        """
        try:
            df = self._read_file()

            print(f"[INFO] Read file with {len(df)} rows")
            print(f"   Columns: {list(df.columns)}")

            col_map = self._detect_columns(df)
            if not col_map.get('title'):
                return False, "Missing required column: Title", 0

            imported = 0
            for idx, row in df.iterrows():
                row_num = idx + 2  # header is row 1

                service = self._parse_service(row, col_map)
                if not service.get('title') and not service.get('start_time'):
                    self.skipped.append(f"Row {row_num}: Empty row")
                    continue

                if check_service_exists(
                    service_id=service.get('service_id'),
                    start_time=service.get('start_time'),
                    title=service.get('title'),
                    client_name=service.get('client_name'),
                ):
                    self.duplicates.append(f"Row {row_num}: {service.get('title')}")
                    continue

                # Validate before creating any driver / supplier
                problems = validate_service(self._with_fulfiller_placeholders(service))
                if problems:
                    self.errors.append(f"Row {row_num}: {'; '.join(problems)}")
                    continue

                service['driver_id'] = self._resolve_driver(service.pop('driver_name', None))
                service['supplier_id'] = self._resolve_supplier(service.pop('supplier_name', None))

                if create_service(service):
                    imported += 1
                else:
                    self.errors.append(f"Row {row_num}: Could not save {service.get('title')}")

            msg_parts = [f"Imported {imported} services"]
            if self.created_drivers:
                msg_parts.append(f"{len(self.created_drivers)} new drivers")
            if self.created_suppliers:
                msg_parts.append(f"{len(self.created_suppliers)} new suppliers")
            if self.duplicates:
                msg_parts.append(f"{len(self.duplicates)} duplicates")
            if self.skipped:
                msg_parts.append(f"{len(self.skipped)} skipped")
            if self.errors:
                msg_parts.append(f"{len(self.errors)} errors")

            print(f"[OK] {' | '.join(msg_parts)}")
            return True, " | ".join(msg_parts), imported

        except Exception as e:
            print(f"[ERROR] Service import failed: {e}")
            return False, f"Import error: {str(e)}", 0

    def _read_file(self):
        """CSV by default; Excel when the name says so or CSV parsing fails."""
        name = str(getattr(self.source, 'name', self.source)).lower()
        if name.endswith(('.xlsx', '.xls')):
            return pd.read_excel(self.source)

        try:
            return pd.read_csv(self.source)
        except (UnicodeDecodeError, pd.errors.ParserError):
            if hasattr(self.source, 'seek'):
                self.source.seek(0)
            return pd.read_excel(self.source)

    def _detect_columns(self, df):
        """
        Detect which columns contain which data.

        First pass matches header names exactly, second pass accepts a
        known name contained in the header ("Pickup time (local)").

        RETURNS:
            dict: Mapping of our field names to actual column names
        """
        col_map = {}

        for field, possible_names in COLUMN_MAPPINGS.items():
            for col in df.columns:
                col_lower = str(col).lower().strip()
                if col_lower in possible_names and col not in col_map.values():
                    col_map[field] = col
                    break

        for field, possible_names in COLUMN_MAPPINGS.items():
            if field in col_map:
                continue
            for col in df.columns:
                col_lower = str(col).lower().strip()
                if col in col_map.values():
                    continue
                if any(name in col_lower for name in possible_names):
                    col_map[field] = col
                    break

        print("[INFO] Column mapping detected:")
        for field, col in col_map.items():
            print(f"   {field} -> {col}")

        return col_map

    def _get_value(self, row, col_name, default=None):
        """Safely get a text value from a row."""
        if not col_name or col_name not in row.index:
            return default

        value = row[col_name]
        if pd.isna(value):
            return default

        str_val = str(value).strip()
        if not str_val or str_val.lower() in ('nan', 'none', 'n/a'):
            return default
        return str_val

    def _get_float(self, row, col_name):
        """Money value; currency symbols and thousands separators removed."""
        value = self._get_value(row, col_name)
        if value is None:
            return 0.0
        for symbol in ('€', '$', '£'):
            value = value.replace(symbol, '')
        return safe_amount(value)

    def _get_choice(self, row, col_name, choices):
        """
        Match a value to its fixed list ignoring case and spacing, e.g.
        "pay to the driver" → "Pay to the driver", "paid" → "PAID".
        Values that match nothing are kept so validation can report them.
        """
        value = self._get_value(row, col_name)
        if value is None:
            return None
        wanted = " ".join(value.replace('_', ' ').split()).casefold()
        for choice in choices:
            if " ".join(choice.replace('_', ' ').split()).casefold() == wanted:
                return choice
        return value

    def _parse_service(self, row, col_map):
        """
        Parse a row into service data.

        RETURNS:
            dict: Service fields plus driver_name / supplier_name
        """
        service = {}
        for field in TEXT_COLUMNS:
            service[field] = self._get_value(row, col_map.get(field))
        for field in MONEY_COLUMNS:
            service[field] = self._get_float(row, col_map.get(field))
        for field, choices in CHOICE_COLUMNS.items():
            service[field] = self._get_choice(row, col_map.get(field), choices)

        service['driver_name'] = self._get_value(row, col_map.get('driver_name'))
        service['supplier_name'] = self._get_value(row, col_map.get('supplier_name'))

        # Let create_service() apply its defaults for missing choices
        return {k: v for k, v in service.items() if v is not None}

    def _with_fulfiller_placeholders(self, service):
        """Copy of the row with names standing in for ids, for validation."""
        check = dict(service)
        check['driver_id'] = service.get('driver_name')
        check['supplier_id'] = service.get('supplier_name')
        return check

    def _resolve_driver(self, name):
        if not name:
            return None
        driver = load_driver_by_name(name)
        if driver:
            return driver['driver_id']
        driver_id = create_driver({'name': name})
        if driver_id:
            self.created_drivers.append(name)
        return driver_id

    def _resolve_supplier(self, name):
        if not name:
            return None
        supplier = load_supplier_by_name(name)
        if supplier:
            return supplier['supplier_id']
        supplier_id = create_supplier({'name': name})
        if supplier_id:
            self.created_suppliers.append(name)
        return supplier_id

    def get_import_summary(self):
        """Get detailed import summary."""
        return {
            'batch_id': self.batch_id,
            'errors': self.errors,
            'skipped': self.skipped,
            'duplicates': self.duplicates,
            'created_drivers': self.created_drivers,
            'created_suppliers': self.created_suppliers,
        }
