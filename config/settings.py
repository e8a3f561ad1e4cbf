# =============================================================================
# config/settings.py
# =============================================================================
# PURPOSE:
#   Central configuration file for the entire application.
#   All "magic numbers", closed value sets and default settings live here.
#   This makes it easy to change things without hunting through code.
#
# WHY CENTRALIZE SETTINGS?
#   1. Single source of truth - change once, affects everywhere
#   2. Easy to find what can be configured
#   3. The settlement engine and the screens agree on the same value sets
#   4. Makes testing easier (tests swap DB_PATH for a temporary file)
# =============================================================================

# -----------------------------------------------------------------------------
# DATABASE CONFIGURATION
# -----------------------------------------------------------------------------
# SQLite database file path (relative to where you run the app).
# Read at connection time (config.DB_PATH), so it can be swapped in tests.
DB_PATH = "transfer_desk.db"

# -----------------------------------------------------------------------------
# MONEY HANDLING
# -----------------------------------------------------------------------------
# Tolerance for comparing amounts (handles floating point rounding).
# Only used for display decisions ("is this zero?"), never in sums.
AMOUNT_TOLERANCE = 0.005

# -----------------------------------------------------------------------------
# PAYMENT METHODS (closed set)
# -----------------------------------------------------------------------------
# How the client pays for a service. The exact strings matter: they are
# stored on every service record and compared by the settlement engine.
PAYMENT_PREPAID = "Prepaid"
PAYMENT_PAY_DRIVER = "Pay to the driver"
PAYMENT_DEPOSIT_AND_DRIVER = "Paid deposit + balance to the driver"
PAYMENT_FUTURE_INVOICE = "Future Invoice"
PAYMENT_CASH = "Cash"

PAYMENT_METHODS = [
    PAYMENT_PREPAID,
    PAYMENT_PAY_DRIVER,
    PAYMENT_DEPOSIT_AND_DRIVER,
    PAYMENT_FUTURE_INVOICE,
    PAYMENT_CASH,
]

# The client settles off-site: nothing is collected at time of service
OFFSITE_PAYMENT_METHODS = [
    PAYMENT_PREPAID,
    PAYMENT_FUTURE_INVOICE,
]

# The fulfilling party (driver or supplier) physically receives money
CASH_COLLECTING_METHODS = [
    PAYMENT_PAY_DRIVER,
    PAYMENT_DEPOSIT_AND_DRIVER,
    PAYMENT_CASH,
]

# -----------------------------------------------------------------------------
# PAYMENT STATUS (client side and supplier side)
# -----------------------------------------------------------------------------
PAYMENT_STATUS_UNPAID = "UNPAID"
PAYMENT_STATUS_PAID = "PAID"
PAYMENT_STATUS_PARTIAL = "PARTIAL"

PAYMENT_STATUSES = [
    PAYMENT_STATUS_UNPAID,
    PAYMENT_STATUS_PAID,
    PAYMENT_STATUS_PARTIAL,
]

# -----------------------------------------------------------------------------
# SERVICE LIFECYCLE
# -----------------------------------------------------------------------------
# PENDING -> CONFIRMED -> IN_PROGRESS -> COMPLETED
# CANCELLED can be reached from any non-terminal state.
STATUS_PENDING = "PENDING"
STATUS_CONFIRMED = "CONFIRMED"
STATUS_IN_PROGRESS = "IN_PROGRESS"
STATUS_COMPLETED = "COMPLETED"
STATUS_CANCELLED = "CANCELLED"

SERVICE_STATUSES = [
    STATUS_PENDING,
    STATUS_CONFIRMED,
    STATUS_IN_PROGRESS,
    STATUS_COMPLETED,
    STATUS_CANCELLED,
]

# Allowed moves between lifecycle states
STATUS_TRANSITIONS = {
    STATUS_PENDING: [STATUS_CONFIRMED, STATUS_CANCELLED],
    STATUS_CONFIRMED: [STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_CANCELLED],
    STATUS_IN_PROGRESS: [STATUS_COMPLETED, STATUS_CANCELLED],
    STATUS_COMPLETED: [],
    STATUS_CANCELLED: [],
}

# "Live" cash-flow views (receivables / payables)
CASH_FLOW_STATUSES = [
    STATUS_CONFIRMED,
    STATUS_IN_PROGRESS,
    STATUS_COMPLETED,
]

# Profit-recognition views (revenue, costs, margin)
PROFIT_STATUSES = [
    STATUS_COMPLETED,
]

# -----------------------------------------------------------------------------
# SERVICE TYPES
# -----------------------------------------------------------------------------
SERVICE_TYPES = [
    "AIRPORT_TRANSFER",
    "CITY_TOUR",
    "HOTEL_TRANSFER",
    "WINE_TOUR",
    "CUSTOM",
]

# -----------------------------------------------------------------------------
# FULFILLMENT
# -----------------------------------------------------------------------------
FULFILLMENT_INTERNAL = "INTERNAL"        # driver_id set
FULFILLMENT_OUTSOURCED = "OUTSOURCED"    # supplier_id set
FULFILLMENT_UNASSIGNED = "UNASSIGNED"    # neither set

DRIVER_AVAILABILITY = ["Available", "Busy", "On Leave"]

# -----------------------------------------------------------------------------
# SETTLEMENT DIRECTION LABELS
# -----------------------------------------------------------------------------
# Per-service labels (who hands money to whom after the job)
DIRECTION_AGENCY_PAYS_SUPPLIER = "agency pays supplier"
DIRECTION_SUPPLIER_PAYS_AGENCY = "supplier pays agency"
DIRECTION_DRIVER_PAYS_AGENCY = "driver pays agency"
DIRECTION_NOTHING_TO_SETTLE = "nothing to settle"

# Net balance labels (one counterparty, one period)
DIRECTION_COUNTERPARTY_PAYS_AGENCY = "counterparty pays agency"
DIRECTION_AGENCY_PAYS_COUNTERPARTY = "agency pays counterparty"

# Shown on statements instead of a direction when the net rounds to zero
SETTLEMENT_NOTHING_OWED = "nothing owed either way"

# -----------------------------------------------------------------------------
# DISPLAY SETTINGS
# -----------------------------------------------------------------------------
# These are only ever used by formatters and renderers, passed in
# explicitly as a dict. The settlement engine works on plain numbers.
CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CHF": "CHF ",
}

LANGUAGES = ["en", "it", "es", "fr"]

# strftime patterns keyed by the label shown in the Settings page
DATE_FORMATS = {
    "DD/MM/YYYY": "%d/%m/%Y",
    "MM/DD/YYYY": "%m/%d/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
}

TIME_FORMATS = {
    "24h": "%H:%M",
    "12h": "%I:%M %p",
}

MONTH_NAMES = {
    "en": ["January", "February", "March", "April", "May", "June", "July",
           "August", "September", "October", "November", "December"],
    "it": ["Gennaio", "Febbraio", "Marzo", "Aprile", "Maggio", "Giugno", "Luglio",
           "Agosto", "Settembre", "Ottobre", "Novembre", "Dicembre"],
    "es": ["Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio", "Julio",
           "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre"],
    "fr": ["Janvier", "Février", "Mars", "Avril", "Mai", "Juin", "Juillet",
           "Août", "Septembre", "Octobre", "Novembre", "Décembre"],
}

DEFAULT_APP_SETTINGS = {
    "currency": "USD",
    "language": "en",
    "date_format": "DD/MM/YYYY",
    "time_format": "24h",
    "agency_name": "Transfer Desk",
}

# -----------------------------------------------------------------------------
# UI CONFIGURATION
# -----------------------------------------------------------------------------
PAGE_TITLE = "Transfer Desk"
PAGE_ICON = "🚐"
LAYOUT = "wide"
