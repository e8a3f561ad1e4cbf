# =============================================================================
# config/__init__.py
# =============================================================================
# PURPOSE:
#   Makes the 'config' folder a Python package and re-exports the settings
#   so other files can do:
#       from config import PAYMENT_METHODS, DB_PATH
#   Instead of:
#       from config.settings import PAYMENT_METHODS, DB_PATH
#
# NOTE ON DB_PATH:
#   Code that opens the database reads `config.DB_PATH` at call time
#   (not `from config import DB_PATH`), so tests can point it elsewhere.
# =============================================================================

from .settings import *
