# =============================================================================
# importers/__init__.py
# =============================================================================
# PURPOSE:
#   Makes the importers folder a Python package and provides easy imports.
#
# WHAT ARE IMPORTERS?
#   Importers are classes that:
#   1. Read data from external files (CSV, Excel)
#   2. Map loosely named columns to our fields
#   3. Save the rows through the database layer
#   4. Report duplicates, skipped rows and errors
#
# AVAILABLE IMPORTERS:
#   - ServiceImporter: Imports service records (transfers, tours)
# =============================================================================

from .service_importer import ServiceImporter
