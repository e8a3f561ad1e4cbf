# =============================================================================
# database/connection.py
# =============================================================================
# PURPOSE:
#   Handles database connections. This is the ONLY file that knows how to
#   connect to the database. All other code uses get_db_connection().
#
# WHY CENTRALIZE CONNECTION?
#   1. If we move from SQLite to a server database, only this file changes
#   2. config.DB_PATH is read on every call, so tests point it at a
#      temporary file and every query follows
#
# SQLITE BASICS:
#   - SQLite is a file-based database (no server needed)
#   - The .db file is created the first time we connect
#   - One writer at a time is plenty for a back-office tool
# =============================================================================

import sqlite3  # Built into Python, no pip install needed!

import config


def get_db_connection():
    """
    Open a connection to the transfer desk database.

    WHAT THIS DOES:
        1. Opens (or creates) the file at config.DB_PATH
        2. Turns foreign keys on (services → drivers / suppliers)
        3. Returns the connection

    USAGE:
        conn = get_db_connection()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM services")
        rows = cursor.fetchall()
        conn.close()

    RETURNS:
        sqlite3.Connection
    """
    conn = sqlite3.connect(config.DB_PATH)

    # Foreign keys are OFF by default in SQLite
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


# =============================================================================
# LEARNING NOTES: WHY READ config.DB_PATH AT CALL TIME?
# =============================================================================
#
#   from config import DB_PATH     → copies the value once, at import
#   import config; config.DB_PATH  → looks it up every time
#
# With the second form a test can do:
#
#   monkeypatch.setattr(config, "DB_PATH", str(tmp_path / "test.db"))
#
# and every query in the app now talks to a throwaway database.
#
# =============================================================================
