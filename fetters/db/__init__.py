"""fetters database package.

Usage:
    from fetters.db import init_db, get_db, close_db
    conn = init_db()  # runs migrations and seeds statuses
"""

from .connection import close_db, get_db, init_db, run_migrations, transaction

__all__ = ["get_db", "init_db", "close_db", "run_migrations", "transaction"]
