"""
Database module for the MBS fee estimate service.

Exports database connection utilities.
"""

from mbs_estimate.db.connection import (
    check_db_connection,
    close_db_connection,
    get_engine,
    get_session_maker,
)

__all__ = [
    "get_engine",
    "get_session_maker",
    "close_db_connection",
    "check_db_connection",
]
