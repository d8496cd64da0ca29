"""Database module for the sports tracker.

This module provides:
- SQLAlchemy async database connection
- User, session, activity, like and comment models
"""

from sports_tracker.database.connection import (
    get_db,
    get_db_session,
    init_db,
    close_db,
    create_tables,
    drop_tables,
    commit_or_raise,
)
from sports_tracker.database.models import (
    Base,
    User,
    LoginSession,
    Activity,
    Like,
    Comment,
    parse_id,
)

__all__ = [
    # Connection
    "get_db",
    "get_db_session",
    "init_db",
    "close_db",
    "create_tables",
    "drop_tables",
    "commit_or_raise",
    # Models
    "Base",
    "User",
    "LoginSession",
    "Activity",
    "Like",
    "Comment",
    "parse_id",
]
