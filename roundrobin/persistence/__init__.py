"""
Persistence layer for tournament data.
No business logic, no scheduling: only read/write interfaces.
"""
from .db import get_connection, init_db
from .repositories import (
    UserRepository,
    TournamentRepository,
)

__all__ = [
    "get_connection",
    "init_db",
    "UserRepository",
    "TournamentRepository",
]
