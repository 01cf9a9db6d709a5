"""Score ledger and session persistence.

Two interchangeable backends: ``sql`` (Flask-SQLAlchemy models) and
``json`` (a single JSON document on disk). The game engine only sees the
``SessionStore`` interface and routes only see ``ScoreLedger``.
"""

from .base import (
    GUEST_USERNAME,
    GuestPlayerError,
    InvalidPlayerError,
    LedgerError,
    PersistenceError,
    PlayerNotFoundError,
    ScoreLedger,
    SessionStore,
)

__all__ = [
    'GUEST_USERNAME',
    'GuestPlayerError',
    'InvalidPlayerError',
    'LedgerError',
    'PersistenceError',
    'PlayerNotFoundError',
    'ScoreLedger',
    'SessionStore',
]
