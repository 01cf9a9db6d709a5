"""Game domain: the session record and the turn engine.

HTTP routes and socket handlers call into this package; nothing here knows
about Flask or the storage backend in use.
"""

from .engine import TurnEngine, TurnResult
from .session import GameSession, STARTING_LETTER

__all__ = ['TurnEngine', 'TurnResult', 'GameSession', 'STARTING_LETTER']
