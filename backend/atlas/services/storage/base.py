from abc import ABC, abstractmethod
from typing import List, Optional, Tuple


GUEST_USERNAME = 'Guest'
# Largest value the player.score INTEGER column holds
MAX_SCORE = 2 ** 31 - 1


class LedgerError(Exception):
    """Base for every error raised by a score ledger."""


class InvalidPlayerError(LedgerError):
    """Username or score is missing or malformed."""


class GuestPlayerError(LedgerError):
    """The guest identity is never persisted nor deleted."""


class PlayerNotFoundError(LedgerError):
    pass


class PersistenceError(LedgerError):
    """The backing store failed; the operation did not take effect."""


class ScoreLedger(ABC):
    """Durable best-score per player.

    Implementations persist every mutation before returning. Argument checks
    live here so every backend rejects the same inputs.
    """

    def __init__(self, guest_username: str = GUEST_USERNAME):
        self.guest_username = guest_username

    def _check_username(self, username) -> str:
        if not isinstance(username, str) or not username.strip():
            raise InvalidPlayerError('Username cannot be empty.')
        username = username.strip()
        if username == self.guest_username:
            raise GuestPlayerError(f"'{self.guest_username}' scores are not saved.")
        return username

    @staticmethod
    def _check_score(score) -> int:
        # bool is an int subclass; a JSON true is not a score
        if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= MAX_SCORE:
            raise InvalidPlayerError(f'Score must be an integer between 0 and {MAX_SCORE}.')
        return score

    def register(self, username: str) -> bool:
        """Create ``username`` with a zero score. Returns False if it already exists."""
        return self._register(self._check_username(username))

    def record_score(self, username: str, score: int) -> int:
        """Raise the stored score to ``score`` if higher. Returns the stored score."""
        username = self._check_username(username)
        return self._record_score(username, self._check_score(score))

    def get_score(self, username: str) -> int:
        if not isinstance(username, str) or not username.strip():
            return 0
        return self._get_score(username.strip())

    def delete(self, username: str) -> bool:
        """Remove ``username``. Returns False if there was no such player."""
        return self._delete(self._check_username(username))

    def reset_score(self, username: Optional[str]) -> None:
        if not isinstance(username, str) or not username.strip() or username.strip() == self.guest_username:
            return
        self._reset_score(username.strip())

    @abstractmethod
    def _register(self, username: str) -> bool: ...

    @abstractmethod
    def _record_score(self, username: str, score: int) -> int: ...

    @abstractmethod
    def _get_score(self, username: str) -> int: ...

    @abstractmethod
    def _delete(self, username: str) -> bool: ...

    @abstractmethod
    def _reset_score(self, username: str) -> None: ...

    @abstractmethod
    def leaderboard(self) -> List[Tuple[str, int]]:
        """All players as (username, score), best first; ties keep creation order."""

    @abstractmethod
    def reset_all(self) -> None:
        """Zero every score, keeping the players."""


class SessionStore(ABC):
    """Durable home for the game session state ({'usedNations', 'lastLetter'})."""

    @abstractmethod
    def load_session(self) -> Optional[dict]:
        """Return the saved state, or None if nothing was saved yet."""

    @abstractmethod
    def save_session(self, state: dict) -> None: ...
