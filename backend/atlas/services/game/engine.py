import logging
import random
import threading
from dataclasses import dataclass
from typing import Optional

from atlas.services.nations import NationCatalog
from atlas.services.storage import SessionStore
from .session import GameSession, STARTING_LETTER


logger = logging.getLogger(__name__)

CONTINUE = 'continue'
WIN = 'win'
EMPTY = 'empty'
USED = 'used'
UNKNOWN = 'unknown'
WRONG_LETTER = 'wrong_letter'

LOSSES = frozenset({EMPTY, USED, UNKNOWN, WRONG_LETTER})


@dataclass
class TurnResult:
    outcome: str
    message: str
    user_nation: Optional[str] = None
    computer_nation: Optional[str] = None
    next_letter: Optional[str] = None

    @property
    def game_over(self) -> bool:
        return self.outcome != CONTINUE

    @property
    def is_loss(self) -> bool:
        return self.outcome in LOSSES

    def to_dict(self):
        return {
            'userNation': self.user_nation,
            'computerNation': self.computer_nation,
            'nextLetter': self.next_letter,
            'message': self.message,
            'gameOver': self.game_over,
        }


def _loss(outcome: str, message: str, nation: Optional[str] = None) -> TurnResult:
    return TurnResult(outcome=outcome, message=message, user_nation=nation)


class TurnEngine:
    """Plays the computer's side of the nation chain.

    Owns the process-wide game session. Turns, hints and resets are serialised
    on one lock, and every change is saved through ``store`` before the call
    returns. ``rng`` only needs a ``choice(seq)`` method.
    """

    def __init__(self, catalog: NationCatalog, store: Optional[SessionStore] = None, rng=None,
                 starting_letter: str = STARTING_LETTER):
        self.catalog = catalog
        self.store = store
        self.rng = rng or random.Random()
        self.starting_letter = starting_letter
        self._lock = threading.Lock()
        self._session: Optional[GameSession] = None

    @property
    def session(self) -> GameSession:
        with self._lock:
            return self._current()

    def _current(self) -> GameSession:
        if self._session is None:
            state = self.store.load_session() if self.store else None
            self._session = GameSession.from_dict(state, starting_letter=self.starting_letter)
            logger.info(f"[session] loaded used={len(self._session)} last_letter={self._session.last_letter!r}")
        return self._session

    def _save(self, session: GameSession, before: dict) -> None:
        if not self.store:
            return
        try:
            self.store.save_session(session.to_dict())
        except Exception:
            session.restore(before)
            raise

    def state(self) -> dict:
        with self._lock:
            return self._current().to_dict()

    def submit_turn(self, candidate: str) -> TurnResult:
        with self._lock:
            session = self._current()
            name = (candidate or '').strip()
            if not name:
                return _loss(EMPTY, 'Nation name cannot be empty.')
            if session.is_used(name):
                return _loss(USED, f'"{name}" has already been used. You Lost!', name)
            canonical = self.catalog.canonical(name)
            if canonical is None:
                return _loss(UNKNOWN, f'"{name}" is not a valid nation. You Lost!', name)
            required = session.last_letter
            if required and canonical[0].casefold() != required.casefold():
                return _loss(WRONG_LETTER, f'Must start with "{required.upper()}". You Lost!', canonical)

            before = session.to_dict()
            session.append(canonical)
            search_letter = canonical[-1]
            eligible = [n for n in self.catalog.starting_with(search_letter) if not session.is_used(n)]
            if not eligible:
                self._save(session, before)
                logger.info(f"[turn] user={canonical!r} computer=None outcome=win")
                return TurnResult(outcome=WIN, message="You win! I can't think of a nation.",
                                  user_nation=canonical)

            computer = self.rng.choice(eligible)
            session.append(computer)
            session.last_letter = computer[-1].upper()
            self._save(session, before)
            logger.info(f"[turn] user={canonical!r} computer={computer!r} next={session.last_letter}")
            return TurnResult(
                outcome=CONTINUE,
                message=f'Your turn! Name a nation starting with "{session.last_letter}".',
                user_nation=canonical,
                computer_nation=computer,
                next_letter=session.last_letter,
            )

    def hint(self, letter: str) -> Optional[str]:
        """A random unused nation starting with ``letter``, or None if there is none."""
        letter = (letter or '').strip()
        if len(letter) != 1:
            raise ValueError('Hint letter must be exactly one character.')
        with self._lock:
            session = self._current()
            eligible = [n for n in self.catalog.starting_with(letter) if not session.is_used(n)]
            return self.rng.choice(eligible) if eligible else None

    def reset(self) -> dict:
        with self._lock:
            session = self._current()
            before = session.to_dict()
            session.reset()
            self._save(session, before)
            logger.info(f"[session] reset last_letter={session.last_letter!r}")
            return session.to_dict()
