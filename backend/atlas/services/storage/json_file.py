import copy
import json
import logging
import os
import tempfile
import threading
from typing import List, Optional, Tuple

from .base import GUEST_USERNAME, PersistenceError, PlayerNotFoundError, ScoreLedger, SessionStore


logger = logging.getLogger(__name__)


class JsonFileStore(ScoreLedger, SessionStore):
    """Players and the game session in one JSON document.

    Layout::

        {"users": [{"username": ..., "score": ...}], "usedNations": [...], "lastLetter": "S"}

    Every mutation builds the next document, writes it to a temp file, fsyncs
    and renames it over the old one, and only then swaps it in memory. A
    failed write leaves both the file and the in-memory copy untouched.
    """

    def __init__(self, path: str, guest_username: str = GUEST_USERNAME, starting_letter: str = 'S'):
        super().__init__(guest_username)
        self.path = path
        self._lock = threading.RLock()
        self._store = {'users': [], 'usedNations': [], 'lastLetter': starting_letter}
        self._has_session = False
        self._load()

    def _load(self) -> None:
        if not os.path.exists(self.path):
            logger.info(f"[json-store] {self.path} not found, starting empty")
            return
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.error(f"[json-store] failed to load {self.path}: {exc}")
            raise PersistenceError(f"Failed to load data store {self.path}.") from exc
        if not isinstance(data, dict) or not isinstance(data.get('users', []), list):
            raise PersistenceError(f"Data store {self.path} is malformed.")
        try:
            self._store['users'] = [
                {'username': u['username'], 'score': int(u.get('score', 0))} for u in data.get('users', [])
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise PersistenceError(f"Data store {self.path} has a malformed user entry.") from exc
        if 'usedNations' in data or 'lastLetter' in data:
            used = data.get('usedNations') or []
            last_letter = data.get('lastLetter', self._store['lastLetter'])
            if not isinstance(used, list) or not all(isinstance(n, str) and n.strip() for n in used):
                raise PersistenceError(f"Data store {self.path} has a malformed usedNations list.")
            if not isinstance(last_letter, str) or len(last_letter) > 1:
                raise PersistenceError(f"Data store {self.path} has a malformed lastLetter.")
            self._store['usedNations'] = list(used)
            self._store['lastLetter'] = last_letter
            self._has_session = True

    def _commit(self, store: dict, action: str) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            fd, tmp_path = tempfile.mkstemp(prefix='.atlas-', suffix='.json', dir=directory)
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(store, f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as exc:
            logger.error(f"[json-store] failed to {action}: {exc}")
            raise PersistenceError(f"Failed to {action}.") from exc
        self._store = store

    def _find(self, users: list, username: str) -> Optional[dict]:
        for user in users:
            if user['username'] == username:
                return user
        return None

    def _register(self, username: str) -> bool:
        with self._lock:
            if self._find(self._store['users'], username):
                return False
            store = copy.deepcopy(self._store)
            store['users'].append({'username': username, 'score': 0})
            self._commit(store, 'add user')
            return True

    def _record_score(self, username: str, score: int) -> int:
        with self._lock:
            user = self._find(self._store['users'], username)
            if not user:
                raise PlayerNotFoundError(f"User '{username}' not found.")
            if score <= user['score']:
                return user['score']
            store = copy.deepcopy(self._store)
            self._find(store['users'], username)['score'] = score
            self._commit(store, 'save score')
            return score

    def _get_score(self, username: str) -> int:
        with self._lock:
            user = self._find(self._store['users'], username)
            return user['score'] if user else 0

    def _delete(self, username: str) -> bool:
        with self._lock:
            if not self._find(self._store['users'], username):
                return False
            store = copy.deepcopy(self._store)
            store['users'] = [u for u in store['users'] if u['username'] != username]
            self._commit(store, 'delete user')
            return True

    def _reset_score(self, username: str) -> None:
        with self._lock:
            user = self._find(self._store['users'], username)
            if not user or user['score'] == 0:
                return
            store = copy.deepcopy(self._store)
            self._find(store['users'], username)['score'] = 0
            self._commit(store, 'reset score')

    def leaderboard(self) -> List[Tuple[str, int]]:
        with self._lock:
            ranked = sorted(self._store['users'], key=lambda u: u['score'], reverse=True)
            return [(u['username'], u['score']) for u in ranked]

    def reset_all(self) -> None:
        with self._lock:
            store = copy.deepcopy(self._store)
            for user in store['users']:
                user['score'] = 0
            self._commit(store, 'reset scores')

    def load_session(self) -> Optional[dict]:
        with self._lock:
            if not self._has_session:
                return None
            return {
                'usedNations': list(self._store['usedNations']),
                'lastLetter': self._store['lastLetter'],
            }

    def save_session(self, state: dict) -> None:
        with self._lock:
            store = copy.deepcopy(self._store)
            store['usedNations'] = list(state.get('usedNations') or [])
            store['lastLetter'] = state.get('lastLetter', '')
            self._commit(store, 'save game state')
            self._has_session = True
