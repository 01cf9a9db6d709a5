import json
import logging
from contextlib import contextmanager
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from atlas import db
from atlas.models import Player, GameState
from .base import PersistenceError, PlayerNotFoundError, ScoreLedger, SessionStore


logger = logging.getLogger(__name__)

SESSION_ID = 1


@contextmanager
def _transaction(action: str):
    """Roll back and report as PersistenceError if the database fails mid-operation."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error(f"[sql] failed to {action}: {exc}")
        raise PersistenceError(f"Failed to {action} due to a database error.") from exc


class SqlScoreLedger(ScoreLedger):
    """Scores in the ``player`` table. Each operation commits before returning."""

    def _register(self, username: str) -> bool:
        with _transaction('add user'):
            if Player.query.filter_by(username=username).first():
                return False
            db.session.add(Player(username=username, score=0))
            try:
                db.session.commit()
            except IntegrityError:
                # Registered concurrently by another request
                db.session.rollback()
                return False
        return True

    def _record_score(self, username: str, score: int) -> int:
        with _transaction('save score'):
            player = Player.query.filter_by(username=username).first()
            if not player:
                raise PlayerNotFoundError(f"User '{username}' not found.")
            # Conditional update keeps the max-update atomic in the database
            Player.query.filter(Player.id == player.id, Player.score < score).update(
                {Player.score: score}, synchronize_session=False
            )
            db.session.commit()
            return player.score

    def _get_score(self, username: str) -> int:
        with _transaction('fetch score'):
            player = Player.query.filter_by(username=username).first()
            return player.score if player else 0

    def _delete(self, username: str) -> bool:
        with _transaction('delete user'):
            deleted = Player.query.filter_by(username=username).delete()
            db.session.commit()
        return deleted > 0

    def _reset_score(self, username: str) -> None:
        with _transaction('reset score'):
            Player.query.filter_by(username=username).update({Player.score: 0})
            db.session.commit()

    def leaderboard(self) -> List[Tuple[str, int]]:
        with _transaction('fetch scores'):
            players = Player.query.order_by(Player.score.desc(), Player.id.asc()).all()
            return [(p.username, p.score) for p in players]

    def reset_all(self) -> None:
        with _transaction('reset scores'):
            Player.query.update({Player.score: 0})
            db.session.commit()


class SqlSessionStore(SessionStore):
    def load_session(self) -> Optional[dict]:
        with _transaction('load game state'):
            state = GameState.query.filter_by(id=SESSION_ID).first()
        if not state:
            return None
        try:
            data = state.to_dict()
        except ValueError as exc:
            logger.error(f"[sql] game_state.used_nations is not valid JSON: {exc}")
            raise PersistenceError('Saved game state is corrupt.') from exc
        used = data['usedNations']
        if not isinstance(used, list) or not all(isinstance(n, str) and n.strip() for n in used):
            raise PersistenceError('Saved game state has a malformed nation list.')
        return data

    def save_session(self, state: dict) -> None:
        with _transaction('save game state'):
            row = GameState.query.filter_by(id=SESSION_ID).first()
            if not row:
                row = GameState(id=SESSION_ID)
            row.used_nations = json.dumps(list(state.get('usedNations') or []))
            row.last_letter = state.get('lastLetter') or ''
            db.session.add(row)
            db.session.commit()
