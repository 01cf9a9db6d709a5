from atlas import db
import json


class Player(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    score = db.Column(db.Integer, default=0, nullable=False)

    def to_dict(self):
        return {
            'username': self.username,
            'score': self.score,
        }


class GameState(db.Model):
    """Persisted copy of the game session. One row per session; the server plays a single one."""
    __tablename__ = 'game_state'
    id = db.Column(db.Integer, primary_key=True)
    used_nations = db.Column(db.Text, nullable=False, default='[]')  # JSON-encoded list of names in play order
    last_letter = db.Column(db.String(1), nullable=False, default='S')

    def to_dict(self):
        return {
            'usedNations': json.loads(self.used_nations) if self.used_nations else [],
            'lastLetter': self.last_letter,
        }
