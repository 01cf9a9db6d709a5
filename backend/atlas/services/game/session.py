from typing import List, Optional


STARTING_LETTER = 'S'


class GameSession:
    """The single in-progress game: nations played so far and the letter the player owes next.

    ``used_nations`` keeps play order; a case-folded set mirrors it for lookups
    and is updated on every append.
    """

    def __init__(self, used_nations: Optional[List[str]] = None, last_letter: str = STARTING_LETTER,
                 starting_letter: str = STARTING_LETTER):
        self.starting_letter = starting_letter
        self.used_nations: List[str] = []
        self._used_keys = set()
        self.last_letter = last_letter
        for name in used_nations or []:
            self.append(name)

    def __len__(self) -> int:
        return len(self.used_nations)

    def is_used(self, name: str) -> bool:
        return name.strip().casefold() in self._used_keys

    def append(self, name: str) -> None:
        self.used_nations.append(name)
        self._used_keys.add(name.strip().casefold())

    def reset(self) -> None:
        self.used_nations = []
        self._used_keys = set()
        self.last_letter = self.starting_letter

    def restore(self, state: dict) -> None:
        self.used_nations = []
        self._used_keys = set()
        for name in state.get('usedNations') or []:
            self.append(name)
        self.last_letter = state.get('lastLetter', self.starting_letter)

    def to_dict(self) -> dict:
        return {
            'usedNations': list(self.used_nations),
            'lastLetter': self.last_letter,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict], starting_letter: str = STARTING_LETTER) -> 'GameSession':
        session = cls(starting_letter=starting_letter)
        if data:
            session.restore(data)
        return session
