import json
import logging
import os
from typing import Dict, Iterable, List, Optional


logger = logging.getLogger(__name__)

DEFAULT_NATIONS_FILE = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), 'data', 'nations.json')


class CatalogLoadError(Exception):
    """The nation source could not be turned into a catalog."""


class NationCatalog:
    """Immutable, case-insensitive set of nation names.

    Lookups take any casing; results always use the spelling from the source.
    """

    def __init__(self, names: Iterable[str]):
        by_key: Dict[str, str] = {}
        for name in names:
            by_key.setdefault(name.strip().casefold(), name.strip())
        self._by_key = by_key
        self._by_letter: Dict[str, tuple] = {}
        for key in sorted(by_key):
            self._by_letter.setdefault(key[0], ())
            self._by_letter[key[0]] += (by_key[key],)

    @classmethod
    def load(cls, path: Optional[str] = None) -> 'NationCatalog':
        """Load a catalog from a JSON array of names. Any defect is fatal."""
        path = path or DEFAULT_NATIONS_FILE
        logger.info(f"[catalog] loading nations from {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except (OSError, ValueError) as exc:
            raise CatalogLoadError(f"Cannot read nation catalog {path}: {exc}") from exc
        if not isinstance(raw, list):
            raise CatalogLoadError(f"Nation catalog {path} must be a JSON array")
        for idx, name in enumerate(raw):
            if not isinstance(name, str) or not name.strip():
                raise CatalogLoadError(f"Nation catalog {path} has an invalid entry at index {idx}: {name!r}")
        if not raw:
            raise CatalogLoadError(f"Nation catalog {path} is empty")
        catalog = cls(raw)
        logger.info(f"[catalog] loaded {len(catalog)} nations")
        return catalog

    def __len__(self) -> int:
        return len(self._by_key)

    def __iter__(self):
        return iter(sorted(self._by_key.values(), key=str.casefold))

    def __contains__(self, name) -> bool:
        return isinstance(name, str) and self.contains(name)

    def contains(self, name: str) -> bool:
        return name.strip().casefold() in self._by_key

    def canonical(self, name: str) -> Optional[str]:
        return self._by_key.get(name.strip().casefold())

    def starting_with(self, letter: str) -> List[str]:
        """Nations whose first character matches ``letter``, in stable order."""
        if not letter:
            return []
        return list(self._by_letter.get(letter[0].casefold(), ()))
