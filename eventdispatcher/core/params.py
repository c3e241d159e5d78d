"""
Conteneur de paramètres passé avec un événement.
Clés texte, valeurs de type quelconque, lecture typée avec valeur par défaut.
"""

import logging
from typing import Any, Dict, Iterator, Mapping, Optional, Type, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ParamList:
    """
    Sac de paramètres hétérogène, ordonné par insertion.

    Exemple:
        params = ParamList("points", 10).set("combo", True)
        points = params.get("points", int, 0)
    """

    def __init__(self, entries: Union[str, Mapping[str, Any], "ParamList", None] = None,
                 value: Any = None):
        """
        Args:
            entries: None (sac vide), une clé (utilisée avec value),
                     ou un mapping / ParamList à copier
            value: Valeur associée quand entries est une clé
        """
        self._entries: Dict[str, Any] = {}

        if entries is None:
            return

        if isinstance(entries, ParamList):
            entries = entries.to_dict()

        if isinstance(entries, Mapping):
            for key, item in entries.items():
                self.set(key, item)
        else:
            self.set(entries, value)

    def set(self, key: str, value: Any) -> "ParamList":
        """
        Ajoute ou remplace une entrée.

        Une clé vide est refusée (warning, aucune insertion).

        Returns:
            Le ParamList lui-même, pour chaîner les appels
        """
        if not isinstance(key, str) or not key:
            logger.warning(f"Key cannot be null or empty in ParamList (got {key!r}), entry ignored")
            return self

        self._entries[key] = value
        return self

    def get(self, key: str, value_type: Type[T], default: Optional[T] = None) -> Optional[T]:
        """
        Récupère une valeur en vérifiant son type exact.

        Aucune conversion: un int stocké demandé en float retourne default.

        Args:
            key: Clé cherchée
            value_type: Type attendu
            default: Valeur retournée si la clé manque ou si le type diffère

        Returns:
            Valeur stockée ou default
        """
        if key in self._entries:
            value = self._entries[key]
            if type(value) is value_type:
                return value

        logger.warning(f"Key '{key}' not found in ParamList or value is not of type {value_type.__name__}")
        return default

    def has(self, key: str) -> bool:
        return key in self._entries

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self):
        return self._entries.keys()

    def values(self):
        return self._entries.values()

    def items(self):
        return self._entries.items()

    def to_dict(self) -> Dict[str, Any]:
        """Retourne une copie des entrées."""
        return dict(self._entries)

    def __getitem__(self, key: str) -> Any:
        return self._entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __str__(self) -> str:
        parts = [f"{key}: {value}" for key, value in self._entries.items()]
        return f"ParamList {{ {', '.join(parts)} }}"

    __repr__ = __str__
