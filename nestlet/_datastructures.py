"""
Core data structures for request handling.

Provides:
- MultiDict: Multi-value dictionary for query parameters
- Headers: Case-insensitive header access over raw ASGI headers
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple
from urllib.parse import parse_qsl


# ============================================================================
# MultiDict
# ============================================================================

class MultiDict:
    """
    Dictionary that supports multiple values per key.

    Keys keep first-insertion order; ``get`` returns the first value.
    """

    def __init__(self, items: Optional[List[Tuple[str, str]]] = None):
        self._data: Dict[str, List[str]] = {}
        for key, value in items or []:
            self.add(key, value)

    @classmethod
    def from_query_string(cls, query_string: str) -> "MultiDict":
        return cls(parse_qsl(query_string, keep_blank_values=True))

    def add(self, key: str, value: str) -> None:
        self._data.setdefault(key, []).append(value)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        values = self._data.get(key)
        return values[0] if values else default

    def get_all(self, key: str) -> List[str]:
        return list(self._data.get(key, []))

    def to_dict(self) -> Dict[str, str]:
        """First value per key."""
        return {k: v[0] for k, v in self._data.items() if v}

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"MultiDict({self._data})"


# ============================================================================
# Headers
# ============================================================================

class Headers:
    """
    Case-insensitive view over raw ASGI ``(bytes, bytes)`` header pairs.
    """

    __slots__ = ("raw", "_index")

    def __init__(self, raw: Optional[List[Tuple[bytes, bytes]]] = None):
        self.raw = list(raw or [])
        self._index: Dict[str, List[str]] = {}
        for name, value in self.raw:
            key = name.decode("latin-1").lower()
            self._index.setdefault(key, []).append(value.decode("latin-1"))

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        values = self._index.get(name.lower())
        return values[0] if values else default

    def get_all(self, name: str) -> List[str]:
        return list(self._index.get(name.lower(), []))

    def to_dict(self) -> Dict[str, str]:
        """Lower-cased names; repeated headers joined with ``", "``."""
        return {name: ", ".join(values) for name, values in self._index.items()}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._index

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(f"Header '{name}' not found")
        return value

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __repr__(self) -> str:
        return f"Headers({self.to_dict()})"
