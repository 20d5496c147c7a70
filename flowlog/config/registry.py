from enum import Enum
from typing import Dict, Iterator, Mapping, Optional

from flowlog.errors import InvalidAgentConfigError


class KeyNameElementType(str, Enum):
    """
    The four key/name tables an agent is configured with.
    """
    OPERATIONS = "operations"
    APPLICATIONS = "applications"
    ID_TYPES = "id_types"
    PAYLOAD_TYPES = "payload_types"


class KeyNameRegistry:
    """
    Mapping of configured keys to human readable names.
    """

    def __init__(self, entries: Optional[Mapping[str, str]] = None):
        self._entries: Dict[str, str] = {}
        if entries:
            self.add_entries(entries)

    def get_entry(self, key: Optional[str]) -> Optional[str]:
        if key is None:
            return None
        return self._entries.get(key)

    def add_entry(self, key: str, name: str) -> None:
        if self.entry_exists(key):
            raise InvalidAgentConfigError(reason=f"Key {key} already exists.")
        self._entries[key] = name

    def add_entries(self, entries: Mapping[str, str]) -> None:
        for key, name in entries.items():
            self.add_entry(key, name)

    def entry_exists(self, key: Optional[str]) -> bool:
        return key is not None and key in self._entries

    def name_exists(self, name: str) -> bool:
        return name in self._entries.values()

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"KeyNameRegistry({self._entries!r})"
