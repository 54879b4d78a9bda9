import json
from typing import Any, Dict


class PropertyStore:
    """
    A container storing extra information managed as key/value pairs.

    Values are serialized to JSON when stored and deserialized when loaded, so
    the store never holds references to caller objects. It is the responsibility
    of the user to correctly interpret the value.
    """

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def contains_key(self, key: str) -> bool:
        """Return True if the store contains a value for `key`."""
        return key in self._data

    def store(self, key: str, value: Any) -> None:
        """Store `value` associated with `key`, replacing any previous value."""
        self._data[key] = json.dumps(value)

    def load(self, key: str) -> Any:
        """Retrieve the value associated with `key`."""
        if key not in self._data:
            raise KeyError(f"Failed to get property with key {key!r}")
        return json.loads(self._data[key])

    def take(self, key: str) -> Any:
        """Retrieve the value associated with `key` and remove it from the store."""
        value = self.load(key)
        del self._data[key]
        return value

    def discard(self, key: str) -> None:
        """Discard the value associated with `key`, if any."""
        self._data.pop(key, None)

    def keys(self):
        return self._data.keys()

    def __contains__(self, key: str) -> bool:
        return self.contains_key(key)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"PropertyStore({sorted(self._data)})"
