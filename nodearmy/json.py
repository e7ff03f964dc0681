import dataclasses
from typing import Any, Dict
from enum import Enum

# Recursive JSON-safe serialiser ------------------------------------

class JSONable:
    def _to_jsonable(self, obj: Any) -> Any:  # noqa: ANN401 – generic helper
        """Return *obj* converted into JSON-serialisable structures.

        • dataclasses → dict (recursively processed)
        • Enum → its value
        • list / tuple / dict processed recursively
        • everything else returned unchanged.
        """

        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return {k: self._to_jsonable(v) for k, v in dataclasses.asdict(obj).items()}

        if isinstance(obj, dict):
            return {self._key(k): self._to_jsonable(v) for k, v in obj.items()}

        if isinstance(obj, (list, tuple)):
            return [self._to_jsonable(v) for v in obj]

        if isinstance(obj, Enum):
            return obj.value

        return obj

    @staticmethod
    def _key(key: Any) -> Any:  # noqa: ANN401
        """JSON object keys must be strings; enums collapse to their value."""
        if isinstance(key, Enum):
            key = key.value
        return key if isinstance(key, str) else str(key)

    def to_dict(self) -> Dict[str, Any]:
        """Return this object as a JSON-safe dictionary."""
        return self._to_jsonable(self)
