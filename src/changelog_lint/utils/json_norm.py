"""Canonical JSON serialization: single dump path for all CLI output.

Guarantees:
  - Stable key ordering (``sort_keys=True``)
  - Trailing newline at EOF
  - ``Path`` objects → POSIX strings
  - Model values → their ``to_dict()`` form
  - Enums → values, dates → ISO-8601 strings
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import IO, Any, Mapping


def _to_builtin(obj: Any) -> Any:
    """Convert common non-JSON types into JSON-safe builtins."""
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return _to_builtin(obj.value)
    if isinstance(obj, (str, int, bool, float)):
        return obj
    if isinstance(obj, Path):
        return obj.as_posix()
    if isinstance(obj, date):
        return obj.isoformat()
    if hasattr(obj, "to_dict"):
        return _to_builtin(obj.to_dict())
    if is_dataclass(obj) and not isinstance(obj, type):
        return _to_builtin(asdict(obj))
    if isinstance(obj, Mapping):
        return {str(_to_builtin(k)): _to_builtin(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_to_builtin(v) for v in obj]
    # Fall back to string (keeps CLI resilient)
    return str(obj)


def stable_json_dumps(obj: Any, *, indent: int | None = 2) -> str:
    built = _to_builtin(obj)
    s = json.dumps(built, indent=indent, sort_keys=True, ensure_ascii=False)
    return s + "\n"


def stable_json_dump(obj: Any, fp: IO[str], *, indent: int | None = 2) -> None:
    fp.write(stable_json_dumps(obj, indent=indent))
