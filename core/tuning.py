"""core/tuning.py — Map, movement and trigger tuning.

Everything a level designer may want to nudge without touching code
lives in ``data/tuning.toml``: which layer is the road, the spawn
marker, the proximity radius, prompt text, camera zoom.  Every key has
a code default in ``core/constants.py``, so a missing file or table
just means "use the defaults".

    from core import tuning
    tuning.load()
    speed = tuning.get("movement", "speed", 150.0)
    road = tuning.section("layers.road")      # {} when absent

F5 in the explore scene calls ``load()`` again, so edits apply live.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib                # pip install tomli

TOMLDecodeError = tomllib.TOMLDecodeError

DEFAULT_PATH = Path(__file__).resolve().parent.parent / "data" / "tuning.toml"

_data: dict[str, Any] = {}
_path: Path | None = None


def load(path: str | Path | None = None) -> None:
    """Read *path* (default ``data/tuning.toml``), replacing any table
    loaded before.  A missing file leaves every lookup on its default;
    a file that isn't valid TOML raises ``tomllib.TOMLDecodeError``.
    """
    global _data, _path
    _path = Path(path) if path is not None else DEFAULT_PATH

    if not _path.exists():
        print(f"[TUNING] {_path} not found, using defaults")
        _data = {}
        return

    with open(_path, "rb") as f:
        _data = tomllib.load(f)
    print(f"[TUNING] {_count_leaves(_data)} values from {_path.name}")


def load_dict(data: dict) -> None:
    """Use *data* as the tuning table (tests, tools)."""
    global _data, _path
    _data = dict(data)
    _path = None


def source() -> Path | None:
    """File the current table came from (``None`` after ``load_dict``)."""
    return _path


def _table(dotted: str) -> dict | None:
    node: Any = _data
    for part in dotted.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    return node if isinstance(node, dict) else None


def get(section: str, key: str, default=None):
    """Value of *key* in table *section*, or *default*.

    Dotted sections reach nested tables: ``get("layers.road",
    "depth")`` reads ``[layers.road] depth``.
    """
    table = _table(section)
    if table is None:
        return default
    return table.get(key, default)


def section(section_path: str) -> dict:
    """Shallow copy of a whole table; ``{}`` when it isn't there."""
    table = _table(section_path)
    return dict(table) if table is not None else {}


def _count_leaves(d: dict) -> int:
    return sum(_count_leaves(v) if isinstance(v, dict) else 1 for v in d.values())
