"""core package initialization.

Making `core` an explicit package so imports like `import core.grid`
work reliably when running `main.py` from the project root.
"""

__all__ = [
    "app", "collision", "constants", "diag", "ecs", "events", "grid",
    "layers", "nbt", "scene", "tilemap", "tuning",
]
