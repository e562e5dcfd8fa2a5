"""logic — Game systems package.

Top-level modules
-----------------
tick            — per-frame system orchestrator (+ input & proximity systems)
runtime         — one-time map setup (grid, gate, solids, spawn, zones)
movement        — physics / collision
gate            — walkable-tile movement gate
spawn           — player spawn point resolution
zones           — trigger zone extraction from object layers
proximity       — nearest-zone tracker with enter/exit edges
trigger_ui      — interact prompt controller
input_manager   — raw input → intent mapping
"""
