"""
Stacker Package
===============

This package contains the core stacking simulation, alignment engine,
scoring, and the collaborators built on top of it:

- Block oscillation and drop resolution
- Speed progression and miss detection
- Session lifecycle and snapshots
- Gymnasium environment and replay recording

All tunable parameters are in game_config.yaml.
"""
