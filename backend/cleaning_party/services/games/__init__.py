"""Game domain services: task catalog, engine, scoring and round timing.

This package contains the session rules that HTTP routes call into, keeping
transport concerns separated from core game mechanics.
"""

from .engine import GameEngine, game_key, LAST_WRITE_WINS, COMPARE_AND_SWAP  # noqa: F401
