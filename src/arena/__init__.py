"""Debate arena: claims, contradiction matching, turn-based debates and a leaderboard.

Packages:
    arena.core     Domain models and operations
    arena.storage  Memory and Redis store backends
    arena.server   Starlette REST API
"""

__version__ = "0.1.0"
