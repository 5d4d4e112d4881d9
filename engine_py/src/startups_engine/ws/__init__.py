"""
WebSocket server and event handling for the Startups game.
"""

from .events import *
from .server import app, store

__all__ = ["app", "store"]
