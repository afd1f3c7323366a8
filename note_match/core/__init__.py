"""Core components for note_match services."""

from .config import ConfigManager
from .events import EventEmitter, MatchEventType

__all__ = ["ConfigManager", "EventEmitter", "MatchEventType"]
