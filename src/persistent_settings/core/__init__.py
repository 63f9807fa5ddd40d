"""Core modules for persistent settings."""

from .events import EventBus, Event, EventType

__all__ = ["EventBus", "Event", "EventType"]
