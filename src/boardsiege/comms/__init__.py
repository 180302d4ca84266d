"""Outbound notification plumbing between the simulation and its views."""
from .event_bus import EventBus

__all__ = ["EventBus"]
