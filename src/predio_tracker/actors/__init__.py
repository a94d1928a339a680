"""Login-style sessions and the per-actor directory built from them.

Sessions only feed "last seen" reporting; they never gate access.
"""

from .directory import ActorDirectory, SessionLog, normalize_sections

__all__ = ["ActorDirectory", "SessionLog", "normalize_sections"]
