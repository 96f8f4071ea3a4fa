"""Content change tracking built on the task scheduler."""

from .content_tracker import ContentChangeTracker, TrackingHandle, track_content_changes

__all__ = [
    "ContentChangeTracker",
    "TrackingHandle",
    "track_content_changes",
]
