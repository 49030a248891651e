"""Storyboard project state: entity model, ordering, undo history and persistence."""
from storyboard.config import settings

__version__ = settings.app_version
