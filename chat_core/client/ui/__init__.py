"""
Client UI Components

Provides console rendering of chat traffic using Rich.
"""

from .display_manager import DisplayManager

__all__ = ["DisplayManager"]
