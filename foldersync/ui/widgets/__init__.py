"""
Output widgets.

Usage:
    from foldersync.ui.widgets import display
    display.copying(name, path, reason)
"""

from . import sync_display as display

__all__ = ["display"]
