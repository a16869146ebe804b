"""
Terminal output for Folder Sync.

All formatted, user-visible lines are printed by ui.widgets.sync_display.
"""

from .widgets import display

__all__ = ["display"]
