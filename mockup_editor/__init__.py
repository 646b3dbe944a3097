"""Mockup placement editor — design layers on product color/view mockups."""

from mockup_editor.constants import APP_VERSION

__version__ = APP_VERSION
