"""Qt presentation layer."""
from .tray import TrayApp
from .popup import TotemPopup

__all__ = ['TrayApp', 'TotemPopup']
