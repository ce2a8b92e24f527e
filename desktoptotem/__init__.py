"""Desktop Totem: a tray companion that ranks the applications you actually use."""

__version__ = "1.0.0"
