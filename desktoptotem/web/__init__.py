"""Local JSON API over the usage tracker."""
from .server import create_app, find_free_port, start_server

__all__ = ['create_app', 'find_free_port', 'start_server']
