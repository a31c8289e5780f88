"""
Chat Client Package

Provides the client network core and a console front end.
"""

from .network import Connection, ConnectionConfig

__all__ = ["Connection", "ConnectionConfig"]
