"""
Chat Core

Client-side network core for a line-delimited text chat protocol.
"""

__version__ = "1.0.0"
