"""
Shared Components

Models, constants, exceptions and configuration used by the chat core.
"""
