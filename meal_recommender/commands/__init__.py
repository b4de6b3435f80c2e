"""
Command classes for the meal recommender REPL.
"""
from .base import Command, CommandContext, CommandRegistry, register_command, get_registry

# Import all command modules to trigger registration
from . import basic_commands
from . import recommend_command
from . import feedback_command

__all__ = [
    'Command',
    'CommandContext',
    'CommandRegistry',
    'register_command',
    'get_registry',
]
