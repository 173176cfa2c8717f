"""
Terminal rendering.
"""

from content_validator.interaction.cli import CLI, Colors

__all__ = ['CLI', 'Colors']
