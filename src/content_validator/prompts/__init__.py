"""
Prompt templates and rendering.
"""

from content_validator.prompts.builder import (
    render,
    build_template_variables,
    build_validation_prompt,
    build_cross_validation_prompt,
)
from content_validator.prompts.templates import SYSTEM_MESSAGE, get_default_template

__all__ = [
    'render',
    'build_template_variables',
    'build_validation_prompt',
    'build_cross_validation_prompt',
    'SYSTEM_MESSAGE',
    'get_default_template',
]
