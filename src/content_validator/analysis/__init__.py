"""
Content analysis: preprocessing and prompt-injection guardrails.
"""

from content_validator.analysis.preprocessing import (
    preprocess_content,
    validate_content_structure,
    extract_topic_from_content,
)
from content_validator.analysis.guardrails import (
    screen_content,
    find_response_manipulation,
    score_pattern_warning,
    unexplained_markers_warning,
)

__all__ = [
    'preprocess_content',
    'validate_content_structure',
    'extract_topic_from_content',
    'screen_content',
    'find_response_manipulation',
    'score_pattern_warning',
    'unexplained_markers_warning',
]
