"""
Utility functions for the content validator.
"""

from content_validator.utils.json_extractor import extract_json_object
from content_validator.utils.confidence import (
    agreement_confidence,
    clamp,
    mean_confidence,
    round_half_up,
    scores_agree,
)

__all__ = [
    'extract_json_object',
    'agreement_confidence',
    'clamp',
    'mean_confidence',
    'round_half_up',
    'scores_agree',
]
