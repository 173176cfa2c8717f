"""
Score combination.
"""

from content_validator.grading.combiner import CombinedScores, ScoreCombiner

__all__ = ['CombinedScores', 'ScoreCombiner']
