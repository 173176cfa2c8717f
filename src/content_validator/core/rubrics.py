"""
Rubric definitions per content type.

Each content type maps to one RubricSpec. The rest of the system is written
against a RubricSpec, so a new content type only needs a new entry here
(and a default template in prompts.templates).
"""

from typing import Dict

from content_validator.core.models import ContentType, RubricCriterion, RubricSpec


def _c(key: str, name: str, max_points: int, description: str) -> RubricCriterion:
    return RubricCriterion(key=key, name=name, max_points=max_points, description=description)


ASSIGNMENT_RUBRIC = RubricSpec(
    content_type=ContentType.ASSIGNMENT,
    title="Assignment",
    criteria=(
        _c("grammarSpelling", "Grammar and Spelling", 10,
           "Check for grammatical errors, spelling mistakes, and language clarity."),
        _c("topicRelevance", "Topic Relevance", 15,
           "Assess how well the assignment aligns with the specified topic and learning objectives."),
        _c("difficultyDistribution", "Difficulty Distribution", 20,
           "Evaluate if the assignment has appropriate difficulty levels "
           "(30% easy, 50% medium, 20% hard questions)."),
        _c("progressiveDifficulty", "Progressive Difficulty", 15,
           "Check if questions progress from basic to advanced concepts logically."),
        _c("creativityEngagement", "Creativity and Engagement", 15,
           "Assess the use of creative elements, real-world applications, and student engagement factors."),
        _c("claritySpecificity", "Clarity and Specificity", 15,
           "Evaluate how clear and specific the instructions and questions are."),
        _c("factualCorrectness", "Factual Correctness", 10,
           "Verify the accuracy of information and concepts presented."),
    ),
)

LECTURE_NOTE_RUBRIC = RubricSpec(
    content_type=ContentType.LECTURE_NOTE,
    title="Lecture Note",
    criteria=(
        _c("contentStructure", "Content Structure and Organization", 20,
           "Assess logical flow, clear headings, and well-organized sections."),
        _c("topicCoverage", "Topic Coverage and Depth", 20,
           "Evaluate comprehensiveness and appropriate depth for the target audience."),
        _c("clarityReadability", "Clarity and Readability", 15,
           "Check language clarity, sentence structure, and readability."),
        _c("examplesIllustrations", "Examples and Illustrations", 15,
           "Assess quality and relevance of examples, diagrams, or case studies."),
        _c("learningObjectives", "Learning Objectives Alignment", 15,
           "Evaluate how well content aligns with stated or implied learning goals."),
        _c("engagementInteractivity", "Engagement and Interactivity", 10,
           "Check for elements that promote active learning and student engagement."),
        _c("accuracyCurrency", "Accuracy and Currency", 5,
           "Verify factual accuracy and relevance of information."),
    ),
)

PRE_READ_RUBRIC = RubricSpec(
    content_type=ContentType.PRE_READ,
    title="Pre-Read",
    criteria=(
        _c("relevanceUpcoming", "Relevance to Upcoming Content", 15,
           "Assess how well the material prepares students for future lessons."),
        _c("accessibilityReadability", "Accessibility and Readability", 15,
           "Evaluate language level, clarity, and ease of understanding."),
        _c("contentAccuracy", "Content Accuracy", 15,
           "Verify factual correctness and reliability of information."),
        _c("engagementFactor", "Engagement Factor", 15,
           "Assess how interesting and motivating the content is for students."),
        _c("lengthScope", "Appropriate Length and Scope", 15,
           "Evaluate if the content length is suitable for pre-reading."),
        _c("learningOutcomes", "Clear Learning Outcomes", 10,
           "Check if students will understand what they should learn."),
        _c("sourceQuality", "Source Quality and Citations", 10,
           "Assess credibility of sources and proper attribution."),
        _c("practicalApplication", "Practical Application", 5,
           "Evaluate connections to real-world applications or examples."),
    ),
)

RUBRICS: Dict[ContentType, RubricSpec] = {
    ContentType.ASSIGNMENT: ASSIGNMENT_RUBRIC,
    ContentType.LECTURE_NOTE: LECTURE_NOTE_RUBRIC,
    ContentType.PRE_READ: PRE_READ_RUBRIC,
}


def get_rubric(content_type) -> RubricSpec:
    """
    Get the rubric for a content type.

    Args:
        content_type: ContentType or its string value (case-insensitive,
            "-" accepted for "_")

    Returns:
        The matching RubricSpec

    Raises:
        ValueError: If the content type is unknown
    """
    if not isinstance(content_type, ContentType):
        content_type = ContentType(str(content_type).strip().upper().replace("-", "_"))
    return RUBRICS[content_type]
