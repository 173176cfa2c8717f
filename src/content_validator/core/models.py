"""
Core data models for the content validator.

This module defines all Pydantic models used throughout the system.
Every model is frozen: a validation request builds them once and hands
them to the caller, who is responsible for persisting the result.

Serialised field names are camelCase so the outbound JSON matches the
provider wire contract (overallScore, scoreBreakdown, ...).
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

from content_validator.core.exceptions import ContractViolationError


class ContentType(str, Enum):
    """Kinds of educational content, each with its own rubric."""
    PRE_READ = "PRE_READ"
    ASSIGNMENT = "ASSIGNMENT"
    LECTURE_NOTE = "LECTURE_NOTE"


class Difficulty(str, Enum):
    """Target difficulty of an assignment."""
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class ProviderId(str, Enum):
    """Identifiers of scoring sources."""
    OPENAI = "OPENAI"
    GEMINI = "GEMINI"
    OPENROUTER = "OPENROUTER"
    LOCAL = "LOCAL"  # deterministic stub, never a genuine verdict


class _Frozen(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ==================== Request Models ====================

class AssignmentContext(_Frozen):
    """
    Task data supplied by the caller alongside the content.

    The model itself only checks types. Structural requirements are
    enforced by check_contract(), which the engine calls before it
    contacts any provider.
    """
    topic: str
    topics_taught_so_far: List[str] = Field(default_factory=list)
    content_type: ContentType = ContentType.LECTURE_NOTE
    difficulty: Optional[Difficulty] = None

    def check_contract(self) -> None:
        """
        Reject contexts the engine cannot score.

        Raises:
            ContractViolationError: On an empty topic, an empty
                prerequisite list, or an ASSIGNMENT without difficulty
        """
        problems = []
        if not self.topic or not self.topic.strip():
            problems.append("topic must be a non-empty string")
        if not [t for t in self.topics_taught_so_far if t and t.strip()]:
            problems.append("topicsTaughtSoFar must contain at least one topic")
        if self.content_type == ContentType.ASSIGNMENT and self.difficulty is None:
            problems.append("difficulty is required when contentType is ASSIGNMENT")

        if problems:
            raise ContractViolationError(
                "Invalid AssignmentContext",
                details={"problems": problems, "contentType": self.content_type.value},
            )


# ==================== Rubric Models ====================

class RubricCriterion(_Frozen):
    """A single scoring criterion: wire key, label, ceiling and description."""
    key: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    max_points: int = Field(..., gt=0, le=100)
    description: str = ""


class RubricSpec(_Frozen):
    """
    The ordered, weighted criteria for one content type.

    Criterion ceilings always sum to 100, so the combined overall score is
    a plain sum of criterion scores.
    """
    content_type: ContentType
    title: str
    criteria: tuple[RubricCriterion, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_weights(self) -> "RubricSpec":
        """Ensure unique keys and a 100-point total."""
        keys = [c.key for c in self.criteria]
        if len(keys) != len(set(keys)):
            raise ValueError(f"Duplicate criterion keys in rubric {self.title!r}")
        total = sum(c.max_points for c in self.criteria)
        if total != 100:
            raise ValueError(f"Rubric {self.title!r} criteria sum to {total}, expected 100")
        return self

    @property
    def keys(self) -> List[str]:
        return [c.key for c in self.criteria]

    def criterion(self, key: str) -> RubricCriterion:
        """Look up a criterion by its wire key."""
        for c in self.criteria:
            if c.key == key:
                return c
        raise KeyError(key)


# ==================== Provider Output ====================

class CriterionScore(_Frozen):
    """One provider's score and explanation for one criterion."""
    score: float = Field(..., ge=0)
    explanation: str = ""


class DetailedFeedback(_Frozen):
    """Free-text feedback block of the wire contract."""
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    suggestion: str = ""


class ValidationOutput(_Frozen):
    """
    A provider's verdict for one round, already checked against the rubric.

    overall_score is recomputed from the breakdown by the parser; the
    validator below keeps the two from drifting apart.
    """
    provider: ProviderId
    overall_score: float = Field(..., ge=0, le=100)
    score_breakdown: Dict[str, CriterionScore]
    detailed_feedback: DetailedFeedback = Field(default_factory=DetailedFeedback)
    is_stub: bool = False
    warnings: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_overall(self) -> "ValidationOutput":
        """overall_score must equal the sum of criterion scores."""
        total = sum(c.score for c in self.score_breakdown.values())
        if abs(total - self.overall_score) > 0.01:
            raise ValueError(
                f"overallScore ({self.overall_score}) does not equal the sum of "
                f"criterion scores ({total})"
            )
        return self

    @property
    def strengths(self) -> List[str]:
        return self.detailed_feedback.strengths

    @property
    def weaknesses(self) -> List[str]:
        return self.detailed_feedback.weaknesses

    @property
    def suggestion(self) -> str:
        return self.detailed_feedback.suggestion

    def to_wire(self) -> Dict:
        """Render in the exact shape providers are asked to return."""
        return {
            "overallScore": self.overall_score,
            "scoreBreakdown": {
                key: {"score": c.score, "explanation": c.explanation}
                for key, c in self.score_breakdown.items()
            },
            "detailedFeedback": {
                "strengths": list(self.strengths),
                "weaknesses": list(self.weaknesses),
                "suggestion": self.suggestion,
            },
        }


# ==================== Preprocessing ====================

class ContentMetadata(_Frozen):
    """Structural facts about a piece of content."""
    original_length: int = 0
    cleaned_length: int = 0
    has_code_blocks: bool = False
    has_headers: bool = False
    has_lists: bool = False


class StructureReport(_Frozen):
    """Blocking issues and advisory suggestions about content structure."""
    is_valid: bool = True
    issues: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class PreprocessResult(_Frozen):
    """Output of the content preprocessor."""
    cleaned_content: str
    warnings: List[str] = Field(default_factory=list)
    metadata: ContentMetadata = Field(default_factory=ContentMetadata)
    structure: StructureReport = Field(default_factory=StructureReport)


# ==================== Result Models ====================

class RoundResults(_Frozen):
    """Both providers' verdicts for one round, keyed by slot."""
    provider_a: ValidationOutput
    provider_b: ValidationOutput


class CombinedCriterion(_Frozen):
    """Final score for one criterion after reconciling both providers."""
    score: int = Field(..., ge=0)
    max_points: int
    confidence: float = Field(..., ge=0.0, le=1.0)
    feedback: str = ""
    issues: List[str] = Field(default_factory=list)


class ProviderAudit(_Frozen):
    """How one provider call was resolved."""
    slot: str
    round: int
    provider: ProviderId
    genuine: bool
    attempts: int = 0
    duration_ms: float = 0.0
    error_kind: Optional[str] = None
    error: Optional[str] = None
    prompt_tokens: int = 0
    completion_tokens: int = 0

class DualValidationResult(_Frozen):
    """
    Final output of one validation request.

    Inspect `providers` to tell a dual-model result from a degraded one:
    two entries, one entry (one genuine model plus a stub) or none.
    """
    content_type: ContentType
    round1_results: RoundResults
    round2_results: RoundResults
    final_score: Dict[str, CombinedCriterion]
    final_feedback: Dict[str, str]
    overall_score: int = Field(..., ge=0, le=100)
    overall_confidence: float = Field(..., ge=0.0, le=1.0)
    providers: List[ProviderId] = Field(default_factory=list)
    processing_time_ms: int = Field(..., ge=0)
    preprocessing: Optional[PreprocessResult] = None
    audit: List[ProviderAudit] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def degraded(self) -> bool:
        """True when either Round-2 verdict came from the stub."""
        return self.round2_results.provider_a.is_stub or self.round2_results.provider_b.is_stub

    @property
    def total_tokens(self) -> int:
        """Tokens spent across all provider calls of this request."""
        return sum(a.prompt_tokens + a.completion_tokens for a in self.audit)
