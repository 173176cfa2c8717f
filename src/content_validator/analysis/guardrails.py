"""
Prompt-injection guardrails.

Two screens:
- content screening: instruction-override and score-manipulation phrases
  are replaced before the content reaches any prompt;
- response screening: a provider verdict that echoes an injected
  instruction is rejected like a malformed response; attack vocabulary
  the content itself never mentions only produces a warning.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

NEUTRALIZED_TEXT = "[Content modified for security]"
FREQUENCY_LIMITED_TEXT = "[Term frequency limited]"

# Suspicious term repeated more than this is masked
MAX_TERM_REPETITIONS = 3

_INJECTION_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"ignore\s+(all\s+)?previous\s+(prompts?|instructions?)",
        r"from\s+now\s+on\s+ignore",
        r"disregard\s+(all\s+)?previous",
        r"forget\s+(all\s+)?previous",
        r"override\s+(all\s+)?previous",
        r"new\s+instructions?:",
        r"system\s+prompt",
        r"you\s+are\s+now",
        r"act\s+as\s+if",
        r"pretend\s+to\s+be",
        r"roleplay\s+as",
        r"score\s+(100|perfect|maximum)",
        r"give\s+(me\s+)?(100|perfect|maximum)\s+score",
        r"(make\s+sure|ensure|guarantee)\s+(the\s+)?(final\s+)?output\s+scores?\s+(100|perfect)",
        r"validation\s+bypass",
        r"hack\s+the\s+system",
        r"exploit\s+the\s+validator",
        r"manipulate\s+the\s+score",
        r"trick\s+the\s+ai",
        r"jailbreak",
        r"prompt\s+injection",
        r"injection\s+attack",
    )
]

_SUSPICIOUS_TERMS = ("ignore", "disregard", "override", "score", "100", "perfect", "maximum")

_RESPONSE_ECHO_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"ignor(e|ed|ing)\s+(all\s+)?(the\s+)?(previous|prior|above)\s+(prompts?|instructions?)",
        r"disregard(ed|ing)?\s+(all\s+)?(the\s+)?(previous|prior|above)\s+(prompts?|instructions?)",
        r"as\s+(instructed|requested|directed)\s+(by|in)\s+the\s+(content|submission|document)",
        r"(told|instructed|asked)\s+to\s+(give|award|assign)\s+(a\s+)?(perfect|full|maximum|100)",
    )
]

# Attack vocabulary; legitimate when the content is about the topic itself
_RESPONSE_MARKERS = (
    "manipulated",
    "hacked",
    "exploited",
    "bypassed",
    "tricked",
    "jailbreak",
    "injection",
)


@dataclass
class ScreeningResult:
    """Outcome of screening one piece of content."""
    content: str
    warnings: List[str] = field(default_factory=list)

    @property
    def modified(self) -> bool:
        return bool(self.warnings)


def screen_content(content: str) -> ScreeningResult:
    """
    Neutralize injection phrases and mask over-repeated suspicious terms.

    Args:
        content: Preprocessed content

    Returns:
        ScreeningResult with the safe content and one warning per kind of
        modification made
    """
    warnings: List[str] = []
    sanitized = content

    hits = 0
    for pattern in _INJECTION_PATTERNS:
        sanitized, n = pattern.subn(NEUTRALIZED_TEXT, sanitized)
        hits += n
    if hits:
        warnings.append(f"Potential prompt injection neutralized ({hits} occurrence(s))")

    for term in _SUSPICIOUS_TERMS:
        regex = re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)
        if len(regex.findall(sanitized)) > MAX_TERM_REPETITIONS:
            sanitized = regex.sub(FREQUENCY_LIMITED_TEXT, sanitized)
            warnings.append(f"Excessive use of suspicious term limited: {term}")

    return ScreeningResult(content=sanitized, warnings=warnings)


def find_response_manipulation(response_text: str) -> Optional[str]:
    """
    Look for a provider echoing an injected instruction.

    Only instruction-echo phrases count. Words such as "injection" or
    "exploited" are ordinary vocabulary in security lessons and are left to
    unexplained_markers_warning().

    Args:
        response_text: Free text of the verdict's explanations and feedback

    Returns:
        Reason string when the response should be rejected, else None
    """
    for pattern in _RESPONSE_ECHO_PATTERNS:
        match = pattern.search(response_text or "")
        if match:
            return f"Response echoes an injected instruction: {match.group(0)!r}"
    return None


def unexplained_markers_warning(response_text: str, content: str) -> Optional[str]:
    """Warn about attack vocabulary in a verdict that the content never uses."""
    lowered = (response_text or "").lower()
    source = (content or "").lower()
    found = [m for m in _RESPONSE_MARKERS if m in lowered and m not in source]
    if not found:
        return None
    return f"Response mentions terms absent from the content: {', '.join(found)}"


def score_pattern_warning(scores: Dict[str, float], max_points: Dict[str, int]) -> Optional[str]:
    """
    Flag all-maximum or all-zero breakdowns.

    Such patterns are unusual for real content but not impossible, so they
    only produce a warning.
    """
    if not scores:
        return None
    if all(scores[k] >= max_points[k] for k in scores):
        return "Suspicious score pattern: every criterion at maximum"
    if all(scores[k] <= 0 for k in scores):
        return "Suspicious score pattern: every criterion at zero"
    return None
