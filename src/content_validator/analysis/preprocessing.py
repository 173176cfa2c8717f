"""
Content preprocessing.

Normalizes raw markdown/text before it is placed in a prompt and reports
structural problems as advisory warnings. Nothing here blocks a
validation: worst case the content goes through minimally cleaned with
warnings describing what could not be verified.
"""

import re
from typing import List

from content_validator.config.constants import LONG_CONTENT_CHARS, SHORT_CONTENT_CHARS
from content_validator.core.models import ContentMetadata, PreprocessResult, StructureReport

# ==================== PATTERNS ====================

_FENCE = "```"
_TRAILING_WS = re.compile(r"[ \t]+$", re.MULTILINE)
_BLANK_RUN = re.compile(r"\n{3,}")
_HEADER = re.compile(r"^#+\s", re.MULTILINE)
_HEADER_TEXT = re.compile(r"^#+\s*(.+)$", re.MULTILINE)
_BULLET = re.compile(r"^[ \t]*[-*+][ \t]", re.MULTILINE)
_NUMBERED = re.compile(r"^[ \t]*\d+\.\s", re.MULTILINE)
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_CODE_WORDS = re.compile(r"\b(function|class|import|const|let|var|def)\b", re.IGNORECASE)
_TITLE_PREFIX = re.compile(r"^(LECTURE NOTE|ASSIGNMENT|PRE-READ):\s*", re.IGNORECASE)
_SENTENCE_END = re.compile(r"[.!?]")


def _count_italic_markers(text: str) -> int:
    """Count single '*' emphasis markers, ignoring bold pairs and list bullets."""
    without_bullets = _BULLET.sub("", text)
    without_bold = without_bullets.replace("**", "")
    return without_bold.count("*")


def preprocess_content(raw: str) -> PreprocessResult:
    """
    Normalize content and collect advisory warnings.

    Line endings become "\\n", trailing whitespace is stripped per line,
    runs of blank lines collapse to one, and the whole text is trimmed.
    An odd number of code fences gets a closing fence appended.

    Args:
        raw: Content as submitted by the author

    Returns:
        PreprocessResult with cleaned content, warnings, metadata and a
        structure report
    """
    raw = raw or ""
    warnings: List[str] = []

    cleaned = raw.replace("\r\n", "\n").replace("\r", "\n")
    cleaned = _TRAILING_WS.sub("", cleaned)
    cleaned = _BLANK_RUN.sub("\n\n", cleaned)
    cleaned = cleaned.strip()

    if cleaned.count(_FENCE) % 2 != 0:
        warnings.append("Unclosed code blocks detected")
        cleaned += "\n" + _FENCE

    if cleaned.count("**") % 2 != 0:
        warnings.append("Unclosed bold formatting detected")

    if _count_italic_markers(cleaned) % 2 != 0:
        warnings.append("Unclosed italic formatting detected")

    if len(cleaned) < SHORT_CONTENT_CHARS:
        warnings.append("Content is very short - likely to score poorly")
    elif len(cleaned) > LONG_CONTENT_CHARS:
        warnings.append("Content is very long - may increase processing time")

    metadata = ContentMetadata(
        original_length=len(raw),
        cleaned_length=len(cleaned),
        has_code_blocks=_FENCE in cleaned,
        has_headers=bool(_HEADER.search(cleaned)),
        has_lists=bool(_BULLET.search(cleaned) or _NUMBERED.search(cleaned)),
    )

    return PreprocessResult(
        cleaned_content=cleaned,
        warnings=warnings,
        metadata=metadata,
        structure=validate_content_structure(cleaned),
    )


def validate_content_structure(content: str) -> StructureReport:
    """
    Report blocking issues and improvement suggestions for content.

    Args:
        content: Content text (cleaned or raw)

    Returns:
        StructureReport; is_valid is False only when issues were found
    """
    if not content or not content.strip():
        return StructureReport(is_valid=False, issues=["Content is empty or only whitespace"])

    issues: List[str] = []
    suggestions: List[str] = []

    if len(content.strip()) < 10:
        issues.append("Content is too short to be meaningful")
        suggestions.append("Add more descriptive content")

    if not _HEADER.search(content):
        suggestions.append("Consider adding headers to structure your content")

    paragraphs = [p for p in _PARAGRAPH_SPLIT.split(content) if p.strip()]
    if len(paragraphs) < 2:
        suggestions.append("Consider breaking content into multiple paragraphs")

    if _FENCE not in content and _CODE_WORDS.search(content):
        suggestions.append("Consider using code blocks for code snippets")

    return StructureReport(is_valid=not issues, issues=issues, suggestions=suggestions)


def count_paragraphs(content: str) -> int:
    return len([p for p in _PARAGRAPH_SPLIT.split(content or "") if p.strip()])


def extract_topic_from_content(title: str, content: str) -> str:
    """
    Derive a topic when the caller did not supply one.

    Tries, in order: the title without its content-type prefix, the first
    markdown header, the first sentence (if 10-100 characters long).

    Args:
        title: Document title, may be empty
        content: Content text

    Returns:
        Topic string, "General Content" when nothing usable was found
    """
    if title:
        clean_title = _TITLE_PREFIX.sub("", title).strip()
        if clean_title:
            return clean_title

    content = content or ""
    header = _HEADER_TEXT.search(content)
    if header and header.group(1).strip():
        return header.group(1).strip()

    first_sentence = _SENTENCE_END.split(content, maxsplit=1)[0].strip()
    if 10 < len(first_sentence) < 100:
        return first_sentence

    return "General Content"
