"""
Summarizer feature: rule-based fallback used when no LLM is configured
or the LLM call fails.
"""

import re

from rememberly.features.summarizer.schemas import SummaryResult

TITLE_MAX_CHARS = 50
SUMMARY_FALLBACK_CHARS = 100
MAX_TAGS = 5

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_TAG_WORD = re.compile(r"\b\w{4,}\b")

# Frequent words that make useless tags
STOP_WORDS = {
    "this", "that", "with", "have", "will", "been",
    "from", "they", "know", "want", "were", "said",
}


def make_title(content: str) -> str:
    lines = [line.strip() for line in content.splitlines() if line.strip()]
    if not lines:
        return "Untitled Note"
    first = lines[0]
    if len(first) > TITLE_MAX_CHARS:
        return first[:TITLE_MAX_CHARS] + "..."
    return first


def make_summary(content: str) -> str:
    """First two sentences; falls back to the first 100 characters."""
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(content) if s.strip()]
    summary = ". ".join(sentences[:2])
    if summary and len(sentences) > 2:
        summary += "."
    return summary or content[:SUMMARY_FALLBACK_CHARS] + "..."


def make_tags(content: str) -> list[str]:
    tags: list[str] = []
    for word in _TAG_WORD.findall(content.lower()):
        if word in STOP_WORDS or word in tags:
            continue
        tags.append(word)
        if len(tags) == MAX_TAGS:
            break
    return tags


def summarize_heuristic(content: str) -> SummaryResult:
    return SummaryResult(
        title=make_title(content),
        summary=make_summary(content),
        tags=make_tags(content),
    )
