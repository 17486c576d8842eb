"""
Context Probes — the tests every matcher consults before flagging.

All probes take the stripped text and an offset into it. They are pure
string scans with no state.
"""

from __future__ import annotations

import re
from typing import Optional

from groundcheck.regions import ScanText


EVIDENCE_WINDOW = 150
ENUMERATION_LOOKBACK = 200
COUNT_NOUN_LOOKAHEAD = 35

_SENTENCE_DELIMITERS = ("\n", ".", "!", "?")

# Observational markers, tested against the stripped window.
EVIDENCE_MARKERS: list[re.Pattern] = [
    re.compile(r"[\"'][^\"']{3,}[\"']"),                          # quoted text
    re.compile(r"\b(?:error|exit)\s*(?:code)?\s*\d+", re.IGNORECASE),
    re.compile(r"\b[A-Z]\d{3,4}\b"),                               # E501, W291
    re.compile(
        r"\b(?:returned|reported|showed|output|printed|logged|threw|raised|exited|failed)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:stdout|stderr|traceback|exception|stack\s*trace)\b", re.IGNORECASE),
    re.compile(r"[\w/]+\.\w{1,6}:\d+"),                            # path.py:42
]

# Inline code never survives stripping, so it is looked for in the raw text.
INLINE_CODE_EVIDENCE = re.compile(r"`[^`\n]+`")

_LIST_ITEM_RE = re.compile(r"^\s*(?:\d+[.)]\s|\*\s|-\s)", re.MULTILINE)

_COUNT_NOUN_RE = re.compile(
    r"^\s+(?:requirements?|items?|tests?|files?|checks?|tasks?|steps?|issues?|"
    r"points?|modules?|cases?|features?|commits?|lines?|rules?)\b",
    re.IGNORECASE,
)


def is_within_question(text: str, idx: int) -> bool:
    """
    True when the "sentence" around idx contains a question mark.

    The sentence runs from just after the nearest delimiter at or before
    idx to the first delimiter at or after it, inclusive.
    """
    start = max(text.rfind(ch, 0, idx + 1) for ch in _SENTENCE_DELIMITERS) + 1
    following = [p for p in (text.find(ch, idx) for ch in _SENTENCE_DELIMITERS) if p != -1]
    end = min(following) + 1 if following else len(text)
    return "?" in text[start:end]


def has_evidence_nearby(
    text: str,
    idx: int,
    raw_text: Optional[str] = None,
    window: int = EVIDENCE_WINDOW,
) -> bool:
    """
    Check for observational evidence within `window` characters of idx.

    Args:
        text: The stripped text idx points into.
        idx: Offset of the candidate phrase.
        raw_text: The unstripped text. Its window is cut at the same
            offsets and checked for inline code only.
        window: Characters to search on each side.

    Returns:
        True if any evidence marker was found, False otherwise.
    """
    start = max(0, idx - window)
    context = text[start:min(len(text), idx + window)]
    if any(marker.search(context) for marker in EVIDENCE_MARKERS):
        return True

    if raw_text:
        raw_context = raw_text[start:min(len(raw_text), idx + window)]
        if INLINE_CODE_EVIDENCE.search(raw_context):
            return True
    return False


def scan_has_evidence(scan: ScanText, idx: int) -> bool:
    """has_evidence_nearby over both halves of a ScanText."""
    return has_evidence_nearby(scan.stripped, idx, scan.raw)


def has_enumeration_nearby(text: str, idx: int) -> bool:
    """True if the preceding 200 characters hold two or more list-item lines."""
    preceding = text[max(0, idx - ENUMERATION_LOOKBACK):idx]
    return len(_LIST_ITEM_RE.findall(preceding)) >= 2


def is_quality_score(text: str, match_str: str, match_index: int) -> bool:
    """
    Decide whether an "N/10" match is a quality rating or a plain count.

    10/10 is an identity ratio. A decimal numerator is always a rating.
    Otherwise a count noun right after the match ("7/10 tests") makes it
    a count.
    """
    num_str = match_str.split("/")[0].strip()
    if float(num_str) == 10:
        return False

    if "." in num_str:
        return True

    end = match_index + len(match_str)
    after = text[end:end + COUNT_NOUN_LOOKAHEAD]
    if _COUNT_NOUN_RE.search(after):
        return False

    return True
