"""
Regions — what the matchers are allowed to see.

Narrative text arrives with code samples, inline identifiers and quoted
user text mixed in. None of those are the assistant's own assertions, so
they are stripped before any pattern runs. The stripped text is carried
alongside the raw text in a ScanText: inline code is itself evidence
("I ran `pytest`"), and the evidence probe needs the raw copy to see it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


_FENCED_BLOCK_RE = re.compile(r"```.*?```", re.DOTALL)
_INLINE_CODE_RE = re.compile(r"`[^`\n]*`")
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")


def normalize_for_scan(text: str) -> str:
    """Fold CRLF line endings to LF."""
    return text.replace("\r\n", "\n")


def strip_low_signal_regions(text: str) -> str:
    """
    Remove fenced code blocks, inline code spans and blockquote lines.

    Fenced blocks go first so their backticks cannot pair up with an
    inline span across the fence boundary.
    """
    out = _FENCED_BLOCK_RE.sub("", text)
    out = _INLINE_CODE_RE.sub("", out)
    return "\n".join(
        line for line in out.split("\n") if not line.lstrip().startswith(">")
    )


@dataclass(frozen=True)
class ScanText:
    """
    The pair every matcher and probe works on.

    `stripped` is what patterns are matched against, and every index a
    matcher hands to a probe is an offset into it. `raw` is only read by
    the inline-code evidence check, at the same offsets.
    """
    raw: str
    stripped: str

    @classmethod
    def from_text(cls, text: str) -> "ScanText":
        raw = normalize_for_scan(text)
        stripped = strip_low_signal_regions(raw)
        return cls(raw=raw, stripped=stripped)

    def __len__(self) -> int:
        return len(self.stripped)


def split_into_sentences(text: str) -> list[str]:
    """
    Split on `.`, `!` or `?` followed by whitespace.

    Abbreviations ("e.g. this") and ellipses split where they stand;
    that imprecision is accepted.
    """
    parts = _SENTENCE_BOUNDARY_RE.split(text)
    return [p.strip() for p in parts if p.strip()]
