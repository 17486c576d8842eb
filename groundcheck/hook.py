"""
Stop Hook — audit the last assistant turn before the agent stops.

Reads the hook payload from stdin, pulls the most recent main-chain
assistant message out of the JSONL transcript, and runs the frozen core
over it.

Output protocol:
  Block stop: exit 0, stdout = {"decision": "block", "reason": "..."}
  Allow stop: exit 0, no stdout output

A per-session counter caps consecutive blocks so a response that keeps
tripping the detector cannot loop forever. The counter lives here, not
in the core.
"""

from __future__ import annotations

import json
import re
import sys
from pathlib import Path
from typing import Any, Optional

from groundcheck.config import settings
from groundcheck.frozen_core import Match, detect
from groundcheck.logging import get_logger, setup_logging

logger = get_logger("hook")

MAX_EVIDENCE_SNIPPETS = 6

REWRITE_RULES = [
    "- Only state actions you actually took and what you actually observed.",
    "- If information is missing, say \"I don't know yet\" or \"I can check using my tools\".",
    "- Do not assert causality unless you cite the observed evidence that supports it.",
    "- Remove speculative hedging (\"probably\", \"likely\", \"seems\"). "
    "Replace it with verification steps or explicit uncertainty.",
    "- Do not claim completeness without listing what was checked.",
    "- To discuss a flagged phrase itself, wrap it in backticks (`probably`, `because`) "
    "so the audit does not fire on the explanation.",
]


# ---------------------------------------------------------------------------
# Transcript parsing
# ---------------------------------------------------------------------------

def parse_jsonl(text: str) -> list[Any]:
    """Parse one JSON value per line. Blank and corrupt lines are skipped."""
    entries = []
    for line in text.split("\n"):
        line = line.strip()
        if not line:
            continue
        try:
            entries.append(json.loads(line))
        except json.JSONDecodeError:
            continue
    return entries


def extract_text_from_message_content(content: Any) -> str:
    """
    Extract the human-readable text of a message.

    Content is either a plain string or a list of blocks. tool_use blocks
    are skipped; other blocks contribute their `text`, or failing that a
    string `content`.
    """
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return ""

    parts = []
    for block in content:
        if not isinstance(block, dict):
            continue
        if block.get("type") == "tool_use":
            continue
        text = block.get("text")
        if isinstance(text, str) and text.strip():
            parts.append(text)
            continue
        inner = block.get("content")
        if isinstance(inner, str) and inner.strip():
            parts.append(inner)
    return "\n".join(parts).strip()


def get_last_assistant_text(entries: list[Any]) -> str:
    """Text of the last main-chain assistant message, or "" if there is none."""
    for entry in reversed(entries):
        if not isinstance(entry, dict):
            continue
        if entry.get("isSidechain"):
            continue
        message = entry.get("message")
        if entry.get("type") != "assistant" or not isinstance(message, dict):
            continue
        text = extract_text_from_message_content(message.get("content"))
        if text:
            return text
    return ""


# ---------------------------------------------------------------------------
# Loop state
# ---------------------------------------------------------------------------

_SESSION_ID_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


class LoopState:
    """Consecutive-block counter persisted per session as a small JSON file."""

    def __init__(self, session_id: str, state_dir: Optional[str] = None):
        safe_id = _SESSION_ID_UNSAFE.sub("_", session_id or "unknown")
        self.path = Path(state_dir or settings.STATE_DIR) / f"groundcheck-audit-{safe_id}.json"
        self.session_id = session_id

    def load(self) -> int:
        """Current block count. Missing or corrupt state reads as 0."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return 0
        if not isinstance(data, dict):
            return 0
        try:
            return max(0, int(data.get("blocks", 0)))
        except (TypeError, ValueError):
            return 0

    def save(self, blocks: int) -> None:
        try:
            self.path.write_text(json.dumps({"blocks": blocks}), encoding="utf-8")
        except OSError as e:
            logger.warning(
                "Could not persist loop state",
                extra={"session_id": self.session_id, "error": str(e)},
            )


# ---------------------------------------------------------------------------
# Decision
# ---------------------------------------------------------------------------

def build_block_reason(matches: list[Match]) -> str:
    """Remediation text shown to the agent when its response is blocked."""
    snippets = "\n".join(
        f'- {m.kind.value}: "{m.evidence}"' for m in matches[:MAX_EVIDENCE_SNIPPETS]
    )
    kinds = list(dict.fromkeys(m.kind.value for m in matches))
    return "\n".join([
        "GroundCheck stop hook blocked this response.",
        "",
        "Detected trigger language in your last message:",
        snippets or "- (no snippets available)",
        "",
        "Rewrite the response to follow these rules:",
        *REWRITE_RULES,
        "",
        f"Kinds flagged: {', '.join(kinds)}",
    ])


def run_hook(payload: dict, state_dir: Optional[str] = None) -> Optional[dict]:
    """
    Decide whether to block the stop.

    Returns:
        {"decision": "block", "reason": ...} to block, None to allow.
    """
    transcript_path = payload.get("transcript_path") or ""
    session_id = str(payload.get("session_id") or "")
    stop_hook_active = bool(payload.get("stop_hook_active"))

    if not transcript_path:
        return None
    try:
        transcript = Path(transcript_path).read_text(encoding="utf-8")
    except OSError:
        return None
    if not transcript.strip():
        return None

    text = get_last_assistant_text(parse_jsonl(transcript))
    if not text:
        return None

    state = LoopState(session_id, state_dir)
    matches = detect(text)
    if not matches:
        state.save(0)
        return None

    blocks = state.load() + 1
    state.save(blocks)

    if blocks > settings.MAX_CONSECUTIVE_BLOCKS and stop_hook_active:
        logger.info(
            "Block limit reached; allowing stop",
            extra={"session_id": session_id, "blocks": blocks, "flags_count": len(matches)},
        )
        return None

    logger.info(
        "Blocking stop",
        extra={
            "session_id": session_id,
            "blocks": blocks,
            "flags_count": len(matches),
            "kinds": sorted({m.kind.value for m in matches}),
        },
    )
    return {"decision": "block", "reason": build_block_reason(matches)}


def read_stdin_json() -> dict:
    try:
        data = json.loads(sys.stdin.read())
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def main() -> int:
    """Hook entry point. Always returns 0; the decision travels on stdout."""
    setup_logging(stream=sys.stderr)
    decision = run_hook(read_stdin_json())
    if decision is not None:
        print(json.dumps(decision))
    return 0


if __name__ == "__main__":
    sys.exit(main())
