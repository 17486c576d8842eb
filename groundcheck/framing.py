"""
Session-start framing.

Injects the language discipline the stop hook enforces into the session
context up front, so the agent knows the rules before it is audited.
"""

from __future__ import annotations

import json
import sys

FRAMING_TEXT = """# Grounded Narrative — Behavioral Framing

Words like "likely", "probably", "I think", "seems", "might", "should be", "I believe" and "presumably" are guesses. Guesses enter the context as unverified claims that later turns treat as facts.

Verify or say nothing:
- If you are unsure of a claim, check it before stating it.
- Use your tools (read files, run commands, search) to get certainty as part of the task.
- If you cannot verify within the task, say "I don't have that information" or offer to check.

Instead:
- State what you observed: tool output, file contents, error messages, test results.
- State what you did: which files you read, which commands you ran, what they printed.
- Frame open uncertainty as a hypothesis with a check: "Hypothesis: X. To verify: run Y."
- Do not name a cause without citing the evidence for it. "The test fails" is an observation. "The test fails because the mock is wrong" is a causal claim that needs proof.

Completeness:
Do not claim "all", "every", "fully", "comprehensive" or "complete" unless you can list exactly what was checked. Three items checked is "I checked A, B, and C", not "comprehensive analysis".
"""


def build_session_start_output(additional_context: str = FRAMING_TEXT) -> dict:
    return {
        "hookSpecificOutput": {
            "hookEventName": "SessionStart",
            "additionalContext": additional_context,
        },
    }


def main() -> int:
    # The payload is unused, but stdin must be drained for the host to finish writing.
    try:
        sys.stdin.read()
    except OSError:
        pass
    print(json.dumps(build_session_start_output()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
