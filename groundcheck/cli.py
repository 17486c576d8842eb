"""
groundcheck — command line entry point.

Usage:
    groundcheck detect notes.md            # List triggers; exit 1 if any
    groundcheck detect - --json < reply.txt
    groundcheck score notes.md             # Per-sentence table
    groundcheck score notes.md --weights custom.json --json
    groundcheck hook                       # Stop hook (stdin payload)
    groundcheck framing                    # Session-start framing
    groundcheck serve --port 8000          # Run the HTTP API
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from groundcheck.config import settings
from groundcheck.frozen_core import detect
from groundcheck.scorer import score_text, worst_label
from groundcheck.weights import load_weights


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _cmd_detect(args) -> int:
    matches = detect(_read_input(args.input))
    if args.json:
        print(json.dumps([m.to_dict() for m in matches], indent=2))
    elif matches:
        for m in matches:
            print(f"{m.kind.value:<24} {m.evidence}")
    else:
        print("No triggers detected.")
    return 1 if matches else 0


def _cmd_score(args) -> int:
    weights = load_weights(args.weights)
    results = score_text(_read_input(args.input), weights)
    if args.json:
        print(json.dumps({
            "results": [r.to_dict() for r in results],
            "worst_label": worst_label(results).value,
        }, indent=2))
        return 0

    for r in results:
        print(f"[{r.index + 1}/{r.total}] {r.label.value:<12} {r.aggregate_score:.2f}  {r.sentence}")
    print(f"\nWorst label: {worst_label(results).value}")
    return 0


def _cmd_hook(args) -> int:
    from groundcheck.hook import main as hook_main
    return hook_main()


def _cmd_framing(args) -> int:
    from groundcheck.framing import main as framing_main
    return framing_main()


def _cmd_serve(args) -> int:
    import uvicorn
    uvicorn.run("api.main:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="groundcheck",
        description="Flag unverified-claim language in assistant narrative",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_detect = sub.add_parser("detect", help="Whole-text trigger detection")
    p_detect.add_argument("input", nargs="?", default="-", help="File to audit, or - for stdin")
    p_detect.add_argument("--json", action="store_true", help="Output JSON")
    p_detect.set_defaults(func=_cmd_detect)

    p_score = sub.add_parser("score", help="Per-sentence scoring")
    p_score.add_argument("input", nargs="?", default="-", help="File to score, or - for stdin")
    p_score.add_argument(
        "--weights",
        default=None,
        help=f"Weights JSON file (default: ./{settings.WEIGHTS_FILE} if present)",
    )
    p_score.add_argument("--json", action="store_true", help="Output JSON")
    p_score.set_defaults(func=_cmd_score)

    p_hook = sub.add_parser("hook", help="Run as a Stop hook (reads the payload on stdin)")
    p_hook.set_defaults(func=_cmd_hook)

    p_framing = sub.add_parser("framing", help="Emit session-start framing context")
    p_framing.set_defaults(func=_cmd_framing)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=settings.HOST)
    p_serve.add_argument("--port", type=int, default=settings.PORT)
    p_serve.set_defaults(func=_cmd_serve)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
