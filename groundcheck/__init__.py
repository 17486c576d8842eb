"""
GroundCheck — Unverified-Claim Detection for Assistant Narrative

Flags speculative hedging, ungrounded causal assertions, invented
quantification and unjustified completeness claims in free text.
Deterministic pattern and context-window rules; no model, no I/O.

Public API:
  - detect:        Whole-text trigger detection (block/allow signal)
  - score_text:    Per-sentence category scores, aggregate and label
  - load_weights:  Effective category weights (defaults + overrides file)
  - frozen_core:   The detection engine singleton
  - TriggerKind, Match, Label, SentenceResult: result types

Usage:
    from groundcheck import detect, score_text, load_weights
    matches = detect(text)
    results = score_text(text, load_weights())
"""

__version__ = "1.0.0"

from groundcheck.frozen_core import (
    frozen_core,
    detect,
    FrozenCore,
    Match,
    TriggerKind,
    CORE_VERSION,
)
from groundcheck.regions import ScanText, split_into_sentences, strip_low_signal_regions
from groundcheck.scorer import (
    Label,
    SentenceResult,
    aggregate_weighted_score,
    label_for_score,
    score_sentence,
    score_text,
)
from groundcheck.weights import DEFAULT_WEIGHTS, load_weights, resolve_weights

__all__ = [
    "frozen_core",
    "detect",
    "FrozenCore",
    "Match",
    "TriggerKind",
    "CORE_VERSION",
    "ScanText",
    "split_into_sentences",
    "strip_low_signal_regions",
    "Label",
    "SentenceResult",
    "aggregate_weighted_score",
    "label_for_score",
    "score_sentence",
    "score_text",
    "DEFAULT_WEIGHTS",
    "load_weights",
    "resolve_weights",
]
