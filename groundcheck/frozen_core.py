"""
Frozen Core — Trigger Detection Engine

This module IS the product. Everything else is plumbing around it.

The frozen core defines:
  1. The trigger categories (immutable taxonomy)
  2. The phrase lists and structural shapes that raise each category
  3. The suppression rules that cancel a trigger in context
  4. The detection engine (rule-based, deterministic, no I/O)

The engine does not judge whether a claim is true. It enforces
language discipline: a narrative that guesses, asserts causes, invents
numbers, or claims completeness without showing what it observed is
flagged.

Every category matcher has the same shape: find candidates in the
stripped text, run the context probes in a fixed order, and either
suppress or emit a Match. The order matters. Later guards are
exceptions to earlier ones, so they short-circuit rather than vote.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from groundcheck.logging import get_logger
from groundcheck.probes import (
    has_enumeration_nearby,
    is_quality_score,
    is_within_question,
    scan_has_evidence,
)
from groundcheck.regions import ScanText

logger = get_logger("core")

# --- Core Version (stamped on every API response) ---
CORE_VERSION = "1.0.0"


# ============================================================
# DATA STRUCTURES
# ============================================================

class TriggerKind(str, Enum):
    """Trigger categories. FABRICATED_SOURCE is reserved: scored and
    weighted, but no matcher raises it yet."""
    SPECULATION = "speculation_language"
    CAUSALITY = "causality_language"
    PSEUDO_QUANTIFICATION = "pseudo_quantification"
    COMPLETENESS = "completeness_claim"
    FABRICATED_SOURCE = "fabricated_source"


@dataclass(frozen=True)
class Match:
    """A single trigger raised during detection."""
    kind: TriggerKind
    evidence: str          # The phrase, matched fragment, or a short label

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "evidence": self.evidence}


def _phrase_regex(phrase: str) -> re.Pattern:
    # Left word boundary only: "assume" catches "assumed", "thus" skips "enthusiasm".
    return re.compile(r"\b" + re.escape(phrase), re.IGNORECASE)


# ============================================================
# SPECULATION
# ============================================================

SPECULATION_PHRASES: list[str] = [
    "i think",
    "i believe",
    "probably",
    "likely",
    "it seems",
    "seems like",
    "i assume",
    "assume",
    "maybe",
    "might be",
    "could be",
    "presumably",
]

# "should be" is classified by what surrounds it. Checked in this order.
EPISTEMIC_SHOULD = re.compile(
    r"\b(?:it|this|that|everything|things?)\s+should\s+be\b", re.IGNORECASE,
)
HYPOTHESIS_SHOULD = re.compile(
    r"\b(?:H[0₀aA1₁]|hypothesis|null\s+hypothesis|prediction)\b[^.]*\bshould\b",
    re.IGNORECASE,
)
INSTRUCTIONAL_SHOULD = re.compile(
    r"\byou\s+should\s+(?:set|configure|change|update|use|add|remove|ensure|verify|check)\b",
    re.IGNORECASE,
)
# The bare-identifier branch also catches values that were inline code
# before stripping removed them.
PRESCRIPTIVE_SHOULD = re.compile(
    r"\bshould\s+be\s+(?:`[^`]+`|[\"'][^\"']+[\"']|\d[\d.]*\b|"
    r"(?:true|false|null|undefined|none|int|str|float|string|boolean|void)\b|"
    r"(?:a|an|the)\s+\w[\w-]*|\w[\w-]{1,})",
    re.IGNORECASE,
)
_SHOULD_RE = re.compile(r"should", re.IGNORECASE)
_SHOULD_BE_RE = re.compile(r"should\s+be", re.IGNORECASE)


# ============================================================
# CAUSALITY
# ============================================================

CAUSALITY_PHRASES: list[str] = [
    "caused by",
    "due to",
    "because",
    "as a result",
    "therefore",
    "this means",
    "consequently",
    "as a consequence",
    "hence",
    "thus",
    "it follows that",
    "this suggests that",
    "this indicates that",
    "this implies that",
    "which is why",
    "which means",
    "which explains",
    "the root cause",
    "stems from",
    "results from",
    "resulted in",
    "led to",
    "attributable to",
    "given that",
    "since",
]

TEMPORAL_SINCE = re.compile(
    r"\bsince\s+(?:last\s+)?(?:yesterday|today|then|\d{4}|\d{1,2}[/-]\d{1,2}|"
    r"\d+\s+(?:minutes?|hours?|days?|weeks?|months?|years?)\s+ago|"
    r"the\s+(?:beginning|start|end)|version\s+\d)",
    re.IGNORECASE,
)
SINCE_LOOKBEHIND = 50
SINCE_LOOKAHEAD = 100

HEDGED_BECAUSE = re.compile(
    r"\b(?:probably|likely|possibly|perhaps|maybe|might\s+be|could\s+be)\s+because\b",
    re.IGNORECASE,
)

# Checked once per text, independent of the phrase list.
IMPLICIT_CAUSALITY: list[re.Pattern] = [
    re.compile(
        r"\.\s+This\s+(?:made|caused|meant|led\s+to|resulted\s+in|explains?\s+why|"
        r"is\s+(?:why|because))\b",
        re.IGNORECASE,
    ),
    re.compile(r"\.\s+That(?:'s|\s+is)\s+(?:why|because|the\s+reason)\b", re.IGNORECASE),
]
NOMINALIZED_CAUSALITY: list[re.Pattern] = [
    re.compile(
        r"\bthe\s+(?:likely|probable|possible|main|primary|underlying)\s+"
        r"(?:cause|reason|explanation)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"\bthe\s+(?:cause|reason|explanation|root\s+cause)\s+(?:of|for|behind)\s+"
        r"(?:this|that|the)\b",
        re.IGNORECASE,
    ),
]
PASSIVE_CAUSALITY: list[re.Pattern] = [
    re.compile(r"\bwas\s+(?:caused|triggered|produced)\s+by\b", re.IGNORECASE),
    re.compile(r"\bresulted\s+(?:from|in)\b", re.IGNORECASE),
    re.compile(r"\bcan\s+be\s+traced\s+(?:back\s+)?to\b", re.IGNORECASE),
]
STRUCTURAL_CAUSALITY = IMPLICIT_CAUSALITY + NOMINALIZED_CAUSALITY + PASSIVE_CAUSALITY


# ============================================================
# PSEUDO-QUANTIFICATION
# ============================================================

N_OVER_TEN = re.compile(r"\b(\d+(?:\.\d+)?)\s*/\s*10\b")
PERCENTAGE = re.compile(r"\b\d{1,3}(?:\.\d+)?\s*%")


# ============================================================
# COMPLETENESS
# ============================================================

COMPLETENESS_PHRASES: list[str] = [
    "all files checked",
    "comprehensive analysis",
    "everything is fixed",
    "fully resolved",
    "complete solution",
    "all issues resolved",
    "all issues fixed",
    "all tests pass",
    "all tests passing",
    "no issues found",
    "no errors found",
    "no remaining issues",
    "no remaining errors",
    "nothing left to do",
    "task is complete",
    "task is done",
    "fully implemented",
    "fully complete",
    "fully functional",
    "completely resolved",
    "completely fixed",
    "completely done",
    "all done",
    "all complete",
    "all fixed",
    "all resolved",
    "entirely resolved",
    "entirely fixed",
    "nothing else to fix",
    "nothing else to do",
    "everything works",
    "everything is working",
]

STRUCTURAL_COMPLETENESS: list[re.Pattern] = [
    re.compile(
        r"\ball\s+\w+\s+have\s+been\s+(?:fixed|resolved|updated|added|removed|checked|"
        r"verified|addressed|handled|processed|completed)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\bno\s+remaining\s+\w+\b", re.IGNORECASE),
    re.compile(r"\b(?:fully|completely)\s+\w+(?:ed|d)\b", re.IGNORECASE),
    re.compile(r"\beverything\s+(?:is|has\s+been)\s+\w+\b", re.IGNORECASE),
    re.compile(r"\ball\s+(?:of\s+)?(?:the\s+)?\w+\s+(?:are|is)\s+now\s+\w+\b", re.IGNORECASE),
]


# ============================================================
# THE DETECTION ENGINE
# ============================================================

class FrozenCore:
    """
    Immutable detection engine. Deterministic. No I/O.

    Runs the four category matchers over one ScanText and concatenates
    their matches. The matchers share no state, so their order only
    decides the order of the returned list.

    Instantiated once as a singleton. The pattern tables it reads are
    module-level constants.
    """

    def __init__(self):
        self._speculation = [(p, _phrase_regex(p)) for p in SPECULATION_PHRASES]
        self._causality = [(p, _phrase_regex(p)) for p in CAUSALITY_PHRASES]
        self._completeness = [(p, _phrase_regex(p)) for p in COMPLETENESS_PHRASES]

    def detect(self, text: str) -> list[Match]:
        """
        Find every trigger in a narrative text.

        Args:
            text: Raw narrative text. Any string, including "".

        Returns:
            Matches in category order: speculation, causality,
            pseudo-quantification, completeness. Empty when clean.
        """
        if not text:
            return []
        matches = self.detect_scan(ScanText.from_text(text))
        if matches:
            logger.debug(
                "Triggers detected",
                extra={
                    "flags_count": len(matches),
                    "kinds": sorted({m.kind.value for m in matches}),
                },
            )
        return matches

    def detect_scan(self, scan: ScanText) -> list[Match]:
        """Run all category matchers over an already-stripped ScanText."""
        matches: list[Match] = []
        matches.extend(self._match_speculation(scan))
        matches.extend(self._match_causality(scan))
        matches.extend(self._match_pseudo_quantification(scan))
        matches.extend(self._match_completeness(scan))
        return matches

    # --- Speculation ---

    def _match_speculation(self, scan: ScanText) -> list[Match]:
        text = scan.stripped
        found = []
        for phrase, regex in self._speculation:
            for m in regex.finditer(text):
                # "Should I do that now?" asks, it does not guess.
                if is_within_question(text, m.start()):
                    continue
                found.append(Match(TriggerKind.SPECULATION, phrase))
                break

        should = self._classify_should(scan)
        if should is not None:
            found.append(should)
        return found

    def _classify_should(self, scan: ScanText) -> Optional[Match]:
        """
        Epistemic "it should be working" is a guess about state and always
        flags. Hypothesis framing, instructions to the reader, and
        prescriptive values ("should be true") are not guesses. Anything
        else falls back to a plain "should be" flag outside questions.
        """
        text = scan.stripped
        if not _SHOULD_RE.search(text):
            return None
        if EPISTEMIC_SHOULD.search(text):
            return Match(TriggerKind.SPECULATION, "should be (epistemic)")
        if HYPOTHESIS_SHOULD.search(text):
            return None
        if INSTRUCTIONAL_SHOULD.search(text):
            return None
        if PRESCRIPTIVE_SHOULD.search(text):
            return None

        m = _SHOULD_BE_RE.search(text)
        if m is None or is_within_question(text, m.start()):
            return None
        return Match(TriggerKind.SPECULATION, "should be")

    # --- Causality ---

    def _match_causality(self, scan: ScanText) -> list[Match]:
        text = scan.stripped
        found = []

        # Offsets of every "because" directly preceded by a hedge word.
        hedged = {m.end() - len("because") for m in HEDGED_BECAUSE.finditer(text)}
        hedged_flagged = False

        for phrase, regex in self._causality:
            for m in regex.finditer(text):
                idx = m.start()
                if is_within_question(text, idx):
                    continue

                if phrase == "since":
                    nearby = text[max(0, idx - SINCE_LOOKBEHIND):idx + SINCE_LOOKAHEAD]
                    if TEMPORAL_SINCE.search(nearby):
                        continue

                if phrase == "because":
                    # Hedge + causal claim flags whatever evidence is nearby.
                    if idx in hedged:
                        if not hedged_flagged:
                            found.append(Match(TriggerKind.CAUSALITY, "because (hedged)"))
                            hedged_flagged = True
                        continue
                    if scan_has_evidence(scan, idx):
                        continue
                    found.append(Match(TriggerKind.CAUSALITY, phrase))
                    continue

                if scan_has_evidence(scan, idx):
                    continue
                found.append(Match(TriggerKind.CAUSALITY, phrase))
                break  # one flag per phrase

        for regex in STRUCTURAL_CAUSALITY:
            m = regex.search(text)
            if m is None:
                continue
            if is_within_question(text, m.start()):
                continue
            if scan_has_evidence(scan, m.start()):
                continue
            found.append(Match(TriggerKind.CAUSALITY, m.group(0).strip()))

        return found

    # --- Pseudo-quantification ---

    def _match_pseudo_quantification(self, scan: ScanText) -> list[Match]:
        text = scan.stripped
        found = []

        for m in N_OVER_TEN.finditer(text):
            if is_quality_score(text, m.group(0), m.start()):
                found.append(Match(TriggerKind.PSEUDO_QUANTIFICATION, m.group(0)))
                break

        # Percentages carry no methodology; no suppression applies.
        m = PERCENTAGE.search(text)
        if m is not None:
            found.append(Match(TriggerKind.PSEUDO_QUANTIFICATION, m.group(0)))

        return found

    # --- Completeness ---

    def _match_completeness(self, scan: ScanText) -> list[Match]:
        text = scan.stripped
        found = [
            Match(TriggerKind.COMPLETENESS, phrase)
            for phrase, regex in self._completeness
            if regex.search(text)
        ]

        for regex in STRUCTURAL_COMPLETENESS:
            m = regex.search(text)
            if m is None:
                continue
            if is_within_question(text, m.start()):
                continue
            # A preceding itemised list already says what was checked.
            if has_enumeration_nearby(text, m.start()):
                continue
            found.append(Match(TriggerKind.COMPLETENESS, m.group(0).strip()))

        return found

    def get_patterns(self) -> list[dict]:
        """
        Return the full detection surface.

        Used by the GET /patterns endpoint.
        """
        patterns: list[dict] = []
        for kind, phrases in (
            (TriggerKind.SPECULATION, SPECULATION_PHRASES),
            (TriggerKind.CAUSALITY, CAUSALITY_PHRASES),
            (TriggerKind.COMPLETENESS, COMPLETENESS_PHRASES),
        ):
            patterns.extend(
                {"kind": kind.value, "type": "phrase", "pattern": p} for p in phrases
            )

        for kind, regexes in (
            (TriggerKind.SPECULATION, [EPISTEMIC_SHOULD]),
            (TriggerKind.CAUSALITY, STRUCTURAL_CAUSALITY),
            (TriggerKind.PSEUDO_QUANTIFICATION, [N_OVER_TEN, PERCENTAGE]),
            (TriggerKind.COMPLETENESS, STRUCTURAL_COMPLETENESS),
        ):
            patterns.extend(
                {"kind": kind.value, "type": "structural", "pattern": r.pattern}
                for r in regexes
            )
        return patterns


# ============================================================
# SINGLETON
# ============================================================

frozen_core = FrozenCore()


def detect(text: str) -> list[Match]:
    """Whole-text trigger detection. See FrozenCore.detect."""
    return frozen_core.detect(text)
