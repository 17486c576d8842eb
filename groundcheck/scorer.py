"""
Sentence Scorer

Scores a narrative one sentence at a time. Each sentence is reduced to
a 0/1 vector over the trigger categories, the vector is combined with
the category weights, and the result is mapped to a three-tier label.

    aggregate = Σ(weight[k] · score[k]) / Σ(weight[k])

The denominator only counts usable weights, so override sets that do
not sum to 1.0 still land in [0, 1]. Thresholds:

    GROUNDED      score <  0.30
    UNCERTAIN     0.30 <= score <= 0.60
    HALLUCINATED  score >  0.60
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from groundcheck.frozen_core import TriggerKind, detect
from groundcheck.regions import split_into_sentences
from groundcheck.weights import DEFAULT_WEIGHTS, usable_weights


UNCERTAIN_FROM = 0.30
HALLUCINATED_ABOVE = 0.60

# Rounding keeps 0.3 from landing at 0.29999999999999993.
SCORE_PRECISION = 10


class Label(str, Enum):
    """Ordinal: GROUNDED < UNCERTAIN < HALLUCINATED."""
    GROUNDED = "GROUNDED"
    UNCERTAIN = "UNCERTAIN"
    HALLUCINATED = "HALLUCINATED"

    @property
    def rank(self) -> int:
        return list(Label).index(self)

    def __lt__(self, other):
        if not isinstance(other, Label):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Label):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Label):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Label):
            return NotImplemented
        return self.rank >= other.rank


@dataclass(frozen=True)
class SentenceResult:
    """Score detail for one sentence."""
    sentence: str
    index: int              # zero-based position in the text
    total: int              # sentence count of the whole text
    scores: dict[str, int]
    aggregate_score: float
    label: Label

    def to_dict(self) -> dict:
        return {
            "sentence": self.sentence,
            "index": self.index,
            "total": self.total,
            "scores": dict(self.scores),
            "aggregate_score": self.aggregate_score,
            "label": self.label.value,
        }


def empty_scores() -> dict[str, int]:
    return {kind.value: 0 for kind in TriggerKind}


def score_sentence(sentence: str) -> dict[str, int]:
    """Binary score per category: 1 iff the sentence raised that kind."""
    scores = empty_scores()
    for match in detect(sentence):
        scores[match.kind.value] = 1
    return scores


def aggregate_weighted_score(
    scores: Mapping[str, int],
    weights: Optional[Mapping] = None,
) -> float:
    """
    Weighted mean of the category scores.

    Unknown categories and invalid weights (NaN, infinite, negative,
    non-numeric) are skipped. Returns 0.0 when nothing usable is left.
    """
    usable = usable_weights(DEFAULT_WEIGHTS if weights is None else weights)
    top = max(usable.values(), default=0.0)
    if top == 0:
        return 0.0
    # Scaled to the largest weight so the sum stays finite near float max.
    scaled = {kind: weight / top for kind, weight in usable.items()}
    weight_sum = sum(scaled.values())
    total = sum(weight * scores.get(kind, 0) for kind, weight in scaled.items())
    return round(total / weight_sum, SCORE_PRECISION)


def label_for_score(score: float) -> Label:
    if score < UNCERTAIN_FROM:
        return Label.GROUNDED
    if score <= HALLUCINATED_ABOVE:
        return Label.UNCERTAIN
    return Label.HALLUCINATED


def score_text(text: str, weights: Optional[Mapping] = None) -> list[SentenceResult]:
    """
    Score every sentence in a block of text.

    Args:
        text: Narrative text. Empty text yields an empty list.
        weights: Category weights. Defaults to DEFAULT_WEIGHTS.

    Returns:
        One SentenceResult per sentence, in text order.
    """
    sentences = split_into_sentences(text) if text else []
    total = len(sentences)
    results = []
    for index, sentence in enumerate(sentences):
        scores = score_sentence(sentence)
        aggregate = aggregate_weighted_score(scores, weights)
        results.append(SentenceResult(
            sentence=sentence,
            index=index,
            total=total,
            scores=scores,
            aggregate_score=aggregate,
            label=label_for_score(aggregate),
        ))
    return results


def worst_label(results: Iterable[SentenceResult]) -> Label:
    """Highest label among the results; GROUNDED when there are none."""
    return max((r.label for r in results), default=Label.GROUNDED)
