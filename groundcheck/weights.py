"""
Weight Configuration

Maps each trigger category to the weight it carries in a sentence's
aggregate score. The defaults sum to 1.0. Overrides are partial and are
validated key by key: a bad value keeps the default for that key, an
unknown key is dropped, and nothing here ever raises.

Override file (JSON, looked up in the working directory):

    {"weights": {"speculation_language": 0.5, "causality_language": 0.4}}
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from groundcheck.config import settings
from groundcheck.frozen_core import TriggerKind
from groundcheck.logging import get_logger

logger = get_logger("weights")


DEFAULT_WEIGHTS: dict[str, float] = {
    TriggerKind.SPECULATION.value: 0.25,
    TriggerKind.CAUSALITY.value: 0.30,
    TriggerKind.PSEUDO_QUANTIFICATION.value: 0.15,
    TriggerKind.COMPLETENESS.value: 0.20,
    TriggerKind.FABRICATED_SOURCE.value: 0.10,
}


def is_valid_weight(value: Any) -> bool:
    """A finite, non-negative real number. Booleans do not count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        value = float(value)
    except OverflowError:
        return False
    return math.isfinite(value) and value >= 0


def usable_weights(weights: Mapping) -> dict[str, float]:
    """Keep only known categories with valid values. Used by the aggregator."""
    return {
        key: float(value)
        for key, value in weights.items()
        if key in DEFAULT_WEIGHTS and is_valid_weight(value)
    }


def resolve_weights(overrides: Optional[Mapping] = None) -> dict[str, float]:
    """
    Merge a partial override onto the defaults.

    Args:
        overrides: Category name → weight. May be None or partial.

    Returns:
        A fresh dict holding exactly the known categories.
    """
    weights = dict(DEFAULT_WEIGHTS)
    if not isinstance(overrides, Mapping):
        return weights

    for key, value in overrides.items():
        if key not in weights:
            logger.debug(f"Ignoring unknown weight key: {key!r}")
            continue
        if not is_valid_weight(value):
            logger.warning(
                f"Invalid weight for {key}; keeping default",
                extra={"error": repr(value)},
            )
            continue
        weights[key] = float(value)
    return weights


def load_weights(path: Optional[Union[str, Path]] = None) -> dict[str, float]:
    """
    Load the effective weights.

    Reads `path`, or settings.WEIGHTS_FILE under the current working
    directory. A missing, unreadable or malformed file yields the
    defaults.
    """
    try:
        config_path = Path(path) if path is not None else Path.cwd() / settings.WEIGHTS_FILE
        if not config_path.is_file():
            return dict(DEFAULT_WEIGHTS)
        document = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(
            "Could not read weights file; using defaults",
            extra={"error": str(e), "error_type": type(e).__name__},
        )
        return dict(DEFAULT_WEIGHTS)

    if not isinstance(document, dict) or not isinstance(document.get("weights"), dict):
        logger.warning(
            "Weights file has no 'weights' object; using defaults",
            extra={"config_path": str(config_path)},
        )
        return dict(DEFAULT_WEIGHTS)

    return resolve_weights(document["weights"])
