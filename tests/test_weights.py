"""
Tests for weight configuration: defaults, partial overrides and the
working-directory weights file.
"""

import json
import math

import pytest
from groundcheck.config import settings
from groundcheck.weights import (
    DEFAULT_WEIGHTS,
    is_valid_weight,
    load_weights,
    resolve_weights,
    usable_weights,
)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write_config(directory, document):
    path = directory / settings.WEIGHTS_FILE
    if isinstance(document, str):
        path.write_text(document, encoding="utf-8")
    else:
        path.write_text(json.dumps(document), encoding="utf-8")
    return path


class TestDefaults:

    def test_values(self):
        assert DEFAULT_WEIGHTS == {
            "speculation_language": 0.25,
            "causality_language": 0.30,
            "pseudo_quantification": 0.15,
            "completeness_claim": 0.20,
            "fabricated_source": 0.10,
        }

    def test_sum_to_one(self):
        assert math.isclose(sum(DEFAULT_WEIGHTS.values()), 1.0)


class TestValidation:

    @pytest.mark.parametrize("value", [0, 0.0, 0.5, 3, 12.5])
    def test_valid(self, value):
        assert is_valid_weight(value)

    @pytest.mark.parametrize("value", [-0.1, math.nan, math.inf, 10**400, "0.5", None, True, False, [1]])
    def test_invalid(self, value):
        assert not is_valid_weight(value)

    def test_usable_drops_bad_entries(self):
        usable = usable_weights({
            "speculation_language": 0.5,
            "causality_language": -1,
            "made_up": 1.0,
        })
        assert usable == {"speculation_language": 0.5}


class TestResolveWeights:

    def test_none_gives_defaults(self):
        assert resolve_weights() == DEFAULT_WEIGHTS

    def test_returns_copy(self):
        weights = resolve_weights()
        weights["speculation_language"] = 9.0
        assert DEFAULT_WEIGHTS["speculation_language"] == 0.25

    def test_partial_override(self):
        weights = resolve_weights({"speculation_language": 0.5})
        assert weights["speculation_language"] == 0.5
        assert weights["causality_language"] == 0.30

    def test_invalid_value_keeps_default(self):
        weights = resolve_weights({"causality_language": "heavy"})
        assert weights["causality_language"] == 0.30

    def test_unknown_key_dropped(self):
        weights = resolve_weights({"made_up": 1.0})
        assert "made_up" not in weights
        assert set(weights) == set(DEFAULT_WEIGHTS)

    def test_non_mapping_ignored(self):
        assert resolve_weights(["speculation_language"]) == DEFAULT_WEIGHTS


class TestLoadWeights:

    def test_no_file(self, workdir):
        assert load_weights() == DEFAULT_WEIGHTS

    def test_valid_file(self, workdir):
        _write_config(workdir, {"weights": {"speculation_language": 0.5}})
        weights = load_weights()
        assert weights["speculation_language"] == 0.5
        assert weights["completeness_claim"] == 0.20

    def test_invalid_and_unknown_entries(self, workdir):
        _write_config(workdir, {"weights": {
            "speculation_language": -1,
            "causality_language": 0.9,
            "made_up": 0.4,
        }})
        weights = load_weights()
        assert weights["speculation_language"] == 0.25
        assert weights["causality_language"] == 0.9
        assert "made_up" not in weights

    def test_integer_too_large_for_float(self, workdir):
        _write_config(workdir, '{"weights": {"speculation_language": 1' + "0" * 400 + '}}')
        weights = load_weights()
        assert weights["speculation_language"] == 0.25
        assert weights["causality_language"] == 0.30

    def test_nan_literal(self, workdir):
        _write_config(workdir, '{"weights": {"speculation_language": NaN}}')
        assert load_weights()["speculation_language"] == 0.25

    def test_malformed_json(self, workdir):
        _write_config(workdir, "{not json")
        assert load_weights() == DEFAULT_WEIGHTS

    def test_missing_weights_object(self, workdir):
        _write_config(workdir, {"other": 1})
        assert load_weights() == DEFAULT_WEIGHTS

    def test_weights_not_an_object(self, workdir):
        _write_config(workdir, {"weights": [0.5]})
        assert load_weights() == DEFAULT_WEIGHTS

    def test_top_level_array(self, workdir):
        _write_config(workdir, "[1, 2]")
        assert load_weights() == DEFAULT_WEIGHTS

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"weights": {"pseudo_quantification": 0.0}}))
        assert load_weights(path)["pseudo_quantification"] == 0.0

    def test_explicit_missing_path(self, tmp_path):
        assert load_weights(tmp_path / "absent.json") == DEFAULT_WEIGHTS

    def test_directory_at_config_path(self, workdir):
        (workdir / settings.WEIGHTS_FILE).mkdir()
        assert load_weights() == DEFAULT_WEIGHTS
