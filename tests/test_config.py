"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from nrps_predictor.config import (
    default_config,
    load_config,
    load_config_with_overrides,
)
from nrps_predictor.config.schema import PipelineConfig

DEFAULT_CONFIG = Path(__file__).parent.parent / "config" / "default.yaml"


def test_load_default_config():
    """Test loading the shipped default configuration."""
    config = load_config(DEFAULT_CONFIG)

    assert isinstance(config, PipelineConfig)
    assert config.model_dir == Path("data/models")
    assert config.stachelhaus_signatures is None
    assert config.prediction.count == 1
    assert config.prediction.refinement_hits == 3
    assert config.prediction.min_short_matches == 0
    assert config.prediction.workers == 1
    assert config.output.output_dir is None


def test_default_file_matches_builtin_defaults():
    assert load_config(DEFAULT_CONFIG).config_hash() == default_config().config_hash()


def test_empty_config_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == default_config()


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "body, field",
    [
        ("prediction:\n  count: 0\n", "count"),
        ("prediction:\n  workers: 0\n", "workers"),
        ("prediction:\n  min_short_matches: 11\n", "min_short_matches"),
        ("prediction:\n  refinement_hits: 0\n", "refinement_hits"),
        ("output:\n  filename_base: ''\n", "filename_base"),
    ],
)
def test_invalid_values(tmp_path, body, field):
    path = tmp_path / "invalid.yaml"
    path.write_text(body)
    with pytest.raises(ValidationError) as exc_info:
        load_config(path)
    assert field in str(exc_info.value)


def test_config_hash_deterministic():
    """Test that config hash is deterministic and changes with config."""
    config1 = load_config(DEFAULT_CONFIG)
    config2 = load_config(DEFAULT_CONFIG)

    assert config1.config_hash() == config2.config_hash()
    assert len(config1.config_hash()) == 64

    config3 = load_config_with_overrides(DEFAULT_CONFIG, {"prediction.count": 3})
    assert config3.config_hash() != config1.config_hash()


def test_overrides_ignore_none(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("prediction:\n  count: 4\n")
    config = load_config_with_overrides(path, {"prediction.count": None, "prediction.workers": 2})

    assert config.prediction.count == 4
    assert config.prediction.workers == 2


def test_overrides_without_file_are_validated():
    with pytest.raises(ValidationError):
        load_config_with_overrides(None, {"prediction.count": -1})


def test_signature_table_resolution(tmp_path):
    config = PipelineConfig(model_dir=tmp_path)
    # Nothing next to the models: fall back to the bundled table
    assert config.signature_table_path() is None

    (tmp_path / "signatures.tsv").write_text("")
    assert config.signature_table_path() == tmp_path / "signatures.tsv"

    explicit = tmp_path / "other.tsv"
    assert PipelineConfig(model_dir=tmp_path, stachelhaus_signatures=explicit).signature_table_path() == explicit


def test_active_schemes_skips():
    config = PipelineConfig.model_validate({"prediction": {"skip_v2": True}})
    schemes = config.active_schemes()

    assert schemes
    assert all(s.startswith("NRPS3_") for s in schemes)
    assert schemes[0] == "NRPS3_THREE_CLUSTER"


def test_active_schemes_from_available():
    config = PipelineConfig.model_validate({"prediction": {"skip_v3": True}})
    available = ["custom", "NRPS3_SINGLE_CLUSTER", "NRPS2_SINGLE_CLUSTER"]
    assert config.active_schemes(available) == ["NRPS2_SINGLE_CLUSTER", "custom"]


def test_explicit_schemes():
    config = PipelineConfig.model_validate(
        {"prediction": {"schemes": ["NRPS2_SINGLE_CLUSTER", " NRPS3_SINGLE_CLUSTER", "NRPS2_SINGLE_CLUSTER"]}}
    )
    assert config.prediction.schemes == ["NRPS2_SINGLE_CLUSTER", "NRPS3_SINGLE_CLUSTER"]
    assert config.requested_schemes() == ["NRPS3_SINGLE_CLUSTER", "NRPS2_SINGLE_CLUSTER"]
    assert default_config().requested_schemes() is None
