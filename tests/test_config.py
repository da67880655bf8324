"""
test_config.py — Unit tests for engine configuration loading.

Tests cover:
  - defaults when pyproject.toml has no [tool.orghealth] table
  - precedence: pyproject, then YAML file, then explicit overrides
  - type coercion of YAML and override values
  - unknown keys, missing files and malformed YAML
"""

import pytest

from orghealth.config import EngineConfig, get_env_config, load_engine_config


@pytest.fixture
def pyproject(tmp_path):
    path = tmp_path / "pyproject.toml"
    path.write_text(
        '[project]\nname = "demo"\n\n'
        "[tool.orghealth]\n"
        "low_span_limit = 4\n"
        'benchmark_company_size = "50-100"\n'
    )
    return path


class TestGetEnvConfig:
    """Tests for get_env_config."""

    def test_reads_tool_table(self, pyproject):
        assert get_env_config(pyproject) == {"low_span_limit": 4, "benchmark_company_size": "50-100"}

    def test_missing_file(self, tmp_path):
        assert get_env_config(tmp_path / "missing.toml") == {}

    def test_missing_table(self, tmp_path):
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "demo"\n')
        assert get_env_config(path) == {}


class TestLoadEngineConfig:
    """Tests for load_engine_config."""

    def test_defaults(self, tmp_path):
        config = load_engine_config(pyproject=tmp_path / "missing.toml")
        assert config == EngineConfig()
        assert config.min_dimension_completeness == 40.0
        assert config.outlier_z_threshold == 2.5

    def test_pyproject_values(self, pyproject):
        config = load_engine_config(pyproject=pyproject)
        assert config.low_span_limit == 4
        assert config.benchmark_company_size == "50-100"
        assert config.high_span_limit == 10

    def test_yaml_overrides_pyproject(self, pyproject, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("orghealth:\n  low_span_limit: 3\n  outlier_z_threshold: 3\n")
        config = load_engine_config(path=path, pyproject=pyproject)
        assert config.low_span_limit == 3
        assert config.outlier_z_threshold == 3.0
        assert isinstance(config.outlier_z_threshold, float)
        assert config.benchmark_company_size == "50-100"

    def test_flat_yaml(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("stable_trend_band: 5\n")
        config = load_engine_config(path=path, pyproject=tmp_path / "missing.toml")
        assert config.stable_trend_band == 5.0

    def test_overrides_win(self, pyproject, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("low_span_limit: 3\n")
        config = load_engine_config({"low_span_limit": "6"}, path=path, pyproject=pyproject)
        assert config.low_span_limit == 6

    def test_unknown_key(self, tmp_path):
        with pytest.raises(ValueError, match="not_a_setting"):
            load_engine_config({"not_a_setting": 1}, pyproject=tmp_path / "missing.toml")

    def test_missing_yaml(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_engine_config(path=tmp_path / "nope.yaml", pyproject=tmp_path / "missing.toml")

    def test_yaml_must_be_a_mapping(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_engine_config(path=path, pyproject=tmp_path / "missing.toml")

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("")
        assert load_engine_config(path=path, pyproject=tmp_path / "missing.toml") == EngineConfig()
