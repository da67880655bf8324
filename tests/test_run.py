"""
test_run.py — Tests for input bundles, the orchestrator and the command-line runner.

Tests cover:
  - load_input_bundle: camelCase keys, optional sections, error cases
  - write_json
  - calculate_all_metrics on the sample company
  - run(): payload sections
  - main(): JSON output file, validation failure and load errors exit with 1
"""

import json

import pytest

from orghealth.calculator import calculate_all_metrics
from orghealth.config import EngineConfig
from orghealth.run import main, run
from orghealth.utils.io import load_input_bundle, write_json


@pytest.fixture
def bundle_path(tmp_path, sample_records):
    path = tmp_path / "bundle.json"
    path.write_text(json.dumps({
        "employees": sample_records,
        "metadata": {"totalRevenue": 5_000_000, "currency": "EUR", "currentCashBalance": 2_000_000},
        "benchmarks": {"rd_to_gtm_ratio": {"p25": 0.9, "median": 1.1, "p75": 1.4}},
        "employerCosts": [
            {"period": "2025-04-01", "totalCost": 85_000, "avgCostPerEmployee": 14_166.67, "avgCostRatio": 1.29},
            {"period": "2025-05-01", "totalCost": 90_000, "avgCostPerEmployee": 15_000, "avgCostRatio": 1.30},
        ],
        "previousScore": 61.5,
    }))
    return path


class TestLoadInputBundle:
    """Tests for load_input_bundle and write_json."""

    def test_full_bundle(self, bundle_path):
        bundle = load_input_bundle(bundle_path)
        assert len(bundle.employees) == 7
        assert bundle.metadata.total_revenue == 5_000_000
        assert bundle.metadata.currency == "EUR"
        assert bundle.benchmarks["rd_to_gtm_ratio"].median == 1.1
        assert len(bundle.employer_costs) == 2
        assert bundle.planned_costs is None
        assert bundle.previous_score == 61.5

    def test_minimal_bundle(self, tmp_path):
        path = tmp_path / "minimal.json"
        path.write_text(json.dumps({"employees": [{"id": "a", "department": "Sales"}]}))
        bundle = load_input_bundle(path)
        assert bundle.benchmarks == {}
        assert bundle.employer_costs is None
        assert bundle.previous_score is None
        assert bundle.metadata.total_revenue is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_input_bundle(tmp_path / "missing.json")

    def test_employees_required(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"metadata": {}}))
        with pytest.raises(ValueError, match="employees"):
            load_input_bundle(path)

    def test_write_json_creates_parents(self, tmp_path):
        target = tmp_path / "out" / "nested" / "result.json"
        write_json({"a": 1}, target)
        assert json.loads(target.read_text()) == {"a": 1}


class TestCalculateAllMetrics:
    """Tests for the core metrics orchestrator."""

    def test_sample_company(self, sample_employees, sample_metadata, now):
        result = calculate_all_metrics(sample_employees, sample_metadata, now=now)

        assert result.summary.employee_count == 6
        assert result.summary.total_cost == 970_000
        assert result.summary.total_fte == pytest.approx(5.5)
        assert result.summary.revenue_per_fte == pytest.approx(5_000_000 / 5.5)
        assert set(result.departments) == {"G&A", "R&D", "GTM"}
        assert result.ratios.rd_to_gtm == pytest.approx(2.0)
        assert len(result.outliers.low_span_managers) == 3
        assert result.tenure.avg_tenure_months == pytest.approx(26.0)
        assert result.calculated_at == now.to_pydatetime()

    def test_config_thresholds_apply(self, sample_employees, now):
        config = EngineConfig(min_manager_span=2)
        result = calculate_all_metrics(sample_employees, now=now, config=config)
        assert [m.manager_id for m in result.outliers.low_span_managers] == ["e5"]
        assert result.summary.revenue_per_fte is None

    def test_as_dict_is_json_serializable(self, sample_employees, now):
        payload = calculate_all_metrics(sample_employees, now=now).as_dict()
        assert payload["calculatedAt"] == "2025-06-15T00:00:00"
        assert json.loads(json.dumps(payload))["summary"]["employeeCount"] == 6


class TestRun:
    """Tests for run() and main()."""

    def test_all_sections(self, bundle_path):
        bundle = load_input_bundle(bundle_path)
        payload = run(bundle, "all", EngineConfig(), now="2025-06-15", show=False)
        assert set(payload) == {"metrics", "kpis", "health_score"}
        assert payload["health_score"]["trendChange"] == pytest.approx(
            payload["health_score"]["overallScore"] - 61.5
        )

    def test_single_section(self, bundle_path):
        bundle = load_input_bundle(bundle_path)
        payload = run(bundle, "kpis", EngineConfig(), now="2025-06-15", show=False)
        assert list(payload) == ["kpis"]
        assert len(payload["kpis"]) == 60

    def test_tables_are_printed(self, bundle_path, capsys):
        bundle = load_input_bundle(bundle_path)
        run(bundle, "all", EngineConfig(), now="2025-06-15")
        out = capsys.readouterr().out
        assert "Workforce Summary" in out
        assert "Health score" in out

    def test_main_writes_output(self, bundle_path, tmp_path):
        output = tmp_path / "result.json"
        main([str(bundle_path), "--json", "--now", "2025-06-15", "--section", "health", "--output", str(output)])
        written = json.loads(output.read_text())
        assert list(written) == ["health_score"]
        assert written["health_score"]["calculatedAt"] == "2025-06-15T00:00:00"

    def test_main_validates(self, bundle_path):
        main([str(bundle_path), "--validate", "--section", "metrics", "--now", "2025-06-15"])

    def test_main_validation_failure_exits(self, tmp_path):
        path = tmp_path / "invalid.json"
        path.write_text(json.dumps({"employees": [{"id": "a", "department": "Sales", "fteFactor": 2}]}))
        with pytest.raises(SystemExit) as exc:
            main([str(path), "--validate"])
        assert exc.value.code == 1

    def test_main_missing_input_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main([str(tmp_path / "missing.json")])
        assert exc.value.code == 1

    def test_main_bad_config_exits(self, bundle_path, tmp_path):
        config = tmp_path / "engine.yaml"
        config.write_text("unknown_setting: 1\n")
        with pytest.raises(SystemExit) as exc:
            main([str(bundle_path), "--config", str(config)])
        assert exc.value.code == 1
