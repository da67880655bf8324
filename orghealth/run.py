"""Command-line runner: validate an input bundle and print metrics, KPIs and the health score."""

import argparse
import json
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from orghealth.calculator import CalculationResult, calculate_all_metrics
from orghealth.config import EngineConfig, load_engine_config
from orghealth.domains import workforce
from orghealth.domains.benchmarks import default_benchmark_map
from orghealth.domains.health_score import HealthScore, HealthStatus, calculate_health_score
from orghealth.domains.kpis import KPIResult, calculate_kpis, get_kpi_definition
from orghealth.utils.io import InputBundle, load_input_bundle, write_json
from orghealth.utils.types import Instant

console = Console()

SECTIONS = ("health", "metrics", "kpis", "all")

STATUS_STYLES = {
    HealthStatus.EXCELLENT: "green",
    HealthStatus.GOOD: "cyan",
    HealthStatus.WARNING: "yellow",
    HealthStatus.CRITICAL: "red",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def validate_bundle(bundle: InputBundle) -> bool:
    result = workforce.validate(bundle.employees, bundle.employer_costs)
    table = Table(title="Validation Results")
    table.add_column("Check")
    table.add_column("Valid")
    table.add_column("Details")

    status = "[green]✓[/green]" if result["valid"] else "[red]✗[/red]"
    table.add_row("employees", status, result["status"])
    for error in result["errors"]:
        table.add_row("", "[red]✗[/red]", error)
    console.print(table)
    return bool(result["valid"])


def _money(value: float | None, currency: str) -> str:
    return "N/A" if value is None else f"{value:,.0f} {currency}"


def print_metrics(result: CalculationResult, currency: str) -> None:
    summary = result.summary
    table = Table(title="Workforce Summary")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Employees", str(summary.employee_count))
    table.add_row("Total FTE", f"{summary.total_fte:.1f}")
    table.add_row("Total cost", _money(summary.total_cost, currency))
    table.add_row("Cost per FTE", _money(summary.cost_per_fte, currency))
    table.add_row("Revenue per FTE", _money(summary.revenue_per_fte, currency))
    table.add_row("R&D : GTM", f"{result.ratios.rd_to_gtm:.2f}")
    table.add_row("Manager : IC", f"{result.ratios.manager_to_ic:.2f}")
    table.add_row("Avg span of control", f"{result.ratios.avg_span_of_control:.1f}")
    if result.tenure is not None:
        table.add_row("Avg tenure", f"{result.tenure.avg_tenure_years:.1f} years")
    console.print(table)

    departments = Table(title="Departments")
    for column in ("Category", "Employees", "FTE", "Cost", "Share"):
        departments.add_column(column, justify="left" if column == "Category" else "right")
    for name, dept in result.departments.items():
        departments.add_row(
            name,
            str(dept.employee_count),
            f"{dept.fte:.1f}",
            _money(dept.cost, currency),
            f"{dept.percentage:.1f}%",
        )
    console.print(departments)

    outliers = result.outliers
    if outliers.high_cost_employees or outliers.low_span_managers:
        console.print(
            f"[yellow]{len(outliers.high_cost_employees)} high-cost outliers, "
            f"{len(outliers.low_span_managers)} low-span managers[/yellow]"
        )


def print_kpis(results: list[KPIResult]) -> None:
    table = Table(title="KPIs")
    table.add_column("KPI")
    table.add_column("Value", justify="right")
    table.add_column("Status")
    for r in results:
        if r.value is None:
            continue
        definition = get_kpi_definition(r.kpi_id)
        match r.status:
            case "good":
                status = "[green]good[/green]"
            case "warning":
                status = "[yellow]warning[/yellow]"
            case "bad":
                status = "[red]bad[/red]"
            case _:
                status = "-"
        table.add_row(definition.name if definition else r.kpi_id, r.formatted_value, status)
    console.print(table)


def print_health_score(score: HealthScore) -> None:
    style = STATUS_STYLES[score.status]
    console.print(
        f"\n[bold]Health score:[/bold] [{style}]{score.overall_score:.1f} ({score.grade})[/{style}]"
        f"  trend: {score.trend.value}  data completeness: {score.data_completeness:.0f}%"
    )

    table = Table(title="Dimensions")
    table.add_column("Dimension")
    table.add_column("Score", justify="right")
    table.add_column("Status")
    table.add_column("Metrics", justify="right")
    table.add_column("Completeness", justify="right")
    for dim in score.dimensions:
        dim_style = STATUS_STYLES[dim.status]
        table.add_row(
            dim.name,
            f"{dim.score:.1f}",
            f"[{dim_style}]{dim.status.value}[/{dim_style}]",
            f"{dim.metrics_available}/{dim.metrics_total}",
            f"{dim.data_completeness:.0f}%",
        )
    console.print(table)

    metrics = Table(title="Metrics")
    metrics.add_column("Dimension")
    metrics.add_column("Metric")
    metrics.add_column("Value", justify="right")
    metrics.add_column("Score", justify="right")
    for dim in score.dimensions:
        for m in dim.metrics:
            metric_style = STATUS_STYLES[m.status] if m.value is not None else "dim"
            metrics.add_row(
                dim.name,
                m.name,
                m.formatted_value,
                f"[{metric_style}]{m.score:.0f}[/{metric_style}]",
            )
    console.print(metrics)

    for heading, lines in (
        ("Strengths", score.strengths),
        ("Improvements", score.improvements),
        ("Recommendations", score.recommendations),
    ):
        if lines:
            console.print(f"\n[bold]{heading}[/bold]")
            for line in lines:
                console.print(f"  • {line}")


def run(
    bundle: InputBundle,
    section: str,
    config: EngineConfig,
    now: Instant = None,
    show: bool = True,
) -> dict:
    """Compute the requested sections and return their JSON-compatible payload."""
    payload = {}

    if section in ("metrics", "all"):
        metrics = calculate_all_metrics(bundle.employees, bundle.metadata, now=now, config=config)
        payload["metrics"] = metrics.as_dict()
        if show:
            print_metrics(metrics, bundle.metadata.currency or config.default_currency)

    if section in ("kpis", "all"):
        kpis = calculate_kpis(bundle.employees, bundle.metadata, now=now)
        payload["kpis"] = [k.as_dict() for k in kpis]
        if show:
            print_kpis(kpis)

    if section in ("health", "all"):
        benchmarks = bundle.benchmarks or default_benchmark_map(
            config.benchmark_industry, config.benchmark_company_size
        )
        score = calculate_health_score(
            bundle.employees,
            bundle.metadata,
            benchmarks=benchmarks,
            previous_score=bundle.previous_score,
            employer_costs=bundle.employer_costs,
            planned_costs=bundle.planned_costs,
            now=now,
            min_completeness=config.min_dimension_completeness,
            low_span_limit=config.low_span_limit,
            high_span_limit=config.high_span_limit,
            stable_band=config.stable_trend_band,
        )
        payload["health_score"] = score.as_dict()
        if show:
            print_health_score(score)

    return payload


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Compute organizational health metrics")
    parser.add_argument("input", type=str, help="JSON bundle with employees and metadata")
    parser.add_argument("--validate", action="store_true", help="Validate the input before calculating")
    parser.add_argument("--section", choices=SECTIONS, default="all", help="Which results to print")
    parser.add_argument("--json", action="store_true", help="Print results as JSON instead of tables")
    parser.add_argument("--output", type=str, help="Also write the JSON results to this file")
    parser.add_argument("--config", type=str, help="YAML file overriding engine settings")
    parser.add_argument("--now", type=str, help="Evaluation date (ISO 8601), defaults to today")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    try:
        config = load_engine_config(path=args.config)
        bundle = load_input_bundle(args.input)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]{exc}[/red]")
        sys.exit(1)

    if args.validate and not validate_bundle(bundle):
        sys.exit(1)

    payload = run(bundle, args.section, config, now=args.now, show=not args.json)
    if args.json:
        console.print_json(json.dumps(payload, default=str))

    if args.output:
        write_json(payload, args.output)


if __name__ == "__main__":
    main()
