"""CLI for the Readiness Engine.

Provides command-line interface for scoring intake questionnaires and
synthesizing implementation plans.
"""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import EngineConfig, find_config_file, load_config
from .engine import ReadinessEngine, load_intake_file, validate_intake
from .schema import ImplementationPlan, ReadinessAssessment

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _resolve_config(config_path: Optional[str]) -> EngineConfig:
    """Explicit --config first, then the standard search locations."""
    path = Path(config_path) if config_path else find_config_file()
    if path is None:
        return EngineConfig()
    return load_config(path)


def _parse_today(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Expected YYYY-MM-DD, got {value}", param_hint="--today") from None


@click.group()
@click.version_option(version="1.0.0", prog_name="readiness-engine")
def main():
    """Implementation Readiness Engine.

    Scores onboarding intake questionnaires and builds rule-based
    implementation plans with clear, per-criterion reasoning.
    """
    pass


@main.command("assess")
@click.option(
    "--input", "-i",
    "input_file",
    required=True,
    type=click.Path(exists=True),
    help="Path to intake JSON file"
)
@click.option(
    "--out", "-o",
    type=click.Path(),
    help="Output file for JSON results"
)
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show per-criterion rationale and debug logging"
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True),
    help="Path to a readiness-config.yaml file"
)
@click.option(
    "--today",
    help="Plan start date (YYYY-MM-DD, default: today)"
)
@click.option(
    "--no-plan",
    is_flag=True,
    help="Skip implementation plan synthesis"
)
def assess_cmd(
    input_file: str,
    out: Optional[str],
    json_output: bool,
    verbose: bool,
    config_path: Optional[str],
    today: Optional[str],
    no_plan: bool,
):
    """Score an intake questionnaire and synthesize its implementation plan.

    Examples:
        readiness-engine assess -i intake.json
        readiness-engine assess -i intake.json -v --today 2026-01-05
        readiness-engine assess -i intake.json -j -o assessment.json
    """
    _setup_logging(verbose)
    start = _parse_today(today)

    try:
        engine = ReadinessEngine(_resolve_config(config_path))
        payload = load_intake_file(input_file)
        assessment = engine.assess(payload, today=start, include_plan=not no_plan)

        if json_output:
            output_json(assessment, out)
        else:
            display_assessment(assessment, verbose)
            if out:
                output_json(assessment, out)
                console.print(f"\n[green]Results saved to {out}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("plan")
@click.option(
    "--input", "-i",
    "input_file",
    required=True,
    type=click.Path(exists=True),
    help="Path to intake JSON file"
)
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True),
    help="Path to a readiness-config.yaml file"
)
@click.option(
    "--today",
    help="Plan start date (YYYY-MM-DD, default: today)"
)
def plan_cmd(input_file: str, json_output: bool, config_path: Optional[str], today: Optional[str]):
    """Synthesize only the implementation plan for an intake.

    Example:
        readiness-engine plan -i intake.json --today 2026-01-05
    """
    start = _parse_today(today)

    try:
        engine = ReadinessEngine(_resolve_config(config_path))
        plan = engine.plan(load_intake_file(input_file), today=start)

        if json_output:
            print(plan.model_dump_json(indent=2))
        else:
            display_plan(plan)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("validate")
@click.option(
    "--input", "-i",
    "input_file",
    required=True,
    type=click.Path(exists=True),
    help="Path to intake JSON file"
)
def validate_cmd(input_file: str):
    """Validate an intake file against its persona's section roster.

    Example:
        readiness-engine validate -i intake.json
    """
    try:
        payload = load_intake_file(input_file)
    except Exception as e:
        console.print(f"[red]✗ Intake invalid: {input_file}[/red]")
        console.print(f"  - {e}")
        sys.exit(1)

    is_valid, issues = validate_intake(payload)
    if is_valid and not issues:
        console.print(f"[green]✓ Intake valid: {input_file}[/green]")
    elif is_valid:
        console.print(f"[yellow]✓ Intake valid with warnings: {input_file}[/yellow]")
        for issue in issues:
            console.print(f"  - {issue}")
    else:
        console.print(f"[red]✗ Intake invalid: {input_file}[/red]")
        for issue in issues:
            console.print(f"  - {issue}")

    sys.exit(0 if is_valid else 1)


def display_assessment(assessment: ReadinessAssessment, verbose: bool):
    """Display an assessment in formatted text."""
    result = assessment.result
    overall = result.readiness_score.overall
    score_color = "green" if overall >= 80 else "yellow" if overall >= 60 else "red"

    console.print(Panel(
        f"Persona: [bold]{result.persona.value}[/bold]\n\n"
        f"Readiness Score: [bold {score_color}]{overall}[/bold {score_color}] / 100\n"
        f"Status: [bold]{result.status_label}[/bold]\n"
        f"Timeline Confidence: {result.timeline_confidence}\n\n"
        f"[dim]{result.status_description}[/dim]",
        title="Readiness Summary",
    ))

    table = Table(title="Section Breakdown")
    table.add_column("Section", style="cyan")
    table.add_column("Score", justify="right")
    for section, score in result.readiness_score.breakdown.items():
        color = "green" if score >= 80 else "yellow" if score >= 40 else "red"
        table.add_row(section, f"[{color}]{score}[/{color}]")
    console.print(table)

    if verbose:
        for section, rationale in result.rationales.items():
            console.print(f"\n[bold]{section}[/bold]")
            for criterion, reason in rationale.items():
                console.print(f"  • {criterion}: [dim]{reason}[/dim]")

    if assessment.implementation_plan:
        console.print()
        display_plan(assessment.implementation_plan)


def display_plan(plan: ImplementationPlan):
    """Display an implementation plan in formatted text."""
    console.print(
        f"[bold]Implementation Plan[/bold]: {plan.estimated_timeline}, "
        f"recommended go-live [bold cyan]{plan.recommended_go_live.isoformat()}[/bold cyan]"
    )

    status_style = {"Ready": "green", "Blocked": "red", "Scheduled": "white"}
    table = Table()
    table.add_column("#", justify="right")
    table.add_column("Phase", style="cyan")
    table.add_column("Duration", justify="right")
    table.add_column("Status")
    table.add_column("Activities")
    for phase in plan.phases:
        style = status_style.get(phase.status, "white")
        table.add_row(
            str(phase.phase),
            phase.name,
            phase.duration,
            f"[{style}]{phase.status}[/{style}]",
            "\n".join(phase.activities),
        )
    console.print(table)

    if plan.internal_notes:
        console.print("\n[dim]Internal notes:[/dim]")
        for note in plan.internal_notes:
            console.print(f"  [dim]• {note}[/dim]")


def output_json(assessment: ReadinessAssessment, out_path: Optional[str]):
    """Output assessment as JSON."""
    json_str = assessment.model_dump_json(indent=2)

    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(json_str)
    else:
        print(json_str)


@main.command("init-config")
@click.option(
    "--out", "-o",
    type=click.Path(),
    default="readiness-config.yaml",
    help="Output path for the configuration file"
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing config file"
)
def init_config_cmd(out: str, force: bool):
    """Generate a default readiness engine configuration file.

    Example:
        readiness-engine init-config --out my-config.yaml
    """
    from .config import save_default_config

    out_path = Path(out)
    if out_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists: {out}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        save_default_config(out_path)
        console.print(f"[green]✓[/green] Config file created: {out}")
        console.print("\nThis file configures:")
        console.print("  • planning.base_weeks - Baseline plan duration before multipliers")
        console.print("  • scoring.weight_overrides - Section weight table per persona")
        console.print("  • scoring.timeline_confidence - Score thresholds for high/medium confidence")
        console.print("\nThe engine will look for config in this order:")
        console.print("  1. READINESS_ENGINE_CONFIG environment variable")
        console.print("  2. ./readiness-config.yaml (current directory)")
        console.print("  3. ~/.config/readiness-engine/config.yaml")
    except Exception as e:
        console.print(f"[red]Error creating config:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
