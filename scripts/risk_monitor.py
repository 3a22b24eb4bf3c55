# ABOUTME: Provides a CLI over the student roster for scoring, alerts, and imports.
# ABOUTME: Loads the risk policy from YAML and renders results with rich tables.

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from src.common.advisory import class_summary, format_advice, intervention_advice, student_guidance
from src.common.alerts import TIER_DISPLAY, build_alert_report, class_overview, rank_alerts, tier_info
from src.common.config import MonitorConfig, load_config
from src.roster import JsonStudentRepository, RosterService, apply_risk, attendance_report, parse_roster_csv

console = Console()
app = typer.Typer(help="Monitor student academic risk from grades and attendance.")


def _service(config_path: Optional[Path], roster_path: Optional[Path]) -> RosterService:
    try:
        cfg: MonitorConfig = load_config(config_path)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Invalid configuration: {exc}[/red]")
        raise typer.Exit(code=1)
    repository = JsonStudentRepository(roster_path or cfg.roster_path)
    return RosterService(repository, cfg.policy)


def _scored_students(service: RosterService):
    """Fresh risk for display only; the stored roster is left untouched."""
    return [apply_risk(s, service.policy) for s in service.students()]


def _find_scored(service: RosterService, student_id: str):
    return next((s for s in _scored_students(service) if s.student_id == student_id), None)


def _tier_label(student) -> str:
    display = TIER_DISPLAY[student.risk_level]
    return f"[{display.color}]{display.label}[/{display.color}]"


@app.command()
def score(
    student_id: str = typer.Option(..., "--student-id", help="School ID of the student to score."),
    config: Optional[Path] = typer.Option(None, "--config", help="Risk policy YAML path."),
    roster: Optional[Path] = typer.Option(None, "--roster", help="Roster JSON path; overrides config."),
) -> None:
    """
    Recompute and show one student's failure probability, tier, and flags.
    """
    service = _service(config, roster)
    student = _find_scored(service, student_id)
    if student is None:
        console.print(f"[red]No student with ID {student_id}[/red]")
        raise typer.Exit(code=1)

    console.rule(f"[bold blue]{student.full_name}[/bold blue]")
    console.print(f"[bold]Failure probability:[/] {student.failure_probability:.2%}")
    console.print(f"[bold]Tier:[/] {_tier_label(student)}")

    flags_table = Table(show_header=True, header_style="bold magenta")
    flags_table.add_column("Flag")
    flags_table.add_column("Raised")
    flags_table.add_row("Slipping trend", str(student.risk_flags.slipping))
    flags_table.add_row("Sudden drop", str(student.risk_flags.sudden_drop))
    flags_table.add_row("Chronic absentee", str(student.risk_flags.chronic_absentee))
    console.print(flags_table)
    console.print(f"[italic]{student_guidance(student.risk_flags)}[/italic]")


@app.command()
def alerts(
    tier: Optional[str] = typer.Option(None, "--tier", help="Filter to one tier, e.g. HIGH or EARLY_WARNING."),
    output: Optional[Path] = typer.Option(None, "--output", help="Optional CSV path for the alert report."),
    config: Optional[Path] = typer.Option(None, "--config", help="Risk policy YAML path."),
    roster: Optional[Path] = typer.Option(None, "--roster", help="Roster JSON path; overrides config."),
) -> None:
    """
    List non-Low students ranked by failure probability.
    """
    service = _service(config, roster)
    students = _scored_students(service)
    try:
        ranked = rank_alerts(students, tier)
    except ValueError:
        console.print(f"[red]Unknown tier '{tier}'[/red]")
        raise typer.Exit(code=1)

    overview = class_overview(students)
    console.print(
        f"[bold]{overview.total} students:[/] {overview.high_risk} high, "
        f"{overview.mid_risk} mid, {overview.low_risk} low"
    )
    console.print(f"[italic]{class_summary(overview)}[/italic]")

    if not ranked:
        console.print("[green]No Tier 1-3 risks found.[/green]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Student ID")
    table.add_column("Name")
    table.add_column("Tier")
    table.add_column("Probability")
    table.add_column("Note")
    for student in ranked:
        info = tier_info(student.risk_level)
        table.add_row(
            student.student_id,
            student.full_name,
            _tier_label(student),
            f"{student.failure_probability:.2f}",
            info.description if info else "",
        )
    console.print(table)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        build_alert_report(students, tier).to_csv(output, index=False)
        console.print(f"[bold]Alert report saved to {output}[/bold]")


@app.command("import-roster")
def import_roster(
    csv_path: Path = typer.Argument(..., help="CSV with name, student ID, course, year, block columns."),
    config: Optional[Path] = typer.Option(None, "--config", help="Risk policy YAML path."),
    roster: Optional[Path] = typer.Option(None, "--roster", help="Roster JSON path; overrides config."),
) -> None:
    """
    Bulk-add students from a CSV file.
    """
    if not csv_path.exists():
        console.print(f"[red]Missing CSV at {csv_path}[/red]")
        raise typer.Exit(code=1)
    try:
        new_students = parse_roster_csv(csv_path)
    except ValueError as exc:
        console.print(f"[red]Error parsing CSV: {exc}[/red]")
        raise typer.Exit(code=1)

    service = _service(config, roster)
    service.import_students(new_students)
    console.print(f"[bold green]Imported {len(new_students)} students.[/bold green]")


@app.command("attendance-report")
def attendance_report_cmd(
    output: Path = typer.Option(..., "--output", help="CSV path for the attendance report."),
    block: Optional[str] = typer.Option(None, "--block", help="Only include one block/section."),
    config: Optional[Path] = typer.Option(None, "--config", help="Risk policy YAML path."),
    roster: Optional[Path] = typer.Option(None, "--roster", help="Roster JSON path; overrides config."),
) -> None:
    """
    Export a student-by-session attendance grid.
    """
    service = _service(config, roster)
    report = attendance_report(service.students(), block=block)
    output.parent.mkdir(parents=True, exist_ok=True)
    report.to_csv(output, index=False)
    console.print(f"[bold]Attendance for {len(report):,} students saved to {output}[/bold]")


@app.command()
def advise(
    student_id: str = typer.Option(..., "--student-id", help="School ID of the student."),
    config: Optional[Path] = typer.Option(None, "--config", help="Risk policy YAML path."),
    roster: Optional[Path] = typer.Option(None, "--roster", help="Roster JSON path; overrides config."),
) -> None:
    """
    Print a short intervention strategy for one student.
    """
    service = _service(config, roster)
    student = _find_scored(service, student_id)
    if student is None:
        console.print(f"[red]No student with ID {student_id}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[bold]{student.full_name}[/] ({_tier_label(student)}, {student.failure_probability:.1%})")
    console.print(format_advice(intervention_advice(student)))


@app.command()
def reminders(
    within_hours: float = typer.Option(1.0, "--within-hours", help="Look-ahead window for scheduled meetings."),
    config: Optional[Path] = typer.Option(None, "--config", help="Risk policy YAML path."),
    roster: Optional[Path] = typer.Option(None, "--roster", help="Roster JSON path; overrides config."),
) -> None:
    """
    Show intervention meetings scheduled in the next window.
    """
    service = _service(config, roster)
    upcoming = service.upcoming_interventions(now=datetime.now(), within_hours=within_hours)
    if not upcoming:
        console.print("[green]No upcoming interventions.[/green]")
        return
    for line in upcoming:
        console.print(f"[yellow]{line}[/yellow]")


if __name__ == "__main__":
    app()
