"""
CLI Interface for the content validator.

Renders validation results, rubrics and provider status with rich.
"""

from typing import Any, Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from content_validator.core.models import DualValidationResult, RubricSpec


# Semantic color palette
class Colors:
    """Semantic colors for consistent UI."""
    SUCCESS = "bright_green"
    WARNING = "yellow"
    ERROR = "red"
    INFO = "blue"
    PRIMARY = "cyan"
    ACCENT = "magenta"
    DIM = "grey50"


def confidence_color(confidence: float) -> str:
    if confidence >= 0.8:
        return Colors.SUCCESS
    if confidence >= 0.5:
        return Colors.WARNING
    return Colors.ERROR


class CLI:
    """
    Command-line rendering.

    Provides methods for:
    - Displaying a validation result
    - Displaying a rubric
    - Displaying provider configuration
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def show_info(self, message: str):
        """Display an info message."""
        self.console.print(f"[{Colors.PRIMARY}]{message}[/{Colors.PRIMARY}]")

    def show_warning(self, message: str):
        """Display a warning message."""
        self.console.print(f"[{Colors.WARNING}]⚠ {message}[/{Colors.WARNING}]")

    def show_error(self, message: str, solution: str = None):
        """
        Display an error message with optional solution guidance.

        Args:
            message: Error message
            solution: Optional solution or guidance
        """
        if solution:
            self.console.print(Panel(
                f"[red]✗ {message}[/red]\n\n[bold]Solution:[/bold] {solution}",
                title="[bold red]Error[/bold red]",
                border_style="red",
                padding=(0, 1),
            ))
        else:
            self.console.print(f"[red]✗ {message}[/red]")

    def show_progress_event(self, event_type: str, data: Dict[str, Any]):
        """Progress callback for ComparisonProvider."""
        if event_type == "round_start":
            self.console.print(f"[bold cyan]▶[/bold cyan] Round {data['round']}...")
        elif event_type == "provider_complete":
            if data.get("genuine"):
                self.console.print(
                    f"  [green]✓[/green] {data['provider']}: {data['score']:g}/100"
                )
            else:
                self.console.print(
                    f"  [yellow]⚠[/yellow] {data['provider']}: stub ({data.get('error_kind')})"
                )

    # ==================== RESULTS ====================

    def show_result(self, result: DualValidationResult, rubric: RubricSpec):
        """
        Display a validation result.

        Args:
            result: Engine output
            rubric: Rubric used (for criterion names)
        """
        if result.preprocessing:
            for warning in result.preprocessing.warnings:
                self.show_warning(warning)

        r1 = result.round1_results
        r2 = result.round2_results

        table = Table(show_header=True, header_style="bold cyan", title=f"{rubric.title} validation")
        table.add_column("Criterion")
        table.add_column("Max", justify="right")
        table.add_column("R1 A", justify="right", style=Colors.DIM)
        table.add_column("R1 B", justify="right", style=Colors.DIM)
        table.add_column("R2 A", justify="right")
        table.add_column("R2 B", justify="right")
        table.add_column("Final", justify="right", style="bold")
        table.add_column("Confidence", justify="right")

        for criterion in rubric.criteria:
            key = criterion.key
            final = result.final_score[key]
            color = confidence_color(final.confidence)
            table.add_row(
                criterion.name,
                str(criterion.max_points),
                f"{r1.provider_a.score_breakdown[key].score:g}",
                f"{r1.provider_b.score_breakdown[key].score:g}",
                f"{r2.provider_a.score_breakdown[key].score:g}",
                f"{r2.provider_b.score_breakdown[key].score:g}",
                str(final.score),
                f"[{color}]{final.confidence:.0%}[/{color}]",
            )

        self.console.print(table)

        providers = ", ".join(p.value for p in result.providers) or "none (stub only)"
        color = confidence_color(result.overall_confidence)
        summary = (
            f"[bold]Overall score:[/bold] {result.overall_score}/100\n"
            f"[bold]Confidence:[/bold] [{color}]{result.overall_confidence:.0%}[/{color}]\n"
            f"[bold]Genuine providers:[/bold] {providers}\n"
            f"[bold]Processing time:[/bold] {result.processing_time_ms} ms"
        )
        self.console.print(Panel(
            summary,
            title="[bold]Result[/bold]",
            border_style="yellow" if result.degraded else "green",
            padding=(0, 1),
        ))

        issues = [
            (rubric.criterion(key).name, issue)
            for key, c in result.final_score.items()
            for issue in c.issues
        ]
        if issues:
            self.console.print("[bold]Issues[/bold]")
            for name, issue in issues:
                self.console.print(f"  [{Colors.WARNING}]•[/{Colors.WARNING}] {name}: {issue}")

        feedback = r2.provider_a if not r2.provider_a.is_stub else r2.provider_b
        if feedback.suggestion:
            self.console.print(f"\n[bold]Suggestion:[/bold] {feedback.suggestion}")

    # ==================== RUBRIC & PROVIDERS ====================

    def show_rubric(self, rubric: RubricSpec):
        """Display a rubric's criteria."""
        table = Table(show_header=True, header_style="bold", title=f"{rubric.title} rubric")
        table.add_column("Key", style=Colors.PRIMARY)
        table.add_column("Criterion")
        table.add_column("Max", justify="right")
        table.add_column("Description", style=Colors.DIM)
        for c in rubric.criteria:
            table.add_row(c.key, c.name, str(c.max_points), c.description)
        table.add_row("", "[bold]Total[/bold]", f"[bold]{sum(c.max_points for c in rubric.criteria)}[/bold]", "")
        self.console.print(table)

    def show_providers(self, status: Dict[str, Dict[str, Any]]):
        """Display provider configuration status (never keys)."""
        table = Table(show_header=True, header_style="bold", box=None)
        table.add_column("Provider", style=Colors.PRIMARY)
        table.add_column("Model")
        table.add_column("Configured")
        table.add_column("Slot")
        for name, info in status.items():
            slots = [s for s, used in (("A", info["slot_a"]), ("B", info["slot_b"])) if used]
            configured = "[green]yes[/green]" if info["configured"] else "[red]no (stub)[/red]"
            table.add_row(name, info["model"] or "-", configured, ", ".join(slots) or "-")
        self.console.print(table)
