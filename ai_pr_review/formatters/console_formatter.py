"""Console renderer for review reports."""

from typing import Optional

from rich.console import Console
from rich.markup import escape

from ai_pr_review.models.schemas import ReviewReport, SectionKind, get_taxonomy

_SECTION_STYLE = {
    "critical": "red",
    "warnings": "yellow",
    "concerns": "yellow",
    "good": "green",
    "strengths": "green",
    "recommendations": "blue",
}

_SEVERITY_STYLE = {
    "critical": "bold red",
    "major": "red",
    "minor": "yellow",
    "suggestion": "blue",
}

_WIDTH = 80


class ConsoleFormatter:
    """Prints a report to the terminal with rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()

    def _rule(self, title: str, style: str) -> None:
        self._console.print(f"[bold {style}]{'━' * _WIDTH}[/bold {style}]")
        self._console.print(f"[bold {style}]{title}[/bold {style}]")
        self._console.print(f"[bold {style}]{'━' * _WIDTH}[/bold {style}]")

    @staticmethod
    def format_score(score: int) -> str:
        """Colour a score: green from 8, yellow from 6, red below."""
        if score >= 8:
            return f"[bold green]{score}/10 ⭐[/bold green]"
        if score >= 6:
            return f"[bold yellow]{score}/10[/bold yellow]"
        return f"[bold red]{score}/10[/bold red]"

    def format(self, report: ReviewReport) -> None:
        """Print the report."""
        taxonomy = get_taxonomy(report.taxonomy)
        console = self._console

        console.print()
        console.print(f"[bold cyan]{'═' * _WIDTH}[/bold cyan]")
        console.print("[bold cyan]  🤖 AI PR CODE REVIEW REPORT[/bold cyan]")
        console.print(f"[bold cyan]{'═' * _WIDTH}[/bold cyan]")
        console.print()
        console.print(f"[bold]Repository:[/bold] {escape(report.repository)}")
        console.print(f"[bold]PR Number:[/bold] #{report.pr_number} {escape(report.title)}")
        console.print(f"[bold]Overall Score:[/bold] {self.format_score(report.overall_score)}")
        console.print()

        for spec in taxonomy.sections:
            if spec.kind == SectionKind.SUMMARY:
                self._rule("📋 SUMMARY", "blue")
                console.print(escape(report.summary or "No summary provided."))
                console.print()

            elif spec.kind == SectionKind.FINDINGS:
                findings = report.findings_for(spec.key)
                if not findings:
                    self._rule(spec.title.upper(), "green")
                    console.print(f"[green]  ✓ No {spec.title.lower()} found[/green]")
                    console.print()
                    continue

                self._rule(spec.title.upper(), _SECTION_STYLE.get(spec.key, "yellow"))
                for index, finding in enumerate(findings, start=1):
                    style = _SEVERITY_STYLE.get(finding.severity.value, "white")
                    console.print(
                        f"  [bold]{index}. {escape(finding.location)}[/bold] "
                        f"[{style}]{finding.severity.value.upper()}[/{style}]"
                    )
                    console.print(f"     {escape(finding.body)}")
                    console.print()

            elif spec.kind == SectionKind.NOTES:
                notes = report.notes_for(spec.key)
                if not notes:
                    continue
                style = _SECTION_STYLE.get(spec.key, "green")
                self._rule(spec.title.upper(), style)
                for note in notes:
                    console.print(f"[{style}]  ✓ {escape(note)}[/{style}]")
                console.print()

        console.print(f"[bold cyan]{'═' * _WIDTH}[/bold cyan]")
        console.print()
