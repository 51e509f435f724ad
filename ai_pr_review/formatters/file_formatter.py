"""File renderer for review reports."""

import logging
from pathlib import Path

from ai_pr_review.formatters.markdown import format_report_markdown
from ai_pr_review.models.schemas import ReviewReport

DEFAULT_OUTPUT_FILE = "./review-report.md"


class FileFormatter:
    """Writes a report to a Markdown file."""

    def __init__(self) -> None:
        self._logger = logging.getLogger("ai_pr_review.file_formatter")

    def format(self, report: ReviewReport, output_path: str = DEFAULT_OUTPUT_FILE) -> Path:
        """
        Write the report.

        Args:
            report: The report to write.
            output_path: Destination file; parent directories are created.

        Returns:
            Path of the written file.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(format_report_markdown(report), encoding="utf-8")

        self._logger.info(f"Wrote review report to {path}")
        return path
