"""
Markdown rendering of review reports and findings.

Shared by the file renderer and the GitHub summary review.
"""

from typing import Optional

from ai_pr_review.models.schemas import (
    Finding,
    ReviewReport,
    ReviewTaxonomy,
    SectionKind,
    get_taxonomy,
)

SEVERITY_EMOJI = {
    "critical": "🚨",
    "major": "⚠️",
    "minor": "📝",
    "suggestion": "💡",
}

SECTION_EMOJI = {
    "summary": "📋",
    "critical": "🚨",
    "warnings": "⚠️",
    "concerns": "⚠️",
    "good": "✅",
    "strengths": "✅",
    "recommendations": "💡",
}


def format_finding_comment(finding: Finding) -> str:
    """
    Format a finding as an inline GitHub comment.

    Args:
        finding: The finding to format.

    Returns:
        Markdown comment body.
    """
    emoji = SEVERITY_EMOJI.get(finding.severity.value, "📝")
    return f"{emoji} **{finding.severity.value.upper()}**\n\n{finding.body}"


def format_finding_markdown(finding: Finding) -> str:
    """Format a finding as one Markdown list item."""
    emoji = SEVERITY_EMOJI.get(finding.severity.value, "📝")
    return f"- {emoji} **{finding.severity.value.upper()}** `{finding.location}`: {finding.body}"


def format_report_markdown(
    report: ReviewReport,
    taxonomy: Optional[ReviewTaxonomy] = None,
) -> str:
    """
    Format a whole report as a Markdown document.

    Args:
        report: The report to format.
        taxonomy: Section scheme; looked up from the report if not provided.

    Returns:
        Markdown document.
    """
    taxonomy = taxonomy or get_taxonomy(report.taxonomy)

    md = "# 🤖 AI PR Code Review\n\n"
    md += f"**Repository:** {report.repository}  \n"
    md += f"**Pull Request:** #{report.pr_number}"
    if report.title:
        md += f" {report.title}"
    md += "  \n"
    md += f"**Overall Score:** {report.overall_score}/10\n\n"

    for spec in taxonomy.sections:
        emoji = SECTION_EMOJI.get(spec.key, "")
        heading = f"## {emoji} {spec.title}".replace("  ", " ")

        if spec.kind == SectionKind.SUMMARY:
            md += f"{heading}\n\n{report.summary or '_No summary provided._'}\n\n"
        elif spec.kind == SectionKind.FINDINGS:
            findings = report.findings_for(spec.key)
            md += f"{heading}\n\n"
            if findings:
                md += "\n".join(format_finding_markdown(f) for f in findings) + "\n\n"
            else:
                md += f"_No {spec.title.lower()} found._\n\n"
        elif spec.kind == SectionKind.NOTES:
            notes = report.notes_for(spec.key)
            if notes:
                md += f"{heading}\n\n"
                md += "\n".join(f"- {note}" for note in notes) + "\n\n"

    counts = report.severity_counts
    parts = [f"{count} {severity}" for severity, count in counts.items() if count]
    if parts:
        md += f"---\n_{len(report.all_findings)} finding(s): {', '.join(parts)}._\n"
    else:
        md += "---\n_No findings._\n"

    return md
