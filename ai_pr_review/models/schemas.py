"""
Pydantic schemas for AI PR Review.

Defines review taxonomies, findings, the canonical review report and the
outcome records of publishing comments back to a pull request.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Severity(str, Enum):
    """Severity levels for findings, most urgent first."""

    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"
    SUGGESTION = "suggestion"


class SectionKind(str, Enum):
    """What a section of the model response holds."""

    SUMMARY = "summary"
    FINDINGS = "findings"
    NOTES = "notes"
    SCORE = "score"


class SectionSpec(BaseModel):
    """
    One expected section of the model response.

    Attributes:
        key: Category key used in the report.
        headers: Header words accepted for this section, case-insensitive.
        kind: What the section body is parsed into.
        severity: Fixed severity for findings sections; None means inferred.
        title: Heading used by renderers.
        instruction: What the prompt asks the model to put in the section.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1)
    headers: tuple[str, ...] = Field(..., min_length=1)
    kind: SectionKind
    severity: Optional[Severity] = None
    title: str = ""
    instruction: str = ""


class ReviewTaxonomy(BaseModel):
    """
    An ordered category scheme shared by the prompt and the parser.

    The sections appear in the model response in this order.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    sections: tuple[SectionSpec, ...]

    @property
    def finding_keys(self) -> list[str]:
        """Keys of sections parsed into findings."""
        return [s.key for s in self.sections if s.kind == SectionKind.FINDINGS]


_SUMMARY_SECTION = SectionSpec(
    key="summary",
    headers=("SUMMARY", "OVERVIEW"),
    kind=SectionKind.SUMMARY,
    title="Summary",
    instruction="Brief overview of the changes",
)

_SCORE_SECTION = SectionSpec(
    key="score",
    headers=("OVERALL SCORE", "SCORE", "RATING"),
    kind=SectionKind.SCORE,
    title="Score",
    instruction="Rate the pull request from 1-10 as a single integer",
)

DETAILED_TAXONOMY = ReviewTaxonomy(
    name="detailed",
    sections=(
        _SUMMARY_SECTION,
        SectionSpec(
            key="strengths",
            headers=("STRENGTHS",),
            kind=SectionKind.NOTES,
            title="Strengths",
            instruction="What's good about this PR (list 2-4 points)",
        ),
        SectionSpec(
            key="concerns",
            headers=("CONCERNS", "ISSUES"),
            kind=SectionKind.FINDINGS,
            title="Concerns",
            instruction=(
                "Issues found, one per bullet, each prefixed with [file:line] and "
                "stating its severity: critical/major/minor/suggestion"
            ),
        ),
        SectionSpec(
            key="recommendations",
            headers=("RECOMMENDATIONS", "SUGGESTIONS"),
            kind=SectionKind.NOTES,
            title="Recommendations",
            instruction="Actionable improvements",
        ),
        _SCORE_SECTION,
    ),
)

TRIAGE_TAXONOMY = ReviewTaxonomy(
    name="triage",
    sections=(
        _SUMMARY_SECTION,
        SectionSpec(
            key="critical",
            headers=("CRITICAL ISSUES", "CRITICAL"),
            kind=SectionKind.FINDINGS,
            severity=Severity.CRITICAL,
            title="Critical Issues",
            instruction="Must fix before merge, one per bullet, each prefixed with [file:line]",
        ),
        SectionSpec(
            key="warnings",
            headers=("WARNINGS", "WARNING"),
            kind=SectionKind.FINDINGS,
            severity=Severity.MAJOR,
            title="Warnings",
            instruction="Should be addressed, one per bullet, each prefixed with [file:line]",
        ),
        SectionSpec(
            key="good",
            headers=("GOOD PRACTICES", "GOOD", "POSITIVE NOTES"),
            kind=SectionKind.NOTES,
            title="Good Practices",
            instruction="What is done well",
        ),
        _SCORE_SECTION,
    ),
)

TAXONOMIES: dict[str, ReviewTaxonomy] = {
    DETAILED_TAXONOMY.name: DETAILED_TAXONOMY,
    TRIAGE_TAXONOMY.name: TRIAGE_TAXONOMY,
}


def get_taxonomy(name: str) -> ReviewTaxonomy:
    """Look up a taxonomy by name."""
    try:
        return TAXONOMIES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown taxonomy {name!r}. Choose one of: {', '.join(TAXONOMIES)}"
        ) from None


class Finding(BaseModel):
    """
    One reviewer observation.

    Attributes:
        file: Target file path, or "general" when unattributable.
        line: Optional head-revision line number.
        body: The observation text.
        severity: Inferred severity.
    """

    model_config = ConfigDict(frozen=True)

    file: str = Field(..., min_length=1, description="Target file path")
    line: Optional[int] = Field(None, ge=1, description="Head-revision line number")
    body: str = Field(..., min_length=1, description="Observation text")
    severity: Severity = Field(default=Severity.SUGGESTION, description="Severity level")

    @property
    def location(self) -> str:
        """file:line, or just file when there is no line."""
        return f"{self.file}:{self.line}" if self.line is not None else self.file


class ParsedReview(BaseModel):
    """Structured content recovered from a model response."""

    model_config = ConfigDict(frozen=True)

    summary: str = ""
    score: int = 7
    findings: dict[str, list[Finding]] = Field(default_factory=dict)
    notes: dict[str, list[str]] = Field(default_factory=dict)
    missing_sections: list[str] = Field(default_factory=list)


class ReviewReport(BaseModel):
    """
    Canonical review result consumed by every renderer.

    Attributes:
        repository: Repository in owner/repo form.
        pr_number: Pull request number.
        title: Pull request title.
        summary: Review summary text.
        overall_score: Score as given by the model; not clamped.
        taxonomy: Name of the category scheme.
        findings: Findings per category, in section order.
        notes: Plain-text notes per category, in section order.
    """

    model_config = ConfigDict(frozen=True)

    repository: str = Field(..., min_length=3)
    pr_number: int = Field(..., ge=1)
    title: str = ""
    summary: str = ""
    overall_score: int = 7
    taxonomy: str = DETAILED_TAXONOMY.name
    findings: dict[str, list[Finding]] = Field(default_factory=dict)
    notes: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("repository", mode="after")
    @classmethod
    def validate_repository(cls, v: str) -> str:
        """Require owner/repo form."""
        owner, _, repo = v.partition("/")
        if not owner or not repo or "/" in repo:
            raise ValueError("repository must be in owner/repo form")
        return v

    def findings_for(self, category: str) -> list[Finding]:
        """Findings of one category, empty if absent."""
        return self.findings.get(category, [])

    def notes_for(self, category: str) -> list[str]:
        """Notes of one category, empty if absent."""
        return self.notes.get(category, [])

    @property
    def all_findings(self) -> list[Finding]:
        """Every finding, in category order."""
        return [finding for items in self.findings.values() for finding in items]

    @property
    def severity_counts(self) -> dict[str, int]:
        """Number of findings per severity."""
        counts = {s.value: 0 for s in Severity}
        for finding in self.all_findings:
            counts[finding.severity.value] += 1
        return counts


class InlineComment(BaseModel):
    """A candidate inline comment on a pull request file."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1)
    line: Optional[int] = Field(None, ge=1)
    body: str = Field(..., min_length=1)

    @property
    def location(self) -> str:
        """path:line for log and console messages."""
        return f"{self.path}:{self.line}" if self.line is not None else self.path


class DispatchStatus(str, Enum):
    """Outcome of one inline comment."""

    POSTED = "posted"
    SKIPPED_INVALID_LINE = "skipped_invalid_line"
    FAILED_REMOTE = "failed_remote"


class CommentDispatchResult(BaseModel):
    """Outcome of attempting one inline comment."""

    model_config = ConfigDict(frozen=True)

    comment: InlineComment
    status: DispatchStatus
    error: Optional[str] = None


class DispatchSummary(BaseModel):
    """Ordered per-comment outcomes with aggregate counts."""

    results: list[CommentDispatchResult] = Field(default_factory=list)

    def _count(self, status: DispatchStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def posted(self) -> int:
        """Number of comments accepted by GitHub."""
        return self._count(DispatchStatus.POSTED)

    @property
    def skipped(self) -> int:
        """Number of comments not sent because their line is not in the diff."""
        return self._count(DispatchStatus.SKIPPED_INVALID_LINE)

    @property
    def failed(self) -> int:
        """Number of comments GitHub rejected or that hit a network error."""
        return self._count(DispatchStatus.FAILED_REMOTE)
