"""
Response Parser for AI PR Review.

Recovers a summary, a score and categorized findings from a loosely
structured model response. Never raises: every gap degrades to an empty or
default value.
"""

import logging
import re
from typing import Optional

from ai_pr_review.models.schemas import (
    DETAILED_TAXONOMY,
    Finding,
    ParsedReview,
    ReviewTaxonomy,
    SectionKind,
    SectionSpec,
    Severity,
)
from ai_pr_review.models.snapshot import PullRequestSnapshot

DEFAULT_SCORE = 7
GENERAL_FILE = "general"

# Checked in order; first match wins.
SEVERITY_KEYWORDS: tuple[tuple[Severity, tuple[str, ...]], ...] = (
    (Severity.CRITICAL, ("critical", "security", "injection", "vulnerab")),
    (Severity.MAJOR, ("major", "bug")),
    (Severity.MINOR, ("minor",)),
)

_BULLET_RE = re.compile(r"^(?:[-•]|\*(?!\*)|\d+[.)])\s*")
_RULE_RE = re.compile(r"^([-*_])(?:\s*\1){2,}$")
_DECORATION_RE = re.compile(r"^(?:\d+[.)]|[\W_])+")
_HEADER_TAIL_RE = re.compile(
    r"^\s*(?:\([^)]*\))?[\s*_#]*(?::(?P<rest>.*)|[\s\-–—=]+(?P<number>\d.*)|[\W_]*)$"
)
_LOCATION_RE = re.compile(
    r"^[*_`]*\[`?(?P<file>[^\[\]`:]+?)`?(?::(?P<line>\d+)(?:\s*-\s*\d+)?)?\][*_`]*"
    r"\s*[:\-–]?\s*(?P<body>.*)$"
)
_SCORE_RE = re.compile(r"\d+")


def infer_severity(text: str) -> Severity:
    """
    Infer a severity from keywords in a finding.

    Args:
        text: Finding body.

    Returns:
        The first severity whose keyword appears, else SUGGESTION.
    """
    lowered = text.lower()
    for severity, keywords in SEVERITY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return severity
    return Severity.SUGGESTION


def extract_list_items(lines: list[str]) -> list[str]:
    """Keep bullet and ordinal lines, without their marker. Rules like `---` are skipped."""
    items = []
    for line in lines:
        stripped = line.strip()
        if not stripped or _RULE_RE.match(stripped):
            continue
        match = _BULLET_RE.match(stripped)
        if not match:
            continue
        item = stripped[match.end():].strip()
        if item:
            items.append(item)
    return items


def extract_score(lines: list[str]) -> Optional[int]:
    """First integer in the score section, if any."""
    match = _SCORE_RE.search("\n".join(lines))
    return int(match.group()) if match else None


class ResponseParser:
    """
    Section-bounded parser driven by a review taxonomy.

    Runs a small state machine over the response lines: one state per
    expected section, a header moves forward to a later section, and body
    lines accumulate in the current state. Sections whose header never
    appears are reported as missing and stay empty.
    """

    def __init__(self, taxonomy: ReviewTaxonomy = DETAILED_TAXONOMY) -> None:
        self._logger = logging.getLogger("ai_pr_review.response_parser")
        self._taxonomy = taxonomy
        self._header_patterns = [
            re.compile(
                r"^(?:"
                + "|".join(re.escape(h) for h in sorted(spec.headers, key=len, reverse=True))
                + r")(?!\w)",
                re.IGNORECASE,
            )
            for spec in taxonomy.sections
        ]

    @property
    def taxonomy(self) -> ReviewTaxonomy:
        """The taxonomy this parser expects."""
        return self._taxonomy

    def _match_header(self, line: str, candidates: list[int]) -> Optional[tuple[int, str]]:
        """
        Match the header of one of the candidate sections.

        Returns:
            (section index, text following the header on the same line) or None.
        """
        stripped = line.strip()
        if not stripped or stripped.startswith(("-", "•", "+", "* ")):
            return None

        decoration = _DECORATION_RE.match(stripped)
        candidate = stripped[decoration.end():] if decoration else stripped

        for index in candidates:
            match = self._header_patterns[index].match(candidate)
            if not match:
                continue
            tail = _HEADER_TAIL_RE.match(candidate[match.end():])
            if tail:
                rest = tail.group("rest") or tail.group("number") or ""
                rest = rest.strip().strip("*_").strip()
                return index, rest
        return None

    def split_sections(self, text: str) -> dict[str, Optional[list[str]]]:
        """
        Split a response into raw section bodies.

        Headers move forward through the taxonomy. The score is the one
        section models often lead with, so from the score state any section
        not seen yet may still start. A section is never opened twice.

        Returns:
            Mapping of section key to its lines, or None when the header was
            never found.
        """
        sections = self._taxonomy.sections
        bodies: dict[str, Optional[list[str]]] = {spec.key: None for spec in sections}
        state = -1  # preamble

        for line in (text or "").splitlines():
            if state >= 0 and sections[state].kind == SectionKind.SCORE:
                candidates = range(len(sections))
            else:
                candidates = range(state + 1, len(sections))
            unseen = [i for i in candidates if bodies[sections[i].key] is None]

            header = self._match_header(line, unseen)
            if header is not None:
                state, rest = header
                bodies[sections[state].key] = [rest] if rest else []
                continue
            if state >= 0:
                bodies[sections[state].key].append(line)

        return bodies

    @staticmethod
    def _looks_like_path(
        candidate: str,
        line: Optional[str],
        snapshot: Optional[PullRequestSnapshot],
    ) -> bool:
        # "[MAJOR] ..." is a tag, not a file.
        if not candidate:
            return False
        if line or "/" in candidate or "." in candidate:
            return True
        return bool(snapshot and snapshot.get_file(candidate))

    def _build_finding(
        self,
        item: str,
        spec: SectionSpec,
        snapshot: Optional[PullRequestSnapshot],
    ) -> Finding:
        """Turn one list item into a Finding."""
        file_name: Optional[str] = None
        line: Optional[int] = None
        body = item

        match = _LOCATION_RE.match(item)
        if match and self._looks_like_path(match.group("file").strip(), match.group("line"), snapshot):
            file_name = match.group("file").strip()
            if match.group("line"):
                line = int(match.group("line")) or None
            body = match.group("body").strip() or item

        if not file_name:
            file_name = snapshot.files[0].filename if snapshot and snapshot.files else GENERAL_FILE

        severity = spec.severity or infer_severity(body)
        return Finding(file=file_name, line=line, body=body, severity=severity)

    def parse(
        self,
        text: str,
        snapshot: Optional[PullRequestSnapshot] = None,
    ) -> ParsedReview:
        """
        Parse a model response.

        Args:
            text: Raw completion text.
            snapshot: PR snapshot used to attribute findings without a file.

        Returns:
            ParsedReview with empty or default values for anything missing.
        """
        bodies = self.split_sections(text)

        summary = ""
        score = DEFAULT_SCORE
        findings: dict[str, list[Finding]] = {}
        notes: dict[str, list[str]] = {}
        missing = [key for key, lines in bodies.items() if lines is None]

        for spec in self._taxonomy.sections:
            lines = bodies[spec.key] or []
            if spec.kind == SectionKind.SUMMARY:
                summary = "\n".join(
                    line for line in lines if not _RULE_RE.match(line.strip())
                ).strip()
            elif spec.kind == SectionKind.SCORE:
                parsed_score = extract_score(lines)
                if parsed_score is not None:
                    score = parsed_score
            elif spec.kind == SectionKind.FINDINGS:
                findings[spec.key] = [
                    self._build_finding(item, spec, snapshot)
                    for item in extract_list_items(lines)
                ]
            else:
                notes[spec.key] = extract_list_items(lines)

        if missing:
            self._logger.debug(f"Sections not found in response: {', '.join(missing)}")

        return ParsedReview(
            summary=summary,
            score=score,
            findings=findings,
            notes=notes,
            missing_sections=missing,
        )


def parse_review_response(
    text: str,
    snapshot: Optional[PullRequestSnapshot] = None,
    taxonomy: ReviewTaxonomy = DETAILED_TAXONOMY,
) -> ParsedReview:
    """Parse a model response with a one-off parser."""
    return ResponseParser(taxonomy).parse(text, snapshot)
