from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar

from codeguard.normalizers.util import as_int, as_mapping, text_field

NO_SUMMARY = "No summary available"


def score_label(score: int) -> str:
    if score >= 90:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 40:
        return "Needs Work"
    return "Critical"


# ── Element views ────────────────────────────────────────────────
# Sequence elements are stored as the agent sent them. These views are
# the guarded way to read one; a malformed element yields empty strings.


@dataclass(frozen=True)
class Issue:
    title: str = ""
    description: str = ""
    line_reference: str = ""
    fix_suggestion: str = ""

    label_field: ClassVar[str] = ""

    @property
    def label(self) -> str:
        return getattr(self, self.label_field, "") if self.label_field else ""

    @classmethod
    def from_raw(cls, raw: Any) -> Issue:
        names = ["title", "description", "line_reference", "fix_suggestion"]
        if cls.label_field:
            names.append(cls.label_field)
        return cls(**{n: text_field(raw, n) for n in names})


@dataclass(frozen=True)
class SecurityIssue(Issue):
    severity: str = ""

    label_field: ClassVar[str] = "severity"


@dataclass(frozen=True)
class PerformanceIssue(Issue):
    impact: str = ""

    label_field: ClassVar[str] = "impact"


@dataclass(frozen=True)
class StyleIssue(Issue):
    category: str = ""

    label_field: ClassVar[str] = "category"


@dataclass(frozen=True)
class ChangelogEntry:
    change_type: str = ""
    title: str = ""
    description: str = ""
    before_snippet: str = ""
    after_snippet: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> ChangelogEntry:
        return cls(
            change_type=text_field(raw, "change_type"),
            title=text_field(raw, "title"),
            description=text_field(raw, "description"),
            before_snippet=text_field(raw, "before_snippet"),
            after_snippet=text_field(raw, "after_snippet"),
        )


@dataclass(frozen=True)
class PriorityEntry:
    rank: int
    title: str = ""
    category: str = ""
    reason: str = ""

    @classmethod
    def from_raw(cls, raw: Any, position: int) -> PriorityEntry:
        """*position* is the 1-based index, used when ``rank`` is missing."""
        return cls(
            rank=as_int(as_mapping(raw).get("rank"), default=position),
            title=text_field(raw, "title"),
            category=text_field(raw, "category"),
            reason=text_field(raw, "reason"),
        )


# ── Review result ────────────────────────────────────────────────


@dataclass(frozen=True)
class IssueCounts:
    security_total: int = 0
    security_critical: int = 0
    security_high: int = 0
    security_medium: int = 0
    security_low: int = 0
    performance_total: int = 0
    performance_high: int = 0
    performance_medium: int = 0
    performance_low: int = 0
    style_total: int = 0

    @property
    def total(self) -> int:
        return self.security_total + self.performance_total + self.style_total


@dataclass(frozen=True)
class ReviewResult:
    """A normalized review, as shown to the user.

    Immutability is shallow: fields cannot be reassigned and the sequences
    are tuples, but their elements are the agent's own objects, neither
    copied nor frozen. Read them through the views (`security_findings()`
    and friends) and do not mutate them. `sample_result()` builds a fresh
    deep copy on every call.
    """

    overall_score: int = 0
    fixed_score: int = 0
    summary: str = NO_SUMMARY
    language_detected: str = ""
    fixed_code: str = ""
    security_issues: tuple[Any, ...] = ()
    performance_issues: tuple[Any, ...] = ()
    style_issues: tuple[Any, ...] = ()
    fix_changelog: tuple[Any, ...] = ()
    issue_counts: IssueCounts = field(default_factory=IssueCounts)
    top_priorities: tuple[Any, ...] = ()

    @property
    def has_fix(self) -> bool:
        return bool(self.fixed_code)

    @property
    def score_improvement(self) -> int:
        return self.fixed_score - self.overall_score

    def security_findings(self) -> list[SecurityIssue]:
        return [SecurityIssue.from_raw(it) for it in self.security_issues]

    def performance_findings(self) -> list[PerformanceIssue]:
        return [PerformanceIssue.from_raw(it) for it in self.performance_issues]

    def style_findings(self) -> list[StyleIssue]:
        return [StyleIssue.from_raw(it) for it in self.style_issues]

    def changelog(self) -> list[ChangelogEntry]:
        return [ChangelogEntry.from_raw(it) for it in self.fix_changelog]

    def priorities(self) -> list[PriorityEntry]:
        return [PriorityEntry.from_raw(it, i) for i, it in enumerate(self.top_priorities, start=1)]

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["score_label"] = score_label(self.overall_score)
        d["total_issues"] = self.issue_counts.total
        return d
