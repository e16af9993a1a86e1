"""Tests for review result views and the built-in sample."""

import dataclasses

import pytest

from codeguard.domain.models import (
    ChangelogEntry,
    IssueCounts,
    PerformanceIssue,
    PriorityEntry,
    ReviewResult,
    SecurityIssue,
    StyleIssue,
    score_label,
)
from codeguard.domain.sample import SAMPLE_LANGUAGE, SAMPLE_PAYLOAD, sample_result


def test_score_labels():
    assert score_label(95) == "Excellent"
    assert score_label(90) == "Excellent"
    assert score_label(70) == "Good"
    assert score_label(40) == "Needs Work"
    assert score_label(39) == "Critical"
    assert score_label(-5) == "Critical"


def test_issue_counts_total():
    counts = IssueCounts(security_total=3, performance_total=2, style_total=4, security_high=9)
    assert counts.total == 9


def test_security_issue_view_reads_fields():
    issue = SecurityIssue.from_raw({"title": "XSS", "severity": "High", "line_reference": "Line 4", "extra": 1})
    assert issue.title == "XSS"
    assert issue.severity == "High"
    assert issue.label == "High"
    assert issue.line_reference == "Line 4"
    assert issue.description == ""


def test_issue_views_use_their_own_label():
    raw = {"title": "t", "severity": "Low", "impact": "High", "category": "naming"}
    assert PerformanceIssue.from_raw(raw).label == "High"
    assert StyleIssue.from_raw(raw).label == "naming"


def test_malformed_elements_yield_empty_views():
    for raw in (None, "oops", 12, ["title"], {"title": 5}):
        issue = StyleIssue.from_raw(raw)
        assert issue == StyleIssue()
        entry = ChangelogEntry.from_raw(raw)
        assert entry == ChangelogEntry()


def test_priority_rank_defaults_to_position():
    result = ReviewResult(
        top_priorities=(
            {"title": "a"},
            {"rank": 7, "title": "b"},
            {"rank": "first", "title": "c"},
            "junk",
        )
    )
    ranks = [p.rank for p in result.priorities()]
    assert ranks == [1, 7, 3, 4]
    assert result.priorities()[3] == PriorityEntry(rank=4)


def test_result_views_cover_every_sequence():
    result = sample_result()
    assert [i.title for i in result.security_findings()][0] == "SQL Injection Vulnerability"
    assert result.performance_findings()[0].impact == "High"
    assert result.style_findings()[1].category == "error-handling"
    assert result.changelog()[0].change_type == "security"
    assert result.priorities()[2].title == "N+1 Database Query"


def test_to_dict_adds_derived_fields():
    d = sample_result().to_dict()
    assert d["overall_score"] == 52
    assert d["score_label"] == "Needs Work"
    assert d["total_issues"] == 8
    assert d["issue_counts"]["security_total"] == 3


def test_sample_result_is_normalized_from_payload():
    result = sample_result()
    assert result.language_detected == SAMPLE_LANGUAGE
    assert result.overall_score == SAMPLE_PAYLOAD["overall_score"]
    assert result.fixed_score == 88
    assert result.has_fix
    assert len(result.security_issues) == 3


def test_sample_result_is_isolated_from_mutation():
    first = sample_result()
    first.security_issues[0]["title"] = "tampered"
    assert sample_result().security_issues[0]["title"] == "SQL Injection Vulnerability"
    assert SAMPLE_PAYLOAD["security_issues"][0]["title"] == "SQL Injection Vulnerability"


def test_result_fields_are_frozen_but_elements_are_the_agents_own():
    element = {"title": "Use of eval", "severity": "High"}
    result = ReviewResult(security_issues=(element,))

    with pytest.raises(dataclasses.FrozenInstanceError):
        result.overall_score = 100  # type: ignore[misc]
    assert isinstance(result.security_issues, tuple)
    assert result.security_issues[0] is element
    assert result.security_findings()[0].title == "Use of eval"
