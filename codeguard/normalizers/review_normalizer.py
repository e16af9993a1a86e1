"""Normalize an agent review payload into a ``ReviewResult``.

The payload comes from a text-generation model, so its schema is a
best-effort contract. ``normalize`` is total: every field is read on its
own with its own default, and no input shape makes it raise. Truncated or
mistyped output degrades to "zero findings, score 0" instead of an error.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from codeguard.domain.models import NO_SUMMARY, IssueCounts, ReviewResult
from .util import as_int, as_mapping, as_seq, as_str, is_number

logger = logging.getLogger(__name__)

COUNTER_FIELDS = (
    "security_total",
    "security_critical",
    "security_high",
    "security_medium",
    "security_low",
    "performance_total",
    "performance_high",
    "performance_medium",
    "performance_low",
    "style_total",
)

SEQUENCE_FIELDS = (
    "security_issues",
    "performance_issues",
    "style_issues",
    "fix_changelog",
    "top_priorities",
)


def normalize_counts(raw: Any) -> IssueCounts:
    counts = as_mapping(raw)
    return IssueCounts(**{name: as_int(counts.get(name)) for name in COUNTER_FIELDS})


def normalize(raw: Any, fallback_language: str) -> ReviewResult:
    data = as_mapping(raw)

    result = ReviewResult(
        overall_score=as_int(data.get("overall_score")),
        fixed_score=as_int(data.get("fixed_score")),
        summary=as_str(data.get("summary"), NO_SUMMARY),
        language_detected=as_str(data.get("language_detected"), fallback_language),
        fixed_code=as_str(data.get("fixed_code")),
        issue_counts=normalize_counts(data.get("issue_counts")),
        **{name: as_seq(data.get(name)) for name in SEQUENCE_FIELDS},
    )

    if logger.isEnabledFor(logging.DEBUG):
        defaulted = _defaulted_fields(data)
        if defaulted:
            logger.debug("Review payload fields defaulted: %s", ", ".join(defaulted))

    return result


def _defaulted_fields(data: Mapping[str, Any]) -> list[str]:
    out: list[str] = []
    for name in ("overall_score", "fixed_score"):
        if not is_number(data.get(name)):
            out.append(name)
    for name in ("summary", "language_detected", "fixed_code"):
        if not isinstance(data.get(name), str):
            out.append(name)
    for name in SEQUENCE_FIELDS:
        if not isinstance(data.get(name), (list, tuple)):
            out.append(name)
    if not isinstance(data.get("issue_counts"), Mapping):
        out.append("issue_counts")
    return out
