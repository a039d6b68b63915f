"""Recover the structured issue list from a free-text model reply.

Models are asked for bare JSON but regularly wrap it in prose ("Here is the
result: {...} Hope that helps!"), use typographic quotes, or sprinkle
non-ASCII characters into values. The object between the first ``{`` and the
last ``}`` is taken, normalised, and parsed; anything that still fails is
reported as an :class:`ExtractionFailed` so the caller can degrade to a
synthetic issue instead of erroring.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

from .models import AnalysisResult, Issue

QUOTE_TRANSLATION = str.maketrans(
    {
        "“": '"',
        "”": '"',
        "‘": "'",
        "’": "'",
    }
)

FALLBACK_ISSUE_TYPE = "Analysis Processing Issue"


class ExtractionError(ValueError):
    """Raised when no JSON payload can be recovered from a reply."""


@dataclass
class StructuredIssues:
    result: AnalysisResult


@dataclass
class ExtractionFailed:
    reason: str


ExtractionOutcome = Union[StructuredIssues, ExtractionFailed]


def normalize_json_text(text: str) -> str:
    """Map typographic quotes to ASCII and drop every other non-ASCII char."""
    text = text.translate(QUOTE_TRANSLATION)
    return text.encode("ascii", "ignore").decode("ascii")


def extract_json(text: str) -> Any:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise ExtractionError("no JSON object found in model response")
    candidate = normalize_json_text(text[start : end + 1])
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ExtractionError(f"invalid JSON in model response: {exc}") from exc


def extract_issues(text: str) -> ExtractionOutcome:
    try:
        payload = extract_json(text or "")
    except ExtractionError as exc:
        return ExtractionFailed(reason=str(exc))

    if not isinstance(payload, dict) or not isinstance(payload.get("issues"), list):
        return ExtractionFailed(reason="model response has no 'issues' list")
    return StructuredIssues(result=AnalysisResult.from_dict(payload))


def fallback_result(reason: str) -> AnalysisResult:
    return AnalysisResult(
        issues=[
            Issue(
                type=FALLBACK_ISSUE_TYPE,
                location="document",
                comment=(
                    "The analysis finished but its results could not be read "
                    f"({reason}). Please try again."
                ),
                severity="low",
            )
        ]
    )


def resolve_outcome(outcome: ExtractionOutcome) -> AnalysisResult:
    if isinstance(outcome, StructuredIssues):
        return outcome.result
    return fallback_result(outcome.reason)
