from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SEVERITIES = ("high", "medium", "low")
DEFAULT_SEVERITY = "medium"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass
class Issue:
    type: str
    location: str
    comment: str
    severity: str = DEFAULT_SEVERITY
    exact_text: Optional[str] = None  # audit persona only

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Issue":
        """Build an issue from a loosely shaped model reply entry."""
        severity = _as_text(data.get("severity")).strip().lower()
        if severity not in SEVERITIES:
            severity = DEFAULT_SEVERITY
        exact_text = data.get("exact_text")
        return cls(
            type=_as_text(data.get("type")),
            location=_as_text(data.get("location")),
            comment=_as_text(data.get("comment")),
            severity=severity,
            exact_text=_as_text(exact_text) or None,
        )

    def to_dict(self) -> Dict[str, str]:
        data = {
            "type": self.type,
            "location": self.location,
            "comment": self.comment,
            "severity": self.severity,
        }
        if self.exact_text:
            data["exact_text"] = self.exact_text
        return data


@dataclass
class AnalysisResult:
    issues: List[Issue] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        raw_issues = data.get("issues") or []
        return cls(
            issues=[Issue.from_dict(item) for item in raw_issues if isinstance(item, dict)]
        )

    def to_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {"issues": [issue.to_dict() for issue in self.issues]}
