"""Reviewer personas and the instruction prompts bound to them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

DOCUMENT_SEPARATOR = "\n\nDocument to analyze:\n"


LEGAL_PERSONA_PROMPT = """\
You are a legal compliance expert reviewing a document. Analyze the document for the following legal issues:

1. Missing liability clauses
2. Unclear termination conditions
3. Missing governing law
4. Ambiguous payment terms
5. Missing dispute resolution clauses
6. Incomplete confidentiality clauses

For each issue found, respond in this EXACT JSON format:
{
  "issues": [
    {
      "type": "Missing liability clauses",
      "location": "paragraph 3",
      "comment": "This section lacks proper liability limitation clauses that protect both parties.",
      "severity": "high"
    }
  ]
}

Be specific about paragraph numbers where issues are found. If no issues are found, return {"issues": []}.
Respond with the JSON object only."""


AUDIT_PERSONA_PROMPT = """\
You are a document auditor checking a document against the house style guide. Check the document for the following formatting and style issues:

1. Font family: all body text and headings must use Arial.
2. Heading sizes: Heading 1 is 16pt, Heading 2 is 14pt, Heading 3 is 12pt, Heading 4 is 11pt.
3. Name prefixes: people are named without prefixes such as "Mr.", "Mrs.", "Ms." or "Dr.".
4. Date format: dates are written as DD Month YYYY (for example "05 March 2024").
5. Team names: team names use Title Case followed by the word "Team" (for example "Finance Team", not "finance team" or "FINANCE TEAM").

For each issue found, respond in this EXACT JSON format:
{
  "issues": [
    {
      "type": "Date format",
      "location": "paragraph 4",
      "exact_text": "3/5/24",
      "comment": "Dates must be written as DD Month YYYY, e.g. 05 March 2024.",
      "severity": "medium"
    }
  ]
}

"exact_text" must be copied verbatim from the document and must appear only once in it, so the issue can be anchored precisely.
Paragraphs are numbered from 1 in document order. If no issues are found, return {"issues": []}.
Respond with the JSON object only."""


@dataclass(frozen=True)
class PersonaProfile:
    label: str
    instructions: str
    uses_exact_text: bool = False


class Persona(str, Enum):
    LEGAL = "legal"
    AUDIT = "audit"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Persona":
        """Resolve a request value, defaulting to the legal persona."""
        if value is None or not str(value).strip():
            return cls.LEGAL
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"unknown persona {value!r} (expected one of: {choices})") from None

    @property
    def profile(self) -> PersonaProfile:
        return PERSONA_PROFILES[self]

    def build_prompt(self, document_text: str) -> str:
        return f"{self.profile.instructions}{DOCUMENT_SEPARATOR}{document_text}"


PERSONA_PROFILES = {
    Persona.LEGAL: PersonaProfile(label="Legal", instructions=LEGAL_PERSONA_PROMPT),
    Persona.AUDIT: PersonaProfile(
        label="Audit",
        instructions=AUDIT_PERSONA_PROMPT,
        uses_exact_text=True,
    ),
}
