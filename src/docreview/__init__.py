"""
Review documents with an LLM persona and anchor the reported issues as
comments on the document's paragraphs.
"""

from .addin import TaskPane
from .extraction import extract_issues
from .host import DocumentHost, DocxHost
from .llm_review import LLMReviewer, ReviewerConfig
from .models import AnalysisResult, Issue
from .personas import Persona

__all__ = [
    "AnalysisResult",
    "DocumentHost",
    "DocxHost",
    "Issue",
    "LLMReviewer",
    "Persona",
    "ReviewerConfig",
    "TaskPane",
    "extract_issues",
]
