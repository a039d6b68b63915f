"""Client side of the review: read the document, call the endpoint, show and
anchor the issues.

:class:`TaskPane` mirrors the add-in's task pane. It keeps the small amount of
UI state the pane needs (trigger, loading indicator, status line, results
panel) and talks to the document only through a
:class:`~docreview.host.DocumentHost`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import urlparse

import httpx
import markdown
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markdown.util import ETX, STX
from markupsafe import Markup, escape

from .host import DocumentHost
from .models import AnalysisResult, Issue
from .personas import Persona

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
DEFAULT_ENDPOINT = "http://127.0.0.1:8000/api/legal-analysis"

PARAGRAPH_PATTERN = re.compile(r"paragraph\s+(\d+)", re.IGNORECASE)


SAFE_URL_SCHEMES = {"", "http", "https", "mailto"}
# Backslash-escaped characters are still placeholders at this stage.
ESCAPED_CHAR = re.compile(f"{STX}([0-9]+){ETX}")


def is_safe_url(url: str) -> bool:
    url = ESCAPED_CHAR.sub(lambda m: chr(int(m.group(1))), url)
    return urlparse(url.strip()).scheme.lower() in SAFE_URL_SCHEMES


class SafeLinkTreeprocessor(Treeprocessor):
    """Drop link and image targets with schemes such as ``javascript:``."""

    def run(self, root):
        for element in root.iter():
            for attr in ("href", "src"):
                url = element.get(attr)
                if url is not None and not is_safe_url(url):
                    del element.attrib[attr]


class SafeLinkExtension(Extension):
    def extendMarkdown(self, md):
        # Runs after the inline processor (priority 20) has built the links.
        md.treeprocessors.register(SafeLinkTreeprocessor(md), "safe_links", 5)


def render_markdown(text: str) -> Markup:
    """Render model-written comment text; raw HTML in it is escaped first."""
    return Markup(markdown.markdown(str(escape(text or "")), extensions=[SafeLinkExtension()]))


TEMPLATES = Environment(
    loader=FileSystemLoader(str(BASE_DIR / "templates")),
    autoescape=select_autoescape(["html"]),
)
TEMPLATES.filters["markdown"] = render_markdown


class BackendError(RuntimeError):
    """The analysis endpoint answered with a non-success status."""


@dataclass
class Status:
    kind: str  # success | error
    message: str


def resolve_paragraph_index(location: Optional[str], paragraph_count: int) -> Optional[int]:
    """Map a "paragraph N" locator to a 0-based index, or None if unusable."""
    match = PARAGRAPH_PATTERN.search(location or "")
    if not match:
        return None
    index = int(match.group(1)) - 1
    if 0 <= index < paragraph_count:
        return index
    return None


def find_paragraph_with_text(paragraph_texts: Sequence[str], exact_text: str) -> Optional[int]:
    for index, text in enumerate(paragraph_texts):
        if exact_text in text:
            return index
    return None


class TaskPane:
    def __init__(
        self,
        host: DocumentHost,
        endpoint: str = DEFAULT_ENDPOINT,
        http_client: Optional[httpx.Client] = None,
        persona: str = Persona.LEGAL.value,
    ):
        self.host = host
        self.endpoint = endpoint
        # No request timeout: a hung analysis keeps the pane busy.
        self.http = http_client or httpx.Client(timeout=None)
        self.persona = Persona.parse(persona)

        self.trigger_enabled = True
        self.loading = False
        self.status: Optional[Status] = None
        self.results_html = ""

    def get_document_text(self) -> str:
        return self.host.read_body_text()

    def analyze_document(self) -> Optional[AnalysisResult]:
        """Run one analysis pass; a call while one is in flight does nothing."""
        if not self.trigger_enabled:
            logger.debug("Analysis already in progress; ignoring trigger")
            return None

        self.status = None
        self.results_html = ""
        self.loading = True
        self.trigger_enabled = False
        try:
            document_text = self.get_document_text()
            if not document_text or not document_text.strip():
                self.show_status(
                    "error",
                    "Document appears to be empty. Please add some content and try again.",
                )
                return None

            response = self.http.post(
                self.endpoint,
                json={"documentText": document_text, "persona": self.persona.value},
            )
            if not response.is_success:
                raise BackendError(f"Backend error: {response.status_code}")
            result = AnalysisResult.from_dict(response.json())

            self.display_results(result)
            label = self.persona.profile.label.lower()
            if result.issues:
                self.add_comments_to_document(result.issues)
                self.show_status(
                    "success",
                    f"Analysis complete! Found {len(result.issues)} {label} issues. "
                    "Comments have been added to your document.",
                )
            else:
                self.show_status("success", f"Analysis complete! No {label} issues found in your document.")
            return result
        except Exception as exc:
            logger.exception("Analysis error")
            self.show_status("error", f"Analysis failed: {exc}. Please try again in a moment.")
            return None
        finally:
            self.loading = False
            self.trigger_enabled = True

    def add_comments_to_document(self, issues: List[Issue]) -> int:
        """Anchor each issue as a comment and apply them in one sync.

        An issue goes to the paragraph holding its ``exact_text`` when that is
        found, else to the paragraph named by "paragraph N" in its location,
        else to the first paragraph.
        """
        paragraph_texts = self.host.paragraph_texts()
        inserted = 0
        for issue in issues:
            index = None
            exact_text = None
            if issue.exact_text:
                index = find_paragraph_with_text(paragraph_texts, issue.exact_text)
                if index is not None:
                    exact_text = issue.exact_text
            if index is None:
                index = resolve_paragraph_index(issue.location, len(paragraph_texts))
            if index is None:
                if not paragraph_texts:
                    logger.warning("Document has no paragraphs; dropping comment for %r", issue.type)
                    continue
                index = 0

            target = self.host.paragraph_range(index, exact_text=exact_text)
            self.host.insert_comment(target, f"{issue.type}: {issue.comment}")
            inserted += 1

        self.host.sync()
        return inserted

    def display_results(self, result: AnalysisResult) -> str:
        template = TEMPLATES.get_template("results.html")
        self.results_html = template.render(
            issues=result.issues,
            persona_label=self.persona.profile.label,
        )
        return self.results_html

    def show_status(self, kind: str, message: str) -> None:
        self.status = Status(kind=kind, message=message)
