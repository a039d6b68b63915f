"""Host document API used by the add-in.

The add-in only talks to a :class:`DocumentHost`: read the body text,
enumerate paragraphs, get a paragraph's range, queue a comment on a range and
synchronize. Queued operations are applied together on :meth:`sync`, and the
document is only guaranteed consistent right after a sync.
"""

from __future__ import annotations

import logging
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from docx.oxml.ns import qn
from docx.text.paragraph import Paragraph
from docx.text.run import Run

from .parser import paragraph_text

logger = logging.getLogger(__name__)


class HostError(RuntimeError):
    """The host document could not be read or updated."""


class DocumentHost(ABC):
    @abstractmethod
    def read_body_text(self) -> str:
        """Full plain text of the document body."""

    @abstractmethod
    def paragraph_texts(self) -> List[str]:
        """Text of every body paragraph, in document order."""

    @abstractmethod
    def paragraph_range(self, index: int, exact_text: Optional[str] = None) -> Any:
        """Range covering paragraph ``index``, narrowed to ``exact_text`` when found."""

    @abstractmethod
    def insert_comment(self, target: Any, text: str) -> None:
        """Queue a comment on ``target``; applied on the next :meth:`sync`."""

    @abstractmethod
    def sync(self) -> None:
        """Apply every queued operation."""


@dataclass
class DocxRange:
    paragraph: Paragraph
    runs: List[Run]


def find_runs_for_text(paragraph: Paragraph, target: str) -> List[Run]:
    """Find the runs that cover the first occurrence of ``target``."""
    if not target or not paragraph.runs:
        return []

    full_text = "".join(run.text for run in paragraph.runs)
    start_idx = full_text.find(target)
    if start_idx == -1:
        return []
    end_idx = start_idx + len(target)

    target_runs = []
    current_idx = 0
    for run in paragraph.runs:
        run_start = current_idx
        run_end = current_idx + len(run.text)
        if run_end > start_idx and run_start < end_idx:
            target_runs.append(run)
        current_idx = run_end
    return target_runs


class DocxHost(DocumentHost):
    """A ``.docx`` file on disk acting as the host document."""

    def __init__(self, source_path: str, output_path: Optional[str] = None, author: str = "AI Reviewer"):
        self.source_path = str(source_path)
        self.output_path = str(output_path or source_path)
        self.author = author
        self._document = None
        self._pending: List[Tuple[DocxRange, str]] = []

    @property
    def document(self):
        if self._document is None:
            try:
                self._document = Document(self.source_path)
            except (PackageNotFoundError, zipfile.BadZipFile, KeyError) as exc:
                raise HostError(f"cannot open document {self.source_path}: {exc}") from exc
        return self._document

    def read_body_text(self) -> str:
        if self._pending:
            raise HostError("document has unsynchronized changes; call sync() first")
        return "\n".join(self.paragraph_texts())

    def paragraphs(self) -> List[Paragraph]:
        """Every body paragraph in document order, table cells included.

        Paragraphs nested in another paragraph (text boxes) are read as part
        of their host paragraph.
        """
        doc = self.document
        return [
            Paragraph(p, doc._body)
            for p in doc.element.body.iter(qn("w:p"))
            if next(p.iterancestors(qn("w:p")), None) is None
        ]

    def paragraph_texts(self) -> List[str]:
        return [paragraph_text(p._p) for p in self.paragraphs()]

    def paragraph_range(self, index: int, exact_text: Optional[str] = None) -> DocxRange:
        paragraphs = self.paragraphs()
        if not 0 <= index < len(paragraphs):
            raise HostError(f"paragraph index {index} out of range")
        paragraph = paragraphs[index]
        runs = find_runs_for_text(paragraph, exact_text) if exact_text else []
        return DocxRange(paragraph=paragraph, runs=runs or list(paragraph.runs))

    def insert_comment(self, target: DocxRange, text: str) -> None:
        self._pending.append((target, text))

    def sync(self) -> None:
        pending, self._pending = self._pending, []
        if not pending:
            return
        doc = self.document
        for target, text in pending:
            # Empty paragraphs have no run to hang the comment on.
            runs = target.runs or [target.paragraph.add_run("")]
            try:
                doc.add_comment(runs=runs, text=text, author=self.author, initials="AI")
            except (ValueError, TypeError) as exc:
                raise HostError(f"cannot insert comment: {exc}") from exc
        Path(self.output_path).parent.mkdir(parents=True, exist_ok=True)
        doc.save(self.output_path)
        logger.info("Saved %d comment(s) to %s", len(pending), self.output_path)
