"""Read the visible text of WordprocessingML paragraphs.

python-docx only looks at runs that sit directly under a paragraph, so text
inside tracked insertions (``w:ins``) or moves (``w:moveTo``) is invisible to
``Paragraph.text``. The walker below reads the paragraph element itself and
returns the text as it reads with all tracked changes accepted.
"""

from __future__ import annotations

from typing import List

from lxml import etree

# Subtrees whose text is not part of the current document.
HIDDEN_TAGS = {"del", "moveFrom"}
# Revision bookkeeping with no visible text.
SKIPPED_TAGS = {"pPr", "rPr", "pPrChange", "rPrChange", "instrText", "delText"}


def _strip_ns(tag: str) -> str:
    """Strip the XML namespace from a tag name."""
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def paragraph_text(para: etree._Element) -> str:
    """Return the text of a ``w:p`` element with tracked changes applied."""
    parts: List[str] = []

    def walk(node: etree._Element) -> None:
        for child in node:
            if not isinstance(child.tag, str):
                continue  # comments and processing instructions
            tag = _strip_ns(child.tag)
            if tag in HIDDEN_TAGS or tag in SKIPPED_TAGS:
                continue
            if tag == "t":
                parts.append(child.text or "")
            elif tag == "tab":
                parts.append("\t")
            elif tag in {"br", "cr"}:
                parts.append("\n")
            else:
                walk(child)

    walk(para)
    return "".join(parts)

