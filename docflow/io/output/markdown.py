"""Markdown serialization of a finished document.

Elements are rendered page by page in reading order. Skipped elements
keep their placeholder so gaps in the output stay visible.
"""

from __future__ import annotations

import logging

from docflow.types import ContentElement, ContentType, DocumentResult, LayoutCategory

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n---\n\n"


def element_to_markdown(element: ContentElement) -> str:  # noqa: PLR0911
    """Convert one element to Markdown.

    Example:
        >>> element_to_markdown(ContentElement(type="title", box=box, page_index=0, text="Introduction"))
        '# Introduction'
    """
    if element.type == ContentType.IMAGE:
        if element.image_path:
            return f"![]({element.image_path})"
        return element.text

    if element.type == ContentType.TABLE:
        return element.html

    text = element.text.strip()
    if not text:
        return ""

    if element.skipped:
        return text

    if element.type == ContentType.TITLE:
        return f"# {text}"

    if element.type == ContentType.LIST:
        if not text.startswith(("-", "*", "1.")):
            return f"- {text}"
        return text

    if element.type == ContentType.CODE:
        if text.startswith("```"):
            return text
        return f"```\n{text}\n```"

    if element.type == ContentType.EQUATION:
        if text.startswith("$"):
            return text
        return f"$${text}$$"

    if element.type in (ContentType.HEADER, ContentType.FOOTER):
        # Running headers and footers are not body content
        return ""

    if element.category in (LayoutCategory.FIGURE_CAPTION, LayoutCategory.TABLE_CAPTION):
        return f"*{text}*"

    return text


class MarkdownSerializer:
    """Renders a document as Markdown, one block per element."""

    name = "markdown"
    suffix = ".md"

    def __init__(self, page_separator: str = PAGE_SEPARATOR):
        self.page_separator = page_separator

    def serialize(self, document: DocumentResult) -> str:
        pages: list[str] = []
        for page in document.pages:
            blocks = [element_to_markdown(element) for element in page.elements]
            pages.append("\n\n".join(block for block in blocks if block))

        markdown = self.page_separator.join(page for page in pages if page)
        logger.debug("Rendered %d pages to Markdown (%d chars)", len(document.pages), len(markdown))
        return markdown + "\n" if markdown else ""
