"""Normalize chapter markup and convert it into export formats."""

import warnings
from typing import Literal

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from bs4.element import Declaration, Doctype, ProcessingInstruction
from markdownify import markdownify as md

from epub_reader.models.settings import ParserSettings

# Chapters are usually XHTML with an XML declaration
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

OutputFormat = Literal["markdown", "text", "html"]

REMOVED_TAGS = ["head", "script", "style"]
PROLOG_NODES = (Doctype, Declaration, ProcessingInstruction)


class ContentProcessor:
    """Process chapter markup for display or export."""

    def __init__(self, settings: ParserSettings | None = None):
        self.settings = settings or ParserSettings()

    def normalize(self, markup: str) -> str:
        """Strip document wrappers from chapter markup.

        The lxml HTML parser first repairs the markup into a tree. Then
        ``head``, ``script`` and ``style`` are removed along with their
        contents, and every element named in ``settings.wrapper_tags`` is
        unwrapped: the tag goes, its children stay in place. Tag order and
        nesting in the source do not change the result.
        """
        soup = self._soup(markup)
        return str(soup).strip()

    def process(self, markup: str, output_format: OutputFormat = "markdown") -> str:
        """Convert chapter markup to the specified format."""
        soup = self._soup(markup)

        if output_format == "html":
            return str(soup).strip()
        elif output_format == "text":
            return self._to_plain_text(soup)
        else:  # markdown
            return self._to_markdown(soup)

    def _soup(self, markup: str) -> BeautifulSoup:
        soup = BeautifulSoup(markup, "lxml")
        for node in soup.find_all(string=lambda s: isinstance(s, PROLOG_NODES)):
            node.extract()
        for tag in soup(REMOVED_TAGS):
            tag.decompose()
        for tag in soup.find_all(self.settings.wrapper_tags):
            tag.unwrap()
        return soup

    def _to_markdown(self, soup: BeautifulSoup) -> str:
        markdown = md(
            str(soup),
            heading_style="ATX",
            bullets="-",
        )
        # Collapse runs of blank lines
        cleaned = []
        prev_blank = False
        for line in (line.rstrip() for line in markdown.split("\n")):
            is_blank = not line.strip()
            if is_blank and prev_blank:
                continue
            cleaned.append(line)
            prev_blank = is_blank

        return "\n".join(cleaned).strip()

    def _to_plain_text(self, soup: BeautifulSoup) -> str:
        """Extract plain text with paragraph preservation."""
        paragraphs = []
        for p in soup.find_all(["p", "h1", "h2", "h3", "h4", "h5", "h6", "li"]):
            text = p.get_text(strip=True)
            if text:
                paragraphs.append(text)
        return "\n\n".join(paragraphs)

    def get_stats(self, content: str) -> dict[str, int]:
        """Calculate content statistics."""
        words = content.split()
        paragraphs = [p for p in content.split("\n\n") if p.strip()]
        return {
            "word_count": len(words),
            "character_count": len(content),
            "paragraph_count": len(paragraphs),
        }
