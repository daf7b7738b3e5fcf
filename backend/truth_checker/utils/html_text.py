"""
HTML Text Utilities for Truth Checker

Helpers shared by the webpage extractor and the transcript pipeline:
- decode_html_entities: fixed-table entity decoding
- html_to_text: reduce an HTML document to collapsed plain text
- extract_title: read the <title> of a raw HTML document
- collapse_whitespace: normalize whitespace runs to single spaces
"""

import re

from bs4 import BeautifulSoup


# Named entities decoded by decode_html_entities. Anything else is left as is.
HTML_ENTITIES: dict[str, str] = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
    "&nbsp;": " ",
}

ENTITY_PATTERN = re.compile(r"&[a-zA-Z0-9#]+;")

WHITESPACE_PATTERN = re.compile(r"\s+")

# Elements removed together with their content before text extraction
NON_CONTENT_TAGS: tuple[str, ...] = ("script", "style", "nav", "header", "footer", "aside")


def decode_html_entities(text: str) -> str:
    """
    Decode the fixed set of HTML entities in text.

    Each token is resolved in a single left-to-right pass, so decoding
    ``"&amp;lt;"`` yields ``"&lt;"`` rather than ``"<"``. Numeric entities
    other than ``&#39;`` are not decoded.

    Example:
        >>> decode_html_entities("Tom &amp; Jerry &copy;")
        'Tom & Jerry &copy;'
    """
    if not text:
        return text
    return ENTITY_PATTERN.sub(lambda match: HTML_ENTITIES.get(match.group(0), match.group(0)), text)


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to a single space and trim."""
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def html_to_text(html: str) -> str:
    """
    Reduce an HTML document to plain text.

    Script, style and page-chrome elements (nav, header, footer, aside) are
    dropped with their content, every remaining tag boundary becomes a
    single space and whitespace is collapsed.

    Args:
        html: Raw HTML document

    Returns:
        Collapsed plain text, possibly empty
    """
    soup = BeautifulSoup(html, "html.parser")

    for element in soup.find_all(NON_CONTENT_TAGS):
        element.decompose()

    return collapse_whitespace(soup.get_text(separator=" "))


def extract_title(html: str) -> str:
    """
    Extract the trimmed <title> text from raw HTML.

    Returns:
        Title text, or an empty string when the document has no title
    """
    soup = BeautifulSoup(html, "html.parser")
    title_tag = soup.find("title")
    if title_tag is None:
        return ""
    return title_tag.get_text().strip()


__all__ = [
    "HTML_ENTITIES",
    "NON_CONTENT_TAGS",
    "collapse_whitespace",
    "decode_html_entities",
    "extract_title",
    "html_to_text",
]
