"""Extraction of ``style`` attributes from a parsed document."""

import logging
from collections import Counter

from bs4 import BeautifulSoup, Tag

from .parser import parse_declarations

logger = logging.getLogger(__name__)


def element_path(element: Tag) -> str:
    """
    Build a structural path that identifies an element within its document.

    Each step is ``tag:nth-of-type(n)`` with a 1-based index among siblings of
    the same tag, e.g. ``html:nth-of-type(1)>body:nth-of-type(1)>p:nth-of-type(2)``.
    """
    parts = []
    node = element
    while isinstance(node, Tag) and not isinstance(node, BeautifulSoup):
        index = 1 + sum(1 for _ in node.find_previous_siblings(node.name))
        parts.append(f"{node.name}:nth-of-type({index})")
        node = node.parent
    return ">".join(reversed(parts))


def _element_id(element: Tag) -> str:
    value = element.get("id")
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def extract_inline_styles(soup: BeautifulSoup) -> tuple[dict[str, dict[str, str]], list[str]]:
    """
    Collect inline declarations of every element carrying a ``style`` attribute.

    Elements are keyed by ``#<id>`` when their id is unique within the
    document, otherwise by their structural path, so keys are unique and
    stable when the same document is extracted again. Elements without a
    style attribute, or whose style has no valid declaration, get no entry.

    Args:
        soup: Parsed document

    Returns:
        Tuple of (identifier to properties, warnings)
    """
    id_counts = Counter(_element_id(tag) for tag in soup.find_all(id=True))
    inline_styles: dict[str, dict[str, str]] = {}
    warnings: list[str] = []

    for element in soup.find_all(style=True):
        element_id = _element_id(element)
        if element_id and id_counts[element_id] == 1:
            identifier = f"#{element_id}"
        else:
            identifier = element_path(element)

        properties, problems = parse_declarations(str(element.get("style", "")))
        for problem in problems:
            message = f"{identifier}: {problem}"
            logger.debug(message)
            warnings.append(message)

        if properties:
            inline_styles[identifier] = properties

    return inline_styles, warnings
