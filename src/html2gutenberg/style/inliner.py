"""Apply extracted styles to elements as inline ``style`` attributes."""

import logging
from typing import Iterable, Optional

from bs4 import BeautifulSoup, Tag

from ..models.styles import ExtendedStyleExtractionResult
from .extractor import extract_styles
from .parser import parse_declarations

logger = logging.getLogger(__name__)

SKIP_TAGS = {"html", "head", "style", "script"}


def to_inline_style(properties: dict[str, str]) -> str:
    """Render a property map as ``prop: value; prop: value``."""
    return "; ".join(f"{name}: {value}" for name, value in properties.items())


def inline_styles(
    html: str,
    styles: Optional[ExtendedStyleExtractionResult] = None,
    keep_classes: bool = False,
    apply_id_styles: bool = True,
    apply_element_styles: bool = True,
    ignore_classes: Iterable[str] = (),
) -> str:
    """
    Inline element, class and id styles into ``style`` attributes.

    For each element in ``<body>`` (or the whole fragment), styles are
    combined in increasing precedence: tag styles, class styles in
    class-attribute order, id styles, then the element's own inline style.
    Complex selectors and media queries are not applied.

    Args:
        html: HTML document
        styles: Result of extract_styles (extracted from ``html`` if None)
        keep_classes: Keep class attributes after inlining
        apply_id_styles: Apply styles from ``#id`` rules
        apply_element_styles: Apply styles from tag rules
        ignore_classes: Class names whose styles are not inlined

    Returns:
        HTML with inlined styles
    """
    if styles is None:
        styles = extract_styles(html)

    soup = BeautifulSoup(html, "html.parser")
    root = soup.body or soup
    ignored = set(ignore_classes)
    styled = 0

    for element in root.find_all(True):
        if not isinstance(element, Tag) or element.name in SKIP_TAGS:
            continue

        classes = [c for c in element.get("class", []) if c and c not in ignored]
        element_id = element.get("id", "") if apply_id_styles else ""
        tag = element.name if apply_element_styles else ""

        combined = styles.styles_for(tag, tuple(classes), element_id)
        existing = element.get("style")
        if existing:
            own, _ = parse_declarations(existing)
            combined.update(own)

        if combined:
            element["style"] = to_inline_style(combined)
            styled += 1

        if not keep_classes and element.has_attr("class"):
            del element["class"]

    logger.debug(f"Inlined styles on {styled} element(s)")
    return str(soup)


def remove_style_tags(html: str) -> str:
    """Remove every ``<style>`` element from the document."""
    soup = BeautifulSoup(html, "html.parser")
    for style in soup.find_all("style"):
        style.decompose()
    return str(soup)
