"""Style extraction engine: CSS and inline styles to selector-kind maps."""

import logging
from typing import Optional, Union

from bs4 import BeautifulSoup, NavigableString

from ..models.styles import ExtendedStyleExtractionResult, MediaQuery
from .inline import extract_inline_styles
from .parser import parse_stylesheet
from .resolver import StyleResolver

logger = logging.getLogger(__name__)

TextInput = Union[str, bytes, None]


def _as_text(value: TextInput) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _parse_html(html: str) -> Optional[BeautifulSoup]:
    try:
        return BeautifulSoup(html, "html.parser")
    except Exception as e:
        # Style extraction is read-only analysis; the policy pipeline reports
        # unparseable documents as fatal.
        logger.warning(f"Could not parse HTML for style extraction: {e}")
        return None


def _embedded_css(soup: BeautifulSoup) -> str:
    blocks = []
    for style in soup.find_all("style"):
        text = "".join(str(child) for child in style.children if isinstance(child, NavigableString))
        if text.strip():
            blocks.append(text)
    return "\n".join(blocks)


def collect_embedded_css(html: TextInput) -> str:
    """
    Concatenate the contents of every ``<style>`` element in document order.

    Args:
        html: HTML document

    Returns:
        Newline-joined CSS text (empty if there is none)
    """
    soup = _parse_html(_as_text(html))
    return _embedded_css(soup) if soup is not None else ""


def extract_styles(html: TextInput, css: TextInput = None) -> ExtendedStyleExtractionResult:
    """
    Extract all style information from a document.

    Parses the stylesheet into class, id, element and complex-selector maps
    (last rule wins per property), keeps ``@media`` rules in separate scoped
    maps, and records the inline ``style`` attribute of every element.

    Pure and deterministic: the same inputs always give the same result,
    including map order. Never raises; malformed fragments are skipped,
    logged and listed in ``warnings``.

    Args:
        html: HTML document (used for inline styles and, when ``css`` is
            None, for its embedded ``<style>`` blocks)
        css: Stylesheet text to parse instead of the embedded blocks

    Returns:
        ExtendedStyleExtractionResult snapshot
    """
    soup = _parse_html(_as_text(html))

    if css is None:
        raw_css = _embedded_css(soup) if soup is not None else ""
    else:
        raw_css = _as_text(css)

    stylesheet = parse_stylesheet(raw_css)
    resolved = StyleResolver().resolve(stylesheet.rules)
    warnings = list(stylesheet.warnings)

    inline_styles: dict[str, dict[str, str]] = {}
    if soup is not None:
        inline_styles, inline_warnings = extract_inline_styles(soup)
        warnings.extend(inline_warnings)

    for warning in warnings:
        logger.warning(f"Skipped malformed style fragment: {warning}")

    logger.debug(
        f"Extracted {len(resolved.css_map)} class, {len(resolved.id_map)} id, "
        f"{len(resolved.element_map)} element, {len(resolved.selector_map)} selector, "
        f"{len(inline_styles)} inline and {len(resolved.media_queries)} media entries"
    )

    return ExtendedStyleExtractionResult(
        css_map=resolved.css_map,
        id_map=resolved.id_map,
        element_map=resolved.element_map,
        selector_map=resolved.selector_map,
        inline_styles=inline_styles,
        media_queries=tuple(MediaQuery(query=query, rules=rules) for query, rules in resolved.media_queries),
        raw_css=raw_css,
        warnings=tuple(warnings),
    )
