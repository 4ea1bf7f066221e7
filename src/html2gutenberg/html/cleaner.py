"""Strip Google Docs and Word export artifacts before styles are inlined."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup, Comment, Declaration, NavigableString, Tag

from ..style.inliner import to_inline_style
from ..style.parser import parse_declarations

logger = logging.getLogger(__name__)

WHITESPACE_TAGS = ("p", "span", "div", "li", "td", "th")
PRESERVE_WHITESPACE = ("pre", "textarea", "code")

# ASCII whitespace only, non-breaking spaces are content
_WHITESPACE = re.compile(r"[ \t\r\n\f]+")
_CONDITIONAL_MARKER = re.compile(r"^\[?\s*(if\b[^>]*?|endif)\s*\]?$", re.IGNORECASE)


@dataclass(frozen=True)
class CleanerOptions:
    """
    Switches for clean_html.

    ``remove_tags`` leaves ``<script>`` and ``<style>`` alone: embedded CSS
    is inlined afterwards and scripts are reported by the forbiddenTags
    policy.

    Attributes:
        remove_tags: Tags removed together with their content
        unwrap_tags: Tags replaced by their content
        remove_empty_paragraphs: Drop ``<p>`` with no text and no child elements
        remove_empty_spans: Drop ``<span>`` with no text and no child elements
        merge_nested_spans: Fold a span whose only child is a span into it
        remove_comments: Drop HTML comments, conditional comments included
        remove_data_attributes: Drop every ``data-*`` attribute
        remove_ids: Drop every ``id`` attribute
        normalize_whitespace: Collapse whitespace runs in block text
    """

    remove_tags: tuple[str, ...] = ("xml", "w:sdt", "w:sdtpr", "w:sdtcontent")
    unwrap_tags: tuple[str, ...] = ("font", "o:p")
    remove_empty_paragraphs: bool = True
    remove_empty_spans: bool = True
    merge_nested_spans: bool = True
    remove_comments: bool = True
    remove_data_attributes: bool = True
    remove_ids: bool = False
    normalize_whitespace: bool = True


def _filter_classes(element: Tag, is_artifact) -> bool:
    classes = element.get("class") or []
    kept = [name for name in classes if not is_artifact(name)]
    if len(kept) == len(classes):
        return False
    if kept:
        element["class"] = kept
    else:
        del element["class"]
    return True


def _is_empty(element: Tag) -> bool:
    return not element.get_text().strip() and element.find(True) is None


def remove_google_docs_artifacts(html: str) -> str:
    """
    Remove Google Docs export noise.

    Drops ``docs-*`` classes (other classes on the element are kept, they
    carry the exported styles), the ``data-docs-*`` bookkeeping attributes
    and empty bookmark anchors (``<a id>`` with no ``href`` and no text).
    """
    soup = BeautifulSoup(html, "html.parser")
    changed = 0

    for element in soup.find_all(class_=True):
        if _filter_classes(element, lambda name: "docs-" in name):
            changed += 1

    for element in soup.find_all(True):
        for attr in [name for name in element.attrs if name.startswith("data-docs-")]:
            del element[attr]
            changed += 1

    for anchor in soup.find_all("a", id=True):
        if not anchor.decomposed and not anchor.has_attr("href") and _is_empty(anchor):
            anchor.decompose()
            changed += 1

    logger.debug(f"Removed {changed} Google Docs artifact(s)")
    return str(soup)


def _conditional_marker(node) -> Optional[str]:
    """Return ``if`` or ``endif`` for a downlevel-revealed conditional marker."""
    # html.parser yields <![if ...]> as a Declaration or, on newer Pythons,
    # as a bogus Comment holding "[if ...]"
    if not isinstance(node, (Declaration, Comment)):
        return None
    text = node.strip()
    if isinstance(node, Comment) and not (text.startswith("[") and text.endswith("]")):
        return None
    match = _CONDITIONAL_MARKER.match(text)
    if match is None:
        return None
    return "endif" if match.group(1).lower() == "endif" else "if"


def _contains_image(nodes: list) -> bool:
    return any(isinstance(node, Tag) and (node.name == "img" or node.find("img") is not None) for node in nodes)


def _remove_revealed_conditionals(soup: BeautifulSoup) -> int:
    # <![if !supportLists]>...<![endif]>
    openers = [node for node in soup.descendants if _conditional_marker(node) == "if"]
    removed = 0
    for opener in openers:
        if opener.parent is None:
            continue
        block = []
        closer = None
        for sibling in opener.next_siblings:
            if _conditional_marker(sibling) == "endif":
                closer = sibling
                break
            block.append(sibling)

        # Word keeps the real <img> inside <![if !vml]>; only the markers go
        if closer is not None and not _contains_image(block):
            for node in block:
                node.extract()
        opener.extract()
        if closer is not None:
            closer.extract()
        removed += 1
    return removed


def remove_word_artifacts(html: str) -> str:
    """
    Remove Word and Office export noise.

    Drops ``Mso*`` classes (keeping the element's other classes),
    conditional comments (``<!--[if ...]>...<![endif]-->``) and
    downlevel-revealed conditional blocks (``<![if ...]>...<![endif]>``).
    A revealed block holding an image keeps its content.
    """
    soup = BeautifulSoup(html, "html.parser")
    changed = 0

    for element in soup.find_all(class_=True):
        if _filter_classes(element, lambda name: name.startswith("Mso")):
            changed += 1

    changed += _remove_revealed_conditionals(soup)

    for node in list(soup.descendants):
        if _conditional_marker(node) or (isinstance(node, Comment) and node.strip().lower().startswith("[if")):
            node.extract()
            changed += 1

    logger.debug(f"Removed {changed} Word artifact(s)")
    return str(soup)


def _merge_nested_spans(soup: BeautifulSoup) -> int:
    merged = 0
    # innermost first so chains of wrappers collapse into the outermost span
    for outer in reversed(soup.find_all("span")):
        children = [
            child for child in outer.contents if not (isinstance(child, NavigableString) and not child.strip())
        ]
        if len(children) != 1 or not isinstance(children[0], Tag) or children[0].name != "span":
            continue

        inner = children[0]
        outer_style, _ = parse_declarations(outer.get("style"))
        inner_style, _ = parse_declarations(inner.get("style"))
        style = to_inline_style({**outer_style, **inner_style})
        if style:
            outer["style"] = style

        classes = list(outer.get("class") or [])
        classes += [name for name in inner.get("class") or [] if name not in classes]
        if classes:
            outer["class"] = classes

        for name, value in inner.attrs.items():
            if name not in ("style", "class") and not outer.has_attr(name):
                outer[name] = value

        inner.unwrap()
        merged += 1
    return merged


def _remove_empty(soup: BeautifulSoup, tag: str) -> int:
    removed = 0
    # descendants before ancestors, so emptied parents are caught in one pass
    for element in reversed(soup.find_all(tag)):
        if _is_empty(element):
            element.decompose()
            removed += 1
    return removed


def _normalize_whitespace(soup: BeautifulSoup) -> None:
    for text in soup.find_all(string=True):
        if type(text) is not NavigableString or text.find_parent(WHITESPACE_TAGS) is None:
            continue
        if text.find_parent(PRESERVE_WHITESPACE) is not None:
            continue
        collapsed = _WHITESPACE.sub(" ", text)
        if collapsed != text:
            text.replace_with(collapsed)


def clean_html(html: str, options: Optional[CleanerOptions] = None) -> str:
    """
    Normalize exported HTML ahead of style inlining.

    Unlike the artifact removers this works on generic structure: wrapper
    tags, comments, ``data-*`` attributes, empty elements and redundant
    span nesting. The whole document is returned, ``<head>`` included.

    Args:
        html: HTML document or fragment
        options: Cleaner switches (defaults if None)

    Returns:
        Cleaned HTML
    """
    opts = options or CleanerOptions()
    soup = BeautifulSoup(html, "html.parser")

    for tag in opts.remove_tags:
        for element in soup.find_all(tag):
            if not element.decomposed:
                element.decompose()

    for tag in opts.unwrap_tags:
        for element in soup.find_all(tag):
            element.unwrap()

    if opts.remove_comments:
        for comment in [node for node in soup.descendants if isinstance(node, Comment)]:
            comment.extract()

    if opts.remove_data_attributes or opts.remove_ids:
        for element in soup.find_all(True):
            for attr in list(element.attrs):
                if (opts.remove_data_attributes and attr.startswith("data-")) or (opts.remove_ids and attr == "id"):
                    del element[attr]

    spans = _remove_empty(soup, "span") if opts.remove_empty_spans else 0
    merged = _merge_nested_spans(soup) if opts.merge_nested_spans else 0
    paragraphs = _remove_empty(soup, "p") if opts.remove_empty_paragraphs else 0

    if opts.normalize_whitespace:
        _normalize_whitespace(soup)

    logger.debug(f"Cleaned HTML: {spans} empty span(s), {paragraphs} empty paragraph(s), {merged} merged span(s)")
    return str(soup)


def clean_document(html: str, options: Optional[CleanerOptions] = None) -> str:
    """Run every cleanup step: Google Docs, then Word, then generic cleanup."""
    html = remove_google_docs_artifacts(html)
    html = remove_word_artifacts(html)
    return clean_html(html, options)
