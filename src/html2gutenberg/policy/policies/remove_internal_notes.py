"""Removes internal notes, comment markers and team instructions.

Documents exported from shared editors often carry text meant for the
writing team rather than readers, for example:

- ``[a] please check the price`` (comment markers with a letter prefix)
- ``@writer can you confirm?`` (mentions)
- ``To Team Web: use the blue banner`` (team instructions)
- ``Alt: two people shaking hands`` (image alt notes)
- ``NOTE SEO Writer`` (end marker for the article body)
- ``Landing: https://...`` (internal URLs)
"""

import logging
import re
from collections import Counter

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ..base import (
    Policy,
    PolicyOptions,
    PolicyResult,
    failed_result,
    merge_options,
    success_result,
    warning_result,
)

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = [
    r"^\[([a-z0-9])\]\s*",
    r"^(To\s+Team\s+\w+\s*:)",
    r"^\s*@\w+",
    r"^(กราฟิก|Graphic|Image)",
    r"^\(\s*(ฝาก|Note:|Internal:|TODO:|FIXME:)",
    r"^Alt\s*:",
    r"^(NOTE\s+SEO\s+Writer|NOTE\s+SEO)",
    r"^(กราฟิก Zip|ราคากราฟิก|Credit|เครดิต)",
    r"^(Landing\s*:|Link\s*:|URL\s*:)",
    r"^\[.*?(ฝาก|Note|Internal|TODO|ทีม|Team)",
]

DEFAULT_OPTIONS: PolicyOptions = {
    "autoRemove": True,
    "removeEmptyContainers": True,
    "patterns": DEFAULT_PATTERNS,
}

NOTE_TAGS = ["p", "div", "td", "li", "span"]
CONTAINER_TAGS = ["p", "div", "li", "td"]
COMMENT_MARKER_RE = re.compile(r"^\[[a-z0-9]\]$", re.IGNORECASE)
SAMPLE_LENGTH = 60


def compile_patterns(patterns: list[str]) -> list[re.Pattern]:
    """Compile note patterns case-insensitively, skipping invalid ones."""
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern, re.IGNORECASE))
        except re.error as e:
            logger.warning(f"Invalid internal-note pattern {pattern!r}: {e}")
    return compiled


def is_internal_note(text: str, patterns: list[re.Pattern]) -> bool:
    trimmed = text.strip()
    return any(pattern.search(trimmed) for pattern in patterns)


def _sample(text: str) -> str:
    return text[:SAMPLE_LENGTH] + ("..." if len(text) > SAMPLE_LENGTH else "")


def _is_blank(element: Tag) -> bool:
    if element.get_text().strip():
        return False
    for child in element.children:
        if isinstance(child, Tag):
            if child.name != "br":
                return False
        elif str(child).strip():
            return False
    return True


def apply_remove_internal_notes(html: str, soup: BeautifulSoup, options: PolicyOptions) -> PolicyResult:
    opts = merge_options(DEFAULT_OPTIONS, options)
    patterns = compile_patterns(list(opts.get("patterns") or []))
    found: Counter = Counter()
    removed_texts: list[str] = []

    # Blocks that reference editor comments (href="#cmnt_ref1")
    for anchor in soup.find_all("a", href=lambda href: bool(href) and "cmnt_ref" in href):
        if anchor.decomposed:
            continue
        block = anchor.find_parent(CONTAINER_TAGS)
        if block is None:
            continue
        text = block.get_text().strip()
        if text:
            removed_texts.append(_sample(text))
            block.decompose()
            found["cmnt_ref"] += 1

    # Comment markers such as <a id="cmnt1">[a]</a>
    for anchor in soup.find_all("a", id=re.compile(r"^cmnt")):
        if anchor.decomposed:
            continue
        text = anchor.get_text().strip()
        if COMMENT_MARKER_RE.match(text):
            removed_texts.append(text)
            anchor.decompose()
            found["a.cmnt"] += 1

    # Whole elements whose text is a note
    for name in NOTE_TAGS:
        for element in soup.find_all(name):
            if element.decomposed:
                continue
            text = element.get_text().strip()
            if text and is_internal_note(text, patterns):
                removed_texts.append(_sample(text))
                element.decompose()
                found[name] += 1

    # Note lines mixed into the text of a larger block
    for element in soup.find_all(CONTAINER_TAGS):
        if element.decomposed:
            continue
        for node in list(element.children):
            if not isinstance(node, NavigableString) or isinstance(node, Comment):
                continue
            notes = [line.strip() for line in str(node).split("\n") if line.strip()]
            notes = [line for line in notes if is_internal_note(line, patterns)]
            if notes:
                removed_texts.extend(_sample(note) for note in notes)
                node.extract()

    if opts.get("removeEmptyContainers"):
        changed = True
        while changed:
            changed = False
            for element in soup.find_all(CONTAINER_TAGS):
                if not element.decomposed and _is_blank(element):
                    element.decompose()
                    changed = True

    if not found and not removed_texts:
        return success_result(html)

    summary = ", ".join(f"{name}({count})" for name, count in found.items()) or "text nodes"

    if not opts.get("autoRemove"):
        return failed_result(
            html,
            [f"Found {len(removed_texts)} internal note(s) that must be removed: {summary}"],
        )

    if removed_texts:
        message = f"Removed {len(removed_texts)} internal note(s): {' | '.join(removed_texts[:3])}"
    else:
        message = f"Removed internal notes: {summary}"

    return warning_result(str(soup), [message], [f"removed {len(removed_texts)} internal note(s)"])


remove_internal_notes_policy = Policy(
    name="removeInternalNotes",
    description="Remove internal notes, comment markers and team instructions",
    priority=8,
    apply=apply_remove_internal_notes,
)
