"""Permissive CSS parsing on top of cssutils.

Legacy documents (Google Docs and Word exports, hand-edited pages) carry a lot
of broken CSS. cssutils drops what it cannot parse and logs why; those log
records are collected and returned as warnings, so every function here is
total.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Union

import cssutils
from cssutils import css as cssdom

logger = logging.getLogger(__name__)

# cssutils logs through one module-global handler; route it here and keep
# only real syntax errors
_CSSUTILS_LOG = logging.getLogger(f"{__name__}.cssutils")
_CSSUTILS_LOG.propagate = False

# Keep author hex colors (#ffffff) as written
cssutils.ser.prefs.minimizeColorHash = False


def _no_fetch(url: str) -> tuple[None, str]:
    """Resolve ``@import`` targets to an empty sheet; nothing is fetched."""
    logger.debug(f"Not fetching imported stylesheet: {url}")
    return None, ""


_PARSER = cssutils.CSSParser(
    log=_CSSUTILS_LOG,
    loglevel=logging.ERROR,
    raiseExceptions=False,
    fetcher=_no_fetch,
    parseComments=False,
    validate=False,
)


@dataclass(frozen=True)
class StyleRule:
    """A plain rule: one or more selectors sharing a declaration block."""

    selectors: tuple[str, ...]
    declarations: dict[str, str]


@dataclass(frozen=True)
class MediaRule:
    """An ``@media`` block and the rules nested inside it."""

    condition: str
    rules: tuple["ParsedRule", ...]


@dataclass(frozen=True)
class UnsupportedRule:
    """An at-rule block that is kept for reference but not resolved."""

    prelude: str
    text: str


ParsedRule = Union[StyleRule, MediaRule, UnsupportedRule]


@dataclass(frozen=True)
class ParsedStylesheet:
    """Ordered rules of a stylesheet plus the warnings raised while parsing it."""

    rules: tuple[ParsedRule, ...] = ()
    warnings: tuple[str, ...] = field(default_factory=tuple)


class _MessageCollector(logging.Handler):
    def __init__(self) -> None:
        super().__init__(logging.ERROR)
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


@contextmanager
def _cssutils_messages() -> Iterator[list[str]]:
    """
    Collect cssutils error messages for the duration of the block.

    cssutils raises instead of logging outside its parser methods unless
    ``log.raiseExceptions`` is off, so it is switched off here as well.
    """
    collector = _MessageCollector()
    raising = cssutils.log.raiseExceptions
    cssutils.log.raiseExceptions = False
    _CSSUTILS_LOG.addHandler(collector)
    try:
        yield collector.messages
    finally:
        _CSSUTILS_LOG.removeHandler(collector)
        cssutils.log.raiseExceptions = raising

    for message in collector.messages:
        logger.debug(f"cssutils: {message}")


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and trim."""
    return " ".join(text.split())


def _properties(style: cssdom.CSSStyleDeclaration) -> dict[str, str]:
    properties: dict[str, str] = {}
    for prop in style.getProperties(all=True):
        value = prop.value
        if not value:
            continue
        if prop.priority:
            value = f"{value} !{prop.priority}"
        properties[prop.name] = value
    return properties


def split_selector_list(selector_text: str) -> list[str]:
    """
    Split a comma-separated selector list into normalized selectors.

    Commas inside attribute values or ``:not(...)`` do not split. A list
    containing an invalid selector is rejected as a whole, as browsers do.

    Args:
        selector_text: Raw selector prelude of a rule

    Returns:
        Normalized selectors in source order, or an empty list
    """
    if not (selector_text or "").strip():
        return []
    with _cssutils_messages():
        selectors = cssdom.SelectorList(selectorText=selector_text)
    return [selector.selectorText for selector in selectors]


def parse_declarations(text: Optional[str]) -> tuple[dict[str, str], list[str]]:
    """
    Parse a declaration block into a property map.

    Semicolons inside ``url(...)`` or quoted strings do not end a
    declaration. Property names are lowercased and values come back in
    cssutils' serialized form (``0px`` becomes ``0``, strings are double
    quoted). ``!important`` stays in the value and a repeated property keeps
    its last value.

    Args:
        text: Declaration block contents (without braces) or a style attribute

    Returns:
        Tuple of (properties, warnings for skipped declarations)
    """
    if not (text or "").strip():
        return {}, []
    with _cssutils_messages() as messages:
        style = _PARSER.parseStyle(text)
    return _properties(style), list(messages)


def _convert_rules(rules: Iterable[cssdom.CSSRule]) -> list[ParsedRule]:
    parsed: list[ParsedRule] = []

    for rule in rules:
        if isinstance(rule, cssdom.CSSStyleRule):
            selectors = tuple(selector.selectorText for selector in rule.selectorList)
            if selectors:
                parsed.append(StyleRule(selectors=selectors, declarations=_properties(rule.style)))
        elif isinstance(rule, cssdom.CSSMediaRule):
            condition = normalize_whitespace(rule.media.mediaText)
            parsed.append(MediaRule(condition=condition, rules=tuple(_convert_rules(rule.cssRules))))
        elif isinstance(rule, (cssdom.CSSFontFaceRule, cssdom.CSSPageRule, cssdom.CSSUnknownRule)):
            text = rule.cssText
            prelude = normalize_whitespace(text.split("{", 1)[0])
            logger.debug(f"Passing through unsupported at-rule: {prelude}")
            parsed.append(UnsupportedRule(prelude=prelude, text=text))
        elif not isinstance(rule, cssdom.CSSComment):
            logger.debug(f"Ignoring statement at-rule: {rule.cssText}")

    return parsed


def parse_stylesheet(css: Optional[str]) -> ParsedStylesheet:
    """
    Parse CSS source into ordered rules.

    ``@media`` blocks are converted recursively. Other block at-rules
    (``@supports``, ``@keyframes``, ``@font-face``...) are returned as
    UnsupportedRule; statement at-rules (``@import``, ``@charset``) are
    dropped and imports are never fetched. Rules cssutils rejects are
    omitted and its messages returned as warnings. Never raises.

    Args:
        css: Stylesheet text

    Returns:
        ParsedStylesheet with rules in source order
    """
    if not (css or "").strip():
        return ParsedStylesheet()

    with _cssutils_messages() as messages:
        try:
            sheet = _PARSER.parseString(css)
            rules = _convert_rules(sheet.cssRules)
        except Exception as e:
            logger.warning(f"cssutils failed on stylesheet: {e}")
            messages.append(f"Stylesheet could not be parsed: {e}")
            rules = []

    return ParsedStylesheet(rules=tuple(rules), warnings=tuple(messages))
