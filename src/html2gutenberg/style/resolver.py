"""Classification of selectors and folding of rules into style maps."""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from .parser import MediaRule, ParsedRule, StyleRule, UnsupportedRule

logger = logging.getLogger(__name__)

StyleMap = dict[str, dict[str, str]]

_IDENT = r"-?[_a-zA-Z\u00a0-\uffff][\w\-\u00a0-\uffff]*"
_IDENT_RE = re.compile(_IDENT)
_TAG_RE = re.compile(r"[a-z][a-z0-9-]*")
_COMBINATORS = " >+~"


class SelectorKind(str, Enum):
    """Which style map a selector is folded into."""

    CLASS = "class"
    ID = "id"
    ELEMENT = "element"
    COMPLEX = "complex"


def _has_combinator(selector: str) -> bool:
    depth = 0
    quote: Optional[str] = None
    for ch in selector:
        if quote:
            if ch == quote:
                quote = None
        elif ch in ('"', "'"):
            quote = ch
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif depth == 0 and ch in _COMBINATORS:
            return True
    return False


def _strip_pseudo(compound: str) -> str:
    """Drop trailing pseudo-classes/elements (``:hover``, ``::before``)."""
    depth = 0
    for index, ch in enumerate(compound):
        if ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif ch == ":" and depth == 0:
            return compound[:index]
    return compound


def classify_selector(selector: str) -> tuple[SelectorKind, str]:
    """
    Classify a single selector into class, id, element or complex.

    Only a lone simple selector (optionally followed by pseudo-classes) gets a
    short key; everything else is complex and keyed by its verbatim text.

    Examples:
        >>> classify_selector(".foo")
        (<SelectorKind.CLASS: 'class'>, 'foo')
        >>> classify_selector("#bar:hover")
        (<SelectorKind.ID: 'id'>, 'bar')
        >>> classify_selector(".foo > span.bar")
        (<SelectorKind.COMPLEX: 'complex'>, '.foo > span.bar')

    Args:
        selector: Whitespace-normalized selector

    Returns:
        Tuple of (kind, map key)
    """
    selector = selector.strip()
    if not selector or _has_combinator(selector):
        return SelectorKind.COMPLEX, selector

    base = _strip_pseudo(selector)
    if base.startswith(".") and _IDENT_RE.fullmatch(base[1:]):
        return SelectorKind.CLASS, base[1:]
    if base.startswith("#") and _IDENT_RE.fullmatch(base[1:]):
        return SelectorKind.ID, base[1:]
    if _TAG_RE.fullmatch(base):
        return SelectorKind.ELEMENT, base

    return SelectorKind.COMPLEX, selector


def merge_properties(target: StyleMap, key: str, properties: dict[str, str]) -> None:
    """Fold properties into ``target[key]``; later values win per property."""
    if not properties:
        return
    target.setdefault(key, {}).update(properties)


@dataclass
class ResolvedStyles:
    """Mutable accumulator for the maps built by StyleResolver."""

    css_map: StyleMap = field(default_factory=dict)
    id_map: StyleMap = field(default_factory=dict)
    element_map: StyleMap = field(default_factory=dict)
    selector_map: StyleMap = field(default_factory=dict)
    media_queries: list[tuple[str, StyleMap]] = field(default_factory=list)


class StyleResolver:
    """
    Folds parsed rules into selector-kind partitioned maps.

    Cascade is approximated as "last rule wins": a later rule targeting the
    same key overrides earlier values property by property, regardless of
    selector specificity. Rules inside ``@media`` are kept in their own
    scoped map and never leak into the unscoped maps.

    Example:
        resolver = StyleResolver()
        styles = resolver.resolve(parse_stylesheet(css).rules)
        styles.css_map["note"]  # {"color": "red"}
    """

    def __init__(self) -> None:
        self._styles = ResolvedStyles()
        self._targets = {
            SelectorKind.CLASS: self._styles.css_map,
            SelectorKind.ID: self._styles.id_map,
            SelectorKind.ELEMENT: self._styles.element_map,
            SelectorKind.COMPLEX: self._styles.selector_map,
        }

    def resolve(self, rules: Iterable[ParsedRule]) -> ResolvedStyles:
        """
        Resolve rules in order and return the accumulated maps.

        Args:
            rules: Parsed rules, in source order

        Returns:
            ResolvedStyles (owned by this resolver; do not resolve again)
        """
        for rule in rules:
            self.add_rule(rule)
        return self._styles

    def add_rule(self, rule: ParsedRule) -> None:
        if isinstance(rule, StyleRule):
            for selector in rule.selectors:
                kind, key = classify_selector(selector)
                merge_properties(self._targets[kind], key, rule.declarations)
        elif isinstance(rule, MediaRule):
            scoped: StyleMap = {}
            self._collect_scoped(rule.rules, scoped)
            self._styles.media_queries.append((rule.condition, scoped))
        elif isinstance(rule, UnsupportedRule):
            logger.debug(f"Not resolving {rule.prelude}")

    def _collect_scoped(self, rules: Iterable[ParsedRule], target: StyleMap) -> None:
        # Nested @media conditions are flattened into the enclosing query
        for rule in rules:
            if isinstance(rule, StyleRule):
                for selector in rule.selectors:
                    merge_properties(target, selector, rule.declarations)
            elif isinstance(rule, MediaRule):
                self._collect_scoped(rule.rules, target)
