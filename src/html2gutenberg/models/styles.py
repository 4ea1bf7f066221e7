"""Result types of the style extraction engine."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

PropertyMap = Mapping[str, str]
SelectorStyleMap = Mapping[str, PropertyMap]
CSSClassMap = Mapping[str, PropertyMap]


def freeze_styles(styles: Mapping[str, Mapping[str, str]]) -> SelectorStyleMap:
    """Copy a nested style map into read-only proxies."""
    return MappingProxyType({key: MappingProxyType(dict(value)) for key, value in styles.items()})


@dataclass(frozen=True)
class MediaQuery:
    """Rules scoped to one ``@media`` condition, keyed by verbatim selector."""

    query: str
    rules: SelectorStyleMap = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", freeze_styles(self.rules))

    def to_dict(self) -> dict[str, Any]:
        return {"query": self.query, "rules": {k: dict(v) for k, v in self.rules.items()}}


@dataclass(frozen=True)
class ExtendedStyleExtractionResult:
    """
    Snapshot of every style source found for one document.

    Built once per conversion run. Every map, nested ones included, is a
    read-only copy, so the snapshot cannot change after construction. Map
    iteration order follows parse order.

    Attributes:
        css_map: Class name to properties
        id_map: Element id to properties
        element_map: Tag name to properties
        selector_map: Verbatim complex selector to properties
        inline_styles: Element identifier to properties of its style attribute
        media_queries: Media-scoped rules in source order
        raw_css: Stylesheet text exactly as it was parsed
        warnings: Malformed fragments that were skipped
    """

    css_map: CSSClassMap = field(default_factory=dict)
    id_map: SelectorStyleMap = field(default_factory=dict)
    element_map: SelectorStyleMap = field(default_factory=dict)
    selector_map: SelectorStyleMap = field(default_factory=dict)
    inline_styles: SelectorStyleMap = field(default_factory=dict)
    media_queries: tuple[MediaQuery, ...] = ()
    raw_css: str = ""
    warnings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("css_map", "id_map", "element_map", "selector_map", "inline_styles"):
            object.__setattr__(self, name, freeze_styles(getattr(self, name)))
        object.__setattr__(self, "media_queries", tuple(self.media_queries))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    def styles_for(self, tag: str, classes: tuple[str, ...] = (), element_id: str = "") -> dict[str, str]:
        """
        Combine element, class and id styles for one element.

        Later sources win: tag styles, then each class in order, then the id.
        """
        combined: dict[str, str] = {}
        combined.update(self.element_map.get(tag, {}))
        for class_name in classes:
            combined.update(self.css_map.get(class_name, {}))
        if element_id:
            combined.update(self.id_map.get(element_id, {}))
        return combined

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for serialization."""

        def copy_map(styles: SelectorStyleMap) -> dict[str, dict[str, str]]:
            return {key: dict(value) for key, value in styles.items()}

        return {
            "cssMap": copy_map(self.css_map),
            "idMap": copy_map(self.id_map),
            "elementMap": copy_map(self.element_map),
            "selectorMap": copy_map(self.selector_map),
            "inlineStyles": copy_map(self.inline_styles),
            "mediaQueries": [media.to_dict() for media in self.media_queries],
            "rawCSS": self.raw_css,
        }
