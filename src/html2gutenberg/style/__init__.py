"""CSS parsing, selector resolution and style extraction."""

from .extractor import collect_embedded_css, extract_styles
from .inline import element_path, extract_inline_styles
from .inliner import inline_styles, remove_style_tags, to_inline_style
from .parser import (
    MediaRule,
    ParsedStylesheet,
    StyleRule,
    UnsupportedRule,
    parse_declarations,
    parse_stylesheet,
    split_selector_list,
)
from .resolver import SelectorKind, StyleResolver, classify_selector

__all__ = [
    # Parser
    "MediaRule",
    "ParsedStylesheet",
    "StyleRule",
    "UnsupportedRule",
    "parse_declarations",
    "parse_stylesheet",
    "split_selector_list",
    # Resolver
    "SelectorKind",
    "StyleResolver",
    "classify_selector",
    # Extraction
    "collect_embedded_css",
    "element_path",
    "extract_inline_styles",
    "extract_styles",
    # Inlining
    "inline_styles",
    "remove_style_tags",
    "to_inline_style",
]
