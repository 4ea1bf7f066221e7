"""
html2gutenberg - Convert HTML exported from Google Docs or Word into
editor-ready HTML.

Usage:
    from html2gutenberg import ConverterConfig, convert, extract_styles

    styles = extract_styles(html)
    print(styles.css_map)

    result = convert(html, ConverterConfig(mode="strict"))
    if not result.report.success:
        print(result.report.errors)
"""

__version__ = "1.0.0"

from .converter import convert
from .errors import ConfigurationError, DocumentLoadError, DocumentParseError, Html2GutenbergError
from .loader import LoadedDocument, load_html, load_linked_css
from .models.config import (
    ConversionMode,
    ConverterConfig,
    OutputFormat,
    PolicyConfig,
    load_config,
    normalize_policy_config,
)
from .models.report import ConversionReport, ConversionResult
from .models.styles import ExtendedStyleExtractionResult, MediaQuery
from .policy import (
    Policy,
    PolicyPipeline,
    PolicyRegistry,
    PolicyResult,
    default_registry,
    failed_result,
    success_result,
    warning_result,
)
from .html import clean_document
from .style import extract_styles, inline_styles

__all__ = [
    "__version__",
    # Core
    "convert",
    "clean_document",
    "extract_styles",
    "inline_styles",
    # Loading
    "LoadedDocument",
    "load_html",
    "load_linked_css",
    # Config
    "ConversionMode",
    "ConverterConfig",
    "OutputFormat",
    "PolicyConfig",
    "load_config",
    "normalize_policy_config",
    # Results
    "ConversionReport",
    "ConversionResult",
    "ExtendedStyleExtractionResult",
    "MediaQuery",
    # Policies
    "Policy",
    "PolicyPipeline",
    "PolicyRegistry",
    "PolicyResult",
    "default_registry",
    "failed_result",
    "success_result",
    "warning_result",
    # Errors
    "Html2GutenbergError",
    "DocumentParseError",
    "DocumentLoadError",
    "ConfigurationError",
]
