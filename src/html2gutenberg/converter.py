"""Conversion orchestrator: styles, then policies."""

import logging
import time
from pathlib import Path
from typing import Optional, Union

from .errors import DocumentParseError
from .html.cleaner import clean_document
from .models.config import ConverterConfig
from .models.report import DEFAULT_INPUT_NAME, ConversionReport, ConversionResult
from .policy.base import parse_document
from .policy.pipeline import PolicyPipeline
from .policy.registry import PolicyRegistry
from .style.extractor import collect_embedded_css, extract_styles
from .style.inliner import inline_styles, remove_style_tags

logger = logging.getLogger(__name__)


def convert(
    html: str,
    config: Optional[ConverterConfig] = None,
    source_path: Optional[Union[str, Path]] = None,
    css: Optional[str] = None,
    registry: Optional[PolicyRegistry] = None,
    output_path: Optional[Union[str, Path]] = None,
) -> ConversionResult:
    """
    Convert an HTML document into editor-ready HTML.

    Steps:
        1. Strip Google Docs and Word artifacts (if ``config.clean_html``)
        2. Extract styles from the embedded ``<style>`` blocks plus ``css``
        3. Inline them into ``style`` attributes (if ``config.inline_styles``)
        4. Remove ``<style>`` elements
        5. Run the policy pipeline in ``config.mode``

    Args:
        html: Document text
        config: Converter configuration (defaults if None)
        source_path: Input identifier for the report
        css: Extra stylesheet text, e.g. from linked stylesheets
        registry: Policies available to the pipeline (built-ins if None)
        output_path: Output identifier for the report

    Returns:
        ConversionResult with the final HTML and report

    Raises:
        DocumentParseError: If the document cannot be parsed
    """
    start = time.perf_counter()
    config = config or ConverterConfig()
    input_file = str(source_path) if source_path else DEFAULT_INPUT_NAME
    output_file = str(output_path) if output_path else None

    try:
        parse_document(html)
    except DocumentParseError as err:
        err.report = ConversionReport(
            input_file=input_file,
            output_file=output_file,
            errors=[str(err)],
            success=False,
            execution_time_ms=(time.perf_counter() - start) * 1000,
        )
        raise

    if config.clean_html:
        html = clean_document(html)

    if config.inline_styles:
        stylesheet = collect_embedded_css(html)
        if css:
            stylesheet = f"{stylesheet}\n{css}" if stylesheet else css
        styles = extract_styles(html, stylesheet)
        html = inline_styles(html, styles, keep_classes=config.keep_classes)
        logger.debug(f"Inlined styles from {len(styles.raw_css)} characters of CSS")

    html = remove_style_tags(html)

    pipeline = PolicyPipeline(registry, config.normalized_policies(), config.mode)
    result = pipeline.run(html, input_file=input_file, output_file=output_file)
    result.report.execution_time_ms = (time.perf_counter() - start) * 1000
    return result
