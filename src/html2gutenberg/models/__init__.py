"""Configuration and report models."""

from .config import (
    ConversionMode,
    ConverterConfig,
    OutputFormat,
    PolicyConfig,
    PolicySetting,
    default_policies,
    load_config,
    merge_with_defaults,
    normalize_policy_config,
)
from .report import DEFAULT_INPUT_NAME, ConversionReport, ConversionResult
from .styles import CSSClassMap, ExtendedStyleExtractionResult, MediaQuery, PropertyMap, SelectorStyleMap

__all__ = [
    # Config
    "ConversionMode",
    "ConverterConfig",
    "OutputFormat",
    "PolicyConfig",
    "PolicySetting",
    "default_policies",
    "load_config",
    "merge_with_defaults",
    "normalize_policy_config",
    # Report
    "DEFAULT_INPUT_NAME",
    "ConversionReport",
    "ConversionResult",
    # Styles
    "CSSClassMap",
    "ExtendedStyleExtractionResult",
    "MediaQuery",
    "PropertyMap",
    "SelectorStyleMap",
]
