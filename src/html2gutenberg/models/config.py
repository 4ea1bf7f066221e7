"""Pydantic configuration models for html2gutenberg."""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..errors import ConfigurationError


class ConversionMode(str, Enum):
    """How the policy pipeline treats a failed policy."""

    STRICT = "strict"
    RELAXED = "relaxed"


class OutputFormat(str, Enum):
    """Serialization format for conversion results."""

    HTML = "html"
    JSON = "json"


class PolicyConfig(BaseModel):
    """Per-policy configuration: on/off switch plus free-form options."""

    enabled: bool = Field(True, description="Whether the policy runs")
    options: dict[str, Any] = Field(default_factory=dict, description="Policy-specific options")

    model_config = {"extra": "forbid"}


PolicySetting = Union[PolicyConfig, bool]


def normalize_policy_config(value: Union[PolicyConfig, bool, dict, None]) -> PolicyConfig:
    """
    Normalize a policy setting into a canonical PolicyConfig.

    A bare boolean is shorthand for ``PolicyConfig(enabled=value, options={})``.

    Args:
        value: PolicyConfig, bool, or dict with ``enabled``/``options`` keys

    Returns:
        A new PolicyConfig instance (never shared with the input)

    Raises:
        TypeError: If the value has an unsupported type
    """
    if isinstance(value, bool):
        return PolicyConfig(enabled=value, options={})
    if value is None:
        return PolicyConfig(enabled=False, options={})
    if isinstance(value, PolicyConfig):
        return value.model_copy(deep=True)
    if isinstance(value, dict):
        data = dict(value)
        if data.get("options") is None:
            data["options"] = {}
        return PolicyConfig.model_validate(data)
    raise TypeError(f"Unsupported policy configuration: {value!r}")


def default_policies() -> dict[str, PolicySetting]:
    """Default policy set shipped with the converter."""
    return {
        "removeBeforeH1": PolicyConfig(enabled=False),
        "removeInternalNotes": PolicyConfig(enabled=False),
        "requireH2": PolicyConfig(enabled=True, options={"minCount": 1}),
        "minImageCount": PolicyConfig(enabled=True, options={"minCount": 0}),
        "forbiddenTags": PolicyConfig(
            enabled=True,
            options={"tags": ["script", "iframe", "object", "embed"]},
        ),
        "addDisclaimer": PolicyConfig(
            enabled=False,
            options={"keywords": ["โปรโมชั่น", "ส่วนลด", "ราคาพิเศษ"]},
        ),
    }


class ConverterConfig(BaseModel):
    """
    Root configuration model for html2gutenberg.

    Field names accept both snake_case and the camelCase keys used by
    existing config files.

    YAML format:
        mode: strict
        keepClasses: false
        inlineStyles: true
        cleanHtml: true
        outputFormat: json
        policies:
          requireH2:
            enabled: true
            options:
              minCount: 2
          forbiddenTags: true
    """

    mode: ConversionMode = Field(ConversionMode.RELAXED, description="strict or relaxed")
    keep_classes: bool = Field(False, alias="keepClasses", description="Keep class attributes")
    inline_styles: bool = Field(True, alias="inlineStyles", description="Inline resolved CSS")
    clean_html: bool = Field(
        True,
        alias="cleanHtml",
        description="Strip Google Docs and Word export artifacts before inlining",
    )
    output_format: OutputFormat = Field(
        OutputFormat.HTML,
        alias="outputFormat",
        description="Output format",
    )
    policies: dict[str, PolicySetting] = Field(
        default_factory=default_policies,
        description="Policy name to PolicyConfig or bool",
    )

    model_config = {"extra": "forbid", "populate_by_name": True}

    def normalized_policies(self) -> dict[str, PolicyConfig]:
        """Return the policy mapping with every value normalized to PolicyConfig."""
        return {name: normalize_policy_config(value) for name, value in self.policies.items()}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        return yaml.dump(
            self.model_dump(mode="json", by_alias=True),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConverterConfig":
        """Load config from YAML string, merged over the defaults."""
        data = yaml.safe_load(yaml_str)
        return merge_with_defaults(data or {})


def merge_with_defaults(data: Any) -> ConverterConfig:
    """
    Merge user-supplied settings over the default configuration.

    Top-level keys replace defaults; the ``policies`` mapping is merged per
    policy name so a file only needs to mention the policies it changes.

    Raises:
        ConfigurationError: If the data is not a mapping or fails validation
    """
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration must be a mapping, got {type(data).__name__}")

    merged: dict[str, Any] = dict(data)
    policies: dict[str, Any] = dict(default_policies())
    user_policies = merged.pop("policies", None) or {}
    if not isinstance(user_policies, dict):
        raise ConfigurationError("'policies' must be a mapping of policy name to settings")
    policies.update(user_policies)
    merged["policies"] = policies

    try:
        return ConverterConfig.model_validate(merged)
    except ValidationError as err:
        raise ConfigurationError(f"Invalid configuration: {err}") from err


def load_config(path: Optional[Path] = None) -> ConverterConfig:
    """
    Load configuration from a YAML or JSON file.

    Args:
        path: Config file path. None or a missing file yields the defaults.

    Returns:
        Validated ConverterConfig

    Raises:
        ConfigurationError: If the file cannot be parsed or validated
    """
    if path is None:
        return ConverterConfig()

    path = Path(path)
    if not path.exists():
        return ConverterConfig()

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as err:
        raise ConfigurationError(f"Cannot parse config file {path}: {err}") from err

    return merge_with_defaults(data or {})
