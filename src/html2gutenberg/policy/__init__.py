"""Policy types, built-in policies and the policy pipeline."""

from .base import (
    DEFAULT_PRIORITY,
    ApplyFunction,
    Policy,
    PolicyOptions,
    PolicyResult,
    failed_result,
    merge_options,
    parse_document,
    success_result,
    warning_result,
)
from .pipeline import PolicyPipeline
from .policies import BUILTIN_POLICIES
from .registry import PolicyRegistry, default_registry

__all__ = [
    "DEFAULT_PRIORITY",
    "ApplyFunction",
    "BUILTIN_POLICIES",
    "Policy",
    "PolicyOptions",
    "PolicyPipeline",
    "PolicyRegistry",
    "PolicyResult",
    "default_registry",
    "failed_result",
    "merge_options",
    "parse_document",
    "success_result",
    "warning_result",
]
