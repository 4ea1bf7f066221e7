"""Built-in policies, in registration order."""

from .disclaimer import disclaimer_policy
from .forbidden_tags import forbidden_tags_policy
from .heading import heading_policy
from .min_image import min_image_policy
from .remove_before_h1 import remove_before_h1_policy
from .remove_internal_notes import remove_internal_notes_policy

# Registration order breaks priority ties
BUILTIN_POLICIES = [
    remove_internal_notes_policy,
    forbidden_tags_policy,
    remove_before_h1_policy,
    heading_policy,
    min_image_policy,
    disclaimer_policy,
]

__all__ = [
    "BUILTIN_POLICIES",
    "disclaimer_policy",
    "forbidden_tags_policy",
    "heading_policy",
    "min_image_policy",
    "remove_before_h1_policy",
    "remove_internal_notes_policy",
]
