"""Removes or reports forbidden HTML tags."""

from bs4 import BeautifulSoup

from ..base import (
    Policy,
    PolicyOptions,
    PolicyResult,
    failed_result,
    merge_options,
    success_result,
    warning_result,
)

DEFAULT_OPTIONS: PolicyOptions = {
    "tags": ["script", "iframe", "object", "embed", "form", "input", "button"],
    "autoRemove": True,
    # Unwrap instead of deleting, keeping children
    "keepContent": False,
}


def apply_forbidden_tags(html: str, soup: BeautifulSoup, options: PolicyOptions) -> PolicyResult:
    opts = merge_options(DEFAULT_OPTIONS, options)

    found = []
    for tag in opts.get("tags") or []:
        elements = soup.find_all(str(tag).lower())
        if elements:
            found.append((tag, elements))

    if not found:
        return success_result(html)

    summary = ", ".join(f"{tag} ({len(elements)})" for tag, elements in found)

    if not opts.get("autoRemove"):
        return failed_result(html, [f"Forbidden tags present: {summary}"])

    for _, elements in found:
        for element in elements:
            # Nested forbidden tags may already be gone with their ancestor
            if element.decomposed:
                continue
            if opts.get("keepContent"):
                element.unwrap()
            else:
                element.decompose()

    return warning_result(
        str(soup),
        [f"Removed forbidden tags: {summary}"],
        [f"removed forbidden tags: {summary}"],
    )


forbidden_tags_policy = Policy(
    name="forbiddenTags",
    description="Detect and remove disallowed HTML tags (script, iframe, ...)",
    priority=5,
    apply=apply_forbidden_tags,
)
